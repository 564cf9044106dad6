"""Exceptions raised while scaffolding a project.

Every error here is fatal to the current generation run: the CLI prints
the message and exits non-zero.  Nothing is retried or rolled back.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every fatal generation error."""


class ProjectExistsError(ScaffoldError):
    """Raised when the target project directory already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Directory {path.name} already exists!")


class TemplateRenderError(ScaffoldError):
    """Raised when a template is missing, malformed, or renders incompletely."""

    def __init__(self, template: str, message: str) -> None:
        self.template = template
        super().__init__(f"Failed to render template {template}: {message}")


class ManifestValidationError(ScaffoldError):
    """Raised when a rendered JSON/YAML/TOML manifest does not parse."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = str(path)
        super().__init__(f"Generated manifest {self.path} is invalid: {message}")


class DuplicateEntryError(ScaffoldError):
    """Raised when a generation plan declares the same output path twice."""

    def __init__(self, output_path: str) -> None:
        self.output_path = output_path
        super().__init__(f"Output path declared twice: {output_path}")
