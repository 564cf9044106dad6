"""Shared generation pipeline for both project generators.

A concrete generator supplies the plan (which templates go where), the
template context, the dependency-install command, and the initial commit
message.  :class:`BaseGenerator` does the rest: refuses to overwrite an
existing project, creates directories, renders every entry exactly once,
then runs git and the package manager.  Post-generation failures are
collected as warnings rather than raised.
"""

from __future__ import annotations

import abc
import asyncio
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from serverless_scaffold.config import Settings
from serverless_scaffold.scaffolder.errors import ProjectExistsError
from serverless_scaffold.scaffolder.plan import GenerationPlan
from serverless_scaffold.scaffolder.templates import TemplateRenderer
from serverless_scaffold.utils import run_command


class GenerationResult(BaseModel):
    """What a generation run produced."""

    project_root: Path
    files: list[Path] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class BaseGenerator(abc.ABC):
    """Render a :class:`GenerationPlan` into a new project directory."""

    commit_message: str = "Initial commit"

    def __init__(
        self,
        config: Any,
        settings: Settings | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.settings = settings or Settings()
        self.renderer = renderer or TemplateRenderer()

    # -- Hooks for subclasses ----------------------------------------------

    @abc.abstractmethod
    def build_plan(self) -> GenerationPlan:
        """Return the directories and template entries for this project."""

    @abc.abstractmethod
    def build_context(self) -> dict[str, Any]:
        """Return the template context shared by every entry."""

    @abc.abstractmethod
    def install_command(self) -> list[str]:
        """Return the dependency-install command run inside the project."""

    async def after_render(self, project_root: Path, result: GenerationResult) -> None:
        """Finalise generated files once every template has been written."""

    # -- Public API --------------------------------------------------------

    def project_root(self, output_dir: str | Path | None = None) -> Path:
        base = Path(output_dir) if output_dir is not None else self.settings.output_dir
        return base / self.config.name

    async def generate(self, output_dir: str | Path | None = None) -> GenerationResult:
        """Generate the project tree.

        Args:
            output_dir: Parent directory for the project folder.  Defaults
                to ``settings.output_dir``.

        Returns:
            A :class:`GenerationResult` listing every written file.

        Raises:
            ProjectExistsError: If the project directory already exists.
                Nothing is written in that case.
            TemplateRenderError: If a template fails to render.
            ManifestValidationError: If a rendered manifest does not parse.
        """
        root = self.project_root(output_dir)
        if await asyncio.to_thread(root.exists):
            raise ProjectExistsError(root)

        context = self.build_context()
        plan = self.build_plan()

        await asyncio.to_thread(root.mkdir, parents=True)
        for directory in plan.directories:
            await asyncio.to_thread((root / directory).mkdir, parents=True, exist_ok=True)

        result = GenerationResult(project_root=root)
        for entry in plan:
            path = await self.renderer.render_to_file(
                entry.template,
                root / entry.output_path,
                context,
                render=entry.render,
                executable=entry.executable,
            )
            result.files.append(path)

        await self.after_render(root, result)
        return result

    async def post_generate(self, project_root: Path, result: GenerationResult) -> None:
        """Initialise git and install dependencies, recording failures as warnings."""
        timeout = self.settings.command_timeout

        if not self.config.skip_git:
            for step in (
                ["git", "init"],
                ["git", "add", "."],
                ["git", "commit", "-m", self.commit_message],
            ):
                rc, _, stderr = await run_command(step, cwd=project_root, timeout=timeout)
                if rc != 0:
                    result.warnings.append(
                        f"Failed to initialize git repository ({' '.join(step[:2])}): "
                        f"{stderr or f'exit code {rc}'}"
                    )
                    break

        if not self.config.skip_install:
            cmd = self.install_command()
            rc, _, stderr = await run_command(cmd, cwd=project_root, timeout=timeout)
            if rc != 0:
                result.warnings.append(
                    f"Failed to install dependencies ({' '.join(cmd)}): "
                    f"{stderr or f'exit code {rc}'}"
                )

    async def run(self, output_dir: str | Path | None = None) -> GenerationResult:
        """Generate the project, then run the post-generation steps."""
        result = await self.generate(output_dir)
        await self.post_generate(result.project_root, result)
        return result
