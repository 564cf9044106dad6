"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
packaged ``serverless_scaffold/templates/`` directory and renders them with
project-specific context data.  Rendered output is checked for leftover
template tokens and, for JSON/YAML/TOML files, parsed before it is written,
so a broken manifest never reaches disk.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from serverless_scaffold.scaffolder.errors import TemplateRenderError
from serverless_scaffold.scaffolder.validate import validate_manifest
from serverless_scaffold.utils import make_executable, to_pascal, write_text


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

TEMPLATE_SUFFIX = ".j2"

# ``${{ ... }}`` is GitHub Actions syntax, not a leftover Jinja2 token.
_PLACEHOLDER_RE = re.compile(r"(?<!\$)\{\{.*?\}\}|\{%.*?%\}|\{#.*?#\}", re.DOTALL)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers template files under a configurable template
    directory.  Files ending in ``.j2`` are rendered with a context dictionary
    (project name, module path, feature switches, ...); any other file is
    treated as static and copied verbatim.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["camel_case"] = _camel_case_filter
        self.env.globals["gh"] = _github_expression

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"lambda/base/go.mod.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            TemplateRenderError: If the template is missing, does not parse,
                or references an undefined variable.
        """
        try:
            template = self.env.get_template(template_path)
            return template.render(**context)
        except TemplateNotFound:
            raise TemplateRenderError(template_path, "template not found") from None
        except TemplateError as exc:
            raise TemplateRenderError(template_path, str(exc)) from exc

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        try:
            return self.env.from_string(template_string).render(**context)
        except TemplateError as exc:
            raise TemplateRenderError("<string>", str(exc)) from exc

    def read_static(self, template_path: str) -> str:
        """Return the raw content of a non-templated file."""
        source = self.template_dir / template_path
        if not source.is_file():
            raise TemplateRenderError(template_path, "template not found")
        return source.read_text(encoding="utf-8")

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
        *,
        render: bool = True,
        executable: bool = False,
    ) -> Path:
        """Render (or copy) a template and write the result to *output_path*.

        The content is checked for unresolved placeholders and validated as
        a manifest when its suffix calls for it; only then is it written.
        Parent directories are created automatically.

        Returns:
            The output path.
        """
        if render:
            content = self.render(template_path, context)
        else:
            content = self.read_static(template_path)

        supplied = _supplied_text(context) if render else []
        leftovers = [
            token
            for token in find_unresolved_placeholders(content)
            if not any(token in value for value in supplied)
        ]
        if leftovers:
            raise TemplateRenderError(
                template_path, f"unresolved placeholders {leftovers[:3]}"
            )

        out = Path(output_path)
        validate_manifest(out, content)

        await asyncio.to_thread(write_text, out, content)
        if executable:
            await asyncio.to_thread(make_executable, out)
        return out

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of every template file under *prefix*.

        Both ``.j2`` templates and static files are listed.  Paths are
        relative to the template root directory and use forward slashes.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*")
            if p.is_file()
        )


def output_name(template_rel: str) -> str:
    """Map a template path to the file name it renders to.

    ``src/index.ts.j2`` -> ``src/index.ts``.  Dotfiles are stored without
    their dot, so a leading ``gitignore``, ``env.example`` or ``github``
    segment gains one (``gitignore.j2`` -> ``.gitignore``).
    """
    name = template_rel
    if name.endswith(TEMPLATE_SUFFIX):
        name = name[: -len(TEMPLATE_SUFFIX)]
    head, sep, rest = name.partition("/")
    if head in _DOTTED_NAMES:
        head = f".{head}"
    return head + sep + rest


_DOTTED_NAMES = frozenset({"gitignore", "github", "env.example"})


def find_unresolved_placeholders(text: str) -> list[str]:
    """Return every ``{{ }}``, ``{% %}`` or ``{# #}`` token left in *text*."""
    return _PLACEHOLDER_RE.findall(text)


def _supplied_text(context: dict[str, Any]) -> list[str]:
    """Return every string value in *context*, nested lists and dicts included.

    Tokens found inside these values were typed by the user (a description
    such as ``"Renders {{ user }} greetings"``), not left behind by a template.
    """
    found: list[str] = []
    pending: list[Any] = list(context.values())
    while pending:
        value = pending.pop()
        if isinstance(value, str):
            found.append(value)
        elif isinstance(value, dict):
            pending.extend(value.values())
        elif isinstance(value, (list, tuple, set, frozenset)):
            pending.extend(value)
    return found


# ---------------------------------------------------------------------------
# Jinja2 custom filters and globals
# ---------------------------------------------------------------------------


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = to_pascal(value)
    return pascal[:1].lower() + pascal[1:]


def _github_expression(expr: str) -> str:
    """Emit a GitHub Actions ``${{ expr }}`` expression."""
    return "${{ " + expr + " }}"
