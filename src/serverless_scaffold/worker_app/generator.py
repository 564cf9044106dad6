"""Cloudflare Worker (Hono.js) project generator.

The ``worker/`` template tree is copied into the new project almost as-is:
every ``.j2`` file is rendered, every other file is copied verbatim, and the
files that belong to a disabled option are left out.  ``package.json`` is
then finalised in Python so the result is always valid JSON.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from serverless_scaffold import __version__
from serverless_scaffold.scaffolder.base import BaseGenerator, GenerationResult
from serverless_scaffold.scaffolder.plan import GenerationPlan, TemplateEntry
from serverless_scaffold.scaffolder.templates import TEMPLATE_SUFFIX, output_name
from serverless_scaffold.utils import load_json, normalize_project_name, save_json, to_pascal

GENERATOR_NAME = "create-worker-app"
TEMPLATE_PREFIX = "worker"
DEFAULT_DESCRIPTION = "A Cloudflare Worker application"

# Added to package.json only when OpenAPI docs are enabled.
OPENAPI_DEPENDENCIES: dict[str, str] = {
    "@hono/zod-openapi": "^0.19.8",
    "@hono/swagger-ui": "^0.5.2",
    "zod": "^3.25.67",
}
GENERATE_ROUTE_SCRIPT = "node scripts/generate-route.js"

# Output files that exist only when the named option is on.
WORKER_FEATURE_FILES: dict[str, tuple[str, ...]] = {
    "openapi": ("scripts/generate-route.js", "src/lib/openapi.ts", "src/schemas/common.ts"),
    "database": (".env.example",),
}

_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")


def worker_feature_files(flag: str) -> list[str]:
    """Return the sorted output paths gated by *flag* (``openapi``/``database``)."""
    try:
        return sorted(WORKER_FEATURE_FILES[flag])
    except KeyError:
        raise ValueError(
            f"unknown worker option: {flag!r} (expected one of: "
            f"{', '.join(sorted(WORKER_FEATURE_FILES))})"
        ) from None


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class WorkerProjectConfig(BaseModel):
    """Pydantic model describing the Worker project to scaffold."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project directory and npm package name")
    description: str = Field(default=DEFAULT_DESCRIPTION)
    use_database: bool = Field(default=False, description="Write a database .env.example")
    use_openapi: bool = Field(default=True, description="Include OpenAPI/Swagger documentation")
    skip_git: bool = Field(default=False)
    skip_install: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def _default_description(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("description"):
            data = {**data, "description": DEFAULT_DESCRIPTION}
        return data

    @field_validator("name", mode="before")
    @classmethod
    def _normalise_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return check_name(value)
        return value

    def enabled_options(self) -> set[str]:
        options = set()
        if self.use_openapi:
            options.add("openapi")
        if self.use_database:
            options.add("database")
        return options

    def template_context(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "pascal_name": to_pascal(self.name),
            "description": self.description,
            "use_database": self.use_database,
            "use_openapi": self.use_openapi,
        }


def check_name(value: str) -> str:
    """Normalise a Worker project name and return it.

    Raises:
        ValueError: If the name is not a valid npm package name.
    """
    name = normalize_project_name(value)
    if not _NAME_RE.match(name):
        raise ValueError(
            "project name must contain only lowercase letters, numbers, and hyphens"
        )
    return name


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class WorkerGenerator(BaseGenerator):
    """Render a Cloudflare Worker project from a :class:`WorkerProjectConfig`."""

    commit_message = f"Initial commit from {GENERATOR_NAME}"
    config: WorkerProjectConfig

    def build_plan(self) -> GenerationPlan:
        excluded = {
            path
            for flag, paths in WORKER_FEATURE_FILES.items()
            if flag not in self.config.enabled_options()
            for path in paths
        }
        plan = GenerationPlan()
        prefix = f"{TEMPLATE_PREFIX}/"
        for template in self.renderer.list_templates(TEMPLATE_PREFIX):
            output_path = output_name(template[len(prefix):])
            if output_path in excluded:
                continue
            plan.add(
                TemplateEntry(
                    output_path=output_path,
                    template=template,
                    render=template.endswith(TEMPLATE_SUFFIX),
                    executable=output_path.startswith("scripts/"),
                )
            )
        return plan

    def build_context(self) -> dict[str, Any]:
        return self.config.template_context()

    def install_command(self) -> list[str]:
        return ["npm", "install"]

    async def after_render(self, project_root: Path, result: GenerationResult) -> None:
        """Stamp ``package.json`` with the project identity and optional deps."""
        path = project_root / "package.json"
        package = load_json(path)
        await save_json(self.finalise_package(package), path)

    def finalise_package(self, package: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
        package = dict(package)
        package["name"] = self.config.name
        package["description"] = self.config.description
        timestamp = (now or datetime.now(timezone.utc)).isoformat(timespec="milliseconds")
        package["generator"] = {
            "name": GENERATOR_NAME,
            "version": __version__,
            "timestamp": timestamp.replace("+00:00", "Z"),
        }
        if self.config.use_openapi:
            package["dependencies"] = {**package.get("dependencies", {}), **OPENAPI_DEPENDENCIES}
            package["scripts"] = {
                **package.get("scripts", {}),
                "generate:route": GENERATE_ROUTE_SCRIPT,
            }
        return package
