"""AWS Lambda Go project generator.

Takes a ``LambdaProjectConfig`` and renders a complete Go project in the
chosen architecture style, wired for the chosen deployment tool, with the
requested AWS integrations switched on.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from serverless_scaffold import __version__
from serverless_scaffold.config import (
    Architecture,
    DeploymentTool,
    LambdaFeature,
    Settings,
    TestingFramework,
)
from serverless_scaffold.lambda_app import dispatch
from serverless_scaffold.scaffolder.base import BaseGenerator, GenerationResult
from serverless_scaffold.scaffolder.plan import GenerationPlan
from serverless_scaffold.utils import git_user_name, normalize_project_name, save_json, to_pascal

GENERATOR_NAME = "create-lambda-app"
METADATA_FILE = ".create-lambda-app"
FALLBACK_OWNER = "myusername"

_NAME_RE = re.compile(r"^[a-z][a-z0-9-]*$")

_CHOICE_TYPES: dict[str, Any] = {
    "architecture": Architecture,
    "deployment_tool": DeploymentTool,
    "testing_framework": TestingFramework,
}


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class LambdaProjectConfig(BaseModel):
    """Pydantic model describing the Lambda project to scaffold."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project directory and binary name")
    description: str = Field(default="", description="Short project description")
    architecture: Architecture = Field(default=Architecture.CLEAN)
    deployment_tool: DeploymentTool = Field(default=DeploymentTool.SAM)
    testing_framework: TestingFramework = Field(default=TestingFramework.TESTIFY)
    features: frozenset[LambdaFeature] = Field(
        default_factory=lambda: frozenset({LambdaFeature.API}),
        description="Enabled AWS integrations",
    )
    skip_git: bool = Field(default=False)
    skip_install: bool = Field(default=False)
    module: str = Field(default="", description="Go module path")

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            name = normalize_project_name(data["name"])
            data = dict(data)
            if not data.get("description"):
                data["description"] = f"AWS Lambda functions for {name}"
            if not data.get("module"):
                data["module"] = default_module(name, FALLBACK_OWNER)
        return data

    @field_validator("name", mode="before")
    @classmethod
    def _normalise_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return check_name(value)
        return value

    @field_validator("architecture", "deployment_tool", "testing_framework", mode="before")
    @classmethod
    def _parse_choice(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str):
            return _CHOICE_TYPES[info.field_name].parse(value)
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _parse_features(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(
                LambdaFeature.parse(item) for item in value if str(item).strip()
            )
        return value

    # -- Queries -----------------------------------------------------------

    def has_feature(self, name: str | LambdaFeature) -> bool:
        try:
            return LambdaFeature.parse(name) in self.features
        except ValueError:
            return False

    def enabled_features(self) -> list[str]:
        return sorted(f.value for f in self.features)

    def template_context(self) -> dict[str, Any]:
        """Return the variables every Lambda template is rendered with."""
        functions = dispatch.function_names(self.architecture, self.features)
        return {
            "name": self.name,
            "pascal_name": to_pascal(self.name),
            "description": self.description,
            "module": self.module,
            "architecture": self.architecture.value,
            "deployment_tool": self.deployment_tool.value,
            "testing_framework": self.testing_framework.value,
            "features": self.enabled_features(),
            "has_feature": self.has_feature,
            "main_function": functions["main"],
            "queue_function": functions["queue"],
        }


def check_name(value: str) -> str:
    """Normalise a project name and return it.

    Raises:
        ValueError: If the normalised name is not a valid project name.
    """
    name = normalize_project_name(value)
    if not _NAME_RE.match(name):
        raise ValueError(
            "project name must start with a letter and contain only "
            "lowercase letters, numbers, and hyphens"
        )
    return name


def default_module(name: str, owner: str) -> str:
    return f"github.com/{owner or FALLBACK_OWNER}/{name}"


async def resolve_module(name: str, settings: Settings | None = None) -> str:
    """Resolve the default Go module path for *name*.

    The owner segment comes from ``SCAFFOLD_GITHUB_USER``, then from
    ``git config user.name`` (lower-cased, spaces to hyphens), then falls
    back to ``myusername``.
    """
    settings = settings or Settings()
    owner = settings.github_user or await git_user_name()
    return default_module(name, owner)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class LambdaGenerator(BaseGenerator):
    """Render a Lambda Go project from a :class:`LambdaProjectConfig`."""

    commit_message = f"Initial commit from {GENERATOR_NAME}"
    config: LambdaProjectConfig

    def build_plan(self) -> GenerationPlan:
        return dispatch.build_plan(self.config)

    def build_context(self) -> dict[str, Any]:
        return self.config.template_context()

    def install_command(self) -> list[str]:
        return ["go", "mod", "download"]

    async def after_render(self, project_root: Path, result: GenerationResult) -> None:
        """Write the metadata file that ``scripts/generate-handler.go`` reads."""
        path = project_root / METADATA_FILE
        await save_json(self.metadata(), path)
        result.files.append(path)

    def metadata(self, now: datetime | None = None) -> dict[str, Any]:
        created = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        return {
            "generator": GENERATOR_NAME,
            "version": __version__,
            "created": created.isoformat().replace("+00:00", "Z"),
            "architecture": self.config.architecture.value,
            "deployment": self.config.deployment_tool.value,
            "features": self.config.enabled_features(),
            "testing": self.config.testing_framework.value,
        }
