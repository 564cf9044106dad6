"""Dispatch tables mapping Lambda project choices to template entries.

Everything here is compile-time data plus pure lookups: given an
architecture, a deployment tool and a feature set, :func:`build_plan`
returns the exact directories and files to generate.  No I/O happens here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from serverless_scaffold.config import Architecture, DeploymentTool, LambdaFeature
from serverless_scaffold.scaffolder.plan import GenerationPlan, TemplateEntry

if TYPE_CHECKING:
    from serverless_scaffold.lambda_app.generator import LambdaProjectConfig


# ---------------------------------------------------------------------------
# Entry helpers
# ---------------------------------------------------------------------------


def _template_name(prefix: str, output_path: str) -> str:
    # Dotfiles are stored without their leading dot.
    return f"lambda/{prefix}/{output_path.lstrip('.')}.j2"


def _entries(
    prefix: str,
    paths: Iterable[str],
    *,
    executable: Iterable[str] = (),
) -> tuple[TemplateEntry, ...]:
    executable = set(executable)
    return tuple(
        TemplateEntry(
            output_path=path,
            template=_template_name(prefix, path),
            executable=path in executable,
        )
        for path in paths
    )


class ArchitectureLayout:
    """Directories and base files of one architecture style."""

    def __init__(self, directories: Iterable[str], entries: Iterable[TemplateEntry]) -> None:
        self.directories = tuple(directories)
        self.entries = tuple(entries)


# ---------------------------------------------------------------------------
# Architecture layouts
# ---------------------------------------------------------------------------

ARCHITECTURE_LAYOUTS: dict[Architecture, ArchitectureLayout] = {
    Architecture.CLEAN: ArchitectureLayout(
        directories=[
            "cmd",
            "internal/domain/entities",
            "internal/domain/repositories",
            "internal/domain/services",
            "internal/usecases",
            "internal/interfaces/lambda",
            "internal/interfaces/api",
            "internal/infrastructure/database",
            "internal/infrastructure/aws",
            "internal/infrastructure/config",
            "pkg/logger",
            "pkg/errors",
            "pkg/middleware",
            "test/unit",
            "test/integration",
            "test/e2e",
            "test/mocks",
            "docs",
            "scripts",
            "deployments",
        ],
        entries=_entries(
            "clean",
            [
                "cmd/handler/main.go",
                "internal/domain/entities/base.go",
                "internal/domain/repositories/interfaces.go",
                "internal/usecases/interfaces.go",
                "internal/interfaces/lambda/handler.go",
                "internal/infrastructure/config/config.go",
                "pkg/logger/logger.go",
                "pkg/errors/errors.go",
                "pkg/middleware/middleware.go",
            ],
        ),
    ),
    Architecture.SIMPLE: ArchitectureLayout(
        directories=[
            "handlers",
            "models",
            "services",
            "utils",
            "config",
            "test",
            "docs",
            "scripts",
            "deployments",
        ],
        entries=_entries(
            "simple",
            [
                "handlers/main.go",
                "models/models.go",
                "services/service.go",
                "utils/utils.go",
                "config/config.go",
            ],
        ),
    ),
    Architecture.DDD: ArchitectureLayout(
        directories=[
            "cmd",
            "domain/aggregate",
            "domain/entity",
            "domain/valueobject",
            "domain/repository",
            "domain/service",
            "domain/event",
            "application/command",
            "application/query",
            "application/handler",
            "infrastructure/persistence",
            "infrastructure/messaging",
            "infrastructure/config",
            "interfaces/lambda",
            "interfaces/api",
            "test",
            "docs",
            "scripts",
            "deployments",
        ],
        entries=_entries(
            "ddd",
            [
                "cmd/handler/main.go",
                "domain/aggregate/base.go",
                "domain/entity/base.go",
                "domain/valueobject/base.go",
                "domain/repository/interfaces.go",
                "domain/event/base.go",
                "application/command/base.go",
                "application/query/base.go",
                "infrastructure/persistence/dynamodb.go",
                "infrastructure/persistence/memory.go",
                "interfaces/lambda/handler.go",
            ],
        ),
    ),
}


# ---------------------------------------------------------------------------
# Files every project gets
# ---------------------------------------------------------------------------

COMMON_DIRECTORIES: tuple[str, ...] = (".github/workflows", "docs", "scripts", "test/testutils")

COMMON_ENTRIES: tuple[TemplateEntry, ...] = _entries(
    "base",
    [
        "go.mod",
        "Makefile",
        "README.md",
        ".gitignore",
        ".env.example",
        "docker-compose.yml",
        "Dockerfile",
        ".github/workflows/ci.yml",
        ".github/workflows/deploy.yml",
        "docs/ARCHITECTURE.md",
        "docs/DEPLOYMENT.md",
        "docs/API.md",
        "scripts/generate-handler.go",
        "scripts/local-setup.sh",
        "test/testutils/utils.go",
    ],
    executable=["scripts/local-setup.sh"],
)


# ---------------------------------------------------------------------------
# Deployment tools
# ---------------------------------------------------------------------------

DEPLOYMENT_DIRECTORIES: dict[DeploymentTool, tuple[str, ...]] = {
    DeploymentTool.SAM: ("deployments",),
    DeploymentTool.CDK: ("cdk/lib", "cdk/bin", "cdk/test"),
    DeploymentTool.SERVERLESS: ("deployments",),
    DeploymentTool.TERRAFORM: ("terraform/modules/lambda", "terraform/environments"),
}

DEPLOYMENT_ENTRIES: dict[DeploymentTool, tuple[TemplateEntry, ...]] = {
    DeploymentTool.SAM: _entries(
        "sam",
        [
            "template.yaml",
            "samconfig.toml",
            "buildspec.yml",
            "deployments/dev.yaml",
            "deployments/staging.yaml",
            "deployments/prod.yaml",
        ],
    ),
    DeploymentTool.CDK: _entries(
        "cdk",
        [
            "cdk/cdk.json",
            "cdk/tsconfig.json",
            "cdk/package.json",
            "cdk/lib/stack.ts",
            "cdk/bin/app.ts",
            "cdk/test/stack.test.ts",
        ],
    ),
    DeploymentTool.SERVERLESS: _entries(
        "serverless",
        [
            "serverless.yml",
            "serverless.env.yml",
            "deployments/dev.yml",
            "deployments/staging.yml",
            "deployments/production.yml",
        ],
    ),
    DeploymentTool.TERRAFORM: _entries(
        "terraform",
        [
            "terraform/main.tf",
            "terraform/variables.tf",
            "terraform/outputs.tf",
            "terraform/versions.tf",
            "terraform/environments/dev.tfvars",
            "terraform/environments/staging.tfvars",
            "terraform/environments/prod.tfvars",
            "terraform/modules/lambda/main.tf",
        ],
    ),
}


# ---------------------------------------------------------------------------
# Feature files
# ---------------------------------------------------------------------------

# Features absent from this table (sns, s3, cognito, secrets, eventbridge,
# stepfunctions) only switch sections inside the shared templates.
FEATURE_ENTRIES: dict[LambdaFeature, dict[Architecture, tuple[TemplateEntry, ...]]] = {
    LambdaFeature.API: {
        Architecture.CLEAN: _entries(
            "features/api/clean",
            [
                "internal/interfaces/api/router.go",
                "internal/interfaces/api/handlers.go",
                "internal/interfaces/api/middleware.go",
                "internal/interfaces/api/responses.go",
            ],
        ),
        Architecture.SIMPLE: _entries(
            "features/api/simple",
            ["handlers/api.go", "models/api_models.go", "utils/api_utils.go"],
        ),
        Architecture.DDD: _entries(
            "features/api/ddd",
            [
                "interfaces/api/router.go",
                "interfaces/api/handlers.go",
                "application/handler/api_handler.go",
            ],
        ),
    },
    LambdaFeature.DYNAMODB: {
        Architecture.CLEAN: _entries(
            "features/dynamodb/clean",
            [
                "internal/infrastructure/database/dynamodb.go",
                "internal/infrastructure/database/repository.go",
                "internal/domain/repositories/user_repository.go",
            ],
        ),
        Architecture.SIMPLE: _entries(
            "features/dynamodb/simple",
            ["services/dynamodb.go", "models/dynamo_models.go"],
        ),
        Architecture.DDD: _entries(
            "features/dynamodb/ddd",
            [
                "infrastructure/persistence/dynamodb_repository.go",
                "domain/repository/user_repository.go",
            ],
        ),
    },
    LambdaFeature.SQS: {
        Architecture.CLEAN: _entries(
            "features/sqs/clean",
            [
                "cmd/message-processor/main.go",
                "internal/infrastructure/aws/sqs.go",
                "internal/interfaces/lambda/sqs_handler.go",
                "internal/usecases/process_message.go",
            ],
        ),
        Architecture.SIMPLE: _entries(
            "features/sqs/simple",
            ["handlers/sqs.go", "services/sqs.go", "models/sqs_models.go"],
        ),
        Architecture.DDD: _entries(
            "features/sqs/ddd",
            [
                "cmd/message-processor/main.go",
                "interfaces/lambda/sqs_handler.go",
                "infrastructure/messaging/sqs_client.go",
                "application/handler/message_handler.go",
            ],
        ),
    },
}

# Shared across architectures, gated by the feature alone.
FEATURE_SHARED_ENTRIES: dict[LambdaFeature, tuple[TemplateEntry, ...]] = {
    LambdaFeature.API: _entries("features/api", ["docs/openapi.yaml"]),
}


# ---------------------------------------------------------------------------
# Function names used by build files and deployment templates
# ---------------------------------------------------------------------------


def function_names(architecture: Architecture, features: Iterable[LambdaFeature]) -> dict[str, str]:
    """Return the binary names of the main and queue-consumer functions.

    Clean and DDD projects build one binary per ``cmd/<name>`` directory;
    simple projects build one binary per ``handlers/<name>.go`` file.
    """
    features = set(features)
    if architecture is Architecture.SIMPLE:
        main = "api" if LambdaFeature.API in features else "main"
        return {"main": main, "queue": "sqs"}
    return {"main": "handler", "queue": "message-processor"}


# ---------------------------------------------------------------------------
# Public lookups
# ---------------------------------------------------------------------------


def feature_files(feature: LambdaFeature | str, architecture: Architecture | str) -> list[str]:
    """Return the sorted output paths that exist only because of *feature*."""
    feature = LambdaFeature.parse(feature)
    architecture = Architecture.parse(architecture)
    entries = FEATURE_ENTRIES.get(feature, {}).get(architecture, ())
    shared = FEATURE_SHARED_ENTRIES.get(feature, ())
    return sorted(e.output_path for e in (*entries, *shared))


def build_plan(config: LambdaProjectConfig) -> GenerationPlan:
    """Build the generation plan for *config*.

    Order: architecture layout, common files, deployment files, then
    feature files in feature declaration order.

    Raises:
        ValueError: If the architecture or deployment tool is unknown.
        DuplicateEntryError: If two tables declare the same output path.
    """
    architecture = Architecture.parse(config.architecture)
    deployment = DeploymentTool.parse(config.deployment_tool)

    layout = ARCHITECTURE_LAYOUTS[architecture]
    plan = GenerationPlan()
    plan.add_directories(layout.directories)
    plan.add_directories(COMMON_DIRECTORIES)
    plan.add_directories(DEPLOYMENT_DIRECTORIES[deployment])

    plan.extend(layout.entries)
    plan.extend(COMMON_ENTRIES)
    plan.extend(DEPLOYMENT_ENTRIES[deployment])

    for feature in LambdaFeature:
        if feature not in config.features:
            continue
        plan.extend(FEATURE_ENTRIES.get(feature, {}).get(architecture, ()))
        plan.extend(FEATURE_SHARED_ENTRIES.get(feature, ()))

    return plan
