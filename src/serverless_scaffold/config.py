"""Serverless scaffold configuration.

Closed choice sets (architecture, deployment tool, testing framework,
Lambda features) and process-wide settings. All settings use Pydantic v2
models so they are validated at construction time and can be built from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Closed choice sets
# ---------------------------------------------------------------------------


class _DescribedEnum(str, Enum):
    """String enum whose members carry a one-line human description."""

    @property
    def description(self) -> str:
        return _DESCRIPTIONS.get(self, self.value)

    @classmethod
    def parse(cls, value: str | _DescribedEnum) -> Any:
        """Return the member for *value*, accepting the ``"x (blurb)"`` form.

        Raises:
            ValueError: If *value* is not a member of the enum.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().split(" ")[0].lower()
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(
                f"unknown {cls.label()}: {value!r} (expected one of: {allowed})"
            ) from None

    @classmethod
    def label(cls) -> str:
        return _split_camel(cls.__name__)


class Architecture(_DescribedEnum):
    """Directory/module layout of a generated Lambda project."""

    CLEAN = "clean"
    SIMPLE = "simple"
    DDD = "ddd"


class DeploymentTool(_DescribedEnum):
    """Infrastructure-as-code flavour of a generated Lambda project."""

    SAM = "sam"
    CDK = "cdk"
    SERVERLESS = "serverless"
    TERRAFORM = "terraform"


class TestingFramework(_DescribedEnum):
    """Go testing approach wired into a generated Lambda project."""

    __test__ = False  # keep pytest from collecting this enum

    TESTIFY = "testify"
    STANDARD = "standard"
    GINKGO = "ginkgo"


class LambdaFeature(_DescribedEnum):
    """Optional AWS integration toggled on a generated Lambda project."""

    API = "api"
    DYNAMODB = "dynamodb"
    SQS = "sqs"
    SNS = "sns"
    S3 = "s3"
    COGNITO = "cognito"
    SECRETS = "secrets"
    EVENTBRIDGE = "eventbridge"
    STEPFUNCTIONS = "stepfunctions"


_DESCRIPTIONS: dict[Enum, str] = {
    Architecture.CLEAN: "Clean Architecture with use cases",
    Architecture.SIMPLE: "Simple handler-based structure",
    Architecture.DDD: "Domain-Driven Design",
    DeploymentTool.SAM: "AWS Serverless Application Model - AWS native, simple configuration",
    DeploymentTool.CDK: "AWS Cloud Development Kit - programmable infrastructure in TypeScript",
    DeploymentTool.SERVERLESS: "Serverless Framework - multi-cloud, large plugin ecosystem",
    DeploymentTool.TERRAFORM: "HashiCorp Terraform - multi-provider, declarative infrastructure",
    TestingFramework.TESTIFY: "Assertions and mocks",
    TestingFramework.STANDARD: "Standard library only",
    TestingFramework.GINKGO: "BDD-style testing",
    LambdaFeature.API: "API Gateway - REST APIs with routing and validation",
    LambdaFeature.DYNAMODB: "DynamoDB - NoSQL database for user data",
    LambdaFeature.SQS: "SQS - message queue for async processing",
    LambdaFeature.SNS: "SNS - pub/sub messaging for notifications",
    LambdaFeature.S3: "S3 - object storage for files and media",
    LambdaFeature.COGNITO: "Cognito - user authentication and authorization",
    LambdaFeature.SECRETS: "Secrets Manager - store API keys and credentials",
    LambdaFeature.EVENTBRIDGE: "EventBridge - event-driven triggers",
    LambdaFeature.STEPFUNCTIONS: "Step Functions - workflow orchestration",
}


def _split_camel(name: str) -> str:
    """``DeploymentTool`` -> ``deployment tool``."""
    return re.sub(r"(?<!^)(?=[A-Z])", " ", name).lower()


# ---------------------------------------------------------------------------
# Process-wide settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """Tunables shared by both generators.

    Instances are created once by the CLI entry point (usually through
    :meth:`from_env`) and passed to the generators.
    """

    model_config = ConfigDict(frozen=True)

    output_dir: Path = Field(
        default=Path("."), description="Parent directory for new projects"
    )
    github_user: str = Field(
        default="", description="Owner segment of the default Go module path"
    )
    command_timeout: int = Field(
        default=300, ge=10, description="git / package-manager timeout in seconds"
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            SCAFFOLD_OUTPUT_DIR, SCAFFOLD_GITHUB_USER, SCAFFOLD_COMMAND_TIMEOUT.

        Raises:
            ValidationError: If a variable holds a value the model rejects.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SCAFFOLD_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["SCAFFOLD_OUTPUT_DIR"])
        if os.environ.get("SCAFFOLD_GITHUB_USER"):
            kwargs["github_user"] = os.environ["SCAFFOLD_GITHUB_USER"]
        if os.environ.get("SCAFFOLD_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = os.environ["SCAFFOLD_COMMAND_TIMEOUT"]
        return cls(**kwargs)
