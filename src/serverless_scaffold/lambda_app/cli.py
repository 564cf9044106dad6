"""``create-lambda-app`` -- scaffold an AWS Lambda Go project."""

from __future__ import annotations

import argparse
import asyncio

from pydantic import ValidationError

from serverless_scaffold.cli import (
    abort_on_interrupt,
    add_common_arguments,
    ensure_absent,
    fail,
    load_settings,
    run_generator,
)
from serverless_scaffold.config import (
    Architecture,
    DeploymentTool,
    LambdaFeature,
    Settings,
    TestingFramework,
)
from serverless_scaffold.lambda_app.generator import (
    LambdaGenerator,
    LambdaProjectConfig,
    check_name,
    resolve_module,
)
from serverless_scaffold.prompts import ask_choice, ask_multi_choice, ask_text
from serverless_scaffold.utils import (
    print_banner,
    print_next_steps,
    print_success,
    print_summary_table,
)

DESCRIPTION = (
    "Create Lambda App - a scaffolding tool for AWS Lambda functions in Go.\n\n"
    "Generates a structured project (clean, simple or DDD layout) with\n"
    "multi-environment deployment configuration, a testing setup, CI/CD\n"
    "workflows, OpenAPI docs and a handler generator."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-lambda-app",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-lambda-app my-api\n"
            "  create-lambda-app my-api --deployment cdk --architecture ddd -f api,dynamodb\n"
            "  create-lambda-app my-worker -f sqs --testing ginkgo --skip-install -y\n"
        ),
    )
    add_common_arguments(parser)
    parser.add_argument("-n", "--name", default=None, help="Project name")
    parser.add_argument(
        "--deployment",
        choices=[t.value for t in DeploymentTool],
        default=None,
        help="Deployment tool",
    )
    parser.add_argument(
        "--architecture",
        choices=[a.value for a in Architecture],
        default=None,
        help="Project structure",
    )
    parser.add_argument(
        "--testing",
        choices=[t.value for t in TestingFramework],
        default=None,
        help="Testing approach",
    )
    parser.add_argument(
        "-f", "--features",
        action="append",
        default=None,
        help="Features to include, comma-separated or repeated "
        f"({','.join(f.value for f in LambdaFeature)})",
    )
    parser.add_argument("--module", default=None, help="Go module path (default: github.com/<git user>/<name>)")
    return parser


def _validate_name(value: str) -> str | None:
    try:
        check_name(value)
    except ValueError as exc:
        return str(exc)
    return None


def _collect_config(args: argparse.Namespace, settings: Settings) -> LambdaProjectConfig:
    raw_name = args.project_name or args.name
    if not raw_name:
        if args.yes:
            fail("a project name is required with --yes")
        raw_name = ask_text("Project name", validate=_validate_name)
    try:
        name = check_name(raw_name)
    except ValueError as exc:
        fail(str(exc))

    ensure_absent((args.output_dir or settings.output_dir) / name)

    description = args.description
    if description is None and not args.yes:
        description = ask_text("Project description", default=f"AWS Lambda functions for {name}")

    deployment = args.deployment
    if deployment is None:
        deployment = DeploymentTool.SAM if args.yes else ask_choice(
            "Choose deployment tool:", DeploymentTool, DeploymentTool.SAM
        )

    if args.features:
        features: str | list[LambdaFeature] = ",".join(args.features)
    elif args.yes:
        features = [LambdaFeature.API]
    else:
        features = ask_multi_choice("Select features to include:", LambdaFeature, [LambdaFeature.API])

    architecture = args.architecture
    if architecture is None:
        architecture = Architecture.CLEAN if args.yes else ask_choice(
            "Choose project structure:", Architecture, Architecture.CLEAN
        )

    testing = args.testing
    if testing is None:
        testing = TestingFramework.TESTIFY if args.yes else ask_choice(
            "Choose testing approach:", TestingFramework, TestingFramework.TESTIFY
        )

    module = args.module or asyncio.run(resolve_module(name, settings))

    try:
        return LambdaProjectConfig(
            name=name,
            description=description or "",
            architecture=architecture,
            deployment_tool=deployment,
            testing_framework=testing,
            features=features,
            skip_git=args.skip_git,
            skip_install=args.skip_install,
            module=module,
        )
    except ValidationError as exc:
        fail("; ".join(err["msg"] for err in exc.errors()))


@abort_on_interrupt
def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-lambda-app``."""
    args = build_parser().parse_args(argv)
    settings = load_settings()

    print_banner("Create Lambda App", "Professional Go Lambda Function Generator")

    config = _collect_config(args, settings)
    print_summary_table(
        {
            "Project": config.name,
            "Module": config.module,
            "Architecture": config.architecture.value,
            "Deployment": config.deployment_tool.value,
            "Testing": config.testing_framework.value,
            "Features": ", ".join(config.enabled_features()) or "none",
        },
        title="Lambda project",
    )

    generator = LambdaGenerator(config, settings=settings)
    run_generator(generator, args.output_dir or settings.output_dir, verbose=args.verbose)

    print_success(f"Successfully created project: {config.name}")
    commands = [f"cd {config.name}"]
    if config.skip_install:
        commands.append("go mod download")
    commands += ["make test", "make run-local"]
    print_next_steps(
        commands,
        notes={
            "make generate-handler": "Generate new Lambda handlers",
            "make build": "Build all Lambda functions",
            "make test": "Run tests with coverage",
            "make deploy-dev": "Deploy to development",
            "make deploy-prod": "Deploy to production",
            "README.md": "Project overview and setup",
            "docs/ARCHITECTURE.md": "Architecture decisions",
            "docs/DEPLOYMENT.md": "Deployment guide",
        },
    )


if __name__ == "__main__":
    main()
