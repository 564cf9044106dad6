"""``create-worker-app`` -- scaffold a Cloudflare Worker (Hono.js) project."""

from __future__ import annotations

import argparse

from pydantic import ValidationError

from serverless_scaffold.cli import (
    abort_on_interrupt,
    add_common_arguments,
    ensure_absent,
    fail,
    load_settings,
    run_generator,
)
from serverless_scaffold.config import Settings
from serverless_scaffold.prompts import ask_confirm, ask_text
from serverless_scaffold.utils import (
    console,
    print_banner,
    print_next_steps,
    print_success,
    print_summary_table,
)
from serverless_scaffold.worker_app.generator import (
    DEFAULT_DESCRIPTION,
    WorkerGenerator,
    WorkerProjectConfig,
    check_name,
)

DEFAULT_NAME = "my-worker-app"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-worker-app",
        description="Create Worker App - Cloudflare Worker project generator (Hono.js + TypeScript)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-worker-app my-worker\n"
            "  create-worker-app my-worker --no-openapi --database -y\n"
        ),
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--database",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write a database .env.example (default: no)",
    )
    parser.add_argument(
        "--openapi",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include OpenAPI/Swagger documentation (default: yes)",
    )
    return parser


def _validate_name(value: str) -> str | None:
    try:
        check_name(value)
    except ValueError as exc:
        return str(exc)
    return None


def _collect_config(args: argparse.Namespace, settings: Settings) -> WorkerProjectConfig:
    raw_name = args.project_name
    if not raw_name:
        raw_name = DEFAULT_NAME if args.yes else ask_text(
            "Project name", default=DEFAULT_NAME, validate=_validate_name
        )
    try:
        name = check_name(raw_name)
    except ValueError as exc:
        fail(str(exc))

    ensure_absent((args.output_dir or settings.output_dir) / name)

    description = args.description
    if description is None:
        description = DEFAULT_DESCRIPTION if args.yes else ask_text(
            "Project description", default=DEFAULT_DESCRIPTION
        )

    use_database = args.database
    if use_database is None:
        use_database = False if args.yes else ask_confirm(
            "Will you need database configuration?", default=False
        )

    use_openapi = args.openapi
    if use_openapi is None:
        use_openapi = True if args.yes else ask_confirm(
            "Include OpenAPI/Swagger documentation?", default=True
        )

    try:
        return WorkerProjectConfig(
            name=name,
            description=description,
            use_database=use_database,
            use_openapi=use_openapi,
            skip_git=args.skip_git,
            skip_install=args.skip_install,
        )
    except ValidationError as exc:
        fail("; ".join(err["msg"] for err in exc.errors()))


@abort_on_interrupt
def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-worker-app``."""
    args = build_parser().parse_args(argv)
    settings = load_settings()

    print_banner("Create Worker App", "Cloudflare Worker + Hono.js Generator")

    config = _collect_config(args, settings)
    print_summary_table(
        {
            "Project": config.name,
            "Description": config.description,
            "Database config": "yes" if config.use_database else "no",
            "OpenAPI docs": "yes" if config.use_openapi else "no",
        },
        title="Worker project",
    )

    generator = WorkerGenerator(config, settings=settings)
    run_generator(generator, args.output_dir or settings.output_dir, verbose=args.verbose)

    print_success("Project created successfully!")
    commands = [f"cd {config.name}"]
    if config.skip_install:
        commands.append("npm install")
    commands.append("npm run dev")
    print_next_steps(commands)

    if config.use_openapi:
        console.print(
            "[yellow]API documentation will be available at http://localhost:8787/docs[/yellow]"
        )
        console.print()


if __name__ == "__main__":
    main()
