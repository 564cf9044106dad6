"""Plumbing shared by the ``create-*-app`` command-line front ends."""

from __future__ import annotations

import argparse
import asyncio
import functools
import sys
from pathlib import Path
from typing import NoReturn

from pydantic import ValidationError

from serverless_scaffold import __version__
from serverless_scaffold.config import Settings
from serverless_scaffold.scaffolder.base import BaseGenerator, GenerationResult
from serverless_scaffold.scaffolder.errors import ScaffoldError
from serverless_scaffold.utils import console, print_error, print_step, print_warning


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the flags both generators accept."""
    parser.add_argument("project_name", nargs="?", help="Name of the project directory to create")
    parser.add_argument("-d", "--description", default=None, help="Project description")
    parser.add_argument("--skip-git", action="store_true", help="Skip git initialization")
    parser.add_argument("--skip-install", action="store_true", help="Skip dependency installation")
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=None,
        help="Parent directory for the project (default: $SCAFFOLD_OUTPUT_DIR or .)",
    )
    parser.add_argument("-y", "--yes", action="store_true", help="Accept defaults, never prompt")
    parser.add_argument("-v", "--verbose", action="store_true", help="List every generated file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")


def fail(message: str) -> NoReturn:
    print_error(message)
    sys.exit(1)


def load_settings() -> Settings:
    """Return :meth:`Settings.from_env`, exiting with status 1 on a bad value."""
    try:
        return Settings.from_env()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        fail(f"invalid environment configuration ({problems})")


def ensure_absent(path: Path) -> None:
    """Exit with an error when the project directory already exists."""
    if path.exists():
        fail(f"Directory {path.name} already exists!")


async def _generate(generator: BaseGenerator, output_dir: Path, verbose: bool) -> GenerationResult:
    print_step("Creating project structure...")
    result = await generator.generate(output_dir)
    if verbose:
        for path in result.files:
            console.print(f"  [dim]created[/dim] {path.relative_to(result.project_root)}")

    if not generator.config.skip_git:
        print_step("Initializing git repository...")
    if not generator.config.skip_install:
        print_step("Installing dependencies...")
    await generator.post_generate(result.project_root, result)
    return result


def run_generator(generator: BaseGenerator, output_dir: Path, *, verbose: bool = False) -> GenerationResult:
    """Run *generator* to completion, exiting with status 1 on a fatal error.

    Non-fatal post-generation problems are printed as warnings.
    """
    try:
        result = asyncio.run(_generate(generator, output_dir, verbose))
    except (ScaffoldError, OSError) as exc:
        fail(str(exc))

    for warning in result.warnings:
        print_warning(warning)
    return result


def abort_on_interrupt(func):
    """Decorate a CLI ``main`` so Ctrl-C exits with status 1."""

    @functools.wraps(func)
    def wrapper(argv: list[str] | None = None) -> None:
        try:
            func(argv)
        except (KeyboardInterrupt, EOFError):
            console.print()
            fail("Aborted.")

    return wrapper
