"""Add an OpenAPI route to an existing Worker project.

``add-worker-route createPayment post /api/payment`` writes
``src/schemas/create-payment.ts`` and ``src/routes/create-payment.ts`` and
wires the new route into ``src/index.ts``.  It does the same job as the
``npm run generate:route`` script shipped inside generated projects.
"""

from __future__ import annotations

import argparse
import asyncio
import re
from pathlib import Path

from pydantic import BaseModel

from serverless_scaffold.cli import abort_on_interrupt, fail
from serverless_scaffold.scaffolder.errors import ScaffoldError
from serverless_scaffold.scaffolder.templates import TemplateRenderer
from serverless_scaffold.utils import camel_to_kebab, print_next_steps, print_success, write_text

HTTP_METHODS = ("get", "post", "put", "patch", "delete")
ROUTES_MARKER = "// Routes"

_ROUTE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


class RouteFiles(BaseModel):
    """Names and paths produced by :func:`generate_route`."""

    name: str
    file_name: str
    pascal_name: str
    tag: str
    method: str
    url_path: str
    schema_file: Path
    route_file: Path
    index_file: Path


def route_names(name: str) -> tuple[str, str, str]:
    """Return ``(file_name, pascal_name, tag)`` for a camelCase route name.

    ``createPayment`` -> ``("create-payment", "CreatePayment", "Create")``.
    """
    file_name = camel_to_kebab(name)
    pascal_name = name[:1].upper() + name[1:]
    tag = re.sub(r"([A-Z])", r" \1", pascal_name).split()[0]
    return file_name, pascal_name, tag


def insert_route(index_text: str, name: str, file_name: str) -> str:
    """Return *index_text* with the import and ``app.route`` lines for a route.

    The import goes after the last ``import`` line.  The route registration
    goes before the first ``app.route`` following the ``// Routes`` marker,
    or right below the marker when no route is registered yet.

    Raises:
        ScaffoldError: If the ``// Routes`` marker is missing.
    """
    import_line = f"import {name}Routes from './routes/{file_name}';"
    route_line = f"app.route('/', {name}Routes);"

    lines = index_text.split("\n")
    last_import = max((i for i, line in enumerate(lines) if line.startswith("import ")), default=-1)
    lines.insert(last_import + 1, import_line)

    try:
        marker = next(i for i, line in enumerate(lines) if line.strip() == ROUTES_MARKER)
    except StopIteration:
        raise ScaffoldError(f"src/index.ts has no '{ROUTES_MARKER}' section") from None
    first_route = next(
        (i for i in range(marker + 1, len(lines)) if lines[i].lstrip().startswith("app.route")),
        marker + 1,
    )
    lines.insert(first_route, route_line)
    return "\n".join(lines)


async def generate_route(
    project_dir: str | Path,
    name: str,
    method: str,
    path: str | None = None,
    renderer: TemplateRenderer | None = None,
) -> RouteFiles:
    """Create the schema and route files for *name* and register the route.

    Raises:
        ScaffoldError: If the project is not an OpenAPI Worker project, the
            name or method is invalid, or the route already exists.
    """
    root = Path(project_dir)
    index_file = root / "src" / "index.ts"
    if not index_file.is_file():
        raise ScaffoldError(f"No src/index.ts in {root}; is this a create-worker-app project?")
    if not (root / "src" / "lib" / "openapi.ts").is_file():
        raise ScaffoldError("This project was generated without OpenAPI support")
    if not _ROUTE_NAME_RE.match(name):
        raise ScaffoldError(f"Invalid route name {name!r}; use camelCase like createPayment")
    method = method.lower()
    if method not in HTTP_METHODS:
        raise ScaffoldError(f"Invalid method {method!r}; expected one of: {', '.join(HTTP_METHODS)}")

    file_name, pascal_name, tag = route_names(name)
    files = RouteFiles(
        name=name,
        file_name=file_name,
        pascal_name=pascal_name,
        tag=tag,
        method=method,
        url_path=path or f"/api/{file_name}",
        schema_file=root / "src" / "schemas" / f"{file_name}.ts",
        route_file=root / "src" / "routes" / f"{file_name}.ts",
        index_file=index_file,
    )
    for existing in (files.schema_file, files.route_file):
        if existing.exists():
            raise ScaffoldError(f"Route {file_name} already exists ({existing.relative_to(root)})")

    index_text = await asyncio.to_thread(index_file.read_text, encoding="utf-8")
    updated = insert_route(index_text, name, file_name)

    renderer = renderer or TemplateRenderer()
    context = files.model_dump(mode="json")
    await renderer.render_to_file("worker_route/schema.ts.j2", files.schema_file, context)
    await renderer.render_to_file("worker_route/route.ts.j2", files.route_file, context)
    await asyncio.to_thread(write_text, index_file, updated)
    return files


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="add-worker-route",
        description="Add an OpenAPI route to a create-worker-app project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Example:\n  add-worker-route createPayment post /api/payment\n",
    )
    parser.add_argument("name", help="camelCase route name, e.g. createPayment")
    parser.add_argument("method", help=f"HTTP method ({', '.join(HTTP_METHODS)})")
    parser.add_argument("path", nargs="?", default=None, help="URL path (default: /api/<name>)")
    parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path("."),
        help="Worker project root (default: current directory)",
    )
    return parser


@abort_on_interrupt
def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``add-worker-route``."""
    args = build_parser().parse_args(argv)
    try:
        files = asyncio.run(generate_route(args.project_dir, args.name, args.method, args.path))
    except (ScaffoldError, OSError) as exc:
        fail(str(exc))

    print_success(f"Created schema: {files.schema_file}")
    print_success(f"Created route: {files.route_file}")
    print_success("Updated src/index.ts")
    print_next_steps(
        [
            f"Edit src/schemas/{files.file_name}.ts to define request/response schemas",
            f"Edit src/routes/{files.file_name}.ts to implement business logic",
            "Run 'npm run dev' and visit http://localhost:8787/docs",
        ]
    )


if __name__ == "__main__":
    main()
