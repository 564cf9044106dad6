"""Tests for add-worker-route (serverless_scaffold.worker_app.routes)."""

from __future__ import annotations

from pathlib import Path

import pytest

from serverless_scaffold.scaffolder.errors import ScaffoldError
from serverless_scaffold.worker_app import routes
from serverless_scaffold.worker_app.routes import generate_route, insert_route, route_names

pytestmark = pytest.mark.unit


INDEX = """import { cors } from 'hono/cors';
import healthRoutes from './routes/health';

const app = createApp();

// Routes
app.route('/', healthRoutes);

export default app;
"""


class TestRouteNames:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("createPayment", ("create-payment", "CreatePayment", "Create")),
            ("users", ("users", "Users", "Users")),
            ("GetOrderItems", ("get-order-items", "GetOrderItems", "Get")),
        ],
    )
    def test_names(self, name, expected):
        assert route_names(name) == expected


class TestInsertRoute:
    def test_import_after_last_import(self):
        lines = insert_route(INDEX, "createPayment", "create-payment").split("\n")
        assert lines[2] == "import createPaymentRoutes from './routes/create-payment';"
        assert lines[1] == "import healthRoutes from './routes/health';"

    def test_route_before_first_registration(self):
        updated = insert_route(INDEX, "createPayment", "create-payment")
        assert (
            "// Routes\napp.route('/', createPaymentRoutes);\napp.route('/', healthRoutes);"
            in updated
        )

    def test_route_below_marker_when_none_registered(self):
        text = "import a from 'a';\n\n// Routes\n\nexport default app;\n"
        updated = insert_route(text, "ping", "ping")
        assert "// Routes\napp.route('/', pingRoutes);\n" in updated

    def test_missing_marker(self):
        with pytest.raises(ScaffoldError, match="// Routes"):
            insert_route("import a from 'a';\n", "ping", "ping")


class TestGenerateRoute:
    @pytest.mark.asyncio
    async def test_creates_files_and_updates_index(self, worker_project: Path):
        files = await generate_route(worker_project, "createPayment", "POST", "/api/payment")
        assert files.method == "post"
        assert files.schema_file == worker_project / "src" / "schemas" / "create-payment.ts"

        schema = files.schema_file.read_text(encoding="utf-8")
        assert "export const CreatePaymentRequestSchema" in schema

        route = files.route_file.read_text(encoding="utf-8")
        assert "method: 'post'" in route
        assert "path: '/api/payment'" in route
        assert "tags: ['Create']" in route
        assert "request: {" in route

        index = (worker_project / "src" / "index.ts").read_text(encoding="utf-8")
        assert "import createPaymentRoutes from './routes/create-payment';" in index
        assert "app.route('/', createPaymentRoutes);" in index

    @pytest.mark.asyncio
    async def test_default_path_and_no_body_for_get(self, worker_project: Path):
        files = await generate_route(worker_project, "listOrders", "get")
        assert files.url_path == "/api/list-orders"
        route = files.route_file.read_text(encoding="utf-8")
        assert "request: {" not in route
        assert "ListOrdersRequestSchema" in route

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, worker_project: Path):
        await generate_route(worker_project, "ping", "get")
        index_before = (worker_project / "src" / "index.ts").read_text(encoding="utf-8")
        with pytest.raises(ScaffoldError, match="already exists"):
            await generate_route(worker_project, "ping", "get")
        assert (worker_project / "src" / "index.ts").read_text(encoding="utf-8") == index_before

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name, method, message",
        [
            ("create-payment", "post", "Invalid route name"),
            ("1st", "get", "Invalid route name"),
            ("ping", "options", "Invalid method"),
        ],
    )
    async def test_invalid_input(self, worker_project: Path, name, method, message):
        with pytest.raises(ScaffoldError, match=message):
            await generate_route(worker_project, name, method)
        assert sorted(p.name for p in (worker_project / "src" / "routes").iterdir()) == ["health.ts"]

    @pytest.mark.asyncio
    async def test_requires_openapi(self, worker_project: Path):
        (worker_project / "src" / "lib" / "openapi.ts").unlink()
        with pytest.raises(ScaffoldError, match="without OpenAPI"):
            await generate_route(worker_project, "ping", "get")

    @pytest.mark.asyncio
    async def test_requires_worker_project(self, tmp_path: Path):
        with pytest.raises(ScaffoldError, match="No src/index.ts"):
            await generate_route(tmp_path, "ping", "get")


class TestMain:
    def test_success(self, tmp_path: Path, capsys):
        project = tmp_path / "w"
        (project / "src" / "lib").mkdir(parents=True)
        (project / "src" / "lib" / "openapi.ts").write_text("export {};\n", encoding="utf-8")
        (project / "src" / "index.ts").write_text(INDEX, encoding="utf-8")

        routes.main(["ping", "get", "--project-dir", str(project)])

        assert (project / "src" / "routes" / "ping.ts").is_file()
        out = capsys.readouterr().out
        assert "Updated src/index.ts" in out
        assert "Next steps" in out

    def test_failure_exits(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            routes.main(["ping", "get", "--project-dir", str(tmp_path)])
        assert exc_info.value.code == 1
