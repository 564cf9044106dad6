"""Tests for the ``create-worker-app`` command line (serverless_scaffold.worker_app.cli)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from serverless_scaffold.worker_app import cli

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("SCAFFOLD_OUTPUT_DIR", raising=False)


def _run(tmp_path: Path, *extra: str) -> None:
    cli.main(["-y", "--skip-git", "--skip-install", "-o", str(tmp_path), *extra])


class TestMain:
    def test_defaults(self, tmp_path: Path, capsys):
        _run(tmp_path)
        root = tmp_path / "my-worker-app"
        assert (root / "src" / "lib" / "openapi.ts").is_file()
        assert not (root / ".env.example").exists()
        package = json.loads((root / "package.json").read_text(encoding="utf-8"))
        assert package["description"] == "A Cloudflare Worker application"
        out = capsys.readouterr().out
        assert "Project created successfully!" in out
        assert "localhost:8787/docs" in out

    def test_no_openapi_with_database(self, tmp_path: Path, capsys):
        _run(tmp_path, "edge", "--no-openapi", "--database", "-d", "Edge service")
        root = tmp_path / "edge"
        assert not (root / "src" / "lib" / "openapi.ts").exists()
        assert not (root / "scripts" / "generate-route.js").exists()
        assert (root / ".env.example").is_file()
        package = json.loads((root / "package.json").read_text(encoding="utf-8"))
        assert package["description"] == "Edge service"
        assert "localhost:8787/docs" not in capsys.readouterr().out

    def test_invalid_name(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "edge_api")
        assert exc_info.value.code == 1

    def test_existing_directory(self, tmp_path: Path, capsys):
        (tmp_path / "edge").mkdir()
        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "edge")
        assert exc_info.value.code == 1
        assert "Directory edge already exists!" in capsys.readouterr().out

    def test_bad_timeout_fails(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys):
        monkeypatch.setenv("SCAFFOLD_COMMAND_TIMEOUT", "5")
        with pytest.raises(SystemExit) as exc_info:
            _run(tmp_path, "edge")
        assert exc_info.value.code == 1
        assert "command_timeout" in capsys.readouterr().out
        assert not (tmp_path / "edge").exists()


class TestParser:
    def test_boolean_flags_default_to_none(self):
        args = cli.build_parser().parse_args(["edge"])
        assert args.openapi is None
        assert args.database is None
