"""Shared pytest fixtures for the serverless scaffold test suite.

Provides reusable fixtures for:
- Temporary output directories
- Lambda and Worker project configurations
- A template renderer over the packaged templates
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from serverless_scaffold.config import Settings
from serverless_scaffold.lambda_app.generator import LambdaProjectConfig
from serverless_scaffold.scaffolder.templates import TemplateRenderer
from serverless_scaffold.worker_app.generator import WorkerProjectConfig


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory that generated projects are written into."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def settings(output_dir: Path) -> Settings:
    return Settings(output_dir=output_dir, github_user="octocat", command_timeout=30)


@pytest.fixture
def renderer() -> TemplateRenderer:
    """Renderer over the packaged template tree."""
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Project configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def lambda_config_factory():
    """Factory for ``LambdaProjectConfig`` with git/install skipped by default.

    Usage:
        def test_something(lambda_config_factory):
            config = lambda_config_factory(architecture="ddd", features="api,sqs")
    """
    def factory(**overrides: Any) -> LambdaProjectConfig:
        data: dict[str, Any] = {
            "name": "orders-api",
            "module": "github.com/octocat/orders-api",
            "skip_git": True,
            "skip_install": True,
        }
        data.update(overrides)
        return LambdaProjectConfig(**data)

    return factory


@pytest.fixture
def lambda_config(lambda_config_factory) -> LambdaProjectConfig:
    """Default Lambda config: clean + sam + testify, api only."""
    return lambda_config_factory()


@pytest.fixture
def worker_config_factory():
    """Factory for ``WorkerProjectConfig`` with git/install skipped by default."""
    def factory(**overrides: Any) -> WorkerProjectConfig:
        data: dict[str, Any] = {
            "name": "edge-api",
            "skip_git": True,
            "skip_install": True,
        }
        data.update(overrides)
        return WorkerProjectConfig(**data)

    return factory


@pytest.fixture
def worker_config(worker_config_factory) -> WorkerProjectConfig:
    """Default Worker config: OpenAPI on, database off."""
    return worker_config_factory()


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# Generated worker project
# ---------------------------------------------------------------------------

@pytest.fixture
async def worker_project(worker_config, settings: Settings, output_dir: Path) -> Path:
    """A freshly generated OpenAPI Worker project (no git, no npm)."""
    from serverless_scaffold.worker_app.generator import WorkerGenerator

    result = await WorkerGenerator(worker_config, settings=settings).generate(output_dir)
    return result.project_root
