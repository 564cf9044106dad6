"""Tests for the shared generation pipeline (serverless_scaffold.scaffolder.base).

Covers:
- generate(): existing-directory refusal, directory creation, one write per entry
- after_render hook ordering
- post_generate(): git sequence, stop-on-first-failure, install warning, skips
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import BaseModel

from serverless_scaffold.config import Settings
from serverless_scaffold.scaffolder.base import BaseGenerator, GenerationResult
from serverless_scaffold.scaffolder.errors import ProjectExistsError
from serverless_scaffold.scaffolder.plan import GenerationPlan, TemplateEntry
from serverless_scaffold.scaffolder.templates import TemplateRenderer

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# A minimal concrete generator
# ---------------------------------------------------------------------------


class _Config(BaseModel):
    name: str = "demo"
    skip_git: bool = False
    skip_install: bool = False


class _DemoGenerator(BaseGenerator):
    commit_message = "Initial commit from demo"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: list[str] = []

    def build_plan(self) -> GenerationPlan:
        plan = GenerationPlan()
        plan.add_directories(["empty/dir"])
        plan.add(TemplateEntry(output_path="README.md", template="demo/README.md.j2"))
        plan.add(
            TemplateEntry(
                output_path="bin/run.sh",
                template="demo/run.sh",
                render=False,
                executable=True,
            )
        )
        return plan

    def build_context(self) -> dict[str, Any]:
        return {"name": self.config.name}

    def install_command(self) -> list[str]:
        return ["npm", "install"]

    async def after_render(self, project_root: Path, result: GenerationResult) -> None:
        self.calls.append(f"after_render:{len(result.files)}")


@pytest.fixture
def demo_renderer(tmp_path: Path) -> TemplateRenderer:
    root = tmp_path / "templates" / "demo"
    root.mkdir(parents=True)
    (root / "README.md.j2").write_text("# {{ name }}\n", encoding="utf-8")
    (root / "run.sh").write_text("#!/bin/sh\necho hi\n", encoding="utf-8")
    return TemplateRenderer(tmp_path / "templates")


@pytest.fixture
def demo_generator(demo_renderer: TemplateRenderer, output_dir: Path) -> _DemoGenerator:
    settings = Settings(output_dir=output_dir, command_timeout=30)
    return _DemoGenerator(_Config(), settings=settings, renderer=demo_renderer)


# ---------------------------------------------------------------------------
# generate()
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.asyncio
    async def test_writes_every_entry(self, demo_generator: _DemoGenerator, output_dir: Path):
        result = await demo_generator.generate()
        root = output_dir / "demo"
        assert result.project_root == root
        assert result.files == [root / "README.md", root / "bin" / "run.sh"]
        assert (root / "README.md").read_text(encoding="utf-8") == "# demo\n"
        assert (root / "empty" / "dir").is_dir()
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_after_render_sees_all_files(self, demo_generator: _DemoGenerator):
        await demo_generator.generate()
        assert demo_generator.calls == ["after_render:2"]

    @pytest.mark.asyncio
    async def test_explicit_output_dir(self, demo_generator: _DemoGenerator, tmp_path: Path):
        elsewhere = tmp_path / "elsewhere"
        result = await demo_generator.generate(elsewhere)
        assert result.project_root == elsewhere / "demo"

    @pytest.mark.asyncio
    async def test_existing_directory_refused(
        self, demo_generator: _DemoGenerator, output_dir: Path
    ):
        root = output_dir / "demo"
        root.mkdir()
        (root / "keep.txt").write_text("mine", encoding="utf-8")
        with pytest.raises(ProjectExistsError, match="Directory demo already exists!"):
            await demo_generator.generate()
        assert sorted(p.name for p in root.iterdir()) == ["keep.txt"]
        assert demo_generator.calls == []


# ---------------------------------------------------------------------------
# post_generate()
# ---------------------------------------------------------------------------


class TestPostGenerate:
    @pytest.mark.asyncio
    async def test_runs_git_then_install(self, demo_generator: _DemoGenerator, tmp_path: Path):
        result = GenerationResult(project_root=tmp_path)
        with patch(
            "serverless_scaffold.scaffolder.base.run_command",
            new=AsyncMock(return_value=(0, "", "")),
        ) as run:
            await demo_generator.post_generate(tmp_path, result)
        commands = [call.args[0] for call in run.await_args_list]
        assert commands == [
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", "Initial commit from demo"],
            ["npm", "install"],
        ]
        for call in run.await_args_list:
            assert call.kwargs["cwd"] == tmp_path
            assert call.kwargs["timeout"] == 30
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_git_failure_stops_git_but_still_installs(
        self, demo_generator: _DemoGenerator, tmp_path: Path
    ):
        result = GenerationResult(project_root=tmp_path)
        responses = [(127, "", "Command not found: git"), (0, "", "")]
        with patch(
            "serverless_scaffold.scaffolder.base.run_command",
            new=AsyncMock(side_effect=responses),
        ) as run:
            await demo_generator.post_generate(tmp_path, result)
        assert [call.args[0][0] for call in run.await_args_list] == ["git", "npm"]
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("Failed to initialize git repository (git init)")

    @pytest.mark.asyncio
    async def test_install_failure_is_a_warning(
        self, demo_generator: _DemoGenerator, tmp_path: Path
    ):
        result = GenerationResult(project_root=tmp_path)
        responses = [(0, "", ""), (0, "", ""), (0, "", ""), (1, "", "")]
        with patch(
            "serverless_scaffold.scaffolder.base.run_command",
            new=AsyncMock(side_effect=responses),
        ):
            await demo_generator.post_generate(tmp_path, result)
        assert result.warnings == ["Failed to install dependencies (npm install): exit code 1"]

    @pytest.mark.asyncio
    async def test_skips(self, demo_renderer: TemplateRenderer, tmp_path: Path):
        generator = _DemoGenerator(
            _Config(skip_git=True, skip_install=True), renderer=demo_renderer
        )
        result = GenerationResult(project_root=tmp_path)
        with patch(
            "serverless_scaffold.scaffolder.base.run_command", new=AsyncMock()
        ) as run:
            await generator.post_generate(tmp_path, result)
        run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_combines_both(self, demo_generator: _DemoGenerator, output_dir: Path):
        with patch(
            "serverless_scaffold.scaffolder.base.run_command",
            new=AsyncMock(return_value=(0, "", "")),
        ) as run:
            result = await demo_generator.run()
        assert (output_dir / "demo" / "README.md").is_file()
        assert run.await_count == 4
        assert result.warnings == []
