"""Unit tests for .vscode/tasks.json creation and merging."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docker_scaffold.core.base_image import BaseImage
from docker_scaffold.core.vscode_tasks import (
    create_vscode_tasks,
    merge_vscode_tasks,
    write_vscode_tasks,
)
from tests._samples import RC1_IMAGE, RC2_IMAGE


def _task_names(document: dict[str, object]) -> list[object]:
    tasks = document["tasks"]
    assert isinstance(tasks, list)
    return [task["taskName"] for task in tasks]


def test_rc2_tasks_include_debugging() -> None:
    document = create_vscode_tasks(BaseImage(RC2_IMAGE))

    assert document["version"] == "0.1.0"
    assert _task_names(document) == [
        "build", "compose", "composeForDebug", "startDebugging", "clean",
    ]


def test_rc1_tasks_skip_debugging() -> None:
    document = create_vscode_tasks(BaseImage(RC1_IMAGE))

    assert _task_names(document) == ["build", "compose", "clean"]


def test_compose_is_the_build_command() -> None:
    document = create_vscode_tasks(BaseImage(RC2_IMAGE))

    tasks = document["tasks"]
    assert isinstance(tasks, list)
    build_commands = [t["taskName"] for t in tasks if t.get("isBuildCommand")]
    assert build_commands == ["compose"]


def test_scripts_per_platform() -> None:
    document = create_vscode_tasks(BaseImage(RC2_IMAGE))

    assert document["windows"] == {
        "command": "powershell",
        "args": ["-ExecutionPolicy", "RemoteSigned", ".\\dockerTask.ps1"],
    }
    assert document["linux"] == {"command": "/bin/bash", "args": ["./dockerTask.sh"]}
    assert document["osx"] == document["linux"]


def test_merge_keeps_existing_tasks_and_keys() -> None:
    existing: dict[str, object] = {
        "version": "0.1.0",
        "showOutput": "silent",
        "tasks": [{"taskName": "build", "args": ["custom"]}],
    }

    added = merge_vscode_tasks(existing, create_vscode_tasks(BaseImage(RC1_IMAGE)))

    assert existing["showOutput"] == "silent"
    assert existing["tasks"][0] == {"taskName": "build", "args": ["custom"]}  # type: ignore[index]
    assert _task_names(existing) == ["build", "compose", "clean"]
    assert "tasks.compose" in added
    assert "tasks.build" not in added
    assert "windows" in added


class TestWriteVscodeTasks:
    """write_vscode_tasks creates, merges, or leaves tasks.json alone."""

    def test_creates_file(self, project_dir: Path) -> None:
        path, written = write_vscode_tasks(project_dir, BaseImage(RC2_IMAGE))

        assert written is True
        assert path == project_dir / ".vscode" / "tasks.json"
        assert json.loads(path.read_text(encoding="utf-8"))["version"] == "0.1.0"

    def test_up_to_date_file_is_not_rewritten(self, project_dir: Path) -> None:
        path, _written = write_vscode_tasks(project_dir, BaseImage(RC2_IMAGE))
        before = path.read_text(encoding="utf-8")

        _path, written = write_vscode_tasks(project_dir, BaseImage(RC2_IMAGE))

        assert written is False
        assert path.read_text(encoding="utf-8") == before

    def test_unparseable_file_is_left_alone(
        self,
        project_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = project_dir / ".vscode" / "tasks.json"
        path.parent.mkdir()
        path.write_text("// comments are not JSON\n{", encoding="utf-8")

        _path, written = write_vscode_tasks(project_dir, BaseImage(RC2_IMAGE))

        assert written is False
        assert path.read_text(encoding="utf-8") == "// comments are not JSON\n{"
        assert "Could not parse .vscode/tasks.json" in capsys.readouterr().out
