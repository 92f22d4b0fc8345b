"""Unit tests for the one-shot project generation run."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from docker_scaffold.core.project_generator import generate_project, render_artifacts
from docker_scaffold.core.types import InvalidOptionError, PatchReason
from tests._samples import (
    EXISTING_WEB_COMMAND,
    KESTREL_WEB_COMMAND,
    PROGRAM_CS,
    RC1_IMAGE,
    RC2_IMAGE,
    USE_URLS_ALL_INTERFACES,
)

GENERATED_FILES = [
    "Dockerfile.debug",
    "Dockerfile",
    "docker-compose.debug.yml",
    "docker-compose.yml",
    "dockerTask.sh",
    "dockerTask.ps1",
    ".vscode/tasks.json",
]


def _assert_files_exist(project_root: Path, files: list[str]) -> None:
    """Assert that all expected files exist."""
    for file_path in files:
        full_path = project_root / file_path
        assert full_path.is_file(), f"File missing: {file_path}"


class TestGenerateProject:
    """generate_project writes every artifact then patches the project."""

    def test_creates_all_artifacts(self, project_dir: Path, make_options) -> None:
        result = generate_project(make_options())

        _assert_files_exist(project_dir, GENERATED_FILES)
        assert sorted(p.name for p in result.created) == sorted(
            Path(f).name for f in GENERATED_FILES
        )
        assert result.skipped == []

    def test_task_script_is_executable(self, project_dir: Path, make_options) -> None:
        generate_project(make_options())

        assert os.access(project_dir / "dockerTask.sh", os.X_OK)

    def test_rc1_patches_project_json(
        self,
        project_dir: Path,
        make_options,
        write_project_json,
    ) -> None:
        path = write_project_json()
        original = path.read_text(encoding="utf-8")

        result = generate_project(make_options(base_image=RC1_IMAGE))

        assert [p.reason for p in result.patches] == [PatchReason.PATCHED]
        assert result.backups == [project_dir / "project.json.backup"]
        assert KESTREL_WEB_COMMAND in path.read_text(encoding="utf-8")
        assert (project_dir / "project.json.backup").read_text(encoding="utf-8") == original

    def test_rc1_existing_web_command(
        self,
        project_dir: Path,
        make_options,
        write_project_json,
    ) -> None:
        write_project_json(EXISTING_WEB_COMMAND)

        result = generate_project(make_options(base_image=RC1_IMAGE))

        assert result.backups == []
        data = json.loads((project_dir / "project.json").read_text(encoding="utf-8"))
        assert data["commands"]["web"] == EXISTING_WEB_COMMAND

    def test_rc2_patches_program_cs(
        self,
        project_dir: Path,
        make_options,
        write_program_cs,
    ) -> None:
        write_program_cs()

        result = generate_project(make_options())

        assert result.backups == [project_dir / "Program.cs.backup"]
        patched = (project_dir / "Program.cs").read_text(encoding="utf-8")
        assert patched.count(USE_URLS_ALL_INTERFACES) == 1

    def test_no_patch_leaves_project_alone(
        self,
        project_dir: Path,
        make_options,
        write_program_cs,
    ) -> None:
        write_program_cs()

        result = generate_project(make_options(patch=False))

        assert result.patches == []
        assert (project_dir / "Program.cs").read_text(encoding="utf-8") == PROGRAM_CS
        assert not (project_dir / "Program.cs.backup").exists()

    def test_existing_artifacts_are_skipped(self, project_dir: Path, make_options) -> None:
        (project_dir / "Dockerfile").write_text("FROM custom\n", encoding="utf-8")

        result = generate_project(make_options())

        assert project_dir / "Dockerfile" in result.skipped
        assert (project_dir / "Dockerfile").read_text(encoding="utf-8") == "FROM custom\n"

    def test_force_overwrites_artifacts(self, project_dir: Path, make_options) -> None:
        (project_dir / "Dockerfile").write_text("FROM custom\n", encoding="utf-8")

        result = generate_project(make_options(force=True))

        assert project_dir / "Dockerfile" in result.updated
        assert "FROM microsoft/dotnet:1.0.0-preview1" in (project_dir / "Dockerfile").read_text(
            encoding="utf-8",
        )

    def test_second_run_changes_nothing(
        self,
        project_dir: Path,
        make_options,
        write_program_cs,
    ) -> None:
        write_program_cs()
        generate_project(make_options())
        patched = (project_dir / "Program.cs").read_text(encoding="utf-8")

        result = generate_project(make_options())

        assert result.created == []
        assert result.backups == []
        assert (project_dir / "Program.cs").read_text(encoding="utf-8") == patched

    def test_rejects_unsupported_project_type(self, make_options) -> None:
        with pytest.raises(InvalidOptionError):
            generate_project(make_options(project_type="golang"))

    def test_rejects_missing_target_dir(self, project_dir: Path, make_options) -> None:
        with pytest.raises(InvalidOptionError, match="does not exist"):
            generate_project(make_options(target_dir=project_dir / "missing"))


def test_render_artifacts_uses_port_and_image(make_options) -> None:
    artifacts = render_artifacts(make_options(port=8080, image_name="shop"))

    assert '"8080:80"' in artifacts["docker-compose.yml"]
    assert "image: shop:debug" in artifacts["docker-compose.debug.yml"]
    assert "publicPort=8080" in artifacts["dockerTask.sh"]
    assert "$publicPort=8080" in artifacts["dockerTask.ps1"]


@pytest.mark.parametrize("base_image", [RC1_IMAGE, RC2_IMAGE])
def test_containers_listen_where_the_patch_binds(make_options, base_image: str) -> None:
    artifacts = render_artifacts(make_options(base_image=base_image))

    for compose in ("docker-compose.debug.yml", "docker-compose.yml"):
        assert '- "5000:80"' in artifacts[compose]
        assert '"80:80"' not in artifacts[compose]
        assert '"5000:5000"' not in artifacts[compose]
    for dockerfile in ("Dockerfile.debug", "Dockerfile"):
        assert "EXPOSE 80\n" in artifacts[dockerfile]
        assert "EXPOSE 5000" not in artifacts[dockerfile]
