"""Shared fixtures for the docker-scaffold tests.

Provides ``project_dir`` (an isolated working directory) plus writers for
the two project files the patcher understands.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from docker_scaffold.core.types import ScaffoldOptions
from tests._samples import EF_COMMAND, PROGRAM_CS, RC2_IMAGE

ProjectJsonWriter = Callable[..., Path]
ProgramCsWriter = Callable[..., Path]
OptionsFactory = Callable[..., ScaffoldOptions]


@pytest.fixture()
def project_dir(tmp_path: Path) -> Iterator[Path]:
    """Create an isolated project directory and cd into it.

    Yields:
        Path to the temporary project root.
    """
    project = tmp_path / "WebApplication1"
    project.mkdir()
    original_cwd = Path.cwd()
    os.chdir(project)
    try:
        yield project
    finally:
        os.chdir(original_cwd)


@pytest.fixture()
def write_project_json(project_dir: Path) -> ProjectJsonWriter:
    """Return a writer for project.json with an 'ef' and optional 'web' command."""

    def _write(web_command: str | None = None) -> Path:
        commands = {"ef": EF_COMMAND}
        if web_command is not None:
            commands["web"] = web_command
        data = {"commands": commands}
        path = project_dir / "project.json"
        path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def write_program_cs(project_dir: Path) -> ProgramCsWriter:
    """Return a writer for Program.cs (defaults to a file without UseUrls)."""

    def _write(content: str = PROGRAM_CS) -> Path:
        path = project_dir / "Program.cs"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def make_options(project_dir: Path) -> OptionsFactory:
    """Return a ScaffoldOptions factory targeting ``project_dir``."""

    def _make(**overrides: object) -> ScaffoldOptions:
        values: dict[str, object] = {
            "base_image": RC2_IMAGE,
            "image_name": "testimagename",
            "target_dir": project_dir,
        }
        values.update(overrides)
        return ScaffoldOptions(**values)  # type: ignore[arg-type]

    return _make
