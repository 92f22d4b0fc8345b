"""Shared fixtures for end-to-end CLI tests.

Every CLI test gets an isolated project directory to work in, so tests
never pollute each other or the real workspace.

``run_cli`` invokes the real ``docker-scaffold`` entry point in-process:
``commands.main`` → click passthrough command → argparse subcommand
module → generator. The return code and captured stdout come back
together, much like a ``CompletedProcess``.
"""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from docker_scaffold.cli import commands
from docker_scaffold.helpers.scaffold_config import CONFIG_ENV_VAR

# Type alias for the callable fixture.
RunCli = Callable[..., subprocess.CompletedProcess[str]]


@pytest.fixture()
def isolated_project(tmp_path: Path) -> Iterator[Path]:
    """Create an isolated project directory named like a .NET template.

    Yields:
        Path to the temporary project root (also the working directory).
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
def run_cli(
    isolated_project: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> RunCli:
    """Return a helper that runs ``docker-scaffold <args>``.

    Usage in tests::

        def test_generate(run_cli: RunCli) -> None:
            result = run_cli("generate", "--base-image", "dotnet:1.0.0-preview1", "--yes")
            assert result.returncode == 0

    Returns:
        A callable ``(*args) -> CompletedProcess[str]``.
    """

    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    def _run(*args: str) -> subprocess.CompletedProcess[str]:
        monkeypatch.setattr(sys, "argv", ["docker-scaffold", *args])
        capsys.readouterr()
        returncode = commands.main()
        captured = capsys.readouterr()
        return subprocess.CompletedProcess(
            args=["docker-scaffold", *args],
            returncode=returncode,
            stdout=captured.out,
            stderr=captured.err,
        )

    return _run
