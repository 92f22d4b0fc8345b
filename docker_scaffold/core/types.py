"""Shared data structures and error types for docker-scaffold."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from docker_scaffold.helpers.helpers_logging import print_error

# Host port mapped onto the container when none is chosen
DEFAULT_PORT = 5000

SUPPORTED_PROJECT_TYPES = ("dotnet",)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


class PatchReason(Enum):
    """Why a patch step ended the way it did."""

    PATCHED = "patched"
    ALREADY_PRESENT = "already-present"
    MISSING = "missing"
    NO_ANCHOR = "no-anchor"


@dataclass
class PatchResult:
    """Outcome of patching one project file.

    Attributes:
        path: File that was inspected.
        reason: What happened to it.
        backup_path: Backup written in this run, if any.
    """

    path: Path
    reason: PatchReason
    backup_path: Path | None = None

    @property
    def changed(self) -> bool:
        """True when the file was rewritten."""
        return self.reason == PatchReason.PATCHED


@dataclass
class ScaffoldOptions:
    """Answers driving one generation run.

    Attributes:
        base_image: Base image without the ``microsoft/`` namespace
            (e.g. ``dotnet:1.0.0-preview1``).
        image_name: Name of the image being built.
        target_dir: Directory receiving the artifacts.
        project_type: Only ``dotnet`` is supported.
        port: Host port published for the container.
        force: Overwrite artifacts that already exist.
        patch: Patch project.json / Program.cs for the container port.
    """

    base_image: str
    image_name: str
    target_dir: Path
    project_type: str = "dotnet"
    port: int = DEFAULT_PORT
    force: bool = False
    patch: bool = True

    @property
    def is_web_project(self) -> bool:
        """.NET projects are always scaffolded as web projects."""
        return self.project_type == "dotnet"


@dataclass
class GenerationResult:
    """Files touched by a generation run."""

    created: list[Path] = field(default_factory=list[Path])
    skipped: list[Path] = field(default_factory=list[Path])
    updated: list[Path] = field(default_factory=list[Path])
    patches: list[PatchResult] = field(default_factory=list[PatchResult])

    @property
    def backups(self) -> list[Path]:
        """Backups written by the patch step."""
        return [p.backup_path for p in self.patches if p.backup_path is not None]


# ---------------------------------------------------------------------------
# Error types
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Base error for problems the CLI reports without a traceback."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def print_error(self) -> None:
        """Print the error message using the logging helper."""
        print_error(self.message)


class InvalidOptionError(ScaffoldError):
    """An answer (project type, port, image name) is not usable."""


class ManifestFormatError(ScaffoldError):
    """A project file is not UTF-8 text, or project.json is not a JSON object."""
