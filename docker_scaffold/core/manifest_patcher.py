"""Make an existing .NET project listen on the container port.

RC1 projects get a ``web`` command in ``project.json``; RC2 projects get a
``.UseUrls(...)`` call in ``Program.cs``. A file that already carries its own
directive is never touched. Before a file is rewritten its original is
copied to ``<name>.backup``.

The content functions are pure and return ``(new_content, changed)``;
``patch_file`` owns the filesystem side effects.

Usage:
    >>> from docker_scaffold.core.manifest_patcher import patch_project
    >>> results = patch_project(Path("."), "aspnet:1.0.0-rc1-update1")
"""

from __future__ import annotations

import codecs
import json
import os
import re
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, cast

from docker_scaffold.core.base_image import CONTAINER_PORT, DotNetFlavor, detect_flavor
from docker_scaffold.core.types import ManifestFormatError, PatchReason, PatchResult
from docker_scaffold.helpers.helpers_logging import (
    print_skipped,
    print_success,
    print_warning,
)

PROJECT_JSON = "project.json"
PROGRAM_CS = "Program.cs"
BACKUP_SUFFIX = ".backup"

KESTREL_SERVER = "Microsoft.AspNet.Server.Kestrel"

# Marker of an existing listen-address call in Program.cs
USE_URLS_MARKER = ".UseUrls("

_BUILDER_RE = re.compile(
    r"new\s+WebHostBuilder\s*\(\s*\)"
    r"|WebHost\s*\.\s*CreateDefaultBuilder\s*\([^()]*\)"
)
_NEXT_CALL_RE = re.compile(r"[ \t]*(\r?\n)([ \t]*)\.")

ContentPatch = Callable[[str], tuple[str, bool]]


def web_command(port: int = CONTAINER_PORT) -> str:
    """Kestrel command binding all interfaces on ``port``."""
    return f"{KESTREL_SERVER} --server.urls http://*:{port}"


def use_urls_call(port: int = CONTAINER_PORT) -> str:
    """Fluent call binding all interfaces on ``port``."""
    return f'.UseUrls("http://*:{port}")'


# ---------------------------------------------------------------------------
# Content patches
# ---------------------------------------------------------------------------


def patch_project_json_content(
    content: str,
    port: int = CONTAINER_PORT,
) -> tuple[str, bool]:
    """Add a ``web`` command to project.json content when it has none.

    Args:
        content: Current project.json text.
        port: Port the web command binds.

    Returns:
        Tuple of (content, changed). Content is returned unchanged when a
        ``web`` command already exists.

    Raises:
        ManifestFormatError: If content is not a JSON object or its
            ``commands`` entry is not an object.
    """
    bom = "\ufeff" if content.startswith("\ufeff") else ""
    try:
        raw: object = json.loads(content[len(bom):])
    except json.JSONDecodeError as e:
        raise ManifestFormatError(f"{PROJECT_JSON} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ManifestFormatError(f"{PROJECT_JSON} must contain a JSON object")
    data = cast(dict[str, Any], raw)

    commands: object = data.setdefault("commands", {})
    if not isinstance(commands, dict):
        raise ManifestFormatError(f"'commands' in {PROJECT_JSON} must be an object")
    if "web" in commands:
        return content, False

    cast(dict[str, Any], commands)["web"] = web_command(port)
    patched = bom + json.dumps(data, indent=4, ensure_ascii=False)
    if content.endswith("\n"):
        patched += "\n"
    return patched, True


def patch_program_cs_content(
    content: str,
    port: int = CONTAINER_PORT,
) -> tuple[str, bool]:
    """Insert a ``.UseUrls(...)`` call after the host builder construction.

    Args:
        content: Current Program.cs text.
        port: Port the inserted call binds.

    Returns:
        Tuple of (content, changed). Unchanged when the file already calls
        UseUrls or has no recognizable host builder.
    """
    if USE_URLS_MARKER in content:
        return content, False

    match = _BUILDER_RE.search(content)
    if match is None:
        return content, False

    end = match.end()
    call = use_urls_call(port)
    next_call = _NEXT_CALL_RE.match(content, end)
    if next_call is not None:
        newline, indent = next_call.group(1), next_call.group(2)
        insertion = f"{newline}{indent}{call}"
    else:
        insertion = call

    return content[:end] + insertion + content[end:], True


# ---------------------------------------------------------------------------
# File operations
# ---------------------------------------------------------------------------


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def program_cs_unchanged_reason(content: str) -> PatchReason:
    """Why ``patch_program_cs_content`` left content alone."""
    if USE_URLS_MARKER in content:
        return PatchReason.ALREADY_PRESENT
    return PatchReason.NO_ANCHOR


def _read_text(path: Path) -> tuple[str, bool]:
    """Read a project file as UTF-8, keeping line endings.

    Returns:
        Tuple of (text, had_bom). A leading byte order mark is stripped.

    Raises:
        ManifestFormatError: If the file is not valid UTF-8.
    """
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ManifestFormatError(f"{path.name} is not UTF-8 encoded: {e}") from e
    return text, raw.startswith(codecs.BOM_UTF8)


def _write_atomic(path: Path, content: str, bom: bool = False) -> None:
    """Write content to a sibling temp file, then rename it over path."""
    encoding = "utf-8-sig" if bom else "utf-8"
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(content)
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def patch_file(
    path: Path,
    content_patch: ContentPatch,
    unchanged_reason: Callable[[str], PatchReason] | None = None,
) -> PatchResult:
    """Apply a content patch to a file, backing up the original first.

    The file is read once. A UTF-8 byte order mark is hidden from the
    content patch and written back if the original had one. An existing
    backup is kept as is so the earliest original survives.

    Args:
        path: File to patch.
        content_patch: Function returning (new_content, changed).
        unchanged_reason: Classifies content the patch left alone
            (ALREADY_PRESENT when omitted).

    Returns:
        PatchResult describing the outcome.

    Raises:
        FileNotFoundError: If path does not exist.
        ManifestFormatError: If the file is not UTF-8 or the content patch
            rejects it.
    """
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    original, had_bom = _read_text(path)
    patched, changed = content_patch(original)
    if not changed:
        reason = PatchReason.ALREADY_PRESENT
        if unchanged_reason is not None:
            reason = unchanged_reason(original)
        return PatchResult(path=path, reason=reason)

    backup = backup_path_for(path)
    backup_written: Path | None = None
    if not backup.exists():
        shutil.copy2(path, backup)
        backup_written = backup
        print_success(f"Backed up {path.name} to {backup.name}")

    _write_atomic(path, patched, bom=had_bom)
    return PatchResult(path=path, reason=PatchReason.PATCHED, backup_path=backup_written)


def patch_project_json(path: Path, port: int = CONTAINER_PORT) -> PatchResult:
    """Ensure project.json has a ``web`` command."""
    result = patch_file(path, lambda content: patch_project_json_content(content, port))
    if result.changed:
        print_success(f"Added 'web' command to {path.name}")
    else:
        print_skipped(f"{path.name} already has a 'web' command")
    return result


def patch_program_cs(path: Path, port: int = CONTAINER_PORT) -> PatchResult:
    """Ensure Program.cs binds the host to all interfaces."""
    result = patch_file(
        path,
        lambda content: patch_program_cs_content(content, port),
        program_cs_unchanged_reason,
    )
    if result.reason == PatchReason.PATCHED:
        print_success(f"Added {use_urls_call(port)} to {path.name}")
    elif result.reason == PatchReason.ALREADY_PRESENT:
        print_skipped(f"{path.name} already calls UseUrls")
    else:
        print_warning(
            f"No WebHostBuilder found in {path.name}; "
            + f"add {use_urls_call(port)} to the host builder manually"
        )
    return result


def patch_project(
    target_dir: Path,
    base_image: str,
    port: int = CONTAINER_PORT,
) -> list[PatchResult]:
    """Patch the project file matching the base image's tooling flavor.

    Missing files are skipped silently.

    Args:
        target_dir: Project directory.
        base_image: Base image name; selects project.json (RC1) or
            Program.cs (RC2).
        port: Container port to bind.

    Returns:
        One PatchResult for the file that applies to the flavor.
    """
    if detect_flavor(base_image) == DotNetFlavor.RC1:
        path = target_dir / PROJECT_JSON
        patcher = patch_project_json
    else:
        path = target_dir / PROGRAM_CS
        patcher = patch_program_cs

    if not path.is_file():
        return [PatchResult(path=path, reason=PatchReason.MISSING)]

    return [patcher(path, port)]
