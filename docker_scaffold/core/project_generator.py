"""Generate container artifacts for a .NET project.

One run writes the Dockerfiles, compose files, task scripts and editor
tasks into the target directory, then patches project.json or Program.cs
so the application listens on the container port.

Usage:
    >>> from docker_scaffold.core.project_generator import generate_project
    >>> options = ScaffoldOptions(
    ...     base_image="dotnet:1.0.0-preview1",
    ...     image_name="webapp",
    ...     target_dir=Path("."),
    ... )
    >>> result = generate_project(options)
"""

from __future__ import annotations

import stat
from pathlib import Path

from docker_scaffold.core.base_image import CONTAINER_PORT, BaseImage
from docker_scaffold.core.manifest_patcher import patch_project
from docker_scaffold.core.templates import (
    get_docker_compose_template,
    get_docker_task_ps1_template,
    get_docker_task_sh_template,
    get_dockerfile_debug_template,
    get_dockerfile_template,
)
from docker_scaffold.core.types import (
    SUPPORTED_PROJECT_TYPES,
    GenerationResult,
    InvalidOptionError,
    ScaffoldOptions,
)
from docker_scaffold.core.vscode_tasks import write_vscode_tasks
from docker_scaffold.helpers.helpers_logging import (
    print_header,
    print_info,
    print_skipped,
    print_success,
)

DOCKERFILE_DEBUG = "Dockerfile.debug"
DOCKERFILE = "Dockerfile"
COMPOSE_DEBUG = "docker-compose.debug.yml"
COMPOSE = "docker-compose.yml"
TASK_SH = "dockerTask.sh"
TASK_PS1 = "dockerTask.ps1"
TASKS_JSON = ".vscode/tasks.json"


def render_artifacts(options: ScaffoldOptions) -> dict[str, str]:
    """Render every generated file except tasks.json.

    Returns:
        Mapping of file name (relative to the target directory) to content.
    """
    base_image = BaseImage(options.base_image)
    return {
        DOCKERFILE_DEBUG: get_dockerfile_debug_template(base_image),
        DOCKERFILE: get_dockerfile_template(base_image),
        COMPOSE_DEBUG: get_docker_compose_template(
            options.image_name, options.port, base_image, "debug",
        ),
        COMPOSE: get_docker_compose_template(
            options.image_name, options.port, base_image, "release",
        ),
        TASK_SH: get_docker_task_sh_template(
            options.image_name, options.port, base_image, options.is_web_project,
        ),
        TASK_PS1: get_docker_task_ps1_template(
            options.image_name, options.port, base_image, options.is_web_project,
        ),
    }


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _write_artifact(
    target_dir: Path,
    filename: str,
    content: str,
    force: bool,
    result: GenerationResult,
) -> None:
    """Write one artifact, skipping existing files unless forced."""
    file_path = target_dir / filename
    existed = file_path.exists()

    if existed and not force:
        print_skipped(f"Skipped (exists): {filename}")
        result.skipped.append(file_path)
        return

    # newline="\n" keeps the shell script runnable when generated on Windows
    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(content)

    if existed:
        print_success(f"Overwrote file: {filename}")
        result.updated.append(file_path)
    else:
        print_success(f"Created file: {filename}")
        result.created.append(file_path)


def generate_project(options: ScaffoldOptions) -> GenerationResult:
    """Create container artifacts and patch project files.

    Args:
        options: Validated answers for this run

    Returns:
        GenerationResult listing created, skipped, updated and patched files.

    Raises:
        InvalidOptionError: If the project type is unsupported or the target
            directory does not exist.
        ManifestFormatError: If project.json cannot be parsed.
        OSError: If a file cannot be written.
    """
    if options.project_type not in SUPPORTED_PROJECT_TYPES:
        raise InvalidOptionError(f"Unsupported project type '{options.project_type}'")

    target_dir = options.target_dir
    if not target_dir.is_dir():
        raise InvalidOptionError(f"Target directory does not exist: {target_dir}")

    base_image = BaseImage(options.base_image)
    result = GenerationResult()

    print_header(f"🐳 Generating Docker files for '{options.image_name}'")
    print_info(f"   Base image: {base_image.reference} ({base_image.flavor.value})")

    for filename, content in render_artifacts(options).items():
        _write_artifact(target_dir, filename, content, options.force, result)

    task_sh = target_dir / TASK_SH
    if task_sh in result.created or task_sh in result.updated:
        _make_executable(task_sh)

    tasks_existed = (target_dir / TASKS_JSON).exists()
    tasks_path, tasks_written = write_vscode_tasks(target_dir, base_image)
    if not tasks_written:
        result.skipped.append(tasks_path)
    elif tasks_existed:
        result.updated.append(tasks_path)
    else:
        result.created.append(tasks_path)

    if options.patch:
        result.patches = patch_project(target_dir, options.base_image, CONTAINER_PORT)

    _print_next_steps(options, base_image)
    return result


def _print_next_steps(options: ScaffoldOptions, base_image: BaseImage) -> None:
    """Print next steps after generation."""
    print(f"\n✅ Docker files generated for '{options.image_name}'!")
    print("\n📋 Next steps:")
    print("   1. ./dockerTask.sh build debug        (or .\\dockerTask.ps1 build debug)")
    print("   2. ./dockerTask.sh compose debug")
    if base_image.supports_remote_debugging:
        print("   3. ./dockerTask.sh composeForDebug    (attach with startDebugging)")
    print(f"\n   The site is published on http://localhost:{options.port}")
