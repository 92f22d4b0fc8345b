"""Answers file handling and option resolution.

Answers come from, in order of precedence: command-line flags, the answers
file (``docker-scaffold.yaml`` in the target directory, or the path in
``DOCKER_SCAFFOLD_CONFIG``), interactive prompts, then built-in defaults.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import cast

import yaml

from docker_scaffold.core.types import (
    DEFAULT_PORT,
    SUPPORTED_PROJECT_TYPES,
    InvalidOptionError,
    ScaffoldOptions,
)
from docker_scaffold.helpers.yaml_loader import ConfigDict, load_yaml_file, save_yaml_file

CONFIG_FILENAME = "docker-scaffold.yaml"
CONFIG_ENV_VAR = "DOCKER_SCAFFOLD_CONFIG"

ANSWER_KEYS = ("project_type", "base_image", "port", "image_name")

MAX_PORT = 65535

# Docker repository path: lowercase components separated by '/', optional registry host
_IMAGE_NAME_RE = re.compile(
    r"^(?:[a-z0-9.-]+(?::[0-9]+)?/)?"
    r"[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*"
    r"(?:/[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*)*$"
)
_INVALID_NAME_CHARS_RE = re.compile(r"[^a-z0-9]+")


def resolve_config_path(target_dir: Path, explicit: Path | None = None) -> Path:
    """Return the answers file location for a target directory."""
    if explicit is not None:
        return explicit
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return target_dir / CONFIG_FILENAME


def load_answers(config_path: Path) -> dict[str, object]:
    """Load saved answers.

    Args:
        config_path: Answers file path

    Returns:
        Known answer keys found in the file; empty when the file is absent.

    Raises:
        InvalidOptionError: If the file is not a YAML mapping.
    """
    if not config_path.exists():
        return {}

    try:
        raw_data: object = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise InvalidOptionError(f"Could not parse {config_path}: {e}") from e

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise InvalidOptionError(f"{config_path} must contain a mapping of answers")

    data = cast(dict[str, object], raw_data)
    return {key: data[key] for key in ANSWER_KEYS if data.get(key) is not None}


def save_answers(config_path: Path, options: ScaffoldOptions) -> None:
    """Write answers back, keeping unrelated keys and comments."""
    data: ConfigDict = load_yaml_file(config_path) if config_path.exists() else {}
    data["project_type"] = options.project_type
    data["base_image"] = options.base_image
    data["port"] = options.port
    data["image_name"] = options.image_name
    save_yaml_file(data, config_path)


def default_image_name(target_dir: Path) -> str:
    """Image name derived from the project directory name."""
    name = _INVALID_NAME_CHARS_RE.sub("-", target_dir.resolve().name.lower()).strip("-")
    return name or "app"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_project_type(project_type: str) -> str:
    value = project_type.strip().lower()
    if value not in SUPPORTED_PROJECT_TYPES:
        raise InvalidOptionError(
            f"Unsupported project type '{project_type}'. "
            + f"Supported: {', '.join(SUPPORTED_PROJECT_TYPES)}"
        )
    return value


def validate_port(port: object) -> int:
    try:
        value = int(str(port))
    except ValueError as e:
        raise InvalidOptionError(f"Port must be a number, got '{port}'") from e
    if not 1 <= value <= MAX_PORT:
        raise InvalidOptionError(f"Port must be between 1 and {MAX_PORT}, got {value}")
    return value


def validate_image_name(image_name: str) -> str:
    value = image_name.strip()
    if not _IMAGE_NAME_RE.match(value):
        raise InvalidOptionError(
            f"Invalid image name '{image_name}'. "
            + "Use lowercase letters, digits, '.', '_', '-' and '/'"
        )
    return value


def validate_base_image(base_image: str) -> str:
    value = base_image.strip()
    if not value or any(ch.isspace() for ch in value):
        raise InvalidOptionError(f"Invalid base image '{base_image}'")
    return value


def build_options(
    target_dir: Path,
    answers: dict[str, object],
    force: bool = False,
    patch: bool = True,
) -> ScaffoldOptions:
    """Validate merged answers and build ScaffoldOptions.

    Args:
        target_dir: Project directory
        answers: Merged answers; missing keys fall back to defaults
            (except base_image, which is required)
        force: Overwrite existing artifacts
        patch: Run the project file patcher

    Raises:
        InvalidOptionError: If any answer is invalid or base_image is missing.
    """
    base_image = answers.get("base_image")
    if not base_image:
        raise InvalidOptionError("A base image is required (e.g. dotnet:1.0.0-preview1)")

    image_name = answers.get("image_name") or default_image_name(target_dir)

    return ScaffoldOptions(
        project_type=validate_project_type(str(answers.get("project_type") or "dotnet")),
        base_image=validate_base_image(str(base_image)),
        port=validate_port(answers.get("port") or DEFAULT_PORT),
        image_name=validate_image_name(str(image_name)),
        target_dir=target_dir,
        force=force,
        patch=patch,
    )
