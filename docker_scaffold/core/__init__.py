"""Core generation and patching logic."""

from docker_scaffold.core.manifest_patcher import (
    patch_program_cs_content,
    patch_project,
    patch_project_json_content,
)
from docker_scaffold.core.project_generator import generate_project

__all__ = [
    "generate_project",
    "patch_program_cs_content",
    "patch_project",
    "patch_project_json_content",
]
