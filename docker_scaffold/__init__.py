"""
docker-scaffold

Generates Dockerfiles, Compose files, task scripts and VS Code tasks for
.NET projects, and patches project.json / Program.cs to listen on the
container port.
"""

__version__ = "0.1.0"

from docker_scaffold.core.project_generator import generate_project
from docker_scaffold.core.manifest_patcher import patch_project

__all__ = [
    "generate_project",
    "patch_project",
]
