"""Base image classification for .NET projects.

The base image picks the tooling generation the project is built with:

- RC1 (``aspnet:1.0.0-rc1-update1``): DNX tooling, ``project.json`` holds a
  ``web`` command that starts Kestrel.
- RC2 (``dotnet:1.0.0-preview1``): dotnet CLI tooling, ``Program.cs`` sets
  the listen address through ``.UseUrls(...)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Port the application listens on inside the container
CONTAINER_PORT = 80

IMAGE_NAMESPACE = "microsoft"

KNOWN_BASE_IMAGES = [
    "dotnet:1.0.0-preview1",
    "aspnet:1.0.0-rc1-update1",
]


class DotNetFlavor(Enum):
    """Tooling generation selected by the base image."""

    RC1 = "rc1"
    RC2 = "rc2"


@dataclass(frozen=True)
class BaseImage:
    """A base image name plus everything the templates derive from it."""

    name: str

    @property
    def flavor(self) -> DotNetFlavor:
        return detect_flavor(self.name)

    @property
    def is_rc1(self) -> bool:
        return self.flavor == DotNetFlavor.RC1

    @property
    def reference(self) -> str:
        """Full image reference for the FROM line."""
        if "/" in self.name:
            return self.name
        return f"{IMAGE_NAMESPACE}/{self.name}"

    @property
    def supports_remote_debugging(self) -> bool:
        """Only the dotnet CLI images can host the clrdbg debugger."""
        return self.flavor == DotNetFlavor.RC2

    @property
    def restore_command(self) -> list[str]:
        if self.is_rc1:
            return ["dnu", "restore"]
        return ["dotnet", "restore"]

    def build_command(self, configuration: str) -> list[str] | None:
        """Compile step, or None when the runtime compiles on start (DNX)."""
        if self.is_rc1:
            return None
        return ["dotnet", "build", "-c", configuration]

    def run_command(self, configuration: str) -> list[str]:
        if self.is_rc1:
            return ["dnx", "-p", "project.json", "web"]
        return ["dotnet", "run", "-c", configuration]


def detect_flavor(base_image: str) -> DotNetFlavor:
    """Classify a base image name.

    Args:
        base_image: Image name such as ``aspnet:1.0.0-rc1-update1``.

    Returns:
        DotNetFlavor.RC1 for DNX images, DotNetFlavor.RC2 otherwise.
    """
    if "rc1" in base_image.lower():
        return DotNetFlavor.RC1
    return DotNetFlavor.RC2
