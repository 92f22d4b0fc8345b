"""Unit tests for base image classification."""

from __future__ import annotations

import pytest

from docker_scaffold.core.base_image import BaseImage, DotNetFlavor, detect_flavor


@pytest.mark.parametrize(
    ("base_image", "flavor"),
    [
        ("aspnet:1.0.0-rc1-update1", DotNetFlavor.RC1),
        ("aspnet:1.0.0-RC1-final", DotNetFlavor.RC1),
        ("dotnet:1.0.0-preview1", DotNetFlavor.RC2),
        ("dotnet:1.0.0-rc2-core", DotNetFlavor.RC2),
        ("myregistry.io/team/dotnet:latest", DotNetFlavor.RC2),
    ],
)
def test_detect_flavor(base_image: str, flavor: DotNetFlavor) -> None:
    assert detect_flavor(base_image) is flavor


def test_reference_adds_microsoft_namespace() -> None:
    assert BaseImage("dotnet:1.0.0-preview1").reference == "microsoft/dotnet:1.0.0-preview1"


def test_reference_keeps_explicit_namespace() -> None:
    assert BaseImage("myorg/dotnet:custom").reference == "myorg/dotnet:custom"


def test_rc1_commands() -> None:
    image = BaseImage("aspnet:1.0.0-rc1-update1")

    assert image.restore_command == ["dnu", "restore"]
    assert image.build_command("debug") is None
    assert image.run_command("release") == ["dnx", "-p", "project.json", "web"]
    assert image.supports_remote_debugging is False


def test_rc2_commands() -> None:
    image = BaseImage("dotnet:1.0.0-preview1")

    assert image.restore_command == ["dotnet", "restore"]
    assert image.build_command("release") == ["dotnet", "build", "-c", "release"]
    assert image.run_command("debug") == ["dotnet", "run", "-c", "debug"]
    assert image.supports_remote_debugging is True
