#!/usr/bin/env python3
"""
Make an existing .NET project listen on the container port.

Only touches project.json (RC1 base images) or Program.cs (RC2 base
images); no Docker files are generated.

Usage:
    docker-scaffold patch --base-image aspnet:1.0.0-rc1-update1
    docker-scaffold patch ../WebApp --base-image dotnet:1.0.0-preview1
"""

import argparse
import sys
from pathlib import Path

# When executed directly, ensure the project root is on sys.path
if __package__ in (None, ""):
    project_root = Path(__file__).resolve().parents[2]
    sys.path.insert(0, str(project_root))

from docker_scaffold.core.manifest_patcher import patch_project
from docker_scaffold.core.types import PatchReason, ScaffoldError
from docker_scaffold.helpers.helpers_logging import print_error, print_skipped
from docker_scaffold.helpers.scaffold_config import load_answers, resolve_config_path


def main() -> int:
    """Main entry point for patch command."""
    parser = argparse.ArgumentParser(
        prog="docker-scaffold patch",
        description="Add the container listen address to project.json or Program.cs",
    )
    parser.add_argument(
        "target_dir",
        nargs="?",
        default=".",
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--base-image",
        help="Base image selecting the project style (default: from the answers file)",
    )
    parser.add_argument("--config", type=Path, help="Answers file")

    args = parser.parse_args()

    target_dir = Path(args.target_dir).resolve()
    if not target_dir.is_dir():
        print_error(f"Target directory does not exist: {target_dir}")
        return 1

    try:
        base_image = args.base_image
        if base_image is None:
            answers = load_answers(resolve_config_path(target_dir, args.config))
            base_image = answers.get("base_image")
        if not base_image:
            print_error("Missing --base-image (and no base_image in the answers file)")
            return 1

        results = patch_project(target_dir, str(base_image))
    except ScaffoldError as e:
        e.print_error()
        return 1
    except OSError as e:
        print_error(f"Could not patch project files: {e}")
        return 1

    for result in results:
        if result.reason == PatchReason.MISSING:
            print_skipped(f"{result.path.name} not found, nothing to patch")

    return 0


if __name__ == "__main__":
    sys.exit(main())
