#!/usr/bin/env python3
"""
Generate Docker files for a .NET project.

Creates Dockerfile, Dockerfile.debug, docker-compose.yml,
docker-compose.debug.yml, dockerTask.sh, dockerTask.ps1 and
.vscode/tasks.json, then makes project.json (RC1 images) or Program.cs
(RC2 images) listen on the container port.

Usage:
    # RC2 project in the current directory
    docker-scaffold generate --base-image dotnet:1.0.0-preview1 --image-name webapp

    # RC1 project elsewhere, publishing port 8080, no prompts
    docker-scaffold generate ../WebApp \\
        --base-image aspnet:1.0.0-rc1-update1 \\
        --port 8080 \\
        --yes

    # Reuse answers saved by a previous run
    docker-scaffold generate --save-config
"""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

# When executed directly, ensure the project root is on sys.path
if __package__ in (None, ""):
    project_root = Path(__file__).resolve().parents[2]
    sys.path.insert(0, str(project_root))

from docker_scaffold.core.base_image import KNOWN_BASE_IMAGES
from docker_scaffold.core.project_generator import generate_project
from docker_scaffold.core.types import DEFAULT_PORT, GenerationResult, ScaffoldError
from docker_scaffold.helpers.helpers_logging import (
    Colors,
    print_error,
    print_info,
    print_success,
)
from docker_scaffold.helpers.scaffold_config import (
    build_options,
    default_image_name,
    load_answers,
    resolve_config_path,
    save_answers,
)

Prompt = Callable[[str], str]


class GenerateArgumentParser(argparse.ArgumentParser):
    """Argument parser that points at the quick-start examples on errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        print(f"\n{Colors.RED}❌ {message}{Colors.RESET}\n")
        print(f"{Colors.YELLOW}💡 Quick start examples:{Colors.RESET}")
        print(f"  {Colors.GREEN}docker-scaffold generate --base-image dotnet:1.0.0-preview1{Colors.RESET}")
        print(f"  {Colors.GREEN}docker-scaffold generate --base-image aspnet:1.0.0-rc1-update1 --yes{Colors.RESET}")
        sys.exit(2)


def _flag_answers(args: argparse.Namespace) -> dict[str, object]:
    """Answers given on the command line."""
    flags = {
        "project_type": args.project_type,
        "base_image": args.base_image,
        "port": args.port,
        "image_name": args.image_name,
    }
    return {key: value for key, value in flags.items() if value is not None}


def _ask(prompt: Prompt, question: str, default: str) -> str:
    response = prompt(f"{question} [{default}]: ").strip()
    return response or default


def prompt_missing_answers(
    answers: dict[str, object],
    target_dir: Path,
    prompt: Prompt = input,
) -> dict[str, object]:
    """Ask for every answer not already known.

    Args:
        answers: Answers from flags and the answers file
        target_dir: Project directory (used for the default image name)
        prompt: Input function (``input`` by default)

    Returns:
        New dict with prompted answers filled in.
    """
    merged = dict(answers)

    if "project_type" not in merged:
        merged["project_type"] = _ask(prompt, "❓ Project type", "dotnet")

    if "base_image" not in merged:
        print_info("Available base images:")
        for index, image in enumerate(KNOWN_BASE_IMAGES, start=1):
            print_info(f"  {index}. {image}")
        choice = _ask(prompt, "❓ Base image (number or name)", KNOWN_BASE_IMAGES[0])
        if choice.isdigit() and 1 <= int(choice) <= len(KNOWN_BASE_IMAGES):
            choice = KNOWN_BASE_IMAGES[int(choice) - 1]
        merged["base_image"] = choice

    if "port" not in merged:
        merged["port"] = _ask(prompt, "❓ Port to publish", str(DEFAULT_PORT))

    if "image_name" not in merged:
        merged["image_name"] = _ask(prompt, "❓ Image name", default_image_name(target_dir))

    return merged


def _print_summary(result: GenerationResult) -> None:
    print_info(
        f"\nCreated {len(result.created)}, updated {len(result.updated)}, "
        + f"skipped {len(result.skipped)} file(s)"
    )
    for backup in result.backups:
        print_info(f"   Original kept as {backup.name}")


def main() -> int:
    """Main entry point for generate command."""
    parser = GenerateArgumentParser(
        prog="docker-scaffold generate",
        description="Generate Docker files for a .NET project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docker-scaffold generate --base-image dotnet:1.0.0-preview1 --image-name webapp
  docker-scaffold generate ../WebApp --base-image aspnet:1.0.0-rc1-update1 --yes

Base images:
  dotnet:*   dotnet CLI tooling, patches Program.cs with .UseUrls("http://*:80")
  aspnet:*rc1*   DNX tooling, adds a 'web' command to project.json
        """,
    )

    parser.add_argument(
        "target_dir",
        nargs="?",
        default=".",
        help="Project directory (default: current directory)",
    )
    parser.add_argument("--project-type", help="Project type (only 'dotnet' is supported)")
    parser.add_argument("--base-image", help="Base image, e.g. dotnet:1.0.0-preview1")
    parser.add_argument("--port", help=f"Host port to publish (default: {DEFAULT_PORT})")
    parser.add_argument("--image-name", help="Image name (default: directory name)")
    parser.add_argument(
        "--config",
        type=Path,
        help="Answers file (default: <target_dir>/docker-scaffold.yaml)",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Save the answers to the answers file for the next run",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite generated files that already exist",
    )
    parser.add_argument(
        "--no-patch",
        action="store_true",
        help="Do not modify project.json or Program.cs",
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Never prompt; use defaults for missing answers",
    )

    args = parser.parse_args()

    target_dir = Path(args.target_dir).resolve()
    if not target_dir.is_dir():
        print_error(f"Target directory does not exist: {target_dir}")
        return 1

    config_path = resolve_config_path(target_dir, args.config)

    try:
        answers = load_answers(config_path)
        answers.update(_flag_answers(args))

        if not args.yes and sys.stdin.isatty():
            answers = prompt_missing_answers(answers, target_dir)

        options = build_options(
            target_dir,
            answers,
            force=args.force,
            patch=not args.no_patch,
        )
        result = generate_project(options)

        if args.save_config:
            save_answers(config_path, options)
            print_success(f"Saved answers to {config_path}")
    except ScaffoldError as e:
        e.print_error()
        return 1
    except OSError as e:
        print_error(f"Could not write files: {e}")
        return 1

    _print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
