#!/usr/bin/env python3
"""docker-scaffold CLI - Main Entry Point.

Usage:
    docker-scaffold <command> [options]

Commands:
    generate             Generate Docker files for a .NET project and patch it
    patch                Only patch project.json / Program.cs for the container port
    help                 Show this help message
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import click

# Minimum number of CLI args (program name + command)
_MIN_ARGS = 2

# Commands dispatched to argparse-based modules
COMMANDS: dict[str, dict[str, str]] = {
    "generate": {
        "module": "docker_scaffold.cli.generate_command",
        "description": "Generate Docker files for a .NET project and patch it",
        "usage": "docker-scaffold generate [dir] --base-image <image> [--port N] [--yes]",
    },
    "patch": {
        "module": "docker_scaffold.cli.patch_command",
        "description": "Only patch project.json / Program.cs for the container port",
        "usage": "docker-scaffold patch [dir] --base-image <image>",
    },
}

COMMAND_ALIASES: dict[str, str] = {
    "gen": "generate",
}


def print_help() -> None:
    """Print help message with all available commands."""
    print(__doc__)
    print(f"📍 Working directory: {Path.cwd()}")

    print("\n📦 Commands:")
    for cmd, info in COMMANDS.items():
        print(f"  {cmd:20} - {info['description']}")
        print(f"  {' ' * 20}   Usage: {info['usage']}")

    print("\n⚡ Aliases:")
    for alias, canonical in COMMAND_ALIASES.items():
        print(f"  {alias:20} - alias for {canonical}")

    print("\n💡 Tip: add --help after a command for all of its options")


def execute_command(command: str, extra_args: list[str]) -> int:
    """Run a command module's ``main`` with its own argv."""
    cmd_info = COMMANDS.get(command)
    if cmd_info is None:
        print(f"❌ Unknown command: {command}")
        print("\nRun 'docker-scaffold help' to see available commands.")
        return 1

    module = importlib.import_module(cmd_info["module"])
    sys.argv = [sys.argv[0], *extra_args]
    try:
        return int(module.main())
    except SystemExit as e:
        # argparse exits on --help and usage errors
        return e.code if isinstance(e.code, int) else 0


@click.group(invoke_without_command=True)
@click.pass_context
def _click_cli(ctx: click.Context) -> int:
    """Top-level command group with passthrough command registration."""
    if ctx.invoked_subcommand is not None:
        return 0

    print_help()
    return 0


def _register_passthrough_command(
    command_name: str,
    description: str,
    target: str | None = None,
) -> None:
    """Register a passthrough click command; argparse parses the options."""

    @click.command(
        name=command_name,
        help=description,
        context_settings={
            "allow_extra_args": True,
            "ignore_unknown_options": True,
        },
        add_help_option=False,
    )
    @click.pass_context
    def _cmd(ctx: click.Context) -> int:
        extra_args: list[str] = list(ctx.args)
        return execute_command(target or command_name, extra_args)

    _click_cli.add_command(_cmd)


def _register_commands() -> None:
    """Register all top-level commands in the click app."""
    for cmd, info in COMMANDS.items():
        _register_passthrough_command(cmd, info["description"])

    for alias, canonical in COMMAND_ALIASES.items():
        _register_passthrough_command(alias, COMMANDS[canonical]["description"], canonical)

    @click.command(name="help", help="Show help message")
    def _help_cmd() -> int:
        print_help()
        return 0

    _click_cli.add_command(_help_cmd)


_register_commands()


def main() -> int:
    """Main CLI entry point."""
    if len(sys.argv) < _MIN_ARGS or sys.argv[1] in ["help", "--help", "-h"]:
        print_help()
        return 0

    try:
        result = _click_cli.main(
            args=sys.argv[1:],
            prog_name="docker-scaffold",
            standalone_mode=False,
        )
    except (click.Abort, KeyboardInterrupt):
        print("\n⚠️  Cancelled by user")
        return 130
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    return 0 if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
