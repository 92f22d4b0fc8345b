"""VS Code tasks.json creation and merging for the task scripts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import cast

from docker_scaffold.core.base_image import BaseImage
from docker_scaffold.helpers.helpers_logging import (
    print_skipped,
    print_success,
    print_warning,
)

TASKS_VERSION = "0.1.0"

# Type definitions for tasks.json structure
TaskEntry = dict[str, object]
TasksDocument = dict[str, object]


def _task(name: str, environment: str, **extra: object) -> TaskEntry:
    task: TaskEntry = {"taskName": name, "args": [name, environment]}
    task.update(extra)
    return task


def create_vscode_tasks(base_image: BaseImage) -> TasksDocument:
    """Create .vscode/tasks.json content calling dockerTask scripts.

    Returns:
        Dictionary ready for JSON serialization.

    Tasks included:
        - build: docker-compose build (debug)
        - compose: docker-compose up, bound as the editor's build command
        - composeForDebug / startDebugging: remote debugging (dotnet CLI images)
        - clean: remove containers and images
    """
    tasks: list[TaskEntry] = [
        _task("build", "debug"),
        _task("compose", "debug", isBuildCommand=True),
    ]
    if base_image.supports_remote_debugging:
        tasks.append(_task("composeForDebug", "debug"))
        tasks.append({"taskName": "startDebugging", "args": ["startDebugging"]})
    tasks.append(_task("clean", "debug"))

    return {
        "version": TASKS_VERSION,
        "windows": {
            "command": "powershell",
            "args": ["-ExecutionPolicy", "RemoteSigned", ".\\dockerTask.ps1"],
        },
        "osx": {
            "command": "/bin/bash",
            "args": ["./dockerTask.sh"],
        },
        "linux": {
            "command": "/bin/bash",
            "args": ["./dockerTask.sh"],
        },
        "isShellCommand": True,
        "showOutput": "always",
        "suppressTaskName": True,
        "tasks": tasks,
    }


def merge_vscode_tasks(existing: TasksDocument, new: TasksDocument) -> list[str]:
    """Merge new tasks.json content into existing content in place.

    Existing keys and tasks win. Missing top-level keys are added, and
    tasks are matched by ``taskName``.

    Returns:
        Names of what was added (top-level keys and task names).
    """
    added: list[str] = []

    for key, value in new.items():
        if key == "tasks":
            continue
        if key not in existing:
            existing[key] = value
            added.append(key)

    existing_tasks = existing.setdefault("tasks", [])
    if not isinstance(existing_tasks, list):
        return added

    task_list = cast(list[object], existing_tasks)
    known = {
        cast(dict[str, object], t).get("taskName")
        for t in task_list
        if isinstance(t, dict)
    }
    for task in cast(list[TaskEntry], new.get("tasks", [])):
        name = task.get("taskName")
        if name not in known:
            task_list.append(task)
            added.append(f"tasks.{name}")

    return added


def write_vscode_tasks(target_dir: Path, base_image: BaseImage) -> tuple[Path, bool]:
    """Create or merge .vscode/tasks.json.

    Args:
        target_dir: Project directory
        base_image: Selected base image

    Returns:
        Tuple of (tasks.json path, whether the file was written).
    """
    tasks_path = target_dir / ".vscode" / "tasks.json"
    tasks_path.parent.mkdir(parents=True, exist_ok=True)
    new_tasks = create_vscode_tasks(base_image)

    if not tasks_path.exists():
        tasks_path.write_text(json.dumps(new_tasks, indent=4) + "\n", encoding="utf-8")
        print_success("Created file: .vscode/tasks.json")
        return tasks_path, True

    try:
        existing: object = json.loads(tasks_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        print_warning("Could not parse .vscode/tasks.json, skipping")
        return tasks_path, False

    if not isinstance(existing, dict):
        print_warning(".vscode/tasks.json is not a JSON object, skipping")
        return tasks_path, False

    existing_doc = cast(TasksDocument, existing)
    added = merge_vscode_tasks(existing_doc, new_tasks)
    if not added:
        print_skipped(".vscode/tasks.json already up to date")
        return tasks_path, False

    tasks_path.write_text(json.dumps(existing_doc, indent=4) + "\n", encoding="utf-8")
    for name in added:
        print_success(f"Added to .vscode/tasks.json: {name}")
    return tasks_path, True
