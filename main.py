"""MCP server exposing read-only views over spec task documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from specflow.config import Settings
from specflow.context import is_valid_task_id
from specflow.errors import BugNotFoundError, SpecNotFoundError
from specflow.models import TaskMode
from specflow.specflow_logging import setup_logging
from specflow.workspace import Workspace

mcp = FastMCP("specflow")


def _candidate_bases() -> List[Path]:
    cwd = Path.cwd().resolve()
    bases: List[Path] = [cwd]
    bases.extend(cwd.parents)
    seen: set[Path] = set()
    ordered: List[Path] = []
    for base in bases:
        if base not in seen:
            seen.add(base)
            ordered.append(base)
    return ordered


def _locate_workspace_root(settings: Settings) -> Optional[Path]:
    for base in _candidate_bases():
        if (base / settings.specs_dir).is_dir():
            return base
    return None


def _resolve_root(root: Optional[str], settings: Settings) -> Path:
    if root:
        resolved = Path(root).expanduser().resolve()
        if not resolved.exists():
            raise ValueError(f"Provided root '{root}' does not exist.")
        return resolved

    if settings.project_root:
        env_path = settings.project_root.resolve()
        if not env_path.exists():
            raise ValueError(
                f"Environment variable SPECFLOW_PROJECT_ROOT points to '{settings.project_root}', which does not exist."
            )
        return env_path

    detected_root = _locate_workspace_root(settings)
    if detected_root:
        return detected_root

    raise ValueError(
        "Unable to determine project root automatically. Provide the 'root' argument when calling the tool "
        "or set the SPECFLOW_PROJECT_ROOT environment variable."
    )


def _workspace(root: Optional[str]) -> Workspace:
    settings = Settings.from_env()
    return Workspace(_resolve_root(root, settings), settings)


def _missing_spec(error: SpecNotFoundError) -> ValueError:
    return ValueError(f"{error}. Call list_specs to see the specs available in this project.")


def _missing_bug(error: BugNotFoundError) -> ValueError:
    return ValueError(f"{error}. Call list_bugs to see the bugs recorded in this project.")


@mcp.tool()
def list_specs(root: Optional[str] = None) -> Dict[str, Any]:
    """Enumerate specs and which of their documents exist."""

    workspace = _workspace(root)
    return {"specs": [spec.to_dict() for spec in workspace.list_specs()]}


@mcp.resource("specflow://specs")
def resource_specs() -> str:
    """Resource view listing specs and their task documents."""

    try:
        workspace = _workspace(None)
    except ValueError:
        return "No project root detected. Launch tools with a 'root' argument or set SPECFLOW_PROJECT_ROOT."

    specs = workspace.list_specs()
    bugs = workspace.list_bugs()
    if not specs and not bugs:
        return "No specs found."

    lines = ["Specs"]
    for spec in specs:
        lines.append("")
        lines.append(f"- {spec.name}")
        if spec.tasks.exists:
            lines.append(f"  Tasks: {spec.tasks.path}")
        missing = spec.missing_documents()
        if missing:
            lines.append(f"  Missing: {', '.join(missing)}")

    if bugs:
        lines.append("")
        lines.append("Bugs")
        for bug in bugs:
            lines.append(f"- {bug.name}")

    return "\n".join(lines)


@mcp.tool()
def get_tasks(
    spec_name: str,
    mode: str = TaskMode.FULL_TASKS.value,
    task_id: Optional[str] = None,
    include_content: bool = True,
    with_templates: bool = False,
    root: Optional[str] = None,
) -> Dict[str, Any]:
    """Load a spec with its tasks in one of three modes.

    Modes:
    - 'full_tasks': every task plus the progress summary (default)
    - 'task_summary': the progress summary only
    - 'single_task': one task (requires task_id) with its parent, sibling counts and neighbours

    With with_templates the requirements, design and tasks templates from
    .claude/templates are included when present.

    The tasks document is re-read on every call, so manual edits are always reflected."""

    workspace = _workspace(root)
    try:
        return workspace.load_spec(spec_name, mode, task_id, include_content, with_templates)
    except SpecNotFoundError as e:
        raise _missing_spec(e) from e


@mcp.tool()
def get_task(spec_name: str, task_id: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Retrieve a single task by dotted id (e.g. '2.1') together with its local context."""

    result = get_tasks(spec_name, TaskMode.SINGLE_TASK.value, task_id, include_content=False, root=root)
    tasks = result["tasks"]
    if tasks is None:
        raise ValueError(f"No tasks.md found for spec '{spec_name}'.")
    return {"spec": spec_name, **tasks["content"]}


@mcp.tool()
def task_summary(spec_name: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Report task counts, completion percentage and the recommended next task."""

    result = get_tasks(spec_name, TaskMode.TASK_SUMMARY.value, include_content=False, root=root)
    tasks = result["tasks"]
    if tasks is None:
        raise ValueError(f"No tasks.md found for spec '{spec_name}'.")
    return {"spec": spec_name, "summary": tasks["content"]}


@mcp.tool()
def next_task(spec_name: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Retrieve the single next task to work on, honouring parent and sibling order."""

    workspace = _workspace(root)
    try:
        return workspace.next_task(spec_name)
    except SpecNotFoundError as e:
        raise _missing_spec(e) from e


@mcp.tool()
def execution_status(spec_name: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Report whether work is ready to execute, or why not."""

    workspace = _workspace(root)
    try:
        return workspace.execution_status(spec_name)
    except SpecNotFoundError as e:
        raise _missing_spec(e) from e


@mcp.tool()
def list_bugs(root: Optional[str] = None) -> Dict[str, Any]:
    """Enumerate bug fixes under .claude/bugs and which of their documents exist."""

    workspace = _workspace(root)
    return {"bugs": [bug.to_dict() for bug in workspace.list_bugs()]}


@mcp.tool()
def get_bug(bug_name: str, include_content: bool = True, root: Optional[str] = None) -> Dict[str, Any]:
    """Load a bug's report, analysis and verification documents."""

    workspace = _workspace(root)
    try:
        return workspace.load_bug(bug_name, include_content)
    except BugNotFoundError as e:
        raise _missing_bug(e) from e


@mcp.tool()
def get_steering(include_content: bool = True, root: Optional[str] = None) -> Dict[str, Any]:
    """Load the product, tech and structure steering documents."""

    workspace = _workspace(root)
    return workspace.steering(include_content).to_dict()


@mcp.tool()
def check_task_id(task_id: str) -> Dict[str, Any]:
    """Check that a task id has the dotted numeric form (1, 2.1, 3.2.1)."""

    valid = is_valid_task_id(task_id)
    return {
        "task_id": task_id,
        "valid": valid,
        "message": "Valid task ID" if valid else "Task ID should be in format: 1, 2.1, 3.2.1, etc.",
    }


def run() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run()
