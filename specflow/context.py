"""Read modes over a tasks.md snapshot.

Each function takes the document text, parses it once, and derives every
view from that single parse, so the task list, the summary and a single
task's context always agree for the same text. Nothing is cached between
calls; callers re-read the document every time.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Union

from .errors import InvalidTaskIdError
from .extractor import extract_tasks
from .hierarchy import TaskGraph
from .models import TaskContext, TaskInfo, TaskMode
from .recommend import recommend_next_task
from .specflow_logging import log_performance, log_recommendation, log_tasks_parsed
from .summary import summarize

TASK_ID_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)*")


def is_valid_task_id(task_id: object) -> bool:
    return isinstance(task_id, str) and TASK_ID_PATTERN.fullmatch(task_id) is not None


def validate_task_id(task_id: object) -> str:
    """Return ``task_id`` unchanged, or raise :class:`InvalidTaskIdError`."""
    if not is_valid_task_id(task_id):
        raise InvalidTaskIdError(task_id)
    return task_id  # type: ignore[return-value]


@log_performance("parse_tasks")
def parse_graph(text: str, spec_name: Optional[str] = None) -> TaskGraph:
    graph = TaskGraph.build(extract_tasks(text))
    log_tasks_parsed(
        spec_name,
        total=len(graph),
        completed=sum(1 for task in graph.tasks if task.is_completed),
    )
    return graph


def _context_for(graph: TaskGraph, task: TaskInfo, index: int) -> TaskContext:
    siblings = graph.siblings_of(task)
    return TaskContext(
        parent_task=task.parent_task,
        total_tasks=len(graph),
        completed_tasks=sum(1 for t in graph.tasks if t.is_completed),
        next_task=graph.tasks[index + 1].id if index + 1 < len(graph) else None,
        previous_task=graph.tasks[index - 1].id if index > 0 else None,
        sibling_count=len(siblings),
        completed_siblings=sum(1 for sibling in siblings if sibling.is_completed),
    )


def get_task(text: str, task_id: str) -> Optional[TaskInfo]:
    """The first task with ``task_id``, or ``None``."""
    validate_task_id(task_id)
    return parse_graph(text).get(task_id)


def get_task_context(text: str, task_id: str) -> Optional[TaskContext]:
    """Parent, counts and document-order neighbours of a task, or ``None``."""
    validate_task_id(task_id)
    graph = parse_graph(text)
    index = graph.index_of(task_id)
    if index is None:
        return None
    return _context_for(graph, graph.tasks[index], index)


def load_tasks(
    text: str,
    mode: Union[TaskMode, str] = TaskMode.FULL_TASKS,
    task_id: Optional[str] = None,
    *,
    include_content: bool = True,
    spec_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Shape a document for one of the read modes.

    Returns ``{"mode": ..., "content": ...}`` with JSON-ready content:

    * ``single_task``: ``{"task": ..., "context": ...}``; either is ``None``
      when the id is not in the document. Without a task id this mode falls
      back to ``full_tasks``.
    * ``full_tasks``: ``{"tasks": [...], "summary": {...}, "raw_content": ...}``
    * ``task_summary``: the summary record.

    Raises:
        ValueError: ``mode`` is not a known mode.
        InvalidTaskIdError: ``task_id`` is given but malformed.
    """
    task_mode = TaskMode(mode)
    if task_id is not None:
        validate_task_id(task_id)
    if task_mode is TaskMode.SINGLE_TASK and task_id is None:
        task_mode = TaskMode.FULL_TASKS

    graph = parse_graph(text, spec_name)

    if task_mode is TaskMode.SINGLE_TASK:
        index = graph.index_of(task_id)
        task = graph.tasks[index] if index is not None else None
        context = _context_for(graph, task, index) if task is not None else None
        content: Any = {
            "task": task.to_dict() if task else None,
            "context": context.to_dict() if context else None,
        }
    elif task_mode is TaskMode.TASK_SUMMARY:
        content = summarize(graph).to_dict()
    else:
        content = {
            "tasks": [task.to_dict() for task in graph.tasks],
            "summary": summarize(graph).to_dict(),
            "raw_content": text if include_content else None,
        }

    return {"mode": task_mode.value, "content": content}


def next_task_view(text: str, spec_name: Optional[str] = None) -> Dict[str, Any]:
    """The recommended task together with overall progress."""
    graph = parse_graph(text, spec_name)
    recommendation = recommend_next_task(graph)
    summary = summarize(graph, recommendation)
    log_recommendation(
        spec_name,
        recommendation.task.id if recommendation.task else None,
        recommendation.fallback,
    )
    return {
        "spec": spec_name,
        "execution_ready": summary.execution_ready,
        "recommended_next_task": summary.recommended_next_task.to_dict() if summary.recommended_next_task else None,
        "next_pending_task": summary.next_pending_task.to_dict() if summary.next_pending_task else None,
        "fallback": recommendation.fallback,
        "progress": {
            "completed": summary.completed_tasks,
            "total": summary.total_tasks,
            "percentage": summary.completion_percentage,
        },
    }
