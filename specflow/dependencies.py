"""Readiness checks for pending tasks.

A pending task is ready when its parent (if the parent appears in the
document) is completed and every sibling ordered before it is completed.
Hierarchical numbering and sibling order are the only dependency signals;
free-text references such as ``_Requirements:`` are never interpreted.

Completion is looked up by id, so each check is answered from the maps
:class:`~specflow.hierarchy.TaskGraph` builds once per document.
"""

from __future__ import annotations

from typing import List

from .hierarchy import TaskGraph
from .models import TaskInfo


def _parent_completed(task: TaskInfo, graph: TaskGraph) -> bool:
    parent = graph.parent_of(task)
    return parent is None or parent.id in graph.completed


def unmet_prerequisites(task: TaskInfo, graph: TaskGraph) -> List[str]:
    """Ids of the tasks that currently block ``task``, parent first."""
    blockers: List[str] = []
    if not _parent_completed(task, graph):
        blockers.append(task.parent_task)

    blockers.extend(
        sibling.id for sibling in graph.preceding_siblings(task) if sibling.id not in graph.completed
    )
    return blockers


def is_ready(task: TaskInfo, graph: TaskGraph) -> bool:
    """True when ``task`` is pending and nothing blocks it."""
    return (
        task.is_pending
        and _parent_completed(task, graph)
        and graph.preceding_siblings_completed(task)
    )


def ready_tasks(graph: TaskGraph) -> List[TaskInfo]:
    """Pending tasks whose prerequisites hold, in document order."""
    return [task for task in graph.tasks if is_ready(task, graph)]
