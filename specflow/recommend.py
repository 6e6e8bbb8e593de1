"""Next-task recommendation.

Picks the single next unit of work from a parsed task list:

1. Nothing pending: no recommendation.
2. Nothing completed yet: the first pending task in document order.
3. Otherwise the ready tasks are ordered by depth, then numeric id, and the
   first one wins. Shallower tasks beat deeper subtasks regardless of where
   they sit in the document.
4. If no task is ready the first pending task is recommended anyway. This
   keeps the workflow moving when ids are inconsistent, at the cost of
   possibly recommending a task whose prerequisites are not met;
   ``Recommendation.fallback`` marks that case.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .dependencies import ready_tasks, unmet_prerequisites
from .hierarchy import TaskGraph, task_depth, task_sort_key
from .models import ExecutionStatus, TaskInfo

logger = logging.getLogger("specflow.recommend")

ALL_TASKS_COMPLETED = "All tasks completed"
NO_TASKS_READY = "No tasks ready for execution (dependency issues)"


@dataclass(frozen=True, slots=True)
class Recommendation:
    task: Optional[TaskInfo]
    execution_ready: bool
    fallback: bool = False


def _as_graph(tasks: Sequence[TaskInfo] | TaskGraph) -> TaskGraph:
    return tasks if isinstance(tasks, TaskGraph) else TaskGraph.build(tasks)


def find_next_pending_task(tasks: Sequence[TaskInfo] | TaskGraph) -> Optional[TaskInfo]:
    """First pending task in document order, ignoring dependencies."""
    graph = _as_graph(tasks)
    return next((task for task in graph.tasks if task.is_pending), None)


def recommend_next_task(tasks: Sequence[TaskInfo] | TaskGraph) -> Recommendation:
    graph = _as_graph(tasks)
    pending = [task for task in graph.tasks if task.is_pending]

    if not pending:
        return Recommendation(task=None, execution_ready=False)

    if len(pending) == len(graph):
        return Recommendation(task=pending[0], execution_ready=True)

    candidates: List[TaskInfo] = ready_tasks(graph)
    if candidates:
        candidates.sort(key=lambda task: (task_depth(task.id), task_sort_key(task.id)))
        return Recommendation(task=candidates[0], execution_ready=True)

    logger.warning(
        f"No pending task has its prerequisites met; falling back to task {pending[0].id}"
    )
    return Recommendation(task=pending[0], execution_ready=True, fallback=True)


def is_execution_ready(tasks: Sequence[TaskInfo] | TaskGraph) -> bool:
    return recommend_next_task(tasks).task is not None


def execution_status(tasks: Sequence[TaskInfo] | TaskGraph) -> ExecutionStatus:
    """Whether execution can proceed, with the task to run or the reason not to."""
    graph = _as_graph(tasks)
    remaining = sum(1 for task in graph.tasks if task.is_pending)

    if remaining == 0:
        return ExecutionStatus(ready=False, total_remaining=0, blocked_reason=ALL_TASKS_COMPLETED)

    recommendation = recommend_next_task(graph)
    if recommendation.task is None:
        return ExecutionStatus(ready=False, total_remaining=remaining, blocked_reason=NO_TASKS_READY)

    blocked_by: List[str] = []
    if recommendation.fallback:
        blocked_by = unmet_prerequisites(recommendation.task, graph)

    return ExecutionStatus(
        ready=True,
        total_remaining=remaining,
        next_task=recommendation.task,
        blocked_by=blocked_by,
    )
