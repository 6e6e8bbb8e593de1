"""Aggregate progress statistics for a task list."""

from __future__ import annotations

from typing import Optional, Sequence

from .hierarchy import TaskGraph
from .models import TaskInfo, TaskSummary
from .recommend import Recommendation, recommend_next_task


def completion_percentage(completed: int, total: int) -> int:
    """Whole-number percentage, halves rounded up; 0 for an empty list."""
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def summarize(
    tasks: Sequence[TaskInfo] | TaskGraph,
    recommendation: Optional[Recommendation] = None,
) -> TaskSummary:
    """Counts, first pending, last completed and the recommended task.

    ``next_pending_task`` is plain document order. Use
    ``recommended_next_task`` when dependencies matter. A recommendation
    already computed for the same graph can be passed in to avoid repeating it.
    """
    graph = tasks if isinstance(tasks, TaskGraph) else TaskGraph.build(tasks)
    completed = [task for task in graph.tasks if task.is_completed]
    pending = [task for task in graph.tasks if task.is_pending]
    if recommendation is None:
        recommendation = recommend_next_task(graph)

    return TaskSummary(
        total_tasks=len(graph),
        completed_tasks=len(completed),
        pending_tasks=len(pending),
        completion_percentage=completion_percentage(len(completed), len(graph)),
        next_pending_task=pending[0] if pending else None,
        last_completed_task=completed[-1] if completed else None,
        recommended_next_task=recommendation.task,
        execution_ready=recommendation.execution_ready,
    )
