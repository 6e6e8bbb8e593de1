"""specflow - task graph extraction and next-task recommendation for spec workflows."""

from .context import (
    get_task,
    get_task_context,
    is_valid_task_id,
    load_tasks,
    next_task_view,
    validate_task_id,
)
from .errors import InvalidTaskIdError, SpecNotFoundError
from .extractor import extract_tasks
from .hierarchy import TaskGraph, compare_task_ids, parent_task_id, task_depth
from .models import (
    ExecutionStatus,
    TaskContext,
    TaskInfo,
    TaskMode,
    TaskStatus,
    TaskSummary,
)
from .recommend import (
    Recommendation,
    execution_status,
    find_next_pending_task,
    is_execution_ready,
    recommend_next_task,
)
from .summary import summarize

__version__ = "0.1.0"

__all__ = [
    "ExecutionStatus",
    "InvalidTaskIdError",
    "Recommendation",
    "SpecNotFoundError",
    "TaskContext",
    "TaskGraph",
    "TaskInfo",
    "TaskMode",
    "TaskStatus",
    "TaskSummary",
    "compare_task_ids",
    "execution_status",
    "extract_tasks",
    "find_next_pending_task",
    "get_task",
    "get_task_context",
    "is_execution_ready",
    "is_valid_task_id",
    "load_tasks",
    "next_task_view",
    "parent_task_id",
    "recommend_next_task",
    "summarize",
    "task_depth",
    "validate_task_id",
]
