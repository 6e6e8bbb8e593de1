"""Data models for specflow task tracking.

This module contains the records derived from a spec's ``tasks.md``
document: individual tasks, the aggregate summary, the local context of a
single task, and the execution status view. Every record is rebuilt from
the document on each call and is never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TaskStatus(str, Enum):
    """Checkbox state of a task line."""

    PENDING = "pending"
    COMPLETED = "completed"


class TaskMode(str, Enum):
    """Read modes offered by the context assembler."""

    SINGLE_TASK = "single_task"
    FULL_TASKS = "full_tasks"
    TASK_SUMMARY = "task_summary"


@dataclass(frozen=True, slots=True)
class TaskInfo:
    """Representation of a single tasks.md checklist entry."""

    id: str
    description: str
    status: TaskStatus
    full_text: str
    requirements_ref: Optional[str] = None
    leverage: Optional[str] = None
    parent_task: Optional[str] = None
    line_number: int = 0

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @property
    def is_pending(self) -> bool:
        return self.status is TaskStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "description": self.description,
            "status": self.status.value,
            "requirements_ref": self.requirements_ref,
            "leverage": self.leverage,
            "full_text": self.full_text,
            "parent_task": self.parent_task,
        }


def _task_dict(task: Optional[TaskInfo]) -> Optional[Dict[str, Any]]:
    return task.to_dict() if task is not None else None


@dataclass(frozen=True, slots=True)
class TaskSummary:
    """Aggregate progress over every task in a document."""

    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    completion_percentage: int = 0
    next_pending_task: Optional[TaskInfo] = None
    last_completed_task: Optional[TaskInfo] = None
    recommended_next_task: Optional[TaskInfo] = None
    execution_ready: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_tasks": self.total_tasks,
            "completed_tasks": self.completed_tasks,
            "pending_tasks": self.pending_tasks,
            "completion_percentage": self.completion_percentage,
            "next_pending_task": _task_dict(self.next_pending_task),
            "last_completed_task": _task_dict(self.last_completed_task),
            "recommended_next_task": _task_dict(self.recommended_next_task),
            "execution_ready": self.execution_ready,
        }


@dataclass(frozen=True, slots=True)
class TaskContext:
    """Local neighbourhood of one task: its parent, siblings and neighbours."""

    total_tasks: int
    completed_tasks: int
    parent_task: Optional[str] = None
    next_task: Optional[str] = None
    previous_task: Optional[str] = None
    sibling_count: int = 0
    completed_siblings: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "parent_task": self.parent_task,
            "total_tasks": self.total_tasks,
            "completed_tasks": self.completed_tasks,
            "next_task": self.next_task,
            "previous_task": self.previous_task,
            "sibling_count": self.sibling_count,
            "completed_siblings": self.completed_siblings,
        }


@dataclass(frozen=True, slots=True)
class ExecutionStatus:
    """Whether work can proceed and, if not, why."""

    ready: bool
    total_remaining: int
    next_task: Optional[TaskInfo] = None
    blocked_reason: Optional[str] = None
    blocked_by: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "ready": self.ready,
            "next_task": _task_dict(self.next_task),
            "blocked_reason": self.blocked_reason,
            "blocked_by": list(self.blocked_by),
            "total_remaining": self.total_remaining,
        }


@dataclass(slots=True)
class DocumentInfo:
    """Filesystem facts about one spec document."""

    exists: bool
    path: Optional[str] = None
    size: Optional[int] = None
    last_modified: Optional[str] = None
    content: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data: Dict[str, Any] = {"exists": self.exists}
        if not self.exists:
            return data
        data.update(
            {
                "path": self.path,
                "size": self.size,
                "last_modified": self.last_modified,
            }
        )
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass(slots=True)
class SpecInfo:
    """A spec directory and the documents it holds."""

    name: str
    path: str
    requirements: DocumentInfo
    design: DocumentInfo
    tasks: DocumentInfo

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "path": self.path,
            "requirements": self.requirements.to_dict(),
            "design": self.design.to_dict(),
            "tasks": self.tasks.to_dict(),
        }

    def missing_documents(self) -> List[str]:
        """Names of the standard documents not present in the spec."""
        missing = []
        if not self.requirements.exists:
            missing.append("requirements.md")
        if not self.design.exists:
            missing.append("design.md")
        if not self.tasks.exists:
            missing.append("tasks.md")
        return missing


@dataclass(slots=True)
class BugInfo:
    """A bug directory and its fix-workflow documents."""

    name: str
    path: str
    report: DocumentInfo
    analysis: DocumentInfo
    verification: DocumentInfo

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "path": self.path,
            "report": self.report.to_dict(),
            "analysis": self.analysis.to_dict(),
            "verification": self.verification.to_dict(),
        }


@dataclass(slots=True)
class SteeringInfo:
    """Project-wide steering documents (product, tech, structure)."""

    directory_exists: bool
    product: DocumentInfo
    tech: DocumentInfo
    structure: DocumentInfo
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "directory_exists": self.directory_exists,
            "path": self.path,
            "product": self.product.to_dict(),
            "tech": self.tech.to_dict(),
            "structure": self.structure.to_dict(),
        }
