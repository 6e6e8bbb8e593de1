"""Hierarchy of dotted task ids.

A task id such as ``"3.2.1"`` encodes its own position: the parent is the id
without its last component (``"3.2"``) and the depth is the number of dots.
:class:`TaskGraph` indexes a parsed task list once so that parent and
sibling lookups do not rescan the list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .models import TaskInfo


def parent_task_id(task_id: str) -> Optional[str]:
    """Return the parent id, e.g. ``"2.1"`` -> ``"2"``; ``None`` at the top level."""
    parts = task_id.split(".")
    if len(parts) > 1:
        return ".".join(parts[:-1])
    return None


def task_depth(task_id: str) -> int:
    """Depth in the hierarchy: ``"1"`` is 0, ``"1.1"`` is 1, ``"1.1.1"`` is 2."""
    return task_id.count(".")


def task_id_key(task_id: str) -> Tuple[int, ...]:
    """Numeric components of an id, for sorting."""
    return tuple(int(part) for part in task_id.split("."))


def compare_task_ids(a: str, b: str) -> int:
    """Compare ids component-wise as integers.

    Missing trailing components count as zero, so ``"2.9" < "2.10"`` and
    ``"1" == "1.0"``. Returns a negative number, zero, or a positive number.
    """
    a_parts = task_id_key(a)
    b_parts = task_id_key(b)
    for index in range(max(len(a_parts), len(b_parts))):
        a_val = a_parts[index] if index < len(a_parts) else 0
        b_val = b_parts[index] if index < len(b_parts) else 0
        if a_val != b_val:
            return a_val - b_val
    return 0


task_sort_key = cmp_to_key(compare_task_ids)


@dataclass(frozen=True)
class TaskGraph:
    """Arena of tasks plus the index maps used by dependency checks.

    ``tasks`` keeps document order. ``by_id`` maps an id to the index of its
    first occurrence. ``children_of`` maps a parent id (``None`` for the top
    level) to the indexes of its direct children, ordered numerically with
    document order breaking ties.

    ``sibling_rank`` is the position of an id within its sibling group (first
    occurrence for duplicates) and ``first_open`` is, per group, the position
    of the first sibling whose id is not completed. A task's earlier siblings
    are all completed iff ``first_open[parent] >= sibling_rank[id]``.
    """

    tasks: Tuple[TaskInfo, ...]
    by_id: Dict[str, int]
    children_of: Dict[Optional[str], Tuple[int, ...]]
    completed: FrozenSet[str] = frozenset()
    sibling_rank: Dict[str, int] = field(default_factory=dict)
    first_open: Dict[Optional[str], int] = field(default_factory=dict)

    @classmethod
    def build(cls, tasks: Sequence[TaskInfo]) -> "TaskGraph":
        by_id: Dict[str, int] = {}
        groups: Dict[Optional[str], List[int]] = {}
        for index, task in enumerate(tasks):
            by_id.setdefault(task.id, index)
            groups.setdefault(task.parent_task, []).append(index)

        children_of = {
            parent: tuple(sorted(indexes, key=lambda i: task_sort_key(tasks[i].id)))
            for parent, indexes in groups.items()
        }
        completed = frozenset(task.id for task in tasks if task.is_completed)

        sibling_rank: Dict[str, int] = {}
        first_open: Dict[Optional[str], int] = {}
        for parent, indexes in children_of.items():
            first_open[parent] = len(indexes)
            for position, index in enumerate(indexes):
                task_id = tasks[index].id
                sibling_rank.setdefault(task_id, position)
                if task_id not in completed and first_open[parent] == len(indexes):
                    first_open[parent] = position

        return cls(
            tasks=tuple(tasks),
            by_id=by_id,
            children_of=children_of,
            completed=completed,
            sibling_rank=sibling_rank,
            first_open=first_open,
        )

    def __len__(self) -> int:
        return len(self.tasks)

    def get(self, task_id: str) -> Optional[TaskInfo]:
        index = self.by_id.get(task_id)
        return self.tasks[index] if index is not None else None

    def index_of(self, task_id: str) -> Optional[int]:
        return self.by_id.get(task_id)

    def parent_of(self, task: TaskInfo) -> Optional[TaskInfo]:
        """The parent task if it exists in the document."""
        if task.parent_task is None:
            return None
        return self.get(task.parent_task)

    def children(self, task_id: Optional[str]) -> List[TaskInfo]:
        return [self.tasks[i] for i in self.children_of.get(task_id, ())]

    def siblings_of(self, task: TaskInfo) -> List[TaskInfo]:
        """The sibling group of ``task`` (including itself), numerically ordered."""
        return self.children(task.parent_task)

    def preceding_siblings(self, task: TaskInfo) -> List[TaskInfo]:
        """Siblings ordered before ``task`` in its sibling group."""
        return self.siblings_of(task)[: self.sibling_rank.get(task.id, 0)]

    def preceding_siblings_completed(self, task: TaskInfo) -> bool:
        return self.first_open.get(task.parent_task, 0) >= self.sibling_rank.get(task.id, 0)
