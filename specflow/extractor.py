"""Extraction of checklist tasks from tasks.md text.

Extraction runs in two passes. ``scan_lines`` classifies every line into an
immutable event without looking at any other task; ``assemble_tasks`` folds
the events into :class:`~specflow.models.TaskInfo` records, attaching
``_Requirements:`` and ``_Leverage:`` annotations to the task whose block
they appear in.

Lines that match nothing are skipped. Nothing here raises for malformed
input.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence, Union

from .hierarchy import parent_task_id
from .models import TaskInfo, TaskStatus

logger = logging.getLogger("specflow.extractor")

# Applied to the stripped line.
TASK_LINE_PATTERN = re.compile(r"^-\s*\[([x\s]*)\]\s*([0-9]+(?:\.[0-9]+)*)\s*[:.]*\s*(.+)$")
# A checkbox followed by a digit; closes a metadata block even when the line
# is not a well-formed task (for example ``- [ ] 7`` with no description).
TASK_BOUNDARY_PATTERN = re.compile(r"^-\s*\[[x\s]*\]\s*[0-9]")
REQUIREMENTS_PATTERN = re.compile(r"_Requirements:\s*(.+?)(?:_|$)")
LEVERAGE_PATTERN = re.compile(r"_Leverage:\s*(.+?)(?:_|$)")


@dataclass(frozen=True, slots=True)
class TaskStart:
    line_number: int
    text: str
    task_id: str
    checkbox: str
    description: str


@dataclass(frozen=True, slots=True)
class MetadataLine:
    line_number: int
    text: str
    requirements_ref: Optional[str] = None
    leverage: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Blank:
    line_number: int
    # True when the next line is flush-left content, which ends a task block.
    closes_block: bool = False


@dataclass(frozen=True, slots=True)
class Other:
    line_number: int
    text: str
    closes_block: bool = False


LineEvent = Union[TaskStart, MetadataLine, Blank, Other]


def split_lines(text: str) -> List[str]:
    """Split document text into lines, treating CRLF like LF."""
    return text.replace("\r\n", "\n").split("\n")


def _starts_flush_left(line: str) -> bool:
    return len(line) > 0 and line[0] not in (" ", "\t") and not line.startswith("  -")


def classify_line(line: str, next_line: Optional[str], line_number: int) -> LineEvent:
    """Classify a single line; ``next_line`` is only consulted for blank lines."""
    stripped = line.strip()

    task_match = TASK_LINE_PATTERN.match(stripped)
    if task_match:
        checkbox, task_id, description = task_match.groups()
        return TaskStart(
            line_number=line_number,
            text=line,
            task_id=task_id,
            checkbox=checkbox,
            description=description.strip(),
        )

    if TASK_BOUNDARY_PATTERN.match(stripped):
        return Other(line_number=line_number, text=line, closes_block=True)

    if stripped == "":
        return Blank(
            line_number=line_number,
            closes_block=next_line is not None and _starts_flush_left(next_line),
        )

    requirements = REQUIREMENTS_PATTERN.search(line)
    leverage = LEVERAGE_PATTERN.search(line)
    if requirements or leverage:
        return MetadataLine(
            line_number=line_number,
            text=line,
            requirements_ref=requirements.group(1).strip() if requirements else None,
            leverage=leverage.group(1).strip() if leverage else None,
        )

    return Other(line_number=line_number, text=line)


def scan_lines(text: str) -> Iterator[LineEvent]:
    """Yield one event per line of ``text`` in document order."""
    lines = split_lines(text)
    for index, line in enumerate(lines):
        next_line = lines[index + 1] if index + 1 < len(lines) else None
        yield classify_line(line, next_line, index + 1)


def _start_task(event: TaskStart) -> TaskInfo:
    status = TaskStatus.COMPLETED if event.checkbox.strip() == "x" else TaskStatus.PENDING
    return TaskInfo(
        id=event.task_id,
        description=event.description,
        status=status,
        full_text=event.text,
        parent_task=parent_task_id(event.task_id),
        line_number=event.line_number,
    )


def assemble_tasks(events: Sequence[LineEvent]) -> List[TaskInfo]:
    """Fold line events into task records."""
    tasks: List[TaskInfo] = []
    current: Optional[TaskInfo] = None
    collecting = False

    for event in events:
        if isinstance(event, TaskStart):
            if current is not None:
                tasks.append(current)
            current = _start_task(event)
            collecting = True
            continue

        if current is None or not collecting:
            continue

        if isinstance(event, MetadataLine):
            # last occurrence wins
            if event.requirements_ref is not None:
                current = replace(current, requirements_ref=event.requirements_ref)
            if event.leverage is not None:
                current = replace(current, leverage=event.leverage)
        elif event.closes_block:
            collecting = False

    if current is not None:
        tasks.append(current)
    return tasks


def extract_tasks(text: str) -> List[TaskInfo]:
    """Parse every checklist task in ``text``, in document order."""
    tasks = assemble_tasks(list(scan_lines(text)))

    logger.debug(f"Parsed {len(tasks)} tasks from markdown")
    if not tasks and text.strip():
        preview = text[:200].replace("\n", "\\n")
        logger.warning(f"No tasks found in non-empty document. Content preview: {preview}")
    return tasks
