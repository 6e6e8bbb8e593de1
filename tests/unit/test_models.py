"""Unit tests for specflow models.

This module tests the task records and their dictionary forms.
"""

import pytest

from specflow.models import (
    DocumentInfo,
    ExecutionStatus,
    SpecInfo,
    TaskContext,
    TaskInfo,
    TaskMode,
    TaskStatus,
    TaskSummary,
)


def make_task(task_id="2.1", status=TaskStatus.PENDING, **kwargs):
    return TaskInfo(
        id=task_id,
        description=kwargs.pop("description", "Implement login form"),
        status=status,
        full_text=kwargs.pop("full_text", f"- [ ] {task_id} Implement login form"),
        **kwargs,
    )


class TestTaskInfo:
    """Test cases for TaskInfo."""

    def test_status_helpers(self):
        """Test derived properties."""
        task = make_task("3.2.1", status=TaskStatus.COMPLETED)

        assert task.is_completed
        assert not task.is_pending

    def test_to_dict_uses_contract_field_names(self):
        """Test the dictionary keys match the published TaskInfo shape."""
        task = make_task(requirements_ref="1.1, 2.2", leverage="auth.py", parent_task="2")

        data = task.to_dict()

        assert data == {
            "id": "2.1",
            "description": "Implement login form",
            "status": "pending",
            "requirements_ref": "1.1, 2.2",
            "leverage": "auth.py",
            "full_text": "- [ ] 2.1 Implement login form",
            "parent_task": "2",
        }

    def test_task_is_immutable(self):
        """Test that tasks cannot be modified after parsing."""
        task = make_task()

        with pytest.raises(AttributeError):
            task.status = TaskStatus.COMPLETED


class TestTaskSummary:
    """Test cases for TaskSummary."""

    def test_empty_summary_defaults(self):
        """Test defaults describe an empty document."""
        summary = TaskSummary()

        assert summary.total_tasks == 0
        assert summary.execution_ready is False
        assert summary.to_dict()["recommended_next_task"] is None

    def test_to_dict_nests_tasks(self):
        """Test that nested tasks are serialized."""
        task = make_task("1")
        summary = TaskSummary(
            total_tasks=1,
            pending_tasks=1,
            next_pending_task=task,
            recommended_next_task=task,
            execution_ready=True,
        )

        data = summary.to_dict()

        assert data["recommended_next_task"]["id"] == "1"
        assert data["next_pending_task"]["id"] == "1"
        assert data["last_completed_task"] is None


class TestOtherRecords:
    """Test cases for context, execution status and document records."""

    def test_task_context_to_dict(self):
        """Test TaskContext serialization."""
        context = TaskContext(total_tasks=3, completed_tasks=1, parent_task="1", previous_task="1")

        data = context.to_dict()

        assert data["parent_task"] == "1"
        assert data["previous_task"] == "1"
        assert data["next_task"] is None

    def test_execution_status_to_dict(self):
        """Test ExecutionStatus serialization."""
        status = ExecutionStatus(ready=False, total_remaining=0, blocked_reason="All tasks completed")

        assert status.to_dict() == {
            "ready": False,
            "next_task": None,
            "blocked_reason": "All tasks completed",
            "blocked_by": [],
            "total_remaining": 0,
        }

    def test_missing_document_serializes_to_exists_only(self):
        """Test that a missing document only reports exists."""
        assert DocumentInfo(exists=False).to_dict() == {"exists": False}

    def test_spec_info_missing_documents(self):
        """Test the list of missing spec documents."""
        spec = SpecInfo(
            name="auth",
            path="/tmp/auth",
            requirements=DocumentInfo(exists=True, path="/tmp/auth/requirements.md", size=10),
            design=DocumentInfo(exists=False),
            tasks=DocumentInfo(exists=False),
        )

        assert spec.missing_documents() == ["design.md", "tasks.md"]

    def test_task_mode_values(self):
        """Test the mode strings accepted at the boundary."""
        assert TaskMode("single_task") is TaskMode.SINGLE_TASK
        assert TaskMode("full_tasks") is TaskMode.FULL_TASKS
        assert TaskMode("task_summary") is TaskMode.TASK_SUMMARY
