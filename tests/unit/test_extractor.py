"""Unit tests for tasks.md line extraction."""

import logging

import pytest

from specflow.extractor import (
    Blank,
    MetadataLine,
    Other,
    TaskStart,
    classify_line,
    extract_tasks,
    scan_lines,
)
from specflow.models import TaskStatus

SAMPLE_TASKS = """# Implementation Plan

- [x] 1. Set up project structure
  - Create directories
  - _Requirements: 1.1_

- [ ] 2. Implement authentication
  - [ ] 2.1 Create user model
    - Add password hashing
    - _Requirements: 2.1, 2.2_
    - _Leverage: src/models/base.py_
  - [ ] 2.2 Add login endpoint
    - _Requirements: 2.3_
"""


class TestClassifyLine:
    """Test cases for single-line classification."""

    def test_task_line(self):
        """Test a pending task line."""
        event = classify_line("- [ ] 2.1 Create user model", None, 3)

        assert isinstance(event, TaskStart)
        assert event.task_id == "2.1"
        assert event.description == "Create user model"
        assert event.line_number == 3

    def test_metadata_line(self):
        """Test a metadata line carrying both annotations."""
        event = classify_line("  - _Requirements: 1.2_ _Leverage: utils.py_", None, 1)

        assert isinstance(event, MetadataLine)
        assert event.requirements_ref == "1.2"
        assert event.leverage == "utils.py"

    def test_blank_line_before_flush_left_text_closes_block(self):
        """Test that a blank line followed by a heading closes the block."""
        assert classify_line("", "## Notes", 1) == Blank(line_number=1, closes_block=True)

    def test_blank_line_before_indented_text_keeps_block(self):
        """Test that a blank line followed by indented text keeps the block open."""
        assert classify_line("", "  - more detail", 1) == Blank(line_number=1, closes_block=False)

    def test_checkbox_with_id_but_no_description_closes_block(self):
        """Test a bare checkbox id line is not a task but ends the block."""
        event = classify_line("- [ ] 7", None, 1)

        assert isinstance(event, Other)
        assert event.closes_block is True

    def test_plain_text(self):
        """Test an unrelated line."""
        event = classify_line("Some prose", None, 1)

        assert isinstance(event, Other)
        assert event.closes_block is False


class TestExtractTasks:
    """Test cases for extract_tasks."""

    def test_sample_document(self):
        """Test extraction of a realistic tasks.md."""
        tasks = extract_tasks(SAMPLE_TASKS)

        assert [t.id for t in tasks] == ["1", "2", "2.1", "2.2"]
        assert [t.status for t in tasks] == [
            TaskStatus.COMPLETED,
            TaskStatus.PENDING,
            TaskStatus.PENDING,
            TaskStatus.PENDING,
        ]
        assert tasks[0].requirements_ref == "1.1"
        assert tasks[1].requirements_ref is None
        assert tasks[2].requirements_ref == "2.1, 2.2"
        assert tasks[2].leverage == "src/models/base.py"
        assert tasks[3].requirements_ref == "2.3"

    def test_parent_and_raw_text(self):
        """Test derived parent ids and preserved raw lines."""
        tasks = extract_tasks(SAMPLE_TASKS)

        assert tasks[0].parent_task is None
        assert tasks[2].parent_task == "2"
        assert tasks[2].full_text == "  - [ ] 2.1 Create user model"
        assert tasks[2].line_number == 8

    @pytest.mark.parametrize(
        "line, task_id, description",
        [
            ("- [ ] 1. Setup", "1", "Setup"),
            ("- [ ] 1: Setup", "1", "Setup"),
            ("- [ ] 1 Setup", "1", "Setup"),
            ("- [] 3.1. Sub", "3.1", "Sub"),
            ("-[ ]4.2.3 Deep", "4.2.3", "Deep"),
            ("    - [ ] 10.2 Indented", "10.2", "Indented"),
        ],
    )
    def test_task_line_variants(self, line, task_id, description):
        """Test the accepted spacing and separators."""
        tasks = extract_tasks(line)

        assert len(tasks) == 1
        assert tasks[0].id == task_id
        assert tasks[0].description == description

    @pytest.mark.parametrize(
        "checkbox, status",
        [
            ("[x]", TaskStatus.COMPLETED),
            ("[ x ]", TaskStatus.COMPLETED),
            ("[ ]", TaskStatus.PENDING),
            ("[]", TaskStatus.PENDING),
            ("[xx]", TaskStatus.PENDING),
        ],
    )
    def test_checkbox_status(self, checkbox, status):
        """Test how the checkbox content maps to a status."""
        tasks = extract_tasks(f"- {checkbox} 1. Task")

        assert tasks[0].status is status

    def test_uppercase_x_is_not_a_task(self):
        """Test that [X] does not match the task grammar."""
        assert extract_tasks("- [X] 1. Done") == []

    def test_non_numeric_ids_are_skipped(self):
        """Test that lines without dotted numeric ids are ignored."""
        text = "- [ ] T001 Create model\n- [ ] Write docs\n- [ ] 2. Real task"

        assert [t.id for t in extract_tasks(text)] == ["2"]

    def test_malformed_lines_do_not_stop_extraction(self):
        """Test that junk between tasks is skipped silently."""
        text = "- [ ] 1. First\n* not a task\n- [?] 1.5 odd\n- [ ] 2. Second"

        assert [t.id for t in extract_tasks(text)] == ["1", "2"]

    def test_last_metadata_occurrence_wins(self):
        """Test sequential overwrite of repeated annotations."""
        text = "- [ ] 1. Task\n  - _Requirements: 1.1_\n  - _Requirements: 1.2_"

        assert extract_tasks(text)[0].requirements_ref == "1.2"

    def test_metadata_without_closing_underscore(self):
        """Test an annotation running to end of line."""
        text = "- [ ] 1. Task\n  - _Leverage: shared/helpers.ts, utils"

        assert extract_tasks(text)[0].leverage == "shared/helpers.ts, utils"

    def test_metadata_after_section_break_is_ignored(self):
        """Test that a blank line then flush-left text ends the task block."""
        text = "- [ ] 1. Task\n\n## Notes\n_Requirements: 9.9_"

        assert extract_tasks(text)[0].requirements_ref is None

    def test_metadata_after_indented_blank_gap_is_kept(self):
        """Test that a blank line followed by indented text keeps the block."""
        text = "- [ ] 1. Task\n\n  - _Requirements: 4.1_"

        assert extract_tasks(text)[0].requirements_ref == "4.1"

    def test_bare_checkbox_line_stops_metadata(self):
        """Test that an id-only checkbox line ends the previous block."""
        text = "- [ ] 1. Task\n- [ ] 7\n  - _Requirements: 3.3_"

        tasks = extract_tasks(text)

        assert [t.id for t in tasks] == ["1"]
        assert tasks[0].requirements_ref is None

    def test_crlf_line_endings(self):
        """Test that Windows line endings parse like Unix ones."""
        text = "- [x] 1. Setup\r\n- [ ] 2. Build\r\n  - _Requirements: 1.1_\r\n"

        tasks = extract_tasks(text)

        assert [t.id for t in tasks] == ["1", "2"]
        assert tasks[1].description == "Build"
        assert tasks[1].requirements_ref == "1.1"

    def test_empty_and_whitespace_documents(self):
        """Test that empty input yields no tasks."""
        assert extract_tasks("") == []
        assert extract_tasks("   \n\n\t") == []

    def test_warning_when_content_has_no_tasks(self, caplog):
        """Test that a non-empty document without tasks logs a warning."""
        with caplog.at_level(logging.WARNING, logger="specflow"):
            extract_tasks("# Tasks\n\nNothing here yet.")

        assert "No tasks found" in caplog.text

    def test_document_order_is_preserved(self):
        """Test that out-of-order ids keep their physical order."""
        text = "- [ ] 3. C\n- [ ] 1. A\n- [ ] 2. B"

        assert [t.id for t in extract_tasks(text)] == ["3", "1", "2"]

    def test_scan_lines_emits_one_event_per_line(self):
        """Test that scanning is line-for-line."""
        events = list(scan_lines("- [ ] 1. A\n\nText"))

        assert len(events) == 3
        assert isinstance(events[0], TaskStart)
        assert isinstance(events[1], Blank)
        assert isinstance(events[2], Other)
