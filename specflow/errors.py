"""Exceptions raised at the specflow boundary.

The task engine itself never raises for data-shape problems; these are
reserved for invalid external input.
"""

from __future__ import annotations


class InvalidTaskIdError(ValueError):
    """A caller supplied a task id that is not dotted numeric."""

    def __init__(self, task_id: object):
        self.task_id = task_id
        super().__init__(
            f"Invalid task ID format: {task_id!r}. "
            "Task ID should be in format: 1, 2.1, 3.2.1, etc."
        )


class SpecNotFoundError(LookupError):
    """The requested spec directory does not exist in the workspace."""

    def __init__(self, spec_name: str, specs_dir: object = None):
        self.spec_name = spec_name
        self.specs_dir = specs_dir
        location = f" under {specs_dir}" if specs_dir is not None else ""
        super().__init__(f"Spec not found: '{spec_name}'{location}")


class BugNotFoundError(LookupError):
    """The requested bug directory does not exist in the workspace."""

    def __init__(self, bug_name: str, bugs_dir: object = None):
        self.bug_name = bug_name
        self.bugs_dir = bugs_dir
        location = f" under {bugs_dir}" if bugs_dir is not None else ""
        super().__init__(f"Bug not found: '{bug_name}'{location}")
