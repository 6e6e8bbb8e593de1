"""Spec workspace access for specflow.

A workspace is a project root holding one directory per spec under
``.claude/specs/`` (configurable). Each spec may contain
``requirements.md``, ``design.md`` and ``tasks.md``. Bug fixes live under
``.claude/bugs/<name>/``, document templates under ``.claude/templates/``
and project steering documents under ``.claude/steering/``.

The workspace only reads: ``tasks.md`` is read once per call and the text is
handed to the task engine. Bytes that are not valid UTF-8 are replaced
rather than rejected.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import BUGS_DIR, STEERING_DIR, TEMPLATES_DIR, Settings
from .context import load_tasks, next_task_view, validate_task_id
from .errors import BugNotFoundError, SpecNotFoundError
from .extractor import extract_tasks
from .models import BugInfo, DocumentInfo, SpecInfo, SteeringInfo, TaskMode
from .recommend import execution_status
from .specflow_logging import log_error_with_context, log_operation

logger = logging.getLogger("specflow.workspace")

REQUIREMENTS_FILE = "requirements.md"
DESIGN_FILE = "design.md"
TASKS_FILE = "tasks.md"

REPORT_FILE = "report.md"
ANALYSIS_FILE = "analysis.md"
VERIFICATION_FILE = "verification.md"

TEMPLATE_FILES = {
    "requirements": "requirements-template.md",
    "design": "design-template.md",
    "tasks": "tasks-template.md",
}
STEERING_FILES = ("product", "tech", "structure")


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


class Workspace:
    """Read spec documents within a project root."""

    def __init__(self, root: Path | str, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            raise ValueError(f"Project root '{root}' does not exist or is not a directory.")
        self.specs_dir = self.root / self.settings.specs_dir
        self.bugs_dir = self.root / BUGS_DIR
        self.templates_dir = self.root / TEMPLATES_DIR
        self.steering_dir = self.root / STEERING_DIR
        logger.debug(f"Workspace opened at {self.root}")

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def read_document(self, path: Path, include_content: bool = True) -> DocumentInfo:
        """Stat a document and read it when it is small enough."""
        try:
            stats = path.stat()
        except OSError:
            return DocumentInfo(exists=False)
        if not path.is_file():
            return DocumentInfo(exists=False)

        info = DocumentInfo(
            exists=True,
            path=str(path),
            size=stats.st_size,
            last_modified=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc).isoformat(),
        )
        if include_content and stats.st_size < self.settings.max_content_bytes:
            info.content = _read_text(path)
        return info

    def _present(self, path: Path, include_content: bool) -> Optional[Dict[str, Any]]:
        document = self.read_document(path, include_content)
        return document.to_dict() if document.exists else None

    @staticmethod
    def _child_dir(parent: Path, name: str, kind: str) -> Path:
        if not name or not name.strip():
            raise ValueError(f"{kind} name cannot be empty")
        if name in {".", ".."} or "/" in name or "\\" in name:
            raise ValueError(f"Invalid {kind.lower()} name: '{name}'")
        return parent / name

    @staticmethod
    def _subdirectories(parent: Path) -> List[Path]:
        if not parent.is_dir():
            return []
        return sorted(p for p in parent.iterdir() if p.is_dir())

    # ------------------------------------------------------------------
    # Specs
    # ------------------------------------------------------------------

    def spec_dir(self, spec_name: str) -> Path:
        """Directory of a spec; the name must be a single path component."""
        return self._child_dir(self.specs_dir, spec_name, "Spec")

    def spec_exists(self, spec_name: str) -> bool:
        return self.spec_dir(spec_name).is_dir()

    def tasks_path(self, spec_name: str) -> Path:
        return self.spec_dir(spec_name) / TASKS_FILE

    def list_specs(self, include_content: bool = False) -> List[SpecInfo]:
        """All spec directories, sorted by name."""
        return [
            SpecInfo(
                name=spec_path.name,
                path=str(spec_path),
                requirements=self.read_document(spec_path / REQUIREMENTS_FILE, include_content),
                design=self.read_document(spec_path / DESIGN_FILE, include_content),
                tasks=self.read_document(spec_path / TASKS_FILE, include_content),
            )
            for spec_path in self._subdirectories(self.specs_dir)
        ]

    def read_tasks(self, spec_name: str) -> Optional[str]:
        """Current text of a spec's tasks.md, or ``None`` if it has none.

        Raises:
            SpecNotFoundError: the spec directory does not exist.
        """
        if not self.spec_exists(spec_name):
            raise SpecNotFoundError(spec_name, self.specs_dir)
        path = self.tasks_path(spec_name)
        if not path.is_file():
            return None
        return _read_text(path)

    def _require_tasks(self, spec_name: str) -> str:
        text = self.read_tasks(spec_name)
        if text is None:
            raise FileNotFoundError(
                f"No tasks.md found for spec '{spec_name}'. Generate tasks before requesting them."
            )
        return text

    # ------------------------------------------------------------------
    # Bugs, templates and steering
    # ------------------------------------------------------------------

    def bug_dir(self, bug_name: str) -> Path:
        return self._child_dir(self.bugs_dir, bug_name, "Bug")

    def list_bugs(self, include_content: bool = False) -> List[BugInfo]:
        """All bug directories, sorted by name."""
        return [
            BugInfo(
                name=bug_path.name,
                path=str(bug_path),
                report=self.read_document(bug_path / REPORT_FILE, include_content),
                analysis=self.read_document(bug_path / ANALYSIS_FILE, include_content),
                verification=self.read_document(bug_path / VERIFICATION_FILE, include_content),
            )
            for bug_path in self._subdirectories(self.bugs_dir)
        ]

    def load_bug(self, bug_name: str, include_content: bool = True) -> Dict[str, Any]:
        """Load a bug's report, analysis and verification documents.

        Documents that do not exist are ``None``.

        Raises:
            BugNotFoundError: the bug directory does not exist.
        """
        with log_operation("load_bug", bug_name=bug_name):
            bug_path = self.bug_dir(bug_name)
            if not bug_path.is_dir():
                raise BugNotFoundError(bug_name, self.bugs_dir)

            return {
                "name": bug_name,
                "path": str(bug_path),
                "report": self._present(bug_path / REPORT_FILE, include_content),
                "analysis": self._present(bug_path / ANALYSIS_FILE, include_content),
                "verification": self._present(bug_path / VERIFICATION_FILE, include_content),
            }

    def load_templates(self, include_content: bool = True) -> Dict[str, Dict[str, Any]]:
        """The spec document templates that exist, keyed by document kind."""
        templates: Dict[str, Dict[str, Any]] = {}
        for kind, filename in TEMPLATE_FILES.items():
            document = self._present(self.templates_dir / filename, include_content)
            if document is not None:
                templates[kind] = document
        return templates

    def steering(self, include_content: bool = True) -> SteeringInfo:
        """Product, tech and structure steering documents."""
        directory_exists = self.steering_dir.is_dir()
        product, tech, structure = (
            self.read_document(self.steering_dir / f"{name}.md", include_content)
            for name in STEERING_FILES
        )
        return SteeringInfo(
            directory_exists=directory_exists,
            path=str(self.steering_dir) if directory_exists else None,
            product=product,
            tech=tech,
            structure=structure,
        )

    # ------------------------------------------------------------------
    # Task views
    # ------------------------------------------------------------------

    def load_spec(
        self,
        spec_name: str,
        task_mode: Union[TaskMode, str] = TaskMode.FULL_TASKS,
        task_id: Optional[str] = None,
        include_content: bool = True,
        load_templates: bool = False,
    ) -> Dict[str, Any]:
        """Load a spec's documents and its tasks in the requested mode.

        With ``load_templates`` the result also carries a ``templates`` map
        of the document templates that exist.
        """
        try:
            if task_id is not None:
                validate_task_id(task_id)
            mode = TaskMode(task_mode)

            spec_path = self.spec_dir(spec_name)
            if not spec_path.is_dir():
                raise SpecNotFoundError(spec_name, self.specs_dir)

            text = self.read_tasks(spec_name)
            result: Dict[str, Any] = {
                "name": spec_name,
                "requirements": self._present(spec_path / REQUIREMENTS_FILE, include_content),
                "design": self._present(spec_path / DESIGN_FILE, include_content),
                "tasks": load_tasks(
                    text,
                    mode,
                    task_id,
                    include_content=include_content,
                    spec_name=spec_name,
                ) if text is not None else None,
            }
            if load_templates:
                result["templates"] = self.load_templates(include_content)
            return result
        except Exception as e:
            log_error_with_context(e, {
                "operation": "load_spec",
                "spec_name": spec_name,
                "task_mode": str(task_mode),
                "task_id": task_id,
            })
            raise

    def next_task(self, spec_name: str) -> Dict[str, Any]:
        """Recommended next task and progress for a spec."""
        return next_task_view(self._require_tasks(spec_name), spec_name)

    def execution_status(self, spec_name: str) -> Dict[str, Any]:
        """Whether the spec has work ready to execute."""
        status = execution_status(extract_tasks(self._require_tasks(spec_name)))
        return {"spec": spec_name, **status.to_dict()}
