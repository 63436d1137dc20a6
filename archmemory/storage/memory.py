"""File-backed access to an architecture_memory directory.

Layout::

    architecture_memory/
        organization/{principles,standards,glossary,governance}.md
        projects/<name>/{context,capabilities,...,glossary}.md
        decisions/  insights/      free-form saved notes
        static/                    legacy flat layout, read-only

Saving regenerates the whole file from the record; anything outside the
recognized schema is lost. Writers are assumed to take turns per file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from archmemory.config import Config
from archmemory.markdown.codec import generate_markdown, parse_markdown
from archmemory.markdown.models import Document, DocumentKind, assign_missing_ids, document_from_dict
from archmemory.markdown.templates import project_templates

logger = logging.getLogger(__name__)

PROJECT_KINDS = [
    DocumentKind.CONTEXT,
    DocumentKind.CAPABILITIES,
    DocumentKind.CONSTRAINTS,
    DocumentKind.DECISIONS,
    DocumentKind.TECH_DEBT,
    DocumentKind.ROADMAP,
    DocumentKind.RISKS,
    DocumentKind.POLITICS,
    DocumentKind.GLOSSARY,
]
ORGANIZATION_KINDS = [
    DocumentKind.PRINCIPLES,
    DocumentKind.STANDARDS,
    DocumentKind.GLOSSARY,
    DocumentKind.GOVERNANCE,
]

NOTE_DIRS = {"decision": "decisions", "insight": "insights"}
NOTE_HEADINGS = {"decision": "Architecture Decision", "insight": "Insight"}


@dataclass
class SaveResult:
    success: bool
    message: str


class MemoryStore:
    """Reads and writes architecture memory documents under one root directory."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @classmethod
    def from_config(cls, config: Config) -> MemoryStore | None:
        root = config.resolve_memory_path()
        return cls(root) if root is not None else None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def projects_path(self) -> Path:
        return self._root / "projects"

    @property
    def organization_path(self) -> Path:
        return self._root / "organization"

    @property
    def static_path(self) -> Path:
        return self._root / "static"

    def project_path(self, project: str) -> Path:
        _check_name(project)
        return self.projects_path / project

    def document_path(self, kind: DocumentKind | str, project: str | None = None) -> Path:
        """Path of ``{kind}.md`` in a project, or in organization/ when project is None."""
        name = kind.value if isinstance(kind, DocumentKind) else kind
        _check_name(name)
        directory = self.organization_path if project is None else self.project_path(project)
        return directory / f"{name}.md"

    def ensure_directories(self) -> None:
        for directory in ("projects", "organization", *NOTE_DIRS.values()):
            (self._root / directory).mkdir(parents=True, exist_ok=True)

    def list_projects(self) -> list[str]:
        if not self.projects_path.is_dir():
            return []
        return sorted(p.name for p in self.projects_path.iterdir() if p.is_dir())

    def load_document(self, kind: DocumentKind | str, project: str | None = None) -> Document | None:
        """Parse one document, or return None when its file does not exist."""
        path = self.document_path(kind, project)
        if not path.is_file():
            return None
        return parse_markdown(path.read_text(encoding="utf-8"), kind)

    def load_project(self, project: str) -> dict[str, Document | None]:
        return {kind.value: self.load_document(kind, project) for kind in PROJECT_KINDS}

    def load_organization(self) -> dict[str, Document | None]:
        return {kind.value: self.load_document(kind) for kind in ORGANIZATION_KINDS}

    def save_document(
        self,
        kind: DocumentKind | str,
        document: Document | dict[str, Any],
        project: str | None = None,
    ) -> SaveResult:
        """Regenerate and write a document. Never raises for filesystem errors.

        Entities without an ID get a fresh one before writing, so an ID is
        fixed when an entity is first saved rather than recomputed from its
        position on every read.
        """
        allowed = ORGANIZATION_KINDS if project is None else PROJECT_KINDS
        doc_kind = DocumentKind.lookup(kind)
        if doc_kind not in allowed:
            scope = "organization" if project is None else "project"
            return SaveResult(False, f"Unknown {scope} document kind: {kind}")

        if isinstance(document, dict):
            document = document_from_dict(doc_kind, document)
        assign_missing_ids(document, doc_kind)

        try:
            path = self.document_path(doc_kind, project)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(generate_markdown(document, doc_kind), encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save {doc_kind.value}: {e}")
            return SaveResult(False, f"Error: {e}")

        logger.info(f"Saved {path}")
        return SaveResult(True, f"Saved {doc_kind.value}")

    def create_project(self, name: str) -> SaveResult:
        """Create ``projects/<name>/`` with an empty document of every project kind."""
        try:
            project_dir = self.project_path(name)
            project_dir.mkdir(parents=True, exist_ok=True)
            for kind, document in project_templates(name).items():
                (project_dir / kind.filename).write_text(
                    generate_markdown(document, kind), encoding="utf-8"
                )
        except (OSError, ValueError) as e:
            logger.error(f"Failed to create project {name!r}: {e}")
            return SaveResult(False, f"Error: {e}")
        return SaveResult(True, f"Created project {name}")

    def save_note(self, category: str, content: str, now: datetime | None = None) -> Path:
        """Save a decision or insight note as a timestamped markdown file.

        Notes are what ``load_relevant_memories`` searches; file names sort
        chronologically so the newest come last.
        """
        if category not in NOTE_DIRS:
            raise ValueError(f"Unknown note category: {category} (expected one of {', '.join(NOTE_DIRS)})")
        now = now or datetime.now()
        directory = self._root / NOTE_DIRS[category]
        directory.mkdir(parents=True, exist_ok=True)

        path = directory / f"{now:%Y-%m-%d-%H%M%S}.md"
        heading = f"# {NOTE_HEADINGS[category]} - {now:%Y-%m-%d %H:%M}"
        path.write_text(f"{heading}\n\n{content.strip()}\n", encoding="utf-8")
        return path


def _check_name(name: str) -> None:
    """Reject names that would escape the memory directory."""
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid name: {name!r}")
