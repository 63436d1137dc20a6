"""Architecture context assembly for chat sessions.

Concatenates organization documents, then the active project's documents,
each truncated, into one markdown string, and appends saved notes that look
relevant to the user's question. Files that cannot be read are skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from archmemory.config import (
    DOCUMENT_CONTEXT_LIMIT,
    LEGACY_CONTEXT_LIMIT,
    MAX_RELEVANT_MEMORIES,
    MEMORY_EXCERPT_LIMIT,
)
from archmemory.storage.memory import ORGANIZATION_KINDS, PROJECT_KINDS, MemoryStore

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n\n[... truncated ...]"
SECTION_SEPARATOR = "\n\n---\n\n"

LEGACY_STATIC_FILES = [
    "context.md", "principles.md", "constraints.md", "decisions.md",
    "capabilities.md", "tech_debt.md", "roadmap.md", "risks.md",
    "standards.md", "politics.md", "glossary.md",
]
MEMORY_DIRS = ["decisions", "insights", "politics"]
RECENT_FILES_PER_DIR = 5

NO_MEMORIES_TEXT = "No directly relevant past decisions found."

GUIDELINES = """\
IMPORTANT GUIDELINES:
- Consider the organizational context and constraints above
- Reference relevant past decisions if applicable
- Provide practical, actionable recommendations
- Consider political and organizational viability
- Highlight any risks or concerns
"""

DEFAULT_CONTEXT = """\
# Default Architecture Context

No architecture_memory folder found in workspace.

To get full context-aware responses, create an architecture_memory folder with:
- organization/principles.md - Architecture principles
- organization/standards.md - Technology standards
- projects/<name>/context.md - Project overview
- projects/<name>/decisions.md - Decision log
- decisions/ - Saved ADRs
- insights/ - Saved insights

Run `archmemory new-project <name>` to create a project skeleton.

## Default Principles
1. **Stability Over Speed** - Prefer proven patterns
2. **Loose Coupling** - Systems should be independently deployable
3. **Configuration over Customization** - Avoid custom code per client
4. **Observability by Default** - All systems must be monitorable
5. **Security is Non-Negotiable** - Security requirements are not tradeable
"""


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def _read_section(path: Path, limit: int) -> str | None:
    """Render one file as a ``## NAME`` context section, or None if unreadable."""
    if not path.is_file():
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable context file {path}: {e}")
        return None
    return f"## {path.stem.upper()}\n\n{truncate(content, limit)}"


def load_static_context(store: MemoryStore | None, project: str = "") -> str:
    """Build the static context: organization files, then project files.

    Falls back to the legacy ``static/`` folder when neither exists, and to a
    built-in default when nothing at all is found.
    """
    if store is None:
        return DEFAULT_CONTEXT

    content: list[str] = []

    if store.organization_path.is_dir():
        content.append("# ORGANIZATION CONTEXT\n")
        for kind in ORGANIZATION_KINDS:
            section = _read_section(store.organization_path / kind.filename, DOCUMENT_CONTEXT_LIMIT)
            if section:
                content.append(section)

    if project:
        project_dir = store.project_path(project)
        if project_dir.is_dir():
            content.append(f"\n# PROJECT CONTEXT: {project.upper()}\n")
            for kind in PROJECT_KINDS:
                section = _read_section(project_dir / kind.filename, DOCUMENT_CONTEXT_LIMIT)
                if section:
                    content.append(section)

    if not content and store.static_path.is_dir():
        for filename in LEGACY_STATIC_FILES:
            section = _read_section(store.static_path / filename, LEGACY_CONTEXT_LIMIT)
            if section:
                content.append(section)

    return SECTION_SEPARATOR.join(content) if content else DEFAULT_CONTEXT


def load_relevant_memories(store: MemoryStore | None, query: str) -> list[str]:
    """Find saved notes that mention any word (longer than 3 chars) of the query.

    Only the most recent files of each notes directory are considered.
    """
    if store is None:
        return []

    query_words = [word for word in query.lower().split() if len(word) > 3]
    if not query_words:
        return []

    memories: list[str] = []
    for dir_name in MEMORY_DIRS:
        directory = store.root / dir_name
        if not directory.is_dir():
            continue
        recent = sorted(p for p in directory.glob("*.md") if p.is_file())[::-1][:RECENT_FILES_PER_DIR]
        for path in recent:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Skipping unreadable memory file {path}: {e}")
                continue
            content_lower = content.lower()
            if any(word in content_lower for word in query_words):
                memories.append(f"[{dir_name}/{path.name}]\n{content[:MEMORY_EXCERPT_LIMIT]}")

    return memories[:MAX_RELEVANT_MEMORIES]


def build_context(store: MemoryStore | None, project: str = "", query: str = "") -> str:
    """Assemble the full context string handed to the chat session."""
    static_context = load_static_context(store, project)
    memories = load_relevant_memories(store, query)
    memory_text = "\n\n".join(f"- {m}" for m in memories) if memories else NO_MEMORIES_TEXT

    return (
        f"{static_context}\n\n"
        "---\n\n"
        "## RELEVANT PAST DECISIONS & INSIGHTS\n\n"
        f"{memory_text}\n\n"
        "---\n\n"
        f"{GUIDELINES}"
    )
