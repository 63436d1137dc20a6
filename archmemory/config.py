"""Configuration loading for archmemory.

Config sources (in priority order):
1. Explicit arguments passed to functions
2. Environment variables (ARCHMEMORY_PATH, ARCHMEMORY_PROJECT, etc.)
3. .env file in current directory
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

MEMORY_DIR_NAME = "architecture_memory"
# Checked below the workspace when no explicit memory path is configured
MEMORY_DIR_CANDIDATES = [
    Path(MEMORY_DIR_NAME),
    Path("archi-copilot") / MEMORY_DIR_NAME,
]

# Per-file character limits when assembling chat context
DOCUMENT_CONTEXT_LIMIT = 6000
LEGACY_CONTEXT_LIMIT = 8000
MEMORY_EXCERPT_LIMIT = 2000
MAX_RELEVANT_MEMORIES = 5


@dataclass
class Config:
    memory_path: Path | None = None  # explicit architecture_memory directory
    workspace: Path = Path(".")
    project: str = ""  # active project under projects/

    @classmethod
    def load(cls) -> Config:
        memory_path = os.getenv("ARCHMEMORY_PATH", "")
        return cls(
            memory_path=Path(memory_path) if memory_path else None,
            workspace=Path(os.getenv("ARCHMEMORY_WORKSPACE", ".")),
            project=os.getenv("ARCHMEMORY_PROJECT", ""),
        )

    def resolve_memory_path(self) -> Path | None:
        """Find the architecture_memory directory, or None if there is none."""
        if self.memory_path is not None:
            return self.memory_path if self.memory_path.is_dir() else None
        for candidate in MEMORY_DIR_CANDIDATES:
            path = self.workspace / candidate
            if path.is_dir():
                return path
        return None

    def validate(self) -> list[str]:
        """Return a list of config issues."""
        issues = []
        if self.resolve_memory_path() is None:
            if self.memory_path is not None:
                issues.append(f"Memory directory not found: {self.memory_path} (ARCHMEMORY_PATH)")
            else:
                issues.append(
                    f"No {MEMORY_DIR_NAME} directory under {self.workspace} "
                    "(set ARCHMEMORY_PATH or ARCHMEMORY_WORKSPACE)"
                )
        if not self.project:
            issues.append("Active project not set (ARCHMEMORY_PROJECT)")
        return issues
