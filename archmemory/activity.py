"""JSONL audit trail of what MCP agents did to the architecture memory.

Every tool call becomes one line: the tool, the memory target it touched
(``demo/risks``, ``organization/principles``, ``insight note``), whether it
wrote anything, the arguments with bulky payloads reduced to their size, a
result preview and the duration. ``archmemory activity`` reads it back.

The file is ``archmemory-activity.jsonl`` in the current directory unless
ARCHMEMORY_LOG_PATH points elsewhere.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

RESULT_PREVIEW_LIMIT = 500
DEFAULT_LOG_NAME = "archmemory-activity.jsonl"

WRITE_TOOLS = frozenset({"save_document", "create_project", "save_note"})
# Arguments that carry whole documents or notes
PAYLOAD_ARGUMENTS = ("data", "content")


def _resolve_log_path() -> Path:
    return Path(os.getenv("ARCHMEMORY_LOG_PATH") or DEFAULT_LOG_NAME)


def describe_target(tool_name: str, arguments: dict) -> str:
    """Name the memory document a tool call touched, or "" for none."""
    if tool_name in ("get_document", "save_document"):
        kind = arguments.get("kind", "")
        if arguments.get("organization"):
            return f"organization/{kind}"
        return f"{arguments.get('project') or '(active)'}/{kind}"
    if tool_name == "create_project":
        return f"projects/{arguments.get('name', '')}"
    if tool_name == "save_note":
        return f"{arguments.get('category', '')} note"
    return ""


def _loggable_arguments(arguments: dict) -> dict:
    loggable = dict(arguments)
    for key in PAYLOAD_ARGUMENTS:
        if key in loggable:
            value = loggable[key]
            text = value if isinstance(value, str) else json.dumps(value, default=str)
            loggable[key] = f"<{len(text)} chars>"
    return loggable


def _wrote(tool_name: str, result_text: str, error: str | None) -> bool:
    """True when a write tool reported ``"success": true``."""
    if tool_name not in WRITE_TOOLS or error:
        return False
    try:
        return bool(json.loads(result_text).get("success"))
    except (json.JSONDecodeError, AttributeError):
        return False


def log_tool_call(
    tool_name: str,
    arguments: dict,
    result_text: str,
    error: str | None,
    duration_ms: int,
) -> None:
    """Append one entry for a tool call. An unwritable log is only warned about."""
    entry = {
        "timestamp": datetime.now().isoformat(),
        "tool_name": tool_name,
        "target": describe_target(tool_name, arguments),
        "wrote": _wrote(tool_name, result_text, error),
        "arguments": _loggable_arguments(arguments),
        "result_preview": result_text[:RESULT_PREVIEW_LIMIT] if result_text else "",
        "error": error,
        "duration_ms": duration_ms,
    }
    log_path = _resolve_log_path()
    try:
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        logger.warning(f"Could not write activity log {log_path}: {e}")


def read_activity_log(
    limit: int = 20,
    tool_name: str | None = None,
    writes_only: bool = False,
    log_path: Path | None = None,
) -> list[dict]:
    """Return up to ``limit`` entries, most recent first.

    ``tool_name`` keeps calls to one tool; ``writes_only`` keeps the calls
    that changed the memory. Lines that are not JSON are skipped.
    """
    path = log_path or _resolve_log_path()
    if not path.exists():
        return []

    entries: list[dict] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            logger.debug(f"Skipping malformed activity line in {path}")
            continue
        if tool_name and entry.get("tool_name") != tool_name:
            continue
        if writes_only and not entry.get("wrote"):
            continue
        entries.append(entry)

    return entries[::-1][:limit]
