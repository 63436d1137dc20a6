"""Dispatch between document kinds and their parser/generator pair.

``parse_markdown`` and ``generate_markdown`` are the entry points used by the
memory store, the CLI and the MCP server. Unknown kinds are not an error:
their content passes through untouched as a ``RawDocument``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from archmemory.markdown import generators, parsers
from archmemory.markdown.models import (
    DOCUMENT_TYPES,
    Document,
    DocumentKind,
    RawDocument,
    document_from_dict,
    to_dict,
)

logger = logging.getLogger(__name__)


def parse_markdown(content: str, kind: DocumentKind | str) -> Document:
    """Parse ``content`` into the record type for ``kind``."""
    doc_kind = DocumentKind.lookup(kind)
    if doc_kind is None:
        logger.warning(f"Unknown document kind {kind!r}, keeping raw content")
        return RawDocument(raw=content)

    if doc_kind is DocumentKind.CONTEXT:
        return parsers.parse_context(content)
    elif doc_kind is DocumentKind.RISKS:
        return parsers.parse_risks(content)
    elif doc_kind is DocumentKind.TECH_DEBT:
        return parsers.parse_tech_debt(content)
    elif doc_kind is DocumentKind.DECISIONS:
        return parsers.parse_decisions(content)
    elif doc_kind is DocumentKind.GLOSSARY:
        return parsers.parse_glossary(content)
    elif doc_kind is DocumentKind.CONSTRAINTS:
        return parsers.parse_constraints(content)
    elif doc_kind is DocumentKind.CAPABILITIES:
        return parsers.parse_capabilities(content)
    elif doc_kind is DocumentKind.ROADMAP:
        return parsers.parse_roadmap(content)
    elif doc_kind is DocumentKind.POLITICS:
        return parsers.parse_politics(content)
    elif doc_kind is DocumentKind.PRINCIPLES:
        return parsers.parse_principles(content)
    elif doc_kind is DocumentKind.STANDARDS:
        return parsers.parse_standards(content)
    elif doc_kind is DocumentKind.GOVERNANCE:
        return parsers.parse_governance(content)
    raise AssertionError(f"No parser for document kind {doc_kind}")


def generate_markdown(document: Document | Mapping[str, Any], kind: DocumentKind | str) -> str:
    """Render ``document`` as canonical markdown for ``kind``.

    ``document`` may also be plain editing-surface data (a dict), which is
    converted to the typed record first.
    """
    doc_kind = DocumentKind.lookup(kind)
    if doc_kind is None:
        logger.warning(f"Unknown document kind {kind!r}, writing raw content")
        if isinstance(document, RawDocument):
            return document.raw
        if isinstance(document, Mapping):
            return str(document.get("raw") or "")
        return str(getattr(document, "raw", "") or "")

    record = _coerce(document, doc_kind)
    if doc_kind is DocumentKind.CONTEXT:
        return generators.generate_context(record)
    elif doc_kind is DocumentKind.RISKS:
        return generators.generate_risks(record)
    elif doc_kind is DocumentKind.TECH_DEBT:
        return generators.generate_tech_debt(record)
    elif doc_kind is DocumentKind.DECISIONS:
        return generators.generate_decisions(record)
    elif doc_kind is DocumentKind.GLOSSARY:
        return generators.generate_glossary(record)
    elif doc_kind is DocumentKind.CONSTRAINTS:
        return generators.generate_constraints(record)
    elif doc_kind is DocumentKind.CAPABILITIES:
        return generators.generate_capabilities(record)
    elif doc_kind is DocumentKind.ROADMAP:
        return generators.generate_roadmap(record)
    elif doc_kind is DocumentKind.POLITICS:
        return generators.generate_politics(record)
    elif doc_kind is DocumentKind.PRINCIPLES:
        return generators.generate_principles(record)
    elif doc_kind is DocumentKind.STANDARDS:
        return generators.generate_standards(record)
    elif doc_kind is DocumentKind.GOVERNANCE:
        return generators.generate_governance(record)
    raise AssertionError(f"No generator for document kind {doc_kind}")


def _coerce(document: Any, kind: DocumentKind) -> Any:
    """Return ``document`` as the record type for ``kind``."""
    if isinstance(document, DOCUMENT_TYPES[kind]):
        return document
    if isinstance(document, Mapping):
        return document_from_dict(kind, document)
    logger.debug(f"Converting {type(document).__name__} to {kind.value} record")
    return document_from_dict(kind, to_dict(document))


def normalize_markdown(content: str, kind: DocumentKind | str) -> str:
    """Parse and regenerate ``content``, yielding its canonical form."""
    return generate_markdown(parse_markdown(content, kind), kind)
