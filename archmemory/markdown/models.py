"""Typed records for the architecture memory documents.

Each document kind has its own record type. Entities inside a record are
plain value objects whose position in the list is their identity: the order
they were parsed in is the order they are edited and written back in.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Union, get_args, get_type_hints


class DocumentKind(str, Enum):
    """Schema identifiers. Each kind is stored as ``{kind}.md``."""

    CONTEXT = "context"
    RISKS = "risks"
    TECH_DEBT = "tech_debt"
    DECISIONS = "decisions"
    GLOSSARY = "glossary"
    CONSTRAINTS = "constraints"
    CAPABILITIES = "capabilities"
    ROADMAP = "roadmap"
    POLITICS = "politics"
    PRINCIPLES = "principles"
    STANDARDS = "standards"
    GOVERNANCE = "governance"

    @classmethod
    def lookup(cls, value: DocumentKind | str) -> DocumentKind | None:
        """Return the matching kind, or None for an unrecognized identifier."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def filename(self) -> str:
        return f"{self.value}.md"


@dataclass
class Stakeholder:
    name: str = ""
    role: str = ""
    interest: str = ""


@dataclass
class ContextDocument:
    title: str = ""
    overview: str = ""
    stakeholders: list[Stakeholder] = field(default_factory=list)
    tech_stack: str = ""
    sites: str = ""
    notes: str = ""


@dataclass
class Risk:
    id: str = ""  # "RISK-1"
    title: str = ""
    description: str = ""
    likelihood: str = "Medium"  # "Low" | "Medium" | "High" | "Critical"
    impact: str = "Medium"  # "Low" | "Medium" | "High" | "Critical"
    mitigation: str = ""
    owner: str = ""
    status: str = "Open"  # "Open" | "Mitigating" | "Accepted" | "Closed"


@dataclass
class RisksDocument:
    title: str = ""
    risks: list[Risk] = field(default_factory=list)


@dataclass
class DebtItem:
    id: str = ""  # "TD-1"
    title: str = ""
    description: str = ""
    type: str = "Code"  # "Code" | "Architecture" | "Infrastructure" | "Documentation" | "Testing"
    severity: str = "Medium"  # "Low" | "Medium" | "High" | "Critical"
    effort: str = "Medium"  # "Low" | "Medium" | "High"
    impact: str = ""
    recommendation: str = ""


@dataclass
class TechDebtDocument:
    title: str = ""
    items: list[DebtItem] = field(default_factory=list)


@dataclass
class Decision:
    id: str = ""  # "DEC-1"
    title: str = ""
    status: str = "Pending"  # "Pending" | "Approved" | "Rejected" | "Superseded"
    context: str = ""
    options: str = ""
    decision: str = ""
    consequences: str = ""
    date: str = ""


@dataclass
class DecisionsDocument:
    title: str = ""
    decisions: list[Decision] = field(default_factory=list)


@dataclass
class Term:
    term: str = ""
    definition: str = ""


@dataclass
class GlossaryDocument:
    title: str = ""
    terms: list[Term] = field(default_factory=list)


@dataclass
class Constraint:
    type: str = ""  # "Technical" | "Regulatory" | "Organizational" | "Budget"
    name: str = ""
    description: str = ""


@dataclass
class ConstraintsDocument:
    title: str = ""
    constraints: list[Constraint] = field(default_factory=list)


@dataclass
class Capability:
    name: str = ""
    description: str = ""
    systems: list[str] = field(default_factory=list)


@dataclass
class CapabilitiesDocument:
    title: str = ""
    capabilities: list[Capability] = field(default_factory=list)


@dataclass
class Milestone:
    title: str = ""
    timeframe: str = ""
    status: str = "Planned"  # "Planned" | "In Progress" | "Completed" | "Delayed"
    goals: list[str] = field(default_factory=list)


@dataclass
class RoadmapDocument:
    title: str = ""
    milestones: list[Milestone] = field(default_factory=list)


@dataclass
class StakeholderProfile:
    name: str = ""
    role: str = ""
    influence: str = "Medium"  # "Low" | "Medium" | "High"
    stance: str = "Neutral"  # "Champion" | "Supporter" | "Neutral" | "Skeptic" | "Blocker"
    interests: str = ""
    concerns: str = ""
    strategy: str = ""


@dataclass
class PoliticsDocument:
    title: str = ""
    stakeholders: list[StakeholderProfile] = field(default_factory=list)


@dataclass
class Principle:
    id: str = ""  # "AP-1"
    name: str = ""
    statement: str = ""
    rationale: str = ""
    implications: str = ""


@dataclass
class PrinciplesDocument:
    title: str = ""
    principles: list[Principle] = field(default_factory=list)


@dataclass
class Technology:
    technology: str = ""
    status: str = ""  # "Adopt" | "Trial" | "Assess" | "Hold"
    notes: str = ""


@dataclass
class TechCategory:
    category: str = ""
    technologies: list[Technology] = field(default_factory=list)


@dataclass
class StandardsDocument:
    title: str = ""
    categories: list[TechCategory] = field(default_factory=list)


@dataclass
class GovernanceDocument:
    title: str = ""
    cab_process: str = ""
    arb_process: str = ""
    exceptions: str = ""
    escalation: str = ""


@dataclass
class RawDocument:
    """Opaque content of a file whose kind is not recognized."""

    raw: str = ""


Document = Union[
    ContextDocument,
    RisksDocument,
    TechDebtDocument,
    DecisionsDocument,
    GlossaryDocument,
    ConstraintsDocument,
    CapabilitiesDocument,
    RoadmapDocument,
    PoliticsDocument,
    PrinciplesDocument,
    StandardsDocument,
    GovernanceDocument,
    RawDocument,
]

DOCUMENT_TYPES: dict[DocumentKind, type] = {
    DocumentKind.CONTEXT: ContextDocument,
    DocumentKind.RISKS: RisksDocument,
    DocumentKind.TECH_DEBT: TechDebtDocument,
    DocumentKind.DECISIONS: DecisionsDocument,
    DocumentKind.GLOSSARY: GlossaryDocument,
    DocumentKind.CONSTRAINTS: ConstraintsDocument,
    DocumentKind.CAPABILITIES: CapabilitiesDocument,
    DocumentKind.ROADMAP: RoadmapDocument,
    DocumentKind.POLITICS: PoliticsDocument,
    DocumentKind.PRINCIPLES: PrinciplesDocument,
    DocumentKind.STANDARDS: StandardsDocument,
    DocumentKind.GOVERNANCE: GovernanceDocument,
}

# Prefix of the IDs auto-assigned to entities of each kind
ID_PREFIXES: dict[DocumentKind, str] = {
    DocumentKind.RISKS: "RISK",
    DocumentKind.TECH_DEBT: "TD",
    DocumentKind.DECISIONS: "DEC",
    DocumentKind.PRINCIPLES: "AP",
}

# Keys used on the JSON editing surface where they differ from the field name
_WIRE_NAMES: dict[tuple[type, str], str] = {
    (ContextDocument, "tech_stack"): "techStack",
    (GovernanceDocument, "cab_process"): "cabProcess",
    (GovernanceDocument, "arb_process"): "arbProcess",
    (Technology, "technology"): "Technology",
    (Technology, "status"): "Status",
    (Technology, "notes"): "Notes",
}

# Extra keys accepted when reading a record from a dict
_ALIASES: dict[tuple[type, str], tuple[str, ...]] = {
    (Stakeholder, "name"): ("stakeholder",),
    (Stakeholder, "interest"): ("interests",),
}


def to_dict(record: Any) -> Any:
    """Convert a record (or list of records) to JSON-ready plain data."""
    if isinstance(record, list):
        return [to_dict(item) for item in record]
    if not is_dataclass(record):
        return record
    cls = type(record)
    return {
        _WIRE_NAMES.get((cls, f.name), f.name): to_dict(getattr(record, f.name))
        for f in fields(record)
    }


def document_from_dict(kind: DocumentKind | str, data: Mapping[str, Any]) -> Document:
    """Build the typed record for ``kind`` from editing-surface data.

    Missing keys take the record's defaults. Keys are matched by field name,
    by wire name, or case-insensitively, so table-derived rows such as
    ``{"Technology": ..., "Status": ...}`` are accepted as-is.
    """
    doc_kind = DocumentKind.lookup(kind)
    if doc_kind is None:
        raw = data.get("raw", "") if isinstance(data, Mapping) else ""
        return RawDocument(raw=str(raw or ""))
    return _from_dict(DOCUMENT_TYPES[doc_kind], data)


def _from_dict(cls: type, data: Any) -> Any:
    if not isinstance(data, Mapping):
        return cls()
    lowered = {str(k).lower(): v for k, v in data.items()}
    hints = get_type_hints(cls)
    values: dict[str, Any] = {}
    for f in fields(cls):
        candidates = [f.name, _WIRE_NAMES.get((cls, f.name), f.name)]
        candidates.extend(_ALIASES.get((cls, f.name), ()))
        value = None
        for key in candidates:
            if key in data:
                value = data[key]
                break
            if key.lower() in lowered:
                value = lowered[key.lower()]
                break
        if value is None:
            continue

        item_types = get_args(hints[f.name])
        if item_types:
            item_type = item_types[0]
            items = value if isinstance(value, list) else []
            if is_dataclass(item_type):
                values[f.name] = [_from_dict(item_type, item) for item in items]
            else:
                values[f.name] = [str(item) for item in items if item is not None]
        else:
            values[f.name] = str(value)
    return cls(**values)


def entities_of(document: Document) -> list[Any]:
    """Return the entity list of a document, or [] for flat-section kinds."""
    for f in fields(document):
        value = getattr(document, f.name)
        if isinstance(value, list):
            return value
    return []


def next_entity_id(existing_ids: Iterable[str], prefix: str) -> str:
    """Return a fresh ``{prefix}-{n}`` ID, one past the highest in use.

    Unlike positional IDs this never hands out a number that is still
    attached to another entity.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}-?(\d+)$", re.IGNORECASE)
    highest = 0
    for entity_id in existing_ids:
        match = pattern.match(entity_id.strip())
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}-{highest + 1}"


def assign_missing_ids(document: Document, kind: DocumentKind | str) -> Document:
    """Give every entity without an ID a fresh one. Mutates and returns the document."""
    doc_kind = DocumentKind.lookup(kind)
    prefix = ID_PREFIXES.get(doc_kind) if doc_kind else None
    if prefix is None:
        return document

    entities = entities_of(document)
    for entity in entities:
        if not entity.id.strip():
            entity.id = next_entity_id((e.id for e in entities), prefix)
    return document
