"""Markdown -> record parsers, one per document kind.

Two layouts recur:
- entity blocks: repeated ``### [ID:] Title`` headings (``##`` for
  capabilities) whose bodies hold inline fields, a paragraph and bullets
- flat sections: a fixed set of ``## Name`` sections, each with a few
  accepted spellings, assigned straight to record fields

Missing fields fall back to the record defaults; nothing here raises.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from archmemory.markdown.models import (
    Capability,
    CapabilitiesDocument,
    Constraint,
    ConstraintsDocument,
    ContextDocument,
    DebtItem,
    Decision,
    DecisionsDocument,
    GlossaryDocument,
    GovernanceDocument,
    Milestone,
    PoliticsDocument,
    Principle,
    PrinciplesDocument,
    Risk,
    RisksDocument,
    RoadmapDocument,
    StandardsDocument,
    Stakeholder,
    StakeholderProfile,
    TechCategory,
    TechDebtDocument,
    Technology,
    Term,
)
from archmemory.markdown.primitives import (
    extract_field,
    extract_first_paragraph,
    extract_list_items,
    extract_sections,
    extract_title,
    parse_table,
    split_blocks,
    split_id_prefix,
)

CONSTRAINT_TYPES = ("Technical", "Regulatory", "Organizational", "Budget")

# Accepted section headings, preferred spelling first
CONTEXT_SECTIONS: dict[str, tuple[str, ...]] = {
    "overview": ("Overview", "overview"),
    "stakeholders": ("Key Stakeholders", "Stakeholders"),
    "tech_stack": ("Technical Stack", "Tech Stack", "Technology"),
    "sites": ("Sites", "Locations"),
    "notes": ("Notes", "Additional Notes"),
}

GOVERNANCE_SECTIONS: dict[str, tuple[str, ...]] = {
    "cab_process": ("CAB Process", "Change Advisory Board"),
    "arb_process": ("ARB Process", "Architecture Review Board"),
    "exceptions": ("Exception Process", "Exceptions"),
    "escalation": ("Escalation", "Escalation Path"),
}

_CONSTRAINT_ITEM_RE = re.compile(r"^[ \t]*[-*][ \t]+\*\*(.+?)\*\*[ \t]*:?[ \t]*(.*)$")
_CONSTRAINT_SECTION_RE = re.compile(r"^(.+?)[ \t]+Constraints$", re.IGNORECASE)


def _first_section(sections: dict[str, str], names: tuple[str, ...]) -> str:
    for name in names:
        if sections.get(name):
            return sections[name]
    return ""


def _cell(row: dict[str, str], *names: str) -> str | None:
    """Look up a table cell by header, ignoring header case."""
    lowered = {key.lower(): value for key, value in row.items()}
    for name in names:
        if name in lowered:
            return lowered[name]
    return None


def _entity_blocks(content: str, level: int, prefix: str = "") -> Iterator[tuple[str, str, str]]:
    """Yield (ID, heading text, body) for each entity block.

    An ``ID:`` field in the body wins. A heading that starts with that same
    ID loses it once, so a title such as ``RISK-9 rollback`` under
    ``### RISK-1: RISK-9 rollback`` keeps its own leading token. Without an
    ID field, a ``PREFIX-n`` heading prefix is the ID.
    """
    for block in split_blocks(content, level):
        if not prefix:
            yield "", block.heading, block.body
            continue
        field_id = extract_field(block.body, "ID")
        if field_id:
            own_prefix = re.match(
                rf"^{re.escape(field_id)}(?:[ \t]*:[ \t]*|[ \t]+|$)(.*)$",
                block.heading,
                re.IGNORECASE,
            )
            if own_prefix:
                yield field_id, own_prefix.group(1).strip(), block.body
                continue
        heading_id, heading = split_id_prefix(block.heading, prefix)
        yield field_id or heading_id, heading, block.body


def parse_context(content: str) -> ContextDocument:
    sections = extract_sections(content)
    stakeholders = [
        Stakeholder(
            name=_cell(row, "stakeholder", "name") or "",
            role=_cell(row, "role") or "",
            interest=_cell(row, "interest", "interests") or "",
        )
        for row in parse_table(_first_section(sections, CONTEXT_SECTIONS["stakeholders"]))
    ]
    return ContextDocument(
        title=extract_title(content),
        overview=_first_section(sections, CONTEXT_SECTIONS["overview"]),
        stakeholders=stakeholders,
        tech_stack=_first_section(sections, CONTEXT_SECTIONS["tech_stack"]),
        sites=_first_section(sections, CONTEXT_SECTIONS["sites"]),
        notes=_first_section(sections, CONTEXT_SECTIONS["notes"]),
    )


def parse_risks(content: str) -> RisksDocument:
    risks: list[Risk] = []
    for entity_id, title, body in _entity_blocks(content, 3, "RISK"):
        risks.append(
            Risk(
                id=entity_id or f"RISK-{len(risks) + 1}",
                title=title,
                description=extract_field(body, "Description") or extract_first_paragraph(body),
                likelihood=extract_field(body, "Likelihood") or "Medium",
                impact=extract_field(body, "Impact") or "Medium",
                mitigation=extract_field(body, "Mitigation"),
                owner=extract_field(body, "Owner"),
                status=extract_field(body, "Status") or "Open",
            )
        )
    return RisksDocument(title=extract_title(content), risks=risks)


def parse_tech_debt(content: str) -> TechDebtDocument:
    items: list[DebtItem] = []
    for entity_id, title, body in _entity_blocks(content, 3, "TD"):
        items.append(
            DebtItem(
                id=entity_id or f"TD-{len(items) + 1}",
                title=title,
                description=extract_field(body, "Description") or extract_first_paragraph(body),
                type=extract_field(body, "Type") or "Code",
                severity=extract_field(body, "Severity") or "Medium",
                effort=extract_field(body, "Effort") or "Medium",
                impact=extract_field(body, "Impact"),
                recommendation=extract_field(body, "Recommendation"),
            )
        )
    return TechDebtDocument(title=extract_title(content), items=items)


def parse_decisions(content: str) -> DecisionsDocument:
    decisions: list[Decision] = []
    for entity_id, title, body in _entity_blocks(content, 3, "DEC"):
        decisions.append(
            Decision(
                id=entity_id or f"DEC-{len(decisions) + 1}",
                title=title,
                status=extract_field(body, "Status") or "Pending",
                context=extract_field(body, "Context"),
                options=extract_field(body, "Options"),
                decision=extract_field(body, "Decision"),
                consequences=extract_field(body, "Consequences"),
                date=extract_field(body, "Date"),
            )
        )
    return DecisionsDocument(title=extract_title(content), decisions=decisions)


def parse_glossary(content: str) -> GlossaryDocument:
    terms: list[Term] = []
    for row in parse_table(content):
        cells = list(row.values())
        term = _cell(row, "term")
        definition = _cell(row, "definition")
        if term is None:
            term = cells[0]
        if definition is None:
            definition = cells[1] if len(cells) > 1 else ""
        if term or definition:
            terms.append(Term(term=term, definition=definition))
    return GlossaryDocument(title=extract_title(content), terms=terms)


def canonical_constraint_type(constraint_type: str) -> str:
    """Map a type onto its known spelling (``technical`` -> ``Technical``).

    Unknown types are kept as written. A blank type counts as Technical.
    """
    cleaned = constraint_type.strip()
    if not cleaned:
        return CONSTRAINT_TYPES[0]
    for known in CONSTRAINT_TYPES:
        if known.lower() == cleaned.lower():
            return known
    return cleaned


def parse_constraints(content: str) -> ConstraintsDocument:
    """Collect ``- **Name**: description`` items from every ``## <Type> Constraints`` section.

    Sections are read in document order. A description runs until the next
    bold bullet, so it may span lines.
    """
    constraints: list[Constraint] = []
    for block in split_blocks(content, 2):
        section = _CONSTRAINT_SECTION_RE.match(block.heading)
        if not section:
            continue
        constraint_type = canonical_constraint_type(section.group(1))
        current: Constraint | None = None
        description: list[str] = []
        for line in block.body.splitlines():
            match = _CONSTRAINT_ITEM_RE.match(line)
            if match:
                if current is not None:
                    current.description = "\n".join(description).strip()
                    constraints.append(current)
                current = Constraint(
                    type=constraint_type,
                    name=match.group(1).strip().rstrip(":").strip(),
                )
                description = [match.group(2)]
            elif current is not None:
                description.append(line)
        if current is not None:
            current.description = "\n".join(description).strip()
            constraints.append(current)
    return ConstraintsDocument(title=extract_title(content), constraints=constraints)


def parse_capabilities(content: str) -> CapabilitiesDocument:
    capabilities = [
        Capability(
            name=name,
            description=extract_first_paragraph(body),
            systems=extract_list_items(body),
        )
        for _, name, body in _entity_blocks(content, 2)
    ]
    return CapabilitiesDocument(title=extract_title(content), capabilities=capabilities)


def parse_roadmap(content: str) -> RoadmapDocument:
    milestones = [
        Milestone(
            title=title,
            timeframe=extract_field(body, "Timeframe") or extract_field(body, "Timeline"),
            status=extract_field(body, "Status") or "Planned",
            goals=extract_list_items(body),
        )
        for _, title, body in _entity_blocks(content, 3)
    ]
    return RoadmapDocument(title=extract_title(content), milestones=milestones)


def parse_politics(content: str) -> PoliticsDocument:
    stakeholders = [
        StakeholderProfile(
            name=name,
            role=extract_field(body, "Role"),
            influence=extract_field(body, "Influence") or "Medium",
            stance=extract_field(body, "Stance") or "Neutral",
            interests=extract_field(body, "Interests"),
            concerns=extract_field(body, "Concerns"),
            strategy=extract_field(body, "Strategy"),
        )
        for _, name, body in _entity_blocks(content, 3)
    ]
    return PoliticsDocument(title=extract_title(content), stakeholders=stakeholders)


def parse_principles(content: str) -> PrinciplesDocument:
    principles: list[Principle] = []
    for entity_id, name, body in _entity_blocks(content, 3, "AP"):
        principles.append(
            Principle(
                id=entity_id or f"AP-{len(principles) + 1}",
                name=name,
                statement=extract_field(body, "Statement") or extract_first_paragraph(body),
                rationale=extract_field(body, "Rationale"),
                implications=extract_field(body, "Implications"),
            )
        )
    return PrinciplesDocument(title=extract_title(content), principles=principles)


def parse_standards(content: str) -> StandardsDocument:
    """One technology table per ``## Category``. Categories without rows are skipped."""
    categories: list[TechCategory] = []
    for _, category, body in _entity_blocks(content, 2):
        technologies = []
        for row in parse_table(body):
            name = _cell(row, "technology", "name")
            technologies.append(
                Technology(
                    technology=name if name is not None else next(iter(row.values()), ""),
                    status=_cell(row, "status") or "",
                    notes=_cell(row, "notes") or "",
                )
            )
        if technologies:
            categories.append(TechCategory(category=category, technologies=technologies))
    return StandardsDocument(title=extract_title(content), categories=categories)


def parse_governance(content: str) -> GovernanceDocument:
    sections = extract_sections(content)
    return GovernanceDocument(
        title=extract_title(content),
        cab_process=_first_section(sections, GOVERNANCE_SECTIONS["cab_process"]),
        arb_process=_first_section(sections, GOVERNANCE_SECTIONS["arb_process"]),
        exceptions=_first_section(sections, GOVERNANCE_SECTIONS["exceptions"]),
        escalation=_first_section(sections, GOVERNANCE_SECTIONS["escalation"]),
    )
