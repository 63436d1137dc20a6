"""Record -> canonical markdown generators, one per document kind.

Output is deterministic: a level-1 title, then blocks in a fixed order with
fixed labels. Empty fields are left out entirely, so a record with no
entities renders as just its title. Inline values and table cells are kept on
one line because the parsers read them back line by line.
"""

from __future__ import annotations

import re

from archmemory.markdown.models import (
    CapabilitiesDocument,
    ConstraintsDocument,
    ContextDocument,
    DecisionsDocument,
    GlossaryDocument,
    GovernanceDocument,
    PoliticsDocument,
    PrinciplesDocument,
    RisksDocument,
    RoadmapDocument,
    StandardsDocument,
    TechDebtDocument,
)
from archmemory.markdown.parsers import CONSTRAINT_TYPES, canonical_constraint_type

CONFIDENTIAL_BANNER = "> ⚠️ CONFIDENTIAL"

STAKEHOLDER_HEADERS = ["Stakeholder", "Role", "Interest"]
GLOSSARY_HEADERS = ["Term", "Definition"]
TECHNOLOGY_HEADERS = ["Technology", "Status", "Notes"]

_NEWLINE_RE = re.compile(r"[ \t]*\r?\n\s*")


def _inline(value: str) -> str:
    return _NEWLINE_RE.sub(" ", value.strip())


def _cell(value: str) -> str:
    return _inline(value).replace("|", "\\|")


def _render(title: str, blocks: list[str]) -> str:
    parts = [f"# {_inline(title)}"]
    parts.extend(block for block in blocks if block)
    return "\n\n".join(parts) + "\n"


def _join(*parts: str) -> str:
    return "\n\n".join(part for part in parts if part)


def _bullet_fields(pairs: list[tuple[str, str]]) -> str:
    return "\n".join(f"- **{label}:** {_inline(value)}" for label, value in pairs if value.strip())


def _bold_fields(pairs: list[tuple[str, str]]) -> str:
    return "\n\n".join(f"**{label}:** {_inline(value)}" for label, value in pairs if value.strip())


def _bullet_list(items: list[str]) -> str:
    return "\n".join(f"- {_inline(item)}" for item in items if item.strip())


def _entity_heading(entity_id: str, title: str) -> str:
    """``### ID: Title``, or ``### Title`` for an entity without an ID."""
    if entity_id.strip():
        return f"### {_inline(entity_id)}: {_inline(title)}"
    return f"### {_inline(title)}"


def _section(name: str, body: str) -> str:
    if not body.strip():
        return ""
    return f"## {name}\n\n{body.strip()}"


def _table(headers: list[str], rows: list[list[str]]) -> str:
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(value) for value in row) + " |")
    return "\n".join(lines)


def generate_context(document: ContextDocument) -> str:
    stakeholders = ""
    if document.stakeholders:
        stakeholders = "## Key Stakeholders\n\n" + _table(
            STAKEHOLDER_HEADERS,
            [[s.name, s.role, s.interest] for s in document.stakeholders],
        )
    return _render(
        document.title or "Architecture Context",
        [
            _section("Overview", document.overview),
            stakeholders,
            _section("Technical Stack", document.tech_stack),
            _section("Sites", document.sites),
            _section("Notes", document.notes),
        ],
    )


def generate_risks(document: RisksDocument) -> str:
    blocks = [
        _join(
            _entity_heading(risk.id, risk.title),
            _bullet_fields([
                ("ID", risk.id),
                ("Likelihood", risk.likelihood),
                ("Impact", risk.impact),
                ("Status", risk.status),
                ("Owner", risk.owner),
            ]),
            _bold_fields([
                ("Description", risk.description),
                ("Mitigation", risk.mitigation),
            ]),
        )
        for risk in document.risks
    ]
    return _render(document.title or "Risk Register", blocks)


def generate_tech_debt(document: TechDebtDocument) -> str:
    blocks = [
        _join(
            _entity_heading(item.id, item.title),
            _bullet_fields([
                ("ID", item.id),
                ("Type", item.type),
                ("Severity", item.severity),
                ("Effort", item.effort),
            ]),
            _bold_fields([
                ("Description", item.description),
                ("Impact", item.impact),
                ("Recommendation", item.recommendation),
            ]),
        )
        for item in document.items
    ]
    return _render(document.title or "Technical Debt Register", blocks)


def generate_decisions(document: DecisionsDocument) -> str:
    blocks = [
        _join(
            _entity_heading(decision.id, decision.title),
            _bullet_fields([
                ("ID", decision.id),
                ("Status", decision.status),
                ("Date", decision.date),
            ]),
            _bold_fields([
                ("Context", decision.context),
                ("Options", decision.options),
                ("Decision", decision.decision),
                ("Consequences", decision.consequences),
            ]),
        )
        for decision in document.decisions
    ]
    return _render(document.title or "Decision Log", blocks)


def generate_glossary(document: GlossaryDocument) -> str:
    table = ""
    if document.terms:
        table = _table(GLOSSARY_HEADERS, [[t.term, t.definition] for t in document.terms])
    return _render(document.title or "Glossary", [table])


def generate_constraints(document: ConstraintsDocument) -> str:
    """Group constraints by type: the four known types first, then any others.

    Types are grouped case-insensitively, under the known spelling where
    there is one.
    """
    by_type: dict[str, list] = {constraint_type: [] for constraint_type in CONSTRAINT_TYPES}
    for constraint in document.constraints:
        by_type.setdefault(canonical_constraint_type(constraint.type), []).append(constraint)

    blocks = []
    for constraint_type, items in by_type.items():
        if not items:
            continue
        lines = [f"- **{_inline(c.name)}:** {_inline(c.description)}".rstrip() for c in items]
        blocks.append(f"## {constraint_type} Constraints\n\n" + "\n".join(lines))
    return _render(document.title or "Constraints", blocks)


def generate_capabilities(document: CapabilitiesDocument) -> str:
    blocks = [
        _join(
            f"## {_inline(capability.name)}",
            _inline(capability.description),
            _bullet_list(capability.systems),
        )
        for capability in document.capabilities
    ]
    return _render(document.title or "Business Capabilities", blocks)


def generate_roadmap(document: RoadmapDocument) -> str:
    blocks = [
        _join(
            f"### {_inline(milestone.title)}",
            _bold_fields([
                ("Timeframe", milestone.timeframe),
                ("Status", milestone.status),
            ]),
            _bullet_list(milestone.goals),
        )
        for milestone in document.milestones
    ]
    return _render(document.title or "Roadmap", blocks)


def generate_politics(document: PoliticsDocument) -> str:
    blocks = [CONFIDENTIAL_BANNER] if document.stakeholders else []
    blocks.extend(
        _join(
            f"### {_inline(profile.name)}",
            _bullet_fields([
                ("Role", profile.role),
                ("Influence", profile.influence),
                ("Stance", profile.stance),
            ]),
            _bold_fields([
                ("Interests", profile.interests),
                ("Concerns", profile.concerns),
                ("Strategy", profile.strategy),
            ]),
        )
        for profile in document.stakeholders
    )
    return _render(document.title or "Stakeholder Dynamics", blocks)


def generate_principles(document: PrinciplesDocument) -> str:
    blocks = [
        _join(
            _entity_heading(principle.id, principle.name),
            _bullet_fields([("ID", principle.id)]),
            _bold_fields([
                ("Statement", principle.statement),
                ("Rationale", principle.rationale),
                ("Implications", principle.implications),
            ]),
        )
        for principle in document.principles
    ]
    return _render(document.title or "Architecture Principles", blocks)


def generate_standards(document: StandardsDocument) -> str:
    """Render one ``Technology | Status | Notes`` table per category.

    The headers are fixed rather than taken from the first row, so records
    with differently cased keys still line up.
    """
    blocks = []
    for category in document.categories:
        table = ""
        if category.technologies:
            table = _table(
                TECHNOLOGY_HEADERS,
                [[t.technology, t.status, t.notes] for t in category.technologies],
            )
        blocks.append(_join(f"## {_inline(category.category)}", table))
    return _render(document.title or "Technology Standards", blocks)


def generate_governance(document: GovernanceDocument) -> str:
    return _render(
        document.title or "Governance",
        [
            _section("CAB Process", document.cab_process),
            _section("ARB Process", document.arb_process),
            _section("Exception Process", document.exceptions),
            _section("Escalation", document.escalation),
        ],
    )
