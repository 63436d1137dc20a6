"""Empty-state records written when a project is created."""

from __future__ import annotations

from archmemory.markdown.models import (
    CapabilitiesDocument,
    ConstraintsDocument,
    ContextDocument,
    DecisionsDocument,
    Document,
    DocumentKind,
    GlossaryDocument,
    GovernanceDocument,
    PoliticsDocument,
    PrinciplesDocument,
    RisksDocument,
    RoadmapDocument,
    StandardsDocument,
    TechDebtDocument,
)


def project_templates(project: str) -> dict[DocumentKind, Document]:
    return {
        DocumentKind.CONTEXT: ContextDocument(title=f"{project} - Architecture Context"),
        DocumentKind.CAPABILITIES: CapabilitiesDocument(title=f"Business Capabilities - {project}"),
        DocumentKind.CONSTRAINTS: ConstraintsDocument(title=f"Constraints - {project}"),
        DocumentKind.DECISIONS: DecisionsDocument(title=f"Decision Log - {project}"),
        DocumentKind.TECH_DEBT: TechDebtDocument(title=f"Technical Debt - {project}"),
        DocumentKind.ROADMAP: RoadmapDocument(title=f"Roadmap - {project}"),
        DocumentKind.RISKS: RisksDocument(title=f"Risk Register - {project}"),
        DocumentKind.POLITICS: PoliticsDocument(title=f"Stakeholder Dynamics - {project}"),
        DocumentKind.GLOSSARY: GlossaryDocument(title=f"Glossary - {project}"),
    }


def organization_templates() -> dict[DocumentKind, Document]:
    return {
        DocumentKind.PRINCIPLES: PrinciplesDocument(title="Architecture Principles"),
        DocumentKind.STANDARDS: StandardsDocument(title="Technology Standards"),
        DocumentKind.GLOSSARY: GlossaryDocument(title="Glossary"),
        DocumentKind.GOVERNANCE: GovernanceDocument(title="Governance"),
    }
