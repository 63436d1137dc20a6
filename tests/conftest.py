"""Shared test fixtures for archmemory."""

from __future__ import annotations

from pathlib import Path

import pytest

from archmemory.markdown.models import (
    Capability,
    CapabilitiesDocument,
    Constraint,
    ConstraintsDocument,
    ContextDocument,
    DebtItem,
    Decision,
    DecisionsDocument,
    DocumentKind,
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
from archmemory.storage.memory import MemoryStore

ENV_KEYS = ["ARCHMEMORY_PATH", "ARCHMEMORY_WORKSPACE", "ARCHMEMORY_PROJECT", "ARCHMEMORY_LOG_PATH"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def memory_root(tmp_path: Path) -> Path:
    root = tmp_path / "architecture_memory"
    root.mkdir()
    return root


@pytest.fixture
def store(memory_root: Path) -> MemoryStore:
    return MemoryStore(memory_root)


@pytest.fixture
def full_documents() -> dict[DocumentKind, object]:
    """One fully populated record per kind, with no empty or default-only fields."""
    return {
        DocumentKind.CONTEXT: ContextDocument(
            title="Loyalty - Architecture Context",
            overview="Points platform for retail partners.\n\nServes 4M members.",
            stakeholders=[
                Stakeholder(name="Ana Silva", role="CTO", interest="Platform cost"),
                Stakeholder(name="Raj Patel", role="Head of CRM", interest="Campaign speed"),
            ],
            tech_stack="- Java 17\n- Kafka\n- PostgreSQL",
            sites="Lisbon, Austin",
            notes="Migration to the new ledger starts in Q3.",
        ),
        DocumentKind.RISKS: RisksDocument(
            title="Risk Register - Loyalty",
            risks=[
                Risk(
                    id="RISK-9",
                    title="Vendor lock-in",
                    description="All workloads run on a single cloud provider.",
                    likelihood="High",
                    impact="Critical",
                    mitigation="Keep infrastructure code portable.",
                    owner="Platform team",
                    status="Mitigating",
                ),
                Risk(
                    id="RISK-2",
                    title="Ledger migration slips",
                    description="Dual writes are not yet tested at volume.",
                    likelihood="Low",
                    impact="High",
                    mitigation="Load test before cutover.",
                    owner="Data team",
                    status="Accepted",
                ),
            ],
        ),
        DocumentKind.TECH_DEBT: TechDebtDocument(
            title="Technical Debt - Loyalty",
            items=[
                DebtItem(
                    id="TD-3",
                    title="Custom session handling",
                    description="Sessions are stored in a hand-rolled cache.",
                    type="Architecture",
                    severity="High",
                    effort="Low",
                    impact="Logins fail during cache restarts.",
                    recommendation="Move to the shared OIDC provider.",
                ),
            ],
        ),
        DocumentKind.DECISIONS: DecisionsDocument(
            title="Decision Log - Loyalty",
            decisions=[
                Decision(
                    id="DEC-4",
                    title="Event backbone",
                    status="Approved",
                    context="Partners need near real-time point updates.",
                    options="Kafka, RabbitMQ, polling",
                    decision="Use Kafka for all point events.",
                    consequences="Ops must run a Kafka cluster.",
                    date="2024-05-01",
                ),
            ],
        ),
        DocumentKind.GLOSSARY: GlossaryDocument(
            title="Glossary - Loyalty",
            terms=[
                Term(term="Accrual", definition="Points earned on a purchase"),
                Term(term="Burn", definition="Points spent | redeemed by a member"),
            ],
        ),
        DocumentKind.CONSTRAINTS: ConstraintsDocument(
            title="Constraints - Loyalty",
            constraints=[
                Constraint(type="Technical", name="Java 17", description="Runtime pinned by the platform team."),
                Constraint(type="Technical", name="No public IPs", description="Everything sits behind the gateway."),
                Constraint(type="Regulatory", name="GDPR", description="Member data stays in the EU."),
                Constraint(type="Budget", name="Capex freeze", description="No new hardware this year."),
            ],
        ),
        DocumentKind.CAPABILITIES: CapabilitiesDocument(
            title="Business Capabilities - Loyalty",
            capabilities=[
                Capability(
                    name="Member Enrollment",
                    description="Sign-up flows for new members.",
                    systems=["CRM", "Loyalty Engine"],
                ),
                Capability(name="Rewards", description="Catalogue and redemption.", systems=["Rewards API"]),
            ],
        ),
        DocumentKind.ROADMAP: RoadmapDocument(
            title="Roadmap - Loyalty",
            milestones=[
                Milestone(
                    title="Q1 Foundations",
                    timeframe="Jan-Mar 2025",
                    status="In Progress",
                    goals=["Stand up the platform", "Migrate the pilot partner"],
                ),
            ],
        ),
        DocumentKind.POLITICS: PoliticsDocument(
            title="Stakeholder Dynamics - Loyalty",
            stakeholders=[
                StakeholderProfile(
                    name="Jane Doe",
                    role="CFO",
                    influence="High",
                    stance="Skeptic",
                    interests="Predictable opex",
                    concerns="Cost overruns on the migration",
                    strategy="Share monthly burn reports",
                ),
            ],
        ),
        DocumentKind.PRINCIPLES: PrinciplesDocument(
            title="Architecture Principles",
            principles=[
                Principle(
                    id="AP-7",
                    name="API First",
                    statement="Every capability is exposed through an API.",
                    rationale="Partners integrate without custom work.",
                    implications="Teams publish OpenAPI specs.",
                ),
            ],
        ),
        DocumentKind.STANDARDS: StandardsDocument(
            title="Technology Standards",
            categories=[
                TechCategory(
                    category="Languages",
                    technologies=[
                        Technology(technology="Java", status="Adopt", notes="LTS releases only"),
                        Technology(technology="Kotlin", status="Trial", notes="New services"),
                    ],
                ),
                TechCategory(
                    category="Datastores",
                    technologies=[Technology(technology="MongoDB", status="Hold", notes="No new usage")],
                ),
            ],
        ),
        DocumentKind.GOVERNANCE: GovernanceDocument(
            title="Governance",
            cab_process="Weekly CAB on Tuesdays.",
            arb_process="ARB reviews every new service.",
            exceptions="File an exception with the ARB chair.",
            escalation="CTO has the final say.",
        ),
    }
