"""Tests for archmemory.mcp_server tool handlers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from archmemory.mcp_server import _dispatch_tool


def _call(name: str, arguments: dict) -> str:
    result = _dispatch_tool(name, arguments)
    assert len(result) == 1
    return result[0].text


@pytest.fixture
def memory_env(memory_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("ARCHMEMORY_PATH", str(memory_root))
    return memory_root


class TestProjects:
    def test_create_and_list(self, memory_env: Path):
        created = json.loads(_call("create_project", {"name": "demo"}))
        assert created == {"success": True, "message": "Created project demo"}

        listed = json.loads(_call("list_projects", {}))
        assert listed == {"projects": ["demo"], "active": ""}

    def test_create_existing(self, memory_env: Path):
        _call("create_project", {"name": "demo"})
        result = json.loads(_call("create_project", {"name": "demo"}))
        assert result["success"] is False

    def test_missing_memory_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ARCHMEMORY_WORKSPACE", str(tmp_path))
        with pytest.raises(FileNotFoundError):
            _dispatch_tool("list_projects", {})


class TestDocuments:
    def test_get_document(self, memory_env: Path):
        _call("create_project", {"name": "demo"})
        payload = json.loads(_call("get_document", {"kind": "risks", "project": "demo"}))
        assert payload == {
            "kind": "risks",
            "project": "demo",
            "data": {"title": "Risk Register - demo", "risks": []},
        }

    def test_save_then_get(self, memory_env: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ARCHMEMORY_PROJECT", "demo")
        data = {"title": "Decision Log", "decisions": [{"title": "Use Kafka", "status": "Approved"}]}
        saved = json.loads(_call("save_document", {"kind": "decisions", "data": data}))
        assert saved == {"success": True, "message": "Saved decisions"}

        payload = json.loads(_call("get_document", {"kind": "decisions"}))
        decision = payload["data"]["decisions"][0]
        assert decision["id"] == "DEC-1"
        assert decision["status"] == "Approved"
        assert (memory_env / "projects" / "demo" / "decisions.md").exists()

    def test_organization_scope(self, memory_env: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ARCHMEMORY_PROJECT", "demo")
        data = {"title": "Standards", "categories": [
            {"category": "Languages", "technologies": [{"Technology": "Java", "Status": "Adopt", "Notes": ""}]},
        ]}
        _call("save_document", {"kind": "standards", "data": data, "organization": True})

        payload = json.loads(_call("get_document", {"kind": "standards", "organization": True}))
        assert payload["project"] is None
        assert payload["data"]["categories"][0]["technologies"] == [
            {"Technology": "Java", "Status": "Adopt", "Notes": ""},
        ]
        assert (memory_env / "organization" / "standards.md").exists()

    def test_missing_document(self, memory_env: Path):
        text = _call("get_document", {"kind": "principles", "organization": True})
        assert text == "No principles document in organization."

    def test_kind_not_allowed_in_scope(self, memory_env: Path):
        result = json.loads(_call("save_document", {"kind": "risks", "data": {}, "organization": True}))
        assert result == {"success": False, "message": "Unknown organization document kind: risks"}


class TestContextTool:
    def test_context_with_notes(self, memory_env: Path):
        (memory_env / "insights").mkdir()
        (memory_env / "insights" / "2024-01-01-000000.md").write_text("Finance wants predictable opex")
        text = _call("get_architecture_context", {"query": "opex budget"})
        assert "[insights/2024-01-01-000000.md]" in text
        assert "IMPORTANT GUIDELINES" in text


class TestSaveNote:
    def test_saves_insight(self, memory_env: Path):
        result = json.loads(_call("save_note", {"category": "insight", "content": "Finance wants opex."}))
        assert result["success"] is True
        assert result["path"].startswith("insights/")
        saved = memory_env / result["path"]
        assert saved.read_text().endswith("Finance wants opex.\n")

    def test_note_is_found_by_context(self, memory_env: Path):
        _call("save_note", {"category": "decision", "content": "We picked Kafka for events."})
        text = _call("get_architecture_context", {"query": "why kafka"})
        assert "We picked Kafka for events." in text

    def test_unknown_category(self, memory_env: Path):
        result = json.loads(_call("save_note", {"category": "rumor", "content": "x"}))
        assert result == {"success": False, "message": "Unknown note category: rumor"}
        assert not (memory_env / "rumor").exists()

    def test_empty_content(self, memory_env: Path):
        result = json.loads(_call("save_note", {"category": "insight", "content": "  \n"}))
        assert result["success"] is False


class TestUnknownTool:
    def test_unknown(self, memory_env: Path):
        assert _call("delete_everything", {}) == "Unknown tool: delete_everything"
