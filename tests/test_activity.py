"""Tests for archmemory.activity: logging and reading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from archmemory.activity import describe_target, log_tool_call, read_activity_log


class TestLogToolCall:
    def test_creates_log_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        log_path = tmp_path / "activity.jsonl"
        monkeypatch.setenv("ARCHMEMORY_LOG_PATH", str(log_path))

        log_tool_call("get_document", {"kind": "risks"}, "{}", None, 100)

        entry = json.loads(log_path.read_text().strip())
        assert entry["tool_name"] == "get_document"
        assert entry["arguments"]["kind"] == "risks"
        assert entry["duration_ms"] == 100
        assert entry["error"] is None

    def test_logs_error(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        log_path = tmp_path / "activity.jsonl"
        monkeypatch.setenv("ARCHMEMORY_LOG_PATH", str(log_path))

        log_tool_call("save_document", {}, "", "disk full", 50)

        entry = json.loads(log_path.read_text().strip())
        assert entry["error"] == "disk full"

    def test_truncates_result_preview(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        log_path = tmp_path / "activity.jsonl"
        monkeypatch.setenv("ARCHMEMORY_LOG_PATH", str(log_path))

        log_tool_call("get_architecture_context", {}, "x" * 1000, None, 10)

        entry = json.loads(log_path.read_text().strip())
        assert len(entry["result_preview"]) == 500

    def test_unwritable_log_does_not_raise(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ARCHMEMORY_LOG_PATH", str(tmp_path / "missing" / "activity.jsonl"))
        log_tool_call("list_projects", {}, "", None, 1)

    def test_payload_reduced_to_size(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        log_path = tmp_path / "activity.jsonl"
        monkeypatch.setenv("ARCHMEMORY_LOG_PATH", str(log_path))

        log_tool_call("save_note", {"category": "insight", "content": "y" * 40}, "{}", None, 3)

        entry = json.loads(log_path.read_text().strip())
        assert entry["arguments"] == {"category": "insight", "content": "<40 chars>"}
        assert entry["target"] == "insight note"

    def test_wrote_only_on_reported_success(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        log_path = tmp_path / "activity.jsonl"
        monkeypatch.setenv("ARCHMEMORY_LOG_PATH", str(log_path))

        arguments = {"kind": "risks", "project": "demo", "data": {}}
        log_tool_call("save_document", arguments, '{"success": true}', None, 5)
        log_tool_call("save_document", arguments, '{"success": false}', None, 5)
        log_tool_call("get_document", {"kind": "risks"}, '{"success": true}', None, 5)

        wrote = [json.loads(line)["wrote"] for line in log_path.read_text().splitlines()]
        assert wrote == [True, False, False]


class TestDescribeTarget:
    def test_project_document(self):
        assert describe_target("save_document", {"kind": "risks", "project": "demo"}) == "demo/risks"

    def test_active_project_document(self):
        assert describe_target("get_document", {"kind": "roadmap"}) == "(active)/roadmap"

    def test_organization_document(self):
        args = {"kind": "principles", "project": "demo", "organization": True}
        assert describe_target("get_document", args) == "organization/principles"

    def test_other_tools(self):
        assert describe_target("create_project", {"name": "demo"}) == "projects/demo"
        assert describe_target("list_projects", {}) == ""


class TestReadActivityLog:
    def _write_entries(self, log_path: Path, tools: list[str]) -> None:
        lines = [
            json.dumps({
                "timestamp": f"2024-01-01T00:00:0{i}",
                "tool_name": tool,
                "arguments": {},
                "result_preview": f"result {i}",
                "error": None,
                "duration_ms": i * 10,
            })
            for i, tool in enumerate(tools)
        ]
        log_path.write_text("\n".join(lines) + "\n")

    def test_read_missing(self, tmp_path: Path):
        assert read_activity_log(log_path=tmp_path / "missing.jsonl") == []

    def test_most_recent_first(self, tmp_path: Path):
        log_path = tmp_path / "activity.jsonl"
        self._write_entries(log_path, ["get_document"] * 5)

        entries = read_activity_log(limit=3, log_path=log_path)
        assert [e["result_preview"] for e in entries] == ["result 4", "result 3", "result 2"]

    def test_filter_by_tool(self, tmp_path: Path):
        log_path = tmp_path / "activity.jsonl"
        self._write_entries(log_path, ["get_document", "save_document", "get_document"])

        entries = read_activity_log(tool_name="save_document", log_path=log_path)
        assert len(entries) == 1
        assert entries[0]["tool_name"] == "save_document"

    def test_writes_only(self, tmp_path: Path):
        log_path = tmp_path / "activity.jsonl"
        lines = [
            json.dumps({"tool_name": "get_document", "wrote": False}),
            json.dumps({"tool_name": "save_document", "wrote": True}),
            json.dumps({"tool_name": "save_document"}),
        ]
        log_path.write_text("\n".join(lines) + "\n")

        entries = read_activity_log(writes_only=True, log_path=log_path)
        assert entries == [{"tool_name": "save_document", "wrote": True}]

    def test_skips_malformed_lines(self, tmp_path: Path):
        log_path = tmp_path / "activity.jsonl"
        self._write_entries(log_path, ["list_projects"])
        with open(log_path, "a") as f:
            f.write("not json\n\n")

        assert len(read_activity_log(log_path=log_path)) == 1

    def test_uses_env_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        log_path = tmp_path / "activity.jsonl"
        monkeypatch.setenv("ARCHMEMORY_LOG_PATH", str(log_path))
        log_tool_call("list_projects", {}, "ok", None, 1)

        assert read_activity_log()[0]["tool_name"] == "list_projects"
