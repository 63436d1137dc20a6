"""Tests for archmemory.config."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from archmemory.config import MEMORY_DIR_NAME, Config


class TestConfigDefaults:
    def test_default_values(self):
        config = Config()
        assert config.memory_path is None
        assert config.workspace == Path(".")
        assert config.project == ""


class TestConfigLoad:
    def test_load_from_env(self):
        env = {
            "ARCHMEMORY_PATH": "/tmp/architecture_memory",
            "ARCHMEMORY_WORKSPACE": "/tmp/workspace",
            "ARCHMEMORY_PROJECT": "loyalty",
        }
        with patch.dict(os.environ, env, clear=False):
            config = Config.load()
        assert config.memory_path == Path("/tmp/architecture_memory")
        assert config.workspace == Path("/tmp/workspace")
        assert config.project == "loyalty"

    def test_load_defaults_when_env_empty(self):
        config = Config.load()
        assert config.memory_path is None
        assert config.workspace == Path(".")
        assert config.project == ""


class TestResolveMemoryPath:
    def test_explicit_path(self, memory_root: Path):
        assert Config(memory_path=memory_root).resolve_memory_path() == memory_root

    def test_explicit_path_missing(self, tmp_path: Path):
        # No fallback to the workspace when a path was given explicitly
        (tmp_path / MEMORY_DIR_NAME).mkdir()
        config = Config(memory_path=tmp_path / "nope", workspace=tmp_path)
        assert config.resolve_memory_path() is None

    def test_workspace_candidates(self, tmp_path: Path):
        nested = tmp_path / "archi-copilot" / MEMORY_DIR_NAME
        nested.mkdir(parents=True)
        assert Config(workspace=tmp_path).resolve_memory_path() == nested

        (tmp_path / MEMORY_DIR_NAME).mkdir()
        assert Config(workspace=tmp_path).resolve_memory_path() == tmp_path / MEMORY_DIR_NAME

    def test_nothing_found(self, tmp_path: Path):
        assert Config(workspace=tmp_path).resolve_memory_path() is None


class TestConfigValidate:
    def test_validate_all_missing(self, tmp_path: Path):
        issues = Config(workspace=tmp_path).validate()
        assert len(issues) == 2
        assert any(MEMORY_DIR_NAME in i for i in issues)
        assert any("ARCHMEMORY_PROJECT" in i for i in issues)

    def test_validate_missing_explicit_path(self, tmp_path: Path):
        issues = Config(memory_path=tmp_path / "nope", project="demo").validate()
        assert issues == [f"Memory directory not found: {tmp_path / 'nope'} (ARCHMEMORY_PATH)"]

    def test_validate_all_present(self, memory_root: Path):
        assert Config(memory_path=memory_root, project="demo").validate() == []
