"""Tests for doiuse_ls.engine -- node bridge replies and engine location."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import doiuse_ls.engine.locate as locate_module
from doiuse_ls.engine.locate import find_local_module, find_node_path_module, locate_engine
from doiuse_ls.engine.node import BRIDGE_SCRIPT, parse_reply
from doiuse_ls.errors import INSTALL_HINT, EngineError, EngineNotFound, ScanParseFailure


def _reply(payload: dict) -> bytes:
    return json.dumps(payload).encode("utf-8")


def _install(node_modules: Path, name: str = "doiuse") -> Path:
    module = node_modules / name
    module.mkdir(parents=True)
    (module / "package.json").write_text(json.dumps({"name": name}))
    return module


class TestParseReply:
    def test_findings(self) -> None:
        stdout = _reply({
            "findings": [
                {
                    "feature": "flexbox",
                    "message": "<input css 1>:1:5: Flexbox not supported by: IE (9)",
                    "missing": True,
                    "partial": False,
                    "start": {"line": 1, "column": 5},
                    "end": {"line": 1, "column": 17},
                },
                {
                    "feature": "css-filters",
                    "message": "CSS Filter Effects only partially supported by: Edge (18)",
                    "missing": False,
                    "partial": True,
                    "start": {"line": 3, "column": 3},
                },
            ]
        })
        first, second = parse_reply(stdout)
        assert first.feature_id == "flexbox"
        assert first.missing is True
        assert (first.position.start_line, first.position.start_column) == (1, 5)
        assert (first.position.end_line, first.position.end_column) == (1, 17)
        assert second.partial is True
        assert (second.position.end_line, second.position.end_column) == (3, 3)

    def test_no_findings(self) -> None:
        assert parse_reply(_reply({"findings": []})) == []

    def test_css_syntax_error_is_parse_failure(self) -> None:
        stdout = _reply({"error": {"name": "CssSyntaxError", "message": "<css input>:1:1: Unclosed block"}})
        with pytest.raises(ScanParseFailure, match="Unclosed block"):
            parse_reply(stdout)

    def test_other_error(self) -> None:
        stdout = _reply({"error": {"name": "BrowserslistError", "message": "Unknown browser ie9"}})
        with pytest.raises(EngineError, match="BrowserslistError: Unknown browser ie9"):
            parse_reply(stdout)

    def test_garbage_output(self) -> None:
        with pytest.raises(EngineError, match="exited with code 1: Cannot find module"):
            parse_reply(b"", b"Error: Cannot find module 'postcss'", 1)

    def test_bridge_reads_stdin_and_writes_json(self) -> None:
        assert "process.stdin" in BRIDGE_SCRIPT
        assert "onFeatureUsage" in BRIDGE_SCRIPT
        assert "JSON.stringify" in BRIDGE_SCRIPT


class TestLocate:
    def test_local_module_found_from_nested_root(self, tmp_path: Path) -> None:
        module = _install(tmp_path / "node_modules")
        nested = tmp_path / "packages" / "site"
        nested.mkdir(parents=True)
        assert find_local_module(str(nested)) == module.resolve()

    def test_no_root(self) -> None:
        assert find_local_module(None) is None

    def test_node_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        module = _install(tmp_path / "shared")
        monkeypatch.setenv("NODE_PATH", str(tmp_path / "shared"))
        assert find_node_path_module() == module

    @pytest.mark.asyncio
    async def test_locate_engine(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        module = _install(tmp_path / "node_modules")
        monkeypatch.setattr(locate_module.shutil, "which", lambda name: f"/usr/bin/{name}")

        location = await locate_engine(str(tmp_path))

        assert location.node == "/usr/bin/node"
        assert location.module_dir == module.resolve()
        assert location.node_modules == (tmp_path / "node_modules").resolve()

    @pytest.mark.asyncio
    async def test_missing_node(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(locate_module.shutil, "which", lambda name: None)
        with pytest.raises(EngineNotFound) as exc_info:
            await locate_engine(str(tmp_path))
        assert exc_info.value.retry is True
        assert "node executable" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_missing_module(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(locate_module.shutil, "which", lambda name: f"/usr/bin/{name}")
        monkeypatch.delenv("NODE_PATH", raising=False)

        async def no_global(npm=None):
            return None

        monkeypatch.setattr(locate_module, "global_node_modules", no_global)
        with pytest.raises(EngineNotFound) as exc_info:
            await locate_engine(str(tmp_path))
        assert exc_info.value.message == INSTALL_HINT
        assert exc_info.value.code == 99

    @pytest.mark.asyncio
    async def test_global_module(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        module = _install(tmp_path / "global")
        monkeypatch.setattr(locate_module.shutil, "which", lambda name: f"/usr/bin/{name}")
        monkeypatch.delenv("NODE_PATH", raising=False)

        async def global_root(npm=None):
            return tmp_path / "global"

        monkeypatch.setattr(locate_module, "global_node_modules", global_root)
        location = await locate_engine(str(tmp_path / "workspace"))
        assert location.module_dir == module
