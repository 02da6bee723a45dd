"""Tests for doiuse_ls.targets.browserslist -- config file parsing."""

from __future__ import annotations

import json
from pathlib import Path

from doiuse_ls.targets.browserslist import (
    parse_config,
    parse_manifest_field,
    parse_sections,
    read_directory,
)


class TestParseConfig:
    def test_strips_comments_and_blank_lines(self) -> None:
        text = "# Browsers we support\n\n> 1%\n  last 2 versions  \n# trailing\nie >= 9\n"
        assert parse_config(text, "production") == ["> 1%", "last 2 versions", "ie >= 9"]

    def test_keeps_order_and_duplicates(self) -> None:
        assert parse_config("ie 11\nchrome 80\nie 11\n", "production") == [
            "ie 11", "chrome 80", "ie 11",
        ]

    def test_windows_line_endings(self) -> None:
        assert parse_config("ie 11\r\nsafari 12\r\n", "production") == ["ie 11", "safari 12"]

    def test_empty_file(self) -> None:
        assert parse_config("# nothing here\n\n", "production") == []

    def test_environment_sections(self) -> None:
        text = "defaults\n\n[production]\n> 1%\nie 10\n\n[development]\nlast 1 chrome version\n"
        sections = parse_sections(text)
        assert sections["defaults"] == ["defaults"]
        assert sections["production"] == ["> 1%", "ie 10"]
        assert parse_config(text, "development") == ["last 1 chrome version"]

    def test_unknown_environment_falls_back_to_defaults(self) -> None:
        text = "ie 11\n[development]\nlast 1 chrome version\n"
        assert parse_config(text, "staging") == ["ie 11"]

    def test_shared_section_header(self) -> None:
        text = "[production staging]\nie 11\n"
        assert parse_config(text, "staging") == ["ie 11"]
        assert parse_config(text, "production") == ["ie 11"]


class TestManifestField:
    def test_string(self) -> None:
        assert parse_manifest_field("> 1%, ie 10", "production") == ["> 1%, ie 10"]

    def test_list(self) -> None:
        assert parse_manifest_field(["ie 11", " ", "safari 12"], "production") == [
            "ie 11", "safari 12",
        ]

    def test_environment_mapping(self) -> None:
        value = {"production": ["ie 11"], "development": ["last 1 chrome version"]}
        assert parse_manifest_field(value, "production") == ["ie 11"]
        assert parse_manifest_field(value, "development") == ["last 1 chrome version"]

    def test_unsupported_shape(self) -> None:
        assert parse_manifest_field(42, "production") is None


class TestReadDirectory:
    def test_nothing_declared(self, tmp_path: Path) -> None:
        assert read_directory(tmp_path, "production") is None

    def test_package_json_without_field_is_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"name": "app"}))
        (tmp_path / ".browserslistrc").write_text("ie 11\n")
        source, queries = read_directory(tmp_path, "production")
        assert source.name == ".browserslistrc"
        assert queries == ["ie 11"]

    def test_package_json_wins(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"browserslist": ["safari 12"]}))
        (tmp_path / ".browserslistrc").write_text("ie 11\n")
        source, queries = read_directory(tmp_path, "production")
        assert source.name == "package.json"
        assert queries == ["safari 12"]

    def test_plain_browserslist_file(self, tmp_path: Path) -> None:
        (tmp_path / "browserslist").write_text("firefox esr\n")
        source, queries = read_directory(tmp_path, "production")
        assert source.name == "browserslist"
        assert queries == ["firefox esr"]

    def test_malformed_package_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{ not json")
        assert read_directory(tmp_path, "production") is None

    def test_undecodable_config_falls_through(self, tmp_path: Path) -> None:
        (tmp_path / ".browserslistrc").write_bytes(b"ie 11 \xff\xfe\n")
        (tmp_path / "browserslist").write_text("firefox esr\n")
        source, queries = read_directory(tmp_path, "production")
        assert source.name == "browserslist"
        assert queries == ["firefox esr"]
