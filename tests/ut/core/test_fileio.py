"""文件读写工具测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from jim.core.exceptions import MetadataParseError
from jim.utils.fileio import (
    atomic_write,
    file_digest,
    load_json,
    load_yaml,
    read_script,
    save_json,
)


class TestYaml:
    def test_missing(self, tmp_path: Path) -> None:
        assert load_yaml(tmp_path / "none.yml") == {}

    def test_empty_and_non_dict(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.yml"
        empty.write_text("", encoding="utf-8")
        listing = tmp_path / "list.yml"
        listing.write_text("- a\n- b\n", encoding="utf-8")
        assert load_yaml(empty) == {}
        assert load_yaml(listing) == {}

    def test_syntax_error_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_yaml(bad)


class TestJson:
    def test_round_trip_keeps_order(self, tmp_path: Path) -> None:
        path = tmp_path / "pkg" / "package.json"
        save_json(path, {"name": "jquery", "version": "1.4.1", "author": "中文"})
        text = path.read_text(encoding="utf-8")
        assert list(json.loads(text)) == ["name", "version", "author"]
        assert "中文" in text
        assert load_json(path)["version"] == "1.4.1"

    def test_missing(self, tmp_path: Path) -> None:
        assert load_json(tmp_path / "package.json") == {}

    def test_malformed(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{name: ", encoding="utf-8")
        with pytest.raises(MetadataParseError):
            load_json(path)

    def test_not_object(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(MetadataParseError, match="不是对象"):
            load_json(path)


class TestAtomicWrite:
    def test_overwrite_leaves_no_tmp(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        atomic_write(path, "one")
        atomic_write(path, "two")
        assert path.read_text(encoding="utf-8") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["a.txt"]


def test_file_digest(tmp_path: Path) -> None:
    a = tmp_path / "a.js"
    b = tmp_path / "b.js"
    a.write_text("var a;", encoding="utf-8")
    b.write_text("var a;", encoding="utf-8")
    assert file_digest(a) == file_digest(b)
    b.write_text("var b;", encoding="utf-8")
    assert file_digest(a) != file_digest(b)


def test_read_script_falls_back_to_latin1(tmp_path: Path) -> None:
    utf8 = tmp_path / "utf8.js"
    utf8.write_text("// Jörg", encoding="utf-8")
    latin1 = tmp_path / "latin1.js"
    latin1.write_bytes(b"// J\xf6rg")
    assert read_script(utf8) == "// Jörg"
    assert read_script(latin1) == "// Jörg"
