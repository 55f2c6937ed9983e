"""包索引测试 — 目录名即索引"""

from __future__ import annotations

from pathlib import Path

from jim.core.pkg.index import Index, scan_root, script_in, split_name_version


class TestSplitNameVersion:
    def test_split_on_last_dash(self) -> None:
        assert split_name_version("jquery.ui-1.8.0") == ("jquery.ui", "1.8.0")
        assert split_name_version("jquery-ui-1.8.0") == ("jquery-ui", "1.8.0")

    def test_non_matching(self) -> None:
        assert split_name_version("jquery") is None
        assert split_name_version("jquery-latest") is None
        assert split_name_version("-1.0") is None
        assert split_name_version("lib-²") is None


class TestScanRoot:
    def test_scan(self, tmp_path: Path, store_factory) -> None:
        store_factory(tmp_path, {"jquery-1.4.1": "a", "sammy-0.5.0": "b"})
        (tmp_path / "notapackage").mkdir()
        (tmp_path / "README").write_text("x", encoding="utf-8")
        entries = scan_root(tmp_path)
        assert [(e.name, e.version) for e in entries] == [
            ("jquery", "1.4.1"), ("sammy", "0.5.0"),
        ]

    def test_loose_versioned_script(self, tmp_path: Path) -> None:
        (tmp_path / "underscore-1.0.2.js").write_text("var _;", encoding="utf-8")
        (tmp_path / "app.js").write_text("app();", encoding="utf-8")
        [entry] = scan_root(tmp_path)
        assert (entry.name, entry.version) == ("underscore", "1.0.2")
        assert entry.path == tmp_path / "underscore-1.0.2.js"

    def test_missing_root(self, tmp_path: Path) -> None:
        assert scan_root(tmp_path / "missing") == []


class TestList:
    def test_sorted_descending(self, tmp_path: Path, store_factory) -> None:
        store_factory(tmp_path, {
            "jquery-1.4.1": "a", "jquery-1.10.0": "b", "jquery-1.3.2": "c",
            "sammy-0.5.0": "d",
        })
        listing = Index(tmp_path).list()
        assert list(listing) == ["jquery", "sammy"]
        assert [v for v, _ in listing["jquery"]] == ["1.10.0", "1.4.1", "1.3.2"]
        assert listing["jquery"][0][1] == tmp_path / "jquery-1.10.0"

    def test_search(self, tmp_path: Path, store_factory) -> None:
        store_factory(tmp_path, {"jquery-1.4.1": "a", "jquery.color-1.0": "b", "sammy-0.5.0": "c"})
        assert list(Index(tmp_path).list("JQUERY")) == ["jquery", "jquery.color"]

    def test_multiple_roots_deduplicated(self, tmp_path: Path, store_factory) -> None:
        first = store_factory(tmp_path / "a", {"jquery-1.4.1": "a"})
        second = store_factory(tmp_path / "b", {"jquery-1.4.1": "dup", "sammy-0.5.0": "b"})
        index = Index(first, second)
        listing = index.list()
        assert listing["jquery"] == [("1.4.1", first / "jquery-1.4.1")]
        assert "sammy" in listing
        assert index.directories == [first, second]


class TestFind:
    def test_find_all(self, tmp_path: Path, store_factory) -> None:
        store_factory(tmp_path, {"jquery-1.4.1": "a", "jquery-1.4.2": "b", "jquery.ui-1.0": "c"})
        index = Index(tmp_path)
        assert index.find_all("jquery") == [tmp_path / "jquery-1.4.2", tmp_path / "jquery-1.4.1"]
        assert index.find_all("jquery", "1.4.1") == [tmp_path / "jquery-1.4.1"]
        assert index.find_all("jquery", "9.9") == []

    def test_find_newest_script(self, tmp_path: Path, store_factory) -> None:
        store_factory(tmp_path, {"jquery-1.4.1": "a", "jquery-1.10.0": "b"})
        assert Index(tmp_path).find("jquery") == tmp_path / "jquery-1.10.0" / "jquery.js"

    def test_find_exact_version(self, tmp_path: Path, store_factory) -> None:
        store_factory(tmp_path, {"jquery-1.4.1": "a", "jquery-1.10.0": "b"})
        assert Index(tmp_path).find("jquery", "1.4.1") == tmp_path / "jquery-1.4.1" / "jquery.js"

    def test_find_missing(self, tmp_path: Path) -> None:
        assert Index(tmp_path).find("jquery") is None

    def test_script_in_single_other_name(self, tmp_path: Path) -> None:
        entry = tmp_path / "lib-1.0"
        entry.mkdir()
        (entry / "library.js").write_text("x", encoding="utf-8")
        assert script_in(entry, "lib") == entry / "library.js"

    def test_memoized_per_instance(self, tmp_path: Path, store_factory) -> None:
        store_factory(tmp_path, {"jquery-1.4.1": "a"})
        index = Index(tmp_path)
        assert len(index.entries) == 1
        store_factory(tmp_path, {"sammy-0.5.0": "b"})
        assert len(index.entries) == 1
        assert len(Index(tmp_path).entries) == 2

    def test_in_store(self, tmp_path: Path, store_factory) -> None:
        store = store_factory(tmp_path / "store", {"jquery-1.4.1": "a"})
        index = Index(store, tmp_path / "project")
        assert index.in_store(store / "jquery-1.4.1" / "jquery.js")
        assert not index.in_store(tmp_path / "project" / "app.js")
