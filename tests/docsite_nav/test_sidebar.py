"""Tests for the directory-to-sidebar builder."""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from docsite_nav import sidebar
from docsite_nav.diagnostics import DiagnosticCode, DiagnosticLevel, FailureReason
from docsite_nav.models import DirectoryNode, SidebarGroup, SidebarLeaf
from docsite_nav.sidebar import (
    SidebarOptions,
    build_sidebar,
    build_tree,
    classify_entry,
    scan_directory,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from _pytest.logging import LogCaptureFixture


def _only_group(result: sidebar.SidebarBuildResult, prefix: str) -> SidebarGroup:
    groups = result.tree[prefix]
    assert len(groups) == 1
    return groups[0]


def _documents_in_listing_order(directory: Path) -> list[str]:
    return [
        name.removesuffix(".md")
        for name in os.listdir(directory)
        if name.endswith(".md") and name != "index.md"
    ]


def test_directory_without_documents_is_pruned(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree(
        {
            "guides": {
                "assets": {"logo.png": "png", "notes.txt": "text"},
                "empty": {},
                "intro.md": "# Intro",
            }
        }
    )

    result = build_tree(["guides"], docs)

    group = _only_group(result, "/guides/")
    assert group.items == (SidebarLeaf(text="intro", link="/guides/intro"),)


def test_index_document_becomes_home_link(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"index.md": "# Home", "a.md": "A", "b.md": "B"}})
    options = SidebarOptions(home_label="{category} Home")

    result = build_tree(["guides"], docs, options=options)

    group = _only_group(result, "/guides/")
    expected_leaves = [
        SidebarLeaf(text=name, link=f"/guides/{name}")
        for name in _documents_in_listing_order(docs / "guides")
    ]
    assert list(group.items) == [
        SidebarLeaf(text="guides Home", link="/guides/"),
        *expected_leaves,
    ]
    assert {leaf.text for leaf in expected_leaves} == {"a", "b"}
    assert all(item.text != "index" for item in group.walk())


def test_nested_directory_group_is_collapsed(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"root": {"sub": {"c.md": "C"}}})

    result = build_tree(["root"], docs)

    top = _only_group(result, "/root/")
    assert top.text == "root"
    assert top.collapsed is False
    assert top.items == (
        SidebarGroup(
            text="sub",
            collapsed=True,
            items=(SidebarLeaf(text="c", link="/root/sub/c"),),
        ),
    )


def test_collapse_threshold_is_configurable(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"root": {"sub": {"deeper": {"d.md": "D"}}}})

    result = build_tree(["root"], docs, options=SidebarOptions(collapse_from_depth=2))

    sub = _only_group(result, "/root/").items[0]
    assert isinstance(sub, SidebarGroup)
    assert sub.collapsed is False
    deeper = sub.items[0]
    assert isinstance(deeper, SidebarGroup)
    assert deeper.collapsed is True
    assert deeper.items == (SidebarLeaf(text="d", link="/root/sub/deeper/d"),)


def test_nested_index_is_excluded_without_promotion(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"root": {"sub": {"index.md": "x", "page.md": "y"}}})

    result = build_tree(["root"], docs)

    sub = _only_group(result, "/root/").items[0]
    assert isinstance(sub, SidebarGroup)
    assert sub.items == (SidebarLeaf(text="page", link="/root/sub/page"),)


def test_only_matching_extension_becomes_leaf(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree(
        {"root": {"a.mdx": "", "b.txt": "", "c.md.bak": "", ".md": "", "d.md": "", "e.md.md": ""}}
    )

    result = build_tree(["root"], docs, options=SidebarOptions(sort_entries=True))

    assert _only_group(result, "/root/").items == (
        SidebarLeaf(text="d", link="/root/d"),
        SidebarLeaf(text="e.md", link="/root/e.md"),
    )


def test_sort_entries_orders_names(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"root": {"zeta.md": "", "alpha.md": "", "mid": {"x.md": ""}}})

    result = build_tree(["root"], docs, options=SidebarOptions(sort_entries=True))

    texts = [item.text for item in _only_group(result, "/root/").items]
    assert texts == ["alpha", "mid", "zeta"]


def test_missing_category_is_reported_and_omitted(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"a.md": ""}})

    result = build_tree(["guides", "missing"], docs)

    assert list(result.tree) == ["/guides/"]
    missing = result.diagnostics.with_code(DiagnosticCode.CATEGORY_MISSING)
    assert len(missing) == 1
    assert missing[0].level is DiagnosticLevel.WARNING
    assert missing[0].category == "missing"


def test_missing_base_directory_yields_empty_tree(tmp_path: Path) -> None:
    result = build_tree(["guides"], tmp_path / "absent")

    assert result.tree == {}
    assert result.diagnostics.has_errors
    assert result.diagnostics.with_code(DiagnosticCode.BASE_DIRECTORY_MISSING)


def test_category_that_is_a_file_fails_without_aborting(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"broken": "not a directory", "guides": {"a.md": ""}})

    result = build_tree(["broken", "guides"], docs)

    assert list(result.tree) == ["/guides/"]
    failed = result.diagnostics.with_code(DiagnosticCode.CATEGORY_FAILED)
    assert [diagnostic.category for diagnostic in failed] == ["broken"]
    assert failed[0].level is DiagnosticLevel.ERROR


def test_stat_failure_skips_only_that_entry(
    docs_tree: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    docs = docs_tree({"guides": {"bad.md": "", "good.md": "", "sub": {"c.md": ""}}})
    original = sidebar._stat_path

    def flaky_stat(path: Path, *, follow_symlinks: bool) -> os.stat_result:
        if path.name == "bad.md":
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return original(path, follow_symlinks=follow_symlinks)

    monkeypatch.setattr(sidebar, "_stat_path", flaky_stat)

    result = build_tree(["guides"], docs, options=SidebarOptions(sort_entries=True))

    texts = [item.text for item in _only_group(result, "/guides/").items]
    assert texts == ["good", "sub"]
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.path.name == "bad.md"
    assert failure.reason is FailureReason.PERMISSION_DENIED
    skipped = result.diagnostics.with_code(DiagnosticCode.ENTRY_SKIPPED)
    assert "bad.md" in skipped[0].message


def test_unlistable_subdirectory_is_skipped(
    docs_tree: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    docs = docs_tree({"guides": {"locked": {"secret.md": ""}, "open.md": ""}})
    original = sidebar._list_directory

    def guarded_listdir(path: Path) -> list[str]:
        if path.name == "locked":
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return original(path)

    monkeypatch.setattr(sidebar, "_list_directory", guarded_listdir)

    result = build_tree(["guides"], docs)

    assert _only_group(result, "/guides/").items == (
        SidebarLeaf(text="open", link="/guides/open"),
    )
    assert [failure.path.name for failure in result.failures] == ["locked"]


def test_unlistable_category_does_not_stop_others(
    docs_tree: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
) -> None:
    docs = docs_tree({"first": {"a.md": ""}, "second": {"b.md": ""}})
    original = sidebar._list_directory

    def guarded_listdir(path: Path) -> list[str]:
        if path.name == "first":
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return original(path)

    monkeypatch.setattr(sidebar, "_list_directory", guarded_listdir)

    result = build_tree(["first", "second"], docs)

    assert list(result.tree) == ["/second/"]
    assert [d.category for d in result.diagnostics.with_code(DiagnosticCode.CATEGORY_FAILED)] == [
        "first"
    ]


def test_symlink_cycle_is_reported_not_followed(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"a.md": "", "sub": {"b.md": ""}}})
    try:
        (docs / "guides" / "sub" / "loop").symlink_to(docs / "guides", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not supported on this platform")

    result = build_tree(["guides"], docs, options=SidebarOptions(sort_entries=True))

    top = _only_group(result, "/guides/")
    sub = top.items[1]
    assert isinstance(sub, SidebarGroup)
    assert sub.items == (SidebarLeaf(text="b", link="/guides/sub/b"),)
    assert [failure.reason for failure in result.failures] == [FailureReason.CYCLE_DETECTED]
    assert result.failures[0].path.name == "loop"


def test_alias_to_sibling_directory_keeps_both(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"zzz": {"p.md": ""}}})
    try:
        (docs / "guides" / "aaa").symlink_to(docs / "guides" / "zzz", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not supported on this platform")

    result = build_tree(["guides"], docs, options=SidebarOptions(sort_entries=True))

    assert _only_group(result, "/guides/").items == (
        SidebarGroup(
            text="aaa", collapsed=True, items=(SidebarLeaf(text="p", link="/guides/aaa/p"),)
        ),
        SidebarGroup(
            text="zzz", collapsed=True, items=(SidebarLeaf(text="p", link="/guides/zzz/p"),)
        ),
    )
    assert result.failures == []


def test_symlinks_ignored_when_not_followed(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"real.md": ""}, "shared": {"linked.md": ""}})
    try:
        (docs / "guides" / "shared").symlink_to(docs / "shared", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not supported on this platform")

    followed = build_tree(["guides"], docs, options=SidebarOptions(sort_entries=True))
    ignored = build_tree(
        ["guides"], docs, options=SidebarOptions(sort_entries=True, follow_symlinks=False)
    )

    assert [item.text for item in _only_group(followed, "/guides/").items] == ["real", "shared"]
    assert [item.text for item in _only_group(ignored, "/guides/").items] == ["real"]
    assert ignored.failures == []


def test_rebuild_is_idempotent(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree(
        {"guides": {"index.md": "", "a.md": "", "deep": {"b.md": "", "deeper": {"c.md": ""}}}}
    )

    first = build_tree(["guides"], docs)
    second = build_tree(["guides"], docs)

    assert first.tree == second.tree
    assert first.to_dict() == second.to_dict()
    assert len(first.diagnostics) == len(second.diagnostics)


def test_rebuild_sees_filesystem_changes(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"a.md": ""}})
    before = build_tree(["guides"], docs)

    (docs / "guides" / "b.md").write_text("", encoding="utf-8")
    after = build_tree(["guides"], docs)

    assert len(_only_group(before, "/guides/").items) == 1
    assert len(_only_group(after, "/guides/").items) == 2


def test_duplicate_categories_are_built_once(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"a.md": ""}})

    result = build_tree(["guides", "guides"], docs)

    assert list(result.tree) == ["/guides/"]
    assert len(result.diagnostics.with_code(DiagnosticCode.CATEGORY_COMPLETE)) == 1


def test_completion_summary_counts_top_level_items(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"index.md": "", "a.md": "", "sub": {"b.md": "", "c.md": ""}}})

    result = build_tree(["guides"], docs)

    (summary,) = result.diagnostics.with_code(DiagnosticCode.CATEGORY_COMPLETE)
    assert summary.entry_count == 3
    assert summary.level is DiagnosticLevel.INFO


def test_scan_directory_uses_node_prefix_and_depth(docs_tree: Callable[..., Path]) -> None:
    docs = docs_tree({"guides": {"nested": {"page.md": ""}}})
    node = DirectoryNode(path=docs / "guides" / "nested", url_prefix="/guides/nested/", depth=1)

    entries = scan_directory(node)

    assert entries == [SidebarLeaf(text="page", link="/guides/nested/page")]


def test_scan_directory_raises_for_missing_root(tmp_path: Path) -> None:
    node = DirectoryNode(path=tmp_path / "nope", url_prefix="/nope/", depth=0)

    with pytest.raises(FileNotFoundError):
        scan_directory(node)


def test_classify_entry_reports_missing_path(tmp_path: Path) -> None:
    outcome = classify_entry(tmp_path / "ghost.md", SidebarOptions())

    assert isinstance(outcome, sidebar.EntryFailure)
    assert outcome.reason is FailureReason.NOT_FOUND


def test_build_sidebar_logs_diagnostics(
    docs_tree: Callable[..., Path], caplog: LogCaptureFixture
) -> None:
    docs = docs_tree({"guides": {"a.md": ""}})
    caplog.set_level(logging.INFO, logger="docsite_nav.sidebar")

    payload = build_sidebar(["guides", "missing"], docs)

    assert payload == {
        "/guides/": [
            {
                "text": "guides",
                "collapsed": False,
                "items": [{"text": "a", "link": "/guides/a"}],
            }
        ]
    }
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert getattr(warnings[0], "category", None) == "missing"
    assert getattr(warnings[0], "code", None) == "category-missing"
    infos = [record for record in caplog.records if record.levelno == logging.INFO]
    assert any(getattr(record, "entry_count", None) == 1 for record in infos)
