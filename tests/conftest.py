"""Shared pytest fixtures for docs-directory driven tests.

This module provides reusable fixtures for:
- Building throwaway documentation trees from nested mappings
- Isolating ``DOCSITE_*`` environment variables between tests
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

type Layout = Mapping[str, "Layout | str"]


def write_layout(root: Path, layout: Layout) -> Path:
    """Materialise ``layout`` under ``root``.

    Mapping values create directories, string values create files with that
    content. An empty mapping creates an empty directory.
    """
    root.mkdir(parents=True, exist_ok=True)
    pending: list[tuple[Path, Layout]] = [(root, layout)]
    while pending:
        base, entries = pending.pop()
        for name, value in entries.items():
            target = base / name
            if isinstance(value, str):
                target.write_text(value, encoding="utf-8")
            else:
                target.mkdir()
                pending.append((target, value))
    return root


@pytest.fixture(name="docs_tree")
def fixture_docs_tree(tmp_path: Path) -> Callable[[Layout], Path]:
    """Return a factory that writes a layout under ``tmp_path / 'docs'``."""

    def _build(layout: Layout) -> Path:
        return write_layout(tmp_path / "docs", layout)

    return _build


@pytest.fixture(autouse=True)
def _isolate_docsite_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.upper().startswith("DOCSITE_"):
            monkeypatch.delenv(key, raising=False)
