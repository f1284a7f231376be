"""Tests for sidebar tree models and their serialized form."""

from __future__ import annotations

import json
from pathlib import Path

from docsite_nav.models import (
    DirectoryNode,
    SidebarGroup,
    SidebarLeaf,
    tree_to_dict,
)


def _sample_group() -> SidebarGroup:
    return SidebarGroup(
        text="guides",
        collapsed=False,
        items=(
            SidebarLeaf(text="guides Home", link="/guides/"),
            SidebarGroup(
                text="setup",
                collapsed=True,
                items=(SidebarLeaf(text="install", link="/guides/setup/install"),),
            ),
        ),
    )


def test_directory_node_child_extends_prefix_and_depth(tmp_path: Path) -> None:
    root = DirectoryNode(path=tmp_path, url_prefix="/guides/", depth=0)

    child = root.child(tmp_path / "setup", "setup")

    assert child.url_prefix == "/guides/setup/"
    assert child.depth == 1
    assert child.path == tmp_path / "setup"


def test_tree_to_dict_uses_framework_keys() -> None:
    payload = tree_to_dict({"/guides/": [_sample_group()]})

    assert payload == {
        "/guides/": [
            {
                "text": "guides",
                "collapsed": False,
                "items": [
                    {"text": "guides Home", "link": "/guides/"},
                    {
                        "text": "setup",
                        "collapsed": True,
                        "items": [{"text": "install", "link": "/guides/setup/install"}],
                    },
                ],
            }
        ]
    }
    assert json.loads(json.dumps(payload)) == payload


def test_tree_to_dict_preserves_category_order() -> None:
    tree = {
        "/b/": [SidebarGroup(text="b", collapsed=False)],
        "/a/": [SidebarGroup(text="a", collapsed=False)],
    }

    assert list(tree_to_dict(tree)) == ["/b/", "/a/"]


def test_walk_is_preorder() -> None:
    texts = [entry.text for entry in _sample_group().walk()]

    assert texts == ["guides Home", "setup", "install"]
