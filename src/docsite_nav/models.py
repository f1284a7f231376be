"""Typed models for sidebar navigation trees.

The dataclasses are the in-memory representation produced by the sidebar
builder; the TypedDicts describe the JSON shape the site framework's
navigation renderer expects (``text``/``link``/``collapsed``/``items``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NotRequired, TypedDict

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

__all__ = [
    "DirectoryNode",
    "SidebarEntry",
    "SidebarGroup",
    "SidebarGroupDict",
    "SidebarItemDict",
    "SidebarLeaf",
    "SidebarLeafDict",
    "SidebarTree",
    "SidebarTreeDict",
    "tree_to_dict",
]


class SidebarLeafDict(TypedDict):
    """Serialized leaf link."""

    text: str
    link: str


class SidebarGroupDict(TypedDict):
    """Serialized collapsible group."""

    text: str
    collapsed: bool
    items: list[SidebarItemDict]


class SidebarItemDict(TypedDict):
    """Either shape, as found inside a group's ``items``."""

    text: str
    link: NotRequired[str]
    collapsed: NotRequired[bool]
    items: NotRequired[list[SidebarItemDict]]


SidebarTreeDict = dict[str, list[SidebarGroupDict]]


@dataclass(frozen=True, slots=True)
class DirectoryNode:
    """One directory awaiting or undergoing a scan.

    Attributes
    ----------
    path : Path
        Absolute directory path.
    url_prefix : str
        URL prefix for documents in this directory, with a trailing slash.
    depth : int
        Nesting depth; the category root is depth 0.
    """

    path: Path
    url_prefix: str
    depth: int

    def child(self, path: Path, name: str) -> DirectoryNode:
        """Return the node for subdirectory ``name`` located at ``path``."""
        return DirectoryNode(
            path=path, url_prefix=f"{self.url_prefix}{name}/", depth=self.depth + 1
        )


@dataclass(frozen=True, slots=True)
class SidebarLeaf:
    """Link to a single document."""

    text: str
    link: str

    def to_dict(self) -> SidebarLeafDict:
        """Convert to the framework representation."""
        return SidebarLeafDict(text=self.text, link=self.link)


@dataclass(frozen=True, slots=True)
class SidebarGroup:
    """Named group of entries backed by a directory."""

    text: str
    collapsed: bool
    items: tuple[SidebarEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> SidebarGroupDict:
        """Convert to the framework representation, recursively."""
        return SidebarGroupDict(
            text=self.text,
            collapsed=self.collapsed,
            items=[_item_to_dict(item) for item in self.items],
        )

    def walk(self) -> list[SidebarEntry]:
        """Return every descendant entry in pre-order."""
        found: list[SidebarEntry] = []
        stack: list[SidebarEntry] = list(reversed(self.items))
        while stack:
            entry = stack.pop()
            found.append(entry)
            if isinstance(entry, SidebarGroup):
                stack.extend(reversed(entry.items))
        return found


type SidebarEntry = SidebarLeaf | SidebarGroup

type SidebarTree = dict[str, list[SidebarGroup]]


def _item_to_dict(entry: SidebarEntry) -> SidebarItemDict:
    if isinstance(entry, SidebarLeaf):
        return SidebarItemDict(text=entry.text, link=entry.link)
    return SidebarItemDict(
        text=entry.text,
        collapsed=entry.collapsed,
        items=[_item_to_dict(item) for item in entry.items],
    )


def tree_to_dict(tree: Mapping[str, list[SidebarGroup]]) -> SidebarTreeDict:
    """Convert a sidebar tree to the mapping handed to the site framework.

    Parameters
    ----------
    tree : Mapping[str, list[SidebarGroup]]
        Tree keyed by category URL prefix.

    Returns
    -------
    SidebarTreeDict
        JSON-compatible mapping preserving key and entry order.
    """
    return {prefix: [group.to_dict() for group in groups] for prefix, groups in tree.items()}
