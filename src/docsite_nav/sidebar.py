"""Build a sidebar navigation tree from a documentation directory layout.

Each root category is a subdirectory of the docs directory. Its documents
become leaf links and its non-empty subdirectories become groups, nested to
any depth. The scan uses an explicit worklist; every queued directory carries
the real paths of its ancestors, so a symlink pointing back up the tree is
reported instead of followed.

Nothing here logs. Missing categories, unreadable entries and per-category
summaries are recorded on the :class:`DiagnosticsCollector` returned in the
:class:`SidebarBuildResult`; :func:`build_sidebar` is the convenience wrapper
that forwards them to the structured logger.

Examples
--------
>>> from docsite_nav.sidebar import build_tree
>>> result = build_tree(["guides"], "docs")  # doctest: +SKIP
>>> result.to_dict()["/guides/"][0]["text"]  # doctest: +SKIP
'guides'
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from docsite_common.errors import SidebarScanError
from docsite_common.logging import get_logger
from docsite_nav.diagnostics import (
    DiagnosticCode,
    DiagnosticsCollector,
    EntryFailure,
    FailureReason,
)
from docsite_nav.models import (
    DirectoryNode,
    SidebarEntry,
    SidebarGroup,
    SidebarLeaf,
    SidebarTree,
    SidebarTreeDict,
    tree_to_dict,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from docsite_common.logging import LoggerAdapter

__all__ = [
    "EntryKind",
    "ScannedEntry",
    "SidebarBuildResult",
    "SidebarOptions",
    "build_category",
    "build_sidebar",
    "build_tree",
    "category_url",
    "classify_entry",
    "scan_directory",
]

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SidebarOptions:
    """Scanner behaviour.

    Attributes
    ----------
    index_name : str
        Per-directory index document, excluded from leaves.
    document_extension : str
        Suffix that marks a file as a content document.
    sort_entries : bool
        Order entries by name instead of filesystem enumeration order.
    follow_symlinks : bool
        When ``False`` symbolic links are ignored altogether.
    collapse_from_depth : int
        Groups at this depth or deeper start collapsed. The category root is
        depth 0, its direct subdirectories depth 1.
    home_label : str
        Format string for the category home link, receives ``category``.
    """

    index_name: str = "index.md"
    document_extension: str = ".md"
    sort_entries: bool = False
    follow_symlinks: bool = True
    collapse_from_depth: int = 1
    home_label: str = "{category} Home"

    def is_document(self, name: str) -> bool:
        """Return ``True`` when ``name`` should become a leaf."""
        return (
            name.endswith(self.document_extension)
            and name != self.index_name
            and len(name) > len(self.document_extension)
        )

    def display_name(self, name: str) -> str:
        """Strip the document extension from ``name``."""
        return name.removesuffix(self.document_extension)

    def is_collapsed(self, depth: int) -> bool:
        """Return the default collapsed flag for a group at ``depth``."""
        return depth >= self.collapse_from_depth


class EntryKind(StrEnum):
    """What a directory entry turned out to be."""

    DIRECTORY = "directory"
    DOCUMENT = "document"
    IGNORED = "ignored"


@dataclass(frozen=True, slots=True)
class ScannedEntry:
    """Successfully inspected directory entry."""

    name: str
    path: Path
    kind: EntryKind


type EntryOutcome = ScannedEntry | EntryFailure


@dataclass(frozen=True, slots=True)
class SidebarBuildResult:
    """Sidebar tree plus everything noteworthy that happened while building it."""

    tree: SidebarTree
    diagnostics: DiagnosticsCollector = field(default_factory=DiagnosticsCollector)

    @property
    def failures(self) -> list[EntryFailure]:
        """Entries skipped because they could not be inspected."""
        return self.diagnostics.failures

    def to_dict(self) -> SidebarTreeDict:
        """Return the tree in the shape the site framework consumes."""
        return tree_to_dict(self.tree)


@dataclass(slots=True)
class _Frame:
    node: DirectoryNode
    ancestors: frozenset[str]
    slots: list[SidebarLeaf | _Frame] = field(default_factory=list)
    entries: tuple[SidebarEntry, ...] = ()


def _list_directory(path: Path) -> list[str]:
    return os.listdir(path)


def _stat_path(path: Path, *, follow_symlinks: bool) -> os.stat_result:
    return os.stat(path, follow_symlinks=follow_symlinks)


def _real_path(path: Path) -> str:
    return os.path.realpath(path)


def category_url(name: str) -> str:
    """Return the URL prefix of category ``name``."""
    return f"/{name}/"


def classify_entry(path: Path, options: SidebarOptions) -> EntryOutcome:
    """Inspect ``path`` and report what it is, or why it cannot be used.

    Parameters
    ----------
    path : Path
        Directory entry to inspect.
    options : SidebarOptions
        Scanner options.

    Returns
    -------
    EntryOutcome
        ``ScannedEntry`` on success, ``EntryFailure`` when ``stat`` fails.
    """
    try:
        info = _stat_path(path, follow_symlinks=options.follow_symlinks)
    except OSError as exc:
        return EntryFailure.from_os_error(path, exc)

    name = path.name
    if stat.S_ISDIR(info.st_mode):
        kind = EntryKind.DIRECTORY
    elif stat.S_ISREG(info.st_mode) and options.is_document(name):
        kind = EntryKind.DOCUMENT
    else:
        kind = EntryKind.IGNORED
    return ScannedEntry(name=name, path=path, kind=kind)


def scan_directory(
    root: DirectoryNode,
    options: SidebarOptions | None = None,
    diagnostics: DiagnosticsCollector | None = None,
    *,
    category: str | None = None,
) -> list[SidebarEntry]:
    """Scan ``root`` and every directory below it.

    Directories are processed from a worklist. Each directory's entries keep
    their enumeration order; subdirectories with no qualifying descendants are
    pruned, and a subdirectory resolving to itself or one of its ancestors
    is reported as a ``cycle-detected`` failure. Two links to the same
    directory from different branches are both kept.

    Parameters
    ----------
    root : DirectoryNode
        Directory to scan.
    options : SidebarOptions | None, optional
        Scanner options. Defaults to ``SidebarOptions()``.
    diagnostics : DiagnosticsCollector | None, optional
        Collector receiving entry failures. A private one is used if omitted.
    category : str | None, optional
        Category name attached to recorded diagnostics.

    Returns
    -------
    list[SidebarEntry]
        Entries of ``root`` in order.

    Raises
    ------
    OSError
        If ``root`` itself cannot be listed. Failures below ``root`` are
        recorded instead.
    """
    options = options or SidebarOptions()
    diagnostics = diagnostics if diagnostics is not None else DiagnosticsCollector()
    root_frame = _Frame(root, frozenset({_real_path(root.path)}))
    worklist = [root_frame]
    frames: list[_Frame] = []

    while worklist:
        frame = worklist.pop()
        frames.append(frame)
        node = frame.node
        try:
            names = _list_directory(node.path)
        except OSError as exc:
            if frame is root_frame:
                raise
            failure = EntryFailure.from_os_error(node.path, exc)
            diagnostics.record_failure(failure, category=category)
            continue
        if options.sort_entries:
            names.sort()

        children: list[_Frame] = []
        for name in names:
            outcome = classify_entry(node.path / name, options)
            if isinstance(outcome, EntryFailure):
                diagnostics.record_failure(outcome, category=category)
                continue
            if outcome.kind is EntryKind.DOCUMENT:
                display = options.display_name(name)
                frame.slots.append(SidebarLeaf(text=display, link=f"{node.url_prefix}{display}"))
            elif outcome.kind is EntryKind.DIRECTORY:
                real = _real_path(outcome.path)
                if real in frame.ancestors:
                    failure = EntryFailure(
                        path=outcome.path,
                        reason=FailureReason.CYCLE_DETECTED,
                        detail=f"links back to ancestor {real}",
                    )
                    diagnostics.record_failure(failure, category=category)
                    continue
                child = _Frame(node.child(outcome.path, name), frame.ancestors | {real})
                frame.slots.append(child)
                children.append(child)
        worklist.extend(reversed(children))

    # Children always follow their parent in ``frames``.
    for frame in reversed(frames):
        items: list[SidebarEntry] = []
        for slot in frame.slots:
            if isinstance(slot, SidebarLeaf):
                items.append(slot)
            elif slot.entries:
                items.append(
                    SidebarGroup(
                        text=slot.node.path.name,
                        collapsed=options.is_collapsed(slot.node.depth),
                        items=slot.entries,
                    )
                )
        frame.entries = tuple(items)
    return list(root_frame.entries)


def build_category(
    name: str,
    category_path: Path,
    options: SidebarOptions,
    diagnostics: DiagnosticsCollector,
) -> SidebarGroup:
    """Build the top-level group for one category.

    Raises
    ------
    SidebarScanError
        If the category directory cannot be listed.
    """
    prefix = category_url(name)
    items: list[SidebarEntry] = []
    if (category_path / options.index_name).is_file():
        items.append(SidebarLeaf(text=options.home_label.format(category=name), link=prefix))
    root = DirectoryNode(path=category_path.absolute(), url_prefix=prefix, depth=0)
    try:
        items.extend(scan_directory(root, options, diagnostics, category=name))
    except OSError as exc:
        message = f"Cannot list category directory {category_path}"
        raise SidebarScanError(
            message, cause=exc, context={"category": name, "path": str(category_path)}
        ) from exc
    return SidebarGroup(text=name, collapsed=False, items=tuple(items))


def build_tree(
    root_category_names: Iterable[str],
    base_directory: str | os.PathLike[str],
    *,
    options: SidebarOptions | None = None,
) -> SidebarBuildResult:
    """Build the sidebar tree for every category under ``base_directory``.

    The tree is rebuilt from the filesystem on every call. Missing or
    unreadable categories are left out and reported; no scan error escapes.

    Parameters
    ----------
    root_category_names : Iterable[str]
        Category directory names, in presentation order. Duplicates are
        ignored.
    base_directory : str | os.PathLike[str]
        Directory containing one subdirectory per category.
    options : SidebarOptions | None, optional
        Scanner options. Defaults to ``SidebarOptions()``.

    Returns
    -------
    SidebarBuildResult
        Tree keyed by ``/<category>/`` plus the collected diagnostics.
    """
    options = options or SidebarOptions()
    diagnostics = DiagnosticsCollector()
    tree: SidebarTree = {}
    base = Path(base_directory)

    if not base.is_dir():
        diagnostics.error(
            DiagnosticCode.BASE_DIRECTORY_MISSING,
            f"Docs directory {base} does not exist",
            path=str(base),
        )
        return SidebarBuildResult(tree=tree, diagnostics=diagnostics)

    for name in dict.fromkeys(root_category_names):
        category_path = base / name
        if not category_path.exists():
            diagnostics.warning(
                DiagnosticCode.CATEGORY_MISSING,
                f'Directory "{name}" does not exist',
                category=name,
                path=str(category_path),
            )
            continue
        try:
            group = build_category(name, category_path, options, diagnostics)
        except SidebarScanError as exc:
            diagnostics.error(
                DiagnosticCode.CATEGORY_FAILED,
                f'Error while processing directory "{name}": {exc.message}',
                category=name,
                path=str(category_path),
            )
            continue
        tree[category_url(name)] = [group]
        diagnostics.info(
            DiagnosticCode.CATEGORY_COMPLETE,
            f"{name} sidebar generated with {len(group.items)} items",
            category=name,
            entry_count=len(group.items),
        )
    return SidebarBuildResult(tree=tree, diagnostics=diagnostics)


def build_sidebar(
    root_category_names: Iterable[str],
    base_directory: str | os.PathLike[str],
    *,
    options: SidebarOptions | None = None,
    logger: LoggerAdapter | None = None,
) -> SidebarTreeDict:
    """Build the sidebar and log its diagnostics.

    Parameters
    ----------
    root_category_names : Iterable[str]
        Category directory names.
    base_directory : str | os.PathLike[str]
        Directory containing the categories.
    options : SidebarOptions | None, optional
        Scanner options.
    logger : LoggerAdapter | None, optional
        Destination for diagnostics. Defaults to this module's logger.

    Returns
    -------
    SidebarTreeDict
        Framework-shaped sidebar mapping.
    """
    result = build_tree(root_category_names, base_directory, options=options)
    result.diagnostics.emit(logger or LOGGER)
    return result.to_dict()
