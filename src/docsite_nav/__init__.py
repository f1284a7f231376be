"""Sidebar navigation and site configuration for a documentation site."""

from __future__ import annotations

from docsite_nav.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticLevel,
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
    tree_to_dict,
)
from docsite_nav.sidebar import (
    SidebarBuildResult,
    SidebarOptions,
    build_sidebar,
    build_tree,
    scan_directory,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    "DiagnosticsCollector",
    "DirectoryNode",
    "EntryFailure",
    "FailureReason",
    "SidebarBuildResult",
    "SidebarEntry",
    "SidebarGroup",
    "SidebarLeaf",
    "SidebarOptions",
    "SidebarTree",
    "build_sidebar",
    "build_tree",
    "scan_directory",
    "tree_to_dict",
]
