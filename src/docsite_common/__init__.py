"""Shared logging, error and Problem Details helpers for docsite packages."""

from __future__ import annotations

from docsite_common.errors import (
    DocsiteError,
    ErrorCode,
    SchemaValidationError,
    SettingsError,
    SidebarScanError,
)
from docsite_common.logging import get_logger, setup_logging, with_fields
from docsite_common.problem_details import (
    ProblemDetailsDict,
    ProblemDetailsParams,
    build_problem_details,
    render_problem,
)

__all__ = [
    "DocsiteError",
    "ErrorCode",
    "ProblemDetailsDict",
    "ProblemDetailsParams",
    "SchemaValidationError",
    "SettingsError",
    "SidebarScanError",
    "build_problem_details",
    "get_logger",
    "render_problem",
    "setup_logging",
    "with_fields",
]
