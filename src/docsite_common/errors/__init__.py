"""Exception hierarchy and Problem Details support.

Examples
--------
>>> from docsite_common.errors import DocsiteError, ErrorCode
>>> error = DocsiteError("Operation failed", code=ErrorCode.RUNTIME_ERROR)
>>> error.to_problem_details()["type"]
'https://docsite.dev/problems/runtime-error'
"""

from __future__ import annotations

from docsite_common.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from docsite_common.errors.exceptions import (
    DocsiteError,
    SchemaValidationError,
    SettingsError,
    SidebarScanError,
)

__all__ = [
    "BASE_TYPE_URI",
    "DocsiteError",
    "ErrorCode",
    "SchemaValidationError",
    "SettingsError",
    "SidebarScanError",
    "get_type_uri",
]
