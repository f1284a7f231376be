"""Error code registry and type URIs for Problem Details.

Codes are kebab-case and stay stable across releases.

Examples
--------
>>> from docsite_common.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.SETTINGS_INVALID)
'https://docsite.dev/problems/settings-invalid'
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]

BASE_TYPE_URI: Final[str] = "https://docsite.dev/problems"


class ErrorCode(StrEnum):
    """Stable error codes for docsite exceptions.

    Attributes
    ----------
    RUNTIME_ERROR
        Unclassified runtime failure.
    SETTINGS_INVALID
        Environment-backed settings failed validation.
    SIDEBAR_SCAN_ERROR
        A category directory could not be scanned.
    SCHEMA_VALIDATION_ERROR
        Generated output does not match the navigation schema.
    """

    RUNTIME_ERROR = "runtime-error"
    SETTINGS_INVALID = "settings-invalid"
    SIDEBAR_SCAN_ERROR = "sidebar-scan-error"
    SCHEMA_VALIDATION_ERROR = "schema-validation-error"


def get_type_uri(code: ErrorCode) -> str:
    """Return the Problem Details type URI for ``code``.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    str
        Complete type URI, e.g. ``https://docsite.dev/problems/sidebar-scan-error``.
    """
    return f"{BASE_TYPE_URI}/{code.value}"
