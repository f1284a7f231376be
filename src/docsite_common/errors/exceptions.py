"""Typed exception hierarchy with Problem Details support.

All docsite exceptions inherit from :class:`DocsiteError`, which carries a
stable :class:`ErrorCode`, a logging level and optional structured context,
and converts to an RFC 9457 Problem Details payload.

Examples
--------
>>> from docsite_common.errors import ErrorCode, SidebarScanError
>>> try:
...     raise SidebarScanError("Cannot list category directory docs/guides")
... except SidebarScanError as exc:
...     assert exc.code == ErrorCode.SIDEBAR_SCAN_ERROR
...     details = exc.to_problem_details(instance="urn:docsite:sidebar")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from docsite_common.errors.codes import ErrorCode, get_type_uri
from docsite_common.problem_details import ProblemDetailsParams, build_problem_details

if TYPE_CHECKING:
    from collections.abc import Mapping

    from docsite_common.problem_details import JsonValue, ProblemDetailsDict

__all__ = [
    "DocsiteError",
    "SchemaValidationError",
    "SettingsError",
    "SidebarScanError",
]


class DocsiteError(Exception):
    """Base exception for all docsite errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode, optional
        Stable error code. Defaults to ``ErrorCode.RUNTIME_ERROR``.
    http_status : int, optional
        Status reported in Problem Details. Defaults to 500.
    log_level : int, optional
        Level callers should log this error at. Defaults to ``logging.ERROR``.
    cause : Exception | None, optional
        Underlying exception, exposed as ``__cause__``.
    context : Mapping[str, object] | None, optional
        Extra structured fields copied into the Problem Details extensions.
    """

    def __init__(  # noqa: PLR0913
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.RUNTIME_ERROR,
        http_status: int = 500,
        log_level: int = logging.ERROR,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.log_level = log_level
        self.context: dict[str, object] = dict(context) if context else {}
        if cause is not None:
            self.__cause__ = cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetailsDict:
        """Convert to an RFC 9457 Problem Details payload.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying this occurrence. Defaults to ``urn:docsite:error``.
        title : str | None, optional
            Short summary. Defaults to the exception class name.

        Returns
        -------
        ProblemDetailsDict
            Problem Details payload including ``code`` and context extensions.
        """
        return build_problem_details(
            ProblemDetailsParams(
                type=get_type_uri(self.code),
                title=title or self.__class__.__name__,
                status=self.http_status,
                detail=self.message,
                instance=instance or "urn:docsite:error",
                code=self.code.value,
                extensions=cast("Mapping[str, JsonValue] | None", self.context or None),
            )
        )

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class SettingsError(DocsiteError):
    """Environment-backed settings failed validation.

    The individual validation errors reported by Pydantic are kept on
    :attr:`errors` and also exposed in the Problem Details extensions.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: tuple[dict[str, JsonValue], ...] = (),
        cause: Exception | None = None,
        settings_class: str | None = None,
    ) -> None:
        context: dict[str, object] = {"errors": list(errors)}
        if settings_class is not None:
            context["settings_class"] = settings_class
        super().__init__(
            message,
            code=ErrorCode.SETTINGS_INVALID,
            http_status=500,
            cause=cause,
            context=context,
        )
        self.errors = errors


class SidebarScanError(DocsiteError):
    """A category directory could not be scanned at all.

    Raised for failures at the category boundary (for example the category
    root cannot be listed). Individual entries never raise; they are reported
    as entry failures instead.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.SIDEBAR_SCAN_ERROR,
            http_status=500,
            log_level=logging.ERROR,
            cause=cause,
            context=context,
        )


class SchemaValidationError(DocsiteError):
    """Generated navigation does not match the framework schema."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.SCHEMA_VALIDATION_ERROR,
            http_status=422,
            cause=cause,
            context=context,
        )
