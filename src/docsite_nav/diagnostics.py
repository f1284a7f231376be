"""Structured diagnostics collected while building a sidebar.

The scanner never logs directly. Every noteworthy event (a skipped category, a
file that could not be inspected, a completed category) is recorded on a
:class:`DiagnosticsCollector` that is returned with the tree. Callers decide
where the diagnostics go; :meth:`DiagnosticsCollector.emit` forwards them to a
structured logger.
"""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from docsite_common.logging import LoggerAdapter

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    "DiagnosticsCollector",
    "EntryFailure",
    "FailureReason",
]


class FailureReason(StrEnum):
    """Why a single directory entry was skipped."""

    PERMISSION_DENIED = "permission-denied"
    NOT_FOUND = "not-found"
    CYCLE_DETECTED = "cycle-detected"
    OS_ERROR = "os-error"


class DiagnosticLevel(StrEnum):
    """Severity of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        """Return the matching :mod:`logging` level."""
        return {
            DiagnosticLevel.INFO: logging.INFO,
            DiagnosticLevel.WARNING: logging.WARNING,
            DiagnosticLevel.ERROR: logging.ERROR,
        }[self]


class DiagnosticCode(StrEnum):
    """Stable identifiers for the events a sidebar build can report."""

    BASE_DIRECTORY_MISSING = "base-directory-missing"
    CATEGORY_MISSING = "category-missing"
    CATEGORY_FAILED = "category-failed"
    CATEGORY_COMPLETE = "category-complete"
    ENTRY_SKIPPED = "entry-skipped"


@dataclass(frozen=True, slots=True)
class EntryFailure:
    """A directory entry that could not be turned into a sidebar entry.

    Attributes
    ----------
    path : Path
        Entry that failed.
    reason : FailureReason
        Categorized failure reason.
    detail : str
        Human-readable description, usually the OS error message.
    """

    path: Path
    reason: FailureReason
    detail: str

    @classmethod
    def from_os_error(cls, path: Path, exc: OSError) -> EntryFailure:
        """Categorize ``exc`` raised while inspecting ``path``."""
        if isinstance(exc, PermissionError) or exc.errno in {errno.EACCES, errno.EPERM}:
            reason = FailureReason.PERMISSION_DENIED
        elif isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
            reason = FailureReason.NOT_FOUND
        elif exc.errno == errno.ELOOP:
            reason = FailureReason.CYCLE_DETECTED
        else:
            reason = FailureReason.OS_ERROR
        return cls(path=path, reason=reason, detail=exc.strerror or str(exc))


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One recorded event."""

    level: DiagnosticLevel
    code: DiagnosticCode
    message: str
    category: str | None = None
    path: str | None = None
    reason: FailureReason | None = None
    entry_count: int | None = None

    def fields(self) -> dict[str, object]:
        """Return the structured fields for logging, omitting unset values."""
        values: dict[str, object] = {"code": self.code.value}
        if self.category is not None:
            values["category"] = self.category
        if self.path is not None:
            values["entry_path"] = self.path
        if self.reason is not None:
            values["reason"] = self.reason.value
        if self.entry_count is not None:
            values["entry_count"] = self.entry_count
        return values


@dataclass(slots=True)
class DiagnosticsCollector:
    """Ordered record of diagnostics and entry failures for one build."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    failures: list[EntryFailure] = field(default_factory=list)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def add(self, diagnostic: Diagnostic) -> Diagnostic:
        """Append ``diagnostic`` and return it."""
        self.diagnostics.append(diagnostic)
        return diagnostic

    def info(self, code: DiagnosticCode, message: str, **fields: object) -> Diagnostic:
        """Record an informational diagnostic."""
        return self.add(Diagnostic(DiagnosticLevel.INFO, code, message, **fields))  # type: ignore[arg-type]

    def warning(self, code: DiagnosticCode, message: str, **fields: object) -> Diagnostic:
        """Record a warning."""
        return self.add(Diagnostic(DiagnosticLevel.WARNING, code, message, **fields))  # type: ignore[arg-type]

    def error(self, code: DiagnosticCode, message: str, **fields: object) -> Diagnostic:
        """Record an error."""
        return self.add(Diagnostic(DiagnosticLevel.ERROR, code, message, **fields))  # type: ignore[arg-type]

    def record_failure(self, failure: EntryFailure, *, category: str | None = None) -> None:
        """Record a skipped entry both as a failure and as a warning."""
        self.failures.append(failure)
        self.warning(
            DiagnosticCode.ENTRY_SKIPPED,
            f"Cannot process path {failure.path}: {failure.detail}",
            category=category,
            path=str(failure.path),
            reason=failure.reason,
        )

    def with_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        """Return the diagnostics recorded under ``code``."""
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.code is code]

    def at_level(self, level: DiagnosticLevel) -> list[Diagnostic]:
        """Return the diagnostics recorded at ``level``."""
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.level is level]

    @property
    def has_errors(self) -> bool:
        """``True`` when at least one error-level diagnostic was recorded."""
        return any(d.level is DiagnosticLevel.ERROR for d in self.diagnostics)

    def emit(self, logger: LoggerAdapter, *, operation: str = "sidebar.build") -> None:
        """Forward every diagnostic to ``logger`` at its own level."""
        for diagnostic in self.diagnostics:
            extra = {"operation": operation, **diagnostic.fields()}
            logger.log(diagnostic.level.logging_level, diagnostic.message, extra=extra)
