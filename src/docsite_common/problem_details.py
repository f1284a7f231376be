"""RFC 9457 Problem Details helpers.

Examples
--------
>>> from docsite_common.problem_details import ProblemDetailsParams, build_problem_details
>>> problem = build_problem_details(
...     ProblemDetailsParams(
...         type="https://docsite.dev/problems/settings-invalid",
...         title="Invalid settings",
...         status=500,
...         detail="DOCSITE_COLLAPSE_FROM_DEPTH must be >= 0",
...         instance="urn:docsite:settings:invalid",
...     )
... )
>>> problem["status"]
500
"""

# pylint: disable=redefined-builtin

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "JsonPrimitive",
    "JsonValue",
    "ProblemDetailsDict",
    "ProblemDetailsParams",
    "build_problem_details",
    "render_problem",
]

JsonPrimitive = str | int | float | bool | None
JsonValue = JsonPrimitive | list["JsonValue"] | dict[str, "JsonValue"]

ProblemDetailsDict = dict[str, JsonValue]


@dataclass(frozen=True, slots=True)
class ProblemDetailsParams:
    """Core fields required to build a Problem Details payload."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str | None = None
    extensions: Mapping[str, JsonValue] | None = None


def build_problem_details(params: ProblemDetailsParams) -> ProblemDetailsDict:
    """Build an RFC 9457 Problem Details payload.

    Extension members are merged at the top level of the payload, as the RFC
    recommends, without overriding the core members.

    Parameters
    ----------
    params : ProblemDetailsParams
        Structured fields describing the problem.

    Returns
    -------
    ProblemDetailsDict
        JSON-compatible payload.
    """
    payload: ProblemDetailsDict = {
        "type": params.type,
        "title": params.title,
        "status": params.status,
        "detail": params.detail,
        "instance": params.instance,
    }
    if params.code is not None:
        payload["code"] = params.code
    for key, value in (params.extensions or {}).items():
        payload.setdefault(str(key), value)
    return payload


def render_problem(problem: Mapping[str, object]) -> str:
    """Render ``problem`` as minified JSON, keeping non-ASCII text readable."""
    return json.dumps(problem, default=str, ensure_ascii=False)
