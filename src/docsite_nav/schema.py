"""JSON Schema validation for generated sidebar payloads.

The schema ships with the package under ``schemas/`` and describes exactly
the shape the site framework's sidebar renderer accepts.
"""

from __future__ import annotations

import json
from functools import cache
from importlib import resources
from typing import TYPE_CHECKING, cast

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, ValidationError

from docsite_common.errors import SchemaValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["SIDEBAR_SCHEMA_NAME", "load_schema", "validate_sidebar"]

SIDEBAR_SCHEMA_NAME = "sidebar.json"


@cache
def load_schema(name: str = SIDEBAR_SCHEMA_NAME) -> dict[str, object]:
    """Load a bundled JSON Schema by file name.

    Raises
    ------
    FileNotFoundError
        If no schema named ``name`` is bundled.
    """
    resource = resources.files("docsite_nav").joinpath("schemas", name)
    if not resource.is_file():
        msg = f"Schema not found: {name}"
        raise FileNotFoundError(msg)
    return cast("dict[str, object]", json.loads(resource.read_text(encoding="utf-8")))


def validate_sidebar(payload: Mapping[str, object]) -> None:
    """Validate a serialized sidebar tree.

    Parameters
    ----------
    payload : Mapping[str, object]
        Output of :meth:`SidebarBuildResult.to_dict`.

    Raises
    ------
    SchemaValidationError
        If the payload does not match the schema. The JSON pointer of the
        first offending value is attached as ``pointer``.
    """
    schema = load_schema()
    try:
        Draft202012Validator(schema).validate(payload)
    except ValidationError as exc:
        pointer = "/" + "/".join(str(part) for part in exc.absolute_path)
        msg = f"Sidebar does not match schema at {pointer}: {exc.message}"
        raise SchemaValidationError(msg, cause=exc, context={"pointer": pointer}) from exc
    except SchemaError as exc:
        msg = f"Invalid sidebar schema: {exc.message}"
        raise SchemaValidationError(msg, cause=exc) from exc
