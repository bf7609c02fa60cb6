"""Example values taken from loosely-typed OpenAPI data.

An ``example`` in a YAML or JSON document can be anything. Values are
classified into a small closed set of kinds and formatted by kind, with a
plain ``str()`` fallback for anything the loader did not anticipate.
"""

import datetime
import json
from enum import Enum
from typing import Any


class ExampleKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRUCTURED = "structured"
    ABSENT = "absent"
    OTHER = "other"


def example_kind(value: Any) -> ExampleKind:
    """Classify an example value. ``None`` (missing or JSON null) is ABSENT."""
    if value is None:
        return ExampleKind.ABSENT
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ExampleKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ExampleKind.NUMBER
    if isinstance(value, (str, datetime.date)):
        return ExampleKind.STRING
    if isinstance(value, (dict, list, tuple)):
        return ExampleKind.STRUCTURED
    return ExampleKind.OTHER


def has_example(value: Any) -> bool:
    return example_kind(value) is not ExampleKind.ABSENT


def format_example(value: Any) -> str:
    """Format an example as a JSON-like literal (strings quoted)."""
    kind = example_kind(value)
    if kind is ExampleKind.STRING:
        return json.dumps(_as_text(value), ensure_ascii=False)
    if kind is ExampleKind.ABSENT:
        return "null"
    return _format_unquoted(value, kind)


def format_plain(value: Any) -> str:
    """Format an example for use inside a URL or header (strings unquoted)."""
    kind = example_kind(value)
    if kind is ExampleKind.STRING:
        return _as_text(value)
    if kind is ExampleKind.ABSENT:
        return ""
    return _format_unquoted(value, kind)


def _format_unquoted(value: Any, kind: ExampleKind) -> str:
    if kind is ExampleKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ExampleKind.NUMBER:
        return json.dumps(value)
    if kind is ExampleKind.STRUCTURED:
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _as_text(value: Any) -> str:
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value
