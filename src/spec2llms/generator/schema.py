"""Schema renderer: synthetic JSON examples and field tables.

Every function here is pure and total. Object properties are always
emitted in ascending name order so the same schema renders to the same
text every time. Nesting is bounded by ``MAX_DEPTH``: the example
renderer counts indentation levels (two per logical level), the schema
doc renderer counts logical levels and passes the levels it has left on
to the example renderer.
"""

import json

from spec2llms.parser.base import Schema
from spec2llms.parser.examples import format_example, has_example

MAX_DEPTH = 4

INDENT = "  "

STRING_FORMAT_EXAMPLES = {
    "date-time": '"2024-01-15T10:00:00Z"',
    "date": '"2024-01-15"',
    "email": '"user@example.com"',
    "uri": '"https://example.com"',
    "url": '"https://example.com"',
}


def render_example(schema: Schema | None, indent: int = 0, max_depth: int = MAX_DEPTH) -> str:
    """Render a JSON-like example for ``schema``.

    ``indent`` is the current nesting level. Once it exceeds
    ``max_depth * 2`` nothing more is expanded and an empty string is
    returned; callers substitute a type-appropriate placeholder.
    """
    if schema is None:
        return "null"
    if indent > max_depth * 2:
        return ""
    if has_example(schema.example):
        return format_example(schema.example)
    if schema.enum:
        return json.dumps(schema.enum[0], ensure_ascii=False)

    prefix = INDENT * indent

    if schema.type == "object" and schema.properties:
        names = sorted(schema.properties)
        lines = ["{"]
        for i, name in enumerate(names):
            prop = schema.properties[name]
            value = render_value(prop, indent + 1, max_depth)
            if not value:
                value = _placeholder(prop)
            comma = "," if i < len(names) - 1 else ""
            lines.append(f"{prefix}{INDENT}{json.dumps(name, ensure_ascii=False)}: {value}{comma}")
        lines.append(prefix + "}")
        return "\n".join(lines)

    if schema.type == "array":
        items = schema.items
        if items is not None and _is_expandable(items):
            inner = render_example(items, indent + 1, max_depth)
            if not inner:
                return "[{}]"
            return f"[\n{prefix}{INDENT}{inner}\n{prefix}]"
        if items is not None:
            return f"[{type_example(items)}]"
        return "[]"

    if schema.type == "object":
        return "{}"

    return type_example(schema)


def render_value(prop: Schema | None, indent: int, max_depth: int = MAX_DEPTH) -> str:
    """Render the value of one object property at nesting level ``indent``."""
    if prop is None:
        return "null"
    if has_example(prop.example):
        return format_example(prop.example)

    if _is_expandable(prop) and indent < max_depth * 2:
        return render_example(prop, indent, max_depth)

    if prop.type == "array":
        if prop.items is None:
            return "[{}]"
        if _is_expandable(prop.items):
            return render_example(prop, indent, max_depth)
        example = type_example(prop.items)
        if example in ("", "null"):
            example = "{}"
        return f"[{example}]"

    return type_example(prop) or "null"


def type_example(schema: Schema | None, depth: int = 0) -> str:
    """Return the non-expanding example for ``schema``: example, enum, or a type default."""
    if schema is None:
        return "null"
    if has_example(schema.example):
        return format_example(schema.example)
    if schema.enum:
        return json.dumps(schema.enum[0], ensure_ascii=False)

    if schema.type == "string":
        return STRING_FORMAT_EXAMPLES.get(schema.format, '"string"')
    if schema.type == "integer":
        return "0"
    if schema.type == "number":
        return "0.0"
    if schema.type == "boolean":
        return "true"
    if schema.type == "array":
        if schema.items is None or depth >= MAX_DEPTH * 2:
            return "[]"
        return f"[{type_example(schema.items, depth + 1)}]"
    if schema.type in ("object", ""):
        return "{}"
    return "null"


def render_field_table(schema: Schema | None, prefix: str = "") -> str:
    """Render a one-level ``Field | Type | Description`` markdown table.

    Nested objects are not expanded; their shape is only visible in the
    example.
    """
    if schema is None or not schema.properties:
        return ""

    rows = [
        "| Field | Type | Description |",
        "|-------|------|-------------|",
    ]
    for name in sorted(schema.properties):
        prop = schema.properties[name]
        field = f"{prefix}.{name}" if prefix else name

        desc = prop.description
        if prop.enum:
            values = "`, `".join(prop.enum)
            desc = f"{desc} Values: `{values}`"

        rows.append(f"| {field} | {field_type(prop)} | {_cell(desc)} |")

    return "\n".join(rows) + "\n\n"


def field_type(prop: Schema) -> str:
    if prop.type == "array" and prop.items is not None:
        return f"array[{prop.items.type or 'object'}]"
    if prop.format:
        return f"{prop.type} ({prop.format})"
    return prop.type


def render_schema_doc(schema: Schema | None, depth: int = 0) -> str:
    """Document a request or response schema: example block plus field table.

    Arrays of objects are documented through their item schema one level
    down. The example block gets whatever depth budget is left after
    ``depth`` levels, so nested docs expand less. Primitive schemas produce
    nothing here.
    """
    if schema is None or depth > MAX_DEPTH:
        return ""

    if schema.type == "object" and schema.properties:
        return (
            "```json\n"
            f"{render_example(schema, 0, MAX_DEPTH - depth)}\n"
            "```\n\n"
            f"{render_field_table(schema)}"
        )

    if schema.type == "array" and schema.items is not None:
        item_type = schema.items.type or "object"
        doc = f"Array of `{item_type}`\n\n"
        if _is_expandable(schema.items):
            doc += render_schema_doc(schema.items, depth + 1)
        return doc

    return ""


def _is_expandable(schema: Schema) -> bool:
    return schema.type == "object" and bool(schema.properties)


def _placeholder(prop: Schema | None) -> str:
    if prop is not None and prop.type == "array":
        return "[{}]"
    if prop is not None and prop.type == "object":
        return "{}"
    return "null"


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ").strip()
