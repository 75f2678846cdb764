"""Helpers shared by the MDX transformers and resolvers.

* :func:`extract_property_value` -- flatten a Notion page property into a
  scalar or a list.
* :func:`format_yaml_value` -- render a value for a YAML frontmatter line.
* :func:`format_as_markdown_table` -- build a GFM table.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def _first_plain_text(spans: Sequence[Mapping[str, Any]] | None) -> str:
    if not spans:
        return ""
    return spans[0].get("plain_text", "") or ""


def _person_label(person: Mapping[str, Any] | None) -> str:
    if not person:
        return ""
    return person.get("name") or person.get("id", "")


def _file_url(file: Mapping[str, Any]) -> str:
    if file.get("type") == "external":
        return (file.get("external") or {}).get("url", "")
    return (file.get("file") or {}).get("url", "")


def extract_property_value(prop: Mapping[str, Any] | None) -> Any:
    """Flatten a Notion property object into a plain value.

    Parameters
    ----------
    prop:
        One entry of a page's ``properties`` object, e.g.
        ``{"type": "select", "select": {"name": "Draft"}}``.

    Returns
    -------
    Any
        A string, number, bool or list depending on the property type.
        Empty values map to a type-appropriate default (``""`` for text,
        ``0`` for numbers, ``[]`` for collections).  An absent property or
        an unknown type yields ``None``.
    """
    if not prop:
        return None

    prop_type = prop.get("type")

    if prop_type in ("title", "rich_text"):
        return _first_plain_text(prop.get(prop_type))

    if prop_type in ("select", "status"):
        return (prop.get(prop_type) or {}).get("name", "")

    if prop_type == "multi_select":
        return [item.get("name", "") for item in prop.get("multi_select") or []]

    if prop_type == "date":
        date = prop.get("date")
        if not date:
            return ""
        if date.get("end"):
            return f"{date.get('start')} to {date['end']}"
        return date.get("start") or ""

    if prop_type == "number":
        number = prop.get("number")
        return 0 if number is None else number

    if prop_type == "checkbox":
        return bool(prop.get("checkbox"))

    if prop_type in ("url", "email", "phone_number"):
        return prop.get(prop_type) or ""

    if prop_type in ("created_time", "last_edited_time"):
        return prop.get(prop_type)

    if prop_type in ("created_by", "last_edited_by"):
        return _person_label(prop.get(prop_type))

    if prop_type == "formula":
        return _formula_value(prop.get("formula") or {})

    if prop_type == "rollup":
        return _rollup_value(prop.get("rollup") or {})

    if prop_type == "files":
        return [_file_url(file) for file in prop.get("files") or []]

    if prop_type == "people":
        return [_person_label(person) for person in prop.get("people") or []]

    if prop_type == "relation":
        return [item.get("id", "") for item in prop.get("relation") or []]

    return None


def _formula_value(formula: Mapping[str, Any]) -> Any:
    formula_type = formula.get("type")
    if formula_type == "string":
        return formula.get("string") or ""
    if formula_type == "number":
        number = formula.get("number")
        return 0 if number is None else number
    if formula_type == "boolean":
        return formula.get("boolean")
    if formula_type == "date":
        return (formula.get("date") or {}).get("start") or ""
    return None


def _rollup_value(rollup: Mapping[str, Any]) -> Any:
    rollup_type = rollup.get("type")
    if rollup_type == "number":
        number = rollup.get("number")
        return 0 if number is None else number
    if rollup_type == "date":
        return (rollup.get("date") or {}).get("start") or ""
    if rollup_type == "array":
        return [extract_property_value(item) for item in rollup.get("array") or []]
    return None


def format_yaml_value(value: Any) -> str:
    """Render *value* for the right-hand side of a YAML frontmatter line.

    Lists become ``["a", "b"]``, strings are double-quoted with inner
    quotes escaped, booleans and ``None`` use YAML spelling, anything else
    goes through ``str``.
    """
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(f'"{item}"' for item in value) + "]"
    if isinstance(value, str):
        escaped = value.replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _table_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", "<br />")


def format_as_markdown_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> str:
    """Build a GFM table.

    Rows shorter than *headers* are padded with empty cells.  Pipes in
    cells are escaped and line breaks become ``<br />``.
    """
    width = max([len(headers), *(len(row) for row in rows)]) if rows else len(headers)
    if width == 0:
        return ""

    def _line(cells: Sequence[str]) -> str:
        padded = [_table_cell(cell) for cell in cells] + [""] * (width - len(cells))
        return "| " + " | ".join(padded) + " |"

    lines = [_line(headers), "|" + "|".join(["---"] * width) + "|"]
    lines.extend(_line(row) for row in rows)
    return "\n".join(lines)
