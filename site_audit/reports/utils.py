"""Helpers shared by report implementations."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

from ..models import FieldDescriptor
from ..render import Column, Link

CONTENT_LIST_PATH = "/admin/content"


def list_path(bundle: str) -> str:
    """Admin content listing filtered to one primary bundle."""
    return f"{CONTENT_LIST_PATH}?{urlencode({'type': bundle})}"


def operations(
    edit_path: Optional[str],
    fields_path: Optional[str] = None,
    content_path: Optional[str] = None,
) -> List[Link]:
    links: List[Link] = []
    if edit_path:
        links.append(Link("Edit", edit_path))
    if fields_path:
        links.append(Link("Manage fields", fields_path))
    if content_path:
        links.append(Link("View list", content_path))
    return links


def operations_column() -> Column:
    return Column("operations", "Operations", sortable=False)


def field_data(descriptor: FieldDescriptor) -> Dict[str, Any]:
    return {
        "label": descriptor.label,
        "type": descriptor.field_type,
        "target_type": descriptor.target_type,
        "target_bundles": list(descriptor.target_bundles),
    }


def field_summaries(fields: Mapping[str, Mapping[str, Any]]) -> List[str]:
    """One line per field, grouped by field type (stable within a type)."""
    ordered = sorted(fields.items(), key=lambda item: str(item[1].get("type") or ""))
    lines: List[str] = []
    for field_name, info in ordered:
        line = f"`{field_name}` ({info.get('label', field_name)}): {info.get('type', '')}"
        if info.get("target_type"):
            line += f" → {info['target_type']}"
            if info.get("target_bundles"):
                line += f" [{', '.join(info['target_bundles'])}]"
        lines.append(line)
    return lines


def labelled(bundle: str, labels: Mapping[str, str]) -> str:
    """Render ``bundle (Label)`` when the label is known."""
    label = labels.get(bundle)
    return f"{bundle} ({label})" if label else bundle


def key_value_rows(items: Iterable[tuple]) -> List[Dict[str, Any]]:
    return [{"item": item, "value": value} for item, value in items]


def key_value_columns(item_label: str = "Item", value_label: str = "Value") -> List[Column]:
    return [
        Column("item", item_label, sortable=False),
        Column("value", value_label, sortable=False),
    ]


__all__ = [
    "CONTENT_LIST_PATH",
    "field_data",
    "field_summaries",
    "key_value_columns",
    "key_value_rows",
    "labelled",
    "list_path",
    "operations",
    "operations_column",
]
