"""Field overview report: configurable fields per node and paragraph bundle."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors, StructureCollector
from ..models import EntityFamily, FieldDescriptor
from ..render import Column, Link, TableSection
from .base import AuditReport, ReportData


class FieldOverviewReport(AuditReport):
    id = "field_overview"
    label = "Field overview"
    description = "Lists fields per content type and paragraph type."
    enabled = False

    def __init__(self, structure: StructureCollector, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(options)
        self._structure = structure

    @classmethod
    def create(cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None) -> "FieldOverviewReport":
        return cls(collectors.structure, options)

    def build_data(self) -> ReportData:
        return {
            "node_fields": _fields_data(self._structure.list_fields(EntityFamily.PRIMARY)),
            "paragraph_fields": _fields_data(self._structure.list_fields(EntityFamily.COMPONENT)),
        }

    def build_sections(self, data: ReportData) -> List[TableSection]:
        columns = [
            Column("bundle", "Bundle"),
            Column("field_name", "Field"),
            Column("label", "Label"),
            Column("field_type", "Type"),
            Column("required", "Required"),
        ]
        return [
            TableSection(
                key="node_fields",
                title="Node fields",
                columns=columns,
                rows=_rows(data.get("node_fields", {})),
                empty="No node fields found.",
                prefix="node_",
            ),
            TableSection(
                key="paragraph_fields",
                title="Paragraph fields",
                columns=columns,
                rows=_rows(data.get("paragraph_fields", {})),
                empty="No paragraph fields found or Paragraphs not enabled.",
                prefix="paragraph_",
            ),
        ]


def _fields_data(
    fields_by_bundle: Mapping[str, Mapping[str, FieldDescriptor]],
) -> Dict[str, Dict[str, Dict[str, Any]]]:
    return {
        bundle: {
            name: {
                "field_name": descriptor.field_name,
                "label": descriptor.label,
                "field_type": descriptor.field_type,
                "required": descriptor.required,
                "edit_path": descriptor.edit_path,
            }
            for name, descriptor in fields.items()
        }
        for bundle, fields in fields_by_bundle.items()
    }


def _rows(fields_by_bundle: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    return [
        {
            "bundle": bundle,
            "field_name": Link(info["field_name"], info["edit_path"]),
            "label": info["label"],
            "field_type": info["field_type"],
            "required": info["required"],
        }
        for bundle, fields in fields_by_bundle.items()
        for info in fields.values()
    ]


__all__ = ["FieldOverviewReport"]
