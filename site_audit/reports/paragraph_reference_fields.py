"""Paragraph types carrying entity reference fields, with their targets."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors, StructureCollector
from ..models import EntityFamily
from ..render import Column, Link, TableSection
from .base import AuditReport, ReportData
from .utils import field_data, operations, operations_column


class ParagraphReferenceFieldsReport(AuditReport):
    id = "paragraph_reference_fields"
    label = "Paragraph reference fields"
    description = (
        "Shows paragraph types that have entity_reference or entity_reference_revisions "
        "fields, including their targets."
    )

    def __init__(self, structure: StructureCollector, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(options)
        self._structure = structure

    @classmethod
    def create(
        cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None
    ) -> "ParagraphReferenceFieldsReport":
        return cls(collectors.structure, options)

    def build_data(self) -> ReportData:
        bundles = self._structure.list_bundles(EntityFamily.COMPONENT)
        fields_by_bundle = self._structure.list_fields(EntityFamily.COMPONENT)

        paragraphs: Dict[str, Dict[str, Any]] = {}
        for bundle, info in bundles.items():
            reference_fields: Dict[str, Dict[str, Any]] = {}
            for name, descriptor in fields_by_bundle.get(bundle, {}).items():
                if not descriptor.is_reference:
                    continue
                entry = field_data(descriptor)
                entry["field_edit_path"] = descriptor.edit_path
                reference_fields[name] = entry
            # Only bundles with at least one reference field are listed.
            if not reference_fields:
                continue
            paragraphs[bundle] = {
                "machine_name": bundle,
                "label": info.label,
                "reference_fields_count": len(reference_fields),
                "reference_fields": reference_fields,
                "edit_path": info.edit_path,
                "fields_path": info.fields_path,
            }
        return {"paragraphs": paragraphs}

    def build_sections(self, data: ReportData) -> List[TableSection]:
        rows = []
        for bundle, info in data.get("paragraphs", {}).items():
            rows.append(
                {
                    "machine_name": bundle,
                    "label": Link(info["label"], info["edit_path"]),
                    "reference_fields_count": info["reference_fields_count"],
                    "reference_fields": [
                        Link(_describe(name, field), field["field_edit_path"])
                        for name, field in info["reference_fields"].items()
                    ],
                    "operations": operations(info["edit_path"], info["fields_path"]),
                }
            )
        return [
            TableSection(
                key="paragraphs",
                title="Paragraphs with entity reference fields",
                columns=[
                    Column("machine_name", "Machine name"),
                    Column("label", "Label"),
                    Column("reference_fields_count", "Reference fields", numeric=True),
                    Column("reference_fields", "Fields and targets", sortable=False),
                    operations_column(),
                ],
                rows=rows,
                empty="No paragraph types with entity reference fields were found.",
            )
        ]


def _describe(field_name: str, field: Mapping[str, Any]) -> str:
    text = f"{field_name} ({field['type']})"
    if field.get("target_type"):
        text += f" → {field['target_type']}"
        if field.get("target_bundles"):
            text += f" [{', '.join(field['target_bundles'])}]"
    return text


__all__ = ["ParagraphReferenceFieldsReport"]
