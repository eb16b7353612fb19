"""Paragraph overview report: paragraph types with counts and fields."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors, ContentCollector, StructureCollector
from ..models import EntityFamily
from ..render import Column, Link, TableSection
from .base import AuditReport, ReportData
from .utils import field_data, field_summaries, operations, operations_column


class ParagraphOverviewReport(AuditReport):
    id = "paragraph_overview"
    label = "Paragraph overview"
    description = (
        "Shows all paragraph types, how many entities exist, how many fields they have, "
        "and details about each field."
    )

    def __init__(
        self,
        structure: StructureCollector,
        content: ContentCollector,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(options)
        self._structure = structure
        self._content = content

    @classmethod
    def create(cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None) -> "ParagraphOverviewReport":
        return cls(collectors.structure, collectors.content, options)

    def build_data(self) -> ReportData:
        bundles = self._structure.list_bundles(EntityFamily.COMPONENT)
        fields_by_bundle = self._structure.list_fields(EntityFamily.COMPONENT)
        counts = self._content.paragraph_counts(list(bundles))

        paragraphs: Dict[str, Dict[str, Any]] = {}
        for bundle, info in bundles.items():
            fields = {
                name: field_data(descriptor)
                for name, descriptor in fields_by_bundle.get(bundle, {}).items()
            }
            paragraphs[bundle] = {
                "machine_name": bundle,
                "label": info.label,
                "description": info.description,
                "count": counts.get(bundle, 0),
                "fields_count": len(fields),
                "fields": fields,
                "edit_path": info.edit_path,
                "fields_path": info.fields_path,
            }
        return {"paragraphs": paragraphs}

    def build_sections(self, data: ReportData) -> List[TableSection]:
        rows = [
            {
                "machine_name": bundle,
                "label": Link(info["label"], info["edit_path"]),
                "count": info["count"],
                "fields_count": info["fields_count"],
                "fields": field_summaries(info["fields"]) or ["No configurable fields."],
                "operations": operations(info["edit_path"], info["fields_path"]),
            }
            for bundle, info in data.get("paragraphs", {}).items()
        ]
        return [
            TableSection(
                key="paragraphs",
                title="Paragraph types overview",
                columns=[
                    Column("machine_name", "Machine name"),
                    Column("label", "Label"),
                    Column("count", "Paragraphs", numeric=True),
                    Column("fields_count", "Fields", numeric=True),
                    Column("fields", "Field details", sortable=False),
                    operations_column(),
                ],
                rows=rows,
                empty="No paragraph types found.",
            )
        ]


__all__ = ["ParagraphOverviewReport"]
