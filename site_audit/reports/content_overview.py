"""Content overview report: node bundles with counts, fields and reference fields."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors, ContentCollector, StructureCollector
from ..models import EntityFamily
from ..render import Column, Link, TableSection
from .base import AuditReport, ReportData
from .utils import field_data, field_summaries, list_path, operations, operations_column


class ContentOverviewReport(AuditReport):
    id = "content_overview"
    label = "Content overview"
    description = (
        "Shows all content types, how many nodes exist, how many fields they have, "
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
    def create(cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None) -> "ContentOverviewReport":
        return cls(collectors.structure, collectors.content, options)

    def build_data(self) -> ReportData:
        bundles = self._structure.list_bundles(EntityFamily.PRIMARY)
        fields_by_bundle = self._structure.list_fields(EntityFamily.PRIMARY)
        counts = self._content.node_counts(list(bundles))

        nodes: Dict[str, Dict[str, Any]] = {}
        for bundle, info in bundles.items():
            fields = {
                name: field_data(descriptor)
                for name, descriptor in fields_by_bundle.get(bundle, {}).items()
            }
            reference_fields = {
                name: fields[name]
                for name, descriptor in fields_by_bundle.get(bundle, {}).items()
                if descriptor.is_reference
            }
            nodes[bundle] = {
                "machine_name": bundle,
                "label": info.label,
                "description": info.description,
                "count": counts.get(bundle, 0),
                "fields_count": len(fields),
                "reference_fields_count": len(reference_fields),
                "fields": fields,
                "reference_fields": reference_fields,
                "edit_path": info.edit_path,
                "fields_path": info.fields_path,
                "list_path": list_path(bundle),
            }
        return {"nodes": nodes}

    def build_sections(self, data: ReportData) -> List[TableSection]:
        rows = []
        for bundle, info in data.get("nodes", {}).items():
            rows.append(
                {
                    "machine_name": bundle,
                    "label": Link(info["label"], info["edit_path"]),
                    "count": info["count"],
                    "fields_count": info["fields_count"],
                    "reference_fields_count": info["reference_fields_count"],
                    "fields": field_summaries(info["fields"]) or ["No configurable fields."],
                    "reference_fields": (
                        field_summaries(info["reference_fields"]) or ["No reference fields."]
                    ),
                    "operations": operations(info["edit_path"], info["fields_path"], info["list_path"]),
                }
            )
        return [
            TableSection(
                key="nodes",
                title="Node bundles overview",
                columns=[
                    Column("machine_name", "Machine name"),
                    Column("label", "Label"),
                    Column("count", "Nodes", numeric=True),
                    Column("fields_count", "Fields", numeric=True),
                    Column("reference_fields_count", "Ref fields", numeric=True),
                    Column("fields", "Field details", sortable=False),
                    Column("reference_fields", "Reference fields", sortable=False),
                    operations_column(),
                ],
                rows=rows,
                empty="No node bundles (content types) found.",
            )
        ]


__all__ = ["ContentOverviewReport"]
