"""Content volume report: entity counts per node and paragraph bundle."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors, ContentCollector, StructureCollector
from ..models import EntityFamily
from ..render import Column, Link, TableSection
from .base import AuditReport, ReportData
from .utils import list_path, operations, operations_column


class ContentVolumeReport(AuditReport):
    id = "content_volume"
    label = "Content volume"
    description = "Shows counts of nodes and paragraphs per bundle, with quick navigation links."

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
    def create(cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None) -> "ContentVolumeReport":
        return cls(collectors.structure, collectors.content, options)

    def build_data(self) -> ReportData:
        node_bundles = self._structure.list_bundles(EntityFamily.PRIMARY)
        paragraph_bundles = self._structure.list_bundles(EntityFamily.COMPONENT)
        node_counts = self._content.node_counts(list(node_bundles))
        paragraph_counts = self._content.paragraph_counts(list(paragraph_bundles))

        nodes: Dict[str, Dict[str, Any]] = {}
        for bundle, info in node_bundles.items():
            nodes[bundle] = {
                "machine_name": bundle,
                "label": info.label,
                "description": info.description,
                "count": node_counts.get(bundle, 0),
                "edit_path": info.edit_path,
                "fields_path": info.fields_path,
                "list_path": list_path(bundle),
            }

        paragraphs: Dict[str, Dict[str, Any]] = {}
        for bundle, info in paragraph_bundles.items():
            paragraphs[bundle] = {
                "machine_name": bundle,
                "label": info.label,
                "description": info.description,
                "count": paragraph_counts.get(bundle, 0),
                "edit_path": info.edit_path,
                "fields_path": info.fields_path,
            }

        return {"nodes": nodes, "paragraphs": paragraphs}

    def build_sections(self, data: ReportData) -> List[TableSection]:
        columns = [
            Column("machine_name", "Machine name"),
            Column("label", "Label"),
            Column("count", "Count", numeric=True),
            operations_column(),
        ]
        node_rows = [
            {
                "machine_name": bundle,
                "label": Link(info["label"], info["edit_path"]),
                "count": info["count"],
                "operations": operations(info["edit_path"], info["fields_path"], info["list_path"]),
            }
            for bundle, info in data.get("nodes", {}).items()
        ]
        paragraph_rows = [
            {
                "machine_name": bundle,
                "label": Link(info["label"], info["edit_path"]),
                "count": info["count"],
                "operations": operations(info["edit_path"], info["fields_path"]),
            }
            for bundle, info in data.get("paragraphs", {}).items()
        ]
        return [
            TableSection(
                key="nodes",
                title="Nodes by content type",
                columns=columns,
                rows=node_rows,
                empty="No content types found.",
                prefix="nodes_",
            ),
            TableSection(
                key="paragraphs",
                title="Paragraphs by paragraph type",
                columns=columns,
                rows=paragraph_rows,
                empty="No paragraph types found.",
                prefix="paragraphs_",
            ),
        ]


__all__ = ["ContentVolumeReport"]
