"""Paragraph usage across a configured set of node bundles."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors, ContentBundleCollector, StructureCollector
from ..models import EntityFamily, descriptor_to_dict
from ..render import DESC, Column, Link, TableSection
from .base import AuditReport, ReportData
from .utils import list_path, operations, operations_column


class SelectedBundlesParagraphUsageReport(AuditReport):
    """Usage summary and paragraph usage per selected bundle.

    The bundle set comes from the ``selected_bundles`` option (machine name to
    label). Without it every node bundle on the site is selected. Bundles that
    are configured but missing from the site are still listed with
    ``exists: false``.
    """

    id = "selected_bundles_paragraph_usage"
    label = "Selected bundles: paragraph usage"
    description = (
        "Shows paragraph usage for a specific set of node bundles and which paragraph "
        "types are not used."
    )

    def __init__(
        self,
        structure: StructureCollector,
        content_bundle: ContentBundleCollector,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(options)
        self._structure = structure
        self._content_bundle = content_bundle

    @classmethod
    def create(
        cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None
    ) -> "SelectedBundlesParagraphUsageReport":
        return cls(collectors.structure, collectors.content_bundle, options)

    def selected_bundles(self, node_bundles: Mapping[str, Any]) -> Dict[str, str]:
        configured = self.options.get("selected_bundles")
        if isinstance(configured, Mapping) and configured:
            return {str(key): str(value or key) for key, value in configured.items()}
        if isinstance(configured, str) and configured.strip():
            configured = [name.strip() for name in configured.split(",") if name.strip()]
        if isinstance(configured, (list, tuple)) and configured:
            return {str(key): str(key) for key in configured}
        return {bundle: info.label for bundle, info in node_bundles.items()}

    def build_data(self) -> ReportData:
        node_bundles = self._structure.list_bundles(EntityFamily.PRIMARY)
        paragraph_bundles = self._structure.list_bundles(EntityFamily.COMPONENT)

        bundles: Dict[str, Dict[str, Any]] = {}
        aggregated: Dict[str, Dict[str, Any]] = {}
        for bundle, label in self.selected_bundles(node_bundles).items():
            info = node_bundles.get(bundle)
            entry: Dict[str, Any] = {
                "machine_name": bundle,
                "label": label,
                "exists": info is not None,
                "node_summary": None,
                "paragraph_usage": {},
                "edit_path": None,
                "fields_path": None,
                "list_path": None,
            }
            if info is not None:
                usage = self._content_bundle.component_usage_for_bundle(bundle)
                entry.update(
                    node_summary=self._content_bundle.usage_summary(bundle).to_dict(),
                    paragraph_usage=descriptor_to_dict(usage),
                    edit_path=info.edit_path,
                    fields_path=info.fields_path,
                    list_path=list_path(bundle),
                )
                for paragraph_type, stat in usage.items():
                    paragraph = paragraph_bundles.get(paragraph_type)
                    totals = aggregated.setdefault(
                        paragraph_type,
                        {
                            "paragraph_type": paragraph_type,
                            "label": stat.label,
                            "total_paragraphs": 0,
                            "total_nodes": 0,
                            "bundles": [],
                            "edit_path": paragraph.edit_path if paragraph else None,
                            "fields_path": paragraph.fields_path if paragraph else None,
                        },
                    )
                    totals["total_paragraphs"] += stat.total_count
                    totals["total_nodes"] += stat.distinct_parent_count
                    if bundle not in totals["bundles"]:
                        totals["bundles"].append(bundle)
            bundles[bundle] = entry

        unused = {
            paragraph_type: {
                "paragraph_type": paragraph_type,
                "label": info.label,
                "edit_path": info.edit_path,
                "fields_path": info.fields_path,
            }
            for paragraph_type, info in paragraph_bundles.items()
            if paragraph_type not in aggregated
        }

        return {
            "bundles": _sorted_by(bundles, "label"),
            "paragraph_usage_aggregated": _sorted_by(aggregated, "total_paragraphs", reverse=True),
            "unused_paragraphs": _sorted_by(unused, "label"),
        }

    def build_sections(self, data: ReportData) -> List[TableSection]:
        bundle_rows = []
        for bundle, info in data.get("bundles", {}).items():
            summary = info.get("node_summary") or {}
            bundle_rows.append(
                {
                    "machine_name": bundle,
                    "label": Link(info["label"], info["edit_path"]) if info["edit_path"] else info["label"],
                    "exists": info["exists"],
                    "total_nodes": summary.get("total"),
                    "published": summary.get("published"),
                    "unpublished": summary.get("unpublished"),
                    "paragraph_types": len(info.get("paragraph_usage") or {}),
                    "operations": operations(info["edit_path"], info["fields_path"], info["list_path"]),
                }
            )

        usage_rows = [
            {
                "paragraph_type": _maybe_link(paragraph_type, info["edit_path"]),
                "label": info["label"],
                "total_paragraphs": info["total_paragraphs"],
                "total_nodes": info["total_nodes"],
                "bundles": list(info["bundles"]),
            }
            for paragraph_type, info in data.get("paragraph_usage_aggregated", {}).items()
        ]

        unused_rows = [
            {
                "paragraph_type": paragraph_type,
                "label": info["label"],
                "operations": operations(info["edit_path"], info["fields_path"]),
            }
            for paragraph_type, info in data.get("unused_paragraphs", {}).items()
        ]

        return [
            TableSection(
                key="bundles",
                title="Selected bundles overview",
                columns=[
                    Column("machine_name", "Machine name"),
                    Column("label", "Label"),
                    Column("exists", "Exists"),
                    Column("total_nodes", "Total nodes", numeric=True),
                    Column("published", "Published", numeric=True),
                    Column("unpublished", "Unpublished", numeric=True),
                    Column("paragraph_types", "Paragraph types", numeric=True),
                    operations_column(),
                ],
                rows=bundle_rows,
                empty="No bundles in the configured list.",
                prefix="bundles_",
                default_order="label",
            ),
            TableSection(
                key="paragraphs",
                title="Paragraph usage across selected bundles",
                columns=[
                    Column("paragraph_type", "Paragraph type"),
                    Column("label", "Label"),
                    Column("total_paragraphs", "Total paragraphs", numeric=True),
                    Column("total_nodes", "Total nodes", numeric=True),
                    Column("bundles", "Used in bundles", sortable=False),
                ],
                rows=usage_rows,
                empty="No paragraph usage detected for the selected bundles.",
                prefix="paragraphs_",
                default_order="total_paragraphs",
                default_direction=DESC,
            ),
            TableSection(
                key="unused",
                title="Paragraph types not used by selected bundles",
                columns=[
                    Column("paragraph_type", "Paragraph type"),
                    Column("label", "Label"),
                    operations_column(),
                ],
                rows=unused_rows,
                empty="All paragraph types are used by at least one selected bundle.",
                prefix="unused_",
                default_order="label",
            ),
        ]


def _maybe_link(text: str, href: Optional[str]) -> Any:
    return Link(text, href) if href else text


def _sorted_by(
    entries: Mapping[str, Mapping[str, Any]], key: str, *, reverse: bool = False
) -> Dict[str, Any]:
    ordered = sorted(entries.items(), key=lambda item: item[1][key], reverse=reverse)
    return dict(ordered)


__all__ = ["SelectedBundlesParagraphUsageReport"]
