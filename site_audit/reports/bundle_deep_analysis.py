"""In-depth analysis of one node bundle: configuration and stored usage."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors, ContentBundleCollector, StructureCollector
from ..models import EntityFamily
from ..render import DESC, Column, Link, TableSection
from .base import AuditReport, ReportData
from .utils import key_value_columns, key_value_rows

EXAMPLE_LIMIT = 5


class BundleDeepAnalysisReport(AuditReport):
    """Fields, paragraph reference fields and paragraph usage for one bundle.

    The bundle is taken from the ``bundle`` option; unknown or missing values
    fall back to the first node bundle.
    """

    id = "bundle_deep_analysis"
    label = "Bundle deep analysis"
    description = "Analyze a content bundle in depth: fields, paragraph reference fields and paragraph usage."
    enabled = False

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
    def create(cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None) -> "BundleDeepAnalysisReport":
        return cls(collectors.structure, collectors.content_bundle, options)

    def build_data(self) -> ReportData:
        node_bundles = self._structure.list_bundles(EntityFamily.PRIMARY)
        selected = self.options.get("bundle")
        if not selected or selected not in node_bundles:
            selected = next(iter(node_bundles), None)

        if selected is None:
            return {
                "selected_bundle": None,
                "bundle_label": "",
                "bundles": {},
                "node_summary": {},
                "config_summary": {},
                "paragraph_usage": {},
            }

        info = node_bundles[selected]
        fields = self._structure.list_fields(EntityFamily.PRIMARY).get(selected, {})
        references = self._structure.list_reference_fields()["content_references"].get(selected, {})

        usage: Dict[str, Dict[str, Any]] = {}
        for paragraph_type, stat in self._content_bundle.component_usage_for_bundle(selected).items():
            usage[paragraph_type] = {
                "paragraph_type": paragraph_type,
                "label": stat.label,
                "total_count": stat.total_count,
                "distinct_parent_count": stat.distinct_parent_count,
                "example_parent_ids": self._content_bundle.example_parent_ids(
                    selected, paragraph_type, EXAMPLE_LIMIT
                ),
            }

        return {
            "selected_bundle": selected,
            "bundle_label": info.label,
            "bundles": {bundle: bundle_info.label for bundle, bundle_info in node_bundles.items()},
            "node_summary": self._content_bundle.usage_summary(selected).to_dict(),
            "config_summary": {
                "bundle": selected,
                "label": info.label,
                "description": info.description,
                "edit_path": info.edit_path,
                "fields_path": info.fields_path,
                "fields": {
                    name: {
                        "field_name": descriptor.field_name,
                        "label": descriptor.label,
                        "field_type": descriptor.field_type,
                        "required": descriptor.required,
                        "edit_path": descriptor.edit_path,
                    }
                    for name, descriptor in fields.items()
                },
                "paragraph_fields": {
                    name: {
                        "field_name": descriptor.field_name,
                        "label": descriptor.label,
                        "cardinality": descriptor.cardinality,
                        "allowed_paragraph_types": list(descriptor.allowed_target_bundles),
                        "edit_path": descriptor.edit_path,
                    }
                    for name, descriptor in references.items()
                },
            },
            "paragraph_usage": usage,
        }

    def build_sections(self, data: ReportData) -> List[TableSection]:
        selected = data.get("selected_bundle")
        summary = data.get("node_summary") or {}
        config = data.get("config_summary") or {}

        overview_rows = []
        if selected:
            overview_rows = key_value_rows(
                [
                    ("Bundle", Link(selected, config.get("edit_path", ""))),
                    ("Label", data.get("bundle_label", "")),
                    ("Total nodes", summary.get("total", 0)),
                    ("Published", summary.get("published", 0)),
                    ("Unpublished", summary.get("unpublished", 0)),
                ]
            )

        field_rows = [
            {
                "field_name": Link(info["field_name"], info["edit_path"]),
                "label": info["label"],
                "field_type": info["field_type"],
                "required": info["required"],
            }
            for info in config.get("fields", {}).values()
        ]
        reference_rows = [
            {
                "field_name": Link(info["field_name"], info["edit_path"]),
                "label": info["label"],
                "cardinality": info["cardinality"],
                "allowed": info["allowed_paragraph_types"],
            }
            for info in config.get("paragraph_fields", {}).values()
        ]
        usage_rows = [
            {
                "paragraph_type": paragraph_type,
                "label": info["label"],
                "total_count": info["total_count"],
                "distinct_parent_count": info["distinct_parent_count"],
                "examples": [Link(str(nid), f"/node/{nid}") for nid in info["example_parent_ids"]],
            }
            for paragraph_type, info in data.get("paragraph_usage", {}).items()
        ]

        title = f"Overview for {selected} ({data.get('bundle_label', '')})" if selected else "Overview"
        return [
            TableSection(
                key="overview",
                title=title,
                columns=key_value_columns(),
                rows=overview_rows,
                empty="No content bundles found.",
            ),
            TableSection(
                key="fields",
                title="Fields on this bundle",
                columns=[
                    Column("field_name", "Field"),
                    Column("label", "Label"),
                    Column("field_type", "Type"),
                    Column("required", "Required"),
                ],
                rows=field_rows,
                empty="No fields found.",
                prefix="fields_",
            ),
            TableSection(
                key="paragraph_fields",
                title="Paragraph reference fields (config)",
                columns=[
                    Column("field_name", "Field"),
                    Column("label", "Label"),
                    Column("cardinality", "Cardinality"),
                    Column("allowed", "Allowed paragraph types", sortable=False),
                ],
                rows=reference_rows,
                empty="No paragraph reference fields detected on this bundle.",
                prefix="refs_",
            ),
            TableSection(
                key="paragraph_usage",
                title="Paragraph usage in this bundle (content)",
                columns=[
                    Column("paragraph_type", "Paragraph type"),
                    Column("label", "Label"),
                    Column("total_count", "Total paragraphs", numeric=True),
                    Column("distinct_parent_count", "Nodes", numeric=True),
                    Column("examples", "Example nodes", sortable=False),
                ],
                rows=usage_rows,
                empty="No paragraph usage found for this bundle.",
                prefix="usage_",
                default_order="total_count",
                default_direction=DESC,
            ),
        ]


__all__ = ["BundleDeepAnalysisReport"]
