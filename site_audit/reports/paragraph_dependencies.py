"""Paragraph dependencies report: which bundles may embed which paragraph types."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Set

from ..collectors import Collectors, StructureCollector
from ..models import EntityFamily, ReferenceFieldDescriptor, descriptor_to_dict
from ..render import Column, Link, TableSection
from .base import AuditReport, ReportData
from .utils import labelled


class ParagraphDependenciesReport(AuditReport):
    id = "paragraph_dependencies"
    label = "Paragraph dependencies"
    description = (
        "Shows which content types and paragraph types use which paragraph types, "
        "including nesting."
    )

    def __init__(self, structure: StructureCollector, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(options)
        self._structure = structure

    @classmethod
    def create(
        cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None
    ) -> "ParagraphDependenciesReport":
        return cls(collectors.structure, options)

    def build_data(self) -> ReportData:
        node_bundles = self._structure.list_bundles(EntityFamily.PRIMARY)
        paragraph_types = self._structure.list_bundles(EntityFamily.COMPONENT)
        references = self._structure.list_reference_fields()
        content_fields = references["content_references"]
        nesting_fields = references["component_references"]

        used_in_nodes: Dict[str, Set[str]] = {}
        used_in_paragraphs: Dict[str, Set[str]] = {}
        labels = {bundle: info.label for bundle, info in paragraph_types.items()}
        for bundle_fields, target in (
            (content_fields, used_in_nodes),
            (nesting_fields, used_in_paragraphs),
        ):
            for parent, fields in bundle_fields.items():
                for descriptor in fields.values():
                    for paragraph_type in descriptor.allowed_target_bundles:
                        target.setdefault(paragraph_type, set()).add(parent)

        # Types referenced by an allow-list but no longer defined still get a row.
        summary_ids = set(labels) | set(used_in_nodes) | set(used_in_paragraphs)
        usage_summary = {
            paragraph_type: {
                "id": paragraph_type,
                "label": labels.get(paragraph_type, paragraph_type),
                "used_in_node_bundles": sorted(used_in_nodes.get(paragraph_type, set())),
                "used_in_paragraph_bundles": sorted(used_in_paragraphs.get(paragraph_type, set())),
            }
            for paragraph_type in sorted(summary_ids)
        }

        return {
            "paragraphs_enabled": bool(paragraph_types),
            "node_bundles": descriptor_to_dict(node_bundles),
            "paragraph_types": descriptor_to_dict(paragraph_types),
            "content_paragraph_fields": _reference_map(content_fields),
            "paragraph_paragraph_fields": _reference_map(nesting_fields),
            "paragraph_usage_summary": usage_summary,
        }

    def build_sections(self, data: ReportData) -> List[TableSection]:
        node_bundles = data.get("node_bundles", {})
        paragraph_types = data.get("paragraph_types", {})
        node_labels = {bundle: info["label"] for bundle, info in node_bundles.items()}
        paragraph_labels = {bundle: info["label"] for bundle, info in paragraph_types.items()}

        field_columns = [
            Column("bundle", "Bundle"),
            Column("field_name", "Field"),
            Column("label", "Label"),
            Column("cardinality", "Cardinality"),
            Column("allowed", "Allowed paragraph types"),
        ]

        usage_rows = []
        for usage in data.get("paragraph_usage_summary", {}).values():
            paragraph = paragraph_types.get(usage["id"])
            usage_rows.append(
                {
                    "id": Link(usage["id"], paragraph["edit_path"]) if paragraph else usage["id"],
                    "label": usage["label"],
                    "used_in_node_bundles": [
                        labelled(bundle, node_labels) for bundle in usage["used_in_node_bundles"]
                    ],
                    "used_in_paragraph_bundles": [
                        labelled(bundle, paragraph_labels)
                        for bundle in usage["used_in_paragraph_bundles"]
                    ],
                }
            )

        return [
            TableSection(
                key="content_fields",
                title="Content types that use paragraphs",
                columns=field_columns,
                rows=_field_rows(data.get("content_paragraph_fields", {}), node_bundles),
                empty="No content types with paragraph reference fields were found.",
                prefix="content_",
            ),
            TableSection(
                key="nesting_fields",
                title="Paragraph types that contain paragraphs",
                columns=field_columns,
                rows=_field_rows(data.get("paragraph_paragraph_fields", {}), paragraph_types),
                empty="No paragraph types with paragraph reference fields (nesting) were found.",
                prefix="nesting_",
            ),
            TableSection(
                key="usage_summary",
                title="Paragraph usage summary",
                columns=[
                    Column("id", "Paragraph type"),
                    Column("label", "Label"),
                    Column("used_in_node_bundles", "Used in content types"),
                    Column("used_in_paragraph_bundles", "Used in paragraph types"),
                ],
                rows=usage_rows,
                empty="No paragraph usage information available.",
                prefix="usage_",
            ),
        ]


def _reference_map(
    references: Mapping[str, Mapping[str, ReferenceFieldDescriptor]],
) -> Dict[str, Dict[str, Dict[str, Any]]]:
    return {
        bundle: {
            name: {
                "field_name": descriptor.field_name,
                "label": descriptor.label,
                "field_type": descriptor.field_type,
                "cardinality": descriptor.cardinality,
                "allowed_paragraph_types": list(descriptor.allowed_target_bundles),
                "edit_path": descriptor.edit_path,
            }
            for name, descriptor in fields.items()
        }
        for bundle, fields in references.items()
    }


def _field_rows(
    fields_by_bundle: Mapping[str, Mapping[str, Mapping[str, Any]]],
    bundles: Mapping[str, Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    labels = {bundle: info["label"] for bundle, info in bundles.items()}
    rows: List[Dict[str, Any]] = []
    for bundle, fields in fields_by_bundle.items():
        bundle_text = labelled(bundle, labels)
        bundle_cell: Any = (
            Link(bundle_text, bundles[bundle]["edit_path"]) if bundle in bundles else bundle_text
        )
        for field in fields.values():
            rows.append(
                {
                    "bundle": bundle_cell,
                    "field_name": Link(field["field_name"], field["edit_path"]),
                    "label": field["label"],
                    "cardinality": field["cardinality"],
                    "allowed": field["allowed_paragraph_types"],
                }
            )
    return rows


__all__ = ["ParagraphDependenciesReport"]
