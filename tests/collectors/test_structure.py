"""Tests for bundle, field and reference-field discovery."""

from __future__ import annotations

from site_audit.collectors import StructureCollector
from site_audit.collectors.structure import interpret_cardinality, resolve_allowed_bundles
from site_audit.models import EntityFamily
from site_audit.repository import SnapshotRepository
from tests._fixtures.site_builder import SiteBuilder


def test_list_bundles_sorted_with_default_paths(sample_repository: SnapshotRepository) -> None:
    structure = StructureCollector(sample_repository)

    bundles = structure.list_bundles(EntityFamily.PRIMARY)
    assert list(bundles) == ["article", "page"]
    page = bundles["page"]
    assert page.label == "Basic page"
    assert page.description == ""
    assert page.edit_path == "/admin/structure/types/manage/page"
    assert page.fields_path == "/admin/structure/types/manage/page/fields"
    assert bundles["article"].description == "Time-sensitive content."

    paragraphs = structure.list_bundles(EntityFamily.COMPONENT)
    assert list(paragraphs) == ["container", "gallery", "hero", "text"]
    assert paragraphs["hero"].edit_path == "/admin/structure/paragraphs_type/hero"


def test_list_bundles_empty_without_paragraphs(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page")
    structure = StructureCollector(site_builder.repository())
    assert structure.list_bundles(EntityFamily.COMPONENT) == {}
    assert structure.list_fields(EntityFamily.COMPONENT) == {}


def test_list_fields_excludes_base_fields_and_sorts(sample_repository: SnapshotRepository) -> None:
    fields = StructureCollector(sample_repository).list_fields(EntityFamily.PRIMARY)

    assert list(fields) == ["article", "page"]
    assert list(fields["page"]) == ["body", "field_sections"]
    assert list(fields["article"]) == ["body", "field_tags"]

    body = fields["page"]["body"]
    assert body.field_type == "text_with_summary"
    assert body.is_reference is False
    assert body.edit_path == "/admin/structure/types/manage/page/fields/node.page.body"

    tags = fields["article"]["field_tags"]
    assert tags.is_reference is True
    assert tags.target_type == "taxonomy_term"
    assert tags.target_bundles == ["tags"]


def test_unrestricted_allow_list_resolves_to_all_component_bundles(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page").paragraph_type("text").paragraph_type("hero")
    site_builder.paragraph_field("node", "page", "field_sections", {})

    references = StructureCollector(site_builder.repository()).list_reference_fields()
    descriptor = references["content_references"]["page"]["field_sections"]
    assert descriptor.allowed_target_bundles == ["hero", "text"]
    assert descriptor.target_family is EntityFamily.COMPONENT
    assert descriptor.cardinality == "unlimited"


def test_unrestricted_allow_list_tracks_new_bundles(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page").paragraph_type("text")
    site_builder.paragraph_field("node", "page", "field_sections")
    structure = StructureCollector(site_builder.repository())
    before = structure.list_reference_fields()["content_references"]["page"]["field_sections"]
    assert before.allowed_target_bundles == ["text"]

    site_builder.paragraph_type("quote")
    after = (
        StructureCollector(site_builder.repository())
        .list_reference_fields()["content_references"]["page"]["field_sections"]
    )
    assert after.allowed_target_bundles == ["quote", "text"]


def test_drag_drop_allow_list_defaults_enabled_and_orders_by_weight(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page")
    for bundle in ("text", "hero", "quote", "video"):
        site_builder.paragraph_type(bundle)
    site_builder.paragraph_field(
        "node",
        "page",
        "field_sections",
        {
            "target_bundles_drag_drop": {
                "text": {"enabled": True, "weight": 3},
                "hero": {"weight": 1},
                "quote": {"enabled": False, "weight": 0},
                "video": {"enabled": "1", "weight": 2},
            }
        },
        cardinality="3",
    )

    descriptor = (
        StructureCollector(site_builder.repository())
        .list_reference_fields()["content_references"]["page"]["field_sections"]
    )
    assert descriptor.allowed_target_bundles == ["hero", "video", "text"]
    assert descriptor.cardinality == "3"


def test_nesting_fields_are_component_references(sample_repository: SnapshotRepository) -> None:
    references = StructureCollector(sample_repository).list_reference_fields()

    assert list(references["content_references"]) == ["page"]
    nested = references["component_references"]["container"]["field_items"]
    assert nested.allowed_target_bundles == ["text", "hero"]
    assert nested.cardinality == "4"


def test_reference_fields_empty_without_paragraphs(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page")
    references = StructureCollector(site_builder.repository()).list_reference_fields()
    assert references == {"content_references": {}, "component_references": {}}


def test_negated_allow_list() -> None:
    settings = {"negate": True, "target_bundles": {"hero": "hero"}}
    assert resolve_allowed_bundles(settings, ["text", "hero", "quote"]) == ["quote", "text"]


def test_malformed_handler_settings_mean_unrestricted() -> None:
    assert resolve_allowed_bundles("broken", ["text", "hero"]) == ["hero", "text"]
    assert resolve_allowed_bundles({"target_bundles": None}, ["b", "a"]) == ["a", "b"]


def test_interpret_cardinality() -> None:
    assert interpret_cardinality(-1) == "unlimited"
    assert interpret_cardinality("-1") == "unlimited"
    assert interpret_cardinality(1) == "1"
    assert interpret_cardinality(5) == "5"
    assert interpret_cardinality(0) == "1"
    assert interpret_cardinality(None) == "1"
    assert interpret_cardinality("many") == "1"
