"""Tests for entity counting and bundle usage aggregation."""

from __future__ import annotations

from site_audit.collectors import ContentBundleCollector, ContentCollector
from site_audit.models import UsageStat, UsageSummary
from site_audit.repository import SnapshotRepository
from tests._fixtures.site_builder import SiteBuilder


def _bundle_collector(repository: SnapshotRepository) -> ContentBundleCollector:
    return ContentBundleCollector(repository, ContentCollector(repository))


def test_counts_cover_exactly_the_requested_ids(sample_repository: SnapshotRepository) -> None:
    content = ContentCollector(sample_repository)

    counts = content.node_counts(["page", "article", "landing"])
    assert counts == {"page": 3, "article": 2, "landing": 0}
    assert list(counts) == ["page", "article", "landing"]

    paragraphs = content.paragraph_counts(["hero", "text", "gallery"])
    assert paragraphs == {"hero": 3, "text": 2, "gallery": 0}


def test_paragraph_counts_zero_without_paragraphs(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page")
    content = ContentCollector(site_builder.repository())
    assert content.paragraph_counts(["hero"]) == {"hero": 0}


def test_usage_summary_counts_published(site_builder: SiteBuilder) -> None:
    site_builder.node_type("article")
    for index in range(10):
        site_builder.node("article", status=1 if index < 7 else 0)

    summary = _bundle_collector(site_builder.repository()).usage_summary("article")
    assert summary == UsageSummary(bundle="article", total=10, published=7, unpublished=3)
    assert summary.to_dict() == {"bundle": "article", "total": 10, "published": 7, "unpublished": 3}


def test_usage_summary_clamps_unpublished(sample_repository: SnapshotRepository) -> None:
    class _SkewedContent(ContentCollector):
        def node_counts(self, bundle_ids):
            return {bundle: 1 for bundle in bundle_ids}

    collector = ContentBundleCollector(sample_repository, _SkewedContent(sample_repository))
    summary = collector.usage_summary("page")
    assert summary.total == 1
    assert summary.published == 2
    assert summary.unpublished == 0


def test_usage_empty_without_reference_fields(site_builder: SiteBuilder) -> None:
    site_builder.node_type("article").paragraph_type("hero")
    site_builder.field("node", "article", "body", "text_with_summary")
    site_builder.field("node", "article", "field_tags", "entity_reference", target_type="taxonomy_term")
    site_builder.node("article")

    assert _bundle_collector(site_builder.repository()).component_usage_for_bundle("article") == {}


def test_usage_counts_references_and_distinct_parents(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page").paragraph_type("hero")
    site_builder.paragraph_field("node", "page", "field_sections")
    for _ in range(2):
        site_builder.node(
            "page",
            fields={"field_sections": [site_builder.paragraph("hero"), site_builder.paragraph("hero")]},
        )

    usage = _bundle_collector(site_builder.repository()).component_usage_for_bundle("page")
    assert usage == {
        "hero": UsageStat(bundle_or_type_id="hero", label="Hero", total_count=4, distinct_parent_count=2)
    }


def test_usage_sorted_by_total_desc(sample_repository: SnapshotRepository) -> None:
    usage = _bundle_collector(sample_repository).component_usage_for_bundle("page")

    assert list(usage) == ["hero", "text"]
    assert (usage["hero"].total_count, usage["hero"].distinct_parent_count) == (3, 2)
    assert (usage["text"].total_count, usage["text"].distinct_parent_count) == (2, 2)


def test_usage_ties_keep_discovery_order(site_builder: SiteBuilder) -> None:
    # "alpha" is registered first and sorts first by name; discovery order must still win.
    site_builder.node_type("page").paragraph_type("alpha").paragraph_type("hero")
    site_builder.paragraph_field("node", "page", "field_sections")
    site_builder.node(
        "page",
        fields={"field_sections": [site_builder.paragraph("hero"), site_builder.paragraph("alpha")]},
    )

    usage = _bundle_collector(site_builder.repository()).component_usage_for_bundle("page")
    assert list(usage) == ["hero", "alpha"]
    assert [stat.total_count for stat in usage.values()] == [1, 1]


def test_usage_skips_fields_without_storage(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page").paragraph_type("hero").paragraph_type("text")
    site_builder.paragraph_field("node", "page", "field_sections")
    site_builder.paragraph_field("node", "page", "field_legacy")
    site_builder.missing_table("node__field_legacy")
    site_builder.node(
        "page",
        fields={
            "field_sections": [site_builder.paragraph("text")],
            "field_legacy": [site_builder.paragraph("hero")],
        },
    )

    usage = _bundle_collector(site_builder.repository()).component_usage_for_bundle("page")
    assert list(usage) == ["text"]


def test_usage_ignores_plain_reference_fields(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page").paragraph_type("hero")
    site_builder.paragraph_field("node", "page", "field_linked", field_type="entity_reference")
    site_builder.node("page", fields={"field_linked": [site_builder.paragraph("hero")]})

    assert _bundle_collector(site_builder.repository()).component_usage_for_bundle("page") == {}


def test_usage_label_falls_back_to_type_id(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page").enable_paragraphs()
    site_builder.paragraph_field("node", "page", "field_sections")
    site_builder.node("page", fields={"field_sections": [site_builder.paragraph("orphan")]})

    usage = _bundle_collector(site_builder.repository()).component_usage_for_bundle("page")
    assert usage["orphan"].label == "orphan"


def test_example_parent_ids(sample_repository: SnapshotRepository) -> None:
    collector = _bundle_collector(sample_repository)
    assert collector.example_parent_ids("page", "hero") == [1, 2]
    assert collector.example_parent_ids("page", "hero", limit=1) == [1]
    assert collector.example_parent_ids("page", "gallery") == []
    assert collector.example_parent_ids("page", "hero", limit=0) == []
