"""Behaviour tests for the built-in audit reports."""

from __future__ import annotations

import json

import pytest

from site_audit.render import dump_json
from site_audit.reports import ReportRegistry
from site_audit.repository import SnapshotRepository
from tests._fixtures.site_builder import SiteBuilder

ALL_REPORTS = [
    "admin_toolbar_overview",
    "bundle_deep_analysis",
    "content_overview",
    "content_volume",
    "environment_overview",
    "field_overview",
    "paragraph_dependencies",
    "paragraph_overview",
    "paragraph_reference_fields",
    "project_overview",
    "selected_bundles_paragraph_usage",
    "views_overview",
]


def _report(repository: SnapshotRepository, report_id: str, options=None):
    registry = ReportRegistry.from_repository(repository, load_entry_points=False)
    return registry.instantiate(report_id, options)


@pytest.mark.parametrize("report_id", ALL_REPORTS)
def test_build_data_is_idempotent_and_renders(sample_repository: SnapshotRepository, report_id: str) -> None:
    report = _report(sample_repository, report_id)
    first = report.build_data()
    second = report.build_data()
    assert first == second

    json.loads(dump_json(report.render_json(first)))
    markdown = report.render_markdown(first)
    assert markdown.startswith(f"# {report.label}\n")
    model = report.render_table(first)
    assert model.report_id == report_id
    assert model.sections


@pytest.mark.parametrize("report_id", ALL_REPORTS)
def test_reports_render_on_an_empty_site(site_builder: SiteBuilder, report_id: str) -> None:
    report = _report(site_builder.repository(), report_id)
    data = report.build_data()
    markdown = report.render_markdown(data)
    assert markdown.endswith("\n")
    for section in report.render_table(data).sections:
        assert section.rows or section.empty or section.columns


def test_content_volume(sample_repository: SnapshotRepository) -> None:
    report = _report(sample_repository, "content_volume")
    data = report.build_data()

    assert data["nodes"]["page"]["count"] == 3
    assert data["nodes"]["page"]["list_path"] == "/admin/content?type=page"
    assert data["paragraphs"]["hero"]["count"] == 3
    assert data["paragraphs"]["gallery"]["count"] == 0

    nodes = report.render_table(data, {"nodes_order": "count", "nodes_sort": "desc"}).section("nodes")
    assert [row["machine_name"] for row in nodes.rows] == ["page", "article"]


def test_content_volume_empty_placeholders(site_builder: SiteBuilder) -> None:
    report = _report(site_builder.repository(), "content_volume")
    markdown = report.render_markdown(report.build_data())
    assert "_No content types found._" in markdown
    assert "_No paragraph types found._" in markdown


def test_content_overview_lists_fields(sample_repository: SnapshotRepository) -> None:
    data = _report(sample_repository, "content_overview").build_data()
    article = data["nodes"]["article"]
    assert article["fields_count"] == 2
    assert article["reference_fields_count"] == 1
    assert article["reference_fields"]["field_tags"]["target_bundles"] == ["tags"]


def test_paragraph_reference_fields_only_lists_bundles_with_references(
    sample_repository: SnapshotRepository,
) -> None:
    data = _report(sample_repository, "paragraph_reference_fields").build_data()
    assert list(data["paragraphs"]) == ["container"]
    assert data["paragraphs"]["container"]["reference_fields_count"] == 1


def test_paragraph_dependencies(sample_repository: SnapshotRepository) -> None:
    data = _report(sample_repository, "paragraph_dependencies").build_data()

    assert data["paragraphs_enabled"] is True
    sections = data["content_paragraph_fields"]["page"]["field_sections"]
    assert sections["allowed_paragraph_types"] == ["container", "gallery", "hero", "text"]
    assert sections["cardinality"] == "unlimited"

    summary = data["paragraph_usage_summary"]
    assert summary["hero"]["used_in_node_bundles"] == ["page"]
    assert summary["hero"]["used_in_paragraph_bundles"] == ["container"]
    assert summary["gallery"]["used_in_paragraph_bundles"] == []


def test_paragraph_dependencies_without_paragraphs(site_builder: SiteBuilder) -> None:
    site_builder.node_type("page")
    data = _report(site_builder.repository(), "paragraph_dependencies").build_data()
    assert data["paragraphs_enabled"] is False
    assert data["content_paragraph_fields"] == {}
    assert data["paragraph_usage_summary"] == {}


def test_selected_bundles_defaults_to_all_node_bundles(sample_repository: SnapshotRepository) -> None:
    data = _report(sample_repository, "selected_bundles_paragraph_usage").build_data()

    assert list(data["bundles"]) == ["article", "page"]
    assert data["bundles"]["page"]["node_summary"] == {
        "bundle": "page",
        "total": 3,
        "published": 2,
        "unpublished": 1,
    }
    aggregated = data["paragraph_usage_aggregated"]
    assert list(aggregated) == ["hero", "text"]
    assert aggregated["hero"]["total_paragraphs"] == 3
    assert aggregated["hero"]["bundles"] == ["page"]
    assert list(data["unused_paragraphs"]) == ["container", "gallery"]


def test_selected_bundles_reports_missing_bundles(sample_repository: SnapshotRepository) -> None:
    data = _report(
        sample_repository,
        "selected_bundles_paragraph_usage",
        {"selected_bundles": {"page": "Page", "landing": "Landing"}},
    ).build_data()

    assert data["bundles"]["landing"]["exists"] is False
    assert data["bundles"]["landing"]["node_summary"] is None
    assert data["bundles"]["page"]["exists"] is True


def test_selected_bundles_accepts_comma_separated_option(sample_repository: SnapshotRepository) -> None:
    data = _report(
        sample_repository, "selected_bundles_paragraph_usage", {"selected_bundles": "article, page"}
    ).build_data()
    assert sorted(data["bundles"]) == ["article", "page"]


def test_selected_bundles_default_sorts(sample_repository: SnapshotRepository) -> None:
    report = _report(sample_repository, "selected_bundles_paragraph_usage")
    model = report.render_table(report.build_data())

    paragraphs = model.section("paragraphs")
    assert (paragraphs.sort.order, paragraphs.sort.direction) == ("total_paragraphs", "desc")
    assert [row["total_paragraphs"] for row in paragraphs.rows] == [3, 2]


def test_views_overview(sample_repository: SnapshotRepository) -> None:
    report = _report(sample_repository, "views_overview")
    data = report.build_data()
    assert data["views"]["content"]["complexity"] == 10

    views = report.render_table(data, {"views_order": "complexity", "views_sort": "desc"}).section("views")
    assert [row["id"] for row in views.rows] == ["content", "archive"]


def test_project_overview_sections(sample_repository: SnapshotRepository) -> None:
    report = _report(sample_repository, "project_overview")
    model = report.render_table(report.build_data())
    assert [section.key for section in model.sections] == [
        "summary",
        "modules",
        "modules_list",
        "languages",
        "config_collections",
        "content_model",
    ]
    assert [row["name"] for row in model.section("modules_list").rows] == [
        "my_module",
        "node",
        "pathauto",
        "token",
    ]


def test_environment_overview_markdown(sample_repository: SnapshotRepository) -> None:
    report = _report(sample_repository, "environment_overview")
    markdown = report.render_markdown(report.build_data())
    assert "| Drupal core | 10.2.4 |" in markdown
    assert "| gin | Gin | theme | Enabled | 3.0.0 |" in markdown
    assert "| admin_toolbar | Admin Toolbar | module | Not installed |  |" in markdown


def test_admin_toolbar_overview_on_sample_site(sample_repository: SnapshotRepository) -> None:
    report = _report(sample_repository, "admin_toolbar_overview")
    data = report.build_data()

    assert data["summary"] == {"admin_theme": "gin", "default_theme": "olivero"}
    assert list(data["modules"]) == [
        "toolbar",
        "navigation",
        "admin_toolbar",
        "admin_toolbar_tools",
        "admin_toolbar_links_access_filter",
        "gin_toolbar",
    ]
    assert not any(info["present"] for info in data["modules"].values())
    assert data["themes"] == {
        "gin": {
            "is_admin_theme": True,
            "is_default_theme": False,
            "is_admin_candidate": True,
            "version": "3.0.0",
        }
    }
    assert data["gin_settings"] == {}
    assert len(data["diagnostics"]) == 1
    assert data["diagnostics"][0].startswith("No obvious toolbar/navigation configuration conflicts")

    model = report.render_table(data)
    assert [section.key for section in model.sections] == [
        "summary",
        "modules",
        "themes",
        "gin_settings",
        "diagnostics",
    ]
    assert model.section("modules").rows[0] == {
        "name": "admin_toolbar",
        "status": "Not installed",
        "version": "",
    }


def _toolbar_site(site_builder: SiteBuilder, admin_theme: str, extensions, gin_settings=None) -> SnapshotRepository:
    site = {"default_theme": "olivero", "admin_theme": admin_theme}
    if gin_settings is not None:
        site["gin_settings"] = gin_settings
    site_builder.set("site", site)
    site_builder.set(
        "extensions",
        [
            {"name": name, "type": kind, "status": status, "version": version}
            for name, kind, status, version in extensions
        ],
    )
    return site_builder.repository()


def test_admin_toolbar_overview_flags_gin_combinations(site_builder: SiteBuilder) -> None:
    repository = _toolbar_site(
        site_builder,
        "gin",
        [
            ("toolbar", "module", True, None),
            ("navigation", "module", True, None),
            ("admin_toolbar", "module", True, "3.4.2"),
            ("admin_toolbar_search", "module", False, "3.4.2"),
            ("gin_toolbar", "module", True, "1.0.0"),
            ("gin", "theme", True, "3.0.0"),
            ("claro", "theme", True, None),
            ("olivero", "theme", True, None),
            ("seven", "theme", False, None),
        ],
        gin_settings={"toolbar_variant": "classic", "show_user_toolbar": True, "logo": "x.svg"},
    )
    report = _report(repository, "admin_toolbar_overview")
    data = report.build_data()

    assert list(data["modules"])[-1] == "admin_toolbar_search"
    assert data["modules"]["admin_toolbar"] == {"present": True, "enabled": True, "version": "3.4.2"}
    assert data["modules"]["admin_toolbar_search"]["enabled"] is False
    assert list(data["themes"]) == ["gin", "claro", "olivero"]
    assert data["themes"]["claro"]["is_admin_candidate"] is True
    assert data["themes"]["olivero"]["is_default_theme"] is True
    assert data["themes"]["olivero"]["is_admin_candidate"] is False
    assert data["gin_settings"] == {"toolbar_variant": "classic", "show_user_toolbar": True}

    diagnostics = data["diagnostics"]
    assert len(diagnostics) == 3
    assert diagnostics[0].startswith("Both the core Toolbar module and the Navigation module")
    assert diagnostics[1].startswith("Gin is used as admin theme together with Admin Toolbar")
    assert diagnostics[2].startswith("Gin is the admin theme and custom Gin toolbar/navigation settings")

    markdown = report.render_markdown(data)
    assert "| toolbar_variant | classic |" in markdown


def test_admin_toolbar_overview_flags_missing_dependencies(site_builder: SiteBuilder) -> None:
    repository = _toolbar_site(
        site_builder,
        "claro",
        [
            ("toolbar", "module", False, None),
            ("admin_toolbar", "module", True, None),
            ("gin", "theme", True, None),
            ("claro", "theme", True, None),
        ],
    )
    diagnostics = _report(repository, "admin_toolbar_overview").build_data()["diagnostics"]
    assert [message.split(".")[0] for message in diagnostics] == [
        "Admin Toolbar is enabled but the core Toolbar module is disabled",
        "Gin is enabled but not set as admin theme",
    ]


def test_admin_toolbar_overview_ignores_gin_settings_without_gin(site_builder: SiteBuilder) -> None:
    repository = _toolbar_site(
        site_builder,
        "gin",
        [("claro", "theme", True, None)],
        gin_settings={"navigation": True},
    )
    data = _report(repository, "admin_toolbar_overview").build_data()
    assert data["gin_settings"] == {}
    assert data["diagnostics"][0].startswith("The admin theme is set to Gin, but Gin is not reported as enabled")
    assert len(data["diagnostics"]) == 1


def test_field_overview(sample_repository: SnapshotRepository) -> None:
    data = _report(sample_repository, "field_overview").build_data()
    assert list(data["node_fields"]["page"]) == ["body", "field_sections"]
    assert list(data["paragraph_fields"]) == ["container", "text"]


def test_bundle_deep_analysis(sample_repository: SnapshotRepository) -> None:
    report = _report(sample_repository, "bundle_deep_analysis", {"bundle": "page"})
    data = report.build_data()

    assert data["node_summary"]["total"] == 3
    assert data["paragraph_usage"]["hero"]["example_parent_ids"] == [1, 2]
    assert list(data["config_summary"]["paragraph_fields"]) == ["field_sections"]

    usage = report.render_table(data).section("paragraph_usage")
    assert [row["paragraph_type"] for row in usage.rows] == ["hero", "text"]


def test_bundle_deep_analysis_falls_back_to_first_bundle(sample_repository: SnapshotRepository) -> None:
    data = _report(sample_repository, "bundle_deep_analysis", {"bundle": "missing"}).build_data()
    assert data["selected_bundle"] == "article"
    assert data["paragraph_usage"] == {}
