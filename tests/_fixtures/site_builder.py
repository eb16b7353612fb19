"""Helper utilities for constructing site snapshots in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from site_audit.repository import SnapshotRepository


class SiteBuilder:
    """Utility for assembling a snapshot mapping and wrapping it in a repository."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "site"
        self.root.mkdir()
        self.data: Dict[str, Any] = {
            "site": {},
            "bundles": {"node": []},
            "fields": [],
            "entities": {"node": [], "paragraph": []},
        }
        self._next_id: Dict[str, int] = {"node": 1, "paragraph": 1}

    def enable_paragraphs(self) -> "SiteBuilder":
        self.data["bundles"].setdefault("paragraph", [])
        return self

    def node_type(self, bundle: str, label: Optional[str] = None, **extra: Any) -> "SiteBuilder":
        self.data["bundles"]["node"].append({"id": bundle, "label": label or bundle.title(), **extra})
        return self

    def paragraph_type(self, bundle: str, label: Optional[str] = None, **extra: Any) -> "SiteBuilder":
        self.enable_paragraphs()
        self.data["bundles"]["paragraph"].append(
            {"id": bundle, "label": label or bundle.title(), **extra}
        )
        return self

    def field(
        self,
        entity_type: str,
        bundle: str,
        name: str,
        field_type: str = "string",
        **extra: Any,
    ) -> "SiteBuilder":
        record = {
            "entity_type": entity_type,
            "bundle": bundle,
            "name": name,
            "label": extra.pop("label", name.replace("field_", "").title()),
            "type": field_type,
        }
        record.update(extra)
        self.data["fields"].append(record)
        return self

    def paragraph_field(
        self,
        entity_type: str,
        bundle: str,
        name: str,
        handler_settings: Optional[Mapping[str, Any]] = None,
        cardinality: Any = -1,
        field_type: str = "entity_reference_revisions",
    ) -> "SiteBuilder":
        return self.field(
            entity_type,
            bundle,
            name,
            field_type,
            target_type="paragraph",
            handler_settings=dict(handler_settings or {}),
            cardinality=cardinality,
        )

    def paragraph(self, bundle: str) -> int:
        entity_id = self._next_id["paragraph"]
        self._next_id["paragraph"] += 1
        self.data["entities"]["paragraph"].append({"id": entity_id, "bundle": bundle})
        return entity_id

    def node(
        self,
        bundle: str,
        *,
        status: int = 1,
        fields: Optional[Mapping[str, List[Any]]] = None,
    ) -> int:
        entity_id = self._next_id["node"]
        self._next_id["node"] += 1
        self.data["entities"]["node"].append(
            {"id": entity_id, "bundle": bundle, "status": status, "fields": dict(fields or {})}
        )
        return entity_id

    def missing_table(self, table: str) -> "SiteBuilder":
        self.data.setdefault("storage", {}).setdefault("missing_tables", []).append(table)
        return self

    def set(self, key: str, value: Any) -> "SiteBuilder":
        self.data[key] = value
        return self

    def repository(self) -> SnapshotRepository:
        return SnapshotRepository(self.data)

    def write(self, name: str = "snapshot.yml") -> Path:
        """Write the snapshot as YAML (or JSON for ``.json`` names) and return its path."""
        path = self.root / name
        if path.suffix == ".json":
            path.write_text(json.dumps(self.data), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(self.data, sort_keys=False), encoding="utf-8")
        return path


def sample_site(builder: SiteBuilder) -> SiteBuilder:
    """A small site with pages, articles, nested paragraphs, views and modules."""
    (
        builder.node_type("page", "Basic page")
        .node_type("article", "Article", description="Time-sensitive content.")
        .paragraph_type("text", "Text")
        .paragraph_type("hero", "Hero")
        .paragraph_type("gallery", "Gallery")
        .paragraph_type("container", "Container")
        .field("node", "page", "title", label="Title", base_field=True)
        .field("node", "page", "body", "text_with_summary", label="Body")
        .paragraph_field("node", "page", "field_sections")
        .field("node", "article", "field_tags", "entity_reference", label="Tags",
               target_type="taxonomy_term", handler_settings={"target_bundles": {"tags": "tags"}})
        .field("node", "article", "body", "text_with_summary", label="Body")
        .field("paragraph", "text", "field_text", "text_long", label="Text")
        .paragraph_field(
            "paragraph",
            "container",
            "field_items",
            {"target_bundles": {"text": "text", "hero": "hero"}},
            cardinality=4,
        )
    )
    hero_a = builder.paragraph("hero")
    text_a = builder.paragraph("text")
    hero_b = builder.paragraph("hero")
    text_b = builder.paragraph("text")
    hero_c = builder.paragraph("hero")
    builder.node("page", fields={"field_sections": [hero_a, text_a]})
    builder.node("page", fields={"field_sections": [{"target_id": hero_b}, text_b, hero_c]})
    builder.node("page", status=0)
    builder.node("article")
    builder.node("article", status=0)

    builder.set(
        "site",
        {
            "name": "Example",
            "mail": "admin@example.com",
            "core_version": "10.2.4",
            "php_version": "8.2.10",
            "default_theme": "olivero",
            "admin_theme": "gin",
            "database": {"driver": "mysql", "database": "drupal", "version": "8.0.35"},
        },
    )
    builder.set(
        "views",
        [
            {
                "id": "content",
                "label": "Content",
                "status": True,
                "base_table": "node_field_data",
                "display": {
                    "default": {
                        "display_title": "Default",
                        "display_plugin": "default",
                        "display_options": {
                            "fields": {"title": {}, "type": {}},
                            "filters": {
                                "status": {"plugin_id": "boolean", "exposed": True},
                                "type": {"plugin_id": "bundle", "exposed": False},
                            },
                            "sorts": {"changed": {}},
                            "relationships": {"uid": {}},
                        },
                    },
                    "page_1": {"display_title": "Page", "display_plugin": "page"},
                },
            },
            {"id": "archive", "label": "Archive", "status": False, "base_table": "node_field_data"},
        ],
    )
    builder.set(
        "extensions",
        [
            {"name": "node", "type": "module", "status": True, "path": "core/modules/node"},
            {"name": "pathauto", "type": "module", "status": True,
             "path": "modules/contrib/pathauto", "version": "8.x-1.12"},
            {"name": "my_module", "type": "module", "status": True, "path": "modules/custom/my_module"},
            {"name": "token", "type": "module", "status": False, "path": "modules/contrib/token"},
            {"name": "gin", "type": "theme", "status": True, "path": "themes/contrib/gin", "version": "3.0.0"},
        ],
    )
    builder.set(
        "languages",
        [
            {"id": "en", "name": "English", "default": True},
            {"id": "ar", "name": "Arabic", "direction": "rtl", "weight": 1},
        ],
    )
    builder.set("config", {"base": 312, "collections": {"language.ar": 17}})
    builder.set(
        "config_entities",
        {"taxonomy_vocabulary": [{"id": "tags"}], "media_type": [{"id": "image"}, {"id": "document"}]},
    )
    return builder


__all__ = ["SiteBuilder", "sample_site"]
