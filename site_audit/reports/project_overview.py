"""Project overview report: core info, modules, languages and config footprint."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..collectors import Collectors, ProjectCollector
from ..render import Column, TableSection
from .base import AuditReport, ReportData
from .utils import key_value_columns, key_value_rows


class ProjectOverviewReport(AuditReport):
    id = "project_overview"
    label = "Project overview"
    description = "Shows high-level Drupal project information and configuration footprint."

    def __init__(self, project: ProjectCollector, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(options)
        self._project = project

    @classmethod
    def create(cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None) -> "ProjectOverviewReport":
        return cls(collectors.project, options)

    def build_data(self) -> ReportData:
        return self._project.project_overview()

    def build_sections(self, data: ReportData) -> List[TableSection]:
        drupal = data.get("drupal", {})
        database = drupal.get("database", {})
        modules = data.get("modules", {})
        content_model = data.get("content_model", {})

        summary_rows = key_value_rows(
            [
                ("Drupal core", drupal.get("core_version", "")),
                ("PHP", drupal.get("php_version", "")),
                ("Site name", drupal.get("site_name", "")),
                ("Site mail", drupal.get("site_mail", "")),
                ("Default theme", drupal.get("default_theme", "")),
                ("Admin theme", drupal.get("admin_theme", "")),
                ("Database driver", database.get("driver", "")),
                ("Database name", database.get("database", "")),
            ]
        )
        module_rows = key_value_rows(
            [
                ("Enabled", modules.get("enabled", 0)),
                ("Disabled", modules.get("disabled", 0)),
                ("Custom enabled", modules.get("custom_enabled", 0)),
                ("Contrib and core enabled", modules.get("contrib_enabled", 0)),
            ]
        )
        module_list_rows = [
            {
                "name": info["name"],
                "status": "Enabled" if info["status"] else "Disabled",
                "type": info["type"],
                "package": info["package"],
                "version": info["version"],
                "relative_path": info["relative_path"],
            }
            for info in modules.get("modules", {}).values()
        ]
        language_rows = [
            {
                "id": info["id"],
                "name": info["name"],
                "default": info["default"],
                "direction": info["direction"],
            }
            for info in data.get("languages", {}).values()
        ]
        collection_rows = [
            {"name": info["name"], "item_count": info["item_count"]}
            for info in data.get("config_collections", {}).values()
        ]
        content_model_rows = key_value_rows(
            [
                ("Content types", content_model.get("content_types", 0)),
                ("Taxonomy vocabularies", content_model.get("taxonomy_vocabularies", 0)),
                ("Media types", content_model.get("media_types", 0)),
                ("Views", content_model.get("views", 0)),
                ("View displays", content_model.get("view_displays", 0)),
            ]
        )

        return [
            TableSection(
                key="summary",
                title="Project summary",
                columns=key_value_columns(),
                rows=summary_rows,
            ),
            TableSection(
                key="modules",
                title="Modules",
                columns=key_value_columns("Metric"),
                rows=module_rows,
            ),
            TableSection(
                key="modules_list",
                title="Modules list (enabled & disabled)",
                columns=[
                    Column("name", "Machine name"),
                    Column("status", "Status"),
                    Column("type", "Type"),
                    Column("package", "Package"),
                    Column("version", "Version"),
                    Column("relative_path", "Path", sortable=False),
                ],
                rows=module_list_rows,
                empty="No modules found.",
                prefix="modules_",
            ),
            TableSection(
                key="languages",
                title="Languages",
                columns=[
                    Column("id", "Code"),
                    Column("name", "Name"),
                    Column("default", "Default"),
                    Column("direction", "Direction"),
                ],
                rows=language_rows,
                empty="No languages configured.",
                prefix="languages_",
            ),
            TableSection(
                key="config_collections",
                title="Configuration collections",
                columns=[
                    Column("name", "Collection"),
                    Column("item_count", "Items", numeric=True),
                ],
                rows=collection_rows,
                empty="No configuration collections found.",
                prefix="config_",
            ),
            TableSection(
                key="content_model",
                title="Content model summary",
                columns=key_value_columns("Metric"),
                rows=content_model_rows,
            ),
        ]


__all__ = ["ProjectOverviewReport"]
