"""Environment overview report: runtime, languages and key extensions."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..collectors import Collectors, ProjectCollector
from ..render import Column, TableSection
from .base import AuditReport, ReportData
from .utils import key_value_columns, key_value_rows


class EnvironmentOverviewReport(AuditReport):
    id = "environment_overview"
    label = "Environment overview"
    description = "Summaries of core, PHP, database, languages, and key contrib extensions."

    def __init__(self, project: ProjectCollector, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(options)
        self._project = project

    @classmethod
    def create(
        cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None
    ) -> "EnvironmentOverviewReport":
        return cls(collectors.project, options)

    def build_data(self) -> ReportData:
        return self._project.environment()

    def build_sections(self, data: ReportData) -> List[TableSection]:
        database = data.get("database", {})
        languages = data.get("languages", {})
        default_language = languages.get("default") or {}
        counts = data.get("modules", {}).get("counts", {})

        runtime_rows = key_value_rows(
            [
                ("Drupal core", data.get("drupal", {}).get("version", "")),
                ("PHP", data.get("php", {}).get("version", "")),
                ("Database driver", database.get("driver", "")),
                ("Database version", database.get("version") or "Unknown"),
            ]
        )
        language_rows = [
            {
                "id": langcode,
                "name": info.get("name", ""),
                "direction": info.get("direction", ""),
                "default": langcode == default_language.get("id"),
            }
            for langcode, info in languages.get("all", {}).items()
        ]
        count_rows = key_value_rows(
            [
                ("Enabled", counts.get("enabled", 0)),
                ("Disabled", counts.get("disabled", 0)),
                ("Total detected", counts.get("total", 0)),
            ]
        )
        extension_rows = []
        for machine_name, info in data.get("modules", {}).get("key_extensions", {}).items():
            status = "Not installed"
            if info.get("present"):
                status = "Enabled" if info.get("enabled") else "Disabled"
            extension_rows.append(
                {
                    "machine_name": machine_name,
                    "label": info.get("label", machine_name),
                    "type": info.get("type", "module"),
                    "status": status,
                    "version": info.get("version") or "",
                }
            )

        return [
            TableSection(key="runtime", title="Runtime", columns=key_value_columns(), rows=runtime_rows),
            TableSection(
                key="languages",
                title="Languages",
                columns=[
                    Column("id", "Code", sortable=False),
                    Column("name", "Label", sortable=False),
                    Column("direction", "Direction", sortable=False),
                    Column("default", "Default", sortable=False),
                ],
                rows=language_rows,
                empty="No languages configured.",
            ),
            TableSection(
                key="modules",
                title="Modules",
                columns=key_value_columns("Metric"),
                rows=count_rows,
            ),
            TableSection(
                key="key_extensions",
                title="Key contrib extensions",
                columns=[
                    Column("machine_name", "Machine name", sortable=False),
                    Column("label", "Label", sortable=False),
                    Column("type", "Type", sortable=False),
                    Column("status", "Status", sortable=False),
                    Column("version", "Version", sortable=False),
                ],
                rows=extension_rows,
            ),
        ]


__all__ = ["EnvironmentOverviewReport"]
