"""Views overview report: every view with its complexity score."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..collectors import Collectors, ViewsCollector
from ..collectors.views import TOTAL_KEYS
from ..render import Column, Link, TableSection
from .base import AuditReport, ReportData

_TOTAL_LABELS = {
    "displays": "# displays",
    "fields": "# fields",
    "filters": "# filters",
    "sorts": "# sorts",
    "relationships": "# relationships",
    "contextual_filters": "# contextual filters",
    "exposed_filters": "# exposed filters",
}


class ViewsOverviewReport(AuditReport):
    id = "views_overview"
    label = "Views overview"
    description = "Lists all Views with a rough complexity score and quick links to edit."

    def __init__(self, views: ViewsCollector, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(options)
        self._views = views

    @classmethod
    def create(cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None) -> "ViewsOverviewReport":
        return cls(collectors.views, options)

    def build_data(self) -> ReportData:
        return self._views.views_overview()

    def build_sections(self, data: ReportData) -> List[TableSection]:
        rows = []
        for view_id, info in data.get("views", {}).items():
            totals = info.get("totals", {})
            row = {
                "id": view_id,
                "label": Link(info["label"], info["edit_path"]),
                "status": "Enabled" if info["status"] == "enabled" else "Disabled",
                "base_table": info["base_table"],
                "complexity": int(info.get("complexity", 0)),
            }
            for key in TOTAL_KEYS:
                row[key] = int(totals.get(key, 0))
            rows.append(row)

        columns = [
            Column("id", "Machine name"),
            Column("label", "Label"),
            Column("status", "Status"),
            Column("base_table", "Base table"),
        ]
        columns.extend(Column(key, _TOTAL_LABELS[key], numeric=True) for key in TOTAL_KEYS)
        columns.append(Column("complexity", "Complexity", numeric=True))

        return [
            TableSection(
                key="views",
                title="Views overview and complexity",
                columns=columns,
                rows=rows,
                empty="No Views found on this site.",
                prefix="views_",
            )
        ]


__all__ = ["ViewsOverviewReport"]
