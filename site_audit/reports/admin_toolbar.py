"""Admin toolbar report: toolbar and navigation modules, admin themes and Gin settings."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..collectors import Collectors, ProjectCollector
from ..render import Column, TableSection
from .base import AuditReport, ReportData
from .utils import key_value_columns, key_value_rows

NO_CONFLICTS = (
    "No obvious toolbar/navigation configuration conflicts were detected. If first-level "
    "admin menu items are still not clickable, check the browser console for JavaScript "
    "errors and test with a different admin theme (e.g. Claro or Seven)."
)


def toolbar_diagnostics(data: Mapping[str, Any]) -> List[str]:
    """Hints about module and theme combinations known to change admin menu behaviour.

    Always returns at least one message; when no rule matches the list holds
    the "no conflicts" hint.
    """
    modules = data.get("modules", {})

    def enabled(name: str) -> bool:
        return bool(modules.get(name, {}).get("enabled"))

    admin_theme = data.get("admin_theme")
    gin_admin = admin_theme == "gin"
    gin_enabled = bool(data.get("gin_enabled"))

    messages: List[str] = []
    if enabled("navigation") and enabled("toolbar"):
        messages.append(
            "Both the core Toolbar module and the Navigation module are enabled. "
            "This combination may change how the admin menu behaves."
        )
    if enabled("admin_toolbar") and not enabled("toolbar"):
        messages.append(
            "Admin Toolbar is enabled but the core Toolbar module is disabled. "
            "Admin Toolbar usually requires Toolbar."
        )
    if gin_admin and not gin_enabled:
        messages.append(
            "The admin theme is set to Gin, but Gin is not reported as enabled. "
            "Check your configuration."
        )
    if gin_admin and enabled("admin_toolbar") and enabled("gin_toolbar"):
        messages.append(
            "Gin is used as admin theme together with Admin Toolbar and Gin Toolbar. "
            "This is a valid combination, but if first-level menu clicks are not working, "
            "test with Claro or Seven to isolate the issue."
        )
    if gin_admin and data.get("gin_settings"):
        messages.append(
            "Gin is the admin theme and custom Gin toolbar/navigation settings are present. "
            "If you have click issues, try temporarily switching to Claro or Seven and "
            "disabling Gin enhancements."
        )
    if not gin_admin and gin_enabled:
        messages.append(
            "Gin is enabled but not set as admin theme. Verify whether this is intentional."
        )
    return messages or [NO_CONFLICTS]


class AdminToolbarReport(AuditReport):
    id = "admin_toolbar_overview"
    label = "Admin toolbar & navigation overview"
    description = (
        "Toolbar and navigation modules and admin themes that may affect "
        "first-level admin menu click behaviour."
    )

    def __init__(self, project: ProjectCollector, options: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(options)
        self._project = project

    @classmethod
    def create(
        cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None
    ) -> "AdminToolbarReport":
        return cls(collectors.project, options)

    def build_data(self) -> ReportData:
        info = self._project.admin_toolbar()
        return {
            "summary": {
                "admin_theme": info["admin_theme"],
                "default_theme": info["default_theme"],
            },
            "modules": info["modules"],
            "themes": info["themes"],
            "gin_settings": info["gin_settings"],
            "diagnostics": toolbar_diagnostics(info),
        }

    def build_sections(self, data: ReportData) -> List[TableSection]:
        summary = data.get("summary", {})
        module_rows = []
        for name, info in data.get("modules", {}).items():
            status = "Not installed"
            if info.get("present"):
                status = "Enabled" if info.get("enabled") else "Disabled"
            module_rows.append({"name": name, "status": status, "version": info.get("version") or ""})

        theme_rows = [
            {
                "name": name,
                "admin": info.get("is_admin_theme", False),
                "default": info.get("is_default_theme", False),
                "candidate": info.get("is_admin_candidate", False),
            }
            for name, info in data.get("themes", {}).items()
        ]

        return [
            TableSection(
                key="summary",
                title="Themes in use",
                columns=key_value_columns("Setting"),
                rows=key_value_rows(
                    [
                        ("Admin theme", summary.get("admin_theme") or "Not set"),
                        ("Default theme", summary.get("default_theme") or "Not set"),
                    ]
                ),
            ),
            TableSection(
                key="modules",
                title="Toolbar and navigation modules",
                columns=[
                    Column("name", "Module"),
                    Column("status", "Status"),
                    Column("version", "Version", sortable=False),
                ],
                rows=module_rows,
                prefix="modules_",
            ),
            TableSection(
                key="themes",
                title="Installed themes",
                columns=[
                    Column("name", "Theme"),
                    Column("admin", "Admin theme", sortable=False),
                    Column("default", "Default theme", sortable=False),
                    Column("candidate", "Admin candidate", sortable=False),
                ],
                rows=theme_rows,
                empty="No installed themes.",
                prefix="themes_",
            ),
            TableSection(
                key="gin_settings",
                title="Gin settings",
                columns=key_value_columns("Setting"),
                rows=key_value_rows(data.get("gin_settings", {}).items()),
                empty="No Gin settings recorded.",
            ),
            TableSection(
                key="diagnostics",
                title="Diagnostics",
                columns=[Column("message", "Message", sortable=False)],
                rows=[{"message": message} for message in data.get("diagnostics", [])],
            ),
        ]


__all__ = ["AdminToolbarReport", "toolbar_diagnostics"]
