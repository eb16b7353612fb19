"""HTML rendering of table models through Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .table import ASC, DESC, Link, TableModel, TableSection, apply_sort

_TEMPLATES_DIR = Path(__file__).with_name("templates")


class HtmlRenderer:
    """Renders report pages and the report index."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = [str(templates_dir)] if templates_dir else []
        directories.append(str(_TEMPLATES_DIR))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["cell"] = format_html_cell
        self._env.tests["link"] = lambda value: isinstance(value, Link)

    def render_report(
        self,
        model: TableModel,
        params: Optional[Mapping[str, Any]] = None,
        *,
        links: Optional[Mapping[str, str]] = None,
    ) -> str:
        params = dict(params or {})
        sorted_model = apply_sort(model, params)
        sections = [
            {"section": section, "headers": header_cells(section, params)}
            for section in sorted_model.sections
        ]
        template = self._env.get_template("report.html.j2")
        return template.render(model=sorted_model, sections=sections, links=links or {})

    def render_index(self, reports: Sequence[Mapping[str, Any]]) -> str:
        template = self._env.get_template("index.html.j2")
        return template.render(reports=list(reports))


def header_cells(section: TableSection, params: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Header cells with toggle links for sortable columns."""
    state = section.sort or section.resolve_sort(params)
    cells: List[Dict[str, Any]] = []
    for column in section.columns:
        cell: Dict[str, Any] = {"label": column.label, "numeric": column.numeric, "href": None}
        if column.sortable:
            active = state is not None and state.order == column.key
            direction = DESC if active and state.direction == ASC else ASC
            query = dict(params)
            query[f"{section.prefix}order"] = column.key
            query[f"{section.prefix}sort"] = direction
            cell["href"] = "?" + urlencode(query)
            cell["active"] = active
            cell["direction"] = state.direction if active else None
        cells.append(cell)
    return cells


def format_html_cell(value: Any) -> Any:
    """Plain-text form of non-link cells; links are handled in the template."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return ""
    return value


__all__ = ["HtmlRenderer", "format_html_cell", "header_cells"]
