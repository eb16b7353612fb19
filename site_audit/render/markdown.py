"""Markdown rendering of table models (GitHub-flavored tables)."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from .table import Column, Link, TableModel, TableSection, apply_sort


class MarkdownLinter:
    """Normalizes blank lines around headings and trims trailing whitespace."""

    def lint(self, markdown: str) -> str:
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        cleaned: List[str] = []
        previous_blank = False
        after_heading = False

        for line in normalized.split("\n"):
            stripped = line.rstrip()
            if not stripped:
                if previous_blank or not cleaned:
                    continue
                previous_blank = True
                after_heading = False
                cleaned.append("")
                continue

            is_heading = stripped.startswith("#")
            if cleaned and cleaned[-1] != "" and (is_heading or after_heading):
                cleaned.append("")
            cleaned.append(stripped)
            previous_blank = False
            after_heading = is_heading

        while cleaned and cleaned[-1] == "":
            cleaned.pop()

        return "\n".join(cleaned) + "\n"


def format_cell(value: Any) -> str:
    """Render one cell value as table-safe Markdown."""
    if isinstance(value, Link):
        return f"[{escape_cell(value.text)}]({value.href})"
    if isinstance(value, (list, tuple)):
        return "<br>".join(format_cell(item) for item in value)
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return ""
    return escape_cell(str(value))


def escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\r\n", " ").replace("\n", " ")


def render_section(section: TableSection, *, level: int = 2) -> List[str]:
    lines = [f"{'#' * level} {section.title}", ""]
    if section.description:
        lines.extend([section.description, ""])
    if not section.rows:
        lines.extend([f"_{section.empty}_" if section.empty else "", ""])
        return lines

    lines.append(_row([escape_cell(column.label) for column in section.columns]))
    lines.append(_row([_separator(column) for column in section.columns]))
    for row in section.rows:
        lines.append(_row([format_cell(row.get(column.key)) for column in section.columns]))
    lines.append("")
    return lines


def render_markdown(
    model: TableModel,
    params: Optional[Mapping[str, Any]] = None,
    *,
    linter: Optional[MarkdownLinter] = None,
) -> str:
    """Render a whole report: title, description and one table per section."""
    sorted_model = apply_sort(model, params)
    lines = [f"# {sorted_model.label}", ""]
    if sorted_model.description:
        lines.extend([sorted_model.description, ""])
    for section in sorted_model.sections:
        lines.extend(render_section(section))
    return (linter or MarkdownLinter()).lint("\n".join(lines))


def _row(cells: List[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _separator(column: Column) -> str:
    return "---:" if column.numeric else "---"


__all__ = ["MarkdownLinter", "escape_cell", "format_cell", "render_markdown", "render_section"]
