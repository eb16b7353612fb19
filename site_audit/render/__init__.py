"""Shared render model and its Markdown and HTML renderers."""

from __future__ import annotations

from .html import HtmlRenderer
from .markdown import MarkdownLinter, render_markdown
from .serialize import dump_json
from .table import ASC, DESC, Column, Link, SortState, TableModel, TableSection, apply_sort, sort_rows

__all__ = [
    "ASC",
    "Column",
    "DESC",
    "HtmlRenderer",
    "Link",
    "MarkdownLinter",
    "SortState",
    "TableModel",
    "TableSection",
    "apply_sort",
    "dump_json",
    "render_markdown",
    "sort_rows",
]
