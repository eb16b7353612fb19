"""Table render model shared by every report, with sort-state resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class Link:
    """A cell that points to an admin page."""

    text: str
    href: str


@dataclass
class Column:
    key: str
    label: str
    sortable: bool = True
    numeric: bool = False


@dataclass
class SortState:
    order: str
    direction: str = ASC

    @property
    def descending(self) -> bool:
        return self.direction == DESC


@dataclass
class TableSection:
    """One titled table inside a report.

    ``prefix`` namespaces the sort parameters (``{prefix}order`` and
    ``{prefix}sort``) so several sections on one page sort independently.
    ``default_order`` and ``default_direction`` apply when the caller passes
    nothing usable; without them the first sortable column ascending is used.
    """

    key: str
    title: str
    columns: List[Column]
    rows: List[Dict[str, Any]] = field(default_factory=list)
    empty: str = ""
    prefix: str = ""
    default_order: Optional[str] = None
    default_direction: str = ASC
    description: str = ""
    sort: Optional[SortState] = None

    @property
    def sortable_keys(self) -> List[str]:
        return [column.key for column in self.columns if column.sortable]

    def resolve_sort(self, params: Optional[Mapping[str, Any]] = None) -> Optional[SortState]:
        """Return the sort state requested by ``params``, restricted to sortable keys."""
        keys = self.sortable_keys
        if not keys:
            return None

        params = params or {}
        default_order = self.default_order if self.default_order in keys else keys[0]
        requested_order = params.get(f"{self.prefix}order")
        if requested_order in keys:
            order = str(requested_order)
            default_direction = ASC
        else:
            order = default_order
            default_direction = self.default_direction if order == default_order else ASC

        requested_direction = str(params.get(f"{self.prefix}sort") or "").lower()
        direction = requested_direction if requested_direction in (ASC, DESC) else default_direction
        return SortState(order=order, direction=direction)

    def sorted(self, params: Optional[Mapping[str, Any]] = None) -> "TableSection":
        """Return a copy with rows stably sorted according to ``params``."""
        state = self.resolve_sort(params)
        rows = list(self.rows)
        if state is not None:
            rows = sort_rows(rows, state.order, descending=state.descending)
        return TableSection(
            key=self.key,
            title=self.title,
            columns=self.columns,
            rows=rows,
            empty=self.empty,
            prefix=self.prefix,
            default_order=self.default_order,
            default_direction=self.default_direction,
            description=self.description,
            sort=state,
        )


@dataclass
class TableModel:
    """Ordered sections of one rendered report."""

    report_id: str
    label: str
    description: str = ""
    sections: List[TableSection] = field(default_factory=list)

    def section(self, key: str) -> TableSection:
        for section in self.sections:
            if section.key == key:
                return section
        raise KeyError(key)


def sort_key(value: Any) -> Tuple[int, Any]:
    """Comparable key for a cell value: numbers before text, links by their text."""
    if isinstance(value, Link):
        value = value.text
    if isinstance(value, (list, tuple, set)):
        return (0, len(value))
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    if value is None:
        return (1, "")
    return (1, str(value).lower())


def sort_rows(rows: Sequence[Mapping[str, Any]], order: str, *, descending: bool = False) -> List[Any]:
    """Stable sort in either direction; equal keys keep their input order."""
    return sorted(rows, key=lambda row: sort_key(row.get(order)), reverse=descending)


def apply_sort(model: TableModel, params: Optional[Mapping[str, Any]] = None) -> TableModel:
    """Return a copy of ``model`` with every section sorted from ``params``."""
    return TableModel(
        report_id=model.report_id,
        label=model.label,
        description=model.description,
        sections=[section.sorted(params) for section in model.sections],
    )


__all__ = [
    "ASC",
    "Column",
    "DESC",
    "Link",
    "SortState",
    "TableModel",
    "TableSection",
    "apply_sort",
    "sort_key",
    "sort_rows",
]
