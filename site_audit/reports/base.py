"""Base classes for audit report plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from ..collectors import Collectors
from ..models import ReportDescriptor
from ..render import TableModel, TableSection, apply_sort, render_markdown

ReportData = Dict[str, Any]


class AuditReport(ABC):
    """Contract shared by every report: build data once, render it three ways.

    Subclasses declare their static metadata as class attributes, take the
    collectors they need in ``__init__`` and implement ``create`` to pick those
    collectors out of the shared set.
    """

    id: str = ""
    label: str = ""
    description: str = ""
    enabled: bool = True

    def __init__(self, options: Optional[Mapping[str, Any]] = None) -> None:
        self.options: Dict[str, Any] = dict(options or {})

    @classmethod
    @abstractmethod
    def create(
        cls, collectors: Collectors, options: Optional[Mapping[str, Any]] = None
    ) -> "AuditReport":
        """Instantiate the report from the shared collector set."""

    @classmethod
    def descriptor(cls) -> ReportDescriptor:
        return ReportDescriptor(
            id=cls.id,
            label=cls.label,
            description=cls.description,
            enabled=cls.enabled,
        )

    @abstractmethod
    def build_data(self) -> ReportData:
        """Return JSON-serialisable data describing the current repository state."""

    @abstractmethod
    def build_sections(self, data: ReportData) -> List[TableSection]:
        """Translate report data into unsorted table sections."""

    def render_table(self, data: ReportData, sort: Optional[Mapping[str, Any]] = None) -> TableModel:
        return apply_sort(self._model(data), sort)

    def render_markdown(self, data: ReportData, sort: Optional[Mapping[str, Any]] = None) -> str:
        return render_markdown(self._model(data), sort)

    def render_json(self, data: ReportData) -> ReportData:
        return data

    def _model(self, data: ReportData) -> TableModel:
        return TableModel(
            report_id=self.id,
            label=self.label,
            description=self.description,
            sections=self.build_sections(data),
        )


__all__ = ["AuditReport", "ReportData"]
