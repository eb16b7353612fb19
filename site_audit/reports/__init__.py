"""Report plugin registry and built-in audit reports."""

from __future__ import annotations

from dataclasses import dataclass, replace
from importlib import metadata
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

from ..collectors import Collectors
from ..config import SiteAuditConfig
from ..logging import get_logger
from ..models import ReportDescriptor
from ..repository import ContentRepository, RepositoryUnavailableError, load_snapshot
from .admin_toolbar import AdminToolbarReport
from .base import AuditReport, ReportData
from .bundle_deep_analysis import BundleDeepAnalysisReport
from .content_overview import ContentOverviewReport
from .content_volume import ContentVolumeReport
from .environment_overview import EnvironmentOverviewReport
from .field_overview import FieldOverviewReport
from .paragraph_dependencies import ParagraphDependenciesReport
from .paragraph_overview import ParagraphOverviewReport
from .paragraph_reference_fields import ParagraphReferenceFieldsReport
from .project_overview import ProjectOverviewReport
from .selected_bundles import SelectedBundlesParagraphUsageReport
from .views_overview import ViewsOverviewReport

_ENTRY_POINT_GROUP = "site_audit.reports"

ReportFactory = Callable[[Collectors, Optional[Mapping[str, Any]]], AuditReport]

_BUILTIN_REPORTS: List[Type[AuditReport]] = [
    ContentVolumeReport,
    ContentOverviewReport,
    ParagraphOverviewReport,
    ParagraphReferenceFieldsReport,
    ParagraphDependenciesReport,
    SelectedBundlesParagraphUsageReport,
    ViewsOverviewReport,
    ProjectOverviewReport,
    EnvironmentOverviewReport,
    AdminToolbarReport,
    FieldOverviewReport,
    BundleDeepAnalysisReport,
]

_logger = get_logger("reports")


class ReportNotFoundError(LookupError):
    """Raised when a report id is unknown (or disabled, for enabled-only lookups)."""

    def __init__(self, report_id: str) -> None:
        super().__init__(f"Unknown report: {report_id}")
        self.report_id = report_id


@dataclass
class ReportDefinition:
    descriptor: ReportDescriptor
    factory: ReportFactory

    @classmethod
    def from_class(cls, report_class: Type[AuditReport]) -> "ReportDefinition":
        return cls(descriptor=report_class.descriptor(), factory=report_class.create)


def builtin_definitions() -> List[ReportDefinition]:
    return [ReportDefinition.from_class(report_class) for report_class in _BUILTIN_REPORTS]


class ReportRegistry:
    """Static registration table of report definitions.

    ``overrides`` force reports on or off by id; ``options`` hold per-report
    options handed to the factory on instantiation. Lookups never mutate the
    table, so repeated discovery returns equal results.
    """

    def __init__(
        self,
        collectors: Collectors,
        definitions: Optional[Iterable[ReportDefinition]] = None,
        *,
        overrides: Optional[Mapping[str, bool]] = None,
        options: Optional[Mapping[str, Mapping[str, Any]]] = None,
        load_entry_points: bool = True,
    ) -> None:
        self._collectors = collectors
        self._definitions: Dict[str, ReportDefinition] = {}
        self._overrides = dict(overrides or {})
        self._options = {key: dict(value) for key, value in (options or {}).items()}

        for definition in definitions if definitions is not None else builtin_definitions():
            self.register(definition)
        if load_entry_points:
            for definition in _entry_point_definitions():
                if definition.descriptor.id in self._definitions:
                    _logger.warning(
                        "Ignoring report entry point '%s': id already registered",
                        definition.descriptor.id,
                    )
                    continue
                self.register(definition)

    @classmethod
    def from_repository(
        cls,
        repository: ContentRepository,
        **kwargs: Any,
    ) -> "ReportRegistry":
        return cls(Collectors.from_repository(repository), **kwargs)

    def register(self, definition: ReportDefinition) -> None:
        report_id = definition.descriptor.id
        if not report_id:
            raise ValueError("Report definitions require a non-empty id")
        if report_id in self._definitions:
            raise ValueError(f"Duplicate report id: {report_id}")
        self._definitions[report_id] = definition

    def discover(self) -> Dict[str, ReportDescriptor]:
        """Return every registered descriptor ordered by id."""
        return {report_id: self._descriptor(report_id) for report_id in sorted(self._definitions)}

    def enabled(self) -> Dict[str, ReportDescriptor]:
        return {
            report_id: descriptor
            for report_id, descriptor in self.discover().items()
            if descriptor.enabled is not False
        }

    def get(self, report_id: str) -> ReportDescriptor:
        """Enabled-only lookup."""
        descriptor = self.enabled().get(report_id)
        if descriptor is None:
            raise ReportNotFoundError(report_id)
        return descriptor

    def instantiate(
        self, report_id: str, options: Optional[Mapping[str, Any]] = None
    ) -> AuditReport:
        """Create a report by id, disabled ones included."""
        definition = self._definitions.get(report_id)
        if definition is None:
            raise ReportNotFoundError(report_id)
        merged = dict(self._options.get(report_id, {}))
        merged.update(options or {})
        report = definition.factory(self._collectors, merged)
        if not isinstance(report, AuditReport):
            raise TypeError(f"Report factory for '{report_id}' did not return an AuditReport")
        return report

    def create(self, report_id: str, options: Optional[Mapping[str, Any]] = None) -> AuditReport:
        """Enabled-only instantiation used by the dispatch layer."""
        self.get(report_id)
        return self.instantiate(report_id, options)

    def _descriptor(self, report_id: str) -> ReportDescriptor:
        descriptor = self._definitions[report_id].descriptor
        if report_id in self._overrides:
            return replace(descriptor, enabled=self._overrides[report_id])
        return replace(descriptor)


def registry_from_config(config: SiteAuditConfig) -> ReportRegistry:
    """Load the configured snapshot and build a registry honoring report settings."""
    snapshot = config.repository.snapshot
    if snapshot is None:
        raise RepositoryUnavailableError("No site snapshot configured (repository.snapshot)")

    options: Dict[str, Dict[str, Any]] = {}
    if config.reports.selected_bundles:
        options[SelectedBundlesParagraphUsageReport.id] = {
            "selected_bundles": dict(config.reports.selected_bundles)
        }
    return ReportRegistry.from_repository(
        load_snapshot(snapshot),
        overrides=config.reports.overrides(),
        options=options,
    )


def _entry_point_definitions() -> List[ReportDefinition]:
    definitions: List[ReportDefinition] = []
    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            _logger.warning("Failed to load report entry point '%s': %s", entry.name, exc)
            continue
        if isinstance(loaded, type) and issubclass(loaded, AuditReport):
            definitions.append(ReportDefinition.from_class(loaded))
        elif isinstance(loaded, ReportDefinition):
            definitions.append(loaded)
        else:
            _logger.warning(
                "Report entry point '%s' must be an AuditReport subclass or ReportDefinition",
                entry.name,
            )
    return definitions


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive guard
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "AuditReport",
    "ReportData",
    "ReportDefinition",
    "ReportNotFoundError",
    "ReportRegistry",
    "builtin_definitions",
    "registry_from_config",
]
