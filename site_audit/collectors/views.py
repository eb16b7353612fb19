"""Views collector: typed view configuration and complexity scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..logging import get_logger
from ..repository import ContentRepository

VIEW_EDIT_BASE = "/admin/structure/views/view"

TOTAL_KEYS = (
    "displays",
    "fields",
    "filters",
    "sorts",
    "relationships",
    "contextual_filters",
    "exposed_filters",
)


@dataclass
class FilterOption:
    """A display filter; ``exposed`` is read from the explicit flag only."""

    id: str
    plugin_id: str = ""
    exposed: bool = False

    @classmethod
    def from_mapping(cls, filter_id: str, raw: Any) -> Optional["FilterOption"]:
        if not isinstance(raw, Mapping):
            return None
        exposed = raw.get("exposed", False)
        return cls(
            id=filter_id,
            plugin_id=str(raw.get("plugin_id") or ""),
            exposed=exposed is True or exposed == 1,
        )


@dataclass
class DisplayOptions:
    """Handler collections configured on a display."""

    fields: List[str] = field(default_factory=list)
    filters: List[FilterOption] = field(default_factory=list)
    sorts: List[str] = field(default_factory=list)
    relationships: List[str] = field(default_factory=list)
    arguments: List[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, raw: Any) -> "DisplayOptions":
        if not isinstance(raw, Mapping):
            return cls()
        filters: List[FilterOption] = []
        for filter_id, option in _handlers(raw.get("filters")).items():
            parsed = FilterOption.from_mapping(filter_id, option)
            if parsed is not None:
                filters.append(parsed)
        return cls(
            fields=list(_handlers(raw.get("fields"))),
            filters=filters,
            sorts=list(_handlers(raw.get("sorts"))),
            relationships=list(_handlers(raw.get("relationships"))),
            arguments=list(_handlers(raw.get("arguments"))),
        )

    @property
    def exposed_filters(self) -> int:
        return sum(1 for option in self.filters if option.exposed)


@dataclass
class ViewDisplay:
    id: str
    title: str
    plugin: str
    options: DisplayOptions = field(default_factory=DisplayOptions)

    def counts(self) -> Dict[str, int]:
        return {
            "fields": len(self.options.fields),
            "filters": len(self.options.filters),
            "sorts": len(self.options.sorts),
            "relationships": len(self.options.relationships),
            "contextual_filters": len(self.options.arguments),
            "exposed_filters": self.options.exposed_filters,
        }


@dataclass
class ViewConfig:
    id: str
    label: str
    status: bool
    base_table: str
    displays: List[ViewDisplay] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Optional["ViewConfig"]:
        view_id = raw.get("id")
        if not view_id:
            return None
        displays: List[ViewDisplay] = []
        display_config = raw.get("display")
        if isinstance(display_config, Mapping):
            for display_id, display in display_config.items():
                # Malformed displays are ignored rather than counted.
                if not isinstance(display, Mapping):
                    continue
                displays.append(
                    ViewDisplay(
                        id=str(display_id),
                        title=str(display.get("display_title") or display_id),
                        plugin=str(display.get("display_plugin") or ""),
                        options=DisplayOptions.from_mapping(display.get("display_options")),
                    )
                )
        return cls(
            id=str(view_id),
            label=str(raw.get("label") or view_id),
            status=bool(raw.get("status", True)),
            base_table=str(raw.get("base_table") or ""),
            displays=displays,
        )


def calculate_complexity(totals: Mapping[str, int]) -> int:
    """Weighted score: relationships and contextual filters count double."""
    return (
        int(totals.get("fields", 0))
        + int(totals.get("filters", 0))
        + int(totals.get("sorts", 0))
        + int(totals.get("displays", 0))
        + 2 * int(totals.get("relationships", 0))
        + 2 * int(totals.get("contextual_filters", 0))
        + int(totals.get("exposed_filters", 0))
    )


class ViewsCollector:
    """Summarises every view with per-display counts and a complexity score."""

    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository
        self._logger = get_logger("collectors.views")

    def list_view_configs(self) -> List[ViewConfig]:
        configs: List[ViewConfig] = []
        for raw in self._repository.list_views():
            config = ViewConfig.from_mapping(raw)
            if config is None:
                self._logger.debug("Skipping view record without id")
                continue
            configs.append(config)
        return configs

    def views_overview(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        views = {config.id: self._view_stats(config) for config in self.list_view_configs()}
        return {"views": {view_id: views[view_id] for view_id in sorted(views)}}

    def _view_stats(self, config: ViewConfig) -> Dict[str, Any]:
        totals = {key: 0 for key in TOTAL_KEYS}
        displays: Dict[str, Dict[str, Any]] = {}
        for display in config.displays:
            counts = display.counts()
            displays[display.id] = {
                "id": display.id,
                "display_title": display.title,
                "display_plugin": display.plugin,
                **counts,
            }
            totals["displays"] += 1
            for key, value in counts.items():
                totals[key] += value

        return {
            "id": config.id,
            "label": config.label,
            "status": "enabled" if config.status else "disabled",
            "base_table": config.base_table,
            "displays": displays,
            "totals": totals,
            "complexity": calculate_complexity(totals),
            "edit_path": f"{VIEW_EDIT_BASE}/{config.id}",
        }


def _handlers(value: Any) -> Dict[str, Any]:
    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    return {}


__all__ = [
    "DisplayOptions",
    "FilterOption",
    "ViewConfig",
    "ViewDisplay",
    "ViewsCollector",
    "calculate_complexity",
]
