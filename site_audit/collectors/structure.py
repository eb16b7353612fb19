"""Structure collector: bundles, fields and component reference maps."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..logging import get_logger
from ..models import (
    REFERENCE_TYPES,
    BundleDescriptor,
    EntityFamily,
    FieldDescriptor,
    FieldMetadata,
    ReferenceFieldDescriptor,
)
from ..repository import ContentRepository

BUNDLE_BASE_PATHS: Dict[EntityFamily, str] = {
    EntityFamily.PRIMARY: "/admin/structure/types/manage",
    EntityFamily.COMPONENT: "/admin/structure/paragraphs_type",
}

UNLIMITED = "unlimited"


class StructureCollector:
    """Normalizes bundle and field metadata for both entity families."""

    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository
        self._logger = get_logger("collectors.structure")

    def list_bundles(self, family: EntityFamily) -> Dict[str, BundleDescriptor]:
        """Return bundle descriptors keyed and ordered by bundle id."""
        if not self._repository.has_family(family):
            return {}

        base = BUNDLE_BASE_PATHS[family]
        result: Dict[str, BundleDescriptor] = {}
        for metadata in self._repository.list_bundle_metadata(family):
            bundle_id = metadata.id
            result[bundle_id] = BundleDescriptor(
                id=bundle_id,
                label=metadata.label or bundle_id,
                description=metadata.description or "",
                edit_path=metadata.edit_path or f"{base}/{bundle_id}",
                fields_path=f"{base}/{bundle_id}/fields",
            )
        return {key: result[key] for key in sorted(result)}

    def list_fields(self, family: EntityFamily) -> Dict[str, Dict[str, FieldDescriptor]]:
        """Return configurable fields grouped by bundle, both levels sorted."""
        if not self._repository.has_family(family):
            return {}

        grouped: Dict[str, Dict[str, FieldDescriptor]] = {}
        for metadata in self._configurable_fields(family):
            grouped.setdefault(metadata.bundle, {})[metadata.name] = FieldDescriptor(
                field_name=metadata.name,
                label=metadata.label,
                field_type=metadata.type,
                required=bool(metadata.required),
                edit_path=self._field_edit_path(family, metadata),
                target_type=metadata.target_type if metadata.type in REFERENCE_TYPES else None,
                target_bundles=(
                    _explicit_target_bundles(metadata.handler_settings)
                    if metadata.type in REFERENCE_TYPES
                    else []
                ),
            )
        return _sorted_nested(grouped)

    def list_reference_fields(self) -> Dict[str, Dict[str, Dict[str, ReferenceFieldDescriptor]]]:
        """Return component reference fields of both families with resolved allow-lists.

        ``content_references`` maps primary bundles to their fields,
        ``component_references`` maps component bundles to their (nesting) fields.
        """
        references: Dict[str, Dict[str, Dict[str, ReferenceFieldDescriptor]]] = {
            "content_references": {},
            "component_references": {},
        }
        if not self._repository.has_family(EntityFamily.COMPONENT):
            return references

        component_bundles = list(self.list_bundles(EntityFamily.COMPONENT))
        for key, family in (
            ("content_references", EntityFamily.PRIMARY),
            ("component_references", EntityFamily.COMPONENT),
        ):
            grouped: Dict[str, Dict[str, ReferenceFieldDescriptor]] = {}
            for metadata in self._configurable_fields(family):
                if not is_component_reference(metadata):
                    continue
                grouped.setdefault(metadata.bundle, {})[metadata.name] = self._reference_descriptor(
                    family, metadata, component_bundles
                )
            references[key] = _sorted_nested(grouped)
        return references

    def _reference_descriptor(
        self,
        family: EntityFamily,
        metadata: FieldMetadata,
        component_bundles: List[str],
    ) -> ReferenceFieldDescriptor:
        explicit = _explicit_target_bundles(metadata.handler_settings)
        allowed = resolve_allowed_bundles(metadata.handler_settings, component_bundles)
        if not explicit:
            self._logger.debug(
                "Field %s.%s.%s has no usable allow-list; allowing all component bundles",
                family.value,
                metadata.bundle,
                metadata.name,
            )
        return ReferenceFieldDescriptor(
            field_name=metadata.name,
            label=metadata.label,
            field_type=metadata.type,
            required=bool(metadata.required),
            edit_path=self._field_edit_path(family, metadata),
            target_type=metadata.target_type,
            target_bundles=explicit,
            target_family=EntityFamily.COMPONENT,
            allowed_target_bundles=allowed,
            cardinality=interpret_cardinality(metadata.cardinality),
        )

    def _configurable_fields(self, family: EntityFamily) -> List[FieldMetadata]:
        return [
            metadata
            for metadata in self._repository.list_field_metadata(family)
            if not metadata.base_field
        ]

    def _field_edit_path(self, family: EntityFamily, metadata: FieldMetadata) -> str:
        if metadata.edit_path:
            return metadata.edit_path
        base = BUNDLE_BASE_PATHS[family]
        return f"{base}/{metadata.bundle}/fields/{family.value}.{metadata.bundle}.{metadata.name}"


def is_component_reference(metadata: FieldMetadata, *, revisions_only: bool = False) -> bool:
    """Return True for reference fields whose target is the component family."""
    allowed_types = ("entity_reference_revisions",) if revisions_only else REFERENCE_TYPES
    return metadata.type in allowed_types and metadata.target_type == EntityFamily.COMPONENT.value


def resolve_allowed_bundles(handler_settings: Any, component_bundles: List[str]) -> List[str]:
    """Resolve a field's allow-list into an explicit ordered list of bundle ids.

    An empty, absent or malformed allow-list means every current component
    bundle. ``negate`` inverts an explicit list against the current bundles.
    """
    all_bundles = sorted(component_bundles)
    explicit = _explicit_target_bundles(handler_settings)
    if not explicit:
        return all_bundles
    if isinstance(handler_settings, Mapping) and _truthy(handler_settings.get("negate")):
        excluded = set(explicit)
        return [bundle for bundle in all_bundles if bundle not in excluded]
    return explicit


def interpret_cardinality(value: Any) -> str:
    """Render storage cardinality as "unlimited", "1" or "<n>"."""
    number: Optional[int] = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            number = None

    if number == -1:
        return UNLIMITED
    if number is None or number < 1:
        return "1"
    return str(number)


def _explicit_target_bundles(handler_settings: Any) -> List[str]:
    if not isinstance(handler_settings, Mapping):
        return []

    flat = handler_settings.get("target_bundles")
    if isinstance(flat, Mapping) and flat:
        return [str(key) for key in flat]
    if isinstance(flat, list) and flat:
        return [str(item) for item in flat if isinstance(item, (str, int))]

    drag_drop = handler_settings.get("target_bundles_drag_drop")
    if isinstance(drag_drop, Mapping):
        entries = []
        for position, (bundle, entry) in enumerate(drag_drop.items()):
            settings = entry if isinstance(entry, Mapping) else {}
            if not _truthy(settings.get("enabled", True)):
                continue
            entries.append((_weight(settings.get("weight")), position, str(bundle)))
        entries.sort()
        return [bundle for _, _, bundle in entries]

    return []


def _weight(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in {"", "0", "false", "no"}
    return bool(value)


def _sorted_nested(grouped: Mapping[str, Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return {
        bundle: {name: grouped[bundle][name] for name in sorted(grouped[bundle])}
        for bundle in sorted(grouped)
    }


__all__ = [
    "BUNDLE_BASE_PATHS",
    "StructureCollector",
    "UNLIMITED",
    "interpret_cardinality",
    "is_component_reference",
    "resolve_allowed_bundles",
]
