"""Content repository backed by an exported site snapshot (YAML or JSON)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set

import yaml

from ..logging import get_logger
from ..models import BundleMetadata, EntityFamily, ExtensionInfo, FieldMetadata, LanguageInfo
from .base import (
    ContentRepository,
    JoinKeys,
    JoinRow,
    RepositoryUnavailableError,
    StructuralQueryError,
)

_BASE_TABLES: Dict[EntityFamily, str] = {
    EntityFamily.PRIMARY: "node_field_data",
    EntityFamily.COMPONENT: "paragraphs_item_field_data",
}

_FIELD_TABLE_PREFIX: Dict[EntityFamily, str] = {
    EntityFamily.PRIMARY: "node__",
    EntityFamily.COMPONENT: "paragraph__",
}


class SnapshotRepository(ContentRepository):
    """Serve repository queries from an in-memory snapshot mapping.

    Layout of the snapshot::

        site: {name, mail, core_version, php_version, default_theme, admin_theme,
               gin_settings: {navigation, toolbar_variant, show_user_toolbar},
               database: {driver, database, version}}
        bundles: {node: [{id, label, description, edit_path}], paragraph: [...]}
        fields: [{entity_type, bundle, name, label, type, required, base_field,
                  target_type, handler_settings, cardinality}]
        entities: {node: [{id, bundle, status, fields: {field_x: [ids]}}],
                   paragraph: [{id, bundle}]}
        storage: {missing_tables: [node__field_x]}
        views: [{id, label, status, base_table, display: {...}}]
        extensions: [{name, type, status, path, package, version}]
        languages: [{id, name, default, direction, weight}]
        config: {base: 120, collections: {language.de: 14}}
        config_entities: {taxonomy_vocabulary: [...], media_type: [...]}

    The paragraph family counts as installed only when ``bundles.paragraph`` is
    present in the snapshot.
    """

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data if isinstance(data, Mapping) else {}
        self._logger = get_logger("repository.snapshot")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SnapshotRepository":
        return cls(data)

    # Metadata -----------------------------------------------------------

    def has_family(self, family: EntityFamily) -> bool:
        if family is EntityFamily.PRIMARY:
            return True
        return family.value in self._section("bundles")

    def list_bundle_metadata(self, family: EntityFamily) -> List[BundleMetadata]:
        records = self._section("bundles").get(family.value) or []
        bundles: List[BundleMetadata] = []
        for record in _iter_mappings(records):
            bundle_id = record.get("id")
            if not bundle_id:
                self._logger.debug("Skipping %s bundle without id", family.value)
                continue
            bundles.append(
                BundleMetadata(
                    id=str(bundle_id),
                    label=str(record.get("label") or bundle_id),
                    description=_optional_str(record.get("description")),
                    edit_path=_optional_str(record.get("edit_path")),
                )
            )
        return bundles

    def list_field_metadata(
        self, family: EntityFamily, bundle: Optional[str] = None
    ) -> List[FieldMetadata]:
        fields: List[FieldMetadata] = []
        for record in _iter_mappings(self._data.get("fields") or []):
            if record.get("entity_type") != family.value:
                continue
            if bundle is not None and record.get("bundle") != bundle:
                continue
            name = record.get("name")
            if not name or not record.get("bundle"):
                continue
            fields.append(
                FieldMetadata(
                    entity_family=family.value,
                    bundle=str(record["bundle"]),
                    name=str(name),
                    label=str(record.get("label") or name),
                    type=str(record.get("type") or ""),
                    required=bool(record.get("required", False)),
                    base_field=bool(record.get("base_field", False)),
                    target_type=_optional_str(record.get("target_type")),
                    handler_settings=record.get("handler_settings"),
                    cardinality=record.get("cardinality", 1),
                    edit_path=_optional_str(record.get("edit_path")),
                )
            )
        return fields

    # Entity queries -----------------------------------------------------

    def count_entities(
        self,
        family: EntityFamily,
        bundle: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        ignore_access: bool = True,
    ) -> int:
        # Snapshots carry no access information, so every count is unrestricted.
        wanted = dict(filters or {})
        count = 0
        for entity in self._entities(family):
            if entity.get("bundle") != bundle:
                continue
            if all(_normalise(entity.get(key)) == _normalise(value) for key, value in wanted.items()):
                count += 1
        return count

    def base_table(self, family: EntityFamily) -> str:
        return _BASE_TABLES[family]

    def field_table(self, family: EntityFamily, field_name: str) -> str:
        return f"{_FIELD_TABLE_PREFIX[family]}{field_name}"

    def raw_join_query(
        self,
        primary_table: str,
        field_table: str,
        component_table: str,
        join_keys: JoinKeys,
    ) -> Iterator[JoinRow]:
        primary_family = self._family_for_base_table(primary_table)
        component_family = self._family_for_base_table(component_table)
        field_name = self._field_for_table(primary_family, field_table)

        expected_column = f"{field_name}_target_id"
        if join_keys.reference_column != expected_column:
            raise StructuralQueryError(
                f"Column {join_keys.reference_column} does not exist in {field_table}"
            )

        components: Dict[int, str] = {}
        for entity in self._entities(component_family):
            entity_id = _as_int(entity.get("id"))
            if entity_id is not None and entity.get("bundle"):
                components[entity_id] = str(entity["bundle"])

        return self._iter_join_rows(primary_family, field_name, join_keys.bundle, components)

    def _iter_join_rows(
        self,
        family: EntityFamily,
        field_name: str,
        bundle: str,
        components: Mapping[int, str],
    ) -> Iterator[JoinRow]:
        for entity in self._entities(family):
            if entity.get("bundle") != bundle:
                continue
            owner_id = _as_int(entity.get("id"))
            if owner_id is None:
                continue
            values = _as_dict(entity.get("fields")).get(field_name) or []
            if not isinstance(values, list):
                values = [values]
            for value in values:
                target_id = _target_id(value)
                # Inner join: dangling references produce no row.
                if target_id is None or target_id not in components:
                    continue
                yield JoinRow(owner_id=owner_id, component_type=components[target_id])

    # Site configuration -------------------------------------------------

    def list_views(self) -> List[Mapping[str, Any]]:
        return list(_iter_mappings(self._data.get("views") or []))

    def list_extensions(self) -> List[ExtensionInfo]:
        extensions: List[ExtensionInfo] = []
        for record in _iter_mappings(self._data.get("extensions") or []):
            name = record.get("name")
            if not name:
                continue
            extensions.append(
                ExtensionInfo(
                    name=str(name),
                    type=str(record.get("type") or "module"),
                    status=bool(record.get("status", False)),
                    path=str(record.get("path") or ""),
                    package=str(record.get("package") or ""),
                    version=_optional_str(record.get("version")),
                )
            )
        return extensions

    def list_languages(self) -> List[LanguageInfo]:
        languages: List[LanguageInfo] = []
        for record in _iter_mappings(self._data.get("languages") or []):
            langcode = record.get("id")
            if not langcode:
                continue
            languages.append(
                LanguageInfo(
                    id=str(langcode),
                    name=str(record.get("name") or langcode),
                    default=bool(record.get("default", False)),
                    direction="rtl" if record.get("direction") == "rtl" else "ltr",
                    weight=_as_int(record.get("weight")) or 0,
                )
            )
        return languages

    def config_collections(self) -> Dict[str, int]:
        config = self._section("config")
        counts: Dict[str, int] = {"base": _as_int(config.get("base")) or 0}
        for name, item_count in _as_dict(config.get("collections")).items():
            counts[str(name)] = _as_int(item_count) or 0
        return counts

    def list_config_entities(self, entity_type: str) -> List[Mapping[str, Any]]:
        return list(_iter_mappings(self._section("config_entities").get(entity_type) or []))

    def site_info(self) -> Dict[str, Any]:
        return dict(self._section("site"))

    # Helpers ------------------------------------------------------------

    def _section(self, key: str) -> Mapping[str, Any]:
        return _as_dict(self._data.get(key))

    def _entities(self, family: EntityFamily) -> Iterable[Mapping[str, Any]]:
        return _iter_mappings(self._section("entities").get(family.value) or [])

    def _missing_tables(self) -> Set[str]:
        tables = self._section("storage").get("missing_tables") or []
        return {str(table) for table in tables} if isinstance(tables, list) else set()

    def _family_for_base_table(self, table: str) -> EntityFamily:
        for family, name in _BASE_TABLES.items():
            if name == table and table not in self._missing_tables():
                if family is EntityFamily.COMPONENT and not self.has_family(family):
                    break
                return family
        raise StructuralQueryError(f"Base table {table} does not exist")

    def _field_for_table(self, family: EntityFamily, table: str) -> str:
        prefix = _FIELD_TABLE_PREFIX[family]
        if not table.startswith(prefix) or table in self._missing_tables():
            raise StructuralQueryError(f"Field table {table} does not exist")
        field_name = table[len(prefix):]
        known = {field.name for field in self.list_field_metadata(family) if not field.base_field}
        if field_name not in known:
            raise StructuralQueryError(f"Field table {table} does not exist")
        return field_name


def load_snapshot(path: Path) -> SnapshotRepository:
    """Read a YAML or JSON snapshot file into a repository."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise RepositoryUnavailableError(f"Cannot read site snapshot {path}: {exc}") from exc

    try:
        if Path(path).suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise RepositoryUnavailableError(f"Cannot parse site snapshot {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RepositoryUnavailableError(f"Site snapshot {path} must contain a mapping")
    return SnapshotRepository(data)


def _iter_mappings(values: Any) -> Iterator[Mapping[str, Any]]:
    if not isinstance(values, list):
        return iter(())
    return (value for value in values if isinstance(value, Mapping))


def _as_dict(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _normalise(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


def _target_id(value: Any) -> Optional[int]:
    if isinstance(value, Mapping):
        return _as_int(value.get("target_id"))
    return _as_int(value)


__all__ = ["SnapshotRepository", "load_snapshot"]
