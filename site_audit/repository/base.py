"""Read-only content repository contract consumed by the collectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..models import BundleMetadata, EntityFamily, ExtensionInfo, FieldMetadata, LanguageInfo


class RepositoryError(RuntimeError):
    """Base class for content repository failures."""


class StructuralQueryError(RepositoryError):
    """Raised when a query touches storage that does not exist (table or column)."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the repository cannot be reached at all."""


@dataclass(frozen=True)
class JoinKeys:
    """Columns used to join primary entities to their embedded components."""

    bundle: str
    owner_column: str
    reference_column: str
    bundle_column: str = "type"
    component_id_column: str = "id"
    component_type_column: str = "type"


@dataclass(frozen=True)
class JoinRow:
    """One stored reference from an owning entity to a component of a given type."""

    owner_id: int
    component_type: str


class ContentRepository(ABC):
    """Narrow, read-only view over the host's entity and config storage."""

    @abstractmethod
    def has_family(self, family: EntityFamily) -> bool:
        """Return True when the entity family is installed on the site."""

    @abstractmethod
    def list_bundle_metadata(self, family: EntityFamily) -> Iterable[BundleMetadata]:
        """Yield raw bundle records for the family."""

    @abstractmethod
    def list_field_metadata(
        self, family: EntityFamily, bundle: Optional[str] = None
    ) -> Iterable[FieldMetadata]:
        """Yield raw field definitions, optionally restricted to one bundle."""

    @abstractmethod
    def count_entities(
        self,
        family: EntityFamily,
        bundle: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        ignore_access: bool = True,
    ) -> int:
        """Count stored entities of a bundle matching every filter."""

    @abstractmethod
    def base_table(self, family: EntityFamily) -> str:
        """Return the data table that holds one row per entity."""

    @abstractmethod
    def field_table(self, family: EntityFamily, field_name: str) -> str:
        """Return the dedicated storage table of a field."""

    @abstractmethod
    def raw_join_query(
        self,
        primary_table: str,
        field_table: str,
        component_table: str,
        join_keys: JoinKeys,
    ) -> Iterable[JoinRow]:
        """Join primary rows to component rows through a field table.

        Raises StructuralQueryError when one of the tables or columns is missing.
        """

    @abstractmethod
    def list_views(self) -> List[Mapping[str, Any]]:
        """Return raw view configuration records."""

    @abstractmethod
    def list_extensions(self) -> List[ExtensionInfo]:
        """Return every module and theme known to the site."""

    @abstractmethod
    def list_languages(self) -> List[LanguageInfo]:
        """Return configured languages, default language flagged."""

    @abstractmethod
    def config_collections(self) -> Dict[str, int]:
        """Return config item counts keyed by collection name ("base" included)."""

    @abstractmethod
    def list_config_entities(self, entity_type: str) -> List[Mapping[str, Any]]:
        """Return config entities of a type, empty when the type is not defined."""

    @abstractmethod
    def site_info(self) -> Dict[str, Any]:
        """Return site, runtime and database details."""


__all__ = [
    "ContentRepository",
    "JoinKeys",
    "JoinRow",
    "RepositoryError",
    "RepositoryUnavailableError",
    "StructuralQueryError",
]
