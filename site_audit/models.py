"""Core data models shared across site-audit components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class EntityFamily(str, Enum):
    """Entity families inspected by the audit collectors."""

    PRIMARY = "node"
    COMPONENT = "paragraph"


REFERENCE_REVISIONS = "entity_reference_revisions"
REFERENCE = "entity_reference"
REFERENCE_TYPES = (REFERENCE, REFERENCE_REVISIONS)


@dataclass
class BundleMetadata:
    """Raw bundle record as reported by a content repository."""

    id: str
    label: str
    description: Optional[str] = None
    edit_path: Optional[str] = None


@dataclass
class FieldMetadata:
    """Raw field definition as reported by a content repository."""

    entity_family: str
    bundle: str
    name: str
    label: str
    type: str
    required: bool = False
    base_field: bool = False
    target_type: Optional[str] = None
    handler_settings: Any = None
    cardinality: Any = 1
    edit_path: Optional[str] = None


@dataclass
class BundleDescriptor:
    """Normalized bundle information with admin paths."""

    id: str
    label: str
    description: str
    edit_path: str
    fields_path: str


@dataclass
class FieldDescriptor:
    """Configurable field attached to a bundle."""

    field_name: str
    label: str
    field_type: str
    required: bool
    edit_path: str
    target_type: Optional[str] = None
    target_bundles: List[str] = field(default_factory=list)

    @property
    def is_reference(self) -> bool:
        return self.field_type in REFERENCE_TYPES


@dataclass
class ReferenceFieldDescriptor(FieldDescriptor):
    """Reference field with its allow-list resolved against current bundles."""

    target_family: Optional[EntityFamily] = None
    allowed_target_bundles: List[str] = field(default_factory=list)
    cardinality: str = "1"


@dataclass
class UsageStat:
    """Stored usage of one component type inside one primary bundle."""

    bundle_or_type_id: str
    label: str
    total_count: int = 0
    distinct_parent_count: int = 0


@dataclass
class UsageSummary:
    """Published/unpublished entity counts for one primary bundle."""

    bundle: str
    total: int
    published: int
    unpublished: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExtensionInfo:
    """Installed module or theme as reported by the repository."""

    name: str
    type: str = "module"
    status: bool = False
    path: str = ""
    package: str = ""
    version: Optional[str] = None


@dataclass
class LanguageInfo:
    """Configured site language."""

    id: str
    name: str
    default: bool = False
    direction: str = "ltr"
    weight: int = 0


@dataclass
class ReportDescriptor:
    """Static metadata describing an audit report."""

    id: str
    label: str
    description: str = ""
    enabled: bool = True


def descriptor_to_dict(value: Any) -> Any:
    """Convert descriptor dataclasses (or mappings of them) into plain data."""
    if isinstance(value, Mapping):
        return {key: descriptor_to_dict(item) for key, item in value.items()}
    if isinstance(value, list):
        return [descriptor_to_dict(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "__dataclass_fields__"):
        data = asdict(value)
        return {key: descriptor_to_dict(item) for key, item in data.items()}
    return value


__all__ = [
    "BundleDescriptor",
    "BundleMetadata",
    "EntityFamily",
    "ExtensionInfo",
    "FieldDescriptor",
    "FieldMetadata",
    "LanguageInfo",
    "REFERENCE",
    "REFERENCE_REVISIONS",
    "REFERENCE_TYPES",
    "ReferenceFieldDescriptor",
    "ReportDescriptor",
    "UsageStat",
    "UsageSummary",
    "descriptor_to_dict",
]
