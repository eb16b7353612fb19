"""Content repository contract and adapters."""

from __future__ import annotations

from .base import (
    ContentRepository,
    JoinKeys,
    JoinRow,
    RepositoryError,
    RepositoryUnavailableError,
    StructuralQueryError,
)
from .snapshot import SnapshotRepository, load_snapshot

__all__ = [
    "ContentRepository",
    "JoinKeys",
    "JoinRow",
    "RepositoryError",
    "RepositoryUnavailableError",
    "SnapshotRepository",
    "StructuralQueryError",
    "load_snapshot",
]
