"""Content volume collector: entity counts per bundle."""

from __future__ import annotations

from typing import Dict, Sequence

from ..logging import get_logger
from ..models import EntityFamily
from ..repository import ContentRepository


class ContentCollector:
    """Counts stored entities per bundle, ignoring access restrictions."""

    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository
        self._logger = get_logger("collectors.content")

    def count_by_family(self, family: EntityFamily, bundle_ids: Sequence[str]) -> Dict[str, int]:
        """Return ``{bundle: count}`` for exactly the requested ids, in request order."""
        counts: Dict[str, int] = {}
        for bundle in bundle_ids:
            counts[bundle] = int(
                self._repository.count_entities(family, bundle, ignore_access=True)
            )
        self._logger.debug("Counted %d %s bundles", len(counts), family.value)
        return counts

    def node_counts(self, bundle_ids: Sequence[str]) -> Dict[str, int]:
        return self.count_by_family(EntityFamily.PRIMARY, bundle_ids)

    def paragraph_counts(self, bundle_ids: Sequence[str]) -> Dict[str, int]:
        if not self._repository.has_family(EntityFamily.COMPONENT):
            return {bundle: 0 for bundle in bundle_ids}
        return self.count_by_family(EntityFamily.COMPONENT, bundle_ids)


__all__ = ["ContentCollector"]
