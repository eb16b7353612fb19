"""Content-bundle usage collector: which components a primary bundle actually embeds."""

from __future__ import annotations

from typing import Dict, Iterator, List, Set

from ..logging import get_logger
from ..models import EntityFamily, UsageStat, UsageSummary
from ..repository import ContentRepository, JoinKeys, JoinRow, StructuralQueryError
from .content import ContentCollector
from .structure import is_component_reference

PUBLISHED_FILTER = {"status": 1}


class ContentBundleCollector:
    """Computes usage statistics for one primary bundle from stored data."""

    def __init__(self, repository: ContentRepository, content: ContentCollector) -> None:
        self._repository = repository
        self._content = content
        self._logger = get_logger("collectors.content_bundle")

    def usage_summary(self, bundle: str) -> UsageSummary:
        """Return total/published/unpublished counts; unpublished never goes negative."""
        total = self._content.node_counts([bundle]).get(bundle, 0)
        published = int(
            self._repository.count_entities(
                EntityFamily.PRIMARY, bundle, PUBLISHED_FILTER, ignore_access=True
            )
        )
        return UsageSummary(
            bundle=bundle,
            total=total,
            published=published,
            unpublished=max(0, total - published),
        )

    def component_usage_for_bundle(self, bundle: str) -> Dict[str, UsageStat]:
        """Aggregate embedded components per type, most used first.

        ``total_count`` counts references; ``distinct_parent_count`` counts the
        owning entities. Ties keep the order in which types were first seen.
        """
        field_names = self._component_fields(bundle)
        if not field_names:
            return {}

        totals: Dict[str, int] = {}
        parents: Dict[str, Set[int]] = {}
        for row in self._iter_rows(bundle, field_names):
            totals[row.component_type] = totals.get(row.component_type, 0) + 1
            parents.setdefault(row.component_type, set()).add(row.owner_id)

        if not totals:
            return {}

        labels = {
            metadata.id: metadata.label
            for metadata in self._repository.list_bundle_metadata(EntityFamily.COMPONENT)
        }
        usage = [
            UsageStat(
                bundle_or_type_id=component_type,
                label=labels.get(component_type) or component_type,
                total_count=count,
                distinct_parent_count=len(parents[component_type]),
            )
            for component_type, count in totals.items()
        ]
        usage.sort(key=lambda stat: stat.total_count, reverse=True)
        return {stat.bundle_or_type_id: stat for stat in usage}

    def example_parent_ids(self, bundle: str, component_type: str, limit: int = 5) -> List[int]:
        """Return up to ``limit`` distinct owner ids embedding ``component_type``."""
        if limit <= 0:
            return []
        field_names = self._component_fields(bundle)
        owners: List[int] = []
        for row in self._iter_rows(bundle, field_names):
            if row.component_type != component_type or row.owner_id in owners:
                continue
            owners.append(row.owner_id)
            if len(owners) >= limit:
                break
        return owners

    def _component_fields(self, bundle: str) -> List[str]:
        if not self._repository.has_family(EntityFamily.COMPONENT):
            return []
        return [
            metadata.name
            for metadata in self._repository.list_field_metadata(EntityFamily.PRIMARY, bundle)
            if is_component_reference(metadata, revisions_only=True)
        ]

    def _iter_rows(self, bundle: str, field_names: List[str]) -> Iterator[JoinRow]:
        primary_table = self._repository.base_table(EntityFamily.PRIMARY)
        component_table = self._repository.base_table(EntityFamily.COMPONENT)
        for field_name in field_names:
            join_keys = JoinKeys(
                bundle=bundle,
                owner_column="entity_id",
                reference_column=f"{field_name}_target_id",
            )
            try:
                rows = list(
                    self._repository.raw_join_query(
                        primary_table,
                        self._repository.field_table(EntityFamily.PRIMARY, field_name),
                        component_table,
                        join_keys,
                    )
                )
            except StructuralQueryError as exc:
                self._logger.debug("Skipping field %s on %s: %s", field_name, bundle, exc)
                continue
            yield from rows


__all__ = ["ContentBundleCollector", "PUBLISHED_FILTER"]
