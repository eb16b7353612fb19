"""Collectors that turn repository queries into report-ready structures."""

from __future__ import annotations

from dataclasses import dataclass

from ..repository import ContentRepository
from .content import ContentCollector
from .content_bundle import ContentBundleCollector
from .project import ProjectCollector
from .structure import StructureCollector
from .views import ViewsCollector


@dataclass
class Collectors:
    """The collector set injected into every report."""

    structure: StructureCollector
    content: ContentCollector
    content_bundle: ContentBundleCollector
    views: ViewsCollector
    project: ProjectCollector

    @classmethod
    def from_repository(cls, repository: ContentRepository) -> "Collectors":
        content = ContentCollector(repository)
        return cls(
            structure=StructureCollector(repository),
            content=content,
            content_bundle=ContentBundleCollector(repository, content),
            views=ViewsCollector(repository),
            project=ProjectCollector(repository),
        )


__all__ = [
    "Collectors",
    "ContentBundleCollector",
    "ContentCollector",
    "ProjectCollector",
    "StructureCollector",
    "ViewsCollector",
]
