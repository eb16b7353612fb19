from __future__ import annotations

from pathlib import Path

import pytest

from site_audit.collectors import Collectors
from site_audit.repository import SnapshotRepository
from tests._fixtures.site_builder import SiteBuilder, sample_site


@pytest.fixture
def site_builder(tmp_path: Path) -> SiteBuilder:
    """Provide an empty snapshot builder rooted at the pytest tmp_path."""
    return SiteBuilder(tmp_path)


@pytest.fixture
def sample_repository(site_builder: SiteBuilder) -> SnapshotRepository:
    """Repository over the shared sample site."""
    return sample_site(site_builder).repository()


@pytest.fixture
def sample_collectors(sample_repository: SnapshotRepository) -> Collectors:
    return Collectors.from_repository(sample_repository)
