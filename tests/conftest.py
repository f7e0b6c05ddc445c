from __future__ import annotations

from typing import Any, Callable

import pytest

from archishield.geo.features import BuildingDataset, Feature
from archishield.models.building import Building
from archishield.normalizer import normalize_building
from tests.builders import QUIET_SITE, point, ring_features


@pytest.fixture
def dense_dataset() -> BuildingDataset:
    """Twelve 18 m neighbours around QUIET_SITE plus clutter that never counts."""
    features = ring_features(12)
    features.append(point("far", 48.25, 16.40, 60.0))
    features.append(Feature.line([(16.3401, 48.2001), (16.3402, 48.2002)], name="street"))
    return BuildingDataset(features)


@pytest.fixture
def empty_dataset() -> BuildingDataset:
    return BuildingDataset([])


@pytest.fixture
def make_building() -> Callable[..., Building]:
    """Factory: ``make_building(lat, lng, **overrides)`` with normalizer defaults."""

    def _make(lat: float = QUIET_SITE[0], lng: float = QUIET_SITE[1], **overrides: Any) -> Building:
        return normalize_building(lat, lng, overrides)

    return _make
