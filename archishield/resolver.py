"""Context resolver — district lookup and neighbourhood statistics."""

from __future__ import annotations

import logging
from typing import Iterable

from archishield.config import DEFAULT_NEIGHBORHOOD_RADIUS
from archishield.geo.features import BuildingDataset, Feature
from archishield.geo.spatial import neighborhood_stats
from archishield.models.building import Building
from archishield.models.context import AuditContext
from archishield.regulations.schema import DistrictRules, Regulations
from archishield.regulations.vienna import VIENNA_REGULATIONS

logger = logging.getLogger(__name__)


def detect_district(
    latitude: float,
    longitude: float,
    districts: DistrictRules = VIENNA_REGULATIONS.districts,
) -> int | None:
    """Return the first district whose box contains the point, or None."""
    for box in districts.boxes:
        if box.contains(latitude, longitude):
            return box.district
    return None


def resolve_context(
    building: Building,
    dataset: BuildingDataset | Iterable[Feature] | None = None,
    district: int | None = None,
    radius: float | None = None,
    regulations: Regulations = VIENNA_REGULATIONS,
) -> AuditContext:
    """Assemble the read-only context shared by all evaluators.

    An explicit *district* skips the box lookup.  *radius* defaults to
    the 150 m neighbourhood radius.
    """
    features = tuple(dataset) if dataset is not None else ()
    if district is None:
        district = detect_district(building.latitude, building.longitude, regulations.districts)

    query_radius = radius if radius is not None else DEFAULT_NEIGHBORHOOD_RADIUS
    stats = neighborhood_stats(building.latitude, building.longitude, features, query_radius)
    logger.debug(
        "Resolved context: district=%s, %d neighbours within %sm",
        district,
        stats.count,
        query_radius,
    )
    return AuditContext(district=district, neighborhood=stats, features=features)
