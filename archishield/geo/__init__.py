"""Geospatial utilities — distances, containment, and radius queries."""

from archishield.geo.features import BuildingDataset, Feature
from archishield.geo.neighborhood import Neighbor, NeighborhoodStats
from archishield.geo.spatial import (
    count_within_radius,
    distance,
    nearest_line_distance,
    neighborhood_stats,
    point_in_polygon,
)

__all__ = [
    "BuildingDataset",
    "Feature",
    "Neighbor",
    "NeighborhoodStats",
    "count_within_radius",
    "distance",
    "nearest_line_distance",
    "neighborhood_stats",
    "point_in_polygon",
]
