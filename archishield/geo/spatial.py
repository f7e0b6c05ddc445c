"""Spatial functions over ``(lat, lng)`` points and GeoJSON-ordered geometry.

Query points are always passed as ``lat, lng``.  Rings, line vertices
and feature coordinates keep the GeoJSON ``[lng, lat]`` order.  All
functions are pure.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from archishield.config import EARTH_RADIUS_M, METERS_PER_DEGREE, NEAREST_NEIGHBOR_LIMIT
from archishield.geo.features import Feature, as_lnglat
from archishield.geo.neighborhood import Neighbor, NeighborhoodStats
from archishield.scoring import round_half_up


def distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in metres (haversine, spherical earth)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def nearest_line_distance(lat: float, lng: float, lines: Iterable[Feature]) -> float:
    """Minimum distance from a point to any vertex of the given polylines.

    This is a per-vertex approximation, not a point-to-segment distance.
    Non-LineString features are ignored.  Returns ``math.inf`` when no
    line vertex is available.
    """
    best = math.inf
    for feature in lines:
        if feature.geometry_type != "LineString":
            continue
        vertices = feature.coordinates if isinstance(feature.coordinates, (list, tuple)) else ()
        for vertex in vertices:
            position = as_lnglat(vertex)
            if position is None:
                continue
            d = distance(lat, lng, position[1], position[0])
            if d < best:
                best = d
    return best


def _within_box(lat: float, lng: float, point: tuple[float, float], deg_radius: float) -> bool:
    """Cheap degree-based pre-filter; the haversine check stays authoritative.

    The longitude half-width is widened by ``1/cos(lat)`` so the box never
    rejects a point the exact check would accept.
    """
    if abs(point[1] - lat) > deg_radius:
        return False
    lng_radius = deg_radius / max(math.cos(math.radians(lat)), 1e-6)
    return abs(point[0] - lng) <= lng_radius


def _neighbors_within(
    lat: float,
    lng: float,
    features: Iterable[Feature],
    radius: float,
) -> list[Neighbor]:
    deg_radius = radius / METERS_PER_DEGREE
    found: list[Neighbor] = []
    for feature in features:
        point = feature.representative_point
        if point is None or not _within_box(lat, lng, point, deg_radius):
            continue
        d = distance(lat, lng, point[1], point[0])
        if d <= radius:
            found.append(Neighbor(id=feature.id, height=feature.height, distance=d))
    return found


def count_within_radius(
    lat: float,
    lng: float,
    features: Iterable[Feature],
    radius: float,
    exclude_id: str | None = None,
) -> int:
    """Count features whose representative point lies within *radius* metres.

    A feature whose id equals *exclude_id* is not counted, so an existing
    structure never shields itself.
    """
    neighbors = _neighbors_within(lat, lng, features, radius)
    if exclude_id is None:
        return len(neighbors)
    return sum(1 for n in neighbors if n.id != exclude_id)


def point_in_polygon(lat: float, lng: float, ring: Sequence[Sequence[float]]) -> bool:
    """Ray-casting containment test against a single ``[lng, lat]`` ring.

    The ring may be open or closed.  Boundary behaviour follows the
    half-open crossing rule: for an axis-aligned rectangle, points on the
    bottom or left edge test inside and points on the top or right edge
    test outside.
    """
    inside = False
    n = len(ring)
    if n < 3:
        return False

    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > lat) != (yj > lat):
            x_cross = (xj - xi) * (lat - yi) / (yj - yi) + xi
            if lng < x_cross:
                inside = not inside
        j = i
    return inside


def neighborhood_stats(
    lat: float,
    lng: float,
    features: Iterable[Feature],
    radius: float,
) -> NeighborhoodStats:
    """Aggregate the heights of all features within *radius* metres.

    Average and maximum heights are rounded half-up to whole metres.
    """
    neighbors = _neighbors_within(lat, lng, features, radius)
    if not neighbors:
        return NeighborhoodStats(radius=radius)

    heights = [n.height for n in neighbors]
    nearest = sorted(neighbors, key=lambda n: n.distance)[:NEAREST_NEIGHBOR_LIMIT]
    return NeighborhoodStats(
        count=len(neighbors),
        avg_height=float(round_half_up(sum(heights) / len(heights))),
        max_height=float(round_half_up(max(heights))),
        nearest=nearest,
        radius=radius,
    )
