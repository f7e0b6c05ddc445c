"""Feature dataset — read-only building footprints supplied by the map layer.

Features follow the GeoJSON conventions: coordinates are ``[lng, lat]``
pairs, polygons are lists of rings, and the first ring is the outer one.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

SUPPORTED_GEOMETRIES = ("Point", "Polygon", "LineString")


def _coerce_float(value: Any) -> float | None:
    """Try to coerce a value to a finite float."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    return number if math.isfinite(number) else None


def as_lnglat(value: Any) -> tuple[float, float] | None:
    """Return a GeoJSON position as ``(lng, lat)``, or None if it is not one."""
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None
    lng, lat = _coerce_float(value[0]), _coerce_float(value[1])
    if lng is None or lat is None:
        return None
    return lng, lat


class Feature(BaseModel):
    """A single dataset feature with its height attributes."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str | None = None
    geometry_type: str
    """'Point', 'Polygon' or 'LineString'."""

    coordinates: Any
    height: float = 0.0
    """Height in metres; 0 when the source has no usable value."""

    levels: int | None = None
    name: str | None = None

    @property
    def representative_point(self) -> tuple[float, float] | None:
        """``(lng, lat)`` used for radius queries.

        Points use their own position and polygons their first outer-ring
        vertex.  Line features, and features whose coordinates do not hold
        a usable position, have no representative point.
        """
        coords = self.coordinates
        if self.geometry_type == "Point":
            return as_lnglat(coords)
        if self.geometry_type == "Polygon" and isinstance(coords, (list, tuple)) and coords:
            ring = coords[0]
            if isinstance(ring, (list, tuple)) and ring:
                return as_lnglat(ring[0])
        return None

    @classmethod
    def from_geojson(cls, data: dict[str, Any]) -> Feature:
        """Build a Feature from a GeoJSON Feature dict."""
        geometry = data.get("geometry") or {}
        props = data.get("properties") or {}

        feature_id = data.get("id", props.get("id"))
        height = _coerce_float(props.get("height")) or 0.0
        levels = _coerce_float(props.get("levels", props.get("building:levels")))

        return cls(
            id=str(feature_id) if feature_id is not None else None,
            geometry_type=geometry.get("type", ""),
            coordinates=geometry.get("coordinates"),
            height=height,
            levels=int(levels) if levels is not None else None,
            name=props.get("name"),
        )

    @classmethod
    def line(cls, coordinates: list[tuple[float, float]], name: str | None = None) -> Feature:
        """Convenience constructor for a LineString of ``(lng, lat)`` vertices."""
        return cls(
            id=name,
            geometry_type="LineString",
            coordinates=[list(c) for c in coordinates],
            name=name,
        )


class BuildingDataset:
    """Immutable collection of features with lookup by identifier.

    Parameters
    ----------
    features:
        Features in source order.  Order is preserved for iteration.
    """

    def __init__(self, features: list[Feature] | tuple[Feature, ...] = ()) -> None:
        self._features: tuple[Feature, ...] = tuple(features)
        self._by_id: dict[str, Feature] = {}
        for feature in self._features:
            if feature.id is not None and feature.id not in self._by_id:
                self._by_id[feature.id] = feature

    @classmethod
    def from_geojson(cls, collection: dict[str, Any]) -> BuildingDataset:
        """Load a GeoJSON FeatureCollection dict.

        Features with unsupported geometry types are skipped.  Point and
        polygon features without a usable position are kept for id lookup
        but never take part in radius queries.
        """
        features: list[Feature] = []
        skipped = 0
        unplaced = 0
        for raw in collection.get("features", []):
            geometry_type = (raw.get("geometry") or {}).get("type")
            if geometry_type not in SUPPORTED_GEOMETRIES:
                skipped += 1
                continue
            feature = Feature.from_geojson(raw)
            if geometry_type != "LineString" and feature.representative_point is None:
                unplaced += 1
            features.append(feature)

        if skipped:
            logger.debug("Skipped %d features with unsupported geometry", skipped)
        if unplaced:
            logger.debug("%d features have no usable coordinates", unplaced)
        return cls(features)

    @classmethod
    def load(cls, path: str | Path) -> BuildingDataset:
        """Load a GeoJSON FeatureCollection file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.from_geojson(data)

    @property
    def features(self) -> tuple[Feature, ...]:
        return self._features

    def find(self, structure_id: str) -> Feature | None:
        """Look up an existing structure by identifier."""
        return self._by_id.get(str(structure_id))

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)
