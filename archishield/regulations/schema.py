"""Regulatory configuration models.

Every threshold, penalty, polygon and lookup table the evaluators use
lives here as frozen data.  Evaluators receive their section at
construction, so an alternate regime is just another ``Regulations``
instance.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from archishield.geo.spatial import point_in_polygon

Ring = tuple[tuple[float, float], ...]
"""Polygon ring of ``(lng, lat)`` vertices."""


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Districts
# ---------------------------------------------------------------------------


class DistrictBox(_Frozen):
    """Rectangular bounding box for one administrative district."""

    district: int
    name: str = ""
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        """Inclusive on all four edges."""
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


class DistrictRules(_Frozen):
    boxes: tuple[DistrictBox, ...] = ()
    """Checked in order; the first matching box wins."""


# ---------------------------------------------------------------------------
# Zoning
# ---------------------------------------------------------------------------


class BuildingClass(_Frozen):
    """A regulatory tier (Bauklasse) with its height, floor and density limits."""

    name: str
    max_height: float
    max_floors: int
    far: float
    description: str = ""


class ProtectionZone(_Frozen):
    """A polygon where additional facade and material approvals are required."""

    id: str
    name: str
    polygon: Ring
    restrictions: tuple[str, ...] = ()

    def contains(self, lat: float, lng: float) -> bool:
        return point_in_polygon(lat, lng, self.polygon)


class ZoningRules(_Frozen):
    building_classes: dict[str, BuildingClass]
    district_classes: dict[int, str] = Field(default_factory=dict)
    default_class: str
    """Class used when the district is unknown."""

    suggestion_bands: tuple[tuple[float, str], ...]
    """``(max_avg_height, class)`` pairs, ascending; beyond the last band ``top_class`` applies."""

    top_class: str
    context_max_factor: float = 0.95
    """Share of the tallest neighbour that still counts as neighbourhood scale."""

    variance_penalty: float = 15
    violation_penalty: float = 40
    floor_penalty: float = 20
    protection_zone_penalty: float = 10
    protection_zones: tuple[ProtectionZone, ...] = ()
    """Checked in order; only the first containing zone applies."""

    def class_for_district(self, district: int | None) -> BuildingClass:
        name = self.district_classes.get(district, self.default_class)
        return self.building_classes[name]

    def suggested_class_name(self, avg_height: float) -> str:
        for max_height, name in self.suggestion_bands:
            if avg_height <= max_height:
                return name
        return self.top_class


# ---------------------------------------------------------------------------
# Heritage
# ---------------------------------------------------------------------------


class Landmark(_Frozen):
    name: str
    lat: float
    lng: float
    protection_radius: float
    """Metres."""


class HeritageRules(_Frozen):
    buffer_polygon: Ring
    height_limit: float
    """Absolute ceiling inside the buffer; no variance."""

    review_height: float
    """Above this, enhanced heritage review is required."""

    ceiling_penalty: float = 50
    review_penalty: float = 15
    landmarks: tuple[Landmark, ...] = ()
    landmark_penalty: float = 10
    protocol_district: int | None = None
    """District whose projects need preliminary heritage consultation."""

    buffer_requirements: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Subsurface
# ---------------------------------------------------------------------------


class Station(_Frozen):
    name: str
    lat: float
    lng: float


class TransitLine(_Frozen):
    name: str
    color: str = ""
    tunnel_depth: float
    """Average tunnel depth below surface in metres."""

    stations: tuple[Station, ...]


class SubsurfaceRules(_Frozen):
    lines: tuple[TransitLine, ...]
    critical_distance: float = 30
    restricted_distance: float = 50
    monitoring_distance: float = 100
    clear_distance: float = 150
    critical_penalty: float = 50
    restricted_penalty: float = 30
    monitoring_penalty: float = 10
    depth_clearance: float = 5
    """Minimum vertical gap between basement and tunnel before a conflict."""

    recommended_clearance: float = 8
    depth_penalty: float = 20
    restricted_requirements: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Climate
# ---------------------------------------------------------------------------


class HeatIslandBand(_Frozen):
    category: str
    max_km: float | None
    """Upper distance bound from the centre; None for the outermost band."""

    intensity: float
    """Degrees Celsius above the rural baseline."""


class FloodZone(_Frozen):
    name: str
    polygon: Ring
    minimum_elevation: float
    districts: tuple[int, ...]

    def applies(self, district: int | None, lat: float, lng: float) -> bool:
        return district in self.districts and point_in_polygon(lat, lng, self.polygon)


class ClimateRules(_Frozen):
    max_surface_seal: float = 80
    high_surface_seal: float = 70
    permeable_paving_hint: float = 60
    seal_block_penalty: float = 50
    high_seal_penalty: float = 15

    heat_center: tuple[float, float]
    """``(lat, lng)`` of the heat-island centre."""

    km_per_degree: float = 111.0
    heat_bands: tuple[HeatIslandBand, ...]
    greening_categories: tuple[str, ...] = ("extreme", "high")
    heat_penalty: float = 10

    flood_zone: FloodZone | None = None
    flood_penalty: float = 25

    green_roof_threshold: float = 500
    green_roof_coverage: float = 0.7
    green_roof_penalty: float = 10
    solar_threshold: float = 250
    solar_coverage: float = 0.2
    solar_penalty: float = 5
    water_retention_rate: float = 0.05
    """Cubic metres of retention per m² of roof."""


# ---------------------------------------------------------------------------
# Structural
# ---------------------------------------------------------------------------


class GeologicalZone(_Frozen):
    name: str
    pga: float
    """Peak ground acceleration in g."""

    amplification: float


class MaterialProfile(_Frozen):
    label: str
    weight_multiplier: float
    flexibility: float
    carbon_factor: float


class SeismicRules(_Frozen):
    boundary_longitude: float
    """West of this longitude is bedrock, east is sediment."""

    bedrock: GeologicalZone
    sediment: GeologicalZone
    tall_height: float = 40
    bedrock_score: float = 98
    sediment_score: float = 92
    timber_bonus: float = 5
    tall_timber_score: float = 90
    tall_upgraded_score: float = 80
    tall_unprotected_score: float = 30
    upgraded_systems: tuple[str, ...] = ()
    materials: dict[str, MaterialProfile] = Field(default_factory=dict)
    reference_height: float = 80
    """Height treated as the top of the stress scale."""


class WindRules(_Frozen):
    radius: float = 150
    exposed_below: int = 3
    low_below: int = 10
    exposed_score: float = 65
    low_score: float = 90
    high_score: float = 98
    tall_height: float = 60
    tall_exposed_score: float = 40
    reference_height: float = 80


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class Regulations(_Frozen):
    """The complete regulatory regime for one city."""

    name: str
    version: str = ""
    districts: DistrictRules
    zoning: ZoningRules
    heritage: HeritageRules
    subsurface: SubsurfaceRules
    climate: ClimateRules
    seismic: SeismicRules
    wind: WindRules
