"""Built-in regulatory data for Vienna.

Values are simplified planning figures, not legal limits.
"""

from __future__ import annotations

from archishield.regulations.schema import (
    BuildingClass,
    ClimateRules,
    DistrictBox,
    DistrictRules,
    FloodZone,
    GeologicalZone,
    HeatIslandBand,
    HeritageRules,
    Landmark,
    MaterialProfile,
    ProtectionZone,
    Regulations,
    SeismicRules,
    Station,
    SubsurfaceRules,
    TransitLine,
    WindRules,
    ZoningRules,
)


def _rect(min_lng: float, min_lat: float, max_lng: float, max_lat: float) -> tuple:
    return (
        (min_lng, min_lat),
        (max_lng, min_lat),
        (max_lng, max_lat),
        (min_lng, max_lat),
    )


CITY_CENTER = (48.2082, 16.3738)

DISTRICTS = DistrictRules(
    boxes=(
        DistrictBox(district=1, name="Innere Stadt", min_lat=48.200, max_lat=48.220, min_lng=16.355, max_lng=16.385),
        DistrictBox(district=2, name="Leopoldstadt", min_lat=48.205, max_lat=48.235, min_lng=16.385, max_lng=16.420),
        DistrictBox(district=7, name="Neubau", min_lat=48.195, max_lat=48.215, min_lng=16.335, max_lng=16.360),
    )
)

BUILDING_CLASSES = {
    "I": BuildingClass(name="I", max_height=9, max_floors=2, far=1.0, description="Low-rise residential"),
    "II": BuildingClass(name="II", max_height=12, max_floors=3, far=1.3, description="Medium residential"),
    "III": BuildingClass(name="III", max_height=16, max_floors=4, far=1.5, description="Urban residential"),
    "IV": BuildingClass(name="IV", max_height=21, max_floors=6, far=2.0, description="Dense urban"),
    "V": BuildingClass(name="V", max_height=26, max_floors=7, far=2.5, description="High-density urban"),
    "VI": BuildingClass(name="VI", max_height=35, max_floors=10, far=3.0, description="City center high-rise"),
}

ZONING = ZoningRules(
    building_classes=BUILDING_CLASSES,
    district_classes={1: "IV", 2: "III", 7: "IV"},
    default_class="III",
    suggestion_bands=((9, "I"), (12, "II"), (16, "III"), (21, "IV"), (26, "V")),
    top_class="VI",
    protection_zones=(
        ProtectionZone(
            id="district1_core",
            name="Innere Stadt Core Protection",
            polygon=_rect(16.3550, 48.2050, 16.3850, 48.2150),
            restrictions=("facade_preservation", "height_limit", "material_approval"),
        ),
        ProtectionZone(
            id="district7_spittelberg",
            name="Spittelberg Historic Quarter",
            polygon=_rect(16.3480, 48.2020, 16.3580, 48.2080),
            restrictions=("facade_preservation", "roof_style"),
        ),
    ),
)

HERITAGE = HeritageRules(
    buffer_polygon=_rect(16.3550, 48.2000, 16.3900, 48.2200),
    height_limit=43,
    review_height=35,
    landmarks=(
        Landmark(name="St. Stephen's Cathedral", lat=48.2084, lng=16.3731, protection_radius=200),
        Landmark(name="Hofburg Palace", lat=48.2064, lng=16.3659, protection_radius=300),
        Landmark(name="Vienna State Opera", lat=48.2036, lng=16.3692, protection_radius=150),
    ),
    protocol_district=1,
    buffer_requirements=("MA 19 approval", "Heritage impact assessment", "Public consultation"),
)

SUBSURFACE = SubsurfaceRules(
    lines=(
        TransitLine(
            name="U1",
            color="#E20E17",
            tunnel_depth=20,
            stations=(
                Station(name="Stephansplatz", lat=48.2084, lng=16.3725),
                Station(name="Schwedenplatz", lat=48.2120, lng=16.3775),
                Station(name="Praterstern", lat=48.2189, lng=16.3917),
            ),
        ),
        TransitLine(
            name="U2",
            color="#9A57A3",
            tunnel_depth=15,
            stations=(
                Station(name="Rathaus", lat=48.2107, lng=16.3565),
                Station(name="Schottentor", lat=48.2154, lng=16.3611),
                Station(name="Praterstern", lat=48.2189, lng=16.3917),
            ),
        ),
        TransitLine(
            name="U3",
            color="#F39200",
            tunnel_depth=18,
            stations=(
                Station(name="Stephansplatz", lat=48.2084, lng=16.3725),
                Station(name="Herrengasse", lat=48.2107, lng=16.3658),
                Station(name="Volkstheater", lat=48.2052, lng=16.3589),
            ),
        ),
        TransitLine(
            name="U4",
            color="#228B22",
            tunnel_depth=12,
            stations=(
                Station(name="Schwedenplatz", lat=48.2120, lng=16.3775),
                Station(name="Landstraße", lat=48.2063, lng=16.3868),
                Station(name="Karlsplatz", lat=48.2007, lng=16.3692),
            ),
        ),
    ),
    restricted_requirements=("Geotechnical study", "Vibration analysis", "Wiener Linien coordination"),
)

CLIMATE = ClimateRules(
    heat_center=CITY_CENTER,
    heat_bands=(
        HeatIslandBand(category="extreme", max_km=1, intensity=4.5),
        HeatIslandBand(category="high", max_km=2, intensity=3.0),
        HeatIslandBand(category="moderate", max_km=4, intensity=1.5),
        HeatIslandBand(category="low", max_km=None, intensity=0.5),
    ),
    flood_zone=FloodZone(
        name="Donaukanal HQ100",
        polygon=_rect(16.3750, 48.2100, 16.4000, 48.2250),
        minimum_elevation=2.5,
        districts=(2,),
    ),
)

SEISMIC = SeismicRules(
    boundary_longitude=16.35,
    bedrock=GeologicalZone(name="Flysch Zone (Bedrock)", pga=0.06, amplification=1.0),
    sediment=GeologicalZone(name="Vienna Basin (Sediment)", pga=0.08, amplification=1.4),
    upgraded_systems=("dual_system", "damped", "base_isolated"),
    materials={
        "concrete": MaterialProfile(
            label="Reinforced Concrete", weight_multiplier=1.0, flexibility=0.8, carbon_factor=1.0
        ),
        "timber": MaterialProfile(
            label="Cross-Laminated Timber (CLT)", weight_multiplier=0.55, flexibility=1.2, carbon_factor=0.3
        ),
    },
)

WIND = WindRules()

VIENNA_REGULATIONS = Regulations(
    name="Vienna",
    version="AT-V2.0",
    districts=DISTRICTS,
    zoning=ZONING,
    heritage=HERITAGE,
    subsurface=SUBSURFACE,
    climate=CLIMATE,
    seismic=SEISMIC,
    wind=WIND,
)
