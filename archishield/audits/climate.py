"""Climate audit — sealing, urban heat island, flooding and roof mandates."""

from __future__ import annotations

import math

from archishield.audits.base import AuditRule, Findings
from archishield.models.building import Building
from archishield.models.context import AuditContext
from archishield.models.results import AuditResult, Severity
from archishield.regulations.schema import ClimateRules, HeatIslandBand
from archishield.scoring import round_half_up


class ClimateAudit(AuditRule):
    """Independent climate-code checks whose score deltas simply add up.

    Every check runs regardless of the others; a blocking surface-seal
    violation does not short-circuit the mandates.
    """

    regulation_section = "climate"
    rules: ClimateRules

    @property
    def name(self) -> str:
        return "climate"

    @property
    def domain(self) -> str:
        return "climate"

    @property
    def description(self) -> str:
        return "Surface seal, heat island, HQ100 flood zone, green roof, solar and retention."

    def heat_island(self, lat: float, lng: float) -> HeatIslandBand:
        """Classify by planar degree distance from the heat centre."""
        c_lat, c_lng = self.rules.heat_center
        km = math.hypot(lat - c_lat, lng - c_lng) * self.rules.km_per_degree
        for band in self.rules.heat_bands:
            if band.max_km is None or km < band.max_km:
                return band
        return self.rules.heat_bands[-1]

    def execute(self, building: Building, context: AuditContext) -> AuditResult:
        rules = self.rules
        f = Findings()
        seal = building.surface_seal

        if seal > rules.max_surface_seal:
            f.fail()
            f.penalize(rules.seal_block_penalty)
            f.constraint(
                "SURFACE_SEAL_EXCEEDED",
                Severity.BLOCKING,
                f"Surface seal {seal:g}% exceeds {rules.max_surface_seal:g}% limit - AUTOMATIC REJECTION",
                actual=seal,
                limit=rules.max_surface_seal,
                remedy="Reduce sealed surface or apply for variance with extensive greening",
            )
        elif seal > rules.high_surface_seal:
            f.penalize(rules.high_seal_penalty)
            f.constraint(
                "HIGH_SEAL",
                Severity.WARNING,
                f"Surface seal {seal:g}% requires enhanced greening measures",
                actual=seal,
            )

        band = self.heat_island(building.latitude, building.longitude)
        f.data["uhi"] = {"category": band.category, "intensity": band.intensity}
        if band.category in rules.greening_categories:
            f.constraint(
                "UHI_HOTSPOT",
                Severity.IMPORTANT,
                f"Located in {band.category} UHI zone (+{band.intensity:g}°C)",
                category=band.category,
                intensity=band.intensity,
                requirements=["Façade greening mandatory", "Cool roof materials required"],
            )
            f.mandate("FACADE_GREENING", "Façade greening required", "UHI intensity mitigation")
            f.penalize(rules.heat_penalty)

        zone = rules.flood_zone
        in_flood_zone = zone is not None and zone.applies(
            context.district, building.latitude, building.longitude
        )
        f.data["flood_zone"] = in_flood_zone
        if in_flood_zone:
            f.constraint(
                "HQ100_FLOOD_ZONE",
                Severity.CRITICAL,
                "Located in HQ100 flood zone - elevated ground floor required",
                zone=zone.name,
                minimum_elevation=zone.minimum_elevation,
            )
            if building.ground_elevation < zone.minimum_elevation:
                f.penalize(rules.flood_penalty)
                f.mandate(
                    "FLOOD_ELEVATION",
                    f"Ground floor must be {zone.minimum_elevation:g}m above grade",
                    "HQ100 flood protection",
                    current=building.ground_elevation,
                    required=zone.minimum_elevation,
                )

        roof = building.roof_area
        if building.footprint >= rules.green_roof_threshold and not building.has_green_roof:
            area = round_half_up(roof * rules.green_roof_coverage)
            f.mandate(
                "GREEN_ROOF",
                f"Green roof required ({area}sqm minimum)",
                f"Footprint {building.footprint:g}sqm exceeds {rules.green_roof_threshold:g}sqm threshold",
                area=area,
            )
            f.penalize(rules.green_roof_penalty)

        if roof >= rules.solar_threshold and not building.has_solar_panels:
            area = round_half_up(roof * rules.solar_coverage)
            f.mandate(
                "SOLAR_INSTALLATION",
                f"Solar panels required ({area}sqm / {round_half_up(rules.solar_coverage * 100)}% of roof)",
                "2023 Vienna Building Code Amendment §7.3",
                area=area,
            )
            f.penalize(rules.solar_penalty)

        volume = round_half_up(roof * rules.water_retention_rate * 10) / 10
        f.mandate(
            "WATER_RETENTION",
            f"Rainwater retention system: {volume:g}m³ capacity",
            "Stormwater management requirement",
            volume=volume,
        )

        if seal > rules.permeable_paving_hint:
            f.recommendations.append("Consider permeable paving for walkways")
        if band.category == "extreme":
            f.recommendations.append("Use high-albedo roofing materials (SRI > 78)")
        if in_flood_zone:
            f.recommendations.append("Install backflow prevention on all drainage")

        return f.to_result(self.name)
