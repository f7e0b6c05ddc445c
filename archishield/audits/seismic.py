"""Seismic audit — geological zone, height and material."""

from __future__ import annotations

from archishield.audits.base import AuditRule, Findings
from archishield.models.building import Building, Material
from archishield.models.context import AuditContext
from archishield.models.results import AuditResult, Severity
from archishield.regulations.schema import GeologicalZone, MaterialProfile, SeismicRules
from archishield.scoring import round_half_up


class SeismicAudit(AuditRule):
    """Seismic resilience from a longitude-split geology model.

    Bedrock always scores high.  In the sediment basin a tall building
    takes one of three branches depending on its material and structural
    system; shorter buildings get the standard sediment score with a
    timber bonus.
    """

    regulation_section = "seismic"
    rules: SeismicRules

    @property
    def name(self) -> str:
        return "seismic"

    @property
    def domain(self) -> str:
        return "structural"

    @property
    def description(self) -> str:
        return "Geological zone amplification with material and structural-system branches."

    def zone_for(self, longitude: float) -> tuple[GeologicalZone, bool]:
        """Return the zone and whether it is the sediment basin."""
        if longitude < self.rules.boundary_longitude:
            return self.rules.bedrock, False
        return self.rules.sediment, True

    def material_profile(self, material: Material) -> MaterialProfile | None:
        return self.rules.materials.get(material.value)

    def stress_level(self, height: float, zone: GeologicalZone, weight: float) -> int:
        base = height / self.rules.reference_height * 50
        soil = self.rules.sediment.amplification if zone.amplification > 1 else 1.0
        return min(round_half_up(base * soil * weight), 100)

    def execute(self, building: Building, context: AuditContext) -> AuditResult:
        rules = self.rules
        f = Findings()
        zone, sediment = self.zone_for(building.longitude)
        profile = self.material_profile(building.material)
        timber = building.material is Material.TIMBER
        system = building.structural_system.value if building.structural_system else None

        if sediment:
            f.reasoning.append(f"Geological Zone: {zone.name} - Amplification Risk")
        else:
            f.reasoning.append(f"Geological Zone: {zone.name} - Stable Foundation")

        if not sediment:
            f.score = rules.bedrock_score
            f.reasoning.append("Building sits on stable bedrock foundation")
        elif building.height > rules.tall_height:
            if timber:
                f.score = rules.tall_timber_score
                f.reasoning.append("CLT structure benefits from low mass and high ductility in sediment zone")
                f.requirements.append("Verify CLT connections per EN 1995-1-1 for seismic")
            elif system in rules.upgraded_systems:
                f.score = rules.tall_upgraded_score
                f.reasoning.append(f"High-rise concrete in sediment zone mitigated by {system} system")
                f.requirements.append("Verify damping system performance for sediment amplification")
            else:
                f.fail()
                f.score = rules.tall_unprotected_score
                f.reasoning.append("High-rise concrete in sediment zone without seismic damping")
                f.requirements.append("Damping System: Tuned Mass Damper or base isolation required")
                f.constraint(
                    "SEISMIC_RISK",
                    Severity.CRITICAL,
                    f"{building.height:g}m concrete structure in {zone.name} requires an upgraded "
                    "structural system",
                    height=building.height,
                    zone=zone.name,
                    structural_system=system,
                )
        else:
            bonus = rules.timber_bonus if timber else 0
            f.score = rules.sediment_score + bonus
            f.reasoning.append(
                "Standard seismic compliance within sediment zone" + (" (CLT bonus applied)" if bonus else "")
            )

        weight = profile.weight_multiplier if profile else 1.0
        f.data.update(
            zone=zone.name,
            pga=zone.pga,
            amplification=zone.amplification,
            stress_level=self.stress_level(building.height, zone, weight),
            material=profile.label if profile else building.material.value,
            structural_system=system,
        )
        return f.to_result(self.name)
