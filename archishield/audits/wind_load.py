"""Wind load audit — shielding by neighbouring structures."""

from __future__ import annotations

from archishield.audits.base import AuditRule, Findings
from archishield.geo.spatial import count_within_radius
from archishield.models.building import Building
from archishield.models.context import AuditContext
from archishield.models.results import AuditResult, Severity
from archishield.regulations.schema import WindRules
from archishield.scoring import round_half_up


class WindLoadAudit(AuditRule):
    """Three shielding bands; tall and exposed overrides to a hard fail."""

    regulation_section = "wind"
    rules: WindRules

    @property
    def name(self) -> str:
        return "wind_load"

    @property
    def domain(self) -> str:
        return "structural"

    @property
    def description(self) -> str:
        return "Neighbour-count shielding bands with a tall-and-exposed override."

    def neighbor_count(self, building: Building, context: AuditContext) -> int:
        """Structures within the shielding radius, excluding the audited one."""
        return count_within_radius(
            building.latitude,
            building.longitude,
            context.features,
            self.rules.radius,
            exclude_id=building.structure_id,
        )

    def stress_level(self, height: float, neighbors: int) -> int:
        height_factor = height / self.rules.reference_height * 80
        shielding = min(neighbors * 4, 60)
        return max(0, min(round_half_up(height_factor - shielding + 20), 100))

    def execute(self, building: Building, context: AuditContext) -> AuditResult:
        rules = self.rules
        f = Findings()
        n = self.neighbor_count(building, context)
        f.reasoning.append(
            f"Shielding Analysis: Identified {n} neighboring structures within {rules.radius:g}m"
        )

        if n < rules.exposed_below:
            f.fail()
            f.score = rules.exposed_score
            shielding = "None (Highly Exposed)"
            f.requirements.append("High-Wind Bracing: Reinforced Facade Class A+ REQUIREMENT")
            f.reasoning.append("Construction site is highly exposed; increased structural bracing mandated")
        elif n < rules.low_below:
            f.score = rules.low_score
            shielding = "Low"
            f.reasoning.append("Standard shielding: moderate wind exposure detected")
        else:
            f.score = rules.high_score
            shielding = "High (Protected)"
            f.reasoning.append("High shielding: site is well-protected by surrounding urban fabric")

        if building.height > rules.tall_height and n < rules.exposed_below:
            f.score = rules.tall_exposed_score
            f.requirements.append("Advanced Aerodynamics: Wind Tunnel Testing MANDATORY")
            f.reasoning.append("Extreme height combined with minimal shielding creates severe structural risk")

        if not f.passed:
            f.constraint(
                "WIND_LOAD_WARNING",
                Severity.CRITICAL,
                f"Site is highly exposed ({n} neighbouring structures within {rules.radius:g}m) - "
                "reinforced wind bracing required",
                neighbor_count=n,
                height=building.height,
            )

        f.data.update(
            neighbor_count=n,
            shielding=shielding,
            stress_level=self.stress_level(building.height, n),
        )
        return f.to_result(self.name)
