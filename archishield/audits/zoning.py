"""Zoning audit — building class limits, contextual variance, protection zones."""

from __future__ import annotations

from archishield.audits.base import AuditRule, Findings
from archishield.models.building import Building
from archishield.models.context import AuditContext
from archishield.models.results import AuditResult, Severity
from archishield.regulations.schema import ZoningRules
from archishield.scoring import round_half_up


class ZoningAudit(AuditRule):
    """Height and floor limits by district class, softened by neighbourhood scale.

    A building taller than its regulatory class but no taller than the
    surrounding fabric gets a variance opportunity instead of a violation.
    """

    regulation_section = "zoning"
    rules: ZoningRules

    @property
    def name(self) -> str:
        return "zoning"

    @property
    def domain(self) -> str:
        return "zoning"

    @property
    def description(self) -> str:
        return "Bauklasse height/floor limits with contextual variance and Schutzzone checks."

    def contextual_limit(self, regulatory_height: float, context: AuditContext) -> tuple[int, str]:
        """Return the neighbourhood-derived height ceiling and the suggested class."""
        hood = context.neighborhood
        suggested = self.rules.suggested_class_name(hood.avg_height or regulatory_height)
        baselines = [regulatory_height, self.rules.building_classes[suggested].max_height]
        if hood.max_height > 0:
            baselines.append(hood.max_height * self.rules.context_max_factor)
        return round_half_up(max(baselines)), suggested

    def execute(self, building: Building, context: AuditContext) -> AuditResult:
        rules = self.rules
        f = Findings()
        district = context.district
        district_label = district if district is not None else "(unknown)"

        regulatory = rules.class_for_district(district)
        limit, suggested_name = self.contextual_limit(regulatory.max_height, context)
        suggested = rules.building_classes[suggested_name]

        f.data.update(
            building_class=regulatory.model_dump(),
            suggested_class=suggested.model_dump(),
            contextual_limit=limit,
            can_upgrade_class=suggested.max_height > regulatory.max_height,
            neighborhood=context.neighborhood.model_dump(exclude={"nearest"}),
            protection_zone=None,
        )

        height = building.height
        if height > regulatory.max_height:
            f.fail()
            if height <= limit:
                f.penalize(rules.variance_penalty)
                f.constraint(
                    "HEIGHT_VARIANCE_OPPORTUNITY",
                    Severity.IMPORTANT,
                    f"Building height ({height:g}m) exceeds District {district_label} default "
                    f"({regulatory.max_height:g}m), but aligns with neighborhood fabric ({limit}m). "
                    "High variance potential.",
                    limit=regulatory.max_height,
                    contextual_limit=limit,
                    actual=height,
                    suggested_class=suggested_name,
                )
            else:
                f.penalize(rules.violation_penalty)
                f.constraint(
                    "HEIGHT_VIOLATION",
                    Severity.CRITICAL,
                    f"Height ({height:g}m) exceeds both regulatory Bauklasse {regulatory.name} "
                    f"({regulatory.max_height:g}m) and contextual scale ({limit}m).",
                    limit=regulatory.max_height,
                    contextual_limit=limit,
                    actual=height,
                )

        if building.floors > regulatory.max_floors:
            f.penalize(rules.floor_penalty)
            f.constraint(
                "FLOOR_WARNING",
                Severity.WARNING,
                f"{building.floors} floors exceeds typical for Bauklasse {regulatory.name} "
                f"({regulatory.max_floors} floors)",
                limit=regulatory.max_floors,
                actual=building.floors,
            )

        zone = next(
            (z for z in rules.protection_zones if z.contains(building.latitude, building.longitude)),
            None,
        )
        if zone is not None:
            f.data["protection_zone"] = {
                "id": zone.id,
                "name": zone.name,
                "restrictions": list(zone.restrictions),
            }
            f.penalize(rules.protection_zone_penalty)
            f.constraint(
                "SCHUTZZONE",
                Severity.IMPORTANT,
                f"Located in {zone.name} - special approvals required",
                zone=zone.id,
                restrictions=list(zone.restrictions),
            )

        if not f.constraints:
            f.recommendations.append("Zoning clear - proceed to pre-submission meeting")
        else:
            f.recommendations.append("Consult MA 21 for zoning variance application")
            if zone is not None:
                f.recommendations.append("Contact MA 19 for heritage assessment")

        return f.to_result(self.name)
