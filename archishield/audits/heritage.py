"""Heritage audit — UNESCO buffer height ceiling and landmark proximity."""

from __future__ import annotations

from archishield.audits.base import AuditRule, Findings
from archishield.geo.spatial import distance, point_in_polygon
from archishield.models.building import Building
from archishield.models.context import AuditContext
from archishield.models.results import AuditResult, Severity
from archishield.regulations.schema import HeritageRules
from archishield.scoring import round_half_up


class HeritageAudit(AuditRule):
    """World-heritage buffer enforcement.

    Unlike zoning there is no contextual variance: a building above the
    buffer ceiling is blocked outright.  Each landmark whose protection
    radius contains the site adds its own penalty.
    """

    regulation_section = "heritage"
    rules: HeritageRules

    @property
    def name(self) -> str:
        return "heritage"

    @property
    def domain(self) -> str:
        return "heritage"

    @property
    def description(self) -> str:
        return "UNESCO buffer height ceiling, enhanced review and landmark protection radii."

    def execute(self, building: Building, context: AuditContext) -> AuditResult:
        rules = self.rules
        f = Findings()
        lat, lng, height = building.latitude, building.longitude, building.height

        in_buffer = point_in_polygon(lat, lng, rules.buffer_polygon)
        f.data.update(unesco_zone=in_buffer, height_limit=None, landmarks=[])

        if in_buffer:
            f.data["height_limit"] = rules.height_limit
            f.constraint(
                "UNESCO_BUFFER",
                Severity.CRITICAL,
                "Located within UNESCO World Heritage buffer zone",
                requirements=list(rules.buffer_requirements),
            )

            if height > rules.height_limit:
                f.fail()
                f.penalize(rules.ceiling_penalty)
                f.constraint(
                    "UNESCO_HEIGHT_VIOLATION",
                    Severity.BLOCKING,
                    f"Height {height:g}m violates UNESCO {rules.height_limit:g}m limit - AUTOMATIC REJECTION",
                    limit=rules.height_limit,
                    actual=height,
                )
            elif height > rules.review_height:
                f.penalize(rules.review_penalty)
                f.constraint(
                    "HEIGHT_REVIEW",
                    Severity.WARNING,
                    f"Height {height:g}m requires enhanced heritage review (>{rules.review_height:g}m)",
                    limit=rules.review_height,
                    actual=height,
                )

        for landmark in rules.landmarks:
            d = distance(lat, lng, landmark.lat, landmark.lng)
            if d >= landmark.protection_radius:
                continue
            rounded = round_half_up(d)
            f.data["landmarks"].append(
                {
                    "name": landmark.name,
                    "distance": rounded,
                    "protection_radius": landmark.protection_radius,
                }
            )
            f.penalize(rules.landmark_penalty)
            f.constraint(
                "LANDMARK_PROXIMITY",
                Severity.IMPORTANT,
                f"{rounded}m from {landmark.name} - design review required",
                landmark=landmark.name,
                distance=rounded,
            )

        if rules.protocol_district is not None and context.district == rules.protocol_district:
            f.constraint(
                "DISTRICT_1_PROTOCOL",
                Severity.INFO,
                f"District {rules.protocol_district} requires MA 19 preliminary consultation before submission",
            )

        if in_buffer:
            f.recommendations.append("Engage heritage architect for facade design")
            f.recommendations.append("Prepare visual impact study with 3D renderings")
        if f.data["landmarks"]:
            f.recommendations.append("Commission independent heritage impact assessment")
        if f.passed:
            f.recommendations.append("Heritage constraints manageable with proper documentation")

        return f.to_result(self.name)
