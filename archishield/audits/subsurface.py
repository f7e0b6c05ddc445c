"""Subsurface audit — U-Bahn tunnel proximity and basement depth."""

from __future__ import annotations

import math

from archishield.audits.base import AuditRule, Findings
from archishield.geo.features import Feature
from archishield.geo.spatial import distance, nearest_line_distance
from archishield.models.building import Building
from archishield.models.context import AuditContext
from archishield.models.results import AuditResult, Severity
from archishield.regulations.schema import SubsurfaceRules, TransitLine
from archishield.scoring import round_half_up


class SubsurfaceAudit(AuditRule):
    """Classify distance to the nearest transit line into fixed bands.

    Station coordinates stand in for the tunnel alignment.  The depth
    check uses the tunnel depth of whichever line is nearest,
    independently of the horizontal band.
    """

    regulation_section = "subsurface"
    rules: SubsurfaceRules

    @property
    def name(self) -> str:
        return "subsurface"

    @property
    def domain(self) -> str:
        return "subsurface"

    @property
    def description(self) -> str:
        return "Tunnel proximity bands and basement depth clearance."

    def nearest_line(self, lat: float, lng: float) -> tuple[TransitLine | None, float]:
        """Return the nearest line and its raw distance; ties keep the first line."""
        best: TransitLine | None = None
        best_distance = math.inf
        for line in self.rules.lines:
            polyline = Feature.line([(s.lng, s.lat) for s in line.stations], name=line.name)
            d = nearest_line_distance(lat, lng, [polyline])
            if d < best_distance:
                best, best_distance = line, d
        return best, best_distance

    def execute(self, building: Building, context: AuditContext) -> AuditResult:
        rules = self.rules
        f = Findings()
        lat, lng = building.latitude, building.longitude

        line, raw = self.nearest_line(lat, lng)
        if line is None:
            f.data.update(nearest_line=None, nearest_distance=None)
            f.recommendations.append("No subsurface constraints - standard foundation permissible")
            return f.to_result(self.name)

        dist = round_half_up(raw)
        station = min(line.stations, key=lambda s: distance(lat, lng, s.lat, s.lng))
        f.data.update(
            nearest_line={
                "name": line.name,
                "station": station.name,
                "color": line.color,
                "tunnel_depth": line.tunnel_depth,
            },
            nearest_distance=dist,
        )

        if dist < rules.critical_distance:
            f.fail()
            f.penalize(rules.critical_penalty)
            f.constraint(
                "TUNNEL_CRITICAL",
                Severity.BLOCKING,
                f"{dist}m from {line.name} tunnel - CONSTRUCTION BAN without Wiener Linien approval",
                distance=dist,
                line=line.name,
            )
        elif dist < rules.restricted_distance:
            f.penalize(rules.restricted_penalty)
            f.constraint(
                "TUNNEL_RESTRICTED",
                Severity.CRITICAL,
                f"{dist}m from {line.name} - Enhanced structural assessment required",
                distance=dist,
                line=line.name,
                requirements=list(rules.restricted_requirements),
            )
            f.requirements.extend(rules.restricted_requirements)
        elif dist < rules.monitoring_distance:
            f.penalize(rules.monitoring_penalty)
            f.constraint(
                "TUNNEL_MONITORING",
                Severity.WARNING,
                f"{dist}m from {line.name} - Vibration monitoring required during construction",
                distance=dist,
                line=line.name,
            )

        depth = building.basement_depth
        if depth > 0 and depth > line.tunnel_depth - rules.depth_clearance:
            max_depth = line.tunnel_depth - rules.recommended_clearance
            f.penalize(rules.depth_penalty)
            f.constraint(
                "DEPTH_CONFLICT",
                Severity.CRITICAL,
                f"Basement depth {depth:g}m may conflict with tunnel at {line.tunnel_depth:g}m",
                basement_depth=depth,
                tunnel_depth=line.tunnel_depth,
                recommendation=f"Max recommended: {max_depth:g}m",
            )

        if dist < rules.monitoring_distance:
            f.recommendations.append("Engage Wiener Linien for pre-construction consultation")
            f.recommendations.append("Install vibration monitoring equipment")
        if dist < rules.restricted_distance:
            f.recommendations.append("Commission independent geotechnical assessment")
            f.recommendations.append("Consider pile foundation alternatives")
        if dist >= rules.clear_distance:
            f.recommendations.append("No subsurface constraints - standard foundation permissible")

        return f.to_result(self.name)
