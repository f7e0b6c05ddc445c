"""RemediationAdvisor — rule-based corrective actions for audit findings.

Each rule answers one constraint or mandate type.  Rules whose fix can
be expressed as building parameters return an ``action`` dict that
:func:`apply_actions` merges into the caller's overrides for a what-if
re-run; the rest need manual work and carry ``action=None``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Union

from pydantic.alias_generators import to_camel
from archishield.models.building import Building, Material
from archishield.models.results import Constraint, Mandate, Remediation, Severity

logger = logging.getLogger(__name__)

Finding = Union[Constraint, Mandate]
RuleFn = Callable[[Finding, Building], dict[str, Any]]


def _height_reduction(finding: Finding, building: Building) -> dict[str, Any]:
    limit = finding.data.get("limit")
    target = finding.data.get("contextual_limit") or limit
    basis = "Urban Fabric" if finding.data.get("contextual_limit") else "Bauklasse"
    return {
        "type": "HEIGHT_REDUCTION",
        "title": "Reduce Building Height",
        "description": f"Lower the building height from {building.height:g}m to {target:g}m "
        f"to comply with {basis} limits.",
        "action": {"height": target} if target else None,
        "impact": "Resolves zoning violation",
    }


def _variance_application(finding: Finding, building: Building) -> dict[str, Any]:
    return {
        "type": "VARIANCE_APPLICATION",
        "title": "Apply for Zoning Variance",
        "description": f"Your building fits the neighborhood context "
        f"({finding.data.get('contextual_limit')}m). Apply for a variance with MA 37.",
        "action": None,
        "impact": "High approval probability due to context alignment",
    }


def _material_change(finding: Finding, building: Building) -> dict[str, Any]:
    return {
        "type": "MATERIAL_CHANGE",
        "title": "Switch to CLT Construction",
        "description": "Cross-Laminated Timber reduces seismic stress due to lower mass "
        "and higher flexibility.",
        "action": {"material": Material.TIMBER.value},
        "impact": "Moves the tall sediment-zone case onto the timber branch",
    }


def _upper_floor_setback(finding: Finding, building: Building) -> dict[str, Any]:
    return {
        "type": "FOOTPRINT_REDUCTION",
        "title": "Reduce Upper Floor Footprint",
        "description": "Step back the top 2-3 floors by 2m to reduce wind surface area.",
        "action": None,
        "impact": "Reduces wind pressure coefficient",
    }


def _permeable_surfaces(finding: Finding, building: Building) -> dict[str, Any]:
    actual = finding.data.get("actual", building.surface_seal)
    return {
        "type": "PERMEABLE_SURFACES",
        "title": "Add Permeable Paving",
        "description": f"Reduce sealed surface from {actual:g}% to below 80% using permeable materials.",
        "action": {"surface_seal": 78},
        "impact": "Unblocks Climate compliance",
    }


def _foundation_redesign(finding: Finding, building: Building) -> dict[str, Any]:
    action = None
    tunnel_depth = finding.data.get("tunnel_depth")
    if tunnel_depth is not None:
        action = {"basement_depth": max(0.0, tunnel_depth - 8)}
    return {
        "type": "FOUNDATION_REDESIGN",
        "title": "Redesign Foundation",
        "description": "Coordinate with Wiener Linien on a shallower basement or a pile "
        "foundation clear of the tunnel envelope.",
        "action": action,
        "impact": "Removes subsurface conflict",
    }


def _green_roof(finding: Finding, building: Building) -> dict[str, Any]:
    return {
        "type": "ADD_GREEN_ROOF",
        "title": "Install Green Roof System",
        "description": "Extensive green roof installation meeting Vienna minimum requirements.",
        "action": {"has_green_roof": True},
        "impact": "Satisfies Climate mandate",
    }


def _solar(finding: Finding, building: Building) -> dict[str, Any]:
    return {
        "type": "ADD_SOLAR",
        "title": "Install Solar Panels",
        "description": "PV installation covering 20% of roof area per 2023 Building Code.",
        "action": {"has_solar_panels": True},
        "impact": "Satisfies solar mandate",
    }


REMEDIATION_RULES: dict[str, tuple[int, RuleFn]] = {
    "HEIGHT_VIOLATION": (1, _height_reduction),
    "HEIGHT_VARIANCE_OPPORTUNITY": (2, _variance_application),
    "SEISMIC_RISK": (1, _material_change),
    "WIND_LOAD_WARNING": (2, _upper_floor_setback),
    "SURFACE_SEAL_EXCEEDED": (1, _permeable_surfaces),
    "TUNNEL_CRITICAL": (1, _foundation_redesign),
    "DEPTH_CONFLICT": (1, _foundation_redesign),
    "GREEN_ROOF": (3, _green_roof),
    "SOLAR_INSTALLATION": (3, _solar),
}
"""Finding type -> (priority, builder).  Priority 1 is most urgent."""


class RemediationAdvisor:
    """Map findings to prioritised remediations.

    Parameters
    ----------
    rules:
        Rule table; defaults to :data:`REMEDIATION_RULES`.
    """

    def __init__(self, rules: Mapping[str, tuple[int, RuleFn]] | None = None) -> None:
        self.rules = dict(rules) if rules is not None else dict(REMEDIATION_RULES)

    def advise(
        self,
        constraints: Iterable[Constraint],
        mandates: Iterable[Mandate],
        building: Building,
    ) -> list[Remediation]:
        """Return remediations sorted by priority, keeping finding order within a priority."""
        remediations: list[Remediation] = []
        findings: list[Finding] = [*constraints, *mandates]
        for finding in findings:
            entry = self.rules.get(finding.type)
            if entry is None:
                continue
            priority, build = entry
            severity: Severity | None = getattr(finding, "severity", None)
            remediations.append(
                Remediation(
                    **build(finding, building),
                    source_type=finding.type,
                    severity=severity,
                    priority=priority,
                )
            )

        remediations.sort(key=lambda r: r.priority)
        logger.debug("Advised %d remediations", len(remediations))
        return remediations


def apply_actions(
    overrides: Mapping[str, Any] | None,
    remediations: Iterable[Remediation],
) -> dict[str, Any]:
    """Merge remediation actions into a copy of *overrides*.

    Actions are applied in the given order, so a later remediation for
    the same field wins.  Manual remediations (``action=None``) are
    skipped.  A camelCase key for the same field is replaced by the
    snake_case action key.  The input mapping is never modified.
    """
    merged = dict(overrides or {})
    for remediation in remediations:
        for key, value in (remediation.action or {}).items():
            merged.pop(to_camel(key), None)
            merged[key] = value
    return merged
