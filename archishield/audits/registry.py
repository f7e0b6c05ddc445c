"""AuditRegistry — register and query rule evaluators in declaration order."""

from __future__ import annotations

import logging

from archishield.audits.base import AuditRule
from archishield.regulations.schema import Regulations
from archishield.regulations.vienna import VIENNA_REGULATIONS

logger = logging.getLogger(__name__)

DOMAIN_ORDER: tuple[str, ...] = ("zoning", "heritage", "subsurface", "climate", "structural")
"""Scored domains in the order used for constraint union and key risk."""


class AuditRegistry:
    """Ordered collection of evaluators.

    Registration order is the declaration order: results, constraint
    unions and key-risk selection all follow it, regardless of how the
    evaluators are scheduled.
    """

    def __init__(self) -> None:
        self._rules: dict[str, AuditRule] = {}

    def register(self, rule: AuditRule) -> None:
        """Add an evaluator; re-registering a name replaces it in place."""
        self._rules[rule.name] = rule
        logger.debug("Registered evaluator: %s (%s)", rule.name, rule.domain)

    def auto_discover(self, regulations: Regulations = VIENNA_REGULATIONS) -> None:
        """Load the six built-in evaluators bound to *regulations*."""
        from archishield.audits.climate import ClimateAudit
        from archishield.audits.heritage import HeritageAudit
        from archishield.audits.seismic import SeismicAudit
        from archishield.audits.subsurface import SubsurfaceAudit
        from archishield.audits.wind_load import WindLoadAudit
        from archishield.audits.zoning import ZoningAudit

        for rule_cls in [
            ZoningAudit,
            HeritageAudit,
            SubsurfaceAudit,
            ClimateAudit,
            SeismicAudit,
            WindLoadAudit,
        ]:
            self.register(rule_cls.from_regulations(regulations))

    @classmethod
    def default(cls, regulations: Regulations = VIENNA_REGULATIONS) -> AuditRegistry:
        registry = cls()
        registry.auto_discover(regulations)
        return registry

    def get(self, name: str) -> AuditRule | None:
        """Get an evaluator by name."""
        return self._rules.get(name)

    def list_rules(self) -> list[AuditRule]:
        """Return all evaluators in declaration order."""
        return list(self._rules.values())

    def rules_for_domain(self, domain: str) -> list[AuditRule]:
        return [r for r in self._rules.values() if r.domain == domain]

    def __len__(self) -> int:
        return len(self._rules)
