"""Rule evaluators: one per regulatory concern, all sharing the AuditRule contract."""

from archishield.audits.base import AuditRule, Findings
from archishield.audits.climate import ClimateAudit
from archishield.audits.heritage import HeritageAudit
from archishield.audits.registry import DOMAIN_ORDER, AuditRegistry
from archishield.audits.seismic import SeismicAudit
from archishield.audits.subsurface import SubsurfaceAudit
from archishield.audits.wind_load import WindLoadAudit
from archishield.audits.zoning import ZoningAudit

__all__ = [
    "AuditRegistry",
    "AuditRule",
    "ClimateAudit",
    "DOMAIN_ORDER",
    "Findings",
    "HeritageAudit",
    "SeismicAudit",
    "SubsurfaceAudit",
    "WindLoadAudit",
    "ZoningAudit",
]
