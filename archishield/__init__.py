"""ArchiShield — multi-domain building compliance audits for Vienna."""

__version__ = "1.0.0"

from archishield.audits.base import AuditRule
from archishield.audits.registry import AuditRegistry
from archishield.engine import AuditEngine, aggregate, run_audit
from archishield.geo.features import BuildingDataset, Feature
from archishield.models.building import Building, BuildingOverrides, Material, StructuralSystem
from archishield.models.context import AuditContext, NeighborhoodStats
from archishield.models.results import (
    AggregateResult,
    AuditFailure,
    AuditResult,
    AuditStatus,
    Constraint,
    Mandate,
    Remediation,
    Severity,
)
from archishield.normalizer import BuildingValidationError, normalize_building
from archishield.regulations import VIENNA_REGULATIONS, Regulations, RegulationsError, load_regulations
from archishield.remediation import RemediationAdvisor, apply_actions
from archishield.resolver import detect_district, resolve_context
from archishield.settings import AuditSettings, ConfigManager, configure_logging

__all__ = [
    "AggregateResult",
    "AuditContext",
    "AuditEngine",
    "AuditFailure",
    "AuditRegistry",
    "AuditResult",
    "AuditRule",
    "AuditSettings",
    "AuditStatus",
    "Building",
    "BuildingDataset",
    "BuildingOverrides",
    "BuildingValidationError",
    "ConfigManager",
    "Constraint",
    "Feature",
    "Mandate",
    "Material",
    "NeighborhoodStats",
    "Regulations",
    "RegulationsError",
    "Remediation",
    "RemediationAdvisor",
    "Severity",
    "StructuralSystem",
    "VIENNA_REGULATIONS",
    "aggregate",
    "apply_actions",
    "configure_logging",
    "detect_district",
    "load_regulations",
    "normalize_building",
    "resolve_context",
    "run_audit",
]
