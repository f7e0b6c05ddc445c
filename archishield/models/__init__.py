"""Domain models: building, audit context, and audit results."""

from archishield.models.building import Building, BuildingOverrides, Material, StructuralSystem
from archishield.models.context import AuditContext, Neighbor, NeighborhoodStats
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

__all__ = [
    "AggregateResult",
    "AuditContext",
    "AuditFailure",
    "AuditResult",
    "AuditStatus",
    "Building",
    "BuildingOverrides",
    "Constraint",
    "Mandate",
    "Material",
    "Neighbor",
    "NeighborhoodStats",
    "Remediation",
    "Severity",
    "StructuralSystem",
]
