"""Audit result models — constraints, mandates, per-evaluator and aggregate verdicts."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archishield.models.building import Building
from archishield.scoring import clamp_score


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Severity(str, Enum):
    """Ordered constraint importance: info < warning < important < critical < blocking."""

    INFO = "info"
    WARNING = "warning"
    IMPORTANT = "important"
    CRITICAL = "critical"
    BLOCKING = "blocking"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def at_least(self, other: Severity) -> bool:
        return self.rank >= other.rank


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.IMPORTANT: 2,
    Severity.CRITICAL: 3,
    Severity.BLOCKING: 4,
}


class AuditStatus(str, Enum):
    """Overall verdict of an aggregate audit."""

    REJECTED = "REJECTED"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


STATUS_LABELS: dict[AuditStatus, str] = {
    AuditStatus.REJECTED: "REJECTED",
    AuditStatus.HIGH: "HIGH - Ready for Submission",
    AuditStatus.MEDIUM: "MEDIUM - Proceed with Caution",
    AuditStatus.LOW: "LOW - Significant Issues",
}


class Constraint(BaseModel):
    """One violation or advisory finding produced by an evaluator."""

    model_config = ConfigDict(frozen=True)

    type: str
    """Fixed tag, e.g. 'HEIGHT_VIOLATION', 'SCHUTZZONE', 'TUNNEL_CRITICAL'."""

    severity: Severity
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    """Evaluator-specific values: limits, actual values, distances."""


class Mandate(BaseModel):
    """A required future action, distinct from a pass/fail constraint."""

    model_config = ConfigDict(frozen=True)

    type: str
    description: str
    reason: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class AuditResult(BaseModel):
    """One evaluator's verdict.

    ``score`` is clamped to [0, 100] on construction, so evaluators may
    subtract penalties freely.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    passed: bool = True
    score: float = 100.0
    constraints: list[Constraint] = Field(default_factory=list)
    mandates: list[Mandate] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    """Structural remediation hints."""

    recommendations: list[str] = Field(default_factory=list)
    reasoning: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    """Free-form diagnostic values."""

    @field_validator("score")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_score(value)


class Remediation(BaseModel):
    """A suggested corrective action for a constraint or mandate."""

    model_config = ConfigDict(frozen=True)

    type: str
    title: str
    description: str
    action: dict[str, Any] | None = None
    """Building overrides that apply the fix, or None when it needs manual work."""

    impact: str = ""
    source_type: str
    """Constraint or mandate type this remediation answers."""

    severity: Severity | None = None
    priority: int = 3
    """1 = most urgent."""


class AggregateResult(BaseModel):
    """Combined verdict over all five domains.

    Field names are stable; ``model_dump(mode="json")`` is the wire format.
    """

    success: bool = True
    district: int | None = None
    building: Building
    audits: dict[str, AuditResult] = Field(default_factory=dict)
    """Per-evaluator results keyed by evaluator name."""

    domain_scores: dict[str, float] = Field(default_factory=dict)
    domain_passed: dict[str, bool] = Field(default_factory=dict)
    feasibility: int = 0
    status: AuditStatus = AuditStatus.LOW
    key_risk: str = ""
    constraints: list[Constraint] = Field(default_factory=list)
    mandates: list[Mandate] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    passed_count: int = 0
    total_domains: int = 5
    remediations: list[Remediation] = Field(default_factory=list)
    """Prioritised corrective actions, populated when an advisor is attached."""

    timestamp: datetime = Field(default_factory=_utc_now)

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]

    @property
    def has_blocking(self) -> bool:
        return any(c.severity == Severity.BLOCKING for c in self.constraints)

    def critical_constraints(self) -> list[Constraint]:
        """Blocking and critical constraints in aggregate order."""
        return [c for c in self.constraints if c.severity.at_least(Severity.CRITICAL)]

    def narration_context(self) -> dict[str, Any]:
        """Structured payload for an external explanation generator."""
        return {
            "district": self.district,
            "building": {
                "height": self.building.height,
                "floors": self.building.floors,
                "material": self.building.material.value,
            },
            "feasibility": self.feasibility,
            "status": self.status.value,
            "domain_scores": dict(self.domain_scores),
            "violations": [
                {"type": c.type, "severity": c.severity.value, "message": c.message}
                for c in self.critical_constraints()
            ],
            "mandates": [m.type for m in self.mandates],
        }


class AuditFailure(BaseModel):
    """Run-level failure: the audit did not execute.

    Structurally distinct from an ``AggregateResult`` with status
    REJECTED, which is a successful run with a poor verdict.
    """

    success: bool = False
    error_type: str = "VALIDATION_ERROR"
    error: str
    messages: list[str] = Field(default_factory=list)
    district: int | None = None
    timestamp: datetime = Field(default_factory=_utc_now)
