"""Abstract AuditRule interface and the findings accumulator evaluators share."""

from __future__ import annotations

import abc
from typing import Any, ClassVar

from pydantic import BaseModel

from archishield.models.building import Building
from archishield.models.context import AuditContext
from archishield.models.results import AuditResult, Constraint, Mandate, Severity
from archishield.regulations.schema import Regulations
from archishield.regulations.vienna import VIENNA_REGULATIONS


class Findings:
    """Mutable scratchpad an evaluator fills before freezing it into a result."""

    def __init__(self) -> None:
        self.passed = True
        self.score = 100.0
        self.constraints: list[Constraint] = []
        self.mandates: list[Mandate] = []
        self.requirements: list[str] = []
        self.recommendations: list[str] = []
        self.reasoning: list[str] = []
        self.data: dict[str, Any] = {}

    def penalize(self, points: float) -> None:
        self.score -= points

    def fail(self) -> None:
        self.passed = False

    def constraint(self, type_: str, severity: Severity, message: str, **data: Any) -> None:
        self.constraints.append(
            Constraint(type=type_, severity=severity, message=message, data=data)
        )

    def mandate(self, type_: str, description: str, reason: str = "", **data: Any) -> None:
        self.mandates.append(
            Mandate(type=type_, description=description, reason=reason, data=data)
        )

    def to_result(self, name: str) -> AuditResult:
        return AuditResult(
            name=name,
            passed=self.passed,
            score=self.score,
            constraints=list(self.constraints),
            mandates=list(self.mandates),
            requirements=list(self.requirements),
            recommendations=list(self.recommendations),
            reasoning=list(self.reasoning),
            data=dict(self.data),
        )


class AuditRule(abc.ABC):
    """Base class for all rule evaluators.

    Evaluators are pure: ``execute`` reads only the building, the context
    and the regulation section injected at construction.  They never
    raise for a well-formed Building and AuditContext.

    Parameters
    ----------
    rules:
        The evaluator's regulation section.  Defaults to the Vienna values.
    """

    regulation_section: ClassVar[str]
    """Attribute of ``Regulations`` this evaluator consumes."""

    def __init__(self, rules: BaseModel | None = None) -> None:
        self.rules = rules if rules is not None else getattr(VIENNA_REGULATIONS, self.regulation_section)

    @classmethod
    def from_regulations(cls, regulations: Regulations) -> AuditRule:
        return cls(getattr(regulations, cls.regulation_section))

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short evaluator identifier (e.g. 'zoning', 'seismic')."""

    @property
    @abc.abstractmethod
    def domain(self) -> str:
        """Scored domain this evaluator contributes to."""

    @property
    @abc.abstractmethod
    def description(self) -> str:
        """Human-readable description."""

    @abc.abstractmethod
    def execute(self, building: Building, context: AuditContext) -> AuditResult:
        """Evaluate *building* in *context* and return a frozen verdict."""
