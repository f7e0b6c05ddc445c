"""AuditContext — ambient facts shared read-only by every evaluator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from archishield.geo.features import Feature
from archishield.geo.neighborhood import Neighbor, NeighborhoodStats

__all__ = ["AuditContext", "Neighbor", "NeighborhoodStats"]


class AuditContext(BaseModel):
    """Facts that do not depend on the building's own shape.

    All optional facts are resolved to explicit values when the context
    is built, so evaluators never check for missing fields.
    """

    model_config = ConfigDict(frozen=True)

    district: int | None = None
    """Administrative district, or None outside the known areas."""

    neighborhood: NeighborhoodStats = Field(default_factory=NeighborhoodStats)
    features: tuple[Feature, ...] = ()
    """Read-only dataset for evaluators that run their own radius queries."""
