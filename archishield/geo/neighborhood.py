"""Neighbourhood statistics models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Neighbor(BaseModel):
    """A nearby structure and its distance from the query point."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    height: float = 0.0
    distance: float
    """Great-circle distance in metres."""


class NeighborhoodStats(BaseModel):
    """Aggregated heights of the structures around a point.

    An empty neighbourhood is all zeros with no neighbours.
    """

    model_config = ConfigDict(frozen=True)

    count: int = 0
    avg_height: float = 0.0
    max_height: float = 0.0
    nearest: list[Neighbor] = Field(default_factory=list)
    """Up to the ten closest neighbours, ascending by distance."""

    radius: float = 0.0
