"""Building — the subject of an audit.

A Building is assembled once per audit request by the normalizer and is
immutable afterwards; every evaluator reads the same instance.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Material(str, Enum):
    """Primary construction material."""

    CONCRETE = "concrete"
    TIMBER = "timber"


class StructuralSystem(str, Enum):
    """Lateral structural system classification."""

    MOMENT_FRAME = "moment_frame"
    SHEAR_WALL = "shear_wall"
    BRACED_FRAME = "braced_frame"
    DUAL_SYSTEM = "dual_system"
    BEARING_WALL = "bearing_wall"
    DAMPED = "damped"
    BASE_ISOLATED = "base_isolated"


class Building(BaseModel):
    """Canonical, fully-populated building description."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    height: float = Field(gt=0)
    """Building height in metres."""

    floors: int = Field(ge=1)
    footprint: float = Field(gt=0)
    """Footprint area in m²."""

    roof_area: float = Field(ge=0)
    """Roof area in m²."""

    surface_seal: float = Field(ge=0, le=100)
    """Share of the lot covered by sealed surfaces, in percent."""

    basement_depth: float = Field(ge=0)
    """Basement depth below grade in metres."""

    ground_elevation: float = 0.0
    """Ground floor elevation above grade in metres."""

    has_green_roof: bool = False
    has_solar_panels: bool = False
    material: Material = Material.CONCRETE
    structural_system: StructuralSystem | None = None

    structure_id: str | None = None
    """Identifier of the existing dataset structure this audit targets, if any."""


class BuildingOverrides(BaseModel):
    """Partial, caller-supplied building parameters.

    Every field is optional; keys may be given in snake_case or camelCase
    (``roofArea``, ``hasGreenRoof``).  ``id`` is accepted as an alias for
    ``structure_id``.  Unknown keys are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        allow_inf_nan=False,
    )

    height: float | None = None
    floors: int | None = None
    footprint: float | None = None
    roof_area: float | None = None
    surface_seal: float | None = None
    basement_depth: float | None = None
    ground_elevation: float | None = None
    has_green_roof: bool | None = None
    has_solar_panels: bool | None = None
    material: Material | None = None
    structural_system: StructuralSystem | None = None
    structure_id: str | None = Field(default=None, alias="id")

    @field_validator("material", "structural_system", mode="before")
    @classmethod
    def _lower_enum(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value
