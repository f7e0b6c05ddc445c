"""Building normalizer — turn partial caller input into a complete Building.

Resolution order per field:

1. an explicit caller value (anything other than ``None``),
2. for height and floors only, the matching existing structure in the
   dataset,
3. a fixed default.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from archishield.geo.features import Feature
from archishield.models.building import Building, BuildingOverrides, Material

logger = logging.getLogger(__name__)

BUILDING_DEFAULTS: dict[str, Any] = {
    "height": 20.0,
    "floors": 5,
    "footprint": 200.0,
    "roof_area": 200.0,
    "surface_seal": 70.0,
    "basement_depth": 5.0,
    "ground_elevation": 0.0,
    "has_green_roof": False,
    "has_solar_panels": False,
    "material": Material.CONCRETE,
    "structural_system": None,
}


class BuildingValidationError(ValueError):
    """Raised when caller input cannot form a valid Building.

    Attributes
    ----------
    errors:
        One human-readable message per offending field.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid building parameters: " + "; ".join(self.errors))


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "input"
        messages.append(f"{field}: {err.get('msg', 'invalid value')}")
    return messages


def parse_overrides(overrides: BuildingOverrides | Mapping[str, Any] | None) -> BuildingOverrides:
    """Validate raw override input; accepts snake_case or camelCase keys."""
    if overrides is None:
        return BuildingOverrides()
    if isinstance(overrides, BuildingOverrides):
        return overrides
    if not isinstance(overrides, Mapping):
        raise BuildingValidationError(
            [f"overrides: expected a mapping of building parameters, got {type(overrides).__name__}"]
        )
    try:
        return BuildingOverrides.model_validate(dict(overrides))
    except ValidationError as exc:
        raise BuildingValidationError(_format_errors(exc)) from exc


def normalize_building(
    latitude: float,
    longitude: float,
    overrides: BuildingOverrides | Mapping[str, Any] | None = None,
    existing: Feature | None = None,
) -> Building:
    """Build a complete Building from a location, overrides and an optional existing structure.

    Parameters
    ----------
    latitude, longitude:
        Site location in degrees.
    overrides:
        Partial caller parameters.  A value of ``None`` counts as absent;
        ``0`` and ``False`` are explicit values.
    existing:
        Dataset feature for the structure being audited.  Only its height
        and level count are used.

    Raises
    ------
    BuildingValidationError
        For unknown keys, non-numeric or non-finite numbers, and values
        outside their allowed range.
    """
    parsed = parse_overrides(overrides)
    supplied = parsed.model_dump(exclude_none=True)

    values = dict(BUILDING_DEFAULTS)
    if existing is not None:
        if existing.height > 0:
            values["height"] = existing.height
        if existing.levels:
            values["floors"] = existing.levels
    values.update(supplied)

    try:
        building = Building(latitude=latitude, longitude=longitude, **values)
    except ValidationError as exc:
        errors = _format_errors(exc)
        logger.warning("Rejected building input: %s", "; ".join(errors))
        raise BuildingValidationError(errors) from exc

    logger.debug(
        "Normalized building at (%s, %s): %sm, %s floors",
        building.latitude,
        building.longitude,
        building.height,
        building.floors,
    )
    return building


_DISTRICT = TypeAdapter(Optional[int])


def parse_district(district: Any) -> int | None:
    """Validate a caller-supplied district number; ``None`` means look it up."""
    try:
        return _DISTRICT.validate_python(district)
    except ValidationError as exc:
        raise BuildingValidationError(
            [f"district: {err.get('msg', 'invalid value')}" for err in exc.errors()]
        ) from exc
