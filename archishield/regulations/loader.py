"""Load regulation overlays from JSON files.

An overlay only needs the values that differ from the base regime::

    {"heritage": {"height_limit": 40}, "wind": {"radius": 200}}

Objects merge key by key; lists and scalars replace the base value.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from archishield.regulations.schema import Regulations
from archishield.regulations.vienna import VIENNA_REGULATIONS

logger = logging.getLogger(__name__)


class RegulationsError(ValueError):
    """Raised when a regulation overlay cannot be read or validated."""


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_overlay(overlay: dict[str, Any], base: Regulations = VIENNA_REGULATIONS) -> Regulations:
    """Return a new ``Regulations`` with *overlay* merged onto *base*."""
    data = _deep_merge(base.model_dump(mode="json"), overlay)
    try:
        return Regulations.model_validate(data)
    except ValidationError as exc:
        raise RegulationsError(f"Invalid regulations: {exc}") from exc


def load_regulations(
    path: str | Path | None = None,
    base: Regulations = VIENNA_REGULATIONS,
) -> Regulations:
    """Load a JSON overlay file, or return *base* when *path* is empty."""
    if not path:
        return base

    file_path = Path(path)
    try:
        overlay = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise RegulationsError(f"Could not read regulations file {file_path}: {exc}") from exc

    if not isinstance(overlay, dict):
        raise RegulationsError(f"Regulations file {file_path} must contain a JSON object")

    regulations = apply_overlay(overlay, base)
    logger.info("Loaded regulations overlay from %s", file_path)
    return regulations
