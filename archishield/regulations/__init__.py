"""Regulatory configuration — immutable tables injected into the evaluators."""

from archishield.regulations.loader import RegulationsError, apply_overlay, load_regulations
from archishield.regulations.schema import Regulations
from archishield.regulations.vienna import VIENNA_REGULATIONS

__all__ = [
    "Regulations",
    "RegulationsError",
    "VIENNA_REGULATIONS",
    "apply_overlay",
    "load_regulations",
]
