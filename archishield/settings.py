"""ConfigManager — environment profiles and runtime audit settings."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from archishield.config import DEFAULT_NEIGHBORHOOD_RADIUS, SETTINGS_DIR

logger = logging.getLogger(__name__)

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "ARCHISHIELD_ENV": {"default": "development", "description": "Environment profile"},
    "ARCHISHIELD_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "ARCHISHIELD_REGULATIONS": {
        "default": "",
        "description": "Regulation overlay JSON file (empty = built-in Vienna rules)",
    },
    "ARCHISHIELD_NEIGHBORHOOD_RADIUS": {
        "default": str(int(DEFAULT_NEIGHBORHOOD_RADIUS)),
        "description": "Neighbourhood query radius in metres",
    },
    "ARCHISHIELD_PARALLEL": {"default": "true", "description": "Run evaluators on a thread pool"},
    "ARCHISHIELD_MAX_WORKERS": {"default": "6", "description": "Evaluator thread pool size"},
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "ARCHISHIELD_ENV": "development",
        "ARCHISHIELD_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "ARCHISHIELD_ENV": "production",
        "ARCHISHIELD_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "ARCHISHIELD_ENV": "testing",
        "ARCHISHIELD_LOG_LEVEL": "DEBUG",
        "ARCHISHIELD_PARALLEL": "false",
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


class AuditSettings(BaseModel):
    """Typed view of the merged configuration."""

    env: str = "development"
    log_level: str = "INFO"
    regulations_path: str | None = None
    """Overlay file merged onto the built-in regulations, if any."""

    neighborhood_radius: float = Field(default=DEFAULT_NEIGHBORHOOD_RADIUS, gt=0)
    parallel: bool = True
    max_workers: int = Field(default=6, ge=1)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @classmethod
    def from_config(cls, config: dict[str, str]) -> AuditSettings:
        """Build settings from a flat ``ARCHISHIELD_*`` dict."""
        return cls(
            env=config.get("ARCHISHIELD_ENV", "development"),
            log_level=config.get("ARCHISHIELD_LOG_LEVEL", "INFO"),
            regulations_path=config.get("ARCHISHIELD_REGULATIONS") or None,
            neighborhood_radius=config.get(
                "ARCHISHIELD_NEIGHBORHOOD_RADIUS", DEFAULT_NEIGHBORHOOD_RADIUS
            ),
            parallel=config.get("ARCHISHIELD_PARALLEL", "true").strip().lower() in _TRUE_VALUES,
            max_workers=config.get("ARCHISHIELD_MAX_WORKERS", 6),
        )


def _read_json_config(path: Path) -> dict[str, str]:
    """Flat string values from a JSON object file; empty when absent or unusable."""
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read %s; ignoring it", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("%s must contain a JSON object, got %s; ignoring it", path, type(data).__name__)
        return {}
    return {str(k): str(v) for k, v in data.items()}


def _read_env_file(path: Path) -> dict[str, str]:
    """``KEY=value`` lines from a dotenv file; comments and blank lines are skipped."""
    if not path.is_file():
        return {}
    values: dict[str, str] = {}
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        logger.warning("Could not read %s; ignoring it", path, exc_info=True)
        return {}
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip()
    return values


class ConfigManager:
    """Manage ArchiShield configuration across environments."""

    def generate_env_template(self, project_path: str | Path) -> Path:
        """Create .env.example with all config keys.

        Returns the path to the generated file.
        """
        root = Path(project_path)
        env_path = root / ".env.example"

        lines = ["# ArchiShield Configuration Template", "# Copy to .env and fill in values", ""]
        for key, info in _CONFIG_KEYS.items():
            lines.append(f"# {info['description']}")
            lines.append(f"{key}={info['default']}")
            lines.append("")

        env_path.write_text("\n".join(lines), encoding="utf-8")
        return env_path

    def load_config(self, project_path: str | Path = ".") -> dict[str, str]:
        """Load merged config: defaults -> profile -> config.json -> .env -> env vars.

        Returns a flat dict of configuration values.
        """
        root = Path(project_path)
        config: dict[str, str] = {key: str(info["default"]) for key, info in _CONFIG_KEYS.items()}

        env_name = os.environ.get("ARCHISHIELD_ENV", config["ARCHISHIELD_ENV"])
        config.update(_PROFILES.get(env_name, {}))
        config.update(_read_json_config(root / SETTINGS_DIR / "config.json"))
        config.update(_read_env_file(root / ".env"))

        for key in _CONFIG_KEYS:
            env_val = os.environ.get(key)
            if env_val is not None:
                config[key] = env_val

        return config

    def load_settings(self, project_path: str | Path = ".") -> AuditSettings:
        """Load the merged config and validate it into ``AuditSettings``.

        Raises
        ------
        ValueError
            If a numeric setting is malformed or out of range.
        """
        config = self.load_config(project_path)
        try:
            return AuditSettings.from_config(config)
        except ValidationError as exc:
            raise ValueError(f"Invalid ArchiShield configuration: {exc}") from exc


def configure_logging(level: str | int = "INFO") -> None:
    """Install a basic stream handler on the ``archishield`` logger.

    Intended for applications embedding the engine; the library itself
    never configures handlers.
    """
    pkg_logger = logging.getLogger("archishield")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    pkg_logger.setLevel(level)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        pkg_logger.addHandler(handler)
