"""Engine settings.

Settings come from an optional JSON file, otherwise from defaults overlaid
with ``FIREQUERY_*`` environment variables.
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from firequery.logger import get_logger

logger = get_logger("config")

DEFAULT_LIMIT = 50
DEFAULT_MAX_RESULTS = 14
DEFAULT_CONTEXT_WINDOW = 220
DEFAULT_ROOT_IDENTIFIER = "db"

_ENV_FIELDS = {
    "FIREQUERY_DEFAULT_LIMIT": "default_limit",
    "FIREQUERY_MAX_RESULTS": "max_results",
    "FIREQUERY_CONTEXT_WINDOW": "context_window",
    "FIREQUERY_ROOT_IDENTIFIER": "root_identifier",
    "FIREQUERY_DEFAULT_COLLECTION": "default_collection",
}


class EngineSettings(BaseModel):
    """Tunables for parsing and completion."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_limit: int = Field(DEFAULT_LIMIT, gt=0, description="Limit used when an expression has none")
    max_results: int = Field(DEFAULT_MAX_RESULTS, gt=0, description="Maximum ranked completions returned")
    context_window: int = Field(
        DEFAULT_CONTEXT_WINDOW, gt=0, description="Characters scanned backwards for the enclosing method call"
    )
    root_identifier: str = Field(
        DEFAULT_ROOT_IDENTIFIER, min_length=1, description="Identifier bound to the database root"
    )
    default_collection: str = Field("", description="Collection used when an expression names none")


def settings_from_env(environ: Optional[dict[str, str]] = None) -> EngineSettings:
    """
    Build settings from ``FIREQUERY_*`` environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        EngineSettings with any provided overrides applied

    Raises:
        ValidationError: If an override has an invalid value
    """
    env = os.environ if environ is None else environ
    overrides = {field: env[name] for name, field in _ENV_FIELDS.items() if env.get(name)}
    if overrides:
        logger.debug(f"Settings overrides from environment: {sorted(overrides)}")
    return EngineSettings(**overrides)


def load_settings(config_path: Optional[str | Path] = None) -> EngineSettings:
    """
    Load engine settings.

    Args:
        config_path: Path to a JSON settings file. If None, settings come
            from the environment and defaults.

    Returns:
        EngineSettings: Parsed settings object

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
        ValidationError: If the settings structure is invalid
    """
    if config_path is None:
        return settings_from_env()

    config_path = Path(config_path)
    if not config_path.exists():
        error_msg = f"Settings file not found: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    logger.info(f"Loading settings from: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in settings file {config_path}: {e}")
        raise

    try:
        return EngineSettings(**data)
    except ValidationError as e:
        logger.error(f"Invalid settings structure in {config_path}: {e}")
        raise
