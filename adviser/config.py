"""
Process-boundary configuration.

The environment (and an optional .env file) is read once here; the
rest of the package receives plain values.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from adviser.contracts.errors import ConfigError

DEFAULT_MODELS_CONFIG = "models.yaml"
DEFAULT_TIMEOUT_SECONDS = 1800
MAX_INPUT_CHARS = 500_000
DEFAULT_LOG_LEVEL = "INFO"

OUTPUT_DIR_ENV = "ADVISED_OUTPUT_DIR"
MODELS_CONFIG_ENV = "ADVISER_MODELS_CONFIG"
ACTIVE_PROFILE_ENV = "ACTIVE_MODEL_PROFILE"
TIMEOUT_ENV = "ADVISER_TIMEOUT"
LOG_LEVEL_ENV = "ADVISER_LOG_LEVEL"


@dataclass(frozen=True)
class AdviserSettings:
    output_dir_override: Optional[Path]
    models_config_path: Path
    active_profile: Optional[str]
    timeout_seconds: float
    max_input_chars: int
    log_level: str


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def load_settings(env_file: Optional[Union[str, Path]] = None) -> AdviserSettings:
    load_dotenv(env_file)

    output_dir = _env(OUTPUT_DIR_ENV)

    raw_timeout = _env(TIMEOUT_ENV)
    try:
        timeout_seconds = float(raw_timeout) if raw_timeout else float(DEFAULT_TIMEOUT_SECONDS)
    except ValueError:
        raise ConfigError(f"{TIMEOUT_ENV} must be a number of seconds, got '{raw_timeout}'") from None
    if timeout_seconds <= 0:
        raise ConfigError(f"{TIMEOUT_ENV} must be positive, got '{raw_timeout}'")

    return AdviserSettings(
        output_dir_override=Path(output_dir) if output_dir else None,
        models_config_path=Path(_env(MODELS_CONFIG_ENV) or DEFAULT_MODELS_CONFIG),
        active_profile=_env(ACTIVE_PROFILE_ENV) or None,
        timeout_seconds=timeout_seconds,
        max_input_chars=MAX_INPUT_CHARS,
        log_level=(_env(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper(),
    )
