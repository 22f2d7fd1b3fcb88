from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

from adviser.contracts.errors import ModelConfigError

SUPPORTED_BACKENDS = ("ollama", "llama_cpp")


def load_models_config(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ModelConfigError(f"Models config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ModelConfigError(f"Models config must be a mapping: {path}")

    return config


def get_active_model_profile(
    models_config: Dict[str, Any],
    active_profile: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Profile named by `active_profile` (usually ACTIVE_MODEL_PROFILE),
    falling back to `default_model`.
    """
    if not active_profile:
        active_profile = models_config.get("default_model")

    profiles = models_config.get("profiles") or {}

    if active_profile not in profiles:
        available = ", ".join(profiles) or "none"
        raise ModelConfigError(
            f"Model profile '{active_profile}' not found in models.yaml (available: {available})"
        )

    profile = dict(profiles[active_profile])
    profile["profile_name"] = active_profile

    backend = profile.get("backend")
    if backend not in SUPPORTED_BACKENDS:
        raise ModelConfigError(f"Profile '{active_profile}': unsupported backend '{backend}'")

    return profile
