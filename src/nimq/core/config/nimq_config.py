import copy
import logging
import os
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from nimq.core.abstract.integrations.base_config import BaseConfig
from nimq.core.entities.settings import NimqSettings

logger = logging.getLogger("NIMQ-Config")

DEFAULT_CONFIG: Dict[str, Any] = NimqSettings().model_dump(mode="json")

# Environment variable -> (dotted config key, converter)
ENV_OVERRIDES = {
    "NIMQ_STORAGE_PATH": ("storage.path", str),
    "NIMQ_SEED": ("seed", int),
    "NIMQ_EPISODES": ("q_learning.episodes", int),
}


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class NimqConfig(BaseConfig):
    """
    Configuration for training and playing.

    Values come from, in increasing priority: built-in defaults, the YAML file,
    and ``NIMQ_*`` environment variables (a ``.env`` file is honoured).
    """

    def __init__(self, config_path: Optional[str] = None, preload: bool = False, use_env: bool = True):
        self.use_env = use_env
        super().__init__(config_path=config_path, preload=preload)

    def _layer(self, file_values: Dict[str, Any]) -> Dict[str, Any]:
        self.config = _deep_merge(DEFAULT_CONFIG, file_values)
        if self.use_env:
            load_dotenv()
            self._apply_env_overrides()
        return self.config

    def _apply_env_overrides(self) -> None:
        for env_name, (key, convert) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                self.set_value(key, convert(raw))
                logger.debug(f"{env_name} overrides {key}")
            except ValueError:
                logger.warning(f"Ignoring {env_name}={raw!r}: expected {convert.__name__}")

    def _validate_config(self) -> Tuple[bool, str]:
        try:
            NimqSettings.model_validate(self.config)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            return False, f"{location}: {first['msg']}"
        return True, "Configuration is valid."

    @property
    def settings(self) -> NimqSettings:
        """
        Validated settings.

        Raises:
            ValueError: If the configuration is invalid
        """
        is_valid, msg = self.validate_config()
        if not is_valid:
            raise ValueError(f"Invalid configuration: {msg}")
        return NimqSettings.model_validate(self.config)

    @classmethod
    def create_default(cls, config_path: str) -> "NimqConfig":
        """Write the default configuration to ``config_path`` and return it."""
        config = cls(config_path=config_path, use_env=False)
        config.save_config(config_path)
        return config
