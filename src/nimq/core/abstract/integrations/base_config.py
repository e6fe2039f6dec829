import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import yaml

# Set up logger
logger = logging.getLogger(__name__)


class BaseConfig(ABC):
    """
    Base class for managing YAML configuration files.
    Provides common functionality for loading, saving, and accessing configuration data.
    """

    def __init__(self, config_path: Optional[str] = None, preload: bool = False):
        """
        Initialize the configuration manager with the path to the configuration file.

        Args:
            config_path (str): Path to the YAML configuration file.
            preload (bool): If True, loads the file immediately.

        Raises:
            FileNotFoundError: If preloading and the configuration file does not exist.
            ValueError: If preloading without a path, or the file cannot be parsed.
        """
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        file_values: Dict[str, Any] = {}
        if preload:
            if not config_path:
                raise ValueError("Configuration path must be provided for preloading.")
            file_values = self._load_config(config_path)
        self.config = self._layer(file_values)

    def _load_config(self, config_path: str) -> Dict[str, Any]:
        """
        Load the configuration file from the given path.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file cannot be parsed.
        """
        if not os.path.isfile(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML configuration file: {e}")
        except OSError as e:
            raise ValueError(f"Failed to load configuration file: {e}")

        if not isinstance(data, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")
        return data

    def save_config(self, output_path: Optional[str] = None) -> None:
        """
        Save the current configuration to a file.

        Args:
            output_path (Optional[str]): Path to save the configuration.
                                       If None, saves to the original config_path.

        Raises:
            ValueError: If the configuration cannot be saved.
        """
        save_path = output_path or self.config_path
        if not save_path:
            raise ValueError("No path given to save the configuration to.")

        try:
            directory = os.path.dirname(save_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(save_path, "w", encoding="utf-8") as file:
                yaml.safe_dump(self.config, file, default_flow_style=False,
                               allow_unicode=True, indent=2, sort_keys=False)

            logger.info(f"Configuration saved successfully to: {save_path}")

        except OSError as e:
            logger.error(f"Failed to save configuration to {save_path}: {e}")
            raise ValueError(f"Failed to save configuration: {e}")

    def get_config(self) -> Dict[str, Any]:
        return self.config.copy()

    def get_value(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``'q_learning.alpha'``; ``default`` if any part is missing."""
        node: Any = self.config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set_value(self, key: str, value: Any) -> None:
        """
        Set a dotted key, creating intermediate sections as needed.
        A non-mapping value sitting on the path is replaced by a new section.
        """
        *sections, leaf = key.split('.')
        node = self.config
        for part in sections:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]

        node[leaf] = value
        logger.debug(f"Set configuration value: {key} = {value}")

    def update_config(self, updates: Dict[str, Any]) -> Tuple[bool, str]:
        """
        Apply several dotted-key updates, then re-validate.

        Returns:
            Tuple[bool, str]: Result of ``validate_config`` after the updates
        """
        for key, value in updates.items():
            self.set_value(key, value)

        is_valid, msg = self.validate_config()
        if not is_valid:
            logger.warning(f"Configuration invalid after {len(updates)} updates: {msg}")
        return is_valid, msg

    def _layer(self, file_values: Dict[str, Any]) -> Dict[str, Any]:
        """Combine values read from the file with any other sources."""
        return file_values

    def reload_config(self) -> None:
        """
        Re-read the file and rebuild the configuration, dropping in-memory edits.

        Raises:
            ValueError: If no file path is set or the file cannot be parsed
            FileNotFoundError: If the file no longer exists
        """
        if not self.config_path:
            raise ValueError("No configuration file to reload from.")
        self.config = self._layer(self._load_config(self.config_path))
        logger.info(f"Configuration reloaded from: {self.config_path}")

    def validate_config(self) -> Tuple[bool, str]:
        return self._validate_config()

    @abstractmethod
    def _validate_config(self) -> Tuple[bool, str]:
        """Return ``(is_valid, message)`` for the current values."""

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.config_path or '<defaults>'})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config_path={self.config_path!r}, sections={sorted(self.config)})"
