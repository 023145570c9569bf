"""
Configuration utility for the markup engine.
"""

import copy
import logging
import os
import json
from typing import Dict, Any, Optional
import threading

from ..rendering.options import DEFAULT_ALLOWED_TAGS, DEFAULT_DANGEROUS_TAGS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "writer": {
        "reformat": True,
        "xhtml": False,
        "encode_entities": True,
        "indent": "    ",
        "safe": False,
        "dangerous_tags": sorted(DEFAULT_DANGEROUS_TAGS),
        "allowed_tags": sorted(DEFAULT_ALLOWED_TAGS),
    },
    "parser": {
        "strict": False,
    },
    "logging": {
        "level": "INFO",
    },
}


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay ``overrides`` on a copy of ``defaults``."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """
    JSON settings file layered over :data:`DEFAULT_CONFIG`.

    Keys are dotted paths into nested sections, e.g. ``writer.indent``.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Settings file; defaults to ``~/.markup_engine/config.json``
        """
        # The directory is only created by save()
        self.config_path = config_path or os.path.join(
            os.path.expanduser("~"), ".markup_engine", "config.json")
        self.config: Dict[str, Any] = {}
        self._lock = threading.Lock()

        self.load()
        logger.debug(f"Configuration initialized (config_path: {self.config_path})")

    def load(self) -> None:
        """Reload the settings file; unreadable files fall back to the defaults."""
        loaded: Dict[str, Any] = {}
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.error(f"Error loading configuration: {e}")
            else:
                if isinstance(data, dict):
                    loaded = data
                    logger.debug(f"Configuration loaded from {self.config_path}")
                else:
                    logger.error(f"Configuration in {self.config_path} is not an object, using defaults")
        else:
            logger.debug(f"No configuration at {self.config_path}, using defaults")

        with self._lock:
            self.config = _merge(DEFAULT_CONFIG, loaded)

    def save(self) -> None:
        """Write the current settings as indented JSON."""
        with self._lock:
            snapshot = copy.deepcopy(self.config)

        config_dir = os.path.dirname(self.config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(snapshot, f, indent=4)
        logger.debug(f"Configuration saved to {self.config_path}")

    def _section(self, key: str, create: bool = False):
        """
        Find the dict holding the last component of a dotted key.

        Returns:
            A ``(section, name)`` pair, or ``(None, name)`` when an
            intermediate component is missing or not a section and
            ``create`` is false.
        """
        *path, name = key.split('.')
        section = self.config
        for part in path:
            child = section.get(part)
            if not isinstance(child, dict):
                if not create:
                    return None, name
                child = section[part] = {}
            section = child
        return section, name

    def get(self, key: str, default: Any = None) -> Any:
        """Value at a dotted key, or ``default``."""
        with self._lock:
            section, name = self._section(key)
            return default if section is None else section.get(name, default)

    def set(self, key: str, value: Any) -> None:
        """
        Store a value, creating sections along the way.

        A non-section value standing in the path is replaced by a new section.
        """
        with self._lock:
            section, name = self._section(key, create=True)
            section[name] = value

    def remove(self, key: str) -> bool:
        """
        Delete a dotted key.

        Returns:
            bool: False if the key was not present
        """
        with self._lock:
            section, name = self._section(key)
            if section is None or name not in section:
                return False
            del section[name]
            return True

    def get_all(self) -> Dict[str, Any]:
        """Deep copy of every setting."""
        with self._lock:
            return copy.deepcopy(self.config)
