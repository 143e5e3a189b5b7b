# src/htmlint/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from pydantic import ValidationError

from htmlint.model import FrameworkConfig, LinterConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".htmlvalidate.json"


class ConfigManager:
    """
    Loads the linter configuration from a `.htmlvalidate.json` file and
    merges command-line overrides on top of it.

    A missing file yields the defaults. An unreadable or invalid file is
    logged and also yields the defaults; configuration problems never fail
    a run.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path: Optional[Path] = Path(config_path) if config_path else None
        self._raw: Dict[str, Any] = {}

    @staticmethod
    def find_config_file(start: Union[str, Path]) -> Optional[Path]:
        current = Path(start).resolve()
        if current.is_file():
            current = current.parent

        for directory in (current, *current.parents):
            candidate = directory / CONFIG_FILE_NAME
            if candidate.is_file():
                return candidate
        return None

    def load(self, start: Union[str, Path] = ".") -> LinterConfig:
        """Reads the explicit config path, or the nearest config file above `start`."""
        path = self.config_path or self.find_config_file(start)
        if path is None:
            logger.debug("No config file found, using defaults.")
            self._raw = {}
            return LinterConfig()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {path}: {e}. Using defaults.")
            self._raw = {}
            return LinterConfig()

        if not isinstance(data, dict):
            logger.warning(f"Config file {path} must contain a JSON object. Using defaults.")
            self._raw = {}
            return LinterConfig()

        self._raw = data
        config = self.from_dict(data)
        logger.info(f"Configuration loaded from {path}")
        return config

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> LinterConfig:
        """Maps the file layout onto LinterConfig."""
        try:
            return LinterConfig(
                disabled_rules=set(data.get("disable") or []),
                ignore_patterns=list(data.get("ignore") or []),
                errors_only=bool(data.get("errors_only", False)),
                frameworks=FrameworkConfig(**(data.get("frameworks") or {})),
            )
        except (ValidationError, TypeError) as e:
            logger.warning(f"Invalid configuration: {e}. Using defaults.")
            return LinterConfig()

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Safely retrieves a nested value from the raw file contents.
        e.g., 'frameworks.htmx_version'.
        """
        value: Any = self._raw
        for key in key_path.split('.'):
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    @staticmethod
    def apply_overrides(
        config: LinterConfig,
        disable: Optional[Iterable[str]] = None,
        ignore: Optional[Iterable[str]] = None,
        errors_only: Optional[bool] = None,
        htmx: Optional[bool] = None,
        htmx_version: Optional[str] = None,
    ) -> LinterConfig:
        """
        Returns a new config with command-line values merged in.
        List options extend the file values, flags replace them.
        """
        frameworks = config.frameworks.model_copy()
        if htmx is not None:
            frameworks.htmx = htmx
        if htmx_version is not None:
            frameworks = FrameworkConfig(htmx=frameworks.htmx, htmx_version=htmx_version)

        return LinterConfig(
            disabled_rules=config.disabled_rules | set(disable or []),
            ignore_patterns=config.ignore_patterns + list(ignore or []),
            errors_only=config.errors_only if errors_only is None else errors_only,
            frameworks=frameworks,
        )
