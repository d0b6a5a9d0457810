"""
Config Manager

Loads the engine's YAML configuration and validates it into EngineConfig.
"""

import yaml
from pathlib import Path
from typing import Optional, Union
from pydantic import ValidationError

from animscript.models.config import EngineConfig
from animscript.models.enums import LogCategory, LogLevel
from animscript.utils.enum_helper import EnumHelper
from animscript.utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.CONFIG)


class ConfigManager:
    """
    Engine configuration loader

    Falls back to built-in defaults when the file is missing or invalid,
    so a broken config never prevents the engine from starting.

    Example:
        config = ConfigManager("config/animscript.yaml").load()
        catalog = ScriptCatalog(info_timeout=config.info_timeout)
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None
        self.data: dict = {}
        self.config = EngineConfig()

    def load(self) -> EngineConfig:
        """
        Load and validate the YAML file

        Returns:
            EngineConfig (defaults on failure)
        """
        if self.config_path is None:
            log.debug("No config file given, using defaults")
            return self.config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                self.data = yaml.safe_load(f) or {}
            if not isinstance(self.data, dict):
                raise ValueError("top level must be a mapping")
            self.config = EngineConfig(**self.data)
            log.info(f"Loaded {self.config_path}", keys=str(list(self.data.keys())))
        except FileNotFoundError:
            log.warn(f"Config file not found: {self.config_path}, using defaults")
        except (yaml.YAMLError, ValidationError, ValueError, TypeError) as ex:
            log.error("Failed to load config", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to defaults")
            self.config = EngineConfig()

        return self.config

    def apply_logging(self) -> None:
        """Push log_level/use_colors into the logger singleton"""
        try:
            level = EnumHelper.from_string(LogLevel, self.config.log_level)
        except ValueError:
            log.warn(
                f"Unknown log_level '{self.config.log_level}', using INFO",
                valid=", ".join(EnumHelper.names(LogLevel)),
            )
            level = LogLevel.INFO
        configure_logger(level, self.config.use_colors)
