"""Per-invocation CLI state shared through click's context object."""

import logging
from pathlib import Path

from castctl.models import AppConfig
from castctl.models.config import DEFAULT_CONFIG_PATH

logger = logging.getLogger(__name__)


class CliState:
    """Holds the config file path and loads the configuration on first use."""

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """
        The loaded configuration.

        Raises:
            ConfigFileInvalidError: If the config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if self._config is None:
            self._config = AppConfig.load_or_default(self.config_path)
            logger.debug(f"Loaded configuration from {self.config_path}")
        return self._config
