"""Configuration service backed by a YAML file."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from qurse.config_schema import QurseConfig
from qurse.paths import get_config_file

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading, saving and updating the Qurse configuration."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """Initialize config service.

        Args:
            config_file: Path to config file. Defaults to ~/.qurse/config.yaml
        """
        self.config_file = Path(config_file) if config_file else get_config_file()
        self.config_dir = self.config_file.parent

    def load(self) -> QurseConfig:
        """Load configuration from YAML file.

        Creates default config if file doesn't exist.

        Returns:
            QurseConfig instance.
        """
        if not self.config_file.exists():
            config = QurseConfig.create_default()
            self.save(config)
            return config

        try:
            with open(self.config_file, "r") as f:
                data = yaml.safe_load(f) or {}
            return QurseConfig.from_dict(data)
        except (
            yaml.YAMLError,
            IOError,
            ValueError,
            TypeError,
            AttributeError,
        ) as e:
            logger.warning(f"Invalid config at {self.config_file}, using defaults: {e}")
            return QurseConfig.create_default()

    def save(self, config: QurseConfig) -> None:
        """Save configuration to YAML file.

        Args:
            config: QurseConfig to save.
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(
                config.to_dict(), f, default_flow_style=False, sort_keys=False
            )

    def update(self, **kwargs: Any) -> QurseConfig:
        """Update specific config values.

        Supports nested updates using prefixed keys:
        - server_*: Updates server config
        - llm_*: Updates LLM config
        - search_*: Updates search config
        - ollama_*: Updates ollama config

        Args:
            **kwargs: Config values to update.

        Returns:
            Updated QurseConfig.

        Examples:
            service.update(search_backend="duckduckgo")
            service.update(llm_default_temperature=0.5)
        """
        config = self.load()

        sections = {
            "server_": config.server,
            "llm_": config.llm,
            "search_": config.search,
            "ollama_": config.ollama,
        }

        for key, value in kwargs.items():
            updated = False
            for prefix, section in sections.items():
                if key.startswith(prefix):
                    attr_name = key.replace(prefix, "", 1)
                    if hasattr(section, attr_name):
                        setattr(section, attr_name, value)
                        updated = True
                    else:
                        logger.warning(
                            "Config key '%s' matched prefix '%s' but attribute "
                            "'%s' not found on %s",
                            key,
                            prefix,
                            attr_name,
                            type(section).__name__,
                        )
                    break
            if not updated:
                logger.warning("Unknown config key ignored: '%s'", key)

        self.save(config)
        return config
