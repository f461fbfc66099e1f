"""Unit tests for ConfigService."""

from pathlib import Path

import pytest
import yaml

from qurse.config_schema import QurseConfig, SearchConfig
from qurse.services.config_service import ConfigService


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary config file path."""
    return tmp_path / "config.yaml"


@pytest.fixture
def config_service(temp_config_file: Path) -> ConfigService:
    """Create a ConfigService instance with a temp file."""
    return ConfigService(temp_config_file)


@pytest.mark.unit
class TestConfigServiceLoad:
    """Tests for ConfigService.load()."""

    def test_load_creates_default_when_missing(
        self, config_service: ConfigService, temp_config_file: Path
    ):
        """Load creates default config when file doesn't exist."""
        config = config_service.load()

        assert config.ollama.base_url == "http://localhost:11434"
        assert config.llm.default_temperature == 0.7
        assert config.search.backend == "auto"
        assert temp_config_file.exists()

    def test_load_existing_config(
        self, config_service: ConfigService, temp_config_file: Path
    ):
        """Load reads existing config correctly."""
        temp_config_file.write_text(
            yaml.safe_dump(
                {
                    "server": {"port": 9000},
                    "llm": {"default_model": "Grok 3"},
                    "search": {"backend": "duckduckgo", "max_results": 8},
                    "ollama": {"enabled": True},
                }
            )
        )

        config = config_service.load()

        assert config.server.port == 9000
        assert config.llm.default_model == "Grok 3"
        assert config.search.backend == "duckduckgo"
        assert config.search.max_results == 8
        assert config.ollama.enabled is True

    def test_load_partial_config_uses_defaults(
        self, config_service: ConfigService, temp_config_file: Path
    ):
        """Load uses defaults for missing fields."""
        temp_config_file.write_text(yaml.safe_dump({"server": {"port": 9000}}))

        config = config_service.load()

        assert config.server.port == 9000
        assert config.search.max_results == 5

    def test_unknown_keys_ignored(
        self, config_service: ConfigService, temp_config_file: Path
    ):
        temp_config_file.write_text(
            yaml.safe_dump({"search": {"max_results": 4, "legacy_option": True}})
        )

        assert config_service.load().search.max_results == 4

    def test_invalid_yaml_falls_back_to_defaults(
        self, config_service: ConfigService, temp_config_file: Path
    ):
        temp_config_file.write_text("search: [unclosed")

        assert config_service.load().search.backend == "auto"

    def test_invalid_backend_falls_back_to_defaults(
        self, config_service: ConfigService, temp_config_file: Path
    ):
        temp_config_file.write_text(yaml.safe_dump({"search": {"backend": "bing"}}))

        assert config_service.load().search.backend == "auto"


@pytest.mark.unit
class TestConfigServiceSaveUpdate:
    """Tests for save() and update()."""

    def test_save_round_trip(self, config_service: ConfigService):
        config = QurseConfig.create_default()
        config.llm.default_max_tokens = 1024
        config_service.save(config)

        assert config_service.load().llm.default_max_tokens == 1024

    def test_update_prefixed_keys(self, config_service: ConfigService):
        config = config_service.update(
            search_backend="exa", llm_default_temperature=0.2, ollama_enabled=True
        )

        assert config.search.backend == "exa"
        assert config.llm.default_temperature == 0.2
        assert config_service.load().ollama.enabled is True

    def test_update_unknown_key_ignored(self, config_service: ConfigService):
        config = config_service.update(search_nonexistent=1, bogus=2)
        assert not hasattr(config.search, "nonexistent")


@pytest.mark.unit
class TestSearchConfig:
    def test_rejects_unknown_backend(self):
        with pytest.raises(ValueError):
            SearchConfig(backend="bing")
