"""Tests for configuration loading."""

from datetime import date

import pytest

from mayerprism.core.config import ConfigManager, MayerPrismConfig, load_config_from_env
from mayerprism.core.exceptions import ConfigurationError


class TestDefaults:
    def test_defaults(self):
        config = MayerPrismConfig()

        assert config.source.symbol == "BTC-USD"
        assert config.source.navigation_timeout == 60.0
        assert config.source.selector_timeout == 10.0
        assert config.sentiment.timeout == 10.0
        assert config.pipeline.window == 200
        assert config.pipeline.cache_ttl == 600
        assert config.pipeline.cache_key == "bitcoin-data"
        assert config.cutoff_date == date(2020, 1, 1)
        assert not config.pipeline.concurrent_fetch

    def test_round_trip_through_dict(self):
        config = MayerPrismConfig()

        assert MayerPrismConfig.from_dict(config.to_dict()) == config


class TestValidation:
    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"source": {"renderer": "lynx"}}, "source.renderer"),
            ({"source": {"navigation_timeout": 0}}, "source.navigation_timeout"),
            ({"sentiment": {"timeout": -1}}, "sentiment.timeout"),
            ({"pipeline": {"window": 0}}, "pipeline.window"),
            ({"pipeline": {"cutoff": "01/01/2020"}}, "pipeline.cutoff"),
        ],
    )
    def test_rejects_invalid_values(self, overrides, field):
        with pytest.raises(ConfigurationError) as exc_info:
            MayerPrismConfig.from_dict(overrides)

        assert exc_info.value.field == field

    def test_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError):
            MayerPrismConfig.from_dict({"pipeline": {"speed": "fast"}})


class TestEnvironment:
    def test_env_overrides_are_coerced(self):
        env = {
            "MAYERPRISM_CACHE_TTL": "60",
            "MAYERPRISM_HEADLESS": "false",
            "MAYERPRISM_SENTIMENT_TIMEOUT": "2.5",
            "MAYERPRISM_BROWSER_EXECUTABLE": "/usr/bin/chromium",
            "UNRELATED": "x",
        }

        assert load_config_from_env(env) == {
            "pipeline": {"cache_ttl": 60},
            "source": {"headless": False, "executable_path": "/usr/bin/chromium"},
            "sentiment": {"timeout": 2.5},
        }

    def test_bad_number(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_env({"MAYERPRISM_CACHE_TTL": "ten minutes"})

        assert exc_info.value.field == "pipeline.cache_ttl"


class TestConfigManager:
    def test_missing_file_uses_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.toml", environ={})

        assert manager.get_config() == MayerPrismConfig()

    def test_file_then_environment(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[source]\nrenderer = "static"\n\n[pipeline]\ncache_ttl = 30\ncutoff = "2021-01-01"\n',
            encoding="utf-8",
        )

        config = ConfigManager(path, environ={"MAYERPRISM_CACHE_TTL": "90"}).get_config()

        assert config.source.renderer == "static"
        assert config.cutoff_date == date(2021, 1, 1)
        assert config.pipeline.cache_ttl == 90

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[pipeline\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            ConfigManager(path, environ={})

    def test_update_config(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.toml", environ={})

        manager.update_config(storage={"enabled": False})

        assert manager.get_config().storage.enabled is False
        with pytest.raises(ConfigurationError):
            manager.update_config(source={"renderer": "nope"})
