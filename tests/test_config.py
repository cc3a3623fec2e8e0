"""Test YAML configuration loading and validation."""

import pytest
import yaml

from domain_crawler.config.crawler_config import (
    ConfigLoader,
    ConfigurationError,
    validate_config,
)
from domain_crawler.pipeline.stages.url_resolution_stage import DEFAULT_SKIP_SCHEMES


def write_yaml(tmp_path, data, name="crawler.yaml"):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestConfigLoader:
    """Test ConfigLoader."""

    def test_defaults(self):
        config = ConfigLoader.create_default_config()

        assert config.workers == 4
        assert config.monitor_interval_seconds == 2.0
        assert config.fetch.user_agent == "MySimpleCrawler/1.0"
        assert config.fetch.connect_timeout_seconds == 10.0
        assert config.fetch.read_timeout_seconds == 20.0
        assert config.fetch.max_redirects == 5
        assert config.resolution.skip_schemes == DEFAULT_SKIP_SCHEMES
        assert config.resolution.strict_host_boundary is False
        assert validate_config(config)

    def test_load_sections(self, tmp_path):
        path = write_yaml(tmp_path, {
            'crawler': {'workers': 8, 'monitor_interval_seconds': 0.5},
            'fetch': {'read_timeout_seconds': 5, 'verify_ssl': False},
            'link_extraction': {'parser': 'html.parser', 'max_links_per_page': 50},
            'resolution': {'strict_host_boundary': True},
        })

        config = ConfigLoader.load_from_yaml(path)

        assert config.workers == 8
        assert config.monitor_interval_seconds == 0.5
        assert config.fetch.read_timeout_seconds == 5
        assert config.fetch.verify_ssl is False
        assert config.fetch.connect_timeout_seconds == 10.0
        assert config.link_extraction.max_links_per_page == 50
        assert config.resolution.strict_host_boundary is True
        assert config.resolution.skip_schemes == DEFAULT_SKIP_SCHEMES

    def test_save_then_load(self, tmp_path):
        config = ConfigLoader.create_default_config()
        config.workers = 6
        config.resolution.skip_schemes = ['javascript:', 'mailto:']
        path = str(tmp_path / "nested" / "out.yaml")

        ConfigLoader.save_to_yaml(config, path)
        loaded = ConfigLoader.load_from_yaml(path)

        assert loaded.workers == 6
        assert loaded.resolution.skip_schemes == ['javascript:', 'mailto:']
        assert loaded.fetch == config.fetch

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader.load_from_yaml(str(tmp_path / "nope.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ConfigurationError, match="Empty"):
            ConfigLoader.load_from_yaml(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("crawler: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigLoader.load_from_yaml(str(path))

    def test_non_mapping_root(self, tmp_path):
        path = write_yaml(tmp_path, ["workers", 4])
        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigLoader.load_from_yaml(path)

    @pytest.mark.parametrize("section", ["fetch", "link_extraction", "resolution"])
    def test_unknown_keys_rejected(self, tmp_path, section):
        path = write_yaml(tmp_path, {section: {'no_such_option': 1}})
        with pytest.raises(ConfigurationError, match="no_such_option"):
            ConfigLoader.load_from_yaml(path)

    def test_unknown_crawler_key_rejected(self, tmp_path):
        path = write_yaml(tmp_path, {'crawler': {'workerz': 9}})
        with pytest.raises(ConfigurationError, match="workerz"):
            ConfigLoader.load_from_yaml(path)

    def test_unknown_section_rejected(self, tmp_path):
        path = write_yaml(tmp_path, {'fetchh': {'x': 1}})
        with pytest.raises(ConfigurationError, match="fetchh"):
            ConfigLoader.load_from_yaml(path)

    def test_bad_number(self, tmp_path):
        path = write_yaml(tmp_path, {'crawler': {'workers': 'many'}})
        with pytest.raises(ConfigurationError):
            ConfigLoader.load_from_yaml(path)


class TestValidateConfig:
    """Test validate_config."""

    @pytest.mark.parametrize("mutate", [
        lambda c: setattr(c, 'workers', 0),
        lambda c: setattr(c, 'monitor_interval_seconds', 0),
        lambda c: setattr(c.fetch, 'connect_timeout_seconds', 0),
        lambda c: setattr(c.fetch, 'read_timeout_seconds', -1),
        lambda c: setattr(c.fetch, 'max_redirects', -1),
        lambda c: setattr(c.fetch, 'max_content_size_mb', 0),
        lambda c: setattr(c.link_extraction, 'max_links_per_page', -1),
        lambda c: setattr(c.resolution, 'skip_schemes', 'mailto:'),
        lambda c: setattr(c.resolution, 'skip_schemes', ['']),
        lambda c: setattr(c.fetch, 'connect_timeout_seconds', 'ten'),
        lambda c: setattr(c.fetch, 'max_redirects', 2.5),
        lambda c: setattr(c.link_extraction, 'max_links_per_page', None),
        lambda c: setattr(c, 'workers', True),
    ])
    def test_rejects_invalid(self, mutate):
        config = ConfigLoader.create_default_config()
        mutate(config)
        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_zero_redirects_allowed(self):
        config = ConfigLoader.create_default_config()
        config.fetch.max_redirects = 0
        config.link_extraction.max_links_per_page = 0
        assert validate_config(config)
