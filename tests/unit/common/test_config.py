"""Tests for configuration module."""

import pytest
import yaml

from pkgrepo.common.config import (
    AptConfig,
    IndexConfig,
    parse_apt_config,
    parse_config,
    parse_fetch_config,
    parse_logging_config,
    load_config,
    load_typed_config,
)


class TestAptConfig:
    """Tests for AptConfig parsing."""

    def test_defaults(self):
        """Test an empty section yields the defaults."""
        apt = parse_apt_config({})
        assert apt == AptConfig()
        assert apt.origin == ". stable"
        assert apt.label == ". stable"
        assert apt.component == "main"
        assert apt.architecture == "amd64"

    def test_override(self):
        """Test explicit values win."""
        apt = parse_apt_config({"origin": "OpenBangla", "suite": "testing"})
        assert apt.origin == "OpenBangla"
        assert apt.suite == "testing"
        assert apt.label == ". stable"


class TestFetchConfig:
    """Tests for FetchConfig parsing."""

    def test_parse(self):
        """Test parsing fetch section."""
        fetch = parse_fetch_config({"timeout": 5, "max_concurrency": 8})
        assert fetch.timeout == 5.0
        assert fetch.max_concurrency == 8

    def test_invalid_concurrency(self):
        """Test non-positive concurrency is rejected."""
        with pytest.raises(ValueError, match="max_concurrency"):
            parse_fetch_config({"max_concurrency": 0})


class TestParseConfig:
    """Tests for full config parsing."""

    def test_parse_full(self, sample_config):
        """Test parsing the sample configuration."""
        config = parse_config(sample_config)

        assert isinstance(config, IndexConfig)
        assert config.apt.origin == "OpenBangla"
        assert config.pool_prefix == "pool/stable"
        assert config.rpm.zstd_level == 3
        assert config.fetch.max_concurrency == 2
        assert config.extractor.timeout == 10
        assert config.logging.level == "DEBUG"
        assert config.logging.file_logging is False

    def test_parse_empty(self):
        """Test parsing an empty dictionary gives defaults."""
        config = parse_config({})
        assert config == IndexConfig()

    def test_null_sections(self):
        """Test sections present but empty in YAML."""
        config = parse_config({"apt": None, "rpm": None})
        assert config.apt == AptConfig()

    def test_pool_prefix_slashes_stripped(self):
        """Test pool prefix is normalised."""
        config = parse_config({"pool_prefix": "/pool/main/"})
        assert config.pool_prefix == "pool/main"

    def test_logging_defaults(self):
        """Test logging section defaults."""
        logging_config = parse_logging_config({})
        assert logging_config.level == "INFO"
        assert logging_config.console_logging is True


class TestLoadConfig:
    """Tests for loading configuration files."""

    def test_load_yaml(self, tmp_path, sample_config):
        """Test loading a YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(sample_config))

        assert load_config(str(config_file)) == sample_config

    def test_missing_file(self, tmp_path):
        """Test missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path):
        """Test empty file yields empty dict."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == {}

    def test_non_mapping_root(self, tmp_path):
        """Test a list at the root is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(TypeError, match="mapping"):
            load_config(str(config_file))

    def test_env_expansion(self, tmp_path, monkeypatch):
        """Test environment variables are expanded."""
        monkeypatch.setenv("PKGREPO_ORIGIN", "Expanded")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("apt:\n  origin: $PKGREPO_ORIGIN\n")

        config = load_typed_config(str(config_file))
        assert config.apt.origin == "Expanded"
