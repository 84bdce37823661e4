"""
Tests for configuration loader.
"""

import pytest
from pathlib import Path
import tempfile

from azdo_provider.config import (
    load_config,
    apply_env_overrides,
    validate_config,
    Config,
    AzureDevOpsConfig,
)
from azdo_provider.errors import ConfigError


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_minimal_config(self):
        """Test loading a minimal config file."""
        config_content = """
azure_devops:
  org_service_url: "https://dev.azure.com/myorg"
"""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".yaml", delete=False, encoding="utf-8"
        ) as f:
            f.write(config_content)
            f.flush()

            config = load_config(f.name)

            assert config.azure_devops.org_service_url == "https://dev.azure.com/myorg"
            assert config.azure_devops.api_version == "5.1"  # default

        Path(f.name).unlink()

    def test_load_full_config(self):
        """Test loading a full config file."""
        config_content = """
azure_devops:
  org_service_url: "https://dev.azure.com/myorg"
  personal_access_token: "secret-pat"
  api_version: 6.0
  timeout: 10

logging:
  level: "DEBUG"
"""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".yaml", delete=False, encoding="utf-8"
        ) as f:
            f.write(config_content)
            f.flush()

            config = load_config(f.name)

            assert config.azure_devops.org_service_url == "https://dev.azure.com/myorg"
            assert config.azure_devops.personal_access_token == "secret-pat"
            # Numeric YAML versions are kept as strings
            assert config.azure_devops.api_version == "6.0"
            assert config.azure_devops.timeout == 10
            assert config.logging.level == "DEBUG"

        Path(f.name).unlink()

    def test_config_file_not_found(self):
        """Test that FileNotFoundError is raised for missing config."""
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/path/config.yaml")

    def test_empty_file_uses_defaults(self):
        """Test that an empty file yields the default configuration."""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".yaml", delete=False, encoding="utf-8"
        ) as f:
            f.write("")
            f.flush()

            config = load_config(f.name)

            assert config.azure_devops.org_service_url == ""
            assert config.azure_devops.timeout == 30
            assert config.logging.level == "INFO"

        Path(f.name).unlink()


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_env_overrides_file_values(self):
        config = Config(azure_devops=AzureDevOpsConfig(
            org_service_url="https://dev.azure.com/fromfile",
            personal_access_token="file-pat",
        ))

        apply_env_overrides(config, {
            "AZDO_ORG_SERVICE_URL": "https://dev.azure.com/fromenv",
            "AZDO_PERSONAL_ACCESS_TOKEN": "env-pat",
        })

        assert config.azure_devops.org_service_url == "https://dev.azure.com/fromenv"
        assert config.azure_devops.personal_access_token == "env-pat"

    def test_empty_env_keeps_file_values(self):
        config = Config(azure_devops=AzureDevOpsConfig(
            org_service_url="https://dev.azure.com/fromfile",
            personal_access_token="file-pat",
        ))

        apply_env_overrides(config, {"AZDO_PERSONAL_ACCESS_TOKEN": ""})

        assert config.azure_devops.org_service_url == "https://dev.azure.com/fromfile"
        assert config.azure_devops.personal_access_token == "file-pat"

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("AZDO_ORG_SERVICE_URL", "https://dev.azure.com/process")
        config = apply_env_overrides(Config())
        assert config.azure_devops.org_service_url == "https://dev.azure.com/process"


class TestValidateConfig:
    """Tests for validate_config."""

    def test_missing_org_url(self):
        config = Config(azure_devops=AzureDevOpsConfig(personal_access_token="pat"))
        with pytest.raises(ConfigError, match="AZDO_ORG_SERVICE_URL"):
            validate_config(config)

    def test_missing_token(self):
        config = Config(azure_devops=AzureDevOpsConfig(org_service_url="https://dev.azure.com/x"))
        with pytest.raises(ConfigError, match="AZDO_PERSONAL_ACCESS_TOKEN"):
            validate_config(config)

    def test_complete_config(self):
        config = Config(azure_devops=AzureDevOpsConfig(
            org_service_url="https://dev.azure.com/x",
            personal_access_token="pat",
        ))
        validate_config(config)
