"""
Azure DevOps provider configuration loader.

Configuration comes from two places:
- config.yaml: connection settings (organization, token, api version) and logging
- Environment: AZDO_ORG_SERVICE_URL / AZDO_PERSONAL_ACCESS_TOKEN override the file
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from azdo_provider.errors import ConfigError


ENV_ORG_SERVICE_URL = "AZDO_ORG_SERVICE_URL"
ENV_PERSONAL_ACCESS_TOKEN = "AZDO_PERSONAL_ACCESS_TOKEN"


@dataclass
class AzureDevOpsConfig:
    org_service_url: str = ""
    personal_access_token: str = ""
    api_version: str = "5.1"
    timeout: int = 30


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class Config:
    """Provider configuration loaded from config.yaml."""
    azure_devops: AzureDevOpsConfig = field(default_factory=AzureDevOpsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: str | Path) -> Config:
    """Load provider configuration from a YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    config = Config()

    # Azure DevOps connection
    if "azure_devops" in data:
        azdo_data = data["azure_devops"] or {}
        config.azure_devops = AzureDevOpsConfig(
            org_service_url=azdo_data.get("org_service_url", ""),
            personal_access_token=azdo_data.get("personal_access_token", ""),
            api_version=str(azdo_data.get("api_version", "5.1")),
            timeout=azdo_data.get("timeout", 30),
        )

    # Logging
    if "logging" in data:
        logging_data = data["logging"] or {}
        config.logging = LoggingConfig(
            level=logging_data.get("level", "INFO"),
        )

    return config


def apply_env_overrides(config: Config, environ: dict | None = None) -> Config:
    """Override connection settings from the environment when set."""
    if environ is None:
        environ = os.environ

    org_service_url = environ.get(ENV_ORG_SERVICE_URL)
    if org_service_url:
        config.azure_devops.org_service_url = org_service_url

    token = environ.get(ENV_PERSONAL_ACCESS_TOKEN)
    if token:
        config.azure_devops.personal_access_token = token

    return config


def validate_config(config: Config) -> None:
    """Raise ConfigError if the connection settings are incomplete."""
    if not config.azure_devops.org_service_url:
        raise ConfigError(
            f"Organization service URL is required (set azure_devops.org_service_url or {ENV_ORG_SERVICE_URL})"
        )
    if not config.azure_devops.personal_access_token:
        raise ConfigError(
            f"Personal access token is required (set azure_devops.personal_access_token or {ENV_PERSONAL_ACCESS_TOKEN})"
        )
