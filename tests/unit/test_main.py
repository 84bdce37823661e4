"""
Tests for azdo_provider/main.py CLI commands.
"""

import httpx
import pytest
import yaml
from unittest.mock import patch, AsyncMock
from argparse import Namespace

from azdo_provider.errors import AzureDevOpsError
from azdo_provider.main import cmd_check, cmd_schema, main
from azdo_provider.provider import configure


class TestCmdSchema:
    """Tests for schema command."""

    def test_all_resources(self, capsys):
        result = cmd_schema(Namespace(resource=None))

        assert result == 0
        document = yaml.safe_load(capsys.readouterr().out)
        assert "azuredevops_agent_pool" in document
        assert document["azuredevops_agent_pool"]["importable"] is True
        assert document["azuredevops_agent_pool"]["schema"]["name"]["required"] is True

    def test_single_resource(self, capsys):
        result = cmd_schema(Namespace(resource="azuredevops_branch_policy_min_reviewers"))

        assert result == 0
        document = yaml.safe_load(capsys.readouterr().out)
        assert list(document) == ["azuredevops_branch_policy_min_reviewers"]
        settings = document["azuredevops_branch_policy_min_reviewers"]["schema"]["settings"]
        assert settings["max_items"] == 1
        assert "reviewer_count" in settings["elem"]

    def test_unknown_resource(self, capsys):
        result = cmd_schema(Namespace(resource="azuredevops_project"))

        assert result == 1
        assert "Unknown resource type" in capsys.readouterr().out


class TestCmdCheck:
    """Tests for check command."""

    def test_check_success(self, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("AZDO_ORG_SERVICE_URL", raising=False)
        monkeypatch.delenv("AZDO_PERSONAL_ACCESS_TOKEN", raising=False)
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "azure_devops:\n"
            "  org_service_url: https://dev.azure.com/myorg\n"
            "  personal_access_token: pat\n",
            encoding="utf-8",
        )

        with patch("azdo_provider.main.check_connection", new_callable=AsyncMock) as mock_check:
            mock_check.return_value = {"authenticatedUser": {"providerDisplayName": "Jo"}}
            result = cmd_check(Namespace(config=str(config_path)))

        assert result == 0
        config = mock_check.call_args[0][0]
        assert config.azure_devops.org_service_url == "https://dev.azure.com/myorg"
        assert "as Jo" in capsys.readouterr().out

    def test_check_uses_environment_without_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AZDO_ORG_SERVICE_URL", "https://dev.azure.com/envorg")
        monkeypatch.setenv("AZDO_PERSONAL_ACCESS_TOKEN", "env-pat")

        with patch("azdo_provider.main.check_connection", new_callable=AsyncMock) as mock_check:
            mock_check.return_value = {}
            result = cmd_check(Namespace(config=str(tmp_path / "missing.yaml")))

        assert result == 0
        config = mock_check.call_args[0][0]
        assert config.azure_devops.personal_access_token == "env-pat"

    def test_check_missing_credentials(self, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("AZDO_ORG_SERVICE_URL", raising=False)
        monkeypatch.delenv("AZDO_PERSONAL_ACCESS_TOKEN", raising=False)

        result = cmd_check(Namespace(config=str(tmp_path / "missing.yaml")))

        assert result == 1
        assert "Organization service URL is required" in capsys.readouterr().out

    def test_check_remote_failure(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AZDO_ORG_SERVICE_URL", "https://dev.azure.com/envorg")
        monkeypatch.setenv("AZDO_PERSONAL_ACCESS_TOKEN", "env-pat")

        with patch("azdo_provider.main.check_connection", new_callable=AsyncMock) as mock_check:
            mock_check.side_effect = AzureDevOpsError("Unauthorized (status 401)", status_code=401)
            result = cmd_check(Namespace(config=str(tmp_path / "missing.yaml")))

        assert result == 1

    def test_check_rejected_token(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("AZDO_ORG_SERVICE_URL", "https://dev.azure.com/envorg")
        monkeypatch.setenv("AZDO_PERSONAL_ACCESS_TOKEN", "expired-pat")
        sign_in = httpx.MockTransport(lambda request: httpx.Response(203, text="<html>Sign in</html>"))

        with patch(
            "azdo_provider.main.configure",
            side_effect=lambda config: configure(config, transport=sign_in),
        ):
            result = cmd_check(Namespace(config=str(tmp_path / "missing.yaml")))

        assert result == 1
        assert "personal access token" in capsys.readouterr().out


class TestMainCLI:
    """Tests for main CLI argument parsing."""

    def test_no_command_prints_help(self):
        with patch("sys.argv", ["azdo-provider"]):
            assert main() == 1

    def test_schema_command(self):
        with patch("sys.argv", ["azdo-provider", "schema", "-r", "azuredevops_agent_pool"]):
            with patch("azdo_provider.main.cmd_schema") as mock_schema:
                mock_schema.return_value = 0
                result = main()

                assert result == 0
                args = mock_schema.call_args[0][0]
                assert args.resource == "azuredevops_agent_pool"

    def test_check_command(self):
        with patch("sys.argv", ["azdo-provider", "check", "-c", "test.yaml"]):
            with patch("azdo_provider.main.cmd_check") as mock_check:
                mock_check.return_value = 0
                result = main()

                assert result == 0
                args = mock_check.call_args[0][0]
                assert args.config == "test.yaml"
