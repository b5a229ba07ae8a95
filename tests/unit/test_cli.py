"""Unit tests for CLI commands."""

import base64
import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from registry_auth.cli.main import app
from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.utils.config import get_config
from registry_auth.utils.errors import ProviderRefreshError

runner = CliRunner()


class TestMainCLI:
    """Tests for main CLI app."""

    def test_help(self):
        """Test --help flag."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "resolve" in result.stdout

    def test_version(self):
        """Test the version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "registry-auth version 0.1.0" in result.stdout

    def test_settings_file(self, tmp_path):
        """Test --settings loads a settings file."""
        path = tmp_path / "settings.yaml"
        path.write_text("ecr:\n  region: eu-west-1\n")

        result = runner.invoke(app, ["--settings", str(path), "version"])

        assert result.exit_code == 0
        assert get_config().ecr.region == "eu-west-1"

    def test_missing_settings_file(self, tmp_path):
        """Test a missing settings file is an error."""
        result = runner.invoke(app, ["--settings", str(tmp_path / "missing.yaml"), "version"])
        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestResolveCommand:
    """Tests for the resolve command."""

    def test_resolve_terminal_masks_password(self, dockerhub_config):
        """Test terminal output never shows the password."""
        result = runner.invoke(app, ["resolve", "busybox", "--config", str(dockerhub_config)])

        assert result.exit_code == 0
        assert "dockerman" in result.stdout
        assert "sw4gy0lo" not in result.stdout

    def test_resolve_json(self, dockerhub_config):
        """Test JSON output is the registry auth object."""
        result = runner.invoke(app, ["resolve", "busybox", "--config", str(dockerhub_config), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["username"] == "dockerman"
        assert data["password"] == "sw4gy0lo"
        assert data["serveraddress"] == "https://index.docker.io/v1/"

    def test_resolve_header(self, dockerhub_config):
        """Test --header prints the X-Registry-Auth value."""
        result = runner.invoke(app, ["resolve", "busybox", "--config", str(dockerhub_config), "--header"])

        assert result.exit_code == 0
        decoded = json.loads(base64.urlsafe_b64decode(result.stdout.strip()))
        assert decoded["username"] == "dockerman"

    def test_resolve_not_found(self, dockerhub_config):
        """Test a registry without credentials exits with 1."""
        result = runner.invoke(app, ["resolve", "quay.io/org/app", "--config", str(dockerhub_config)])

        assert result.exit_code == 1
        assert "No credentials found for quay.io" in result.stdout

    def test_resolve_missing_config(self, tmp_path):
        """Test a missing config file means no credentials."""
        result = runner.invoke(app, ["resolve", "busybox", "--config", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_resolve_provider_error(self):
        """Test supplier errors exit with 1."""
        supplier = MagicMock()
        supplier.auth_for.side_effect = ProviderRefreshError("Google Container Registry", "invalid_grant")

        with patch("registry_auth.cli.resolve.load_supplier", return_value=supplier):
            result = runner.invoke(app, ["resolve", "gcr.io/project/app"])

        assert result.exit_code == 1
        assert "Could not refresh credentials" in result.stdout


class TestSwarmCommand:
    """Tests for the swarm command."""

    def test_swarm_config_file_only(self, dockerhub_config):
        """Test the config file has no swarm credentials."""
        result = runner.invoke(app, ["swarm", "--config", str(dockerhub_config)])

        assert result.exit_code == 0
        assert "No swarm credentials" in result.stdout

    def test_swarm_credential(self):
        """Test a swarm credential is shown masked."""
        supplier = MagicMock()
        supplier.auth_for_swarm.return_value = RegistryAuth(username="oauth2accesstoken", password="ya29.a0AfH6SMBx")

        with patch("registry_auth.cli.resolve.load_supplier", return_value=supplier):
            result = runner.invoke(app, ["swarm"])

        assert result.exit_code == 0
        assert "oauth2accesstoken" in result.stdout
        assert "ya29.a0AfH6SMBx" not in result.stdout


class TestBuildConfigCommand:
    """Tests for the build-config command."""

    def test_table(self, dockerhub_config):
        """Test the table lists servers without passwords."""
        result = runner.invoke(app, ["build-config", "--config", str(dockerhub_config)])

        assert result.exit_code == 0
        assert "index.docker.io" in result.stdout
        assert "sw4gy0lo" not in result.stdout

    def test_header(self, dockerhub_config):
        """Test --header prints the X-Registry-Config value."""
        result = runner.invoke(app, ["build-config", "--config", str(dockerhub_config), "--header"])

        assert result.exit_code == 0
        configs = RegistryConfigs.from_header(result.stdout.strip())
        assert configs.get("https://index.docker.io/v1/").username == "dockerman"

    def test_json(self, dockerhub_config):
        """Test JSON output keyed by server address."""
        result = runner.invoke(app, ["build-config", "--config", str(dockerhub_config), "--format", "json"])

        assert result.exit_code == 0
        assert set(json.loads(result.stdout)) == {"https://index.docker.io/v1/"}

    def test_empty(self, tmp_path):
        """Test a missing config file gives an empty result."""
        result = runner.invoke(app, ["build-config", "--config", str(tmp_path / "missing.json")])

        assert result.exit_code == 0
        assert "No build credentials" in result.stdout
