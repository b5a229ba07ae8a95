"""Settings file support for registry-auth."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from registry_auth.utils.errors import ConfigurationError

DEFAULT_HELPER_PREFIX = "docker-credential-"

# ErrCredentialsNotFound from docker-credential-helpers, plus the macOS
# keychain wording some helpers still print for `list`
DEFAULT_NOT_FOUND_MESSAGES = [
    "credentials not found in native keychain",
    "The specified item could not be found in the keychain.",
]

GCR_DEFAULT_SCOPES = ["https://www.googleapis.com/auth/devstorage.read_write"]


class DockerConfigSettings(BaseModel):
    """Where to find the docker config file."""

    config_path: str | None = Field(default=None, description="Docker config path (default: $DOCKER_CONFIG or ~/.docker)")


class HelperOverride(BaseModel):
    """How one credential helper reports a missing credential."""

    not_found_messages: list[str] = Field(default_factory=list, description="Extra not-found outputs")
    not_found_exit_codes: list[int] = Field(default_factory=list, description="Exit codes meaning not found")


class HelperSettings(BaseModel):
    """Credential helper invocation."""

    prefix: str = Field(default=DEFAULT_HELPER_PREFIX, description="Executable name prefix")
    not_found_messages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NOT_FOUND_MESSAGES),
        description="Outputs that mean no credential is stored",
    )
    overrides: dict[str, HelperOverride] = Field(default_factory=dict, description="Per-helper overrides")


class GcrSettings(BaseModel):
    """Google Container Registry supplier."""

    enabled: bool = Field(default=False, description="Enable the GCR supplier")
    credentials_file: str | None = Field(
        default=None, description="Service account JSON (default: application default credentials)"
    )
    scopes: list[str] = Field(default_factory=lambda: list(GCR_DEFAULT_SCOPES), description="OAuth scopes")
    minimum_expiry_seconds: int = Field(default=60, description="Refresh tokens expiring within this window")


class EcrSettings(BaseModel):
    """AWS Elastic Container Registry supplier."""

    enabled: bool = Field(default=False, description="Enable the ECR supplier")
    region: str | None = Field(default=None, description="AWS region (default: boto3 resolution)")
    registry_id: str | None = Field(default=None, description="Registry (account) id")
    minimum_expiry_seconds: int = Field(default=60, description="Refresh tokens expiring within this window")


class StaticAuthSettings(BaseModel):
    """A fixed credential used before any other source."""

    username: str | None = Field(default=None)
    password: str | None = Field(default=None, repr=False)
    identity_token: str | None = Field(default=None, repr=False)
    server_address: str | None = Field(default=None)

    @property
    def configured(self) -> bool:
        return bool(self.username or self.identity_token)


class RegistryAuthSettings(BaseModel):
    """Main settings for registry-auth."""

    docker: DockerConfigSettings = Field(default_factory=DockerConfigSettings)
    helpers: HelperSettings = Field(default_factory=HelperSettings)
    gcr: GcrSettings = Field(default_factory=GcrSettings)
    ecr: EcrSettings = Field(default_factory=EcrSettings)
    static: StaticAuthSettings = Field(default_factory=StaticAuthSettings)


def get_config_paths() -> list[Path]:
    """Get possible settings file paths.

    Returns:
        List of paths to check for settings files
    """
    paths = []

    paths.append(Path.cwd() / ".registry-auth.yaml")
    paths.append(Path.cwd() / ".registry-auth.yml")

    home = Path.home()
    paths.append(home / ".registry-auth.yaml")
    paths.append(home / ".config" / "registry-auth" / "config.yaml")

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        paths.append(Path(xdg_config) / "registry-auth" / "config.yaml")

    return paths


def load_config(config_path: Path | str | None = None) -> RegistryAuthSettings:
    """Load settings from file.

    Args:
        config_path: Explicit path to a settings file. If None, searches default locations.

    Returns:
        Loaded settings

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ConfigurationError: If the file is not valid
    """
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            return _load_config_file(path)
        raise FileNotFoundError(f"Settings file not found: {config_path}")

    for path in get_config_paths():
        if path.exists():
            return _load_config_file(path)

    return RegistryAuthSettings()


def _load_config_file(path: Path) -> RegistryAuthSettings:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in settings file: {e}")
    if data is None:
        return RegistryAuthSettings()
    try:
        return RegistryAuthSettings.model_validate(data)
    except ValueError as e:
        raise ConfigurationError(f"Failed to load settings file {path}: {e}")


def save_config(config: RegistryAuthSettings, config_path: Path | str | None = None) -> Path:
    """Save settings to file.

    Secrets in the static section are written as given; keep the file private.

    Args:
        config: Settings to save
        config_path: Path to save to. Defaults to ~/.config/registry-auth/config.yaml

    Returns:
        Path where settings were saved
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "registry-auth" / "config.yaml"
    else:
        config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_defaults=True)
    config_path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))

    return config_path


def get_default_config() -> RegistryAuthSettings:
    """Get the default settings."""
    return RegistryAuthSettings()


_config: RegistryAuthSettings | None = None


def get_config() -> RegistryAuthSettings:
    """Get the global settings instance, loading it on first call."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: RegistryAuthSettings | None) -> None:
    """Set (or with None, reset) the global settings instance."""
    global _config
    _config = config
