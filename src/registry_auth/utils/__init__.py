"""Utility functions for registry-auth."""

from registry_auth.utils.logging import (
    configure_logging,
    get_logger,
    get_logger_with_context,
    redact,
)
from registry_auth.utils.errors import (
    RegistryAuthError,
    ConfigNotFoundError,
    MalformedEntryError,
    CredentialHelperError,
    ProviderRefreshError,
    ConfigurationError,
    safe_get,
)
from registry_auth.utils.config import (
    RegistryAuthSettings,
    DockerConfigSettings,
    HelperOverride,
    HelperSettings,
    GcrSettings,
    EcrSettings,
    StaticAuthSettings,
    load_config,
    save_config,
    get_config,
    set_config,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_logger_with_context",
    "redact",
    # Errors
    "RegistryAuthError",
    "ConfigNotFoundError",
    "MalformedEntryError",
    "CredentialHelperError",
    "ProviderRefreshError",
    "ConfigurationError",
    "safe_get",
    # Config
    "RegistryAuthSettings",
    "DockerConfigSettings",
    "HelperOverride",
    "HelperSettings",
    "GcrSettings",
    "EcrSettings",
    "StaticAuthSettings",
    "load_config",
    "save_config",
    "get_config",
    "set_config",
]
