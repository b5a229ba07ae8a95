"""Error types for registry-auth."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from registry_auth.models.common import AuthFailure


class RegistryAuthError(Exception):
    """Base exception for registry-auth."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_auth_failure(self) -> AuthFailure:
        """Convert to AuthFailure model."""
        from registry_auth.models.common import AuthFailure

        return AuthFailure(code=self.code, message=self.message, details=self.details)


class ConfigNotFoundError(RegistryAuthError, FileNotFoundError):
    """The docker config file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            f"Docker config file not found: {path}",
            code="CONFIG_NOT_FOUND",
            details={"path": path},
        )
        self.filename = path


class MalformedEntryError(RegistryAuthError):
    """A registry entry in the config file could not be parsed."""

    def __init__(self, message: str, registry: str | None = None):
        details = {"registry": registry} if registry else {}
        super().__init__(message, code="MALFORMED_ENTRY", details=details)


class CredentialHelperError(RegistryAuthError):
    """A credential helper could not be run or failed."""

    def __init__(self, message: str, helper: str, exit_code: int | None = None):
        details: dict[str, Any] = {"helper": helper}
        if exit_code is not None:
            details["exit_code"] = exit_code
        super().__init__(message, code="HELPER_ERROR", details=details)
        self.helper = helper
        self.exit_code = exit_code


class ProviderRefreshError(RegistryAuthError):
    """A cloud provider token could not be refreshed."""

    def __init__(self, provider: str, reason: str | None = None):
        message = f"Could not refresh credentials for {provider}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="PROVIDER_REFRESH_ERROR", details={"provider": provider})
        self.provider = provider


class ConfigurationError(RegistryAuthError):
    """Configuration error."""

    def __init__(self, message: str, config_key: str | None = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, code="CONFIG_ERROR", details=details)


def safe_get(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Safely get a nested value from a dictionary.

    Args:
        data: Dictionary to get value from
        *keys: Keys to traverse
        default: Default value if key not found

    Returns:
        Value at the nested key path, or default
    """
    current = data
    for key in keys:
        if isinstance(current, dict):
            current = current.get(key)
            if current is None:
                return default
        else:
            return default
    return current
