"""Data models for registry-auth.

All models are Pydantic BaseModel with frozen=True for immutability.
"""

from registry_auth.models.common import AuthFailure
from registry_auth.models.auth import HelperCredential, RegistryAuth, RegistryConfigs
from registry_auth.models.docker_config import DockerConfig
from registry_auth.models.image import (
    DEFAULT_REGISTRY,
    DEFAULT_REGISTRY_URL,
    ImageRef,
    parse_registry_name,
    parse_registry_url,
)

__all__ = [
    # Common
    "AuthFailure",
    # Credentials
    "RegistryAuth",
    "RegistryConfigs",
    "HelperCredential",
    # Config file
    "DockerConfig",
    # Images
    "ImageRef",
    "DEFAULT_REGISTRY",
    "DEFAULT_REGISTRY_URL",
    "parse_registry_name",
    "parse_registry_url",
]
