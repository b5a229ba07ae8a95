"""registry-auth: Docker registry credential resolution.

Decides which credential to present to a Docker-compatible registry for a
pull or push, a build, or a swarm operation:

- **Config file**: ``~/.docker/config.json`` in every historical layout,
  including ``credHelpers`` and ``credsStore`` delegation
- **Credential helpers**: ``docker-credential-*`` programs
- **Cloud registries**: refreshing GCR and ECR tokens
- **Composition**: precedence-ordered chains of suppliers

Usage:
    from registry_auth import ConfigFileRegistryAuthSupplier, MultiRegistryAuthSupplier
    from registry_auth.suppliers.gcr import GoogleContainerRegistryAuthSupplier

    supplier = MultiRegistryAuthSupplier([
        GoogleContainerRegistryAuthSupplier.for_application_default_credentials(),
        ConfigFileRegistryAuthSupplier(),
    ])
    auth = supplier.auth_for("gcr.io/my-project/app:1.0")
    header = supplier.auth_for_build().to_header()

CLI:
    registry-auth resolve <image>
    registry-auth build-config --header
    registry-auth swarm
"""

__version__ = "0.1.0"

# Models
from registry_auth.models.auth import HelperCredential, RegistryAuth, RegistryConfigs
from registry_auth.models.docker_config import DockerConfig
from registry_auth.models.image import ImageRef

# Core
from registry_auth.core.config_reader import DockerConfigReader
from registry_auth.core.credential_helper import CredentialHelper, SystemCredentialHelper

# Suppliers
from registry_auth.suppliers.base import RegistryAuthSupplier
from registry_auth.suppliers.config_file import ConfigFileRegistryAuthSupplier
from registry_auth.suppliers.factory import build_supplier
from registry_auth.suppliers.fixed import FixedRegistryAuthSupplier
from registry_auth.suppliers.multi import MultiRegistryAuthSupplier
from registry_auth.suppliers.refreshing import CachedToken, RefreshingRegistryAuthSupplier

# Errors
from registry_auth.utils.errors import (
    ConfigNotFoundError,
    CredentialHelperError,
    MalformedEntryError,
    ProviderRefreshError,
    RegistryAuthError,
)

__all__ = [
    # Version
    "__version__",
    # Models
    "RegistryAuth",
    "RegistryConfigs",
    "HelperCredential",
    "DockerConfig",
    "ImageRef",
    # Core
    "DockerConfigReader",
    "CredentialHelper",
    "SystemCredentialHelper",
    # Suppliers
    "RegistryAuthSupplier",
    "ConfigFileRegistryAuthSupplier",
    "FixedRegistryAuthSupplier",
    "MultiRegistryAuthSupplier",
    "RefreshingRegistryAuthSupplier",
    "CachedToken",
    "build_supplier",
    # Errors
    "RegistryAuthError",
    "ConfigNotFoundError",
    "MalformedEntryError",
    "CredentialHelperError",
    "ProviderRefreshError",
]
