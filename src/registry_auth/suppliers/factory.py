"""Build a supplier from settings."""

from pathlib import Path

from registry_auth.core.config_reader import DockerConfigReader
from registry_auth.core.credential_helper import SystemCredentialHelper
from registry_auth.models.auth import RegistryAuth
from registry_auth.suppliers.base import RegistryAuthSupplier
from registry_auth.suppliers.config_file import ConfigFileRegistryAuthSupplier
from registry_auth.suppliers.fixed import FixedRegistryAuthSupplier
from registry_auth.suppliers.multi import MultiRegistryAuthSupplier
from registry_auth.utils.config import RegistryAuthSettings, StaticAuthSettings, get_config
from registry_auth.utils.logging import get_logger

logger = get_logger("suppliers.factory")


def static_auth(settings: StaticAuthSettings) -> RegistryAuth | None:
    """The configured static credential, if any."""
    if not settings.configured:
        return None
    return RegistryAuth(
        username=settings.username,
        password=settings.password,
        identity_token=settings.identity_token,
        server_address=settings.server_address,
    )


def build_supplier(
    settings: RegistryAuthSettings | None = None,
    config_path: Path | str | None = None,
) -> RegistryAuthSupplier:
    """Compose the suppliers enabled in settings.

    Precedence, highest first: static credentials, GCR, ECR, then the
    docker config file.

    Args:
        settings: Settings to use (default: the global settings)
        config_path: Docker config path, overriding the settings

    Returns:
        A single supplier, composed if more than one source is enabled
    """
    settings = settings or get_config()
    suppliers: list[RegistryAuthSupplier] = []

    auth = static_auth(settings.static)
    if auth is not None:
        suppliers.append(FixedRegistryAuthSupplier(auth))

    if settings.gcr.enabled:
        from registry_auth.suppliers.gcr import GoogleContainerRegistryAuthSupplier

        suppliers.append(GoogleContainerRegistryAuthSupplier.from_settings(settings.gcr))

    if settings.ecr.enabled:
        from registry_auth.suppliers.ecr import ElasticContainerRegistryAuthSupplier

        suppliers.append(ElasticContainerRegistryAuthSupplier.from_settings(settings.ecr))

    reader = DockerConfigReader(SystemCredentialHelper.from_settings(settings.helpers))
    path = config_path or settings.docker.config_path
    if path is not None:
        path = Path(path).expanduser()
    suppliers.append(ConfigFileRegistryAuthSupplier(reader=reader, path=path))

    logger.debug(f"Using suppliers: {', '.join(type(s).__name__ for s in suppliers)}")
    if len(suppliers) == 1:
        return suppliers[0]
    return MultiRegistryAuthSupplier(suppliers)
