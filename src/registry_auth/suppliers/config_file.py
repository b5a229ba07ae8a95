"""Supplier backed by the docker config file."""

from __future__ import annotations

from pathlib import Path

from registry_auth.core.config_reader import DockerConfigReader
from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.models.docker_config import DockerConfig
from registry_auth.models.image import ImageRef
from registry_auth.utils.errors import ConfigNotFoundError, MalformedEntryError, RegistryAuthError
from registry_auth.utils.logging import get_logger

logger = get_logger("suppliers.config_file")


class ConfigFileRegistryAuthSupplier:
    """Reads credentials from ``~/.docker/config.json`` on every call.

    Nothing is cached, so credentials added with ``docker login`` while the
    process runs are used on the next request. A missing file means no
    credentials, not an error.

    Example:
        supplier = ConfigFileRegistryAuthSupplier()
        auth = supplier.auth_for("quay.io/org/app:latest")
    """

    def __init__(
        self,
        reader: DockerConfigReader | None = None,
        path: Path | str | None = None,
    ) -> None:
        """Initialize the supplier.

        Args:
            reader: Config reader (default: one running system credential helpers)
            path: Config file path (default: the reader's default path)
        """
        self.reader = reader or DockerConfigReader()
        self.path = Path(path) if path is not None else self.reader.default_config_path()

    def _read(self) -> DockerConfig | None:
        try:
            return self.reader.read(self.path)
        except ConfigNotFoundError:
            logger.debug(f"Docker config {self.path} does not exist")
            return None
        except OSError as e:
            raise RegistryAuthError(
                f"Failed to read docker config {self.path}: {e}",
                code="IO_ERROR",
                details={"path": str(self.path)},
            ) from e

    def auth_for(self, image_name: str) -> RegistryAuth | None:
        config = self._read()
        if config is None:
            return None

        ref = ImageRef.parse(image_name)
        for registry in (ref.registry_url, ref.registry_name):
            try:
                auth = self.reader.resolve(config, registry)
            except MalformedEntryError as e:
                logger.debug(f"Ignoring malformed entry for {registry}: {e.message}")
                continue
            if auth is not None:
                return auth
        return None

    def auth_for_swarm(self) -> RegistryAuth | None:
        return None

    def auth_for_build(self) -> RegistryConfigs:
        config = self._read()
        if config is None:
            return RegistryConfigs.empty()
        return self.reader.resolve_all(config)
