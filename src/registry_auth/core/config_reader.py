"""Reads docker config files and resolves registry credentials from them."""

from __future__ import annotations

import json
import os
from pathlib import Path

from registry_auth.core.credential_helper import CredentialHelper, SystemCredentialHelper
from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.models.docker_config import DockerConfig
from registry_auth.utils.errors import ConfigNotFoundError, MalformedEntryError
from registry_auth.utils.logging import get_logger

logger = get_logger("core.config_reader")

DOCKER_CONFIG_ENV = "DOCKER_CONFIG"
CONFIG_FILE_NAME = "config.json"
LEGACY_CONFIG_FILE_NAME = ".dockercfg"


def _candidate_keys(registry: str) -> list[str]:
    """Addresses a registry may be stored under, most specific first."""
    if "://" in registry:
        host = registry.split("://", 1)[1].split("/", 1)[0]
        return [registry, host]
    return [registry, f"https://{registry}", f"http://{registry}"]


class DockerConfigReader:
    """Resolves credentials from a docker config file.

    The reader holds no state besides its helper runner; every call reads
    and parses the file again so edits made by ``docker login`` between
    calls are always picked up.

    Lookup order for one registry:

    1. a non-empty entry under ``auths``
    2. the helper named for the registry in ``credHelpers``
    3. the ``credsStore`` helper
    """

    def __init__(self, helper: CredentialHelper | None = None) -> None:
        self.helper = helper or SystemCredentialHelper()

    @staticmethod
    def default_config_path() -> Path:
        """Path of the docker config file for the current user.

        ``$DOCKER_CONFIG/config.json`` when the variable is set, otherwise
        ``~/.docker/config.json`` if it exists, falling back to the legacy
        ``~/.dockercfg``.
        """
        config_dir = os.environ.get(DOCKER_CONFIG_ENV)
        if config_dir:
            return Path(config_dir).expanduser() / CONFIG_FILE_NAME

        home = Path.home()
        modern = home / ".docker" / CONFIG_FILE_NAME
        if modern.exists():
            return modern
        return home / LEGACY_CONFIG_FILE_NAME

    def read(self, path: Path | str) -> DockerConfig:
        """Parse a config file.

        Args:
            path: Path to config.json or .dockercfg

        Returns:
            The normalized config; empty if the file is not valid JSON

        Raises:
            ConfigNotFoundError: If the file does not exist
            OSError: If the file exists but cannot be read
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigNotFoundError(str(path)) from e

        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed docker config {path}: {e}")
            return DockerConfig()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring docker config {path}: top-level value is not an object")
            return DockerConfig()
        return DockerConfig.from_dict(data)

    def _load(self, config: DockerConfig | Path | str) -> DockerConfig:
        if isinstance(config, DockerConfig):
            return config
        return self.read(config)

    def _auth_entry(self, config: DockerConfig, registry: str) -> RegistryAuth | None:
        for key in _candidate_keys(registry):
            found = config.find_auth_entry(key)
            if found is None:
                continue
            stored_key, entry = found
            try:
                auth = RegistryAuth.from_entry(entry, server_address=stored_key)
            except MalformedEntryError as e:
                logger.debug(f"Skipping malformed entry for {stored_key}: {e.message}")
                continue
            if not auth.is_empty:
                return auth
        return None

    def _helper_for(self, config: DockerConfig, registry: str) -> tuple[str, str] | None:
        for key in _candidate_keys(registry):
            helper_name = config.find_cred_helper(key)
            if helper_name:
                return helper_name, key
        return None

    def resolve(self, config: DockerConfig | Path | str, registry: str) -> RegistryAuth | None:
        """Resolve the credential for one registry.

        Args:
            config: A parsed config or a path to read
            registry: Registry address, with or without scheme

        Returns:
            The credential, or None if no source has one

        Raises:
            ConfigNotFoundError: If a path is given and does not exist
            CredentialHelperError: If a helper fails
        """
        config = self._load(config)

        auth = self._auth_entry(config, registry)
        if auth is not None:
            return auth

        helper = self._helper_for(config, registry)
        if helper is not None:
            helper_name, key = helper
            return self.helper.get(helper_name, key)

        if config.creds_store:
            return self.helper.get(config.creds_store, registry)

        return None

    def resolve_all(self, config: DockerConfig | Path | str) -> RegistryConfigs:
        """Resolve credentials for every registry the config names.

        Registries only reachable through ``credsStore`` are not listed,
        because the store has no enumeration in this lookup path.

        Raises:
            ConfigNotFoundError: If a path is given and does not exist
            CredentialHelperError: If a helper fails
        """
        config = self._load(config)
        configs: dict[str, RegistryAuth | None] = {}

        for registry, helper_name in config.cred_helpers.items():
            configs[registry] = self.helper.get(helper_name, registry)

        for registry, entry in config.auths.items():
            try:
                auth = RegistryAuth.from_entry(entry, server_address=registry)
            except MalformedEntryError as e:
                logger.debug(f"Skipping malformed entry for {registry}: {e.message}")
                continue

            if not auth.is_empty:
                configs[registry] = auth
            elif config.creds_store and registry not in configs:
                # `docker login` with a store leaves an empty placeholder
                configs[registry] = self.helper.get(config.creds_store, registry)

        return RegistryConfigs.create(configs)

    def any_registry_auth(self, path: Path | str | None = None) -> RegistryAuth:
        """Return some credential from the config, or an empty one.

        Raises:
            ConfigNotFoundError: If the file does not exist
        """
        configs = self.resolve_all(path or self.default_config_path())
        for _, auth in configs.items():
            return auth
        return RegistryAuth()
