"""Supplier returning caller-provided credentials."""

from registry_auth.models.auth import RegistryAuth, RegistryConfigs


class FixedRegistryAuthSupplier:
    """Returns the same credentials for every request.

    Used for static credentials passed in explicitly, e.g. from a CI secret.

    Example:
        supplier = FixedRegistryAuthSupplier(RegistryAuth(username="ci", password="s3cret"))
        supplier.auth_for("registry.example.com/app:1.0")
    """

    def __init__(
        self,
        registry_auth: RegistryAuth | None = None,
        configs_for_build: RegistryConfigs | None = None,
    ) -> None:
        self._registry_auth = registry_auth
        self._configs_for_build = configs_for_build or RegistryConfigs.empty()

    def auth_for(self, image_name: str) -> RegistryAuth | None:
        return self._registry_auth

    def auth_for_swarm(self) -> RegistryAuth | None:
        return self._registry_auth

    def auth_for_build(self) -> RegistryConfigs:
        return self._configs_for_build
