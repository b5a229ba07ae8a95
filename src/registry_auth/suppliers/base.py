"""Base supplier protocol."""

from typing import Protocol, runtime_checkable

from registry_auth.models.auth import RegistryAuth, RegistryConfigs


@runtime_checkable
class RegistryAuthSupplier(Protocol):
    """Protocol for registry credential suppliers.

    A supplier decides which credential the HTTP layer presents to a
    registry. All three operations may be called repeatedly, in any order,
    from any thread.

    To implement a custom supplier:
    1. Create a class with the three methods below
    2. Return None (never an empty RegistryAuth) when you have nothing

    Example:
        class EnvSupplier:
            def auth_for(self, image_name: str) -> RegistryAuth | None:
                if image_name.startswith("registry.example.com/"):
                    return RegistryAuth(username="ci", password=os.environ["CI_TOKEN"])
                return None

            def auth_for_swarm(self) -> RegistryAuth | None:
                return None

            def auth_for_build(self) -> RegistryConfigs:
                return RegistryConfigs.empty()
    """

    def auth_for(self, image_name: str) -> RegistryAuth | None:
        """Get the credential for pulling or pushing an image.

        Args:
            image_name: Image reference (e.g., "gcr.io/project/app:1.0")

        Returns:
            The credential, or None if this supplier has none for the registry

        Raises:
            RegistryAuthError: For unrecoverable lookup failures
        """
        ...

    def auth_for_swarm(self) -> RegistryAuth | None:
        """Get the credential used for swarm-wide operations.

        Provider failures are logged and reported as None.
        """
        ...

    def auth_for_build(self) -> RegistryConfigs:
        """Get the credentials sent with a build (X-Registry-Config).

        Returns:
            Credentials by server address; empty, never None, when there are none
        """
        ...
