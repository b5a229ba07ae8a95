"""Supplier composing several suppliers in precedence order."""

from collections.abc import Sequence

from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.suppliers.base import RegistryAuthSupplier
from registry_auth.utils.errors import RegistryAuthError
from registry_auth.utils.logging import get_logger

logger = get_logger("suppliers.multi")


class MultiRegistryAuthSupplier:
    """Chains suppliers; earlier suppliers take precedence.

    ``auth_for`` and ``auth_for_swarm`` return the first credential found.
    ``auth_for_build`` collects credentials from every supplier, keeping
    the earliest supplier's credential for an address several return.
    Exceptions from ``auth_for`` and ``auth_for_build`` propagate; swarm
    lookups are best effort, so a failing supplier is logged and skipped.

    Example:
        supplier = MultiRegistryAuthSupplier([gcr_supplier, ConfigFileRegistryAuthSupplier()])
    """

    def __init__(self, suppliers: Sequence[RegistryAuthSupplier]) -> None:
        self.suppliers = list(suppliers)

    def auth_for(self, image_name: str) -> RegistryAuth | None:
        for supplier in self.suppliers:
            auth = supplier.auth_for(image_name)
            if auth is not None:
                return auth
        return None

    def auth_for_swarm(self) -> RegistryAuth | None:
        for supplier in self.suppliers:
            try:
                auth = supplier.auth_for_swarm()
            except RegistryAuthError as e:
                logger.warning(f"Skipping {type(supplier).__name__} for swarm credentials: {e.message}")
                continue
            if auth is not None:
                return auth
        return None

    def auth_for_build(self) -> RegistryConfigs:
        configs = RegistryConfigs.empty()
        # later merges overwrite, so walk from lowest precedence up
        for supplier in reversed(self.suppliers):
            configs = configs.merged(supplier.auth_for_build())
        return configs
