"""Registry credential suppliers.

The cloud-provider suppliers live in ``registry_auth.suppliers.gcr`` and
``registry_auth.suppliers.ecr`` and are imported from there so that
google-auth and boto3 load only when used.
"""

from registry_auth.suppliers.base import RegistryAuthSupplier
from registry_auth.suppliers.config_file import ConfigFileRegistryAuthSupplier
from registry_auth.suppliers.factory import build_supplier
from registry_auth.suppliers.fixed import FixedRegistryAuthSupplier
from registry_auth.suppliers.multi import MultiRegistryAuthSupplier
from registry_auth.suppliers.refreshing import CachedToken, RefreshingRegistryAuthSupplier

__all__ = [
    "RegistryAuthSupplier",
    "ConfigFileRegistryAuthSupplier",
    "FixedRegistryAuthSupplier",
    "MultiRegistryAuthSupplier",
    "RefreshingRegistryAuthSupplier",
    "CachedToken",
    "build_supplier",
]
