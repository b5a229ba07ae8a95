"""Core credential resolution for registry-auth.

This module reads docker config files and talks to credential helpers.
"""

from registry_auth.core.config_reader import DockerConfigReader
from registry_auth.core.credential_helper import CredentialHelper, SystemCredentialHelper

__all__ = [
    "DockerConfigReader",
    "CredentialHelper",
    "SystemCredentialHelper",
]
