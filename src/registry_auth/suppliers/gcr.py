"""Google Container Registry supplier."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import timedelta, timezone
from pathlib import Path
from typing import Any

import google.auth
import google.auth.credentials
from google.oauth2 import service_account

from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.models.image import ImageRef
from registry_auth.suppliers.refreshing import (
    DEFAULT_MINIMUM_EXPIRY,
    CachedToken,
    Clock,
    RefreshingRegistryAuthSupplier,
)
from registry_auth.utils.config import GCR_DEFAULT_SCOPES, GcrSettings
from registry_auth.utils.logging import get_logger
from registry_auth.utils.transport import HttpxRequest

logger = get_logger("suppliers.gcr")

# GCR accepts an OAuth access token as the password for this user
GCR_USERNAME = "oauth2accesstoken"

GCR_REGISTRIES = frozenset(
    {
        "gcr.io",
        "us.gcr.io",
        "eu.gcr.io",
        "asia.gcr.io",
        "b.gcr.io",
        "bucket.gcr.io",
        "l.gcr.io",
        "launcher.gcr.io",
        "appengine.gcr.io",
        "us-mirror.gcr.io",
        "eu-mirror.gcr.io",
        "asia-mirror.gcr.io",
        "mirror.gcr.io",
    }
)

Refresher = Callable[[google.auth.credentials.Credentials], None]


def _identity(credentials: Any) -> str:
    for attr in ("service_account_email", "client_id", "signer_email"):
        value = getattr(credentials, attr, None)
        if isinstance(value, str) and value:
            return value
    return type(credentials).__name__


class GoogleContainerRegistryAuthSupplier(RefreshingRegistryAuthSupplier):
    """Supplies OAuth access tokens for Google Container Registry hosts.

    Credentials are scoped when the supplier is created; the first token
    is fetched on first use.

    Example:
        supplier = GoogleContainerRegistryAuthSupplier.from_service_account_file("sa.json")
        auth = supplier.auth_for("gcr.io/my-project/app:1.0")
    """

    provider = "Google Container Registry"

    def __init__(
        self,
        credentials: google.auth.credentials.Credentials,
        scopes: Iterable[str] | None = None,
        clock: Clock | None = None,
        minimum_expiry: timedelta = DEFAULT_MINIMUM_EXPIRY,
        refresher: Refresher | None = None,
    ) -> None:
        """Initialize the supplier.

        Args:
            credentials: google-auth credentials for the account
            scopes: OAuth scopes (default: devstorage.read_write)
            clock: Returns the current UTC time
            minimum_expiry: Refresh tokens expiring within this window
            refresher: Refreshes credentials in place (default: over httpx)
        """
        super().__init__(clock=clock, minimum_expiry=minimum_expiry)
        self.scopes = list(scopes) if scopes is not None else list(GCR_DEFAULT_SCOPES)
        self.credentials = google.auth.credentials.with_scopes_if_required(credentials, self.scopes)
        self._refresher = refresher or self._refresh_over_http
        logger.info(f"Using Google credentials for {_identity(self.credentials)}")

    @classmethod
    def for_credentials(
        cls, credentials: google.auth.credentials.Credentials, **kwargs: Any
    ) -> "GoogleContainerRegistryAuthSupplier":
        return cls(credentials, **kwargs)

    @classmethod
    def from_service_account_file(cls, path: Path | str, **kwargs: Any) -> "GoogleContainerRegistryAuthSupplier":
        """Create a supplier from a service account JSON key file."""
        credentials = service_account.Credentials.from_service_account_file(str(path))
        return cls(credentials, **kwargs)

    @classmethod
    def from_service_account_info(
        cls, info: Mapping[str, Any], **kwargs: Any
    ) -> "GoogleContainerRegistryAuthSupplier":
        """Create a supplier from a parsed service account key."""
        credentials = service_account.Credentials.from_service_account_info(dict(info))
        return cls(credentials, **kwargs)

    @classmethod
    def for_application_default_credentials(cls, **kwargs: Any) -> "GoogleContainerRegistryAuthSupplier":
        """Create a supplier from the environment's application default credentials."""
        credentials, _ = google.auth.default()
        return cls(credentials, **kwargs)

    @classmethod
    def from_settings(cls, settings: GcrSettings) -> "GoogleContainerRegistryAuthSupplier":
        kwargs: dict[str, Any] = {
            "scopes": settings.scopes,
            "minimum_expiry": timedelta(seconds=settings.minimum_expiry_seconds),
        }
        if settings.credentials_file:
            return cls.from_service_account_file(Path(settings.credentials_file).expanduser(), **kwargs)
        return cls.for_application_default_credentials(**kwargs)

    @staticmethod
    def _refresh_over_http(credentials: google.auth.credentials.Credentials) -> None:
        request = HttpxRequest()
        try:
            credentials.refresh(request)
        finally:
            request.close()

    def matches(self, ref: ImageRef) -> bool:
        return ref.registry_name in GCR_REGISTRIES

    def _refresh(self) -> CachedToken:
        self._refresher(self.credentials)
        token = self.credentials.token
        if not token:
            raise ValueError("refresh returned no access token")

        expires_at = self.credentials.expiry
        # google-auth reports expiry as naive UTC
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        return CachedToken(
            auth=RegistryAuth(username=GCR_USERNAME, password=token),
            expires_at=expires_at,
        )

    def _configs_for_build(self, token: CachedToken) -> RegistryConfigs:
        return RegistryConfigs.create(
            {registry: token.auth.with_server_address(registry) for registry in sorted(GCR_REGISTRIES)}
        )
