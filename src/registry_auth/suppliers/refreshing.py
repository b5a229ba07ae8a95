"""Shared refresh algorithm for cloud-provider suppliers."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.models.image import ImageRef
from registry_auth.utils.errors import ProviderRefreshError
from registry_auth.utils.logging import get_logger

logger = get_logger("suppliers.refreshing")

DEFAULT_MINIMUM_EXPIRY = timedelta(minutes=1)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CachedToken(BaseModel):
    """A provider credential and the moment it stops working."""

    model_config = {"frozen": True}

    auth: RegistryAuth = Field(description="Credential to present to the registry")
    expires_at: datetime | None = Field(default=None, description="Expiry (UTC); None if the token does not expire")


class RefreshingRegistryAuthSupplier(ABC):
    """Base for suppliers whose credential is a short-lived provider token.

    The token is fetched on first use and again whenever it is about to
    expire. One lock per supplier serializes the check-and-refresh step so
    concurrent callers trigger a single provider call and then all see the
    new token.

    Subclasses implement:
    - ``provider``: name used in errors and logs
    - ``matches``: whether an image lives on this provider's registries
    - ``_refresh``: fetch a new token from the provider
    - ``_configs_for_build``: map a token to build credentials
    """

    provider: str = "provider"

    def __init__(
        self,
        clock: Clock | None = None,
        minimum_expiry: timedelta = DEFAULT_MINIMUM_EXPIRY,
    ) -> None:
        self._clock = clock or utc_now
        self._minimum_expiry = minimum_expiry
        self._lock = threading.Lock()
        self._token: CachedToken | None = None

    @abstractmethod
    def matches(self, ref: ImageRef) -> bool:
        """Return True if the image's registry belongs to this provider."""

    @abstractmethod
    def _refresh(self) -> CachedToken:
        """Fetch a fresh token. Provider exceptions may escape."""

    @abstractmethod
    def _configs_for_build(self, token: CachedToken) -> RegistryConfigs:
        """Build credentials for every registry the token is valid on."""

    def needs_refresh(self, token: CachedToken | None) -> bool:
        """Decide whether a token must be replaced before use.

        True when there is no token yet or it expires within the minimum
        expiry window. A token without an expiry never needs a refresh.
        """
        if token is None:
            return True
        if token.expires_at is None:
            return False
        return token.expires_at - self._clock() <= self._minimum_expiry

    def get_token(self) -> CachedToken:
        """Return a usable token, refreshing it first if needed.

        Raises:
            ProviderRefreshError: If the provider call fails
        """
        with self._lock:
            if self.needs_refresh(self._token):
                logger.debug(f"Refreshing {self.provider} credentials")
                try:
                    self._token = self._refresh()
                except ProviderRefreshError:
                    raise
                except Exception as e:
                    raise ProviderRefreshError(self.provider, str(e)) from e
            return self._token

    def auth_for(self, image_name: str) -> RegistryAuth | None:
        ref = ImageRef.parse(image_name)
        if not self.matches(ref):
            return None
        return self.get_token().auth

    def auth_for_swarm(self) -> RegistryAuth | None:
        try:
            return self.get_token().auth
        except ProviderRefreshError as e:
            logger.warning(f"Unable to get swarm credentials: {e.message}")
            return None

    def auth_for_build(self) -> RegistryConfigs:
        try:
            token = self.get_token()
        except ProviderRefreshError as e:
            logger.warning(f"Unable to get build credentials: {e.message}")
            return RegistryConfigs.empty()
        return self._configs_for_build(token)
