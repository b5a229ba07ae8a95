"""AWS Elastic Container Registry supplier."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

import boto3

from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.models.image import ImageRef
from registry_auth.suppliers.refreshing import (
    DEFAULT_MINIMUM_EXPIRY,
    CachedToken,
    Clock,
    RefreshingRegistryAuthSupplier,
)
from registry_auth.utils.config import EcrSettings
from registry_auth.utils.errors import safe_get
from registry_auth.utils.logging import get_logger

logger = get_logger("suppliers.ecr")

ECR_HOST_PATTERN = re.compile(r"^(?P<registry_id>\d+)\.dkr\.ecr\.(?P<region>[a-z0-9-]+)\.amazonaws\.com(\.cn)?$")


def ecr_host(registry_id: str, region: str) -> str:
    """Registry host of an account's private ECR registry."""
    suffix = ".amazonaws.com.cn" if region.startswith("cn-") else ".amazonaws.com"
    return f"{registry_id}.dkr.ecr.{region}{suffix}"


def _endpoint_host(endpoint: str) -> str:
    return endpoint.split("://", 1)[-1].split("/", 1)[0].lower()


class ElasticContainerRegistryAuthSupplier(RefreshingRegistryAuthSupplier):
    """Supplies ECR authorization tokens through boto3.

    When both the registry id and region are known only that registry is
    served; otherwise ECR hosts in the client's region whose account matches
    the issued token are.

    Example:
        supplier = ElasticContainerRegistryAuthSupplier.for_default_client(region="us-east-1")
        auth = supplier.auth_for("123456789012.dkr.ecr.us-east-1.amazonaws.com/app:1.0")
    """

    provider = "Elastic Container Registry"

    def __init__(
        self,
        client: Any,
        registry_id: str | None = None,
        clock: Clock | None = None,
        minimum_expiry: timedelta = DEFAULT_MINIMUM_EXPIRY,
    ) -> None:
        """Initialize the supplier.

        Args:
            client: boto3 ``ecr`` client
            registry_id: AWS account id of the registry (default: the caller's)
            clock: Returns the current UTC time
            minimum_expiry: Refresh tokens expiring within this window
        """
        super().__init__(clock=clock, minimum_expiry=minimum_expiry)
        self.client = client
        self.registry_id = registry_id
        region = getattr(getattr(client, "meta", None), "region_name", None)
        self.region = region if isinstance(region, str) else None
        logger.info(f"Using AWS credentials for ECR in region {self.region or '<default>'}")

    @classmethod
    def for_client(cls, client: Any, **kwargs: Any) -> "ElasticContainerRegistryAuthSupplier":
        return cls(client, **kwargs)

    @classmethod
    def for_session(
        cls, session: boto3.session.Session, region: str | None = None, **kwargs: Any
    ) -> "ElasticContainerRegistryAuthSupplier":
        """Create a supplier from a boto3 session (e.g. one using a named profile)."""
        return cls(session.client("ecr", region_name=region), **kwargs)

    @classmethod
    def for_default_client(
        cls, region: str | None = None, registry_id: str | None = None, **kwargs: Any
    ) -> "ElasticContainerRegistryAuthSupplier":
        """Create a supplier using boto3's default credential chain."""
        return cls(boto3.client("ecr", region_name=region), registry_id=registry_id, **kwargs)

    @classmethod
    def for_credentials(
        cls,
        access_key_id: str,
        secret_access_key: str,
        session_token: str | None = None,
        region: str | None = None,
        **kwargs: Any,
    ) -> "ElasticContainerRegistryAuthSupplier":
        """Create a supplier from static AWS keys."""
        session = boto3.session.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            aws_session_token=session_token,
        )
        return cls.for_session(session, region=region, **kwargs)

    @classmethod
    def from_settings(cls, settings: EcrSettings) -> "ElasticContainerRegistryAuthSupplier":
        return cls.for_default_client(
            region=settings.region,
            registry_id=settings.registry_id,
            minimum_expiry=timedelta(seconds=settings.minimum_expiry_seconds),
        )

    @property
    def registry_host(self) -> str | None:
        """The single host served, when registry id and region are known."""
        if self.registry_id and self.region:
            return ecr_host(self.registry_id, self.region)
        return None

    def matches(self, ref: ImageRef) -> bool:
        host = ref.registry_name.lower()
        if self.registry_host is not None:
            return host == self.registry_host
        match = ECR_HOST_PATTERN.match(host)
        if match is None:
            return False
        return self.region is None or match.group("region") == self.region

    def auth_for(self, image_name: str) -> RegistryAuth | None:
        """Credential for an image, only if the token was issued for its registry.

        Without a configured registry id the account is only known once a
        token has been fetched, so hosts of other accounts are rejected here.
        """
        ref = ImageRef.parse(image_name)
        if not self.matches(ref):
            return None
        auth = self.get_token().auth
        if auth.server_address and _endpoint_host(auth.server_address) != ref.registry_name.lower():
            logger.debug(f"ECR token is for {auth.server_address}, not {ref.registry_name}")
            return None
        return auth

    def _refresh(self) -> CachedToken:
        kwargs: dict[str, Any] = {}
        if self.registry_id:
            kwargs["registryIds"] = [self.registry_id]
        response = self.client.get_authorization_token(**kwargs)

        data = safe_get(response, "authorizationData")
        if not data:
            raise ValueError("response contained no authorization data")
        entry = data[0]

        token = entry.get("authorizationToken")
        if not token:
            raise ValueError("response contained no authorization token")
        proxy_endpoint = entry.get("proxyEndpoint")

        decoded = RegistryAuth.for_auth(token, registry=proxy_endpoint)
        expires_at = entry.get("expiresAt")
        if isinstance(expires_at, datetime) and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        return CachedToken(
            auth=decoded.with_server_address(proxy_endpoint),
            expires_at=expires_at if isinstance(expires_at, datetime) else None,
        )

    def _configs_for_build(self, token: CachedToken) -> RegistryConfigs:
        server = token.auth.server_address
        if not server:
            return RegistryConfigs.empty()
        return RegistryConfigs.create({server: token.auth})
