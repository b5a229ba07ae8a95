"""Unit tests for the Elastic Container Registry supplier."""

import base64
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from registry_auth.suppliers.ecr import ElasticContainerRegistryAuthSupplier, ecr_host
from registry_auth.utils.config import EcrSettings
from registry_auth.utils.errors import ProviderRefreshError

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
ENDPOINT = "https://123456789012.dkr.ecr.us-east-1.amazonaws.com"
IMAGE = "123456789012.dkr.ecr.us-east-1.amazonaws.com/team/app:1.0"


def token_response(password: str = "ecr-password", expires_at=NOW + timedelta(hours=12), endpoint: str = ENDPOINT):
    entry = {
        "authorizationToken": base64.b64encode(f"AWS:{password}".encode()).decode(),
        "proxyEndpoint": endpoint,
    }
    if expires_at is not None:
        entry["expiresAt"] = expires_at
    return {"authorizationData": [entry]}


def make_client(region: str = "us-east-1", *responses) -> MagicMock:
    client = MagicMock()
    client.meta.region_name = region
    client.get_authorization_token.side_effect = list(responses) or [token_response()]
    return client


class TestElasticContainerRegistryAuthSupplier:
    """Tests for ElasticContainerRegistryAuthSupplier."""

    def test_auth_for_matching_host(self):
        """Test the decoded token for an ECR image."""
        client = make_client()
        supplier = ElasticContainerRegistryAuthSupplier(client, clock=lambda: NOW)

        auth = supplier.auth_for(IMAGE)

        assert auth.username == "AWS"
        assert auth.password == "ecr-password"
        assert auth.server_address == ENDPOINT
        client.get_authorization_token.assert_called_once_with()

    def test_registry_id_passed(self):
        """Test the registry id is sent to ECR."""
        client = make_client()
        supplier = ElasticContainerRegistryAuthSupplier(client, registry_id="123456789012", clock=lambda: NOW)

        supplier.auth_for(IMAGE)

        client.get_authorization_token.assert_called_once_with(registryIds=["123456789012"])

    def test_derived_host_only(self):
        """Test a known account and region serve exactly one host."""
        client = make_client()
        supplier = ElasticContainerRegistryAuthSupplier(client, registry_id="123456789012", clock=lambda: NOW)

        assert supplier.registry_host == "123456789012.dkr.ecr.us-east-1.amazonaws.com"
        assert supplier.auth_for("999999999999.dkr.ecr.us-east-1.amazonaws.com/app") is None
        assert supplier.auth_for("123456789012.dkr.ecr.eu-west-1.amazonaws.com/app") is None
        client.get_authorization_token.assert_not_called()

    def test_other_region_without_registry_id(self):
        """Test hosts outside the client's region are not claimed."""
        client = make_client()
        supplier = ElasticContainerRegistryAuthSupplier(client, clock=lambda: NOW)

        assert supplier.auth_for("999999999999.dkr.ecr.eu-west-1.amazonaws.com/app") is None
        assert supplier.auth_for("123456789012.dkr.ecr.eu-west-1.amazonaws.com/app") is None
        client.get_authorization_token.assert_not_called()

    def test_other_account_without_registry_id(self):
        """Test a token for one account is not handed to another account's registry."""
        client = make_client()
        supplier = ElasticContainerRegistryAuthSupplier(client, clock=lambda: NOW)

        assert supplier.auth_for("999999999999.dkr.ecr.us-east-1.amazonaws.com/app") is None
        assert supplier.auth_for(IMAGE).server_address == ENDPOINT
        assert client.get_authorization_token.call_count == 1

    def test_china_partition(self):
        """Test hosts in the China partition."""
        assert ecr_host("123456789012", "cn-north-1") == "123456789012.dkr.ecr.cn-north-1.amazonaws.com.cn"
        client = make_client(
            "cn-north-1", token_response(endpoint="https://123456789012.dkr.ecr.cn-north-1.amazonaws.com.cn")
        )
        supplier = ElasticContainerRegistryAuthSupplier(client, clock=lambda: NOW)
        assert supplier.auth_for("123456789012.dkr.ecr.cn-north-1.amazonaws.com.cn/app") is not None

    @pytest.mark.parametrize(
        "image",
        ["busybox", "quay.io/org/app", "gcr.io/project/app", "public.ecr.aws/team/app", "evil.com/dkr.ecr.amazonaws.com"],
    )
    def test_non_matching_hosts(self, image):
        """Test other registries return None without calling AWS."""
        client = make_client()
        supplier = ElasticContainerRegistryAuthSupplier(client)

        assert supplier.auth_for(image) is None
        client.get_authorization_token.assert_not_called()

    def test_token_cached(self):
        """Test a fresh token is reused."""
        client = make_client("us-east-1", token_response("first"), token_response("second"))
        supplier = ElasticContainerRegistryAuthSupplier(client, clock=lambda: NOW)

        supplier.auth_for(IMAGE)
        auth = supplier.auth_for(IMAGE)

        assert auth.password == "first"
        assert client.get_authorization_token.call_count == 1

    def test_refresh_near_expiry(self):
        """Test a token about to expire is replaced."""
        client = make_client(
            "us-east-1",
            token_response("first", expires_at=NOW + timedelta(seconds=20)),
            token_response("second"),
        )
        supplier = ElasticContainerRegistryAuthSupplier(client, clock=lambda: NOW)

        supplier.auth_for(IMAGE)
        auth = supplier.auth_for(IMAGE)

        assert auth.password == "second"

    def test_missing_expiry_never_refreshes(self):
        """Test a token without expiry is kept."""
        client = make_client("us-east-1", token_response("first", expires_at=None), token_response("second"))
        supplier = ElasticContainerRegistryAuthSupplier(client, clock=lambda: NOW)

        supplier.auth_for(IMAGE)
        auth = supplier.auth_for(IMAGE)

        assert auth.password == "first"
        assert client.get_authorization_token.call_count == 1

    def test_client_error(self):
        """Test AWS errors surface as ProviderRefreshError."""
        client = make_client()
        client.get_authorization_token.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "not authorized"}},
            "GetAuthorizationToken",
        )
        supplier = ElasticContainerRegistryAuthSupplier(client)

        with pytest.raises(ProviderRefreshError) as exc_info:
            supplier.auth_for(IMAGE)

        assert "Elastic Container Registry" in exc_info.value.message
        assert supplier.auth_for_swarm() is None
        assert len(supplier.auth_for_build()) == 0

    def test_empty_response(self):
        """Test a response without authorization data is a failure."""
        client = make_client("us-east-1", {"authorizationData": []})
        supplier = ElasticContainerRegistryAuthSupplier(client)

        with pytest.raises(ProviderRefreshError):
            supplier.get_token()

    def test_auth_for_build_keyed_by_endpoint(self):
        """Test build credentials use the proxy endpoint."""
        supplier = ElasticContainerRegistryAuthSupplier(make_client(), clock=lambda: NOW)

        configs = supplier.auth_for_build()

        assert list(dict(configs.items())) == [ENDPOINT]
        assert configs.get(ENDPOINT).password == "ecr-password"

    def test_auth_for_swarm(self):
        """Test swarm uses the token."""
        supplier = ElasticContainerRegistryAuthSupplier(make_client(), clock=lambda: NOW)
        assert supplier.auth_for_swarm().username == "AWS"


class TestConstructors:
    """Tests for the alternate constructors."""

    def test_for_default_client(self):
        """Test boto3's default chain is used."""
        with patch("boto3.client", return_value=make_client("eu-west-1")) as factory:
            supplier = ElasticContainerRegistryAuthSupplier.for_default_client(
                region="eu-west-1", registry_id="123456789012"
            )

        factory.assert_called_once_with("ecr", region_name="eu-west-1")
        assert supplier.registry_host == "123456789012.dkr.ecr.eu-west-1.amazonaws.com"

    def test_for_credentials(self):
        """Test static keys build a session."""
        session = MagicMock()
        session.client.return_value = make_client()

        with patch("boto3.session.Session", return_value=session) as session_cls:
            ElasticContainerRegistryAuthSupplier.for_credentials("AKIA", "secret", region="us-east-1")

        session_cls.assert_called_once_with(
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            aws_session_token=None,
        )
        session.client.assert_called_once_with("ecr", region_name="us-east-1")

    def test_from_settings(self):
        """Test settings are applied."""
        settings = EcrSettings(enabled=True, region="us-east-1", registry_id="123456789012", minimum_expiry_seconds=120)

        with patch("boto3.client", return_value=make_client()):
            supplier = ElasticContainerRegistryAuthSupplier.from_settings(settings)

        assert supplier.registry_id == "123456789012"
        assert supplier._minimum_expiry == timedelta(minutes=2)
