"""Registry credential models and their wire encodings."""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from registry_auth.utils.errors import MalformedEntryError


def _b64decode(value: str) -> bytes:
    """Decode base64 in either alphabet, tolerating missing padding."""
    value = value.strip().replace("-", "+").replace("_", "/")
    value += "=" * (-len(value) % 4)
    return base64.b64decode(value, validate=True)


class RegistryAuth(BaseModel):
    """Credential for a single registry.

    Either a username/password pair or an identity token is meaningful.
    The password and email are excluded from the repr so that logging a
    RegistryAuth never leaks them.
    """

    model_config = {"frozen": True}

    username: str | None = Field(default=None, description="Registry username")
    password: str | None = Field(default=None, description="Registry password or token", repr=False)
    email: str | None = Field(default=None, description="Account email (unused by registries)", repr=False)
    server_address: str | None = Field(default=None, description="Registry address the credential is for")
    identity_token: str | None = Field(default=None, description="Token used instead of a password", repr=False)

    @classmethod
    def for_auth(cls, auth: str, registry: str | None = None) -> "RegistryAuth":
        """Build a credential from the base64 ``auth`` field of a config file.

        Args:
            auth: base64 of ``username:password``
            registry: Registry the value belongs to (for error reporting)

        Raises:
            MalformedEntryError: If the value is not valid base64 of ``user:pass``
        """
        try:
            decoded = _b64decode(auth).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise MalformedEntryError(f"Invalid auth value: {e}", registry=registry) from e

        # split once; passwords may contain colons
        username, sep, password = decoded.partition(":")
        if not sep:
            raise MalformedEntryError("Auth value is not of the form user:password", registry=registry)
        return cls(username=username.strip(), password=password.strip())

    @classmethod
    def from_entry(cls, entry: Any, server_address: str | None = None) -> "RegistryAuth":
        """Parse one registry entry from a config file or header.

        Explicit ``username``/``password`` fields win over the ``auth`` field.

        Args:
            entry: The decoded JSON object for a registry
            server_address: Address to use when the entry has none

        Raises:
            MalformedEntryError: If the entry cannot be parsed
        """
        if not isinstance(entry, dict):
            raise MalformedEntryError("Registry entry is not an object", registry=server_address)

        username = entry.get("username")
        password = entry.get("password")
        auth = entry.get("auth")
        if username is None and password is None and auth:
            if not isinstance(auth, str):
                raise MalformedEntryError("Auth value is not a string", registry=server_address)
            decoded = cls.for_auth(auth, registry=server_address)
            username, password = decoded.username, decoded.password

        try:
            return cls(
                username=username,
                password=password,
                email=entry.get("email"),
                server_address=entry.get("serveraddress") or server_address,
                identity_token=entry.get("identitytoken"),
            )
        except ValidationError as e:
            raise MalformedEntryError(f"Invalid registry entry: {e}", registry=server_address) from e

    @property
    def is_empty(self) -> bool:
        """True when the credential carries nothing that can authenticate."""
        return not (self.username or self.password or self.identity_token)

    @property
    def auth_field(self) -> str:
        """The legacy ``auth`` value: base64 of ``username:password``."""
        if self.username is None or self.password is None:
            return ""
        return base64.b64encode(f"{self.username}:{self.password}".encode()).decode("ascii")

    def with_server_address(self, server_address: str | None) -> "RegistryAuth":
        """Return a copy bound to a server address."""
        return self.model_copy(update={"server_address": server_address})

    def to_wire(self) -> dict[str, str]:
        """Registry auth object as the Docker Engine API expects it."""
        wire = {
            "username": self.username,
            "password": self.password,
            "auth": self.auth_field,
            "email": self.email,
            "serveraddress": self.server_address,
            "identitytoken": self.identity_token,
        }
        return {k: v for k, v in wire.items() if v is not None}

    def to_header(self) -> str:
        """Encode as an X-Registry-Auth header value."""
        payload = json.dumps(self.to_wire(), separators=(",", ":"))
        return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


class RegistryConfigs(BaseModel):
    """Credentials for several registries, keyed by server address.

    Sent to the daemon in the X-Registry-Config header when building::

        {
          "docker.example.com": {"serveraddress": "docker.example.com", "username": "janedoe", ...},
          "https://index.docker.io/v1/": {"serveraddress": "...", "username": "mobydock", ...}
        }

    Instances are never modified; merging produces a new instance.
    """

    model_config = {"frozen": True}

    configs: dict[str, RegistryAuth] = Field(default_factory=dict, description="Credentials by server address")

    @classmethod
    def empty(cls) -> "RegistryConfigs":
        """An empty credential set."""
        return cls()

    @classmethod
    def create(cls, configs: Mapping[str, RegistryAuth | None] | None) -> "RegistryConfigs":
        """Build from a mapping, dropping addresses without a credential."""
        if not configs:
            return cls()
        return cls(configs={k: v for k, v in configs.items() if v is not None})

    @classmethod
    def from_header(cls, value: str) -> "RegistryConfigs":
        """Decode an X-Registry-Config header value.

        Raises:
            MalformedEntryError: If the value is not base64 JSON of the expected shape
        """
        try:
            data = json.loads(_b64decode(value).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise MalformedEntryError(f"Invalid X-Registry-Config header: {e}") from e
        if not isinstance(data, dict):
            raise MalformedEntryError("X-Registry-Config header is not a JSON object")
        return cls(configs={k: RegistryAuth.from_entry(v) for k, v in data.items()})

    def to_header(self) -> str:
        """Encode as an X-Registry-Config header value."""
        payload = json.dumps({k: v.to_wire() for k, v in self.configs.items()}, separators=(",", ":"))
        return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")

    def merged(self, other: "RegistryConfigs | None") -> "RegistryConfigs":
        """Return a new set where entries of ``other`` replace ours."""
        if other is None or not other.configs:
            return self
        return RegistryConfigs(configs={**self.configs, **other.configs})

    def get(self, server_address: str) -> RegistryAuth | None:
        return self.configs.get(server_address)

    def items(self) -> Iterator[tuple[str, RegistryAuth]]:
        return iter(self.configs.items())

    def __len__(self) -> int:
        return len(self.configs)

    def __contains__(self, server_address: object) -> bool:
        return server_address in self.configs


class HelperCredential(BaseModel):
    """Credential exchanged with a docker credential helper.

    Returned by ``get`` and sent to ``store``; the helper protocol does not
    distinguish passwords from tokens, both travel as ``Secret``.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    username: str = Field(default="", alias="Username")
    secret: str = Field(default="", alias="Secret", repr=False)
    server_url: str = Field(default="", alias="ServerURL")

    def to_registry_auth(self, registry: str | None = None) -> RegistryAuth:
        """Map to a RegistryAuth, defaulting the server to the queried registry."""
        return RegistryAuth(
            username=self.username,
            password=self.secret,
            server_address=self.server_url or registry,
        )

    def to_json(self) -> str:
        return json.dumps(self.model_dump(by_alias=True))
