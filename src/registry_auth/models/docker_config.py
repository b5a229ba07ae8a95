"""Model of the docker CLI config file (config.json / .dockercfg)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Top-level keys of the modern format that are not registry entries
KNOWN_KEYS = frozenset(
    {
        "auths",
        "credHelpers",
        "credsStore",
        "HttpHeaders",
        "detachKeys",
        "stackOrchestrator",
        "psFormat",
        "imagesFormat",
        "currentContext",
        "plugins",
        "proxies",
        "aliases",
        "features",
    }
)


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {k: v for k, v in value.items() if isinstance(k, str) and isinstance(v, str)}


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


class DockerConfig(BaseModel):
    """Contents of a docker config file, normalized to the modern layout.

    ``auths`` keeps the raw per-registry objects; they are parsed lazily so
    that one broken entry does not hide the others.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    auths: dict[str, Any] = Field(default_factory=dict, description="Raw auth entries by registry")
    cred_helpers: dict[str, str] = Field(
        default_factory=dict, alias="credHelpers", description="Helper name by registry"
    )
    creds_store: str | None = Field(default=None, alias="credsStore", description="Default helper")
    http_headers: dict[str, str] = Field(default_factory=dict, alias="HttpHeaders")
    detach_keys: str | None = Field(default=None, alias="detachKeys")
    stack_orchestrator: str | None = Field(default=None, alias="stackOrchestrator")
    ps_format: str | None = Field(default=None, alias="psFormat")
    images_format: str | None = Field(default=None, alias="imagesFormat")

    @classmethod
    def from_dict(cls, data: Any) -> "DockerConfig":
        """Build from decoded JSON in any supported layout.

        Fields with the wrong type are dropped instead of failing the whole
        file. When none of ``auths``, ``credHelpers`` or ``credsStore`` is
        present the file is the legacy flat layout (``.dockercfg``) where
        every top-level object is a registry entry.
        """
        if not isinstance(data, dict):
            return cls()

        if not ({"auths", "credHelpers", "credsStore"} & data.keys()):
            auths = {
                k: v for k, v in data.items() if isinstance(v, dict) and k not in KNOWN_KEYS
            }
        else:
            raw_auths = data.get("auths")
            auths = dict(raw_auths) if isinstance(raw_auths, dict) else {}

        return cls(
            auths=auths,
            cred_helpers=_string_map(data.get("credHelpers")),
            creds_store=_optional_str(data.get("credsStore")),
            http_headers=_string_map(data.get("HttpHeaders")),
            detach_keys=_optional_str(data.get("detachKeys")),
            stack_orchestrator=_optional_str(data.get("stackOrchestrator")),
            ps_format=_optional_str(data.get("psFormat")),
            images_format=_optional_str(data.get("imagesFormat")),
        )

    @property
    def is_empty(self) -> bool:
        """True when the file holds no credential source at all."""
        return not (self.auths or self.cred_helpers or self.creds_store)

    def find_auth_entry(self, registry: str) -> tuple[str, Any] | None:
        """Find the ``auths`` entry for a registry, ignoring case.

        Returns:
            (stored key, raw entry) or None
        """
        if registry in self.auths:
            return registry, self.auths[registry]
        lowered = registry.lower()
        for key, entry in self.auths.items():
            if key.lower() == lowered:
                return key, entry
        return None

    def find_cred_helper(self, registry: str) -> str | None:
        """Find the helper configured for a registry, ignoring case."""
        if registry in self.cred_helpers:
            return self.cred_helpers[registry]
        lowered = registry.lower()
        for key, helper in self.cred_helpers.items():
            if key.lower() == lowered:
                return helper
        return None
