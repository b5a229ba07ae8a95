"""Shared test fixtures for registry-auth tests."""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from registry_auth.models.auth import HelperCredential, RegistryAuth
from registry_auth.utils.config import RegistryAuthSettings, set_config

# base64("dockerman:sw4gy0lo")
DOCKERMAN_AUTH = "ZG9ja2VybWFuOnN3NGd5MGxv"


class FakeCredentialHelper:
    """In-memory stand-in for docker-credential-* programs.

    ``credentials`` maps (helper name, registry) to the credential the
    helper returns; every ``get`` is recorded in ``calls``.
    """

    def __init__(self, credentials: dict[tuple[str, str], RegistryAuth] | None = None) -> None:
        self.credentials = dict(credentials or {})
        self.calls: list[tuple[str, str]] = []
        self.errors: dict[str, Exception] = {}

    def get(self, helper_name: str, registry: str) -> RegistryAuth | None:
        self.calls.append((helper_name, registry))
        if helper_name in self.errors:
            raise self.errors[helper_name]
        return self.credentials.get((helper_name, registry))

    def list(self, helper_name: str) -> dict[str, str]:
        return {
            registry: auth.username or ""
            for (name, registry), auth in self.credentials.items()
            if name == helper_name
        }

    def store(self, helper_name: str, credential: HelperCredential) -> None:
        self.credentials[(helper_name, credential.server_url)] = credential.to_registry_auth()

    def erase(self, helper_name: str, registry: str) -> None:
        self.credentials.pop((helper_name, registry), None)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep tests away from the real docker config and settings files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("DOCKER_CONFIG", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    set_config(RegistryAuthSettings())

    yield

    set_config(None)
    logger = logging.getLogger("registry_auth")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Any], Path]:
    """Factory writing a docker config file and returning its path."""

    def _write(data: Any, name: str = "config.json") -> Path:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data)
        else:
            path.write_text(json.dumps(data))
        return path

    return _write


@pytest.fixture
def dockerhub_config(write_config) -> Path:
    """Config with a single Docker Hub entry for dockerman."""
    return write_config(
        {
            "auths": {
                "https://index.docker.io/v1/": {
                    "auth": DOCKERMAN_AUTH,
                    "email": "dockerman@hub.com",
                }
            }
        }
    )


@pytest.fixture
def fake_helper() -> FakeCredentialHelper:
    """Credential helper stand-in with no stored credentials."""
    return FakeCredentialHelper()
