"""Bridge to docker credential helper programs.

A credential helper is an executable named ``docker-credential-<name>``
that speaks a tiny stdin/stdout protocol::

    $ echo gcr.io | docker-credential-gcloud get
    {"ServerURL":"gcr.io","Username":"_dcgcloud_token","Secret":"ya29..."}

Helpers are run through a collaborator object so that the config reader
never starts processes itself and tests can substitute a fake.
"""

from __future__ import annotations

import json
import subprocess
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from registry_auth.models.auth import HelperCredential, RegistryAuth
from registry_auth.utils.config import (
    DEFAULT_HELPER_PREFIX,
    DEFAULT_NOT_FOUND_MESSAGES,
    HelperOverride,
    HelperSettings,
)
from registry_auth.utils.errors import CredentialHelperError
from registry_auth.utils.logging import get_logger, get_logger_with_context

logger = get_logger("core.credential_helper")


@runtime_checkable
class CredentialHelper(Protocol):
    """Protocol for running credential helpers.

    ``get`` is the only operation the resolution path needs; ``list``,
    ``store`` and ``erase`` complete the helper protocol for callers that
    manage credentials.
    """

    def get(self, helper_name: str, registry: str) -> RegistryAuth | None:
        """Get the credential a helper holds for a registry.

        Args:
            helper_name: Helper name without prefix (e.g. "osxkeychain")
            registry: Registry host as stored in the helper

        Returns:
            The credential, or None if the helper has none for this registry

        Raises:
            CredentialHelperError: If the helper cannot be run or fails
        """
        ...

    def list(self, helper_name: str) -> dict[str, str]:
        """List server URLs and usernames a helper holds."""
        ...

    def store(self, helper_name: str, credential: HelperCredential) -> None:
        """Store a credential in a helper."""
        ...

    def erase(self, helper_name: str, registry: str) -> None:
        """Erase the credential a helper holds for a registry."""
        ...


class SystemCredentialHelper:
    """Runs credential helpers as subprocesses found on PATH.

    Helpers signal "no credential" differently. The stock helpers print
    ``credentials not found in native keychain`` and exit 1; others use a
    dedicated exit code. Both conventions are configurable per helper.

    Example:
        helper = SystemCredentialHelper()
        auth = helper.get("desktop", "https://index.docker.io/v1/")
    """

    def __init__(
        self,
        prefix: str = DEFAULT_HELPER_PREFIX,
        not_found_messages: Iterable[str] | None = None,
        overrides: Mapping[str, HelperOverride] | None = None,
    ) -> None:
        self.prefix = prefix
        self.not_found_messages = list(
            DEFAULT_NOT_FOUND_MESSAGES if not_found_messages is None else not_found_messages
        )
        self.overrides = dict(overrides or {})

    @classmethod
    def from_settings(cls, settings: HelperSettings) -> "SystemCredentialHelper":
        """Create a helper runner from settings."""
        return cls(
            prefix=settings.prefix,
            not_found_messages=settings.not_found_messages,
            overrides=settings.overrides,
        )

    def executable(self, helper_name: str) -> str:
        return f"{self.prefix}{helper_name}"

    def is_not_found(self, helper_name: str, exit_code: int, output: str) -> bool:
        """Decide whether a failed helper run means "no credential stored"."""
        override = self.overrides.get(helper_name)
        if override and exit_code in override.not_found_exit_codes:
            return True

        messages = list(self.not_found_messages)
        if override:
            messages.extend(override.not_found_messages)
        text = output.strip()
        return any(message in text for message in messages)

    def _run(self, helper_name: str, operation: str, data: str) -> subprocess.CompletedProcess[str]:
        command = [self.executable(helper_name), operation]
        log = get_logger_with_context("core.credential_helper", helper=helper_name, operation=operation)
        log.debug(f"Running {command[0]}")
        try:
            return subprocess.run(
                command,
                input=data,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise CredentialHelperError(
                f"Credential helper not found: {command[0]}", helper=helper_name
            ) from e
        except OSError as e:
            raise CredentialHelperError(
                f"Failed to run credential helper {command[0]}: {e}", helper=helper_name
            ) from e

    def _fail(self, helper_name: str, operation: str, result: subprocess.CompletedProcess[str]) -> CredentialHelperError:
        output = (result.stdout or "").strip() or (result.stderr or "").strip()
        return CredentialHelperError(
            f"{self.executable(helper_name)} {operation} exited with status {result.returncode}: {output}",
            helper=helper_name,
            exit_code=result.returncode,
        )

    def get(self, helper_name: str, registry: str) -> RegistryAuth | None:
        result = self._run(helper_name, "get", f"{registry}\n")

        if result.returncode != 0:
            output = f"{result.stdout or ''}\n{result.stderr or ''}"
            if self.is_not_found(helper_name, result.returncode, output):
                logger.debug(f"Credential helper {helper_name} has no credential for {registry}")
                return None
            raise self._fail(helper_name, "get", result)

        try:
            credential = HelperCredential.model_validate_json(result.stdout)
        except ValidationError as e:
            raise CredentialHelperError(
                f"Credential helper {helper_name} returned invalid output", helper=helper_name
            ) from e

        if not credential.username and not credential.secret:
            return None
        return credential.to_registry_auth(registry)

    def list(self, helper_name: str) -> dict[str, str]:
        result = self._run(helper_name, "list", "")
        if result.returncode != 0:
            raise self._fail(helper_name, "list", result)

        try:
            data = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise CredentialHelperError(
                f"Credential helper {helper_name} returned invalid output", helper=helper_name
            ) from e
        if not isinstance(data, dict):
            raise CredentialHelperError(
                f"Credential helper {helper_name} returned invalid output", helper=helper_name
            )
        return {str(k): str(v) for k, v in data.items()}

    def store(self, helper_name: str, credential: HelperCredential) -> None:
        result = self._run(helper_name, "store", credential.to_json())
        if result.returncode != 0:
            raise self._fail(helper_name, "store", result)

    def erase(self, helper_name: str, registry: str) -> None:
        result = self._run(helper_name, "erase", f"{registry}\n")
        if result.returncode != 0:
            raise self._fail(helper_name, "erase", result)
