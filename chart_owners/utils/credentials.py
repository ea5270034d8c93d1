import os
from collections.abc import Mapping
from typing import (
    Any,
    Protocol,
    runtime_checkable,
)

from chart_owners.exceptions import CredentialError
from chart_owners.utils import config

GITHUB_TOKEN = "GITHUB_TOKEN"

GITHUB_TOKEN_SECRET = {"path": "github", "field": "token"}


@runtime_checkable
class CredentialProvider(Protocol):
    """Anything able to hand out a GitHub token."""

    def read_token(self) -> str: ...


class StaticCredentialProvider:
    def __init__(self, token: str) -> None:
        self._token = token

    def read_token(self) -> str:
        if not self._token:
            raise CredentialError("Please supply a valid GitHub token")
        return self._token


class EnvCredentialProvider:
    """
    Reads the token from an environment variable.

    The environment mapping can be injected so callers never have to touch
    the process environment.
    """

    def __init__(
        self,
        variable: str = GITHUB_TOKEN,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.variable = variable
        self._environ = os.environ if environ is None else environ

    def read_token(self) -> str:
        token = self._environ.get(self.variable)
        if not token:
            raise CredentialError(
                f"Please supply an environment variable named {self.variable} "
                "with a valid token"
            )
        return token


class ConfigCredentialProvider:
    """Reads the token from the `[github]` table of a toml config."""

    def __init__(
        self,
        settings: Mapping[str, Any],
        secret: Mapping[str, str] = GITHUB_TOKEN_SECRET,
    ) -> None:
        self._settings = settings
        self._secret = secret

    def read_token(self) -> str:
        try:
            token = config.read(self._settings, self._secret)
        except config.SecretNotFound as e:
            raise CredentialError(str(e)) from None
        if not token:
            raise CredentialError(
                f"empty token in config key {self._secret['path']}.{self._secret['field']}"
            )
        return str(token)


def init_credential_provider(
    settings: Mapping[str, Any] | None = None,
) -> CredentialProvider:
    if settings is not None and config.read_optional(settings, GITHUB_TOKEN_SECRET):
        return ConfigCredentialProvider(settings)
    return EnvCredentialProvider()
