"""
Credential lookup for repository endpoints.

The connector never stores secrets itself. A credential store maps an endpoint
key (the account URL from the descriptor) to a username/secret pair.

Credentials can be pre-loaded from environment variables.
Format: TERMCONNECTOR_CREDENTIAL_<N>_TARGET, TERMCONNECTOR_CREDENTIAL_<N>_USERNAME,
TERMCONNECTOR_CREDENTIAL_<N>_SECRET and optionally TERMCONNECTOR_CREDENTIAL_<N>_SCHEME
Example:
  TERMCONNECTOR_CREDENTIAL_1_TARGET=https://www.tausdata.org
  TERMCONNECTOR_CREDENTIAL_1_USERNAME=jane
  TERMCONNECTOR_CREDENTIAL_1_SECRET=secret123
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Protocol

from .models import Credentials

logger = logging.getLogger(__name__)

ENV_PREFIX = "TERMCONNECTOR_CREDENTIAL"


def _normalize_key(endpoint_key: str) -> str:
    return endpoint_key.strip().rstrip("/").lower()


class CredentialStore(Protocol):
    """Platform secret store seen from the connector."""

    def lookup(self, endpoint_key: str) -> Credentials | None:
        """Return the credentials stored for ``endpoint_key`` or None if there are none."""
        ...


class StaticCredentialStore:
    """In-memory store, keyed case-insensitively by endpoint URL."""

    def __init__(self, entries: Mapping[str, tuple[str, str]] | None = None, *, scheme: str = "Basic") -> None:
        self._entries: dict[str, Credentials] = {}
        for key, (username, secret) in (entries or {}).items():
            self.add(Credentials(scope_url=key, username=username, secret=secret, scheme=scheme))

    def add(self, credentials: Credentials) -> None:
        self._entries[_normalize_key(credentials.scope_url)] = credentials

    def lookup(self, endpoint_key: str) -> Credentials | None:
        return self._entries.get(_normalize_key(endpoint_key))

    def __len__(self) -> int:
        return len(self._entries)


class EnvCredentialStore(StaticCredentialStore):
    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._environ = os.environ if environ is None else environ
        self._load()

    def _load(self) -> None:
        index = 1
        while True:
            target = self._environ.get(f"{ENV_PREFIX}_{index}_TARGET")
            username = self._environ.get(f"{ENV_PREFIX}_{index}_USERNAME")
            secret = self._environ.get(f"{ENV_PREFIX}_{index}_SECRET")
            if not target or not username or secret is None:
                break
            scheme = self._environ.get(f"{ENV_PREFIX}_{index}_SCHEME", "Basic")
            self.add(Credentials(scope_url=target.strip(), username=username.strip(), secret=secret, scheme=scheme.strip()))
            index += 1
        logger.debug("Loaded %d credential entries from the environment", len(self))
