# src/planit/settings/credentials.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import keyring
from keyring.errors import PasswordDeleteError

from ..core.ports import SettingsDocument, TokenStore
from .store import KEY_NOTION_TOKEN

logger = logging.getLogger(__name__)


class KeyringTokenStore:
    """Notion token in the OS keychain (Secret Service, macOS Keychain, Windows Credential Locker)."""

    def __init__(self, service: str = "planit-app", username: str = "notion-token") -> None:
        self._service = service
        self._username = username

    @classmethod
    def from_settings(cls, settings) -> KeyringTokenStore:
        return cls(service=settings.keyring_service, username=settings.keyring_username)

    def save(self, token: str) -> None:
        keyring.set_password(self._service, self._username, token)

    def load(self) -> str:
        return keyring.get_password(self._service, self._username) or ""

    def delete(self) -> None:
        try:
            keyring.delete_password(self._service, self._username)
        except PasswordDeleteError:
            # Nothing stored: already in the desired state.
            logger.debug("No keychain entry to delete for %s/%s", self._service, self._username)


@dataclass(frozen=True, slots=True)
class TokenLookup:
    """One way of finding the token. `fetch` may raise; the chain moves on."""

    name: str
    fetch: Callable[[], str | None]


def secure_storage_lookup(store: TokenStore) -> TokenLookup:
    return TokenLookup(name="secure_storage", fetch=store.load)


def legacy_field_lookup(document: SettingsDocument) -> TokenLookup:
    def fetch() -> str | None:
        value = document.get(KEY_NOTION_TOKEN)
        return value if isinstance(value, str) else None

    return TokenLookup(name="legacy_settings_field", fetch=fetch)


def default_token_lookups(store: TokenStore, document: SettingsDocument) -> list[TokenLookup]:
    """Secure storage first, then the plaintext field older versions wrote."""
    return [secure_storage_lookup(store), legacy_field_lookup(document)]


def resolve_token(lookups: Sequence[TokenLookup]) -> str:
    """Try each lookup in order; the first non-empty token wins. Returns "" if none."""
    for lookup in lookups:
        try:
            token = lookup.fetch()
        except Exception:
            logger.warning("Token lookup %s failed; trying next", lookup.name, exc_info=True)
            continue
        if token and token.strip():
            logger.debug("Token resolved via %s", lookup.name)
            return token.strip()
    return ""
