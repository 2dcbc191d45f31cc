"""Session state consulted by every repository operation."""

import logging
from typing import Optional

from .keychain import SavedSession, SessionVault

__all__ = ["AuthGate"]

logger = logging.getLogger(__name__)


class AuthGate:
    """Holds the bearer credential, if any.

    Passed explicitly to repositories and the RemoteClient instead of being
    read from a global, so callers (and tests) control the session.
    """

    def __init__(
        self,
        vault: Optional[SessionVault] = None,
        token: Optional[str] = None,
    ):
        self.vault = vault
        self._token = token
        self.user_email: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def is_authenticated(self) -> bool:
        return bool(self._token)

    def load(self) -> bool:
        """Restore the saved session. Returns True if one was found."""
        if self.vault is None:
            return self.is_authenticated()
        saved = self.vault.load()
        if saved is None:
            return False
        self._token = saved.token
        self.user_email = saved.email or None
        return True

    def set_token(self, token: str, user_email: str = "") -> None:
        """Adopt a new credential and persist it."""
        self._token = token
        self.user_email = user_email or None
        if self.vault is not None and not self.vault.save(
            SavedSession(token=token, email=user_email)
        ):
            logger.warning("Failed to persist credential; session lasts until exit")

    def clear(self) -> None:
        """Forget the credential in memory and in the keychain."""
        self._token = None
        self.user_email = None
        if self.vault is not None:
            self.vault.forget()
