"""Keeps the FitLog sign-in token in the OS keychain between launches."""

import json
import logging
from dataclasses import dataclass
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

__all__ = ["SessionVault", "SavedSession"]

logger = logging.getLogger(__name__)

SERVICE_NAME = "FitLog"
ACCOUNT_NAME = "auth_token"


@dataclass
class SavedSession:
    """The bearer token FitLog issued at login, plus who it belongs to."""

    token: str
    email: str = ""

    def to_json(self) -> str:
        return json.dumps({"token": self.token, "email": self.email})

    @classmethod
    def from_json(cls, data: str) -> "SavedSession":
        parsed = json.loads(data)
        return cls(token=parsed["token"], email=parsed.get("email", ""))


class SessionVault:
    """One keychain entry holding the signed-in user's FitLog session.

    Keychain trouble is logged and reported as a False/None result; the
    app then simply asks the user to sign in again.
    """

    def __init__(self, service_name: str = SERVICE_NAME):
        self.service_name = service_name

    def save(self, session: SavedSession) -> bool:
        try:
            keyring.set_password(self.service_name, ACCOUNT_NAME, session.to_json())
        except KeyringError as e:
            logger.error(f"Could not keep the FitLog session in the keychain: {e}")
            return False
        logger.info(f"Saved FitLog session for {session.email or 'signed-in user'}")
        return True

    def load(self) -> Optional[SavedSession]:
        """The saved session, or None when signed out or unreadable."""
        try:
            data = keyring.get_password(self.service_name, ACCOUNT_NAME)
        except KeyringError as e:
            logger.error(f"Keychain unavailable, starting signed out: {e}")
            return None
        if not data:
            return None
        try:
            return SavedSession.from_json(data)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable FitLog session: {e}")
            return None

    def forget(self) -> bool:
        """Drop the saved session. Already signed out counts as success."""
        try:
            keyring.delete_password(self.service_name, ACCOUNT_NAME)
        except PasswordDeleteError:
            return True
        except KeyringError as e:
            logger.error(f"Could not remove the FitLog session from the keychain: {e}")
            return False
        logger.info("Removed FitLog session from the keychain")
        return True
