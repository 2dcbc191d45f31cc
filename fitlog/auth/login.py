"""Login, registration and logout against the FitLog API."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..errors import FitLogError
from ..sync.http_client import (
    HttpError,
    RemoteClient,
    RemoteError,
    ServerRejection,
)
from .session import AuthGate

__all__ = ["LoginManager", "LoginState", "AuthError"]

logger = logging.getLogger(__name__)


class AuthError(FitLogError):
    """Login or registration failed. Meant to be shown to the user."""

    pass


@dataclass
class LoginState:
    """Current login state."""

    logged_in: bool = False
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_user(cls, user: dict) -> "LoginState":
        return cls(
            logged_in=True,
            user_id=user.get("id"),
            user_email=user.get("email"),
            user_name=user.get("name"),
        )


class LoginManager:
    """Manages the authentication flow.

    Unlike the repositories, these calls block the caller and raise
    AuthError so the failure can be surfaced.
    """

    def __init__(
        self,
        client: RemoteClient,
        auth: AuthGate,
        clear_local_data: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        """Initialize login manager.

        Args:
            client: FitLog API transport
            auth: Session holding the bearer credential
            clear_local_data: Coroutine wiping every local mirror
        """
        self.client = client
        self.auth = auth
        self._clear_local_data = clear_local_data

    async def _authenticate(self, path: str, payload: dict, fallback_error: str) -> LoginState:
        try:
            user = await self.client.request("POST", path, data=payload)
        except HttpError as e:
            raise AuthError(e.message or fallback_error) from e
        except RemoteError as e:
            raise AuthError(f"{fallback_error}: {e}") from e

        token = user.get("token") if isinstance(user, dict) else None
        if not token:
            raise AuthError(f"{fallback_error}: server returned no token")

        self.auth.set_token(token, user.get("email", ""))
        state = LoginState.from_user(user)
        logger.info(f"Logged in as {state.user_email}")
        return state

    async def login(self, email: str, password: str) -> LoginState:
        """Log in and keep the returned bearer token.

        Raises:
            AuthError: Bad credentials or server unreachable
        """
        return await self._authenticate(
            "/api/auth/login",
            {"email": email, "password": password},
            "Login failed",
        )

    async def register(self, email: str, password: str, name: str) -> LoginState:
        """Create an account.

        Local data from a previous user is wiped first so the new account
        never inherits someone else's mirror.
        """
        await self._clear()
        return await self._authenticate(
            "/api/auth/register",
            {"email": email, "password": password, "name": name},
            "Registration failed",
        )

    async def try_auto_login(self) -> LoginState:
        """Restore a stored credential and check it is still accepted."""
        if not self.auth.load():
            return LoginState(logged_in=False)

        try:
            user = await self.client.request("GET", "/api/auth/me")
        except ServerRejection as e:
            logger.warning(f"Stored credential rejected: {e}")
            self.auth.clear()
            return LoginState(logged_in=False, error="Stored credentials are invalid")
        except RemoteError as e:
            # Keep the credential; the network may come back.
            logger.warning(f"Cannot verify stored credential: {e}")
            return LoginState(
                logged_in=True,
                user_email=self.auth.user_email,
                error=f"Cannot verify credentials: {e}",
            )

        return LoginState.from_user(user if isinstance(user, dict) else {})

    async def logout(self) -> None:
        """Log out: tell the server, forget the token, purge local mirrors."""
        if self.auth.is_authenticated():
            try:
                await self.client.request("POST", "/api/auth/logout")
            except RemoteError as e:
                logger.warning(f"Server logout failed: {e}")

        self.auth.clear()
        await self._clear()
        logger.info("Logged out")

    async def _clear(self) -> None:
        if self._clear_local_data is not None:
            await self._clear_local_data()
