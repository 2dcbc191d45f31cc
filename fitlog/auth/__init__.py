"""Auth module - session state, credential storage and login flow."""

from .keychain import SavedSession, SessionVault
from .login import AuthError, LoginManager, LoginState
from .session import AuthGate

__all__ = [
    "AuthGate",
    "AuthError",
    "LoginManager",
    "LoginState",
    "SavedSession",
    "SessionVault",
]
