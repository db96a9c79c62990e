"""Login gate and session handling."""

from src.auth.authenticator import (
    AcceptAnyAuthenticator,
    AuthenticationError,
    Authenticator,
    InvalidCredentialsError,
    MissingCredentialsError,
    SessionManager,
)

__all__ = [
    "AcceptAnyAuthenticator",
    "AuthenticationError",
    "Authenticator",
    "InvalidCredentialsError",
    "MissingCredentialsError",
    "SessionManager",
]
