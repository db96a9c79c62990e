"""
Authentication

DESIGN DECISION: The login gate is a pluggable interface. The only
implementation accepts any non-empty credentials, matching the web
app, but a real credential check can be dropped in without touching the
ledger itself.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.activity import ActivityLogger
from src.exceptions import LedgerError
from src.models.session import Session
from src.services.storage import SessionStorageInterface


class AuthenticationError(LedgerError):
    """Base exception for login failures."""
    pass


class MissingCredentialsError(AuthenticationError):
    """Username or password was left empty."""

    def __init__(self):
        super().__init__("Please enter both username and password")


class InvalidCredentialsError(AuthenticationError):
    """The authenticator refused the credentials."""

    def __init__(self):
        super().__init__("Invalid credentials")


class Authenticator(ABC):
    """Decides whether a username/password pair may log in."""

    @abstractmethod
    def authenticate(self, username: str, password: str) -> bool:
        pass


class AcceptAnyAuthenticator(Authenticator):
    """Placeholder check: any non-empty username and password succeed."""

    def authenticate(self, username: str, password: str) -> bool:
        return len(username) > 0 and len(password) > 0


class SessionManager:
    """
    Owns the current session and keeps it in storage.

    The session is restored from storage when the manager is created,
    so a user who logged in earlier stays logged in.
    """

    def __init__(
        self,
        storage: SessionStorageInterface,
        authenticator: Optional[Authenticator] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._storage = storage
        self._authenticator = authenticator or AcceptAnyAuthenticator()
        self._activity_logger = activity_logger
        self._session = storage.load_session()

    @property
    def current(self) -> Session:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session.authenticated

    def login(self, username: str, password: str) -> Session:
        """
        Log a user in.

        Raises:
            MissingCredentialsError: If either field is empty
            InvalidCredentialsError: If the authenticator refuses
        """
        if not username or not password:
            self._rejected("missing_credentials")
            raise MissingCredentialsError()

        if not self._authenticator.authenticate(username, password):
            self._rejected("invalid_credentials")
            raise InvalidCredentialsError()

        session = Session(authenticated=True, username=username)
        self._storage.save_session(session)
        self._session = session

        if self._activity_logger:
            self._activity_logger.log_user_logged_in(username)
        return session

    def logout(self) -> None:
        username = self._session.username
        self._storage.clear_session()
        self._session = Session.anonymous()

        if self._activity_logger:
            self._activity_logger.log_user_logged_out(username)

    def _rejected(self, reason: str) -> None:
        if self._activity_logger:
            self._activity_logger.log_login_rejected(reason)
