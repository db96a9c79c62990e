"""Session model for the placeholder login gate."""

from pydantic import BaseModel, Field


class Session(BaseModel):
    """
    Who is using the ledger right now.

    This is not security. Any non-empty credentials produce an
    authenticated session; the flag only decides whether the login
    screen is shown.
    """

    authenticated: bool = Field(
        default=False,
        description="Has the user passed the login gate?"
    )
    username: str = Field(
        default="",
        description="Display name entered at login"
    )

    @property
    def initials(self) -> str:
        """First two characters of the display name, upper-cased."""
        return self.username[:2].upper()

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()
