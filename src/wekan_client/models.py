from dataclasses import dataclass
from datetime import datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

# =============================================================================
# SESSION
# =============================================================================


@dataclass(frozen=True, slots=True)
class Session:
    """Result of one successful login.

    The three fields are always replaced together; a token is never paired
    with another login's expiry.
    """

    token: str
    user_id: str
    expires_at: datetime

    def __repr__(self) -> str:
        return f"Session(user_id={self.user_id!r}, expires_at={self.expires_at.isoformat()})"


# =============================================================================
# WIRE MODELS
# =============================================================================
# Bodies of /users/login and /users/register


class LoginResponse(BaseModel):
    """Successful login or register response."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="ID of the logged in user")
    token: str = Field(..., min_length=1, description="Bearer token for API calls")
    token_expires: AwareDatetime = Field(
        ..., alias="tokenExpires", description="RFC 3339 expiry of the token"
    )

    def to_session(self) -> Session:
        return Session(token=self.token, user_id=self.id, expires_at=self.token_expires)


class BadRequestResponse(BaseModel):
    """Body sent along with a 400 status."""

    error: int = Field(0, description="Error code echoed by the server")
    reason: str = Field("", description="Human-readable reason")
