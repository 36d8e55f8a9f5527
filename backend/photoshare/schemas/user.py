"""User schemas."""

from pydantic import Field

from photoshare.schemas.base import ApiModel


class UserSummary(ApiModel):
    """Denormalized author/owner snapshot."""

    id: str = Field(alias="_id")
    first_name: str
    last_name: str


class UserDetail(UserSummary):
    location: str = ""
    description: str = ""
    occupation: str = ""


class UserCreate(ApiModel):
    """Registration request."""

    login_name: str
    password: str
    first_name: str
    last_name: str
    location: str | None = None
    description: str | None = None
    occupation: str | None = None


class LoginRequest(ApiModel):
    login_name: str
    password: str


class AccountResponse(ApiModel):
    """Returned by registration and login."""

    id: str = Field(alias="_id")
    login_name: str
    first_name: str
    last_name: str


class UserCounts(ApiModel):
    id: str = Field(alias="_id")
    photoCount: int = 0
    commentCount: int = 0
