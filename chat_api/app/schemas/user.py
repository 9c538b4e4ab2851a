"""
Pydantic models for user data.

Field names are snake_case in Python and camelCase on the wire
(``dateJoined``).  ``SafeUser`` is the only shape returned through the
API; it has no password field at all.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCredentials(BaseModel):
    """Username and password as submitted for login."""

    username: str = Field(..., examples=["user1"])
    password: str = Field(..., examples=["password123"])


class User(UserCredentials):
    """A user as stored, minus the identifier assigned on creation."""

    model_config = ConfigDict(populate_by_name=True)

    date_joined: datetime = Field(..., alias="dateJoined")


class SafeUser(BaseModel):
    """User projection exposed over HTTP; never carries the password."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    date_joined: datetime = Field(..., alias="dateJoined")
