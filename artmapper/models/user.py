"""User-side records.

Inputs (LoginInfo, SignupInfo, UserUpdate) are serialized to a single JSON
argument for the stored function. Outputs keep any extra column the
function returns, since the data layer does not own the schema.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class LoginInfo(BaseModel):
    """Credentials passed to get_user_by_email and sign_in."""

    email: str
    password: str


class SignupInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str
    password: str
    nickname: str


class UserUpdate(BaseModel):
    """New field values for update_person; only ``id`` is mandatory."""

    model_config = ConfigDict(extra="allow")

    id: int


class User(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    email: str | None = None
    nickname: str | None = None
    role: str | None = None


class PublicProfile(BaseModel):
    """What get_user_profil exposes about a user to other users."""

    model_config = ConfigDict(extra="allow")

    id: int
    nickname: str | None = None


def as_argument(value: BaseModel | dict[str, Any]) -> dict[str, Any]:
    """Serialize an input record to the JSON-ready dict sent as the function argument."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    return dict(value)
