"""Record types exchanged with the stored functions."""

from __future__ import annotations

from artmapper.models.gallery import Artwork, Collection, Favorite
from artmapper.models.user import LoginInfo, PublicProfile, SignupInfo, User, UserUpdate

__all__ = [
    "LoginInfo",
    "SignupInfo",
    "UserUpdate",
    "User",
    "PublicProfile",
    "Artwork",
    "Collection",
    "Favorite",
]
