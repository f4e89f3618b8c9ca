"""
models/user.py
--------------
Domain model for registered users.
"""

import re
from dataclasses import dataclass
from typing import Optional

_CUSTOM_ID_RE = re.compile(r"^[a-z0-9_-]{3,50}$")


@dataclass
class User:
    """
    A registered user.

    Attributes:
        uid: Stable user id (the Telegram id as a string).
        name: Display name.
        email: Optional email address.
        picture: Optional avatar URL.
        custom_user_id: Optional public handle, see `normalize_custom_id`.
    """
    uid: str
    name: Optional[str] = None
    email: Optional[str] = None
    picture: Optional[str] = None
    custom_user_id: Optional[str] = None

    @staticmethod
    def normalize_custom_id(value: str) -> str:
        """
        Lowercase and validate a custom user id.

        Raises:
            ValueError: If it is not 3-50 chars of [a-z0-9_-].
        """
        value = (value or "").strip().lower()
        if not _CUSTOM_ID_RE.match(value):
            raise ValueError(
                "Custom ID must be 3-50 characters of lowercase letters, "
                "numbers, hyphens and underscores"
            )
        return value
