"""
services/user_service.py
------------------------
Registration and profile settings.
"""

from typing import Optional

from models.user import User
from repositories.user_repo import UserRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class UserService:
    """Keeps the users table in sync with whoever talks to the bot."""

    def __init__(self):
        self.repo = UserRepository()

    def register(self, uid: str, name: Optional[str] = None) -> User:
        user = self.repo.ensure_user(uid, name)
        logger.info(f"User {uid} registered/refreshed.")
        return user

    def get_profile(self, uid: str) -> Optional[User]:
        return self.repo.get_by_uid(uid)

    def set_custom_id(self, uid: str, custom_user_id: str) -> dict:
        """
        Claim a public custom id.

        Returns:
            {'success': True, 'message'} or {'success': False, 'error'}.
        """
        try:
            value = User.normalize_custom_id(custom_user_id)
        except ValueError as e:
            return {"success": False, "error": str(e)}

        if self.repo.is_custom_id_taken(value, exclude_uid=uid):
            return {"success": False, "error": f"\"{value}\" is already taken"}

        self.repo.set_custom_id(uid, value)
        return {"success": True, "message": f"🆔 Your custom ID is now \"{value}\"."}
