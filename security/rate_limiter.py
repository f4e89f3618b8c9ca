"""
security/rate_limiter.py
-------------------------
Per-user sliding-window rate limiting for bot handlers.
"""

import time
from collections import defaultdict
from functools import wraps
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Allows at most `max_calls` per user within `window` seconds.

    State is in memory only and resets on restart.
    """

    def __init__(self, max_calls: int, window: float):
        self.max_calls = max_calls
        self.window = window
        self._calls: dict[int, list[float]] = defaultdict(list)

    def allow(self, user_id: int, now: Optional[float] = None) -> bool:
        """Record a call and return False if the user is over the limit."""
        now = time.time() if now is None else now
        cutoff = now - self.window
        recent = [t for t in self._calls[user_id] if t > cutoff]
        if len(recent) >= self.max_calls:
            self._calls[user_id] = recent
            return False
        recent.append(now)
        self._calls[user_id] = recent
        return True

    def reset(self) -> None:
        self._calls.clear()


limiter = RateLimiter(RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS)


def rate_limited(func: Callable):
    """
    Decorator that enforces the shared limiter (configured via
    RATE_LIMIT_MESSAGES / RATE_LIMIT_WINDOW_SECONDS).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not limiter.allow(user.id):
            logger.warning(f"Rate limit hit for user {user.id}")
            await update.message.reply_text("⚠️ Too many messages. Please wait a moment.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
