"""
utils/parsing.py
----------------
Parsing of free-form command arguments typed by users.
"""

import math
import re
from typing import Optional

_CURRENCY_NOISE_RE = re.compile(r"[\s,$€£]")


def split_pipe_args(args: Optional[list[str]]) -> list[str]:
    """
    Re-join command words and split on '|':
    ``["Visa", "Card", "|", "debt", "|", "500"]`` -> ``["Visa Card", "debt", "500"]``.
    """
    text = " ".join(args or [])
    if not text.strip():
        return []
    return [part.strip() for part in text.split("|")]


def parse_amount(text: str) -> float:
    """
    Parse a money amount, ignoring currency symbols and thousands separators.
    The sign is kept so the services can reject negative amounts.

    Raises:
        ValueError: If the rest is not a finite number.
    """
    cleaned = _CURRENCY_NOISE_RE.sub("", text or "")
    try:
        amount = float(cleaned)
    except ValueError:
        raise ValueError(f"Not an amount: {text!r}") from None
    if not math.isfinite(amount):
        raise ValueError(f"Not an amount: {text!r}")
    return amount


def parse_id(text: str) -> int:
    """Parse an account id written as ``5`` or ``#5``."""
    return int((text or "").strip().lstrip("#"))


def reply_text(result: dict) -> str:
    """Turn a service result dict into a reply."""
    if result.get("success"):
        return result["message"]
    return f"⚠️ {result.get('error', 'Something went wrong.')}"
