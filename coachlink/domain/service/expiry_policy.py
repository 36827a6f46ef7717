"""Invitation expiry policy."""

import math
from datetime import datetime, timedelta

from .base import Service


class ExpiryPolicy(Service):
    """Fixed expiry window, counted from the most recent send."""

    def __init__(self, window_days: int = 14) -> None:
        self.window = timedelta(days=window_days)

    def expires_at(self, sent_at: datetime) -> datetime:
        """Compute the expiry timestamp for a send at ``sent_at``."""
        return sent_at + self.window

    def is_expired(self, expires_at: datetime | None, now: datetime) -> bool:
        """Whether the window has closed. A missing expiry never expires."""
        if expires_at is None:
            return False
        return now > expires_at

    def days_until_expiry(self, expires_at: datetime | None, now: datetime) -> int:
        """Whole days left, rounded up; negative once expired, 0 if unknown."""
        if expires_at is None:
            return 0
        return math.ceil((expires_at - now) / timedelta(days=1))
