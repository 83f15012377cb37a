"""
Lockout Policy

Per-account failed login counter with a timed lock, stored on the User row.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from auth_service.domain.base import utcnow
from auth_service.domain.entities import User

logger = logging.getLogger(__name__)


class LockoutPolicy:
    """
    Account lockout after repeated failed logins.

    Business Rules:
    - Each failed password check increments failed_login_attempts
    - Reaching max_attempts sets locked_until = now + lockout_duration
    - A locked account cannot authenticate even with the correct password
    - A successful login resets the counter and clears the lock
    - Once a lock has expired the counter starts again from zero
    - Only local-credential accounts are subject to lockout

    The policy only mutates the user; callers persist it through the unit of work.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        lockout_duration: timedelta = timedelta(minutes=15),
    ):
        self.max_attempts = max_attempts
        self.lockout_duration = lockout_duration

    def is_locked(self, user: User, now: Optional[datetime] = None) -> bool:
        return user.is_locked(now)

    def record_failure(self, user: User, now: Optional[datetime] = None) -> bool:
        """
        Register a failed login.

        Returns:
            True if this failure locked the account
        """
        now = now or utcnow()
        if user.locked_until is not None and user.locked_until <= now:
            # Previous lock has run out
            user.failed_login_attempts = 0
            user.locked_until = None

        user.failed_login_attempts += 1
        user.last_failed_login_at = now

        if user.failed_login_attempts >= self.max_attempts:
            user.locked_until = now + self.lockout_duration
            logger.warning(
                "Account %s locked after %d failed attempts until %s",
                user.id, user.failed_login_attempts, user.locked_until.isoformat(),
            )
            return True
        return False

    def record_success(self, user: User, now: Optional[datetime] = None) -> None:
        user.failed_login_attempts = 0
        user.locked_until = None
        user.last_login_at = now or utcnow()

    def unlock(self, user: User) -> None:
        user.failed_login_attempts = 0
        user.locked_until = None
        user.last_failed_login_at = None

    def remaining_attempts(self, user: User) -> int:
        return max(0, self.max_attempts - user.failed_login_attempts)

    def remaining_lock_seconds(self, user: User, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        if not user.is_locked(now):
            return 0
        return int((user.locked_until - now).total_seconds())
