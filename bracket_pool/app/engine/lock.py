from datetime import datetime, timezone
from typing import Optional, Tuple

from bracket_pool.app.models.enums import LockState

def as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def is_locked(is_locked_manual: bool, lock_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """A tournament is locked if the manual flag is set OR now is at/after lock_at."""
    if is_locked_manual:
        return True
    if lock_at is None:
        return False
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    return now >= as_utc(lock_at)

def lock_status(
    is_locked_manual: bool,
    lock_at: Optional[datetime],
    now: Optional[datetime] = None
) -> Tuple[LockState, str]:
    """Returns the lock state plus the banner message shown above the bracket."""
    if is_locked_manual:
        return LockState.LOCKED, "Picks locked, changes can no longer be made."

    if lock_at is None:
        return LockState.OPEN, "Picks are open, lock time not set yet."

    formatted = as_utc(lock_at).strftime("%b %d, %H:%M UTC")
    if is_locked(False, lock_at, now):
        return LockState.LOCKED, f"Picks locked as of {formatted}."
    return LockState.OPEN, f"Picks are open, lock time: {formatted}."
