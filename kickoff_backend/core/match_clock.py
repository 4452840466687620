# match_clock.py
# Pure helpers that derive a match's live state from its schedule and the wall clock.
# Every helper takes an explicit "now" so boundary behavior is deterministic.

from datetime import date, datetime, time
from typing import Optional

import pytz

from kickoff_backend.core.config import (
    AUTO_FINISH_THRESHOLD_MINUTES,
    FINISHED_DISPLAY_MINUTES,
    TIMEZONE,
)

LOCAL_TZ = pytz.timezone(TIMEZONE)

FINISHED_STATUS = "FT"
PRIME = "′"


def local_now() -> datetime:
    """Current wall-clock time in the configured zone, without tzinfo."""
    return datetime.now(LOCAL_TZ).replace(tzinfo=None)


def _as_local(now: datetime) -> datetime:
    # Aware datetimes are moved to the local zone; naive ones are already local.
    if now.tzinfo is not None:
        return now.astimezone(LOCAL_TZ).replace(tzinfo=None)
    return now


def match_start(match_date: date, match_time: Optional[time] = None) -> datetime:
    """
    Combine a match's date and optional kick-off time into one timestamp.
    A match without a time starts at 00:00 of its date.
    """
    return datetime.combine(match_date, match_time or time(0, 0))


def has_started(match_date: date, match_time: Optional[time], now: datetime) -> bool:
    return _as_local(now) >= match_start(match_date, match_time)


def elapsed_minutes(match_date: date, match_time: Optional[time], now: datetime) -> Optional[int]:
    """
    Whole minutes since kick-off, or None if the match has not started.
    """
    now = _as_local(now)
    start = match_start(match_date, match_time)
    if now < start:
        return None
    return int((now - start).total_seconds() // 60)


def should_auto_finish(
    match_date: date,
    match_time: Optional[time],
    current_status: str,
    now: datetime,
) -> bool:
    """
    A match that is not already finished is presumed over once
    AUTO_FINISH_THRESHOLD_MINUTES have passed since kick-off,
    whatever its current status (NS, LIVE or HT).
    """
    if _status_value(current_status) == FINISHED_STATUS:
        return False
    minutes = elapsed_minutes(match_date, match_time, now)
    return minutes is not None and minutes >= AUTO_FINISH_THRESHOLD_MINUTES


def format_elapsed(
    match_date: date,
    match_time: Optional[time],
    now: datetime,
    status: Optional[str] = None,
) -> Optional[str]:
    """
    Display string for the match clock, e.g. "42′".
    Finished matches always show "90′".
    """
    if status is not None and _status_value(status) == FINISHED_STATUS:
        return f"{FINISHED_DISPLAY_MINUTES}{PRIME}"
    minutes = elapsed_minutes(match_date, match_time, now)
    if minutes is None:
        return None
    return f"{minutes}{PRIME}"


def format_match_start_time(match_date: date, match_time: Optional[time]) -> Optional[str]:
    if match_time is None:
        return None
    return match_start(match_date, match_time).strftime("%H:%M")


def format_match_date(match_date: date) -> str:
    # e.g. "Sat, Dec 20"
    return f"{match_date.strftime('%a, %b')} {match_date.day}"


def is_in_past(match_date: date, match_time: Optional[time], now: datetime) -> bool:
    """
    Scheduling check. Without a kick-off time only the date is compared,
    so a match for today with no time is still accepted.
    """
    now = _as_local(now)
    if match_time is None:
        return match_date < now.date()
    return match_start(match_date, match_time) < now


def _status_value(status) -> str:
    # Accepts MatchStatus members as well as raw strings.
    return getattr(status, "value", status)
