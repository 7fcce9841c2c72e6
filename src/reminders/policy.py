"""Pure reminder eligibility rules.

Nothing here reads or writes the ledger: every function is a predicate or
formatter over instants, so presentation code can ask "may I show the
remind button?" without side effects.
"""

from datetime import datetime, timedelta

# One interval for both tracks
REMINDER_INTERVAL_MS = 2 * 24 * 60 * 60 * 1000
REMINDER_INTERVAL = timedelta(milliseconds=REMINDER_INTERVAL_MS)

_HOUR_MS = 60 * 60 * 1000
_DAY_MS = 24 * _HOUR_MS


def elapsed_ms(since: datetime, now: datetime) -> int:
    """Whole milliseconds from ``since`` to ``now`` (negative if in the future)."""
    return (now - since) // timedelta(milliseconds=1)


def pending_eligible(
    created_at: datetime,
    last_reminder_at: datetime | None,
    now: datetime,
    interval: timedelta = REMINDER_INTERVAL,
) -> bool:
    """Whether a reporter may nudge the admin about an unassigned complaint.

    Measured from the last reminder, or from creation if none was sent.
    """
    anchor = last_reminder_at if last_reminder_at is not None else created_at
    return now - anchor >= interval


def maintenance_eligible(
    assigned_at: datetime | None,
    last_reminder_at: datetime | None,
    now: datetime,
    interval: timedelta = REMINDER_INTERVAL,
) -> bool:
    """Whether a maintenance follow-up reminder may be sent.

    Never eligible for a complaint that was not tracked as assigned.
    """
    if assigned_at is None:
        return False
    anchor = last_reminder_at if last_reminder_at is not None else assigned_at
    return now - anchor >= interval


def next_eligible_at(
    anchor: datetime | None, interval: timedelta = REMINDER_INTERVAL
) -> datetime | None:
    """Earliest instant a reminder measured from ``anchor`` becomes eligible."""
    if anchor is None:
        return None
    return anchor + interval


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def humanize_elapsed(last_instant: datetime | None, now: datetime) -> str | None:
    """Coarse "time since" label for the last reminder.

    Uses whole days if at least one, else whole hours, else "Just now".

    Examples:
        >>> from datetime import UTC
        >>> t0 = datetime(2024, 1, 1, tzinfo=UTC)
        >>> humanize_elapsed(t0, t0 + timedelta(hours=1))
        '1 hour ago'
        >>> humanize_elapsed(t0, t0 + timedelta(days=2, hours=5))
        '2 days ago'
    """
    if last_instant is None:
        return None
    elapsed = max(elapsed_ms(last_instant, now), 0)
    days = elapsed // _DAY_MS
    hours = (elapsed % _DAY_MS) // _HOUR_MS
    if days > 0:
        return _plural(days, "day")
    if hours > 0:
        return _plural(hours, "hour")
    return "Just now"
