"""Document freshness — decides whether a document is outstanding.

A document is outstanding when it has never been submitted, or when its most
recent submission is older than the staleness window. The window is a fixed
duration of 6 x 30 days. It is deliberately not calendar-month arithmetic:
"six months" here always means exactly 180 days.

The current time is always passed in by the caller. Naive timestamps, such
as values read from columns without a time zone, are taken to be UTC.
"""

from datetime import UTC, datetime, timedelta

SIX_MONTHS = timedelta(days=6 * 30)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def is_outstanding(
    last_submitted_at: datetime | None,
    now: datetime,
    window: timedelta = SIX_MONTHS,
) -> bool:
    """Return whether a document needs a new submission.

    A submission exactly ``window`` old is still fresh.

    Args:
        last_submitted_at: Timestamp of the most recent submission, or None.
        now: Current time.
        window: Staleness window.

    Returns:
        True when never submitted or older than the window.
    """
    if last_submitted_at is None:
        return True
    if (last_submitted_at.tzinfo is None) != (now.tzinfo is None):
        last_submitted_at, now = _as_utc(last_submitted_at), _as_utc(now)
    return now - last_submitted_at > window
