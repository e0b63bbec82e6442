"""Slack message timestamp helpers."""

from datetime import UTC, datetime


def ts_to_datetime(ts: str | None) -> datetime | None:
    """Convert a Slack 'seconds.micros' timestamp to an aware datetime."""
    if not ts:
        return None
    try:
        return datetime.fromtimestamp(float(ts), tz=UTC)
    except (TypeError, ValueError, OverflowError):
        return None


def days_since(moment: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed since moment (floored, never negative)."""
    now = now or datetime.now(UTC)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return max(0, (now - moment).days)


def permalink(base_uri: str, channel_id: str, ts: str) -> str:
    """Archive link for a message: <base>/<channel>/p<ts without dot>."""
    return f"{base_uri.rstrip('/')}/{channel_id}/p{ts.replace('.', '')}"
