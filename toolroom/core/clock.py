# toolroom/core/clock.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, the form the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def from_epoch_ms(value: float) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)
