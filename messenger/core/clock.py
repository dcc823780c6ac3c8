# messenger/core/clock.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(dt: datetime | None) -> datetime | None:
    # SQLite devolve datetimes "naive" mesmo com DateTime(timezone=True)
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
