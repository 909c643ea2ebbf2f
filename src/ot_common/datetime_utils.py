"""UTC datetime utilities."""

from datetime import UTC, datetime


def to_iso_utc(dt: datetime) -> str:
    """Fixed-width ISO-8601 in UTC with milliseconds: '2025-03-01T12:00:00.000Z'.

    Naive datetimes are taken to be UTC (Prisma stores timestamp(3) without tz).
    Fixed width keeps lexical order equal to chronological order.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
