from datetime import datetime, timezone


def utcnow():
    # naive UTC, matching what DateTime columns hand back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value):
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
