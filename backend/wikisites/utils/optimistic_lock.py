from datetime import timezone
from dateutil.parser import parse, ParserError
from wikisites.domain.invariants.exceptions import ValidationError, Conflict


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def assert_unmodified_since(entity, client_ts):
    """
    Raises Conflict when ``entity`` changed after ``client_ts``.
    Without a timestamp the write goes through (last writer wins).
    """
    if not client_ts or entity is None or entity.updated_at is None:
        return

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, OverflowError, ValueError):
        raise ValidationError("Invalid If-Unmodified-Since header")

    server_ts = normalize_ts(entity.updated_at)

    # HTTP dates carry whole seconds only
    if server_ts.replace(microsecond=0) > client_ts:
        raise Conflict("Conflict detected. Page has been modified.")
