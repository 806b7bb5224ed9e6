from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Tuple, Type, TypedDict

from sqlalchemy.orm import Query
from sqlalchemy.sql import and_, or_

from wikisites.domain.invariants.exceptions import ValidationError

MAX_PAGE_SIZE = 100


class CursorMeta(TypedDict):
    has_more: bool
    next_cursor: Optional[str]


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    """
    Cursor format: ``<ISO8601 created_at>|<id>``.
    """
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")
    return f"{created_at.isoformat()}|{row_id}"


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    if not cursor or "|" not in cursor:
        raise ValidationError("Invalid cursor format")

    ts_str, row_id = cursor.split("|", 1)
    try:
        return datetime.fromisoformat(ts_str), row_id
    except ValueError as exc:
        raise ValidationError("Invalid cursor format") from exc


def parse_limit(raw: Optional[str], default: int = 50) -> int:
    if raw is None or raw == "":
        return default
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer")
    if limit <= 0:
        raise ValidationError("limit must be greater than zero")
    return min(limit, MAX_PAGE_SIZE)


def apply_cursor(query: Query, *, model: Type[Any], cursor: Optional[str]) -> Query:
    """
    Restrict ``query`` to rows older than the cursor.

    Ordering contract: ORDER BY created_at DESC, id DESC (see paginate_cursor).
    """
    if not cursor:
        return query

    cursor_ts, cursor_id = decode_cursor(cursor)
    return query.filter(
        or_(
            model.created_at < cursor_ts,
            and_(model.created_at == cursor_ts, model.id < cursor_id),
        )
    )


def paginate_cursor(query: Query, *, model: Type[Any], limit: int) -> tuple[list[Any], CursorMeta]:
    """
    Fetch ``limit + 1`` rows newest first; the extra row only signals continuation.
    """
    if limit <= 0:
        raise ValidationError("limit must be greater than zero")

    rows = (
        query.order_by(model.created_at.desc(), model.id.desc())
        .limit(limit + 1)
        .all()
    )

    has_more = len(rows) > limit
    items = rows[:limit]

    next_cursor = None
    if items and has_more:
        last = items[-1]
        next_cursor = encode_cursor(last.created_at, last.id)

    return items, {"has_more": has_more, "next_cursor": next_cursor}
