from typing import Any, Callable, Dict, List, Optional

from wikisites.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    cursor: Optional[CursorMeta] = None,
    total: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Shape a cursor-paginated list. ``total`` counts every row, not just this page.
    """
    response: Dict[str, Any] = {
        "items": [normalize_fn(item) for item in items],
    }

    if cursor is not None:
        response["pagination"] = {
            "has_more": cursor["has_more"],
            "next_cursor": cursor["next_cursor"],
        }
        if total is not None:
            response["pagination"]["total"] = total

    return response
