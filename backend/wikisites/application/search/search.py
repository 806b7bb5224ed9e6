import math
from typing import Any, Dict, List, Optional

from sqlalchemy import or_

from wikisites.domain.invariants.exceptions import ValidationError
from wikisites.extensions import get_gateway, get_settings
from wikisites.models.site import Site
from wikisites.utils.text import LIKE_ESCAPE, contains_pattern, strip_tags

SEARCH_TYPES = {"search", "suggestions"}
DEFAULT_SEARCH_LIMIT = 20


def search(
    *,
    query: Optional[str],
    search_type: str = "search",
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> List[Dict[str, Any]]:
    """
    Search the default wiki and the local site directory.

    ``suggestions`` returns wiki title completions only. ``search`` gives each
    source half of ``limit`` (rounded up), wiki hits first, then caps the merge.
    """
    if not query or not query.strip():
        raise ValidationError("Search query required")
    if search_type not in SEARCH_TYPES:
        raise ValidationError("type must be search or suggestions")

    query = query.strip()
    gateway = get_gateway()

    if search_type == "suggestions":
        return [
            {"type": "suggestion", **item}
            for item in gateway.get_search_suggestions(query, limit)
        ]

    share = math.ceil(limit / 2)
    results: List[Dict[str, Any]] = [
        {
            "type": "wiki",
            "title": hit.get("title"),
            "snippet": strip_tags(hit.get("snippet", "")),
            "timestamp": hit.get("timestamp"),
        }
        for hit in gateway.search(query, share)
    ]

    settings = get_settings()
    pattern = contains_pattern(query)
    sites = (
        Site.query
        .filter(Site.is_active.is_(True))
        .filter(or_(
            Site.name.ilike(pattern, escape=LIKE_ESCAPE),
            Site.subdomain.ilike(pattern, escape=LIKE_ESCAPE),
        ))
        .order_by(Site.created_at.desc())
        .limit(share)
        .all()
    )
    results.extend(
        {
            "type": "site",
            "id": site.id,
            "title": site.name,
            "subdomain": site.subdomain,
            "url": settings.site_url(site.subdomain),
        }
        for site in sites
    )

    return results[:limit]
