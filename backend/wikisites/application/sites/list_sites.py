from typing import List, Optional

from sqlalchemy import or_

from wikisites import store
from wikisites.domain.invariants.exceptions import NotFound
from wikisites.models.site import Site
from wikisites.utils.text import LIKE_ESCAPE, contains_pattern

PUBLIC_SITES_LIMIT = 50


def list_sites(*, owner) -> List[Site]:
    return (
        Site.query
        .filter_by(user_id=owner.id, is_active=True)
        .order_by(Site.created_at.desc())
        .all()
    )


def get_site_by_subdomain(*, subdomain: str) -> Site:
    site = store.get_active_site_by_subdomain(subdomain.lower())
    if not site:
        raise NotFound("Site not found")
    return site


def list_public_sites(*, search: Optional[str] = None, limit: int = PUBLIC_SITES_LIMIT) -> List[Site]:
    """
    Active sites newest first, optionally filtered by a case-insensitive
    substring of name or subdomain.
    """
    query = Site.query.filter_by(is_active=True)
    if search:
        pattern = contains_pattern(search)
        query = query.filter(or_(
            Site.name.ilike(pattern, escape=LIKE_ESCAPE),
            Site.subdomain.ilike(pattern, escape=LIKE_ESCAPE),
        ))
    return query.order_by(Site.created_at.desc()).limit(limit).all()
