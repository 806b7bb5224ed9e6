from typing import Any, Dict, List

from wikisites.extensions import db, get_gateway
from wikisites.models.page import Page
from wikisites.models.page_revision import PageRevision
from wikisites.models.site import Site


def _iso(value):
    return value.isoformat() if value else None


def recent_changes(*, limit: int = 50, include_wiki: bool = False) -> Dict[str, List[Dict[str, Any]]]:
    sites = (
        Site.query
        .filter_by(is_active=True)
        .order_by(Site.created_at.desc())
        .limit(limit)
        .all()
    )

    rows = (
        db.session.query(PageRevision, Page, Site)
        .join(Page, PageRevision.page_id == Page.id)
        .join(Site, Page.site_id == Site.id)
        .filter(Site.is_active.is_(True))
        .order_by(PageRevision.created_at.desc())
        .limit(limit)
        .all()
    )

    changes = {
        "sites": [
            {
                "type": "site_created",
                "id": site.id,
                "title": site.name,
                "subdomain": site.subdomain,
                "timestamp": _iso(site.created_at),
            }
            for site in sites
        ],
        "revisions": [
            {
                "type": "revision",
                "id": revision.id,
                "title": f"{site.subdomain}/{page.title}",
                "comment": revision.comment,
                "is_minor": revision.is_minor,
                "user_id": revision.user_id,
                "timestamp": _iso(revision.created_at),
            }
            for revision, page, site in rows
        ],
    }

    if include_wiki:
        changes["wiki"] = get_gateway().get_recent_changes(limit)

    return changes
