from typing import Any, Dict

from wikisites.extensions import get_settings


def _iso(value):
    return value.isoformat() if value else None


def normalize_site(site, owner=False) -> Dict[str, Any]:
    base = {
        "id": site.id,
        "name": site.name,
        "subdomain": site.subdomain,
        "domain": site.domain,
        "url": get_settings().site_url(site.subdomain),
        "created_at": _iso(site.created_at),
    }

    if owner:
        base["wiki_url"] = site.wiki_url
        base["is_active"] = site.is_active
        base["updated_at"] = _iso(site.updated_at)

    return base
