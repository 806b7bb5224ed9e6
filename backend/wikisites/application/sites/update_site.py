from typing import Any, Dict

from wikisites.domain.invariants.exceptions import ValidationError
from wikisites.models.site import Site
from wikisites.utils.transaction import transactional

ALLOWED_SITE_FIELDS = {"name", "domain"}


def update_site(*, site: Site, data: Dict[str, Any]) -> Site:
    # Subdomain and wiki_url are fixed once the wiki exists
    unknown = set(data) - ALLOWED_SITE_FIELDS
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    name = site.name
    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty")

    with transactional():
        site.name = name
        if "domain" in data:
            site.domain = data.get("domain") or None

    return site
