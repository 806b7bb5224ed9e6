from typing import Any, Dict

from flask import current_app

from wikisites import store
from wikisites.domain.invariants.exceptions import Conflict
from wikisites.domain.invariants.site import assert_site_payload
from wikisites.extensions import db, get_gateway
from wikisites.models.site import Site
from wikisites.utils.transaction import transactional


def create_site(*, owner, data: Dict[str, Any]) -> Site:
    """
    Register a tenant site and provision its wiki.

    Responsibilities:
    - Validate name and subdomain label
    - Subdomain unique among active sites
    - Resolve the tenant wiki endpoint (farm provisioning is best-effort)
    """
    name = (data.get("name") or "").strip()
    subdomain = (data.get("subdomain") or "").strip().lower()
    assert_site_payload(name, subdomain)

    if store.subdomain_taken(subdomain):
        raise Conflict("Subdomain already taken")

    wiki_url = get_gateway().create_wiki_site(subdomain)

    with transactional():
        site = Site()
        site.name = name
        site.subdomain = subdomain
        site.domain = data.get("domain") or None
        site.wiki_url = wiki_url
        site.user_id = owner.id
        site.is_active = True
        db.session.add(site)

    current_app.logger.info("Created site %s (%s) for user %s", site.id, subdomain, owner.id)
    return site
