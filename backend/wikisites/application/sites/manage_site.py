from dataclasses import dataclass

from flask import current_app

from wikisites import store
from wikisites.domain.invariants.exceptions import Conflict
from wikisites.domain.lifecycle.site import assert_site_transition
from wikisites.extensions import get_gateway
from wikisites.models.site import Site
from wikisites.utils.transaction import transactional


@dataclass
class ManageResult:
    site: Site
    action: str
    wiki_synced: bool


def manage_site(*, site: Site, action: str) -> ManageResult:
    """
    Suspend or re-activate a site.

    The wiki farm is told first; whatever it answers, the local flag changes.
    """
    target = assert_site_transition(is_active=site.is_active, action=action)

    if target and store.subdomain_taken(site.subdomain, exclude_site_id=site.id):
        raise Conflict("Subdomain is now used by another active site")

    wiki_synced = get_gateway().manage_wiki_site(site.wiki_url, action)

    with transactional():
        site.is_active = target

    current_app.logger.info(
        "Site %s %s (wiki synced: %s)",
        site.subdomain,
        "activated" if target else "suspended",
        wiki_synced,
    )
    return ManageResult(site=site, action=action, wiki_synced=wiki_synced)
