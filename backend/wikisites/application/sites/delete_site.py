from flask import current_app

from wikisites.extensions import get_gateway
from wikisites.models.site import Site
from wikisites.utils.transaction import transactional


def delete_site(*, site: Site) -> bool:
    """
    Soft delete: the site stops resolving, pages and history are kept.

    Returns whether the wiki farm acknowledged the deletion.
    """
    wiki_synced = get_gateway().manage_wiki_site(site.wiki_url, "delete")

    with transactional():
        site.is_active = False

    current_app.logger.info("Deleted site %s (wiki synced: %s)", site.subdomain, wiki_synced)
    return wiki_synced
