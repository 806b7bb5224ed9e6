from dataclasses import dataclass
from typing import Optional

from wikisites import store
from wikisites.application import reconcile
from wikisites.domain.invariants.exceptions import NotFound
from wikisites.domain.invariants.page import DEFAULT_PAGE_TITLE
from wikisites.extensions import get_gateway
from wikisites.models.site import Site

SOURCE_LOCAL = "local"
SOURCE_WIKI = "wiki"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class RenderResult:
    site: Site
    title: str
    content: str
    source: Optional[str]
    is_owner: bool

    @property
    def is_empty(self) -> bool:
        return self.source is None


def render_page(
    *,
    subdomain: str,
    title: Optional[str] = None,
    actor=None,
) -> RenderResult:
    """
    Resolve the content shown for a tenant page.

    Lookup order (first hit wins):
    1. published local page with the requested title ("Home" by default)
    2. rendered wiki page with that title
    3. oldest published local page of the site
    4. nothing: the caller shows the empty-site prompt
    """
    site = store.get_active_site_by_subdomain(subdomain)
    if not site:
        raise NotFound("Site not found")

    requested = title or DEFAULT_PAGE_TITLE
    is_owner = site.is_owned_by(actor)

    page = store.find_page_by_title(site.id, requested, published_only=True)
    if page:
        return RenderResult(site, page.title, page.content, SOURCE_LOCAL, is_owner)

    html = reconcile.read_remote(
        f"fetch of '{requested}'",
        get_gateway().fetch_page,
        requested,
        site.wiki_url,
    )
    if html:
        return RenderResult(site, requested, html, SOURCE_WIKI, is_owner)

    fallback = store.first_published_page(site.id)
    if fallback:
        return RenderResult(site, fallback.title, fallback.content, SOURCE_FALLBACK, is_owner)

    return RenderResult(site, requested, "", None, is_owner)
