"""Read helpers over the local tables.

Failures here are never caught: a broken local store is a request failure.
"""
from typing import List, Optional
from wikisites.models.site import Site
from wikisites.models.page import Page
from wikisites.models.page_revision import PageRevision
from wikisites.models.page_file import PageFile


def get_active_site_by_subdomain(subdomain: str) -> Optional[Site]:
    return Site.query.filter_by(subdomain=subdomain, is_active=True).first()


def get_site(site_id: str) -> Optional[Site]:
    return Site.query.filter_by(id=site_id).first()


def subdomain_taken(subdomain: str, *, exclude_site_id: Optional[str] = None) -> bool:
    query = Site.query.filter_by(subdomain=subdomain, is_active=True)
    if exclude_site_id:
        query = query.filter(Site.id != exclude_site_id)
    return query.first() is not None


def get_page(site_id: str, page_id: str) -> Optional[Page]:
    return Page.query.filter_by(id=page_id, site_id=site_id).first()


def find_page_by_title(site_id: str, title: str, *, published_only: bool = False) -> Optional[Page]:
    # (site_id, title) is not unique at the database level; first match wins
    query = Page.query.filter_by(site_id=site_id, title=title)
    if published_only:
        query = query.filter_by(is_published=True)
    return query.order_by(Page.created_at.asc()).first()


def first_published_page(site_id: str) -> Optional[Page]:
    return (
        Page.query
        .filter_by(site_id=site_id, is_published=True)
        .order_by(Page.created_at.asc())
        .first()
    )


def list_pages(site_id: str, *, published: Optional[bool] = None) -> List[Page]:
    query = Page.query.filter_by(site_id=site_id)
    if published is not None:
        query = query.filter_by(is_published=published)
    return query.order_by(Page.created_at.asc()).all()


def revisions_query(page_id: str):
    return PageRevision.query.filter_by(page_id=page_id)


def count_revisions(page_id: str) -> int:
    return revisions_query(page_id).count()


def get_revision(page_id: str, revision_id: str) -> Optional[PageRevision]:
    return revisions_query(page_id).filter_by(id=revision_id).first()


def list_files(page_id: str) -> List[PageFile]:
    return (
        PageFile.query
        .filter_by(page_id=page_id)
        .order_by(PageFile.created_at.desc())
        .all()
    )
