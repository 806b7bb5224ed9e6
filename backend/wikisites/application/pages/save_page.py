from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from flask import current_app

from wikisites import store
from wikisites.application import reconcile
from wikisites.application.reconcile import MirrorStatus
from wikisites.domain.invariants.exceptions import NotFound
from wikisites.domain.invariants.page import assert_page_payload, assert_can_edit
from wikisites.extensions import db, get_gateway
from wikisites.models.page import Page
from wikisites.models.page_revision import PageRevision
from wikisites.utils.optimistic_lock import assert_unmodified_since
from wikisites.utils.payload import optional_bool, optional_text
from wikisites.utils.text import slugify
from wikisites.utils.transaction import transactional


@dataclass
class SaveResult:
    page: Page
    created: bool
    mirror: MirrorStatus
    revision: Optional[PageRevision]
    warnings: List[str] = field(default_factory=list)


def save_page(
    *,
    subdomain: str,
    actor,
    data: Dict[str, Any],
    if_unmodified_since: Optional[str] = None,
) -> SaveResult:
    """
    Create or update a page by (site, title).

    Order of work:
    - validate payload and edit rights (no store touched on failure)
    - mirror to the wiki (best-effort)
    - upsert the local page (must succeed)
    - append a revision (best-effort, reported in ``warnings``)
    """
    title = data.get("title")
    content = data.get("content")
    assert_page_payload(title, content)

    comment = optional_text(data, "comment")
    is_minor = optional_bool(data, "is_minor", False)
    is_published = optional_bool(data, "is_published", True)

    site = store.get_active_site_by_subdomain(subdomain)
    if not site:
        raise NotFound("Site not found")

    existing = store.find_page_by_title(site.id, title)
    assert_can_edit(existing, site, actor)
    assert_unmodified_since(existing, if_unmodified_since)

    mirror = reconcile.mirror(
        f"save of '{title}'",
        get_gateway().save_page,
        existing.wiki_title if existing else title,
        content,
        summary=comment or "",
        minor=is_minor,
        wiki_url=site.wiki_url,
    )

    # Local upsert; any failure here propagates as a 500
    with transactional():
        if existing:
            page = existing
        else:
            page = Page()
            page.site_id = site.id
            page.title = title
            page.wiki_title = title
            page.is_protected = False
            db.session.add(page)

        page.slug = slugify(title)
        page.content = content
        page.is_published = is_published

    current_app.logger.info(
        "%s page '%s' on site %s (wiki mirror: %s)",
        "Updated" if existing else "Created",
        title,
        site.subdomain,
        "ok" if mirror.ok else "failed",
    )

    author_id = actor.id if actor is not None else site.user_id
    revision, warning = reconcile.append_revision(
        page=page,
        author_id=author_id,
        content=content,
        comment=comment,
        is_minor=is_minor,
    )

    warnings = []
    if not mirror.ok:
        warnings.append("Saved locally, but the wiki mirror could not be updated")
    if warning:
        warnings.append(warning)

    return SaveResult(
        page=page,
        created=existing is None,
        mirror=mirror,
        revision=revision,
        warnings=warnings,
    )
