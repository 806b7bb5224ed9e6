from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from flask import current_app

from wikisites import store
from wikisites.application import reconcile
from wikisites.application.reconcile import MirrorStatus
from wikisites.domain.invariants.exceptions import NotFound, ValidationError
from wikisites.extensions import db, get_gateway
from wikisites.models.page import Page
from wikisites.models.page_revision import PageRevision
from wikisites.models.site import Site
from wikisites.utils.pagination import apply_cursor, paginate_cursor
from wikisites.utils.transaction import transactional

WIKI_REVISION_PREFIX = "wiki:"
SYNC_HISTORY_LIMIT = 50


@dataclass
class RestoreResult:
    page: Page
    restored_from: str
    mirror: MirrorStatus
    revision: Optional[PageRevision]
    warnings: List[str] = field(default_factory=list)


def list_revisions(
    *,
    site: Site,
    page: Page,
    limit: int = 50,
    cursor: Optional[str] = None,
    include_wiki: bool = True,
) -> Dict[str, Any]:
    """
    Local revisions (newest first, cursor paginated) next to the wiki history.
    """
    query = apply_cursor(store.revisions_query(page.id), model=PageRevision, cursor=cursor)
    local, meta = paginate_cursor(query, model=PageRevision, limit=limit)

    wiki_history: List[Dict[str, Any]] = []
    if include_wiki:
        wiki_history = get_gateway().get_page_history(page.wiki_title, limit, site.wiki_url)

    return {
        "local": local,
        "pagination": meta,
        "wiki": wiki_history,
    }


def get_revision(*, page: Page, revision_id: str) -> PageRevision:
    revision = store.get_revision(page.id, revision_id)
    if not revision:
        raise NotFound("Revision not found")
    return revision


def _resolve_revision_content(site: Site, page: Page, reference: str):
    """
    Returns (content, default_comment) for a local id or a ``wiki:<revid>`` reference.
    """
    if reference.startswith(WIKI_REVISION_PREFIX):
        raw = reference[len(WIKI_REVISION_PREFIX):]
        try:
            revid = int(raw)
        except ValueError:
            raise ValidationError(f"Invalid wiki revision id: {raw}")

        content = get_gateway().get_revision_content(revid, site.wiki_url)
        if not content:
            raise NotFound("Revision not found")
        return content, f"Restored to wiki revision {revid}"

    revision = store.get_revision(page.id, reference)
    if not revision:
        raise NotFound("Revision not found")
    return revision.content, f"Restored to revision from {revision.created_at.isoformat()}"


def restore_revision(
    *,
    site: Site,
    page: Page,
    actor,
    reference: str,
    comment: Optional[str] = None,
    create_revision: bool = True,
) -> RestoreResult:
    """
    Make an earlier revision the current content.

    History is never rewritten: the source revision stays untouched and,
    unless disabled, the restoration is recorded as a new revision.
    """
    if not reference:
        raise ValidationError("Revision ID required")

    content, default_comment = _resolve_revision_content(site, page, str(reference))
    comment = comment or default_comment

    mirror = reconcile.mirror(
        f"restore of '{page.wiki_title}'",
        get_gateway().save_page,
        page.wiki_title,
        content,
        summary=comment,
        wiki_url=site.wiki_url,
    )

    with transactional():
        page.content = content

    revision, warning = None, None
    if create_revision:
        revision, warning = reconcile.append_revision(
            page=page,
            author_id=actor.id,
            content=content,
            comment=comment,
            is_minor=False,
        )

    warnings = []
    if not mirror.ok:
        warnings.append("Restored locally, but the wiki mirror could not be updated")
    if warning:
        warnings.append(warning)

    return RestoreResult(
        page=page,
        restored_from=str(reference),
        mirror=mirror,
        revision=revision,
        warnings=warnings,
    )


def sync_revisions(*, site: Site, page: Page, actor) -> Dict[str, int]:
    """
    Import wiki revisions whose content is not yet in the local history.
    """
    history = get_gateway().get_page_history(page.wiki_title, SYNC_HISTORY_LIMIT, site.wiki_url)
    known = {
        content
        for (content,) in db.session.query(PageRevision.content)
        .filter(PageRevision.page_id == page.id)
        .all()
    }

    imported = 0
    with transactional():
        # Wiki history arrives newest first
        for entry in reversed(history):
            content = entry.get("content")
            if not content or content in known:
                continue

            revision = PageRevision()
            revision.page_id = page.id
            revision.user_id = actor.id
            revision.content = content
            revision.comment = entry.get("comment") or "Synced from wiki"
            revision.is_minor = bool(entry.get("minor", False))
            db.session.add(revision)

            known.add(content)
            imported += 1

    current_app.logger.info(
        "Synced %d of %d wiki revisions into page %s", imported, len(history), page.id
    )
    return {"synced": len(history), "imported": imported}
