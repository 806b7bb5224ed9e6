"""Store reconciliation policy shared by every page operation.

The local database is authoritative; the tenant wiki is a best-effort
mirror. Remote failures become a ``MirrorStatus`` plus a warning log.
Local failures propagate to the request boundary. Revision bookkeeping
runs after the page row is committed and reports its own failure.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from wikisites.extensions import db
from wikisites.models.page import Page
from wikisites.models.page_revision import PageRevision
from wikisites.utils.transaction import transactional
from wikisites.wiki.exceptions import RemoteWikiError


@dataclass(frozen=True)
class MirrorStatus:
    attempted: bool
    ok: bool
    error: Optional[str] = None

    def to_dict(self):
        return {
            "attempted": self.attempted,
            "ok": self.ok,
            "error": self.error,
        }


NOT_MIRRORED = MirrorStatus(attempted=False, ok=False)


def mirror(operation: str, fn: Callable[..., Any], *args, **kwargs) -> MirrorStatus:
    """
    Run a remote write. A wiki failure never aborts the local write that follows.
    """
    try:
        fn(*args, **kwargs)
    except RemoteWikiError as exc:
        current_app.logger.warning(
            "Wiki %s failed, continuing with local store: %s", operation, exc.message
        )
        return MirrorStatus(attempted=True, ok=False, error=exc.message)
    return MirrorStatus(attempted=True, ok=True)


def read_remote(operation: str, fn: Callable[..., Any], *args, **kwargs) -> Optional[Any]:
    """
    Run a remote read, treating any wiki failure as "no remote data".
    """
    try:
        return fn(*args, **kwargs)
    except RemoteWikiError as exc:
        current_app.logger.warning("Wiki %s returned no data: %s", operation, exc.message)
        return None


def append_revision(
    *,
    page: Page,
    author_id: str,
    content: str,
    comment: Optional[str] = None,
    is_minor: bool = False,
) -> Tuple[Optional[PageRevision], Optional[str]]:
    """
    Append a revision after the page row is already committed.

    Returns (revision, None) or (None, warning). The page write stands either way.
    """
    revision = PageRevision()
    revision.page_id = page.id
    revision.user_id = author_id
    revision.content = content
    revision.comment = comment
    revision.is_minor = bool(is_minor)

    try:
        with transactional():
            db.session.add(revision)
    except SQLAlchemyError as exc:
        current_app.logger.warning(
            "Page %s saved but its revision was not recorded: %s", page.id, exc
        )
        return None, "Page saved, but the revision history entry could not be recorded"

    return revision, None
