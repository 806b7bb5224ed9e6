from typing import Any, Dict, Optional

from wikisites.application import reconcile
from wikisites.application.reconcile import NOT_MIRRORED
from wikisites.application.pages.save_page import SaveResult
from wikisites.domain.invariants.exceptions import ValidationError
from wikisites.domain.invariants.page import assert_page_content, assert_title_unchanged
from wikisites.extensions import get_gateway
from wikisites.models.page import Page
from wikisites.models.site import Site
from wikisites.utils.optimistic_lock import assert_unmodified_since
from wikisites.utils.payload import optional_bool, optional_text
from wikisites.utils.text import slugify
from wikisites.utils.transaction import transactional

ALLOWED_UPDATE_FIELDS = ("content", "slug", "is_published")


def update_page(
    *,
    site: Site,
    page: Page,
    actor,
    data: Dict[str, Any],
    if_unmodified_since: Optional[str] = None,
) -> SaveResult:
    """
    Owner edit of an existing page.

    Design rules:
    - Only whitelisted fields are mutable; the title is fixed
    - No silent no-op updates
    - Content changes are mirrored and recorded as a revision
    """
    assert_title_unchanged(page, data.get("title"))
    assert_unmodified_since(page, if_unmodified_since)

    changes: Dict[str, Any] = {}
    for field in ALLOWED_UPDATE_FIELDS:
        if field in data and getattr(page, field) != data[field]:
            changes[field] = data[field]

    if not changes:
        raise ValidationError("No valid fields provided for update")

    if "content" in changes:
        assert_page_content(changes["content"])

    if "slug" in changes:
        if not isinstance(changes["slug"], str):
            raise ValidationError("Slug must be a string")
        changes["slug"] = slugify(changes["slug"])
        if not changes["slug"]:
            raise ValidationError("Slug cannot be empty")

    if "is_published" in changes and not isinstance(changes["is_published"], bool):
        raise ValidationError("is_published must be a boolean")

    comment = optional_text(data, "comment")
    is_minor = optional_bool(data, "is_minor", False)
    content_changed = "content" in changes

    mirror = NOT_MIRRORED
    if content_changed:
        mirror = reconcile.mirror(
            f"update of '{page.wiki_title}'",
            get_gateway().save_page,
            page.wiki_title,
            changes["content"],
            summary=comment or "",
            minor=is_minor,
            wiki_url=site.wiki_url,
        )

    with transactional():
        for field, value in changes.items():
            setattr(page, field, value)

    revision, warning = None, None
    if content_changed:
        revision, warning = reconcile.append_revision(
            page=page,
            author_id=actor.id,
            content=page.content,
            comment=comment,
            is_minor=is_minor,
        )

    warnings = []
    if mirror.attempted and not mirror.ok:
        warnings.append("Saved locally, but the wiki mirror could not be updated")
    if warning:
        warnings.append(warning)

    return SaveResult(
        page=page,
        created=False,
        mirror=mirror,
        revision=revision,
        warnings=warnings,
    )
