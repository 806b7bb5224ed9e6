from typing import Dict, List, Any

from flask import current_app

from wikisites.domain.invariants.exceptions import ValidationError
from wikisites.extensions import get_gateway
from wikisites.models.page import Page
from wikisites.models.site import Site
from wikisites.utils.transaction import transactional

WIKI_PROTECTION_ACTIONS = {"edit", "move", "upload"}
WIKI_PROTECTION_LEVELS = {"all", "autoconfirmed", "sysop"}


def set_page_protection(*, page: Page, is_protected) -> Page:
    """
    Toggle the local edit lock. The local flag alone decides who may edit.
    """
    if not isinstance(is_protected, bool):
        raise ValidationError("is_protected must be a boolean")

    with transactional():
        page.is_protected = is_protected

    current_app.logger.info(
        "Page '%s' is now %s", page.title, "protected" if is_protected else "unprotected"
    )
    return page


def get_wiki_protection(*, site: Site, page: Page) -> List[Dict[str, Any]]:
    return get_gateway().get_page_protection(page.wiki_title, site.wiki_url)


def set_wiki_protection(
    *,
    site: Site,
    page: Page,
    protections: Dict[str, str],
    expiry: str = "infinite",
    reason: str = "",
) -> bool:
    """
    Forward a protection change to the wiki's own protection model.
    Does not touch ``Page.is_protected``.
    """
    if not isinstance(protections, dict) or not protections:
        raise ValidationError("protections must be a non-empty object")

    for action, level in protections.items():
        if action not in WIKI_PROTECTION_ACTIONS:
            raise ValidationError(f"Unsupported protection action: {action}")
        if level not in WIKI_PROTECTION_LEVELS:
            raise ValidationError(f"Unsupported protection level: {level}")

    return get_gateway().set_page_protection(
        page.wiki_title,
        protections,
        expiry=expiry,
        reason=reason,
        wiki_url=site.wiki_url,
    )
