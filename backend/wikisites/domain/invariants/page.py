from .exceptions import ValidationError, AuthenticationRequired, PermissionDenied

DEFAULT_PAGE_TITLE = "Home"
MAX_TITLE_LENGTH = 255


def assert_page_payload(title, content):
    """
    Both fields must be present before either store is touched.
    """
    if not title or not content:
        raise ValidationError("Title and content are required")

    if not isinstance(title, str) or not isinstance(content, str):
        raise ValidationError("Title and content must be strings")

    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")

    if "|" in title or "#" in title or title.strip() != title:
        raise ValidationError("Title contains characters the wiki cannot store")


def assert_page_content(content):
    if not isinstance(content, str):
        raise ValidationError("Content must be a string")
    if not content:
        raise ValidationError("Content cannot be empty")


def assert_can_edit(page, site, actor):
    """
    Protected pages accept edits from the site owner only.
    """
    if page is None or not page.is_protected:
        return

    if actor is None:
        raise AuthenticationRequired("This page is protected; sign in as the site owner to edit it")

    if not site.is_owned_by(actor):
        raise PermissionDenied("This page is protected and can only be edited by the site owner")


def assert_title_unchanged(page, title):
    if title is not None and title != page.title:
        raise ValidationError(
            "Page titles cannot be changed once created; create a new page instead"
        )
