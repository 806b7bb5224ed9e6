import re

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^a-z0-9-]")


def slugify(title: str) -> str:
    """
    "About Us!" -> "about-us"
    """
    slug = _WHITESPACE.sub("-", title.strip().lower())
    return _UNSAFE.sub("", slug)


def strip_tags(html: str) -> str:
    return re.sub(r"<[^>]+>", "", html or "")


LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """
    ILIKE pattern matching ``text`` literally anywhere; use with ``escape=LIKE_ESCAPE``.
    """
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
