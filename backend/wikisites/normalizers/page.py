from typing import Any, Dict


def _iso(value):
    return value.isoformat() if value else None


def normalize_page(page, include_content=True) -> Dict[str, Any]:
    base = {
        "id": page.id,
        "site_id": page.site_id,
        "title": page.title,
        "slug": page.slug,
        "is_published": page.is_published,
        "is_protected": page.is_protected,
        "created_at": _iso(page.created_at),
        "updated_at": _iso(page.updated_at),
    }

    if include_content:
        base["content"] = page.content

    return base


def normalize_save_result(result) -> Dict[str, Any]:
    """
    Page plus what happened to each store during the write.
    """
    return {
        "page": normalize_page(result.page),
        "created": result.created,
        "mirror": result.mirror.to_dict(),
        "revision_id": result.revision.id if result.revision else None,
        "warnings": list(result.warnings),
    }


def normalize_render_result(result) -> Dict[str, Any]:
    return {
        "site": {
            "id": result.site.id,
            "name": result.site.name,
            "subdomain": result.site.subdomain,
        },
        "title": result.title,
        "content": result.content,
        "source": result.source,
        "is_owner": result.is_owner,
        "is_empty": result.is_empty,
    }
