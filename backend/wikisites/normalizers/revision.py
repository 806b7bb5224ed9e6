from typing import Any, Dict


def normalize_revision(revision, include_content=False) -> Dict[str, Any]:
    base = {
        "id": revision.id,
        "page_id": revision.page_id,
        "user_id": revision.user_id,
        "user": revision.user.display_name if revision.user else None,
        "comment": revision.comment,
        "is_minor": revision.is_minor,
        "created_at": revision.created_at.isoformat(),
    }

    if include_content:
        base["content"] = revision.content

    return base


def normalize_wiki_revision(entry, include_content=False) -> Dict[str, Any]:
    # Remote references are addressed as "wiki:<revid>" when restoring
    base = {
        "id": f"wiki:{entry.get('revid')}",
        "revid": entry.get("revid"),
        "parentid": entry.get("parentid"),
        "user": entry.get("user"),
        "comment": entry.get("comment", ""),
        "size": entry.get("size"),
        "is_minor": entry.get("minor", False),
        "timestamp": entry.get("timestamp"),
    }

    if include_content:
        base["content"] = entry.get("content", "")

    return base
