from typing import Any, Dict


def normalize_file(record) -> Dict[str, Any]:
    return {
        "id": record.id,
        "page_id": record.page_id,
        "filename": record.filename,
        "original_name": record.original_name,
        "mime_type": record.mime_type,
        "size": record.size,
        "storage": record.storage,
        "url": record.path,
        "uploader_id": record.uploader_id,
        "created_at": record.created_at.isoformat(),
    }
