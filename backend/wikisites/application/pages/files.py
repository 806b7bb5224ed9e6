from dataclasses import dataclass
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from wikisites import store
from wikisites.domain.invariants.file import assert_upload
from wikisites.extensions import db, get_gateway, get_settings
from wikisites.models.page import Page
from wikisites.models.page_file import PageFile, STORAGE_LOCAL, STORAGE_WIKI
from wikisites.models.site import Site
from wikisites.utils.media import delete_file, save_local_file, wiki_filename
from wikisites.utils.transaction import transactional


@dataclass
class UploadResult:
    file: PageFile
    wiki_info: Optional[Dict[str, Any]] = None


def upload_file(
    *,
    site: Site,
    page: Page,
    actor,
    filename: str,
    mime_type: str,
    data: bytes,
    comment: str = "",
) -> UploadResult:
    """
    Store an image for a page.

    The wiki is tried first; when it refuses, the bytes go to the local
    upload folder instead. Each record says which store holds it.
    """
    settings = get_settings()
    assert_upload(
        filename=filename,
        mime_type=mime_type,
        size=len(data),
        allowed_mime_types=settings.allowed_mime_types,
        max_bytes=settings.max_upload_bytes,
    )

    gateway = get_gateway()
    remote_name = wiki_filename(page.id, filename, mime_type)

    record = PageFile()
    record.page_id = page.id
    record.uploader_id = actor.id
    record.original_name = filename
    record.mime_type = mime_type
    record.size = len(data)

    wiki_info = None
    local_path = None

    if gateway.upload_file(remote_name, data, comment, site.wiki_url):
        wiki_info = gateway.get_file_info(remote_name, site.wiki_url)
        record.storage = STORAGE_WIKI
        record.filename = remote_name
        record.path = (wiki_info or {}).get("url") or gateway.file_page_url(remote_name, site.wiki_url)
    else:
        current_app.logger.warning(
            "Wiki upload of '%s' failed, storing it locally", filename
        )
        stored_name, public_path, local_path = save_local_file(
            data,
            upload_folder=settings.upload_folder,
            site_id=site.id,
            page_id=page.id,
            filename=filename,
            mime_type=mime_type,
        )
        record.storage = STORAGE_LOCAL
        record.filename = stored_name
        record.path = public_path

    try:
        with transactional():
            db.session.add(record)
    except SQLAlchemyError:
        # No orphaned bytes without a record
        if local_path:
            delete_file(local_path, logger=current_app.logger)
        raise

    return UploadResult(file=record, wiki_info=wiki_info)


def list_files(*, site: Site, page: Page) -> Dict[str, Any]:
    return {
        "files": store.list_files(page.id),
        "wiki_files": get_gateway().get_page_files(page.wiki_title, site.wiki_url),
    }
