from typing import List

from flask import current_app

from wikisites.application import reconcile
from wikisites.application.reconcile import MirrorStatus
from wikisites.extensions import db, get_gateway, get_settings
from wikisites.models.page import Page
from wikisites.models.page_file import PageFile, STORAGE_LOCAL
from wikisites.models.page_revision import PageRevision
from wikisites.models.site import Site
from wikisites.utils.media import delete_file, local_path_for
from wikisites.utils.transaction import transactional


def delete_page(*, site: Site, page: Page, reason: str = "") -> MirrorStatus:
    """
    Delete a page, its revisions and its file records.

    Notes:
    - the wiki copy is deleted best-effort
    - locally stored upload bytes are removed after the commit
    """
    mirror = reconcile.mirror(
        f"delete of '{page.wiki_title}'",
        get_gateway().delete_page,
        page.wiki_title,
        reason=reason,
        wiki_url=site.wiki_url,
    )

    upload_folder = get_settings().upload_folder
    files_to_cleanup: List[str] = [
        local_path_for(f.path, upload_folder)
        for f in PageFile.query.filter_by(page_id=page.id, storage=STORAGE_LOCAL).all()
    ]

    with transactional():
        # Bulk deletes bypass the per-row immutability guard on revisions
        PageRevision.query.filter_by(page_id=page.id).delete(synchronize_session=False)
        PageFile.query.filter_by(page_id=page.id).delete(synchronize_session=False)
        db.session.delete(page)

    for path in files_to_cleanup:
        delete_file(path, logger=current_app.logger)

    return mirror
