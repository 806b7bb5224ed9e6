from flask import g, jsonify, request
from wikisites.application.pages.files import list_files, upload_file
from wikisites.domain.invariants.exceptions import ValidationError
from wikisites.normalizers.file import normalize_file
from wikisites.utils.decorators import current_principal, owned_page_required, site_owner_required
from . import v1_bp


@v1_bp.route("/sites/<site_id>/pages/<page_id>/files", methods=["GET"])
@site_owner_required
@owned_page_required
def list_files_route(site_id, page_id):
    result = list_files(site=g.current_site, page=g.current_page)
    return jsonify({
        "files": [normalize_file(f) for f in result["files"]],
        "wiki_files": result["wiki_files"],
    }), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>/files", methods=["POST"])
@site_owner_required
@owned_page_required
def upload_file_route(site_id, page_id):
    file = request.files.get("file")
    if not file or not file.filename:
        raise ValidationError("No file provided")

    result = upload_file(
        site=g.current_site,
        page=g.current_page,
        actor=current_principal(),
        filename=file.filename,
        mime_type=file.mimetype,
        data=file.read(),
        comment=request.form.get("comment") or "",
    )
    return jsonify({
        "file": normalize_file(result.file),
        "wiki_info": result.wiki_info,
    }), 201
