from flask import g, jsonify, request
from wikisites import store
from wikisites.application.pages.revisions import (
    get_revision,
    list_revisions,
    restore_revision,
    sync_revisions,
)
from wikisites.normalizers.page import normalize_page
from wikisites.normalizers.pagination import normalize_pagination
from wikisites.normalizers.revision import normalize_revision, normalize_wiki_revision
from wikisites.utils.decorators import current_principal, owned_page_required, site_owner_required
from wikisites.utils.pagination import parse_limit
from wikisites.utils.payload import json_body, optional_bool, optional_text
from . import v1_bp


def _flag(name, default):
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.lower() in ("1", "true", "yes")


@v1_bp.route("/sites/<site_id>/pages/<page_id>/revisions", methods=["GET"])
@site_owner_required
@owned_page_required
def list_revisions_route(site_id, page_id):
    page = g.current_page
    result = list_revisions(
        site=g.current_site,
        page=page,
        limit=parse_limit(request.args.get("limit")),
        cursor=request.args.get("cursor"),
        include_wiki=_flag("include_wiki", True),
    )

    response = normalize_pagination(
        result["local"],
        normalize_revision,
        cursor=result["pagination"],
        total=store.count_revisions(page.id),
    )
    response["wiki"] = [normalize_wiki_revision(entry) for entry in result["wiki"]]
    return jsonify(response), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>/revisions/<revision_id>", methods=["GET"])
@site_owner_required
@owned_page_required
def get_revision_route(site_id, page_id, revision_id):
    revision = get_revision(page=g.current_page, revision_id=revision_id)
    return jsonify(normalize_revision(revision, include_content=True)), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>/revisions/restore", methods=["POST"])
@site_owner_required
@owned_page_required
def restore_revision_route(site_id, page_id):
    data = json_body()
    result = restore_revision(
        site=g.current_site,
        page=g.current_page,
        actor=current_principal(),
        reference=data.get("revision_id"),
        comment=optional_text(data, "comment"),
        create_revision=optional_bool(data, "create_revision", True),
    )
    return jsonify({
        "page": normalize_page(result.page),
        "restored_from": result.restored_from,
        "mirror": result.mirror.to_dict(),
        "revision_id": result.revision.id if result.revision else None,
        "warnings": result.warnings,
    }), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>/revisions/sync", methods=["POST"])
@site_owner_required
@owned_page_required
def sync_revisions_route(site_id, page_id):
    result = sync_revisions(
        site=g.current_site,
        page=g.current_page,
        actor=current_principal(),
    )
    return jsonify(result), 200
