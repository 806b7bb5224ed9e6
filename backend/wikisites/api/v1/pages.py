from flask import g, jsonify, request
from wikisites import store
from wikisites.application.pages.delete_page import delete_page
from wikisites.application.pages.protection import (
    get_wiki_protection,
    set_page_protection,
    set_wiki_protection,
)
from wikisites.application.pages.render_page import render_page
from wikisites.application.pages.save_page import save_page
from wikisites.application.pages.update_page import update_page
from wikisites.extensions import get_gateway
from wikisites.normalizers.page import (
    normalize_page,
    normalize_render_result,
    normalize_save_result,
)
from wikisites.utils.decorators import (
    current_principal,
    owned_page_required,
    site_owner_required,
)
from wikisites.utils.payload import json_body, optional_text
from . import v1_bp


def _save_response(result):
    response = jsonify(normalize_save_result(result))
    response.status_code = 201 if result.created else 200
    if result.page.updated_at:
        response.last_modified = result.page.updated_at
    return response


# ------------------------
# Public render / save
# ------------------------

@v1_bp.route("/public/sites/<subdomain>/render", methods=["GET"])
def render_page_route(subdomain):
    result = render_page(
        subdomain=subdomain,
        title=request.args.get("title"),
        actor=current_principal(),
    )
    return jsonify(normalize_render_result(result)), 200


@v1_bp.route("/public/sites/<subdomain>/pages", methods=["POST"])
def save_page_route(subdomain):
    data = json_body()
    result = save_page(
        subdomain=subdomain,
        actor=current_principal(),
        data=data,
        if_unmodified_since=request.headers.get("If-Unmodified-Since"),
    )
    return _save_response(result)


# ------------------------
# Owner pages
# ------------------------

@v1_bp.route("/sites/<site_id>/pages", methods=["GET"])
@site_owner_required
def list_pages_route(site_id):
    published = request.args.get("published")
    if published is not None:
        published = published.lower() in ("1", "true", "yes")

    pages = store.list_pages(g.current_site.id, published=published)
    return jsonify([normalize_page(p, include_content=False) for p in pages]), 200


@v1_bp.route("/sites/<site_id>/wiki-pages", methods=["GET"])
@site_owner_required
def list_wiki_pages_route(site_id):
    titles = get_gateway().list_pages(g.current_site.wiki_url)
    return jsonify({"titles": titles}), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>", methods=["GET"])
@site_owner_required
@owned_page_required
def get_page_route(site_id, page_id):
    page = g.current_page
    response = jsonify({
        **normalize_page(page),
        "revision_count": store.count_revisions(page.id),
    })
    if page.updated_at:
        response.last_modified = page.updated_at
    return response


@v1_bp.route("/sites/<site_id>/pages/<page_id>", methods=["PUT"])
@site_owner_required
@owned_page_required
def update_page_route(site_id, page_id):
    data = json_body()
    result = update_page(
        site=g.current_site,
        page=g.current_page,
        actor=current_principal(),
        data=data,
        if_unmodified_since=request.headers.get("If-Unmodified-Since"),
    )
    return _save_response(result)


@v1_bp.route("/sites/<site_id>/pages/<page_id>", methods=["DELETE"])
@site_owner_required
@owned_page_required
def delete_page_route(site_id, page_id):
    data = json_body()
    mirror = delete_page(
        site=g.current_site,
        page=g.current_page,
        reason=optional_text(data, "reason") or "",
    )
    return jsonify({
        "message": "Page deleted successfully",
        "mirror": mirror.to_dict(),
    }), 200


# ------------------------
# Protection
# ------------------------

@v1_bp.route("/sites/<site_id>/pages/<page_id>/protection", methods=["GET"])
@site_owner_required
@owned_page_required
def get_protection_route(site_id, page_id):
    page = g.current_page
    return jsonify({"page_id": page.id, "is_protected": page.is_protected}), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>/protection", methods=["PUT"])
@site_owner_required
@owned_page_required
def set_protection_route(site_id, page_id):
    data = json_body()
    page = set_page_protection(page=g.current_page, is_protected=data.get("is_protected"))
    return jsonify({"page_id": page.id, "is_protected": page.is_protected}), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>/protection/wiki", methods=["GET"])
@site_owner_required
@owned_page_required
def get_wiki_protection_route(site_id, page_id):
    protection = get_wiki_protection(site=g.current_site, page=g.current_page)
    return jsonify({"page_id": page_id, "protection": protection}), 200


@v1_bp.route("/sites/<site_id>/pages/<page_id>/protection/wiki", methods=["PUT"])
@site_owner_required
@owned_page_required
def set_wiki_protection_route(site_id, page_id):
    data = json_body()
    ok = set_wiki_protection(
        site=g.current_site,
        page=g.current_page,
        protections=data.get("protections"),
        expiry=data.get("expiry") or "infinite",
        reason=optional_text(data, "reason") or "",
    )
    if not ok:
        return jsonify({
            "error": "WikiUnavailable",
            "message": "The wiki did not accept the protection change",
        }), 502
    return jsonify({"page_id": page_id, "wiki_synced": True}), 200
