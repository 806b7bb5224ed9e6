from flask import g, jsonify, request
from wikisites.application.sites.create_site import create_site
from wikisites.application.sites.delete_site import delete_site
from wikisites.application.sites.list_sites import (
    PUBLIC_SITES_LIMIT,
    get_site_by_subdomain,
    list_public_sites,
    list_sites,
)
from wikisites.application.sites.manage_site import manage_site
from wikisites.application.sites.update_site import update_site
from wikisites.normalizers.site import normalize_site
from wikisites.utils.decorators import current_principal, login_required, site_owner_required
from wikisites.utils.pagination import parse_limit
from wikisites.utils.payload import json_body
from . import v1_bp


# ------------------------
# Owner sites
# ------------------------

@v1_bp.route("/sites", methods=["GET"])
@login_required
def list_my_sites():
    sites = list_sites(owner=current_principal())
    return jsonify([normalize_site(s, owner=True) for s in sites]), 200


@v1_bp.route("/sites", methods=["POST"])
@login_required
def create_site_route():
    data = json_body()
    site = create_site(owner=current_principal(), data=data)
    return jsonify(normalize_site(site, owner=True)), 201


@v1_bp.route("/sites/<site_id>", methods=["GET"])
@site_owner_required
def get_site_route(site_id):
    return jsonify(normalize_site(g.current_site, owner=True)), 200


@v1_bp.route("/sites/<site_id>", methods=["PUT"])
@site_owner_required
def update_site_route(site_id):
    data = json_body()
    site = update_site(site=g.current_site, data=data)
    return jsonify(normalize_site(site, owner=True)), 200


@v1_bp.route("/sites/<site_id>", methods=["DELETE"])
@site_owner_required
def delete_site_route(site_id):
    wiki_synced = delete_site(site=g.current_site)
    return jsonify({
        "message": "Site deleted successfully",
        "wiki_synced": wiki_synced,
    }), 200


@v1_bp.route("/sites/<site_id>/manage", methods=["POST"])
@site_owner_required
def manage_site_route(site_id):
    data = json_body()
    result = manage_site(site=g.current_site, action=data.get("action"))
    return jsonify({
        "site": normalize_site(result.site, owner=True),
        "action": result.action,
        "wiki_synced": result.wiki_synced,
    }), 200


# ------------------------
# Public directory
# ------------------------

@v1_bp.route("/sites/by-subdomain/<subdomain>", methods=["GET"])
def get_site_by_subdomain_route(subdomain):
    site = get_site_by_subdomain(subdomain=subdomain)
    return jsonify(normalize_site(site)), 200


@v1_bp.route("/public/sites", methods=["GET"])
def list_public_sites_route():
    sites = list_public_sites(
        search=request.args.get("search"),
        limit=parse_limit(request.args.get("limit"), default=PUBLIC_SITES_LIMIT),
    )
    return jsonify([normalize_site(s) for s in sites]), 200
