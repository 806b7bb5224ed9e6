"""Tenant-facing HTML pages.

Requests for ``<label>.<base domain>`` arrive here as ``/<label>/...`` after
the subdomain router rewrote them.
"""
from flask import Blueprint, render_template, send_from_directory

from wikisites.application.pages.render_page import render_page
from wikisites.domain.invariants.exceptions import NotFound
from wikisites.extensions import get_settings
from wikisites.utils.decorators import current_principal

site_views = Blueprint("site_views", __name__)


@site_views.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename):
    return send_from_directory(get_settings().upload_folder, filename)


@site_views.route("/<subdomain>", methods=["GET"])
@site_views.route("/<subdomain>/<path:title>", methods=["GET"])
def render_site_page(subdomain, title=None):
    try:
        result = render_page(subdomain=subdomain, title=title, actor=current_principal())
    except NotFound:
        return render_template("site_not_found.html", subdomain=subdomain), 404

    return render_template(
        "site_page.html",
        result=result,
        site_url=get_settings().site_url(result.site.subdomain),
    ), 200
