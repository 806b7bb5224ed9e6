from flask import jsonify, request
from wikisites.application.search.recent_changes import recent_changes
from wikisites.application.search.search import DEFAULT_SEARCH_LIMIT, search
from wikisites.utils.pagination import parse_limit
from . import v1_bp


@v1_bp.route("/search", methods=["GET"])
def search_route():
    search_type = request.args.get("type", "search")
    results = search(
        query=request.args.get("q"),
        search_type=search_type,
        limit=parse_limit(request.args.get("limit"), default=DEFAULT_SEARCH_LIMIT),
    )
    return jsonify({"type": search_type, "results": results}), 200


@v1_bp.route("/recent-changes", methods=["GET"])
def recent_changes_route():
    include_wiki = request.args.get("include_wiki", "false").lower() in ("1", "true", "yes")
    changes = recent_changes(
        limit=parse_limit(request.args.get("limit")),
        include_wiki=include_wiki,
    )
    return jsonify(changes), 200
