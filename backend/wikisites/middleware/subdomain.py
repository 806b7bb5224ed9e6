"""Host-based tenant routing.

``alice.example.com/About`` is served as ``/alice/About`` by the site views.
Routing happens at the WSGI layer because Flask matches URLs before any
``before_request`` hook runs.
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)

PASSTHROUGH_PREFIXES = ("/api", "/static", "/uploads", "/swagger", "/openapi")
EXCLUDED_LABELS = {"www"}


def _split_port(host: str):
    if ":" in host:
        name, port = host.rsplit(":", 1)
        return name, port
    return host, None


def extract_subdomain(host: Optional[str], base_domain: str) -> Optional[str]:
    """
    The tenant label of ``host`` or None.

    A tenant host is exactly ``<label>.<base_domain>``: one extra label, not
    ``www``, and the same port as the base domain (if it has one).
    """
    if not host:
        return None

    host_name, host_port = _split_port(host.strip().lower())
    base_name, base_port = _split_port(base_domain.strip().lower())
    if host_port != base_port:
        return None

    suffix = "." + base_name
    if not host_name.endswith(suffix):
        return None

    label = host_name[: -len(suffix)]
    if not label or "." in label or label in EXCLUDED_LABELS:
        return None
    return label


def rewrite_path(host: Optional[str], path: str, base_domain: str) -> str:
    """
    Path the request should be dispatched under; unchanged for non-tenant hosts.
    """
    label = extract_subdomain(host, base_domain)
    if label is None:
        return path

    if any(path == prefix or path.startswith(prefix + "/") for prefix in PASSTHROUGH_PREFIXES):
        return path

    if not path or path == "/":
        return f"/{label}"
    return f"/{label}{path}"


class SubdomainDispatcher:
    """WSGI wrapper applying ``rewrite_path`` to ``PATH_INFO``."""

    def __init__(self, wsgi_app, base_domain: str):
        self.wsgi_app = wsgi_app
        self.base_domain = base_domain

    def __call__(self, environ, start_response):
        host = environ.get("HTTP_HOST") or environ.get("SERVER_NAME")
        path = environ.get("PATH_INFO", "")

        rewritten = rewrite_path(host, path, self.base_domain)
        if rewritten != path:
            logger.debug("Rewriting %s%s to %s", host, path, rewritten)
            environ["PATH_INFO"] = rewritten

        return self.wsgi_app(environ, start_response)


def subdomain_middleware(app):
    app.wsgi_app = SubdomainDispatcher(app.wsgi_app, app.config["BASE_DOMAIN"])
