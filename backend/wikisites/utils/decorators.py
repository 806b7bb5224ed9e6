from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from wikisites.domain.invariants.exceptions import (
    AuthenticationRequired,
    PermissionDenied,
    NotFound,
)
from wikisites.models.user import User
from wikisites import store


def current_principal():
    """
    The authenticated, active user for this request, or None.

    Anonymous requests are allowed through; routes decide what they need.
    """
    if "current_user" in g:
        return g.current_user

    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()

    user = None
    if identity:
        user = User.query.filter_by(id=identity, is_active=True).first()

    g.current_user = user
    return user


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_principal() is None:
            raise AuthenticationRequired("Unauthorized")
        return fn(*args, **kwargs)
    return wrapper


def site_owner_required(fn):
    """
    Loads ``site_id`` from the route into ``g.current_site``.
    404 when the site is unknown, 403 when the caller does not own it.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = current_principal()
        if user is None:
            raise AuthenticationRequired("Unauthorized")

        site = store.get_site(kwargs["site_id"])
        if not site:
            raise NotFound("Site not found")

        if not site.is_owned_by(user):
            raise PermissionDenied("Forbidden")

        g.current_site = site
        return fn(*args, **kwargs)
    return wrapper


def owned_page_required(fn):
    """
    Stacks under ``site_owner_required``; loads ``page_id`` into ``g.current_page``.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        page = store.get_page(g.current_site.id, kwargs["page_id"])
        if not page:
            raise NotFound("Page not found")

        g.current_page = page
        return fn(*args, **kwargs)
    return wrapper
