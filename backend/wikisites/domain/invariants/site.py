import re
from .exceptions import ValidationError

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
RESERVED_SUBDOMAINS = {"www", "api", "static", "uploads", "swagger", "openapi"}


def assert_site_payload(name, subdomain):
    if not name or not subdomain:
        raise ValidationError("Name and subdomain are required")

    if not SUBDOMAIN_PATTERN.match(subdomain):
        raise ValidationError(
            "Subdomain may only contain lowercase letters, digits and hyphens"
        )

    if subdomain in RESERVED_SUBDOMAINS:
        raise ValidationError(f"Subdomain '{subdomain}' is reserved")
