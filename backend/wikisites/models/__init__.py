from .user import User
from .site import Site
from .page import Page
from .page_revision import PageRevision
from .page_file import PageFile

__all__ = ["User", "Site", "Page", "PageRevision", "PageFile"]
