import dataclasses

import pytest
from flask_jwt_extended import create_access_token

from wikisites import create_app
from wikisites.extensions import db
from wikisites.models.site import Site
from wikisites.models.user import User
from wikisites.wiki.exceptions import RemoteWikiError


class FakeWikiGateway:
    """In-memory stand-in for WikiGateway with switchable failures."""

    def __init__(self):
        self.pages = {}
        self.uploads = {}
        self.protection = {}
        self.fail_writes = False
        self.fail_reads = False
        self.accept_uploads = True
        self.farm_ok = False
        self.calls = []
        self._revid = 100

    def _raise_if(self, flag):
        if flag:
            raise RemoteWikiError("wiki unavailable")

    # pages
    def fetch_page(self, title, wiki_url=None):
        self.calls.append(("fetch_page", title))
        self._raise_if(self.fail_reads)
        history = self.pages.get(title)
        if not history:
            raise RemoteWikiError(f"Wiki page '{title}' has no content", code="missingtitle")
        return f'<div class="wiki">{history[-1]["content"]}</div>'

    def save_page(self, title, content, *, summary="", minor=False, wiki_url=None, token=None):
        self.calls.append(("save_page", title))
        self._raise_if(self.fail_writes)
        self._revid += 1
        self.pages.setdefault(title, []).append({
            "revid": self._revid,
            "content": content,
            "comment": summary,
            "minor": minor,
        })
        return {"result": "Success", "newrevid": self._revid}

    def delete_page(self, title, *, reason="", wiki_url=None):
        self.calls.append(("delete_page", title))
        self._raise_if(self.fail_writes)
        self.pages.pop(title, None)
        return {"title": title}

    def list_pages(self, wiki_url=None, limit=500):
        return [] if self.fail_reads else sorted(self.pages)[:limit]

    # revisions
    def get_page_history(self, title, limit=50, wiki_url=None):
        if self.fail_reads:
            return []
        return [
            {
                "revid": rev["revid"],
                "parentid": 0,
                "user": "WikiUser",
                "userid": 1,
                "timestamp": "2026-01-01T00:00:00Z",
                "comment": rev["comment"],
                "size": len(rev["content"]),
                "minor": rev["minor"],
                "content": rev["content"],
            }
            for rev in reversed(self.pages.get(title, []))
        ][:limit]

    def get_revision_content(self, revid, wiki_url=None):
        if self.fail_reads:
            return ""
        for history in self.pages.values():
            for rev in history:
                if rev["revid"] == revid:
                    return rev["content"]
        return ""

    # files
    def upload_file(self, filename, data, comment="", wiki_url=None):
        self.calls.append(("upload_file", filename))
        if not self.accept_uploads:
            return False
        self.uploads[filename] = data
        return True

    def get_file_info(self, filename, wiki_url=None):
        if filename not in self.uploads:
            return None
        return {
            "url": f"http://wiki.example.test/images/{filename}",
            "size": len(self.uploads[filename]),
        }

    def file_page_url(self, filename, wiki_url=None):
        return f"http://wiki.example.test/index.php?title=File:{filename}"

    def get_page_files(self, title, wiki_url=None):
        return [{"title": f"File:{name}"} for name in sorted(self.uploads)]

    # protection
    def get_page_protection(self, title, wiki_url=None):
        return [
            {"type": action, "level": level, "expiry": "infinity"}
            for action, level in self.protection.get(title, {}).items()
        ]

    def set_page_protection(self, title, protections, *, expiry="infinite", reason="", wiki_url=None):
        if self.fail_writes:
            return False
        self.protection[title] = dict(protections)
        return True

    # discovery
    def get_recent_changes(self, limit=50, wiki_url=None):
        return [{"type": "edit", "title": title} for title in sorted(self.pages)][:limit]

    def search(self, query, limit=20, wiki_url=None):
        if self.fail_reads:
            return []
        hits = [title for title in sorted(self.pages) if query.lower() in title.lower()]
        return [{"title": title, "snippet": ""} for title in hits][:limit]

    def get_search_suggestions(self, query, limit=10, wiki_url=None):
        return [
            {"title": title, "description": "", "url": f"http://wiki.example.test/{title}"}
            for title in sorted(self.pages)
            if title.lower().startswith(query.lower())
        ][:limit]

    # wiki farm
    def create_wiki_site(self, subdomain):
        return f"http://{subdomain}.wiki.example.test/api.php"

    def manage_wiki_site(self, wiki_url, action):
        self.calls.append(("manage_wiki_site", action))
        return self.farm_ok


@pytest.fixture
def wiki():
    return FakeWikiGateway()


@pytest.fixture
def app(wiki, tmp_path):
    app = create_app("testing", gateway=wiki)
    settings = app.extensions["wikisites.settings"]
    app.extensions["wikisites.settings"] = dataclasses.replace(
        settings, upload_folder=str(tmp_path / "uploads")
    )

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(app, email, name):
    with app.app_context():
        user = User()
        user.email = email
        user.name = name
        user.set_password("correct-horse")
        db.session.add(user)
        db.session.commit()
        return user.id


def _auth_headers(app, user_id):
    with app.app_context():
        token = create_access_token(identity=user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_id(app):
    return _make_user(app, "owner@example.test", "Owner")


@pytest.fixture
def other_id(app):
    return _make_user(app, "other@example.test", "Other")


@pytest.fixture
def owner_headers(app, owner_id):
    return _auth_headers(app, owner_id)


@pytest.fixture
def other_headers(app, other_id):
    return _auth_headers(app, other_id)


@pytest.fixture
def site_id(app, owner_id):
    with app.app_context():
        site = Site()
        site.name = "Acme"
        site.subdomain = "acme"
        site.wiki_url = "http://acme.wiki.example.test/api.php"
        site.user_id = owner_id
        db.session.add(site)
        db.session.commit()
        return site.id


@pytest.fixture
def save(client, site_id):
    """POST a page save for the acme site."""
    def _save(title, content, headers=None, **extra):
        return client.post(
            "/api/v1/public/sites/acme/pages",
            json={"title": title, "content": content, **extra},
            headers=headers or {},
        )
    return _save
