from contextlib import contextmanager

from sqlalchemy.exc import OperationalError

from wikisites.models.page import Page
from wikisites.models.page_revision import PageRevision


def _revision_count(app, page_id):
    with app.app_context():
        return PageRevision.query.filter_by(page_id=page_id).count()


def test_save_then_render_root(client, save):
    response = save("Home", "<h1>Hi</h1>")
    assert response.status_code == 201

    rendered = client.get("/acme")

    assert rendered.status_code == 200
    assert b"<h1>Hi</h1>" in rendered.data


def test_second_save_updates_in_place_and_appends_revision(app, save):
    first = save("Home", "one").get_json()
    second = save("Home", "two")

    assert second.status_code == 200
    body = second.get_json()
    assert body["created"] is False
    assert body["page"]["id"] == first["page"]["id"]
    assert body["page"]["content"] == "two"
    assert _revision_count(app, body["page"]["id"]) == 2

    with app.app_context():
        assert Page.query.count() == 1


def test_save_survives_wiki_failure(app, client, wiki, save):
    wiki.fail_writes = True
    wiki.fail_reads = True

    response = save("About", "x")

    assert response.status_code == 201
    body = response.get_json()
    assert body["mirror"] == {"attempted": True, "ok": False, "error": "wiki unavailable"}
    assert body["warnings"]
    assert body["revision_id"] is not None

    rendered = client.get("/api/v1/public/sites/acme/render", query_string={"title": "About"})
    assert rendered.get_json()["content"] == "x"
    assert rendered.get_json()["source"] == "local"


def test_save_mirrors_to_wiki(wiki, save):
    response = save("Home", "<p>mirrored</p>", comment="first")

    assert response.get_json()["mirror"]["ok"] is True
    assert wiki.pages["Home"][-1]["content"] == "<p>mirrored</p>"
    assert wiki.pages["Home"][-1]["comment"] == "first"


def test_revision_failure_is_reported_not_fatal(app, save, monkeypatch):
    from wikisites.application import reconcile

    @contextmanager
    def failing_transaction():
        raise OperationalError("INSERT INTO page_revisions", {}, Exception("disk full"))
        yield

    monkeypatch.setattr(reconcile, "transactional", failing_transaction)

    response = save("Home", "content")

    assert response.status_code == 201
    body = response.get_json()
    assert body["revision_id"] is None
    assert any("revision" in w for w in body["warnings"])
    assert _revision_count(app, body["page"]["id"]) == 0


def test_save_validation(save):
    assert save("", "x").status_code == 400
    assert save("Home", "").status_code == 400
    assert save("Bad|Title", "x").status_code == 400


def test_save_requires_real_booleans(app, wiki, save):
    response = save("Home", "x", is_published="false")

    assert response.status_code == 400
    assert response.get_json()["message"] == "is_published must be a boolean"
    assert save("Home", "x", is_minor=1).status_code == 400
    assert not any(call[0] == "save_page" for call in wiki.calls)
    with app.app_context():
        assert Page.query.count() == 0


def test_save_rejects_body_that_is_not_an_object(client, wiki):
    response = client.post("/api/v1/public/sites/acme/pages", json=[{"title": "Home", "content": "x"}])

    assert response.status_code == 400
    assert response.get_json()["error"] == "ValidationError"
    assert wiki.calls == []


def test_save_unknown_site_is_404(client):
    response = client.post("/api/v1/public/sites/nope/pages", json={"title": "Home", "content": "x"})
    assert response.status_code == 404


def test_stale_write_is_rejected(save):
    save("Home", "one")

    response = save("Home", "two", headers={"If-Unmodified-Since": "Mon, 01 Jan 2001 00:00:00 GMT"})

    assert response.status_code == 409


def test_render_prefers_local_over_wiki(client, wiki, save):
    save("Home", "local copy")
    wiki.pages["Home"].append({"revid": 999, "content": "wiki copy", "comment": "", "minor": False})

    body = client.get("/api/v1/public/sites/acme/render").get_json()

    assert body["source"] == "local"
    assert body["content"] == "local copy"


def test_render_uses_wiki_when_no_local_page(client, wiki, site_id):
    wiki.save_page("Guide", "from the wiki")

    body = client.get("/api/v1/public/sites/acme/render", query_string={"title": "Guide"}).get_json()

    assert body["source"] == "wiki"
    assert "from the wiki" in body["content"]


def test_render_falls_back_to_first_published_page(client, wiki, save):
    save("Welcome", "first page")
    save("Later", "second page")
    wiki.fail_reads = True

    body = client.get("/api/v1/public/sites/acme/render", query_string={"title": "Missing"}).get_json()

    assert body["source"] == "fallback"
    assert body["title"] == "Welcome"


def test_render_skips_unpublished_pages(client, wiki, save):
    save("Home", "draft", is_published=False)
    wiki.fail_reads = True

    body = client.get("/api/v1/public/sites/acme/render").get_json()

    assert body["is_empty"] is True
    assert body["content"] == ""


def test_empty_site_view_shows_prompt(client, site_id):
    response = client.get("/acme")

    assert response.status_code == 200
    assert b"no published pages yet" in response.data


def test_unknown_site_view_is_404(client):
    response = client.get("/nobody")
    assert response.status_code == 404


def test_render_is_stable_between_reads(client, save):
    save("Home", "<p>same</p>")

    first = client.get("/acme/Home")
    second = client.get("/acme/Home")

    assert first.data == second.data
