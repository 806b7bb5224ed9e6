def _protect(client, site_id, page_id, headers, value=True):
    return client.put(
        f"/api/v1/sites/{site_id}/pages/{page_id}/protection",
        json={"is_protected": value},
        headers=headers,
    )


def test_protected_page_rejects_other_users(client, site_id, save, owner_headers, other_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]

    assert _protect(client, site_id, page_id, owner_headers).get_json()["is_protected"] is True

    rejected = save("Home", "hijack", headers=other_headers)
    assert rejected.status_code == 403

    accepted = save("Home", "v2", headers=owner_headers)
    assert accepted.status_code == 200
    assert accepted.get_json()["page"]["content"] == "v2"


def test_protected_page_requires_sign_in(client, site_id, save, owner_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]
    _protect(client, site_id, page_id, owner_headers)

    response = save("Home", "anonymous edit")

    assert response.status_code == 401
    assert response.get_json()["error"] == "AuthenticationRequired"


def test_rejected_edit_touches_no_store(app, client, wiki, site_id, save, owner_headers, other_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]
    _protect(client, site_id, page_id, owner_headers)
    wiki_saves = len(wiki.pages["Home"])

    save("Home", "hijack", headers=other_headers)

    assert len(wiki.pages["Home"]) == wiki_saves
    page = client.get(f"/api/v1/sites/{site_id}/pages/{page_id}", headers=owner_headers).get_json()
    assert page["content"] == "v1"
    assert page["revision_count"] == 1


def test_only_owner_can_toggle_protection(client, site_id, save, other_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]

    assert _protect(client, site_id, page_id, other_headers).status_code == 403
    assert _protect(client, site_id, page_id, {}).status_code == 401


def test_protection_flag_must_be_boolean(client, site_id, save, owner_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]

    response = _protect(client, site_id, page_id, owner_headers, value="yes")

    assert response.status_code == 400


def test_wiki_protection_is_separate_from_local_flag(client, wiki, site_id, save, owner_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]
    url = f"/api/v1/sites/{site_id}/pages/{page_id}/protection/wiki"

    response = client.put(url, json={"protections": {"edit": "sysop"}}, headers=owner_headers)
    assert response.status_code == 200
    assert wiki.protection["Home"] == {"edit": "sysop"}

    entries = client.get(url, headers=owner_headers).get_json()["protection"]
    assert entries == [{"type": "edit", "level": "sysop", "expiry": "infinity"}]

    local = client.get(
        f"/api/v1/sites/{site_id}/pages/{page_id}/protection", headers=owner_headers
    ).get_json()
    assert local["is_protected"] is False


def test_wiki_protection_rejects_unknown_levels(client, site_id, save, owner_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]

    response = client.put(
        f"/api/v1/sites/{site_id}/pages/{page_id}/protection/wiki",
        json={"protections": {"edit": "everyone"}},
        headers=owner_headers,
    )

    assert response.status_code == 400


def test_wiki_protection_failure_is_reported(client, wiki, site_id, save, owner_headers):
    page_id = save("Home", "v1").get_json()["page"]["id"]
    wiki.fail_writes = True

    response = client.put(
        f"/api/v1/sites/{site_id}/pages/{page_id}/protection/wiki",
        json={"protections": {"edit": "sysop"}},
        headers=owner_headers,
    )

    assert response.status_code == 502
