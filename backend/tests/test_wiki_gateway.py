import pytest
import requests

from wikisites.config import PlatformSettings
from wikisites.wiki.exceptions import RemoteWikiError
from wikisites.wiki.gateway import WikiGateway

API = "http://acme.wiki.example.test/api.php"


class FakeResponse:
    def __init__(self, payload=None, status=200, text=None):
        self.payload = payload
        self.status_code = status
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.text is not None:
            raise ValueError("not json")
        return self.payload


class FakeSession:
    """Replays queued responses and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def _next(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)


def _settings(farm=None):
    return PlatformSettings(
        base_domain="example.test",
        protocol="http",
        default_wiki_api_url="http://wiki.example.test/api.php",
        wiki_domain="wiki.example.test",
        wiki_farm_api_url=farm,
        request_timeout=5.0,
        upload_folder="/tmp/uploads",
        max_upload_bytes=10 * 1024 * 1024,
    )


def _token():
    return FakeResponse({"query": {"tokens": {"csrftoken": "abc+\\"}}})


def test_fetch_page_returns_rendered_html():
    session = FakeSession(FakeResponse({"parse": {"title": "Home", "text": "<p>hi</p>"}}))
    gateway = WikiGateway(_settings(), session=session)

    assert gateway.fetch_page("Home", API) == "<p>hi</p>"

    method, url, kwargs = session.requests[0]
    assert (method, url) == ("GET", API)
    assert kwargs["params"]["action"] == "parse"
    assert kwargs["params"]["format"] == "json"
    assert kwargs["timeout"] == 5.0


def test_fetch_page_raises_on_api_error():
    session = FakeSession(FakeResponse({"error": {"code": "missingtitle", "info": "The page does not exist"}}))
    gateway = WikiGateway(_settings(), session=session)

    with pytest.raises(RemoteWikiError) as excinfo:
        gateway.fetch_page("Nope", API)

    assert excinfo.value.code == "missingtitle"


def test_default_endpoint_is_used_without_site_url():
    session = FakeSession(FakeResponse({"parse": {"text": "<p>x</p>"}}))
    WikiGateway(_settings(), session=session).fetch_page("Home")

    assert session.requests[0][1] == "http://wiki.example.test/api.php"


def test_save_page_fetches_fresh_token_each_time():
    session = FakeSession(
        _token(), FakeResponse({"edit": {"result": "Success", "newrevid": 7}}),
        _token(), FakeResponse({"edit": {"result": "Success", "newrevid": 8}}),
    )
    gateway = WikiGateway(_settings(), session=session)

    gateway.save_page("Home", "one", summary="s", minor=True, wiki_url=API)
    gateway.save_page("Home", "two", wiki_url=API)

    methods = [method for method, _url, _kwargs in session.requests]
    assert methods == ["GET", "POST", "GET", "POST"]
    first_edit = session.requests[1][2]["data"]
    assert first_edit["token"] == "abc+\\"
    assert first_edit["minor"] == "1"
    assert "minor" not in session.requests[3][2]["data"]


def test_save_page_raises_when_edit_not_accepted():
    session = FakeSession(_token(), FakeResponse({"edit": {"result": "Failure"}}))
    gateway = WikiGateway(_settings(), session=session)

    with pytest.raises(RemoteWikiError):
        gateway.save_page("Home", "x", wiki_url=API)


def test_network_errors_become_remote_errors():
    session = FakeSession(requests.ConnectionError("refused"))
    gateway = WikiGateway(_settings(), session=session)

    with pytest.raises(RemoteWikiError):
        gateway.fetch_page("Home", API)


def test_non_json_body_is_a_remote_error():
    session = FakeSession(FakeResponse(text="<html>maintenance</html>"))
    gateway = WikiGateway(_settings(), session=session)

    with pytest.raises(RemoteWikiError):
        gateway.fetch_page_source("Home", API)


def test_string_error_payload_is_a_remote_error():
    session = FakeSession(_token(), FakeResponse({"error": "maintenance"}))
    gateway = WikiGateway(_settings(), session=session)

    with pytest.raises(RemoteWikiError, match="maintenance"):
        gateway.save_page("Home", "x", wiki_url=API)


@pytest.mark.parametrize("payload", [[], "ok", 42])
def test_non_object_payloads_are_remote_errors(payload):
    gateway = WikiGateway(_settings(), session=FakeSession(FakeResponse(payload)))

    with pytest.raises(RemoteWikiError):
        gateway.fetch_page("Home", API)


def test_token_reply_that_is_not_an_object_is_a_remote_error():
    session = FakeSession(FakeResponse([]))
    gateway = WikiGateway(_settings(), session=session)

    with pytest.raises(RemoteWikiError):
        gateway.save_page("Home", "x", wiki_url=API)


def test_listings_tolerate_non_object_payloads():
    gateway = WikiGateway(_settings(), session=FakeSession(*[FakeResponse([])] * 6))

    assert gateway.list_pages(API) == []
    assert gateway.get_page_history("Home", 10, API) == []
    assert gateway.get_recent_changes(10, API) == []
    assert gateway.search("x", 10, API) == []
    assert gateway.get_revision_content(5, API) == ""
    assert gateway.get_file_info("logo.png", API) is None


def test_read_only_listings_return_empty_on_failure():
    gateway = WikiGateway(_settings(), session=FakeSession(*[FakeResponse(status=503)] * 5))

    assert gateway.list_pages(API) == []
    assert gateway.get_page_history("Home", 10, API) == []
    assert gateway.get_recent_changes(10, API) == []
    assert gateway.search("x", 10, API) == []
    assert gateway.get_revision_content(5, API) == ""


def test_page_history_is_normalized():
    session = FakeSession(FakeResponse({"query": {"pages": [{
        "title": "Home",
        "revisions": [{
            "revid": 12,
            "parentid": 11,
            "user": "Ann",
            "userid": 3,
            "timestamp": "2026-03-01T10:00:00Z",
            "comment": "tweak",
            "size": 5,
            "minor": True,
            "slots": {"main": {"content": "hello"}},
        }],
    }]}}))
    gateway = WikiGateway(_settings(), session=session)

    history = gateway.get_page_history("Home", 10, API)

    assert history == [{
        "revid": 12,
        "parentid": 11,
        "user": "Ann",
        "userid": 3,
        "timestamp": "2026-03-01T10:00:00Z",
        "comment": "tweak",
        "size": 5,
        "minor": True,
        "content": "hello",
    }]


def test_upload_returns_false_on_rejection():
    session = FakeSession(_token(), FakeResponse({"error": {"code": "verification-error", "info": "bad"}}))
    gateway = WikiGateway(_settings(), session=session)

    assert gateway.upload_file("a.png", b"data", "c", API) is False


def test_upload_sends_multipart_file():
    session = FakeSession(_token(), FakeResponse({"upload": {"result": "Success"}}))
    gateway = WikiGateway(_settings(), session=session)

    assert gateway.upload_file("a.png", b"data", "c", API) is True
    assert session.requests[1][2]["files"] == {"file": ("a.png", b"data")}


def test_set_protection_joins_levels():
    session = FakeSession(_token(), FakeResponse({"protect": {"protections": [{"edit": "sysop"}]}}))
    gateway = WikiGateway(_settings(), session=session)

    assert gateway.set_page_protection("Home", {"edit": "sysop", "move": "sysop"}, wiki_url=API) is True
    assert session.requests[1][2]["data"]["protections"] == "edit=sysop|move=sysop"


def test_suggestions_are_zipped_from_opensearch():
    session = FakeSession(FakeResponse(["Gar", ["Garden"], ["About gardens"], ["http://w/Garden"]]))
    gateway = WikiGateway(_settings(), session=session)

    assert gateway.get_search_suggestions("Gar", 5, API) == [
        {"title": "Garden", "description": "About gardens", "url": "http://w/Garden"}
    ]


def test_create_wiki_site_without_farm_derives_url():
    session = FakeSession()
    gateway = WikiGateway(_settings(), session=session)

    assert gateway.create_wiki_site("acme") == "http://acme.wiki.example.test/api.php"
    assert session.requests == []


def test_create_wiki_site_tolerates_farm_failure():
    session = FakeSession(requests.Timeout("slow"))
    gateway = WikiGateway(_settings(farm="http://farm.example.test/api.php"), session=session)

    assert gateway.create_wiki_site("acme") == "http://acme.wiki.example.test/api.php"


def test_manage_wiki_site():
    farm = "http://farm.example.test/api.php"
    session = FakeSession(_token(), FakeResponse({"managewiki": {"result": "Success"}}))
    gateway = WikiGateway(_settings(farm=farm), session=session)

    assert gateway.manage_wiki_site(API, "suspend") is True
    assert session.requests[1][2]["data"]["do"] == "suspend"
    assert WikiGateway(_settings(), session=FakeSession()).manage_wiki_site(API, "delete") is False

    with pytest.raises(ValueError):
        gateway.manage_wiki_site(API, "explode")


def test_file_page_url():
    gateway = WikiGateway(_settings(), session=FakeSession())

    assert gateway.file_page_url("a.png", API) == "http://acme.wiki.example.test/index.php?title=File:a.png"
