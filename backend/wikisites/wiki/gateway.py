"""HTTP gateway to the MediaWiki action API.

Every tenant site points at its own ``api.php`` endpoint. The gateway is
stateless apart from the pooled ``requests`` session: tokens are fetched
immediately before each mutating call and never cached.

Failure contract:

- page reads/writes and token calls raise ``RemoteWikiError``
- uploads and lifecycle calls return ``False``
- read-only listings return an empty collection
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from wikisites.wiki.exceptions import RemoteWikiError

logger = logging.getLogger(__name__)

MANAGE_ACTIONS = {"suspend", "activate", "delete"}


class WikiGateway:
    def __init__(self, settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    # -------------------------------------------------
    # Transport
    # -------------------------------------------------
    def _endpoint(self, wiki_url: Optional[str]) -> str:
        return wiki_url or self.settings.default_wiki_api_url

    def _decode(self, response) -> Any:
        try:
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise RemoteWikiError(f"Wiki request failed: {exc}") from exc
        except ValueError as exc:
            raise RemoteWikiError("Wiki returned a non-JSON response") from exc

        if isinstance(data, list):
            return data
        if not isinstance(data, dict):
            raise RemoteWikiError("Wiki returned an unexpected response")

        error = data.get("error")
        if error:
            if not isinstance(error, dict):
                raise RemoteWikiError(str(error))
            raise RemoteWikiError(
                error.get("info") or "Wiki API error",
                code=error.get("code"),
            )
        return data

    def _get(self, params: Dict[str, Any], wiki_url: Optional[str] = None) -> Any:
        query = {"format": "json", "formatversion": "2", **params}
        try:
            response = self.session.get(
                self._endpoint(wiki_url),
                params=query,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as exc:
            raise RemoteWikiError(f"Wiki request failed: {exc}") from exc
        return self._decode(response)

    def _post(
        self,
        data: Dict[str, Any],
        wiki_url: Optional[str] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        form = {"format": "json", "formatversion": "2", **data}
        try:
            response = self.session.post(
                self._endpoint(wiki_url),
                data=form,
                files=files,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as exc:
            raise RemoteWikiError(f"Wiki request failed: {exc}") from exc
        return self._decode(response)

    @staticmethod
    def _object(data: Any) -> Dict[str, Any]:
        """Everything but opensearch answers with a JSON object."""
        if not isinstance(data, dict):
            raise RemoteWikiError("Wiki returned an unexpected response")
        return data

    @staticmethod
    def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
        value = data.get(key)
        return value if isinstance(value, dict) else {}

    @classmethod
    def _first_page(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        pages = cls._section(data, "query").get("pages")
        if not isinstance(pages, list) or not pages:
            return {}
        return pages[0] if isinstance(pages[0], dict) else {}

    # -------------------------------------------------
    # Tokens
    # -------------------------------------------------
    def get_edit_token(self, wiki_url: Optional[str] = None) -> str:
        data = self._object(self._get({"action": "query", "meta": "tokens", "type": "csrf"}, wiki_url))
        token = self._section(self._section(data, "query"), "tokens").get("csrftoken")
        if not token:
            raise RemoteWikiError("Wiki did not issue an edit token")
        return token

    # -------------------------------------------------
    # Pages
    # -------------------------------------------------
    def fetch_page(self, title: str, wiki_url: Optional[str] = None) -> str:
        """Rendered HTML of ``title``; raises when the wiki has none."""
        data = self._object(self._get({"action": "parse", "page": title, "prop": "text"}, wiki_url))
        html = self._section(data, "parse").get("text") or ""
        if not html:
            raise RemoteWikiError(f"Wiki page '{title}' has no content", code="missingtitle")
        return html

    def fetch_page_source(self, title: str, wiki_url: Optional[str] = None) -> str:
        data = self._object(self._get({
            "action": "query",
            "titles": title,
            "prop": "revisions",
            "rvprop": "content",
            "rvslots": "main",
        }, wiki_url))
        page = self._first_page(data)
        if not page or page.get("missing"):
            raise RemoteWikiError(f"Wiki page '{title}' does not exist", code="missingtitle")
        revisions = page.get("revisions") or [{}]
        return _revision_text(revisions[0])

    def save_page(
        self,
        title: str,
        content: str,
        *,
        summary: str = "",
        minor: bool = False,
        wiki_url: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        token = token or self.get_edit_token(wiki_url)
        payload = {
            "action": "edit",
            "title": title,
            "text": content,
            "summary": summary,
            "token": token,
        }
        if minor:
            payload["minor"] = "1"

        data = self._object(self._post(payload, wiki_url))
        result = self._section(data, "edit")
        if result.get("result") != "Success":
            raise RemoteWikiError(f"Wiki rejected edit of '{title}'", code=result.get("result"))
        return result

    def delete_page(
        self,
        title: str,
        *,
        reason: str = "",
        wiki_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        token = self.get_edit_token(wiki_url)
        data = self._object(self._post({
            "action": "delete",
            "title": title,
            "reason": reason,
            "token": token,
        }, wiki_url))
        return self._section(data, "delete")

    def list_pages(self, wiki_url: Optional[str] = None, limit: int = 500) -> List[str]:
        try:
            data = self._object(self._get({"action": "query", "list": "allpages", "aplimit": str(limit)}, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Listing wiki pages failed: %s", exc)
            return []
        return [p["title"] for p in self._section(data, "query").get("allpages", []) if isinstance(p, dict)]

    # -------------------------------------------------
    # Revisions
    # -------------------------------------------------
    def get_page_history(
        self,
        title: str,
        limit: int = 50,
        wiki_url: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        try:
            data = self._object(self._get({
                "action": "query",
                "titles": title,
                "prop": "revisions",
                "rvprop": "ids|timestamp|user|userid|comment|size|flags|content",
                "rvslots": "main",
                "rvlimit": str(limit),
                "rvdir": "older",
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Fetching wiki history of '%s' failed: %s", title, exc)
            return []

        return [
            {
                "revid": rev.get("revid"),
                "parentid": rev.get("parentid"),
                "user": rev.get("user"),
                "userid": rev.get("userid"),
                "timestamp": rev.get("timestamp"),
                "comment": rev.get("comment", ""),
                "size": rev.get("size"),
                "minor": bool(rev.get("minor", False)),
                "content": _revision_text(rev),
            }
            for rev in self._first_page(data).get("revisions") or []
            if isinstance(rev, dict)
        ]

    def get_revision_content(self, revid: int, wiki_url: Optional[str] = None) -> str:
        try:
            data = self._object(self._get({
                "action": "query",
                "revids": str(revid),
                "prop": "revisions",
                "rvprop": "content",
                "rvslots": "main",
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Fetching wiki revision %s failed: %s", revid, exc)
            return ""

        revisions = self._first_page(data).get("revisions") or []
        return _revision_text(revisions[0]) if revisions else ""

    # -------------------------------------------------
    # Files
    # -------------------------------------------------
    def upload_file(
        self,
        filename: str,
        data: bytes,
        comment: str = "",
        wiki_url: Optional[str] = None,
    ) -> bool:
        try:
            token = self.get_edit_token(wiki_url)
            result = self._object(self._post(
                {
                    "action": "upload",
                    "filename": filename,
                    "comment": comment,
                    "ignorewarnings": "1",
                    "token": token,
                },
                wiki_url,
                files={"file": (filename, data)},
            ))
        except RemoteWikiError as exc:
            logger.warning("Uploading '%s' to wiki failed: %s", filename, exc)
            return False

        return self._section(result, "upload").get("result") == "Success"

    def get_file_info(self, filename: str, wiki_url: Optional[str] = None) -> Optional[Dict[str, Any]]:
        try:
            data = self._object(self._get({
                "action": "query",
                "titles": f"File:{filename}",
                "prop": "imageinfo",
                "iiprop": "url|size|mime",
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Fetching wiki file info for '%s' failed: %s", filename, exc)
            return None

        info = self._first_page(data).get("imageinfo") or []
        return info[0] if info else None

    def get_page_files(self, title: str, wiki_url: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            data = self._object(self._get({
                "action": "query",
                "titles": title,
                "prop": "images",
                "imlimit": "500",
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Fetching wiki files of '%s' failed: %s", title, exc)
            return []
        return self._first_page(data).get("images", [])

    def file_page_url(self, filename: str, wiki_url: Optional[str] = None) -> str:
        """Description page of an uploaded file, used when imageinfo has no URL."""
        endpoint = self._endpoint(wiki_url)
        base = endpoint.rsplit("/api.php", 1)[0]
        return f"{base}/index.php?title=File:{filename}"

    # -------------------------------------------------
    # Protection
    # -------------------------------------------------
    def get_page_protection(self, title: str, wiki_url: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            data = self._object(self._get({
                "action": "query",
                "titles": title,
                "prop": "info",
                "inprop": "protection",
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Fetching wiki protection of '%s' failed: %s", title, exc)
            return []
        return self._first_page(data).get("protection", [])

    def set_page_protection(
        self,
        title: str,
        protections: Dict[str, str],
        *,
        expiry: str = "infinite",
        reason: str = "",
        wiki_url: Optional[str] = None,
    ) -> bool:
        levels = "|".join(f"{action}={level}" for action, level in protections.items())
        try:
            token = self.get_edit_token(wiki_url)
            data = self._object(self._post({
                "action": "protect",
                "title": title,
                "protections": levels,
                "expiry": expiry,
                "reason": reason,
                "token": token,
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Setting wiki protection of '%s' failed: %s", title, exc)
            return False
        return bool(self._section(data, "protect").get("protections"))

    # -------------------------------------------------
    # Discovery
    # -------------------------------------------------
    def get_recent_changes(self, limit: int = 50, wiki_url: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            data = self._object(self._get({
                "action": "query",
                "list": "recentchanges",
                "rclimit": str(limit),
                "rcprop": "ids|title|timestamp|user|comment|flags|sizes",
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Fetching wiki recent changes failed: %s", exc)
            return []
        return self._section(data, "query").get("recentchanges") or []

    def search(self, query: str, limit: int = 20, wiki_url: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            data = self._object(self._get({
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": str(limit),
                "srprop": "snippet|size|timestamp|wordcount",
            }, wiki_url))
        except RemoteWikiError as exc:
            logger.warning("Wiki search for '%s' failed: %s", query, exc)
            return []
        return self._section(data, "query").get("search") or []

    def get_search_suggestions(
        self,
        query: str,
        limit: int = 10,
        wiki_url: Optional[str] = None,
    ) -> List[Dict[str, str]]:
        try:
            data = self._get({"action": "opensearch", "search": query, "limit": str(limit)}, wiki_url)
        except RemoteWikiError as exc:
            logger.warning("Wiki suggestions for '%s' failed: %s", query, exc)
            return []

        if not isinstance(data, list) or len(data) < 4:
            return []
        _, titles, descriptions, urls = data[:4]
        return [
            {"title": title, "description": description, "url": url}
            for title, description, url in zip(titles, descriptions, urls)
        ]

    # -------------------------------------------------
    # Wiki farm lifecycle
    # -------------------------------------------------
    def create_wiki_site(self, subdomain: str) -> str:
        """Provision a tenant wiki and return its api.php endpoint."""
        wiki_url = self.settings.wiki_api_url_for(subdomain)
        farm_url = self.settings.wiki_farm_api_url
        if not farm_url:
            return wiki_url

        try:
            token = self.get_edit_token(farm_url)
            self._post({
                "action": "createwiki",
                "wiki": subdomain,
                "token": token,
            }, farm_url)
        except RemoteWikiError as exc:
            logger.warning("Provisioning wiki for '%s' failed: %s", subdomain, exc)
        return wiki_url

    def manage_wiki_site(self, wiki_url: str, action: str) -> bool:
        if action not in MANAGE_ACTIONS:
            raise ValueError(f"Unsupported wiki action: {action}")

        farm_url = self.settings.wiki_farm_api_url
        if not farm_url:
            logger.info("No wiki farm configured; skipping %s of %s", action, wiki_url)
            return False

        try:
            token = self.get_edit_token(farm_url)
            data = self._object(self._post({
                "action": "managewiki",
                "wiki": wiki_url,
                "do": action,
                "token": token,
            }, farm_url))
        except RemoteWikiError as exc:
            logger.warning("Wiki farm %s of %s failed: %s", action, wiki_url, exc)
            return False
        return self._section(data, "managewiki").get("result") == "Success"


def _revision_text(revision: Dict[str, Any]) -> str:
    if not isinstance(revision, dict):
        return ""
    slots = revision.get("slots") or {}
    main = slots.get("main") or {}
    return main.get("content") or revision.get("content") or ""
