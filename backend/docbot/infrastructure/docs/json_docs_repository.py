"""JSON-file implementation of the DocsRepository port.

The corpus lives in three files inside one directory:

    articles.json       general documentation articles
    api_articles.json   guides scoped to one API (each carries "api")
    api_endpoints.json  endpoint reference (id, api, method, path, ...)

Each file holds a JSON array of objects. Files are read once at
construction; a missing file is an empty collection.
"""

import json
import logging
from pathlib import Path
from typing import Any

from docbot.application.interfaces import DocsRepository
from docbot.domain.entities import ApiEndpoint, DocArticle

logger = logging.getLogger(__name__)

ARTICLES_FILE = "articles.json"
API_ARTICLES_FILE = "api_articles.json"
API_ENDPOINTS_FILE = "api_endpoints.json"


class JsonDocsRepository(DocsRepository):
    """In-memory corpus loaded from JSON files."""

    def __init__(
        self,
        articles: list[DocArticle] | None = None,
        api_articles: list[DocArticle] | None = None,
        api_endpoints: list[ApiEndpoint] | None = None,
    ):
        self._articles = list(articles or [])
        self._api_articles = list(api_articles or [])
        self._api_endpoints = list(api_endpoints or [])
        self._articles_by_id = {a.id: a for a in self._articles}
        self._api_articles_by_id = {a.id: a for a in self._api_articles}
        self._api_endpoints_by_id = {e.id: e for e in self._api_endpoints}

    @classmethod
    def from_directory(cls, data_dir: str | Path) -> "JsonDocsRepository":
        """Load the corpus files from ``data_dir``.

        Raises:
            ValueError: If a file exists but is not a JSON array of objects.
        """
        base = Path(data_dir)
        articles = [_to_article(item) for item in _read_items(base / ARTICLES_FILE)]
        api_articles = [
            _to_article(item) for item in _read_items(base / API_ARTICLES_FILE)
        ]
        api_endpoints = [
            _to_endpoint(item) for item in _read_items(base / API_ENDPOINTS_FILE)
        ]
        logger.info(
            "Docs corpus loaded from %s: %d articles, %d API articles, %d endpoints",
            base,
            len(articles),
            len(api_articles),
            len(api_endpoints),
        )
        return cls(articles, api_articles, api_endpoints)

    def list_articles(self, subject: str | None = None) -> list[DocArticle]:
        if subject is None:
            return list(self._articles)
        needle = subject.casefold()
        return [a for a in self._articles if needle in a.subject.casefold()]

    def get_articles(self, ids: list[str]) -> list[DocArticle]:
        return _pick(self._articles_by_id, ids)

    def list_api_endpoints(self, api: str | None = None) -> list[ApiEndpoint]:
        if api is None:
            return list(self._api_endpoints)
        return [e for e in self._api_endpoints if e.api.casefold() == api.casefold()]

    def get_api_endpoints(self, ids: list[str]) -> list[ApiEndpoint]:
        return _pick(self._api_endpoints_by_id, ids)

    def list_api_articles(self, api: str | None = None) -> list[DocArticle]:
        if api is None:
            return list(self._api_articles)
        return [
            a for a in self._api_articles
            if (a.api or "").casefold() == api.casefold()
        ]

    def get_api_articles(self, ids: list[str]) -> list[DocArticle]:
        return _pick(self._api_articles_by_id, ids)


def _pick(index: dict[str, Any], ids: list[str]) -> list[Any]:
    """Look ids up in request order, skipping unknown and repeated ids."""
    picked = []
    seen: set[str] = set()
    for item_id in ids:
        if item_id in seen or item_id not in index:
            continue
        seen.add(item_id)
        picked.append(index[item_id])
    return picked


def _read_items(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        logger.warning("Docs corpus file not found: %s", path)
        return []
    data = json.loads(path.read_text("utf-8"))
    if not isinstance(data, list) or not all(isinstance(i, dict) for i in data):
        raise ValueError(f"{path} must contain a JSON array of objects")
    return data


def _to_article(item: dict[str, Any]) -> DocArticle:
    return DocArticle(
        id=str(item["id"]),
        title=item["title"],
        content=item.get("content", ""),
        subject=item.get("subject", ""),
        summary=item.get("summary", ""),
        url=item.get("url", ""),
        api=item.get("api"),
    )


def _to_endpoint(item: dict[str, Any]) -> ApiEndpoint:
    return ApiEndpoint(
        id=str(item["id"]),
        api=item["api"],
        method=item.get("method", "GET").upper(),
        path=item["path"],
        summary=item.get("summary", ""),
        description=item.get("description", ""),
        url=item.get("url", ""),
        parameters=list(item.get("parameters", [])),
    )
