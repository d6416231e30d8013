"""Abstract docs repository interface (port) — read-only access to the corpus."""

from abc import ABC, abstractmethod

from docbot.domain.entities import ApiEndpoint, DocArticle


class DocsRepository(ABC):
    """Port for the documentation corpus — implemented in the infrastructure layer.

    Lookups are synchronous and never raise for missing data: unknown ids
    are skipped and empty filters return everything.
    """

    @abstractmethod
    def list_articles(self, subject: str | None = None) -> list[DocArticle]:
        """Return general articles, optionally filtered by subject."""
        ...

    @abstractmethod
    def get_articles(self, ids: list[str]) -> list[DocArticle]:
        """Return the general articles matching the given ids, in request order."""
        ...

    @abstractmethod
    def list_api_endpoints(self, api: str | None = None) -> list[ApiEndpoint]:
        """Return API endpoints, optionally restricted to one sub-product."""
        ...

    @abstractmethod
    def get_api_endpoints(self, ids: list[str]) -> list[ApiEndpoint]:
        """Return the endpoints matching the given ids, in request order."""
        ...

    @abstractmethod
    def list_api_articles(self, api: str | None = None) -> list[DocArticle]:
        """Return sub-product articles, optionally restricted to one sub-product."""
        ...

    @abstractmethod
    def get_api_articles(self, ids: list[str]) -> list[DocArticle]:
        """Return the sub-product articles matching the given ids, in request order."""
        ...
