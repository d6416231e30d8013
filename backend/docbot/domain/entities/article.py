"""Domain entities for the documentation corpus the chat functions look up."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class DocArticle:
    """A documentation article.

    Sub-product articles carry the ``api`` they belong to
    (e.g. "evm", "solana", "streams"); general articles leave it unset.
    """

    id: str
    title: str
    content: str
    subject: str = ""
    summary: str = ""
    url: str = ""
    api: str | None = None

    def to_summary(self) -> dict[str, Any]:
        """Listing view: everything except the article body."""
        summary: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "summary": self.summary,
            "url": self.url,
        }
        if self.api is not None:
            summary["api"] = self.api
        return summary

    def to_detail(self) -> dict[str, Any]:
        detail = self.to_summary()
        detail["content"] = self.content
        return detail


@dataclass
class ApiEndpoint:
    """A single endpoint of the documented data API."""

    id: str  # operation id, e.g. "getWalletNFTs"
    api: str
    method: str
    path: str
    summary: str = ""
    description: str = ""
    url: str = ""
    parameters: list[dict[str, Any]] = field(default_factory=list)

    def to_summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "api": self.api,
            "method": self.method,
            "path": self.path,
            "summary": self.summary,
        }

    def to_detail(self) -> dict[str, Any]:
        detail = self.to_summary()
        detail["description"] = self.description
        detail["url"] = self.url
        detail["parameters"] = list(self.parameters)
        return detail
