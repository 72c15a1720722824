"""Model catalog scraping for aumai-ggufpull."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Protocol

import httpx
from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from .config import GGUFPullSettings
from .core import make_http_client, status_text
from .errors import MalformedResponseError, RegistryError, TransportError
from .models import ModelRecord

__all__ = [
    "CatalogExtractor",
    "CatalogScraper",
    "OllamaSearchExtractor",
]

logger = logging.getLogger(__name__)


class CatalogExtractor(Protocol):
    """Turns a catalog page into model records."""

    def extract(self, markup: str) -> list[ModelRecord]:
        ...


class OllamaSearchExtractor:
    """
    Extracts records from the ollama.com search page.

    The page marks its elements with ``x-test-*`` attributes; those are
    the selectors used here. When the site changes its markup the affected
    fields come back empty instead of raising.
    """

    item_selector = "li[x-test-model]"
    title_selector = "span[x-test-search-response-title]"
    description_selector = "p.max-w-lg.break-words.text-neutral-800"
    size_selector = "span[x-test-size]"
    capability_selector = "span[x-test-capability]"
    pull_count_selector = "span[x-test-pull-count]"
    tag_count_selector = "span[x-test-tag-count]"
    updated_selector = "span[x-test-updated]"

    def __init__(self, parser: str = "html.parser") -> None:
        self.parser = parser

    def extract(self, markup: str) -> list[ModelRecord]:
        try:
            soup = BeautifulSoup(markup, self.parser)
        except ParserRejectedMarkup as exc:
            raise MalformedResponseError(f"cannot parse model list: {exc}") from exc

        records: list[ModelRecord] = []
        for item in soup.select(self.item_selector):
            name = _joined_text(item, self.title_selector)
            if not name:
                continue
            records.append(
                ModelRecord(
                    name=name,
                    description=_joined_text(item, self.description_selector),
                    size_variants=_text_list(item, self.size_selector),
                    capability_tags=_text_list(item, self.capability_selector),
                    pull_count=_joined_text(item, self.pull_count_selector),
                    tag_count=_joined_text(item, self.tag_count_selector),
                    updated_at=_joined_text(item, self.updated_selector),
                )
            )
        return records


def _joined_text(item: Tag, selector: str) -> str:
    return "".join(el.get_text() for el in item.select(selector)).strip()


def _text_list(item: Tag, selector: str) -> list[str]:
    values = (el.get_text().strip() for el in item.select(selector))
    return [value for value in values if value]


class CatalogScraper(AbstractContextManager["CatalogScraper"]):
    """Fetches the catalog page and hands it to a :class:`CatalogExtractor`."""

    def __init__(
        self,
        settings: GGUFPullSettings | None = None,
        client: httpx.Client | None = None,
        extractor: CatalogExtractor | None = None,
    ) -> None:
        self.settings = settings or GGUFPullSettings()
        self.extractor = extractor or OllamaSearchExtractor()
        self._owns_client = client is None
        self._client = client or make_http_client(self.settings)

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def list_models(self) -> list[ModelRecord]:
        """Return the catalog entries in page order."""
        url = self.settings.catalog_url
        logger.debug("GET %s", url)
        try:
            response = self._client.get(
                url, headers={"User-Agent": self.settings.user_agent}
            )
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise TransportError(f"failed to fetch model list: {exc}") from exc

        if not response.is_success:
            raise RegistryError(
                f"failed to fetch model list: {status_text(response)}",
                status_code=response.status_code,
            )

        records = self.extractor.extract(response.text)
        logger.debug("catalog returned %d models", len(records))
        return records
