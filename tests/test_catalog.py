"""Tests for aumai_ggufpull.catalog."""

from __future__ import annotations

import httpx
import pytest

from aumai_ggufpull.catalog import CatalogScraper, OllamaSearchExtractor
from aumai_ggufpull.config import GGUFPullSettings
from aumai_ggufpull.errors import RegistryError, TransportError
from aumai_ggufpull.models import ModelRecord
from conftest import FakeRegistry, catalog_item, catalog_page


class TestOllamaSearchExtractor:
    def test_extracts_all_fields(self) -> None:
        markup = catalog_page(
            catalog_item(
                "llama3.2",
                description="  Meta's Llama 3.2 goes small.  ",
                sizes=("1b", "3b"),
                capabilities=("tools",),
                pulls="12.5M",
                tags="63",
                updated="3 months ago",
            )
        )
        records = OllamaSearchExtractor().extract(markup)
        assert records == [
            ModelRecord(
                name="llama3.2",
                description="Meta's Llama 3.2 goes small.",
                size_variants=["1b", "3b"],
                capability_tags=["tools"],
                pull_count="12.5M",
                tag_count="63",
                updated_at="3 months ago",
            )
        ]

    def test_keeps_document_order(self) -> None:
        markup = catalog_page(
            catalog_item("deepseek-r1", sizes=("1.5b", "7b", "671b")),
            catalog_item("gemma3"),
            catalog_item("qwen3", sizes=("0.6b",)),
        )
        records = OllamaSearchExtractor().extract(markup)
        assert [r.name for r in records] == ["deepseek-r1", "gemma3", "qwen3"]
        assert records[0].size_variants == ["1.5b", "7b", "671b"]

    def test_skips_empty_list_entries(self) -> None:
        markup = catalog_page(
            catalog_item("phi3", sizes=("3.8b", "  ", "14b"), capabilities=("", "vision"))
        )
        record = OllamaSearchExtractor().extract(markup)[0]
        assert record.size_variants == ["3.8b", "14b"]
        assert record.capability_tags == ["vision"]

    def test_drops_items_without_name(self) -> None:
        markup = catalog_page(catalog_item("   "), catalog_item("mistral"))
        records = OllamaSearchExtractor().extract(markup)
        assert [r.name for r in records] == ["mistral"]

    def test_markup_drift_degrades_to_empty_fields(self) -> None:
        markup = catalog_page(
            "<li x-test-model><span x-test-search-response-title>tinyllama</span></li>"
        )
        record = OllamaSearchExtractor().extract(markup)[0]
        assert record.name == "tinyllama"
        assert record.description == ""
        assert record.size_variants == []
        assert record.pull_count == ""

    def test_non_catalog_document_yields_nothing(self) -> None:
        assert OllamaSearchExtractor().extract("just some text") == []
        assert OllamaSearchExtractor().extract("") == []


class _StaticExtractor:
    def __init__(self) -> None:
        self.seen: list[str] = []

    def extract(self, markup: str) -> list[ModelRecord]:
        self.seen.append(markup)
        return [ModelRecord(name="custom")]


class TestCatalogScraper:
    def test_list_models_fetches_catalog_url(
        self,
        fake_registry: FakeRegistry,
        http_client: httpx.Client,
        settings: GGUFPullSettings,
    ) -> None:
        fake_registry.catalog = catalog_page(catalog_item("llama3"), catalog_item("phi"))
        records = CatalogScraper(settings, client=http_client).list_models()

        assert [r.name for r in records] == ["llama3", "phi"]
        request = fake_registry.requests[0]
        assert str(request.url) == settings.catalog_url
        assert request.headers["User-Agent"] == settings.user_agent

    def test_custom_extractor_receives_body(
        self,
        fake_registry: FakeRegistry,
        http_client: httpx.Client,
        settings: GGUFPullSettings,
    ) -> None:
        fake_registry.catalog = "<html>page</html>"
        extractor = _StaticExtractor()
        records = CatalogScraper(settings, client=http_client, extractor=extractor).list_models()
        assert records == [ModelRecord(name="custom")]
        assert extractor.seen == ["<html>page</html>"]

    def test_error_status_raises_registry_error(
        self,
        fake_registry: FakeRegistry,
        http_client: httpx.Client,
        settings: GGUFPullSettings,
    ) -> None:
        fake_registry.catalog = httpx.Response(503)
        with pytest.raises(RegistryError, match="failed to fetch model list: 503"):
            CatalogScraper(settings, client=http_client).list_models()

    def test_network_failure_raises_transport_error(self, settings: GGUFPullSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed")

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(TransportError, match="name resolution failed"):
                CatalogScraper(settings, client=client).list_models()

    def test_redirect_loop_raises_transport_error(self, settings: GGUFPullSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        transport = httpx.MockTransport(handler)
        with httpx.Client(transport=transport, follow_redirects=True) as client:
            with pytest.raises(TransportError, match="failed to fetch model list"):
                CatalogScraper(settings, client=client).list_models()
