"""Shared test fixtures for aumai-ggufpull."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from aumai_ggufpull.config import GGUFPullSettings
from aumai_ggufpull.core import MODEL_MEDIA_TYPE

REGISTRY_URL = "https://registry.test"
CATALOG_URL = "https://catalog.test/search?o=popular&c=all&q="


def layer(digest: str, media_type: str = MODEL_MEDIA_TYPE) -> dict[str, str]:
    return {"mediaType": media_type, "digest": digest}


def catalog_item(
    name: str,
    *,
    description: str = "",
    sizes: tuple[str, ...] = (),
    capabilities: tuple[str, ...] = (),
    pulls: str = "",
    tags: str = "",
    updated: str = "",
) -> str:
    """Markup for one ``li`` entry shaped like the ollama.com search page."""
    size_spans = "".join(f"<span x-test-size>{s}</span>" for s in sizes)
    cap_spans = "".join(f"<span x-test-capability>{c}</span>" for c in capabilities)
    return f"""
    <li x-test-model>
      <a href="/library/{name}">
        <h2><span x-test-search-response-title>  {name}  </span></h2>
        <p class="max-w-lg break-words text-neutral-800 text-md">{description}</p>
        <div>{cap_spans}{size_spans}</div>
        <p>
          <span x-test-pull-count>{pulls}</span> Pulls
          <span x-test-tag-count>{tags}</span> Tags
          Updated <span x-test-updated>{updated}</span>
        </p>
      </a>
    </li>
    """


def catalog_page(*items: str) -> str:
    return f"<html><body><ul role='list'>{''.join(items)}</ul></body></html>"


# ---------------------------------------------------------------------------
# Fake registry + catalog host
# ---------------------------------------------------------------------------


class FakeRegistry:
    """
    ``httpx.MockTransport`` handler standing in for the registry and catalog.

    Routes on the URL path only, so it answers for any host:
    ``/v2/library/<model>/manifests/<tag>``, ``/v2/library/<model>/blobs/<digest>``
    and ``/search``. Unknown paths get a 404.
    """

    def __init__(self) -> None:
        self.manifests: dict[tuple[str, str], Any] = {}
        self.blobs: dict[str, Any] = {}
        self.catalog: Any = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")

        if parts == ["search"]:
            return self._respond(self.catalog, html=True)

        if len(parts) == 5 and parts[:2] == ["v2", "library"]:
            model, kind, ref = parts[2], parts[3], parts[4]
            if kind == "manifests":
                return self._respond(self.manifests.get((model, ref)))
            if kind == "blobs":
                return self._respond(self.blobs.get(ref))

        return httpx.Response(404)

    @staticmethod
    def _respond(value: Any, html: bool = False) -> httpx.Response:
        if value is None:
            return httpx.Response(404)
        if isinstance(value, httpx.Response):
            return value
        if isinstance(value, dict):
            return httpx.Response(200, json=value)
        if isinstance(value, str):
            headers = {"Content-Type": "text/html; charset=utf-8"} if html else {}
            return httpx.Response(200, text=value, headers=headers)
        return httpx.Response(200, content=value)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture()
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture()
def http_client(fake_registry: FakeRegistry):
    client = fake_registry.client()
    yield client
    client.close()


@pytest.fixture()
def settings(tmp_path) -> GGUFPullSettings:
    return GGUFPullSettings(
        registry_url=REGISTRY_URL,
        catalog_url=CATALOG_URL,
        timeout=5.0,
        chunk_size=4,
        output_dir=str(tmp_path),
    )
