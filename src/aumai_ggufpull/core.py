"""Core logic for aumai-ggufpull: manifest resolution and blob download."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager, nullcontext
from pathlib import Path

import httpx
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress

from .config import GGUFPullSettings
from .display import make_download_progress
from .errors import (
    DigestNotFoundError,
    FilesystemError,
    MalformedResponseError,
    RegistryError,
    TransportError,
)
from .models import Manifest, PullResult

__all__ = [
    "MODEL_MEDIA_TYPE",
    "BlobFetcher",
    "ModelPuller",
    "RegistryClient",
    "find_model_digest",
    "make_http_client",
    "output_filename",
    "status_text",
]

logger = logging.getLogger(__name__)

MODEL_MEDIA_TYPE = "application/vnd.ollama.image.model"

_MANIFEST_PATH = "/v2/library/{model}/manifests/{tag}"
_BLOB_PATH = "/v2/library/{model}/blobs/{digest}"


def make_http_client(settings: GGUFPullSettings) -> httpx.Client:
    """Return an ``httpx.Client`` configured from *settings*."""
    return httpx.Client(
        timeout=httpx.Timeout(settings.timeout),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


def status_text(response: httpx.Response) -> str:
    """Return ``"<code> <reason>"`` for *response*, e.g. ``"404 Not Found"``."""
    reason = response.reason_phrase
    return f"{response.status_code} {reason}" if reason else str(response.status_code)


def _raise_for_status(response: httpx.Response, what: str) -> None:
    if not response.is_success:
        raise RegistryError(
            f"failed to {what}: {status_text(response)}",
            status_code=response.status_code,
        )


def find_model_digest(manifest: Manifest) -> str:
    """
    Return the digest of the first layer carrying the model media type.

    Layers are scanned in manifest order. Raises ``DigestNotFoundError``
    when no layer matches or the matching layer has an empty digest.
    """
    for layer in manifest.layers:
        if layer.media_type == MODEL_MEDIA_TYPE:
            if layer.digest:
                return layer.digest
            break
    raise DigestNotFoundError("model digest not found in manifest")


def output_filename(model_name: str, tag: str) -> str:
    """Local file name for a downloaded model, e.g. ``llama2:7b.gguf``."""
    return f"{model_name}:{tag}.gguf"


class RegistryClient(AbstractContextManager["RegistryClient"]):
    """Synchronous client for the registry manifest endpoint."""

    def __init__(
        self,
        settings: GGUFPullSettings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or GGUFPullSettings()
        self.base_url = self.settings.registry_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or make_http_client(self.settings)

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def manifest_url(self, model_name: str, tag: str) -> str:
        return self.base_url + _MANIFEST_PATH.format(model=model_name, tag=tag)

    def blob_url(self, model_name: str, digest: str) -> str:
        return self.base_url + _BLOB_PATH.format(model=model_name, digest=digest)

    def resolve(self, model_name: str, tag: str) -> Manifest:
        """Fetch and decode the manifest for *model_name*:*tag*."""
        url = self.manifest_url(model_name, tag)
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise TransportError(f"failed to fetch manifest: {exc}") from exc

        _raise_for_status(response, "fetch manifest")

        try:
            manifest = Manifest.model_validate_json(response.content)
        except ValidationError as exc:
            raise MalformedResponseError("invalid JSON response") from exc

        logger.debug("manifest for %s:%s has %d layers", model_name, tag, len(manifest.layers))
        return manifest


class BlobFetcher:
    """
    Streams a blob to a local file while advancing a progress bar.

    The response status is checked before the destination is opened, so a
    failed request never creates a file. A stream that breaks part way
    leaves the partial file where it is.
    """

    def __init__(
        self,
        client: httpx.Client,
        *,
        chunk_size: int = 64 * 1024,
        console: Console | None = None,
    ) -> None:
        self._client = client
        self.chunk_size = chunk_size
        self.console = console

    def fetch(
        self,
        url: str,
        destination: str | Path,
        *,
        progress: Progress | None = None,
    ) -> int:
        """Download *url* to *destination* and return the number of bytes written."""
        destination = Path(destination)
        logger.debug("GET %s -> %s", url, destination)

        # A caller-supplied progress is started and stopped by the caller.
        if progress is None:
            progress = make_download_progress(self.console)
            live: AbstractContextManager[object] = progress
        else:
            live = nullcontext()

        written = 0
        try:
            with self._client.stream("GET", url) as response:
                _raise_for_status(response, "download file")
                total = _content_length(response)

                # Covers open, every write and the flush on close.
                try:
                    with destination.open("wb") as fh, live:
                        task = progress.add_task("Downloading", total=total)
                        for chunk in response.iter_bytes(self.chunk_size):
                            fh.write(chunk)
                            written += len(chunk)
                            progress.update(task, completed=written)
                        if total is None:
                            progress.update(task, total=written, completed=written)
                except OSError as exc:
                    raise FilesystemError(f"cannot write {destination}: {exc}") from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise TransportError(f"failed to download file: {exc}") from exc

        logger.debug("wrote %d bytes to %s", written, destination)
        return written


def _content_length(response: httpx.Response) -> int | None:
    value = response.headers.get("Content-Length")
    if value is None:
        return None
    try:
        length = int(value)
    except ValueError:
        return None
    return length if length >= 0 else None


class ModelPuller:
    """Resolves a model tag to its weights blob and downloads it."""

    def __init__(
        self,
        registry: RegistryClient,
        fetcher: BlobFetcher,
        output_dir: str | Path = ".",
    ) -> None:
        self.registry = registry
        self.fetcher = fetcher
        self.output_dir = Path(output_dir)

    def pull(
        self,
        model_name: str,
        tag: str,
        *,
        progress: Progress | None = None,
    ) -> PullResult:
        manifest = self.registry.resolve(model_name, tag)
        digest = find_model_digest(manifest)
        logger.debug("resolved %s:%s to %s", model_name, tag, digest)

        path = self.output_dir / output_filename(model_name, tag)
        written = self.fetcher.fetch(
            self.registry.blob_url(model_name, digest), path, progress=progress
        )
        return PullResult(
            model_name=model_name,
            tag=tag,
            digest=digest,
            path=path,
            bytes_written=written,
        )
