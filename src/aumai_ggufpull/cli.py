"""CLI entry point for aumai-ggufpull."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console

from .catalog import CatalogScraper
from .config import GGUFPullSettings, get_settings
from .core import BlobFetcher, ModelPuller, RegistryClient, make_http_client, output_filename
from .display import (
    build_models_table,
    more_models_hint,
    simple_usage,
    usage_examples,
)
from .errors import GGUFPullError, UsageError
from .logging_utils import configure_logging

logger = logging.getLogger(__name__)


def _print_error(console: Console, message: str) -> None:
    console.print(f"[ERROR] {message}", style="red", markup=False, highlight=False)


def _require_download_args(model_name: str | None, params: str | None) -> None:
    if not model_name or not params:
        raise UsageError("Model name and parameters are required.")


def _show_catalog(
    console: Console, settings: GGUFPullSettings, full_listing: bool
) -> None:
    with make_http_client(settings) as client:
        records = CatalogScraper(settings, client=client).list_models()

    console.print("\n=== Available models from Ollama ===", style="cyan", highlight=False)
    console.print()

    limit = settings.summary_limit
    if not full_listing and len(records) > limit:
        console.print(build_models_table(records[:limit], show_details=False))
        console.print(
            "\n" + more_models_hint(len(records) - limit), markup=False, highlight=False
        )
    else:
        console.print(build_models_table(records, show_details=full_listing))

    console.print()
    if full_listing:
        console.print(usage_examples(), markup=False, highlight=False)
    else:
        console.print(simple_usage(), markup=False, highlight=False)


def _download(
    console: Console, settings: GGUFPullSettings, model_name: str, tag: str
) -> None:
    filename = output_filename(model_name, tag)
    with make_http_client(settings) as client:
        puller = ModelPuller(
            RegistryClient(settings, client=client),
            BlobFetcher(client, chunk_size=settings.chunk_size, console=console),
            output_dir=settings.output_dir,
        )
        console.print(
            f"[INFO] Downloading {filename}...", style="cyan", markup=False, highlight=False
        )
        result = puller.pull(model_name, tag)

    logger.info("downloaded %s (%d bytes, %s)", result.path, result.bytes_written, result.digest)
    console.print(
        f"[SUCCESS] Download completed: {filename}",
        style="green",
        markup=False,
        highlight=False,
    )


@click.command(context_settings={"help_option_names": ["-h", "-help", "--help"]})
@click.option("-model", "--model", "model_name", help="The name of the model to download (e.g., phi3).")
@click.option("-params", "--params", "params", help="The model parameters to use (e.g., 3.8b).")
@click.option("-list", "--list", "list_models", is_flag=True, help="List available models.")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to save the model file in.  [default: current directory]",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Per-request timeout in seconds.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.version_option()
def main(
    model_name: str | None,
    params: str | None,
    list_models: bool,
    output_dir: str | None,
    timeout: float | None,
    verbose: bool,
) -> None:
    """AumAI GGUFPull: browse the Ollama catalog and download GGUF weights.

    Run without arguments to see the most popular models.
    """
    settings = get_settings(output_dir=output_dir, timeout=timeout)
    configure_logging(logging.DEBUG if verbose else settings.log_level)

    console = Console(highlight=False)
    err_console = Console(stderr=True, highlight=False)

    try:
        # An empty -model or -params still counts as a download request.
        if list_models or (model_name is None and params is None):
            _show_catalog(console, settings, full_listing=list_models)
            return

        try:
            _require_download_args(model_name, params)
        except UsageError:
            console.print(usage_examples(), markup=False)
            raise

        _download(console, settings, model_name, params)
    except GGUFPullError as exc:
        _print_error(err_console, str(exc))
        if isinstance(exc, UsageError):
            err_console.print("\nRun without arguments to see available models.", style="cyan")
        sys.exit(1)


if __name__ == "__main__":
    main()
