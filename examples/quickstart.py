"""
aumai-ggufpull quickstart: digest selection, catalog parsing, and a live lookup.

Run directly:

    python examples/quickstart.py           # offline demos only
    python examples/quickstart.py --live    # also query ollama.com / the registry

Nothing is downloaded; the live demo only reads the catalog and one manifest.
"""

from __future__ import annotations

import sys


# ---------------------------------------------------------------------------
# Demo 1: Pick the weights blob out of a manifest
# ---------------------------------------------------------------------------

def demo_find_digest() -> None:
    """Decode a registry manifest and select the model layer."""
    print("\n=== Demo 1: Find the model digest in a manifest ===")

    from aumai_ggufpull.core import find_model_digest, output_filename
    from aumai_ggufpull.models import Manifest

    manifest = Manifest.model_validate_json(
        """
        {
          "schemaVersion": 2,
          "layers": [
            {"mediaType": "application/vnd.ollama.image.model", "digest": "sha256:8934d96d"},
            {"mediaType": "application/vnd.ollama.image.template", "digest": "sha256:8c17c2eb"},
            {"mediaType": "application/vnd.ollama.image.license", "digest": "sha256:7c23fb36"}
          ]
        }
        """
    )
    for layer in manifest.layers:
        print(f"  {layer.media_type:<45} {layer.digest}")

    print(f"\n  Model digest : {find_model_digest(manifest)}")
    print(f"  Saved as     : {output_filename('llama2', '7b')}")


# ---------------------------------------------------------------------------
# Demo 2: Parse catalog markup
# ---------------------------------------------------------------------------

def demo_parse_catalog() -> None:
    """Run the catalog extractor over a snippet shaped like the search page."""
    print("\n=== Demo 2: Parse catalog markup ===")

    from rich.console import Console

    from aumai_ggufpull.catalog import OllamaSearchExtractor
    from aumai_ggufpull.display import build_models_table

    markup = """
    <ul>
      <li x-test-model>
        <span x-test-search-response-title>llama3.2</span>
        <p class="max-w-lg break-words text-neutral-800">Meta's Llama 3.2 goes small.</p>
        <span x-test-capability>tools</span>
        <span x-test-size>1b</span><span x-test-size>3b</span>
        <span x-test-pull-count>12.5M</span> <span x-test-tag-count>63</span>
        <span x-test-updated>3 months ago</span>
      </li>
      <li x-test-model>
        <span x-test-search-response-title>nomic-embed-text</span>
        <span x-test-capability>embedding</span>
        <span x-test-pull-count>30.1M</span>
        <span x-test-updated>1 year ago</span>
      </li>
    </ul>
    """
    records = OllamaSearchExtractor().extract(markup)
    Console().print(build_models_table(records, show_details=True))


# ---------------------------------------------------------------------------
# Demo 3: Live lookup (network)
# ---------------------------------------------------------------------------

def demo_live_lookup() -> None:
    """List the five most popular models and resolve the first one's manifest."""
    print("\n=== Demo 3: Live catalog and manifest lookup ===")

    from aumai_ggufpull.catalog import CatalogScraper
    from aumai_ggufpull.config import get_settings
    from aumai_ggufpull.core import RegistryClient, find_model_digest
    from aumai_ggufpull.errors import GGUFPullError

    settings = get_settings(timeout=15.0)
    try:
        with CatalogScraper(settings) as scraper:
            records = scraper.list_models()[:5]
        for record in records:
            print(f"  {record.name:<20} {', '.join(record.size_variants)}")

        if records:
            name = records[0].name
            with RegistryClient(settings) as registry:
                digest = find_model_digest(registry.resolve(name, "latest"))
            print(f"\n  {name}:latest -> {digest}")
    except GGUFPullError as exc:
        print(f"  Lookup failed: {exc}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    print("aumai-ggufpull quickstart demo")
    print("=" * 40)

    demo_find_digest()
    demo_parse_catalog()
    if "--live" in sys.argv[1:]:
        demo_live_lookup()

    print("\n" + "=" * 40)
    print("All demos completed.")


if __name__ == "__main__":
    main()
