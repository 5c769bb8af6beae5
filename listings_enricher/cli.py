"""CLI entrypoint for the Listings Enricher."""

import argparse
import sys
from pathlib import Path


def _emit(result, output):
    """Write JSON for a successful run and a summary to stderr."""
    from listings_enricher.export import to_json, write_json

    if output:
        path = write_json(result.listings, Path(output))
        print(f"✓ Wrote {len(result.listings)} listings to {path}", file=sys.stderr)
    else:
        print(to_json(result.listings))

    print(f"  Listings in: {result.listings_in}", file=sys.stderr)
    print(f"  Filtered out: {result.listings_filtered}", file=sys.stderr)
    print(f"  Duplicates collapsed: {result.listings_deduplicated}", file=sys.stderr)
    print(f"  With climate data: {result.climate_matched}", file=sys.stderr)


def _run(listings_text, climate_text, output):
    from listings_enricher.etl import EnrichmentPipeline

    result = EnrichmentPipeline().run(listings_text, climate_text)
    if not result.success:
        print(f"✗ Enrichment failed: {result.error_message}", file=sys.stderr)
        sys.exit(1)
    _emit(result, output)


def cmd_enrich(args):
    """Enrich a listings file with a climate file."""
    try:
        listings_text = Path(args.listings).read_text(encoding="utf-8-sig")
        climate_text = Path(args.climate).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        print(f"✗ Could not read input: {e}", file=sys.stderr)
        sys.exit(1)

    _run(listings_text, climate_text, args.output)


def cmd_demo(args):
    """Run the pipeline on the bundled demo data."""
    from listings_enricher.demo import DEMO_CLIMATE_CSV, demo_listings

    _run(demo_listings(args.with_malformed_row), DEMO_CLIMATE_CSV, args.output)


def cmd_serve(args):
    """Start the HTTP API."""
    import uvicorn

    from listings_enricher.config import settings

    uvicorn.run(
        "listings_enricher.api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


def build_parser():
    parser = argparse.ArgumentParser(description="Listings Enricher")
    sub = parser.add_subparsers(dest="command")

    # enrich
    p_enrich = sub.add_parser("enrich", help="Join listings with climate data")
    p_enrich.add_argument("--listings", required=True, help="Listings CSV/TSV file")
    p_enrich.add_argument("--climate", required=True, help="Climate CSV/TSV file")
    p_enrich.add_argument("--output", "-o", default=None, help="Write JSON here instead of stdout")
    p_enrich.set_defaults(func=cmd_enrich)

    # demo
    p_demo = sub.add_parser("demo", help="Run on the bundled demo data")
    p_demo.add_argument("--output", "-o", default=None)
    p_demo.add_argument(
        "--with-malformed-row",
        action="store_true",
        help="Append a row without an APN column to show the failure path",
    )
    p_demo.set_defaults(func=cmd_demo)

    # serve
    p_serve = sub.add_parser("serve", help="Start the HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    from listings_enricher.config import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging()
    args.func(args)


if __name__ == "__main__":
    main()
