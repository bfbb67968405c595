"""Command-line interface for the carrier finder."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .adapters.data import CSVCarrierRepository
from .config import AppConfig, get_config
from .diagnostics import match_to_dict, plan_to_dict, run_diagnostics
from .domain.errors import CarrierFinderError
from .domain.models import SearchResults
from .services import CarrierSearchService


def setup_logging(config: AppConfig, verbose: bool = False) -> None:
    """Configure logging from the observability settings."""
    level = logging.DEBUG if verbose else config.observability.level.upper()
    logging.basicConfig(
        level=level,
        format=config.observability.format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load_service(args: argparse.Namespace) -> CarrierSearchService:
    config = get_config()
    data_config = config.data
    if args.data_dir:
        data_config = data_config.model_copy(update={"data_dir": Path(args.data_dir)})
    return CarrierSearchService.from_repository(
        CSVCarrierRepository(data_config), config=config
    )


def results_to_dict(
    service: CarrierSearchService, results: SearchResults
) -> Dict[str, Any]:
    return {
        "from": results.from_city,
        "to": results.to_city,
        "unknown_cities": list(results.unknown_cities),
        "suggestions": list(results.suggestions),
        "exact": [match_to_dict(service, m) for m in results.exact],
        "geo": [match_to_dict(service, m) for m in results.geo],
        "composite": plan_to_dict(results.composite),
        "show_composite": results.show_composite,
        "composite_alternatives": [
            plan_to_dict(plan) for plan in results.composite_alternatives
        ],
    }


def cmd_search(args: argparse.Namespace) -> int:
    """Execute search command."""
    setup_logging(get_config(), args.verbose)

    try:
        service = _load_service(args)
        results = service.search(args.from_city, args.to_city)
    except CarrierFinderError as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Search failed")
        return 1

    print(json.dumps(results_to_dict(service, results), ensure_ascii=False, indent=2))
    if not results.is_valid:
        print(
            f"City not found: {', '.join(results.unknown_cities)}",
            file=sys.stderr,
        )
        return 1
    return 0


def cmd_diagnostics(args: argparse.Namespace) -> int:
    """Execute diagnostics command."""
    setup_logging(get_config(), args.verbose)

    try:
        service = _load_service(args)
        reports = run_diagnostics(
            service,
            max_pairs=args.max,
            name_filter=args.filter,
            from_city=args.from_city,
            to_city=args.to_city,
        )
    except CarrierFinderError as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Diagnostics failed")
        return 1

    output = Path(args.output)
    output.write_text(
        json.dumps(reports, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    print(f"Diagnostics written: {output} (pairs: {len(reports)})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carrier-finder",
        description="Find carriers for a city pair from trip-history data",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory with drivers.csv, cities.csv, line_paths.csv",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    search_parser = subparsers.add_parser("search", help="Search carriers for a pair")
    search_parser.add_argument("--from", dest="from_city", required=True)
    search_parser.add_argument("--to", dest="to_city", required=True)
    search_parser.set_defaults(func=cmd_search)

    diag_parser = subparsers.add_parser(
        "diagnostics", help="Diagnose coverage for all city pairs"
    )
    diag_parser.add_argument(
        "--max", type=int, default=None, help="Maximum number of pairs to process"
    )
    diag_parser.add_argument(
        "--filter", default=None, help="Only cities containing this substring"
    )
    diag_parser.add_argument("--from", dest="from_city", default=None)
    diag_parser.add_argument("--to", dest="to_city", default=None)
    diag_parser.add_argument(
        "--output",
        default="diagnostics-all-routes.json",
        help="Output file (default: diagnostics-all-routes.json)",
    )
    diag_parser.set_defaults(func=cmd_diagnostics)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
