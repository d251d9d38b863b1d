"""Command-line entry point for the anime title mapper."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, List, Optional

from animap.catalog import CatalogError, build_catalog_client
from animap.config.exceptions import ConfigurationError
from animap.config.loader import load_config
from animap.config.models import AppConfig
from animap.logging import get_logger
from animap.logging.config import configure_logging
from animap.matching.engine import ConfidenceCalculator, MatchSelector
from animap.normalization import TitleNormalizer, base_title_from_torrent, extract_season
from animap.pipeline import SearchStrategyPipeline, TitleMapper

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_CATALOG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="animap",
        description="Map scene-style anime release titles to AniList catalog entries",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    map_parser = subparsers.add_parser("map", help="Map a release title to a catalog entry")
    map_parser.add_argument("title", help="Raw release title")
    map_parser.add_argument(
        "--anilist-id",
        type=int,
        default=None,
        help="Skip matching and look up this AniList ID directly",
    )

    search_parser = subparsers.add_parser("search", help="Search the catalog by free text")
    search_parser.add_argument("query", help="Search text")

    lookup_parser = subparsers.add_parser("lookup", help="Fetch a catalog entry by AniList ID")
    lookup_parser.add_argument("anilist_id", type=int, help="AniList media ID")

    normalize_parser = subparsers.add_parser(
        "normalize", help="Show how a release title is normalized (no network access)"
    )
    normalize_parser.add_argument("title", help="Raw release title")

    return parser


def build_mapper(app_config: AppConfig, catalog=None) -> TitleMapper:
    """
    Wire a TitleMapper from configuration.

    Args:
        app_config: Validated application configuration
        catalog: Optional catalog client (defaults to the configured AniList client)

    Returns:
        TitleMapper sharing one TitleNormalizer across its collaborators
    """
    normalizer = TitleNormalizer()
    return TitleMapper(
        catalog=catalog if catalog is not None else build_catalog_client(app_config),
        normalizer=normalizer,
        pipeline=SearchStrategyPipeline(normalizer=normalizer),
        selector=MatchSelector(normalizer=normalizer, config=app_config.matching),
        confidence_calculator=ConfidenceCalculator(normalizer=normalizer),
    )


def _emit(payload: Any) -> None:
    """Write a JSON document to stdout."""
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def run_command(args: argparse.Namespace, app_config: AppConfig) -> int:
    """
    Execute the selected subcommand.

    Returns:
        Exit code

    Raises:
        CatalogError: If a catalog call fails
    """
    if args.command == "normalize":
        normalizer = TitleNormalizer()
        _emit(
            {
                "raw_title": args.title,
                "normalized_title": normalizer.normalize(args.title),
                "season": extract_season(args.title),
                "base_title": base_title_from_torrent(args.title),
            }
        )
        return EXIT_OK

    if args.command == "map":
        mapper = build_mapper(app_config)
        result = mapper.map(args.title, explicit_id=args.anilist_id)
        _emit(result.to_dict())
        return EXIT_OK

    client = build_catalog_client(app_config)

    if args.command == "search":
        entries = client.search(args.query)
        _emit([entry.model_dump(mode="json") for entry in entries])
        return EXIT_OK

    if args.command == "lookup":
        entry = client.get_by_id(args.anilist_id)
        _emit(entry.model_dump(mode="json") if entry else None)
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the animap CLI.

    Log level priority: --log-level, then ANIMAP_LOG_LEVEL, then the config file.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 on success, 1 on configuration errors, 2 on catalog errors
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config = load_config(args.config)

        configure_logging(
            level=args.log_level or app_config.logging.level,
            format_type=app_config.logging.format,
            environment=app_config.logging.environment,
        )

        logger.debug(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "config_path": str(args.config) if args.config else None,
                "command": args.command,
                "api_url": app_config.catalog.api_url,
                "cache_enabled": app_config.cache.enabled,
            },
        )

        exit_code = run_command(args, app_config)

        logger.debug(
            "Command finished",
            extra={
                "event": "cli.command.completed",
                "command": args.command,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            "Configuration error",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_CONFIG_ERROR
    except CatalogError as e:
        print(f"Catalog Error: {e}", file=sys.stderr)
        logger.error(
            f"Catalog request failed: {e}",
            extra={
                "event": "cli.command.failed",
                "command": args.command,
                "error_type": type(e).__name__,
            },
        )
        return EXIT_CATALOG_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
