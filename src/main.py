# src/main.py — v3
"""CLI entry point — download and stats commands.

Usage:
    figmadump download [-t TEAM] [-p PROJECT] [-f FILE] [-o OUTPUT] [options]
    figmadump stats [-o OUTPUT] [--format json|csv]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from figmadump.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_FATAL

    from figmadump.config.settings import ConfigurationError

    try:
        settings = _load_settings(args)
    except (ConfigurationError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    from figmadump.logging.logger import configure_logging

    configure_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_FATAL


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="figmadump",
        description=f"figmadump v{__version__} — Figma team/project/file downloader",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- download ---
    p_download = subparsers.add_parser(
        "download", help="Download projects, files and documents",
    )
    p_download.add_argument("-t", "--team", default="", help="Figma team id")
    p_download.add_argument(
        "-p", "--project", default="",
        help="Figma project id (skips the team's project listing)",
    )
    p_download.add_argument(
        "-f", "--file", default="",
        help="Figma file key (downloads this document only)",
    )
    _add_output_options(p_download)
    p_download.add_argument(
        "--concurrency", type=int, default=None,
        help="Max simultaneous API calls (default: FIGMADUMP_FETCH_CONCURRENCY or 1)",
    )
    p_download.add_argument(
        "--timeout", type=float, default=None,
        help="Per-call timeout in seconds (default: none)",
    )
    p_download.add_argument(
        "--cache-policy", choices=["all", "per_scope"], default=None,
        help="Refetch the whole stage on any miss (all) or only missing keys (per_scope)",
    )
    p_download.set_defaults(func=_cmd_download)

    # --- stats ---
    p_stats = subparsers.add_parser(
        "stats", help="Count cached scope keys in an output directory",
    )
    _add_output_options(p_stats)
    p_stats.set_defaults(func=_cmd_stats)

    return parser


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output directory (default: FIGMADUMP_OUTPUT_DIR or ./out)",
    )
    parser.add_argument(
        "--format", choices=["json", "csv"], default=None,
        help="Cache file format (default: FIGMADUMP_OUTPUT_FORMAT or csv)",
    )


def _load_settings(args: argparse.Namespace):
    """Build Settings with CLI flags taking precedence over the environment."""
    from figmadump.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.output is not None:
        overrides["output_dir"] = args.output
    if args.format is not None:
        overrides["output_format"] = args.format
    if getattr(args, "concurrency", None) is not None:
        overrides["fetch_concurrency"] = args.concurrency
    if getattr(args, "timeout", None) is not None:
        overrides["fetch_timeout_seconds"] = args.timeout
    if getattr(args, "cache_policy", None) is not None:
        overrides["cache_policy"] = args.cache_policy
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return load_settings(**overrides)


async def _cmd_download(args: argparse.Namespace, settings) -> int:
    """Execute a download run."""
    from figmadump.api.facade import download
    from figmadump.core.models import Arguments

    arguments = Arguments(
        team=args.team,
        project=args.project,
        file=args.file,
        output=settings.output_dir,
        format=settings.output_format,
    )

    result = await download(arguments, settings=settings)
    _print_result_summary(result)
    if result.failures:
        return EXIT_PARTIAL
    return EXIT_OK


async def _cmd_stats(args: argparse.Namespace, settings) -> int:
    """Display cached scope key counts for an output directory."""
    from figmadump.cache.cache_factory import create_cache_store

    output_dir: Path = settings.output_dir
    if not output_dir.is_dir():
        logger.error("Not a directory: %s", output_dir)
        return EXIT_FATAL

    store = create_cache_store(output_dir, settings.output_format)
    keys = await store.list_scopes()
    counts = {"projects": 0, "files": 0, "document": 0}
    for key in keys:
        counts[key.entity] = counts.get(key.entity, 0) + 1

    print(f"\nCache statistics for {output_dir} ({settings.output_format}):")
    print(f"  Teams (project lists):   {counts['projects']}")
    print(f"  Projects (file lists):   {counts['files']}")
    print(f"  Documents:               {counts['document']}")
    return EXIT_OK


def _print_result_summary(result: object) -> None:
    """Print a human-readable summary of a RunResult."""
    print("\nDownload complete:")
    print(f"  Run ID:         {result.run_id}")
    print(f"  Projects:       {len(result.projects)}")
    print(f"  Files:          {len(result.all_files)}")
    print(f"  Documents:      {len(result.documents)}")
    print(f"  Network calls:  {result.network_calls}")
    print(f"  Duration:       {result.duration_ms / 1000:.1f}s")
    if result.failures:
        print(f"  Failed:         {len(result.failures)}")
        for file_key, detail in sorted(result.failures.items()):
            print(f"    - {file_key}: {detail}")


if __name__ == "__main__":
    sys.exit(main())
