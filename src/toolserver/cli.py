#!/usr/bin/env python3
"""CLI interface for the component catalog tools."""

import argparse
import sys
from pathlib import Path

from common.env import Settings
from common.logger import get_logger, setup_logging

from .operations import CatalogOperations, OperationResult
from .registry import build_registry
from .server import StdioServer

logger = get_logger(__name__)


def _print_result(result: OperationResult) -> int:
    print(result.text)
    return 0 if result.ok else 1


def cmd_serve(args, operations: CatalogOperations) -> int:
    """Run the stdio tool server until stdin closes."""
    server = StdioServer(build_registry(operations))
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


def cmd_list(args, operations: CatalogOperations) -> int:
    """Print the catalog index."""
    return _print_result(operations.list_components())


def cmd_get(args, operations: CatalogOperations) -> int:
    """Print the full spec of one component."""
    return _print_result(operations.get_component(args.name))


def cmd_search(args, operations: CatalogOperations) -> int:
    """Print index entries matching a query."""
    return _print_result(operations.search_components(args.query))


def cmd_check_updates(args, operations: CatalogOperations) -> int:
    """Print the upstream change report."""
    return _print_result(operations.check_updates())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-tools",
        description="Query the component catalog and check for upstream changes",
    )
    parser.add_argument("--base-url", default=None, help="Catalog base URL (env: CATALOG_BASE_URL)")
    parser.add_argument(
        "--repo-root",
        type=Path,
        default=None,
        help="Local git checkout for update checks (env: CATALOG_REPO_ROOT)",
    )
    parser.add_argument("--remote", default=None, help="Remote name (env: CATALOG_REMOTE)")
    parser.add_argument("--branch", default=None, help="Tracked branch (env: CATALOG_BRANCH)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (env: LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the stdio tool server")
    serve_parser.set_defaults(func=cmd_serve)

    list_parser = subparsers.add_parser("list", help="List all components")
    list_parser.set_defaults(func=cmd_list)

    get_parser = subparsers.add_parser("get", help="Show one component spec")
    get_parser.add_argument("name", help="Component name (e.g., ChipsView)")
    get_parser.set_defaults(func=cmd_get)

    search_parser = subparsers.add_parser("search", help="Search components by name or description")
    search_parser.add_argument("query", help="Search query")
    search_parser.set_defaults(func=cmd_search)

    updates_parser = subparsers.add_parser(
        "check-updates", help="Report upstream changes to the component library"
    )
    updates_parser.set_defaults(func=cmd_check_updates)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    settings = Settings.from_env(
        base_url=args.base_url,
        repo_root=args.repo_root,
        remote=args.remote,
        branch=args.branch,
        log_level=args.log_level,
    )
    setup_logging(level=settings.log_level)

    operations = CatalogOperations.from_settings(settings)
    try:
        return args.func(args, operations)
    finally:
        operations.close()


if __name__ == "__main__":
    sys.exit(main())
