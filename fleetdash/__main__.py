"""
fleetdash - Entry Point

Run with: python -m fleetdash
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

import httpx

from fleetdash.config import DashboardConfig, get_config, load_config
from fleetdash.core.resources import RESOURCE_KINDS
from fleetdash.dashboard import Dashboard
from fleetdash.web.server import DevBackend, MetadataRepository


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _key_value(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="fleetdash",
        description="fleetdash - administer player and server metadata",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file (default: $FLEETDASH_CONFIG or bundled defaults)",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Backend base URL (overrides the config file)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List players or servers")
    list_cmd.add_argument("kind", choices=sorted(RESOURCE_KINDS))

    edit_cmd = commands.add_parser("edit", help="Edit labels/annotations of one resource")
    edit_cmd.add_argument("kind", choices=sorted(RESOURCE_KINDS))
    edit_cmd.add_argument("identity", help="Player uuid or server name")
    edit_cmd.add_argument(
        "--label",
        dest="labels",
        action="append",
        type=_key_value,
        default=[],
        metavar="KEY=VALUE",
        help="Set a label (empty value deletes it); repeatable",
    )
    edit_cmd.add_argument(
        "--annotation",
        dest="annotations",
        action="append",
        type=_key_value,
        default=[],
        metavar="KEY=VALUE",
        help="Set an annotation (empty value deletes it); repeatable",
    )
    edit_cmd.add_argument("--name", default=None, help="Player display name")

    dev_cmd = commands.add_parser("devserver", help="Run the in-memory development backend")
    dev_cmd.add_argument("--host", default=None, help="Host address to bind to")
    dev_cmd.add_argument("--port", type=int, default=None, help="Port to listen on")
    dev_cmd.add_argument("--players", type=int, default=None, help="Fake players to seed")
    dev_cmd.add_argument("--servers", type=int, default=None, help="Fake servers to seed")
    dev_cmd.add_argument("--seed", type=int, default=None, help="PRNG seed")

    return parser.parse_args(argv)


def print_notifications(dashboard: Dashboard) -> None:
    for notification in dashboard.notifications.notifications:
        print(f"[{notification.severity.value}] {notification.message}")


async def run_list(
    config: DashboardConfig, kind_name: str, http: httpx.AsyncClient | None = None
) -> int:
    # Only the requested kind is loaded
    dashboard = Dashboard(config, http=http)
    try:
        store = dashboard.store(kind_name)
        await store.load()
        for resource in store.items:
            labels = ", ".join(f"{k}={v}" for k, v in resource.labels.items())
            print(
                f"{resource.identity:<38} {resource.display_name:<24} "
                f"{resource.status_category.value:<8} {labels}"
            )
        if not store.items:
            print(f"No {kind_name} found")
        print_notifications(dashboard)
        return 0 if not dashboard.notifications.notifications else 1
    finally:
        await dashboard.stop()


async def run_edit(config: DashboardConfig, args: argparse.Namespace) -> int:
    async with Dashboard(config) as dashboard:
        store = dashboard.store(args.kind)
        if args.name is not None and not store.kind.has_display_name:
            print(f"--name is not supported for {store.kind.name}")
            return 2

        buffer = store.begin_edit(args.identity)
        if buffer is None:
            print(f"{store.kind.singular.capitalize()} {args.identity} not found")
            return 1

        for key, value in args.labels:
            buffer.add_label(key, value)
        for key, value in args.annotations:
            buffer.add_annotation(key, value)
        if args.name is not None:
            buffer.set_name(args.name)

        saved = await store.save()
        print_notifications(dashboard)
        return 0 if saved else 1


async def run_devserver(config: DashboardConfig, args: argparse.Namespace) -> None:
    settings = config.devserver
    repository = MetadataRepository()
    repository.seed(
        players=args.players if args.players is not None else settings.players,
        servers=args.servers if args.servers is not None else settings.servers,
        prefix=settings.prefix,
        seed=args.seed if args.seed is not None else settings.seed,
    )
    backend = DevBackend(repository)
    await backend.serve(host=args.host or settings.host, port=args.port or settings.port)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config) if args.config else get_config()
        if args.base_url:
            backend = replace(config.backend, base_url=args.base_url.rstrip("/"))
            config = replace(config, backend=backend)

        if args.command == "list":
            return asyncio.run(run_list(config, args.kind))
        if args.command == "edit":
            return asyncio.run(run_edit(config, args))
        asyncio.run(run_devserver(config, args))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
