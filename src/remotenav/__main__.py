"""Command-line entry point for the TV remote-control harness."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from .commands import Command, describe, parse_sequence
from .config import ConfigError, HarnessConfig, load_config
from .constants import NAVIGATION_LIMITS
from .focus import NavigationError, testid_focus_getter
from .input_driver import RemoteControl, SimulatedKeyDispatcher

_LOGGER = logging.getLogger("remotenav")


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="remotenav",
        description="Drive a TV web interface with simulated remote-control buttons",
    )
    parser.add_argument("--config", type=Path, help="Path to a remotenav.json configuration file")
    parser.add_argument("--url", help="Base URL of the TV web application")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--key-delay", type=float, help="Settling delay after each key press (seconds)")
    parser.add_argument("--dry-run", action="store_true", help="Do not open a browser; log key presses only")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. INFO, DEBUG)")
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Optional path to a log file (recommended when running as a background task)",
    )

    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("--press", metavar="SEQUENCE", help='Button script, e.g. "up*2, right*3, select"')
    actions.add_argument("--menu", metavar="NAME", help="Focus a menu bar item (e.g. Apps)")
    actions.add_argument("--find", metavar="NAME", help="Search a rail for an item by data-testid")
    actions.add_argument("--serve", action="store_true", help="Run the WebSocket remote-control bridge")

    parser.add_argument("--rail", default="Favourite Apps", help="aria-label of the rail searched by --find")
    parser.add_argument("--direction", default="right", help="Direction used by --find")
    parser.add_argument("--max-steps", type=int, help="Step budget for --find/--menu")
    parser.add_argument("--host", default="127.0.0.1", help="Host/IP to bind the bridge server")
    parser.add_argument("--port", type=int, default=8765, help="Port to bind the bridge server")
    parser.add_argument("--allow-origin", default="*", help="Value for Access-Control-Allow-Origin header")
    return parser.parse_args(list(argv) if argv is not None else None)


def configure_logging(level: str, log_file: Path | None) -> None:
    """Initialise application logging for console or background execution."""

    log_level = getattr(logging, level.upper(), logging.INFO)
    handlers: list[logging.Handler] = []

    if log_file:
        log_file = log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    else:
        stream = getattr(sys, "stderr", None)
        if stream is None:
            fallback = Path.cwd() / "remotenav.log"
            handlers.append(logging.FileHandler(fallback, encoding="utf-8"))
        else:
            handlers.append(logging.StreamHandler(stream))

    logging.basicConfig(
        level=log_level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


async def run_press_dry(sequence: str, config: HarnessConfig) -> List[str]:
    actions = parse_sequence(sequence)
    dispatcher = SimulatedKeyDispatcher()
    remote = RemoteControl(dispatcher, key_delay=config.key_delay)
    await remote.perform_sequence(actions)
    _LOGGER.info("Dry run: would send %s", " ".join(describe(actions)))
    return [key for _, key in dispatcher.events]


async def _serve(server, host: str, port: int) -> None:
    from aiohttp import web

    from .server import create_app

    runner = web.AppRunner(create_app(server))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    _LOGGER.info("Bridge server listening on %s:%s (dry_run=%s)", host, port, server.dry_run)
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


async def run(args: argparse.Namespace, config: HarnessConfig) -> int:
    if args.dry_run:
        if args.press:
            await run_press_dry(args.press, config)
            return 0
        if args.serve:
            from .server import BridgeServer

            remote = RemoteControl(SimulatedKeyDispatcher(), key_delay=config.key_delay)
            server = BridgeServer(remote, app_url=config.app_url, dry_run=True, allow_origin=args.allow_origin)
            await _serve(server, args.host, args.port)
            return 0
        _LOGGER.error("--dry-run only supports --press and --serve")
        return 2

    from .menu import resolve_menu
    from .pages.navigation_bar import HOME_ITEM, MENU_ITEMS, NavigationBar
    from .search import search_for
    from .session import TvSession

    async with TvSession(config) as session:
        if args.press:
            await session.remote.perform_sequence(parse_sequence(args.press))
        elif args.menu:
            nav = NavigationBar(session.page)
            focused = await resolve_menu(
                session.remote,
                nav.focused_item_name,
                args.menu,
                HOME_ITEM,
                MENU_ITEMS,
                args.max_steps or NAVIGATION_LIMITS.max_menu_steps,
            )
            print(focused)
        elif args.find:
            outcome = await search_for(
                session.remote,
                testid_focus_getter(session.page.get_by_label(args.rail)),
                args.find,
                Command.from_name(args.direction),
                args.max_steps or NAVIGATION_LIMITS.max_rail_steps,
                timeout=config.focus_timeout,
                interval=config.poll_interval,
                context=f"search in {args.rail}",
            )
            print(outcome.token if outcome else f"not found ({outcome.reason.value})")
            return 0 if outcome else 1
        else:
            from .server import BridgeServer

            server = BridgeServer.for_page(
                session.page,
                session.remote,
                app_url=config.app_url,
                allow_origin=args.allow_origin,
            )
            await _serve(server, args.host, args.port)
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        config = load_config(args.config).with_overrides(
            app_url=args.url,
            key_delay=args.key_delay,
            headless=False if args.headed else None,
        )
    except ConfigError as exc:
        _LOGGER.error("Failed to load configuration: %s", exc)
        return 2

    try:
        return asyncio.run(run(args, config))
    except (NavigationError, ValueError) as exc:
        _LOGGER.error("%s", exc)
        return 2
    except KeyboardInterrupt:  # pragma: no cover - interactive behaviour
        _LOGGER.info("Stopped by user")
        return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
