"""Command-line entry point: ``konane <command> ...``."""

from __future__ import annotations

import argparse
import logging
import sys

from konane import __version__
from konane.config import KonaneConfig, get_config
from konane.core.enums import Side
from konane.errors import KonaneError, PlayerLoadError
from konane.game.client import PlayerClient
from konane.game.coordinator import TurnCoordinator
from konane.game.display import ConsoleDisplay
from konane.game.registry import default_registry
from konane.game.simulator import LocalMatch
from konane.game.tournament import POOL_GAMES_PER_PAIR, POOL_TIME_MS, Pool, read_pairings

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _config_from(args: argparse.Namespace) -> KonaneConfig:
    return get_config().with_overrides(
        white_port=getattr(args, "white_port", None),
        black_port=getattr(args, "black_port", None),
        protocol_timeout_ms=getattr(args, "protocol_timeout", None),
        time_grace_ms=getattr(args, "time_grace", None),
        verbose=True if args.verbose else None,
        log_level=args.log_level,
    )


# ── Commands ─────────────────────────────────────────────────────────────────


def run_simulate(args: argparse.Namespace, config: KonaneConfig) -> int:
    display = ConsoleDisplay()
    try:
        match = LocalMatch.from_names(
            args.width,
            args.height,
            args.time,
            args.white,
            args.black,
            display=display,
            verbose=config.verbose,
        )
    except PlayerLoadError as exc:
        display.show(str(exc))
        return EXIT_FAILURE
    match.play()
    return EXIT_OK


def run_serve(args: argparse.Namespace, config: KonaneConfig) -> int:
    coordinator = TurnCoordinator(
        args.width,
        args.height,
        args.time,
        args.white,
        args.black,
        white_host=args.white_host,
        black_host=args.black_host,
        config=config,
        display=ConsoleDisplay(),
    )
    result = coordinator.run()
    return EXIT_FAILURE if result.aborted else EXIT_OK


def run_client(args: argparse.Namespace, config: KonaneConfig) -> int:
    side = Side[args.side.upper()]
    client = PlayerClient(side, config=config, display=ConsoleDisplay())
    try:
        client.serve(host=args.host, port=args.port, once=args.once)
    except KeyboardInterrupt:
        _LOGGER.info("Client interrupted")
    return EXIT_OK


def run_pool(args: argparse.Namespace, config: KonaneConfig) -> int:
    display = ConsoleDisplay()
    try:
        pairings = read_pairings(args.pairings)
    except (OSError, ValueError) as exc:
        display.show(f"Cannot read pairings: {exc}")
        return EXIT_FAILURE

    pool = Pool(
        pairings,
        games_per_pair=args.games,
        total_ms=args.time,
        display=display,
        seed=args.seed,
        verbose=config.verbose,
    )
    try:
        _, standings = pool.run()
    except PlayerLoadError as exc:
        display.show(str(exc))
        return EXIT_FAILURE

    display.show("----------- Pool Standings ------------")
    for name, wins, games in standings.ranking():
        display.show(f"{name}: {wins} wins / {games} games")
    return EXIT_OK


def run_gui(args: argparse.Namespace, config: KonaneConfig) -> int:
    from konane.ui.bootstrap import run_application

    return run_application(
        args.width,
        args.height,
        args.time,
        args.white,
        args.black,
        verbose=config.verbose,
    )


def run_players(args: argparse.Namespace, config: KonaneConfig) -> int:
    del args, config
    registry = default_registry()
    display = ConsoleDisplay()
    for name in registry.names():
        display.show(f"{name:10s} {registry.describe(name)}")
    return EXIT_OK


# ── Parser ───────────────────────────────────────────────────────────────────


def _add_match_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("width", type=int, help="Board width (columns)")
    parser.add_argument("height", type=int, help="Board height (rows)")
    parser.add_argument("time", type=int, help="Time budget per side in milliseconds")
    parser.add_argument("white", help="WHITE player identifier")
    parser.add_argument("black", help="BLACK player identifier")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="konane", description="Timed Konane matches")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show rule-violation details"
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    simulate = subparsers.add_parser("simulate", help="Play a standalone local match")
    _add_match_arguments(simulate)
    simulate.set_defaults(func=run_simulate)

    serve = subparsers.add_parser("serve", help="Coordinate a match between two clients")
    _add_match_arguments(serve)
    serve.add_argument("--white-host", default="localhost")
    serve.add_argument("--black-host", default="localhost")
    serve.add_argument("--white-port", type=int, default=None)
    serve.add_argument("--black-port", type=int, default=None)
    serve.add_argument(
        "--protocol-timeout", type=int, default=None, help="Reply deadline in milliseconds"
    )
    serve.add_argument(
        "--time-grace",
        type=int,
        default=None,
        help="Milliseconds a budget may fall below zero before losing on time",
    )
    serve.set_defaults(func=run_serve)

    client = subparsers.add_parser("client", help="Host one side's player")
    client.add_argument("side", choices=("white", "black"))
    client.add_argument("--host", default="", help="Interface to listen on")
    client.add_argument("--port", type=int, default=None)
    client.add_argument("--once", action="store_true", help="Exit after one match")
    client.set_defaults(func=run_client)

    pool = subparsers.add_parser("pool", help="Run a round-robin pool from a pairings file")
    pool.add_argument("pairings", help="File with two player identifiers per line")
    pool.add_argument("--games", type=int, default=POOL_GAMES_PER_PAIR)
    pool.add_argument("--time", type=int, default=POOL_TIME_MS)
    pool.add_argument("--seed", type=int, default=None, help="Seed for board sizes")
    pool.set_defaults(func=run_pool)

    gui = subparsers.add_parser("gui", help="Watch a local match in a window")
    _add_match_arguments(gui)
    gui.set_defaults(func=run_gui)

    players = subparsers.add_parser("players", help="List built-in players")
    players.set_defaults(func=run_players)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = _config_from(args)
    _configure_logging(config.log_level)
    try:
        return args.func(args, config)
    except KonaneError as exc:
        _LOGGER.error("%s", exc)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
