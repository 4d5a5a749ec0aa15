"""Pairing-file reader and round-robin pool runner."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from konane.game.display import NullDisplay
from konane.game.interfaces import DisplaySink
from konane.game.registry import PlayerRegistry, default_registry
from konane.game.result import MatchResult
from konane.game.simulator import LocalMatch

_LOGGER = logging.getLogger(__name__)

POOL_TIME_MS = 120_000
POOL_GAMES_PER_PAIR = 3
POOL_MIN_DIMENSION = 7
POOL_MAX_DIMENSION = 11


def parse_pairings(lines: Iterable[str]) -> Iterator[tuple[str, str]]:
    """Yield ``(first, second)`` player pairs, one per non-blank line.

    Names are separated by whitespace; anything after the second name is
    ignored. Lines starting with ``#`` are comments.

    Raises:
        ValueError: a line names fewer than two players.
    """
    for line_no, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        names = line.split()
        if len(names) < 2:
            raise ValueError(f"Error on line {line_no} ({line}): expected two player names")
        yield names[0], names[1]


def read_pairings(path: str | Path) -> list[tuple[str, str]]:
    """All pairs listed in the file at *path*."""
    with Path(path).open(encoding="utf-8") as handle:
        return list(parse_pairings(handle))


@dataclass
class PoolStandings:
    """Wins and games per player identifier."""

    wins: dict[str, int] = field(default_factory=dict)
    games: dict[str, int] = field(default_factory=dict)
    aborted: int = 0

    def record(self, result: MatchResult) -> None:
        # a self-pairing is one game for that player
        for name in dict.fromkeys((result.white_name, result.black_name)):
            self.games[name] = self.games.get(name, 0) + 1
            self.wins.setdefault(name, 0)
        winner = result.winner_name
        if winner is None:
            self.aborted += 1
        else:
            self.wins[winner] += 1

    def ranking(self) -> list[tuple[str, int, int]]:
        """``(name, wins, games)`` sorted by wins, then name."""
        return sorted(
            ((name, self.wins.get(name, 0), games) for name, games in self.games.items()),
            key=lambda row: (-row[1], row[0]),
        )


class Pool:
    """Plays every listed pair a fixed number of times on random boards.

    Colours are swapped on every second game of a pair, so the default
    three games give the first-named player WHITE twice.

    Args:
        pairings: ``(first, second)`` identifier pairs.
        games_per_pair: Games played for each pair.
        total_ms: Time budget per side per game.
        registry: Resolves player identifiers.
        display: Sink for status lines of every game.
        seed: Seeds the board-size generator.
        verbose: Passed through to each match.
    """

    __slots__ = (
        "_pairings",
        "_games_per_pair",
        "_total_ms",
        "_registry",
        "_display",
        "_rng",
        "_verbose",
        "results",
        "standings",
    )

    def __init__(
        self,
        pairings: Iterable[tuple[str, str]],
        *,
        games_per_pair: int = POOL_GAMES_PER_PAIR,
        total_ms: int = POOL_TIME_MS,
        registry: PlayerRegistry | None = None,
        display: DisplaySink | None = None,
        seed: int | None = None,
        verbose: bool = False,
    ) -> None:
        if games_per_pair < 1:
            raise ValueError("games_per_pair must be at least 1")
        self._pairings = list(pairings)
        self._games_per_pair = games_per_pair
        self._total_ms = total_ms
        self._registry = registry or default_registry()
        self._display: DisplaySink = display or NullDisplay()
        self._rng = random.Random(seed)
        self._verbose = verbose
        self.results: list[MatchResult] = []
        self.standings = PoolStandings()

    def dimension(self) -> int:
        return self._rng.randint(POOL_MIN_DIMENSION, POOL_MAX_DIMENSION)

    def play_pair(self, first: str, second: str) -> list[MatchResult]:
        """Play one head-to-head series.

        Raises:
            PlayerLoadError: either identifier cannot be resolved.
        """
        series: list[MatchResult] = []
        for game_index in range(self._games_per_pair):
            white, black = (second, first) if game_index % 2 == 1 else (first, second)
            self._display.show("------------- New Game -------------")
            match = LocalMatch.from_names(
                self.dimension(),
                self.dimension(),
                self._total_ms,
                white,
                black,
                registry=self._registry,
                display=self._display,
                verbose=self._verbose,
            )
            result = match.play()
            series.append(result)
            self.results.append(result)
            self.standings.record(result)

        self._display.show("----------- Head-to-Head Results ------------")
        for result in series:
            self._display.show(result.summary())
        return series

    def run(self) -> tuple[list[MatchResult], PoolStandings]:
        for first, second in self._pairings:
            _LOGGER.info("Pool pairing: %s vs %s", first, second)
            self.play_pair(first, second)
        return self.results, self.standings
