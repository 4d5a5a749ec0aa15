"""Match layer — time budgets, player invocation, referee and coordinators."""

from konane.game.client import PlayerClient
from konane.game.clock import Deadline, Stopwatch, TimeBudget
from konane.game.coordinator import TurnCoordinator
from konane.game.display import ConsoleDisplay, LoggingDisplay, NullDisplay, RecordingDisplay
from konane.game.interfaces import DisplaySink, EndReason, IPlayer, MatchPhase, PlayerFactory
from konane.game.player import MoveDecision, PlayerAdapter
from konane.game.registry import PlayerRegistry, default_registry
from konane.game.result import MatchResult
from konane.game.simulator import LocalMatch
from konane.game.state import MatchEvents, MatchState
from konane.game.tournament import Pool, PoolStandings, parse_pairings, read_pairings

__all__ = [
    # Interfaces
    "DisplaySink",
    "EndReason",
    "IPlayer",
    "MatchPhase",
    "PlayerFactory",
    # Time
    "Deadline",
    "Stopwatch",
    "TimeBudget",
    # Players
    "MoveDecision",
    "PlayerAdapter",
    "PlayerRegistry",
    "default_registry",
    # Matches
    "LocalMatch",
    "MatchEvents",
    "MatchResult",
    "MatchState",
    "PlayerClient",
    "TurnCoordinator",
    # Displays
    "ConsoleDisplay",
    "LoggingDisplay",
    "NullDisplay",
    "RecordingDisplay",
    # Tournament
    "Pool",
    "PoolStandings",
    "parse_pairings",
    "read_pairings",
]
