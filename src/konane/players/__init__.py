"""Built-in players."""

from konane.players.reference import FirstMovePlayer, MobilityPlayer, RandomPlayer

__all__ = ["FirstMovePlayer", "MobilityPlayer", "RandomPlayer"]
