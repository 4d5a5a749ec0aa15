"""Binding player identifiers to player factories.

An identifier is resolved, in order, as:

1. a name registered on the :class:`PlayerRegistry` (the built-ins
   ``random``, ``first`` and ``mobility`` are always present);
2. an entry point in the ``konane.players`` group;
3. an import path ``package.module:attribute`` naming an :class:`IPlayer`
   subclass or any ``(side) -> IPlayer`` callable.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib.metadata import entry_points

from konane.core.enums import Side
from konane.errors import PlayerLoadError
from konane.game.interfaces import IPlayer, PlayerFactory

_LOGGER = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "konane.players"


@dataclass(frozen=True, slots=True)
class PlayerEntry:
    factory: PlayerFactory
    description: str = ""


def _builtin_entries() -> dict[str, PlayerEntry]:
    from konane.players import FirstMovePlayer, MobilityPlayer, RandomPlayer

    return {
        "random": PlayerEntry(RandomPlayer, "uniformly random legal move"),
        "first": PlayerEntry(FirstMovePlayer, "first legal move in scan order"),
        "mobility": PlayerEntry(MobilityPlayer, "one-ply opponent-mobility minimiser"),
    }


class PlayerRegistry:
    """Named player factories plus plugin and import-path lookup."""

    __slots__ = ("_entries",)

    def __init__(self, *, builtins: bool = True) -> None:
        self._entries: dict[str, PlayerEntry] = _builtin_entries() if builtins else {}

    def register(self, name: str, factory: PlayerFactory, description: str = "") -> None:
        if not name:
            raise ValueError("Player name must not be empty")
        self._entries[name] = PlayerEntry(factory, description)

    def names(self) -> list[str]:
        return sorted(self._entries)

    def describe(self, name: str) -> str:
        entry = self._entries.get(name)
        return entry.description if entry else ""

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    # ── Resolution ───────────────────────────────────────────────────────

    def resolve(self, name: str) -> PlayerFactory:
        """Factory for *name*.

        Raises:
            PlayerLoadError: nothing matches *name*.
        """
        name = name.strip()
        entry = self._entries.get(name)
        if entry is not None:
            return entry.factory

        factory = self._from_entry_point(name)
        if factory is not None:
            return factory

        if ":" in name:
            return self._from_import_path(name)

        known = ", ".join(self.names()) or "none"
        raise PlayerLoadError(f"Unknown player {name!r} (registered: {known})")

    def create(self, name: str, side: Side) -> IPlayer:
        """Build the player *name* for *side*.

        Raises:
            PlayerLoadError: *name* is unknown or its factory failed.
        """
        factory = self.resolve(name)
        try:
            player = factory(side)
        except Exception as exc:
            raise PlayerLoadError(f"Cannot create player {name!r}: {exc}") from exc
        if not isinstance(player, IPlayer):
            raise PlayerLoadError(
                f"{name!r} produced {type(player).__name__}, not an IPlayer"
            )
        return player

    def _from_entry_point(self, name: str) -> PlayerFactory | None:
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            if ep.name != name:
                continue
            try:
                factory = ep.load()
            except Exception as exc:
                raise PlayerLoadError(f"Cannot load plugin {name!r}: {exc}") from exc
            _LOGGER.debug("Loaded player %r from entry point %s", name, ep.value)
            return self._check_callable(factory, name)
        return None

    def _from_import_path(self, path: str) -> PlayerFactory:
        module_name, _, attr = path.partition(":")
        if not module_name or not attr:
            raise PlayerLoadError(f"Malformed import path {path!r}")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise PlayerLoadError(f"Cannot import {module_name!r}: {exc}") from exc
        target: object = module
        for part in attr.split("."):
            try:
                target = getattr(target, part)
            except AttributeError:
                raise PlayerLoadError(f"{module_name!r} has no attribute {attr!r}") from None
        return self._check_callable(target, path)

    @staticmethod
    def _check_callable(target: object, name: str) -> PlayerFactory:
        if not callable(target):
            raise PlayerLoadError(f"{name!r} is not callable")
        return target  # type: ignore[return-value]


@lru_cache(maxsize=1)
def default_registry() -> PlayerRegistry:
    """Process-wide registry holding the built-in players."""
    return PlayerRegistry()
