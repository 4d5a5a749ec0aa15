"""Per-side time budgets and monotonic timing helpers."""

from __future__ import annotations

import time

from konane.core.enums import Side


def _now_ms() -> float:
    return time.monotonic() * 1000.0


class TimeBudget:
    """Milliseconds a side may still spend across all its remaining moves.

    :meth:`charge` always completes the subtraction, so the remainder may
    go negative. Callers check :attr:`is_exhausted` right after charging.
    """

    __slots__ = ("_side", "_total_ms", "_remaining_ms")

    def __init__(self, side: Side, total_ms: int) -> None:
        self._side = side
        self._total_ms = int(total_ms)
        self._remaining_ms = int(total_ms)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def side(self) -> Side:
        return self._side

    @property
    def total_ms(self) -> int:
        return self._total_ms

    @property
    def remaining_ms(self) -> int:
        return self._remaining_ms

    @property
    def allowance_ms(self) -> int:
        """What a player may think for now: the remainder, never negative."""
        return max(0, self._remaining_ms)

    @property
    def is_exhausted(self) -> bool:
        return self._remaining_ms < 0

    # ── Accounting ───────────────────────────────────────────────────────

    def charge(self, elapsed_ms: int) -> int:
        """Subtract *elapsed_ms* and return the new remainder."""
        if elapsed_ms < 0:
            raise ValueError(f"Elapsed time cannot be negative: {elapsed_ms}")
        self._remaining_ms -= int(elapsed_ms)
        return self._remaining_ms

    def exceeds_grace(self, grace_ms: int) -> bool:
        """Whether the remainder has fallen below ``-grace_ms``."""
        return self._remaining_ms < -grace_ms

    def reset(self, total_ms: int | None = None) -> None:
        if total_ms is not None:
            self._total_ms = int(total_ms)
        self._remaining_ms = self._total_ms

    def __repr__(self) -> str:
        return f"TimeBudget({self._side!s}, {self._remaining_ms}/{self._total_ms} ms)"


class Stopwatch:
    """Monotonic elapsed-time measurement in whole milliseconds."""

    __slots__ = ("_started",)

    def __init__(self) -> None:
        self._started = _now_ms()

    def restart(self) -> None:
        self._started = _now_ms()

    @property
    def elapsed_ms(self) -> int:
        return int(_now_ms() - self._started)


class Deadline:
    """A point in monotonic time, or no limit at all."""

    __slots__ = ("_at",)

    def __init__(self, at_ms: float | None) -> None:
        self._at = at_ms

    @classmethod
    def after(cls, milliseconds: int | None) -> Deadline:
        if milliseconds is None:
            return cls(None)
        return cls(_now_ms() + max(0, milliseconds))

    @property
    def unlimited(self) -> bool:
        return self._at is None

    @property
    def expired(self) -> bool:
        return self._at is not None and _now_ms() >= self._at

    def remaining_ms(self) -> int | None:
        if self._at is None:
            return None
        return max(0, int(self._at - _now_ms()))

    def remaining_seconds(self) -> float | None:
        """Seconds left, suitable for ``timeout=`` arguments."""
        if self._at is None:
            return None
        return max(0.0, (self._at - _now_ms()) / 1000.0)
