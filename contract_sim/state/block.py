"""
contract_sim.state.block — deterministic block clock.

The simulator stamps state-mutating top-level actions (deploy, transfer) with
a synthetic block. The clock starts at an explicitly supplied height and
timestamp; there is no randomness and no wall-clock access, so two runs with
the same inputs observe the same heights and timestamps.

Timestamps are in microseconds; each block advances the timestamp by
`interval_us` (2 s by default).
"""

from __future__ import annotations

from dataclasses import dataclass


def _require_non_negative_int(name: str, v: object) -> int:
    if not isinstance(v, int) or isinstance(v, bool):
        raise TypeError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ValueError(f"{name} must be non-negative, got {v}")
    return v


@dataclass(frozen=True)
class BlockInfo:
    """Immutable view of the clock at one instant."""
    height: int
    timestamp: int


class BlockClock:
    def __init__(self, height: int = 0, timestamp: int = 0, *, interval_us: int = 2_000_000) -> None:
        self._height = _require_non_negative_int("height", height)
        self._timestamp = _require_non_negative_int("timestamp", timestamp)
        if _require_non_negative_int("interval_us", interval_us) == 0:
            raise ValueError("interval_us must be > 0")
        self.interval_us = interval_us

    @property
    def height(self) -> int:
        return self._height

    @property
    def timestamp(self) -> int:
        return self._timestamp

    def increase(self, delta: int = 1) -> BlockInfo:
        """Advance by `delta` blocks and return the new position."""
        _require_non_negative_int("delta", delta)
        self._height += delta
        self._timestamp += self.interval_us * delta
        return self.snapshot()

    def snapshot(self) -> BlockInfo:
        return BlockInfo(height=self._height, timestamp=self._timestamp)

    def __repr__(self) -> str:
        return f"BlockClock(height={self._height}, timestamp={self._timestamp})"


__all__ = ["BlockInfo", "BlockClock"]
