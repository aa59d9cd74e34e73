"""
contract_sim.state.storage — contract storage with frame-scoped revert.

A flat key/value store keyed by `fullKey = str(contract_address) + key`, where
the contract address is always the callee (`to`) of the frame executing the
write. Two contracts writing the same logical key therefore never collide.

Each live entry carries a declared type next to its value. Reverts restore
both, so a reverted entry keeps the type it had before the frame touched it.

Shadow map
----------
For every active depth the engine keeps a first-write log:

    depth -> {fullKey -> (previous_value, previous_type)}

- A key is logged only on its *first* write within the frame at that depth,
  so the logged value is the pre-frame value no matter how many writes
  follow. Keys absent before the write are logged as `_MISSING`.
- `revert_current_frame()` replays the current depth's log into the live
  store. It does not pop the frame and does not clear the log.
- When a frame is popped its log is dropped. A later frame reusing the depth
  starts from an empty log, and writes made by a child that completed are
  not undone by reverting the parent.

Typical usage
-------------
    engine = StorageEngine(frames)
    frames.push(owner, contract, False, "set", 0)
    engine.put("x", 10)
    engine.put("x", 20)
    engine.revert_current_frame()   # "x" back to its pre-frame value
    frames.pop()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..errors import InvalidAccess
from ..runtime.frames import Frame, FrameStack
from ..types.address import Address

log = logging.getLogger(__name__)

_MISSING = object()

_Entry = Tuple[Any, Optional[type]]


class StorageEngine:
    """
    Live store plus per-depth first-write logs.

    Parameters
    ----------
    frames : FrameStack
        The stack whose top frame determines the storage owner and depth.
        The engine registers a pop hook on it.
    enforce_readonly : bool
        Reject `put` inside readonly frames with InvalidAccess.
    """

    def __init__(self, frames: FrameStack, *, enforce_readonly: bool = True) -> None:
        self._frames = frames
        self._enforce_readonly = enforce_readonly
        self._store: Dict[str, Any] = {}
        self._types: Dict[str, Optional[type]] = {}
        self._shadow: Dict[int, Dict[str, _Entry]] = {}
        frames.add_pop_hook(self._release_frame)

    # ------------------------------ helpers ---------------------------------

    @staticmethod
    def full_key(address: Address, key: str) -> str:
        return str(address) + key

    def _current_full_key(self, key: str) -> Tuple[Frame, str]:
        if not isinstance(key, str):
            raise TypeError(f"storage key must be str, got {type(key).__name__}")
        frame = self._frames.current()
        return frame, self.full_key(frame.to_account.address, key)

    def _read_entry(self, full_key: str) -> _Entry:
        if full_key in self._store:
            return self._store[full_key], self._types.get(full_key)
        return _MISSING, None

    def _write_entry(self, full_key: str, value: Any, declared_type: Optional[type]) -> None:
        if value is _MISSING:
            self._store.pop(full_key, None)
            self._types.pop(full_key, None)
            return
        self._store[full_key] = value
        self._types[full_key] = declared_type

    # ------------------------------ core ops --------------------------------

    def put(self, key: str, value: Any, declared_type: Optional[type] = None) -> None:
        """
        Write `value` under `key` for the executing contract.

        `declared_type` defaults to `type(value)` (None for a None value).
        """
        frame, fk = self._current_full_key(key)
        if frame.readonly and self._enforce_readonly:
            raise InvalidAccess(
                "storage write in readonly frame",
                op="put",
                address=str(frame.to_account.address),
                key=key,
            )
        if declared_type is None and value is not None:
            declared_type = type(value)

        # Keep the old value in case of a revert, only on the first write in this frame.
        bucket = self._shadow.setdefault(frame.depth, {})
        if fk not in bucket:
            bucket[fk] = self._read_entry(fk)

        self._write_entry(fk, value, declared_type)

    def get(self, key: str, default: Any = None) -> Any:
        """Value stored under `key` for the executing contract, or `default`."""
        _, fk = self._current_full_key(key)
        return self._store.get(fk, default)

    def get_type(self, key: str) -> Optional[type]:
        """Declared type of the live value under `key`, or None if absent."""
        _, fk = self._current_full_key(key)
        return self._types.get(fk)

    def has(self, key: str) -> bool:
        _, fk = self._current_full_key(key)
        return fk in self._store

    def revert_current_frame(self) -> int:
        """
        Restore every entry logged at the current depth to its pre-frame value
        and type. Returns the number of restored keys (0 means no-op).
        """
        frame = self._frames.current()
        bucket = self._shadow.get(frame.depth)
        if not bucket:
            # Nothing has been written in the current frame
            return 0
        for fk, (prev_value, prev_type) in bucket.items():
            self._write_entry(fk, prev_value, prev_type)
        log.debug("storage revert depth=%d keys=%d", frame.depth, len(bucket))
        return len(bucket)

    # ------------------------------ frame hook ------------------------------

    def _release_frame(self, frame: Frame) -> None:
        self._shadow.pop(frame.depth, None)

    # ------------------------------ introspection ---------------------------

    def shadow_keys(self, depth: Optional[int] = None) -> List[str]:
        """Full keys logged at `depth` (current depth by default), in first-write order."""
        if depth is None:
            depth = self._frames.current().depth
        return list(self._shadow.get(depth, {}).keys())

    def items(self, address: Address) -> Iterator[Tuple[str, Any]]:
        """
        Iterate (key, value) pairs stored by one contract. Stable order: by key.
        """
        prefix = str(address)
        matches = [(fk[len(prefix):], v) for fk, v in self._store.items() if fk.startswith(prefix)]
        for k, v in sorted(matches, key=lambda kv: kv[0]):
            yield k, v

    def total_keys(self) -> int:
        """Total number of live keys across all contracts."""
        return len(self._store)


__all__ = ["StorageEngine"]
