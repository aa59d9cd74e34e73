"""
contract_sim.runtime.frames — call-frame records and the LIFO frame stack.

Every externally observable mutating operation (deploy, call, transfer's
fallback, storage write) runs inside a Frame. Frames nest synchronously: a
call made from contract code pushes on top of the caller's frame and is
popped before control returns.

Depth
-----
A frame's depth is its stack position at push time (0 for the bottom frame),
so depths are unique among active frames and are reused after a pop. Anything
keyed by depth (the storage shadow map) must be released when its frame is
popped; the stack calls registered pop hooks for that, in registration order,
before `pop()` returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..errors import CallDepthExceeded, EmptyFrameStack
from ..state.accounts import Account

log = logging.getLogger(__name__)

PopHook = Callable[["Frame"], None]


@dataclass(frozen=True)
class Frame:
    """
    One activation record.

    Fields:
        from_account: Caller account (EOA or contract).
        to_account:   Callee account (the contract whose code runs).
        method:       Method name ("<init>" while constructing, "fallback" for payments).
        readonly:     True for query frames; storage writes are rejected.
        value:        Native amount attached to the call.
        depth:        Stack position at push time.
    """

    from_account: Account
    to_account: Account
    method: str
    readonly: bool
    value: int
    depth: int

    def __repr__(self) -> str:
        return (
            f"Frame(depth={self.depth}, {self.from_account.address} -> "
            f"{self.to_account.address}.{self.method}, value={self.value}"
            f"{', readonly' if self.readonly else ''})"
        )


class FrameStack:
    """
    LIFO stack of active frames.

    Parameters
    ----------
    max_depth : Optional[int]
        If set, `push` raises CallDepthExceeded once `max_depth` frames are active.
    """

    def __init__(self, max_depth: Optional[int] = None) -> None:
        self._frames: List[Frame] = []
        self._pop_hooks: List[PopHook] = []
        self.max_depth = max_depth

    def add_pop_hook(self, hook: PopHook) -> None:
        self._pop_hooks.append(hook)

    # ---- push / pop ---- #

    def push(
        self,
        from_account: Account,
        to_account: Account,
        readonly: bool,
        method: str,
        value: int = 0,
    ) -> Frame:
        if self.max_depth is not None and len(self._frames) >= self.max_depth:
            raise CallDepthExceeded(self.max_depth)
        frame = Frame(
            from_account=from_account,
            to_account=to_account,
            method=method,
            readonly=bool(readonly),
            value=int(value),
            depth=len(self._frames),
        )
        self._frames.append(frame)
        log.debug("frame push %r", frame)
        return frame

    def pop(self) -> Frame:
        """
        Remove the top frame and run pop hooks for its depth.
        Popping an empty stack is a usage error.
        """
        if not self._frames:
            raise EmptyFrameStack(op="pop_frame")
        frame = self._frames.pop()
        for hook in self._pop_hooks:
            hook(frame)
        log.debug("frame pop %r", frame)
        return frame

    # ---- accessors ---- #

    def current(self) -> Frame:
        if not self._frames:
            raise EmptyFrameStack(op="current_frame")
        return self._frames[-1]

    def origin(self) -> Frame:
        if not self._frames:
            raise EmptyFrameStack(op="origin_frame")
        return self._frames[0]

    def parent(self) -> Optional[Frame]:
        """Frame directly below the top, or None."""
        return self._frames[-2] if len(self._frames) >= 2 else None

    @property
    def depth(self) -> int:
        """Number of active frames."""
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    def frames(self) -> List[Frame]:
        """Bottom → top copy of the active frames."""
        return list(self._frames)


__all__ = ["Frame", "FrameStack", "PopHook"]
