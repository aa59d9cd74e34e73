"""
Property tests for the frame-scoped revert laws of StorageEngine.

  - baseline → frame writes → revert           ⇒ store equals baseline
  - outer writes, inner writes, inner revert   ⇒ store equals baseline ∪ outer writes
  - inner frame completes, outer reverts       ⇒ only keys the outer frame
                                                 wrote go back to baseline
  - a frame with no writes                     ⇒ revert changes nothing

Each example builds its own engine; nothing is shared between examples.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from hypothesis import given, settings, strategies as st

from contract_sim.runtime.frames import FrameStack
from contract_sim.state.accounts import AccountRegistry
from contract_sim.state.storage import StorageEngine

KEY = st.text(alphabet="abcdefgh", min_size=1, max_size=3)
VAL = st.one_of(st.integers(), st.text(max_size=8), st.binary(max_size=8), st.booleans())
MAP_SMALL = st.dictionaries(keys=KEY, values=VAL, max_size=8)
WRITES = st.lists(st.tuples(KEY, VAL), max_size=16)


def _engine():
    reg = AccountRegistry()
    eoa, contract = reg.create_external(), reg.create_contract()
    frames = FrameStack()
    return StorageEngine(frames), frames, eoa, contract


def _snapshot(engine: StorageEngine, contract) -> Dict[str, object]:
    return dict(engine.items(contract.address))


def _apply(engine: StorageEngine, writes: List[Tuple[str, object]]) -> None:
    for k, v in writes:
        engine.put(k, v)


def _expected(baseline: Dict[str, object], writes: List[Tuple[str, object]]) -> Dict[str, object]:
    out = dict(baseline)
    for k, v in writes:
        out[k] = v
    return out


def _revert_outer(baseline, outer, inner) -> Dict[str, object]:
    out = _expected(_expected(baseline, outer), inner)
    for k, _ in outer:
        if k in baseline:
            out[k] = baseline[k]
        else:
            out.pop(k, None)
    return out


def _seed(engine, frames, eoa, contract, baseline) -> None:
    frames.push(eoa, contract, False, "seed")
    _apply(engine, list(baseline.items()))
    frames.pop()


@given(MAP_SMALL, WRITES)
@settings(max_examples=150)
def test_revert_restores_baseline(baseline: Dict[str, object], writes) -> None:
    engine, frames, eoa, contract = _engine()
    _seed(engine, frames, eoa, contract, baseline)

    frames.push(eoa, contract, False, "tx")
    _apply(engine, writes)
    assert _snapshot(engine, contract) == _expected(baseline, writes)
    engine.revert_current_frame()
    assert _snapshot(engine, contract) == baseline
    frames.pop()


@given(MAP_SMALL)
@settings(max_examples=80)
def test_revert_without_writes_changes_nothing(baseline: Dict[str, object]) -> None:
    engine, frames, eoa, contract = _engine()
    _seed(engine, frames, eoa, contract, baseline)

    frames.push(eoa, contract, False, "noop")
    assert engine.revert_current_frame() == 0
    assert _snapshot(engine, contract) == baseline
    frames.pop()


@given(MAP_SMALL, WRITES, WRITES)
@settings(max_examples=120)
def test_inner_revert_keeps_outer_writes(baseline, outer, inner) -> None:
    engine, frames, eoa, contract = _engine()
    _seed(engine, frames, eoa, contract, baseline)

    frames.push(eoa, contract, False, "outer")
    _apply(engine, outer)
    frames.push(contract, contract, False, "inner")
    _apply(engine, inner)
    engine.revert_current_frame()
    frames.pop()
    assert _snapshot(engine, contract) == _expected(baseline, outer)
    frames.pop()


@given(MAP_SMALL, WRITES, WRITES)
@settings(max_examples=120)
def test_outer_revert_keeps_completed_inner_writes(baseline, outer, inner) -> None:
    engine, frames, eoa, contract = _engine()
    _seed(engine, frames, eoa, contract, baseline)

    frames.push(eoa, contract, False, "outer")
    _apply(engine, outer)
    frames.push(contract, contract, False, "inner")
    _apply(engine, inner)
    frames.pop()
    assert _snapshot(engine, contract) == _expected(_expected(baseline, outer), inner)
    engine.revert_current_frame()
    assert _snapshot(engine, contract) == _revert_outer(baseline, outer, inner)
    frames.pop()
