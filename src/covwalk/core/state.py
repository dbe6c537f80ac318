"""The State capability.

States are defined by the user of the library. The only thing covwalk ever
does with a state is render it with ``str()``: the rendering is the sole
notion of identity for chaining and coverage, so it must be deterministic
and stable across calls. Two states are the same iff their renderings are
equal.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class State(Protocol):
    """Anything with a canonical string rendering."""

    def __str__(self) -> str:
        ...


def render(state: State) -> str:
    """Return the canonical rendering of a state."""
    return str(state)


def same_state(a: State, b: State) -> bool:
    """Check whether two states are the same (equal renderings)."""
    return render(a) == render(b)
