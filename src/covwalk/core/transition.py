"""Transition: an action paired with a pure state change."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from covwalk.core.action import Action
from covwalk.core.state import State

# A state change returns the successor state, or None when the transition
# is not applicable at the given state. It must not mutate its input.
StateChange = Callable[[State], "State | None"]

# A transition generator returns the transitions a model offers at a state.
TransitionGen = Callable[[State], "list[Transition]"]


@dataclass(frozen=True)
class Transition:
    """An action and the state change it causes.

    Example::

        def start_playing(current):
            if current.playing:
                return None
            return PlayerState(playing=True, song=current.song)

        play = Transition(Action("play"), start_playing)
    """

    action: Action
    change: StateChange

    def apply(self, state: State) -> State | None:
        """Apply the state change; None means not applicable at ``state``."""
        return self.change(state)
