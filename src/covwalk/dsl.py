"""When / on_action / do modeling syntax.

Shorthand for writing transition generators. It only builds Action and
Transition objects:

    @model.register_generator
    def player(s):
        return when(True,
            when(s.playing,
                on_action("pause").do(set_state(False, s.song))),
            when(not s.playing,
                on_action("play").do(set_state(True, s.song))),
            when(s.song < s.songcount,
                on_action("nextsong").do(set_state(s.playing, s.song + 1))),
            on_action("addsong(%d)", s.songcount + 1).do(add_song),
        )
"""

from __future__ import annotations

from typing import Any

from covwalk.core.action import Action
from covwalk.core.state import State
from covwalk.core.transition import StateChange, Transition


def when(enabled: bool, *groups: list[Transition]) -> list[Transition]:
    """Return the transitions of all groups if ``enabled``, else none."""
    if not enabled:
        return []
    transitions: list[Transition] = []
    for group in groups:
        transitions.extend(group)
    return transitions


class ActionBuilder:
    """Pairs an action with the state changes it causes."""

    def __init__(self, action: Action) -> None:
        self.action = action

    def do(self, *changes: StateChange) -> list[Transition]:
        """One transition applying ``changes`` in order.

        If any change returns None, the transition is not applicable.
        """

        def change(state: State) -> State | None:
            current: State | None = state
            for apply in changes:
                current = apply(current)
                if current is None:
                    return None
            return current

        return [Transition(self.action, change)]


def on_action(format: str, *args: Any) -> ActionBuilder:
    """Start a transition for the action ``format % args``."""
    return ActionBuilder(Action(format, args))
