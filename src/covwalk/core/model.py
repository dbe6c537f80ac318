"""Model: a registry of transition generators."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from covwalk.core.state import State
from covwalk.core.step import Path, Step
from covwalk.core.transition import Transition, TransitionGen
from covwalk.core.walker import Walker


@runtime_checkable
class Walkable(Protocol):
    """Anything that can offer steps and enumerate paths from a state."""

    def steps_from(self, state: State) -> list[Step]:
        """Return all alternative steps that start from ``state``."""
        ...

    def paths(self, state: State, max_depth: int) -> list[Path]:
        """Return all alternative paths of at most ``max_depth`` steps."""
        ...


class Model:
    """A test model: what can be tested, and when.

    Transitions are added with generator functions. A generator gets the
    current state and returns the transitions that may be specified there;
    it can check common preconditions up front, while each transition's
    state change may still return None at states where it is not defined.

        model = Model()

        @model.register_generator
        def player(current):
            return [
                Transition(Action("play"), start_playing),
                Transition(Action("pause"), pause_playing),
            ]

    Generators are evaluated on demand, in registration order, and their
    results are never cached or deduplicated.
    """

    def __init__(self) -> None:
        self._generators: list[TransitionGen] = []

    @property
    def generators(self) -> list[TransitionGen]:
        return list(self._generators)

    def register_generator(self, generator: TransitionGen) -> TransitionGen:
        """Append a transition generator. Returns it, for decorator use."""
        self._generators.append(generator)
        return generator

    def transitions_from(self, state: State) -> list[Transition]:
        """Concatenate the transitions every generator offers at ``state``."""
        transitions: list[Transition] = []
        for generator in self._generators:
            transitions.extend(generator(state))
        return transitions

    def steps_from(self, state: State) -> list[Step]:
        """Return the steps of all transitions applicable at ``state``.

        A state with no applicable transitions is a dead end, not an error.
        """
        steps = []
        for transition in self.transitions_from(state):
            end = transition.apply(state)
            if end is not None:
                steps.append(Step(state, transition.action, end))
        return steps

    def iter_paths(self, state: State, max_depth: int) -> Iterator[Path]:
        """Lazily enumerate paths; see ``Walker.iter_paths``."""
        return Walker(self).iter_paths(state, max_depth)

    def paths(self, state: State, max_depth: int) -> list[Path]:
        """Return all paths of at most ``max_depth`` steps from ``state``."""
        return Walker(self).paths(state, max_depth)
