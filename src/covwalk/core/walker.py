"""Walker: bounded-depth path enumeration.

Enumeration is exponential in branching factor times depth, so the primary
form is lazy. ``Walker.iter_paths`` yields views over a single buffer that
is mutated as the depth-first traversal backtracks:

    for path in walker.iter_paths(state, 4):
        keep.append(list(path))   # copy before advancing the iterator

``Walker.paths`` is the eager form; it copies every yielded path.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from covwalk.core.state import State
from covwalk.core.step import Path, Step

if TYPE_CHECKING:
    from covwalk.core.model import Walkable

# Filters the candidate steps at each depth of the search.
StepFilter = Callable[[list[Step]], list[Step]]


class Walker:
    """Enumerates every path of at most ``max_depth`` steps from a state.

    A path that reaches a dead end before ``max_depth`` is yielded as is
    rather than discarded, so yielded paths can have any length in
    ``[0, max_depth]``. A dead-end start state yields a single empty path.

    An optional step filter prunes candidate steps during the search only;
    the underlying model is unaffected. Because ``Walker.steps_from``
    applies the filter, a filtered Walker can itself be passed to
    ``Coverer.best_path`` in place of the model.
    """

    def __init__(self, model: Walkable, step_filter: StepFilter | None = None) -> None:
        self.model = model
        self.step_filter = step_filter

    def set_step_filter(self, step_filter: StepFilter | None) -> None:
        self.step_filter = step_filter

    def steps_from(self, state: State) -> list[Step]:
        steps = self.model.steps_from(state)
        if self.step_filter is not None:
            steps = self.step_filter(steps)
        return steps

    def iter_paths(self, state: State, max_depth: int) -> Iterator[Path]:
        """Lazily yield every path from ``state``.

        The yielded list is reused: it is only valid until the iterator is
        advanced. Copy it to retain it.
        """
        buffer: Path = []
        yield from self._walk(buffer, state, max_depth)

    def _walk(self, buffer: Path, state: State, remaining: int) -> Iterator[Path]:
        if remaining <= 0:
            yield buffer
            return
        next_steps = self.steps_from(state)
        if not next_steps:
            yield buffer
            return
        for step in next_steps:
            buffer.append(step)
            yield from self._walk(buffer, step.end, remaining - 1)
            buffer.pop()

    def paths(self, state: State, max_depth: int) -> list[Path]:
        """Return owned copies of every path from ``state``."""
        return [list(path) for path in self.iter_paths(state, max_depth)]
