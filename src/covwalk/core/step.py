"""Step and Path.

A Step is one realized transition: (start state, action, end state). A Path
is a plain list of Steps in which every step's end state renders equal to
the next step's start state. Paths produced by the Walker always satisfy
this; paths assembled by hand can be checked with ``check_path``.
"""

from __future__ import annotations

from dataclasses import dataclass

from covwalk.core.action import Action
from covwalk.core.state import State, render, same_state
from covwalk.errors import ErrorContext, PathChainError


@dataclass(frozen=True)
class Step:
    """One executed (start, action, end) triple."""

    start: State
    action: Action
    end: State

    def __str__(self) -> str:
        return f"[{self.start}--{self.action}->{self.end}]"


Path = list[Step]


def new_path(*steps: Step) -> Path:
    """Create a path from steps."""
    return list(steps)


def is_chained(path: Path) -> bool:
    """Check that every adjacent pair of steps connects."""
    return all(
        same_state(prev.end, step.start)
        for prev, step in zip(path, path[1:])
    )


def check_path(path: Path, after: Step | None = None) -> None:
    """Validate that a path is chained.

    Args:
        path: Steps to validate.
        after: Optional step the path is meant to continue from.

    Raises:
        PathChainError: If some step does not start where the previous ended.
    """
    prev = after
    for index, step in enumerate(path):
        if prev is not None and not same_state(prev.end, step.start):
            raise PathChainError(
                f"step starts at {step.start} but previous step ended at {prev.end}",
                context=ErrorContext(
                    state=render(step.start),
                    action=step.action.name,
                    step_index=index,
                    extra={"previous_end": render(prev.end)},
                ),
            )
        prev = step


def path_actions(path: Path) -> list[str]:
    """Action names of a path, in order."""
    return [step.action.name for step in path]
