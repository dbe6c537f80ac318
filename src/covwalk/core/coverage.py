"""Coverage functions.

A coverage function maps a path to the coverage items it exercises. Items
are plain strings and need not be unique within the returned list. The
Coverer unions the items of every registered function.

Combination ("k-gram") criteria produce one item for every contiguous run
of 1..N steps, joining the per-step strings of the run with SEPARATOR.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from covwalk.core.state import render
from covwalk.core.step import Path

# Never occurs in action names or state renderings.
SEPARATOR = "\x00"

CoverageFunction = Callable[[Path], list[str]]


class CoverageKind(str, Enum):
    """Built-in coverage criteria."""

    ACTIONS = "actions"
    ACTION_FORMATS = "action_formats"
    ACTION_COMBINATIONS = "action_combinations"
    ACTION_FORMAT_COMBINATIONS = "action_format_combinations"
    STATES = "states"
    STATE_COMBINATIONS = "state_combinations"
    STATE_ACTIONS = "state_actions"

    @property
    def uses_combinations(self) -> bool:
        return self in (
            CoverageKind.ACTION_COMBINATIONS,
            CoverageKind.ACTION_FORMAT_COMBINATIONS,
            CoverageKind.STATE_COMBINATIONS,
        )


def action_names(path: Path) -> list[str]:
    """One item per step: the action name."""
    return [step.action.name for step in path]


def action_formats(path: Path) -> list[str]:
    """One item per step: the action's format, grouping parameterized actions."""
    return [step.action.format for step in path]


def state_strings(path: Path) -> list[str]:
    """The path's start state and every step's end state."""
    if not path:
        return []
    return [render(path[0].start)] + [render(step.end) for step in path]


def state_action_strings(path: Path) -> list[str]:
    """One item per step: start state and action, "every action from every state"."""
    return [render(step.start) + SEPARATOR + step.action.name for step in path]


def combinations(strings_of: CoverageFunction, max_length: int) -> CoverageFunction:
    """Build a k-gram coverage function over runs of up to ``max_length`` steps.

    Args:
        strings_of: Renders a sub-path to the strings that get joined.
        max_length: Longest run of steps to combine.
    """

    def covered(path: Path) -> list[str]:
        items = []
        for length in range(1, max_length + 1):
            for first in range(len(path) - length + 1):
                items.append(SEPARATOR.join(strings_of(path[first:first + length])))
        return items

    return covered


def action_combinations(max_length: int) -> CoverageFunction:
    return combinations(action_names, max_length)


def action_format_combinations(max_length: int) -> CoverageFunction:
    return combinations(action_formats, max_length)


def state_combinations(max_length: int) -> CoverageFunction:
    """Runs of 1..N steps, each rendered as the states the run visits."""
    return combinations(state_strings, max_length)
