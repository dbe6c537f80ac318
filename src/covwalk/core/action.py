"""Action: the named, optionally parameterized test stimulus."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, eq=False)
class Action:
    """An action specifies what to execute on the system under test.

    The name is rendered once, at construction, by applying ``format`` to
    ``args`` with %-formatting. Identity is the rendered name: two actions
    with equal names are equal, whatever their format and arguments.

        Action("play")
        Action("addsong(%d)", (3,))       # name == "addsong(3)"
        Action("addsong(%d)", 3)          # a single argument may be passed bare
        Action.create("press %s", "play")  # name == "press play"
    """

    format: str
    args: tuple[Any, ...] = ()
    name: str = field(init=False)

    def __post_init__(self) -> None:
        if isinstance(self.args, list):
            object.__setattr__(self, "args", tuple(self.args))
        elif not isinstance(self.args, tuple):
            object.__setattr__(self, "args", (self.args,))
        name = self.format % self.args if self.args else self.format
        object.__setattr__(self, "name", name)

    @classmethod
    def create(cls, format: str, *args: Any) -> Action:
        """Create an action from a format string and its arguments."""
        return cls(format=format, args=args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Action({self.name!r})"
