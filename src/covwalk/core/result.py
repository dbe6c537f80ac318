"""GenerationResult dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from covwalk.core.step import Path, path_actions


@dataclass
class GenerationResult:
    """The output of a generation session run."""

    steps: Path = field(default_factory=list)
    coverage: int = 0
    rounds: int = 0
    exhausted: bool = False
    truncated_by_max_steps: bool = False
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    duration_ms: float = 0.0

    @property
    def step_count(self) -> int:
        """Number of executed steps."""
        return len(self.steps)

    @property
    def actions(self) -> list[str]:
        """Names of the executed actions, in order."""
        return path_actions(self.steps)

    def summary(self) -> dict[str, object]:
        """Get summary statistics."""
        return {
            "coverage": self.coverage,
            "steps": self.step_count,
            "rounds": self.rounds,
            "exhausted": self.exhausted,
            "truncated_by_max_steps": self.truncated_by_max_steps,
            "duration_ms": self.duration_ms,
        }
