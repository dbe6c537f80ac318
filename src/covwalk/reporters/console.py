"""Console reporter for terminal output."""

from __future__ import annotations

import sys
from typing import TextIO

from covwalk.core.result import GenerationResult
from covwalk.core.step import Step


class ConsoleReporter:
    """Prints generated test steps and coverage progress.

    Output looks like::

        # 1: coverage: 0, state: {playing:false,song:1}, test: play
        # 2: coverage: 1, state: {playing:true,song:1}, test: pause
        ...
        # final coverage: 14, steps: 14, rounds: 9 (exhausted)
    """

    # ANSI color codes
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    def __init__(self, file: TextIO = sys.stdout, color: bool = True) -> None:
        self.file = file
        self.color = color

    def _c(self, text: str, code: str) -> str:
        """Apply color if enabled."""
        if self.color:
            return f"{code}{text}{self.RESET}"
        return text

    def report_step(self, index: int, step: Step, coverage: int) -> None:
        """Print one executed step with the coverage reached before it."""
        print(
            f"{self._c(f'# {index}:', self.DIM)} coverage: {coverage}, "
            f"state: {step.start}, test: {self._c(step.action.name, self.CYAN)}",
            file=self.file,
        )

    def report(self, result: GenerationResult) -> None:
        """Print the final summary of a session."""
        if result.exhausted:
            status = self._c("exhausted", self.GREEN)
        else:
            status = self._c("truncated by max_steps", self.YELLOW)
        print(
            f"\n{self._c('# final coverage:', self.BOLD)} {result.coverage}, "
            f"steps: {result.step_count}, rounds: {result.rounds} ({status})",
            file=self.file,
        )
