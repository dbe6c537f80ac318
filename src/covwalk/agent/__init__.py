"""Agent module - the online test generation loop."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from covwalk.agent.coverer import BestPathRandom, CoverageStats, Coverer
from covwalk.core.model import Walkable
from covwalk.core.result import GenerationResult
from covwalk.core.state import State
from covwalk.core.step import Path, Step

if TYPE_CHECKING:
    from covwalk.config import CovwalkConfig
    from covwalk.reporters.console import ConsoleReporter

logger = logging.getLogger(__name__)

# Runs one step against the system under test.
Executor = Callable[[Step], object]


class Advance(str, Enum):
    """How much of each best path a session executes before searching again."""

    FIRST_INCREASE = "first_increase"
    MAX_INCREASE = "max_increase"
    FULL_PATH = "full_path"


class GenerationSession:
    """Drives the system under test along paths that increase coverage.

    Each round the session:
    1. Asks the Coverer for the best path from the current state
    2. Executes a prefix of it (see Advance) through the executor, if any
    3. Marks the executed steps covered and recomputes coverage
    4. Continues from the end state of the last executed step

    until no path of ``max_depth`` steps increases coverage, or
    ``max_steps`` steps have been executed.

    Example:
        coverer = Coverer()
        coverer.cover_state_actions()
        session = GenerationSession(model, coverer, initial, executor=run_on_device)
        result = session.run()
        print(result.coverage, result.step_count)
    """

    def __init__(
        self,
        model: Walkable,
        coverer: Coverer,
        state: State,
        max_depth: int = 6,
        advance: Advance = Advance.FIRST_INCREASE,
        executor: Executor | None = None,
        max_steps: int | None = None,
        reporter: ConsoleReporter | None = None,
    ) -> None:
        self.model = model
        self.coverer = coverer
        self.state = state
        self.max_depth = max_depth
        self.advance = Advance(advance)
        self.executor = executor
        self.max_steps = max_steps
        self.reporter = reporter
        self._executed: Path = []
        self._rounds = 0
        self._exhausted = False

    @classmethod
    def from_config(
        cls,
        model: Walkable,
        state: State,
        config: CovwalkConfig,
        executor: Executor | None = None,
        reporter: ConsoleReporter | None = None,
    ) -> GenerationSession:
        """Build a Coverer and a session from configuration.

        Also applies ``config.log_level`` to the covwalk logger.
        """
        from covwalk.config import configure_logging

        configure_logging(config.log_level)
        coverer = Coverer(
            seed=config.seed,
            randomness=BestPathRandom[config.randomness.upper()],
            strict=config.strict_paths,
        )
        for kind in config.coverage:
            coverer.register_coverage(kind, config.combination_length)
        return cls(
            model,
            coverer,
            state,
            max_depth=config.max_depth,
            advance=Advance(config.advance),
            executor=executor,
            max_steps=config.max_steps,
            reporter=reporter,
        )

    @property
    def executed_steps(self) -> Path:
        return list(self._executed)

    @property
    def rounds(self) -> int:
        return self._rounds

    @property
    def exhausted(self) -> bool:
        """True once no path of max_depth steps can increase coverage."""
        return self._exhausted

    def next_path(self) -> tuple[Path, CoverageStats] | tuple[None, None]:
        """Search the best path from the current state."""
        return self.coverer.best_path(self.model, self.state, self.max_depth)

    def prefix(self, path: Path, stats: CoverageStats) -> Path:
        """The part of ``path`` to execute this round."""
        if self.advance is Advance.FIRST_INCREASE:
            return path[:stats.first_step + 1]
        if self.advance is Advance.MAX_INCREASE:
            return path[:stats.max_step + 1]
        return list(path)

    def execute(self, steps: Path) -> None:
        """Execute steps in order, then mark them covered.

        If the executor raises, the steps executed before the failure are
        still marked covered and the state is advanced past them before the
        exception propagates.
        """
        done: Path = []
        try:
            for step in steps:
                if self.executor is not None:
                    self.executor(step)
                done.append(step)
                self._executed.append(step)
                if self.reporter is not None:
                    self.reporter.report_step(len(self._executed), step, self.coverer.coverage())
        finally:
            if done:
                self.coverer.mark_covered(*done)
                self.coverer.update_coverage()
                self.state = done[-1].end

    def _remaining(self) -> int | None:
        if self.max_steps is None:
            return None
        return self.max_steps - len(self._executed)

    def iter_steps(self) -> Iterator[Step]:
        """Run rounds until exhaustion, yielding each executed step."""
        while True:
            remaining = self._remaining()
            if remaining is not None and remaining <= 0:
                logger.info("Stopped after max_steps=%d steps", self.max_steps)
                return
            path, stats = self.next_path()
            if path is None or stats is None:
                self._exhausted = True
                logger.info(
                    "Coverage exhausted at depth %d: coverage %d after %d steps",
                    self.max_depth, self.coverer.coverage(), len(self._executed),
                )
                return
            steps = self.prefix(path, stats)
            if remaining is not None:
                steps = steps[:remaining]
            self._rounds += 1
            logger.debug(
                "Round %d from %s: executing %d of %d steps (%s)",
                self._rounds, self.state, len(steps), len(path), stats,
            )
            self.execute(steps)
            yield from steps

    def run(self) -> GenerationResult:
        """Run the session to the end and summarize it."""
        result = GenerationResult()
        start = time.perf_counter()
        for _ in self.iter_steps():
            pass
        result.steps = self.executed_steps
        result.coverage = self.coverer.coverage()
        result.rounds = self._rounds
        result.exhausted = self._exhausted
        result.truncated_by_max_steps = not self._exhausted
        result.finished_at = datetime.now()
        result.duration_ms = (time.perf_counter() - start) * 1000
        if self.reporter is not None:
            self.reporter.report(result)
        return result


__all__ = [
    "Advance",
    "BestPathRandom",
    "CoverageStats",
    "Coverer",
    "Executor",
    "GenerationSession",
]
