"""Coverage accounting and best path search."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from enum import IntEnum

from covwalk.core import coverage as cov
from covwalk.core.coverage import CoverageFunction, CoverageKind
from covwalk.core.model import Walkable
from covwalk.core.state import State
from covwalk.core.step import Path, Step, check_path
from covwalk.errors import CoverageConfigError, ErrorContext

logger = logging.getLogger(__name__)


class BestPathRandom(IntEnum):
    """How much randomness ``Coverer.best_path`` may use, least to most.

    NONE: deterministic, candidates in enumeration order.
    AMONG_EQUALLY_GOOD: shuffling breaks only full ties.
    AMONG_FASTEST_MAX_INCREASE: indifferent once max_increase and max_step tie.
    AMONG_MAX_INCREASE: indifferent once max_increase ties.
    AMONG_ANY_PATH: the first candidate that increases coverage at all.
    """

    NONE = 0
    AMONG_EQUALLY_GOOD = 1
    AMONG_FASTEST_MAX_INCREASE = 2
    AMONG_MAX_INCREASE = 3
    AMONG_ANY_PATH = 4


@dataclass
class CoverageStats:
    """How a candidate path would increase coverage.

    Attributes:
        max_step: Index of the step after which max_increase is reached.
        max_increase: Number of new items the whole path would cover.
        first_step: Index of the step after which coverage first increases.
        first_increase: Number of new items covered by first_step.
    """

    max_step: int = -1
    max_increase: int = 0
    first_step: int = -1
    first_increase: int = 0

    def better_than(self, other: CoverageStats, randomness: BestPathRandom) -> bool:
        """Check whether these stats rank strictly above ``other``."""
        if self.max_increase != other.max_increase:
            return self.max_increase > other.max_increase
        if randomness >= BestPathRandom.AMONG_MAX_INCREASE:
            return False
        if self.max_step != other.max_step:
            return self.max_step < other.max_step
        if randomness >= BestPathRandom.AMONG_FASTEST_MAX_INCREASE:
            return False
        if self.first_step != other.first_step:
            return self.first_step < other.first_step
        # Full ties keep the earlier candidate; AMONG_EQUALLY_GOOD is served
        # by the shuffle that precedes the scan.
        return self.first_increase > other.first_increase


class Coverer:
    """Tracks what has been covered and finds paths that cover more.

    The Coverer converts paths into coverage items with the registered
    coverage functions, keeps a histogram of the items covered by the test
    history marked so far, estimates how much any candidate path would add,
    and picks the best candidate.

    Example:
        coverer = Coverer()
        coverer.cover_state_actions()
        while True:
            path, stats = coverer.best_path(model, state, 6)
            if path is None:
                break
            executed = path[:stats.first_step + 1]
            coverer.mark_covered(*executed)
            coverer.update_coverage()
            state = executed[-1].end

    A Coverer belongs to one generation session: do not mark steps covered
    while a ``best_path`` scan on the same instance is running.
    """

    def __init__(
        self,
        seed: int | None = None,
        randomness: BestPathRandom = BestPathRandom.NONE,
        rng: random.Random | None = None,
        strict: bool = False,
    ) -> None:
        self._covered_path: Path = []
        self._cover_count: Counter[str] = Counter()
        self._cov_funcs: list[CoverageFunction] = []
        # Trailing history steps re-included when estimating k-gram increases.
        self._history_window = 0
        self._rng = rng if rng is not None else random.Random(seed)
        self._randomness = BestPathRandom(randomness)
        self.strict = strict

    @property
    def covered_path(self) -> Path:
        return list(self._covered_path)

    @property
    def history_window(self) -> int:
        return self._history_window

    @property
    def randomness(self) -> BestPathRandom:
        return self._randomness

    # ── Coverage criteria ──

    def add_coverage_function(self, func: CoverageFunction, history_window: int = 0) -> None:
        """Register a custom coverage function.

        Args:
            func: Maps a path to the items it covers.
            history_window: Steps of history the function needs as context
                when scoring a continuation (its longest combination).
        """
        self._history_window = max(self._history_window, history_window)
        self._cov_funcs.append(func)

    def register_coverage(self, kind: CoverageKind | str, combination_length: int = 1) -> None:
        """Register a built-in coverage criterion.

        Args:
            kind: A CoverageKind member or its string value.
            combination_length: Longest run of steps for combination kinds.

        Raises:
            CoverageConfigError: If the kind is unknown or the length is not
                a positive integer.
        """
        try:
            kind = CoverageKind(kind)
        except ValueError:
            raise CoverageConfigError(
                f"Unknown coverage kind: {kind!r}",
                context=ErrorContext(extra={"valid_kinds": [k.value for k in CoverageKind]}),
            ) from None

        if kind.uses_combinations:
            if not isinstance(combination_length, int) or combination_length < 1:
                raise CoverageConfigError(
                    f"combination_length must be a positive integer, got {combination_length!r}",
                    context=ErrorContext(extra={"kind": kind.value}),
                )

        if kind is CoverageKind.ACTIONS:
            self.add_coverage_function(cov.action_names)
        elif kind is CoverageKind.ACTION_FORMATS:
            self.add_coverage_function(cov.action_formats)
        elif kind is CoverageKind.ACTION_COMBINATIONS:
            self.add_coverage_function(
                cov.action_combinations(combination_length), combination_length
            )
        elif kind is CoverageKind.ACTION_FORMAT_COMBINATIONS:
            self.add_coverage_function(
                cov.action_format_combinations(combination_length), combination_length
            )
        elif kind is CoverageKind.STATES:
            self.add_coverage_function(cov.state_strings)
        elif kind is CoverageKind.STATE_COMBINATIONS:
            self.add_coverage_function(
                cov.state_combinations(combination_length), combination_length
            )
        elif kind is CoverageKind.STATE_ACTIONS:
            self.add_coverage_function(cov.state_action_strings)

        logger.debug(
            "Registered %s coverage (history window %d)", kind.value, self._history_window
        )

    def cover_actions(self) -> None:
        """Cover every action (by name)."""
        self.register_coverage(CoverageKind.ACTIONS)

    def cover_action_formats(self) -> None:
        """Cover every action format, whatever its arguments."""
        self.register_coverage(CoverageKind.ACTION_FORMATS)

    def cover_action_combinations(self, max_length: int) -> None:
        """Cover every sequence of 1..max_length consecutive actions."""
        self.register_coverage(CoverageKind.ACTION_COMBINATIONS, max_length)

    def cover_action_format_combinations(self, max_length: int) -> None:
        self.register_coverage(CoverageKind.ACTION_FORMAT_COMBINATIONS, max_length)

    def cover_states(self) -> None:
        """Cover every state."""
        self.register_coverage(CoverageKind.STATES)

    def cover_state_combinations(self, max_length: int) -> None:
        self.register_coverage(CoverageKind.STATE_COMBINATIONS, max_length)

    def cover_state_actions(self) -> None:
        """Cover every action from every state."""
        self.register_coverage(CoverageKind.STATE_ACTIONS)

    def cover_func(self, path: Path) -> list[str]:
        """Items covered by ``path`` under all registered criteria."""
        items: list[str] = []
        for func in self._cov_funcs:
            items.extend(func(path))
        return items

    # ── Accounting ──

    def mark_covered(self, *steps: Step) -> None:
        """Append executed steps to the covered history.

        Call ``update_coverage`` afterwards; several calls can be batched.

        Raises:
            PathChainError: In strict mode, if the steps do not continue
                the covered history.
        """
        if self.strict:
            after = self._covered_path[-1] if self._covered_path else None
            check_path(list(steps), after=after)
        self._covered_path.extend(steps)

    def update_coverage(self) -> None:
        """Recompute covered items from the whole covered history.

        This is a full recompute: combination items can span the boundary
        between old history and newly marked steps.
        """
        self._cover_count = Counter(self.cover_func(self._covered_path))

    def coverage(self) -> int:
        """Number of distinct covered items."""
        return len(self._cover_count)

    def covered_items(self) -> set[str]:
        return set(self._cover_count)

    def cover_count(self, item: str) -> int:
        """How many times ``item`` occurs in the covered history."""
        return self._cover_count[item]

    # ── Estimation and search ──

    def estimate_increase(self, path: Path) -> CoverageStats:
        """Estimate how much ``path`` would increase coverage if appended.

        Nothing is mutated. The last ``history_window`` covered steps are
        prepended as context so that combination items spanning the history
        and the candidate are counted.
        """
        stats = CoverageStats()
        history_len = min(self._history_window, len(self._covered_path))
        context = self._covered_path[len(self._covered_path) - history_len:]
        windowed = context + list(path)

        covered = self._cover_count
        stats.max_increase = len(
            {item for item in self.cover_func(windowed) if item not in covered}
        )
        if stats.max_increase == 0:
            return stats

        seen_new: set[str] = set()
        for i in range(history_len, len(windowed)):
            seen_new.update(
                item for item in self.cover_func(windowed[:i + 1]) if item not in covered
            )
            if stats.first_step == -1 and seen_new:
                stats.first_step = i - history_len
                stats.first_increase = len(seen_new)
            if len(seen_new) == stats.max_increase:
                stats.max_step = i - history_len
                break
        return stats

    def set_best_path_random(self, seed: int, randomness: BestPathRandom) -> None:
        """Use a fresh generator seeded with ``seed`` and the given randomness."""
        self._rng = random.Random(seed)
        self._randomness = BestPathRandom(randomness)

    def shuffle_paths(self, paths: list[Path]) -> None:
        """Shuffle candidate paths in place with the Coverer's own generator."""
        self._rng.shuffle(paths)

    def best_path(
        self, model: Walkable, state: State, max_depth: int
    ) -> tuple[Path, CoverageStats] | tuple[None, None]:
        """Find the path of at most ``max_depth`` steps that increases coverage most.

        Candidates are ranked by, in order: higher max_increase, lower
        max_step, lower first_step, higher first_increase; the first
        candidate wins full ties. The randomness mode decides where the
        ranking stops caring.

        Returns:
            The best path and its stats, or (None, None) if no path of this
            depth increases coverage. The latter means the coverage
            objective is exhausted; it is not an error.
        """
        paths = model.paths(state, max_depth)
        if self._randomness != BestPathRandom.NONE:
            self.shuffle_paths(paths)

        best_path: Path | None = None
        best: CoverageStats | None = None
        for path in paths:
            if not path:
                continue
            est = self.estimate_increase(path)
            if est.max_increase == 0:
                continue
            if best is None:
                best_path, best = path, est
                if self._randomness >= BestPathRandom.AMONG_ANY_PATH:
                    break
                continue
            if est.better_than(best, self._randomness):
                best_path, best = path, est

        logger.debug(
            "best_path from %s: %d candidates at depth %d, best %s",
            state, len(paths), max_depth, best,
        )
        if not best_path or best is None:
            return None, None
        return best_path, best
