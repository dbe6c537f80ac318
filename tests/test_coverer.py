"""Tests for coverage accounting and best path search."""

import random

import pytest

from covwalk.agent.coverer import BestPathRandom, CoverageStats, Coverer
from covwalk.core.action import Action
from covwalk.core.coverage import SEPARATOR, CoverageKind
from covwalk.core.step import Step, is_chained
from covwalk.core.walker import Walker
from covwalk.errors import CoverageConfigError, PathChainError


@pytest.fixture
def steps(make_state):
    f1, t1, f2 = make_state(False, 1), make_state(True, 1), make_state(False, 2)
    return {
        "play": Step(f1, Action("play"), t1),
        "pause": Step(t1, Action("pause"), f1),
        "nextsong": Step(f1, Action("nextsong"), f2),
    }


# ============================================================
# Registration
# ============================================================


class TestRegistration:
    def test_no_criteria_covers_nothing(self, steps):
        coverer = Coverer()
        assert coverer.cover_func([steps["play"]]) == []

    def test_criteria_are_unioned(self, steps):
        coverer = Coverer()
        coverer.cover_actions()
        coverer.cover_action_formats()
        assert coverer.cover_func([steps["play"]]) == ["play", "play"]

    @pytest.mark.parametrize("kind", list(CoverageKind))
    def test_register_every_kind(self, kind, steps):
        coverer = Coverer()
        coverer.register_coverage(kind, 2)
        assert coverer.cover_func([steps["play"], steps["pause"]])

    def test_register_by_string(self, steps):
        coverer = Coverer()
        coverer.register_coverage("actions")
        assert coverer.cover_func([steps["play"]]) == ["play"]

    def test_unknown_kind(self):
        with pytest.raises(CoverageConfigError, match="Unknown coverage kind"):
            Coverer().register_coverage("transitions")

    @pytest.mark.parametrize("length", [0, -2])
    def test_bad_combination_length(self, length):
        with pytest.raises(CoverageConfigError, match="positive integer"):
            Coverer().cover_action_combinations(length)

    def test_history_window_grows_to_longest_combination(self):
        coverer = Coverer()
        assert coverer.history_window == 0
        coverer.cover_action_combinations(3)
        coverer.cover_state_combinations(2)
        assert coverer.history_window == 3
        coverer.cover_state_actions()
        assert coverer.history_window == 3

    def test_custom_function(self, steps):
        coverer = Coverer()
        coverer.add_coverage_function(lambda path: [f"len={len(path)}"], history_window=4)
        assert coverer.cover_func([steps["play"]]) == ["len=1"]
        assert coverer.history_window == 4


# ============================================================
# Accounting
# ============================================================


class TestAccounting:
    def test_mark_covered_does_not_update(self, steps):
        coverer = Coverer()
        coverer.cover_actions()
        coverer.mark_covered(steps["play"])
        assert coverer.coverage() == 0
        coverer.update_coverage()
        assert coverer.coverage() == 1
        assert coverer.covered_items() == {"play"}

    def test_update_without_history_is_noop(self):
        coverer = Coverer()
        coverer.cover_states()
        coverer.update_coverage()
        assert coverer.coverage() == 0
        assert coverer.covered_items() == set()

    def test_update_is_idempotent(self, steps):
        coverer = Coverer()
        coverer.cover_state_actions()
        coverer.mark_covered(steps["play"], steps["pause"])
        coverer.update_coverage()
        first = coverer.covered_items()
        coverer.update_coverage()
        assert coverer.covered_items() == first

    def test_coverage_is_monotonic(self, player_model, initial_state):
        coverer = Coverer()
        coverer.cover_action_combinations(2)
        previous = coverer.coverage()
        for path in player_model.paths(initial_state, 3)[:6]:
            coverer.mark_covered(*path)
            coverer.update_coverage()
            assert coverer.coverage() >= previous
            previous = coverer.coverage()

    def test_counts_occurrences(self, steps):
        coverer = Coverer()
        coverer.cover_actions()
        coverer.mark_covered(steps["play"], steps["pause"], steps["play"])
        coverer.update_coverage()
        assert coverer.cover_count("play") == 2
        assert coverer.cover_count("pause") == 1
        assert coverer.cover_count("nextsong") == 0

    def test_combinations_span_marking_batches(self, steps):
        coverer = Coverer()
        coverer.cover_action_combinations(2)
        coverer.mark_covered(steps["play"])
        coverer.update_coverage()
        coverer.mark_covered(steps["pause"])
        coverer.update_coverage()
        assert "play" + SEPARATOR + "pause" in coverer.covered_items()

    def test_covered_path_is_a_copy(self, steps):
        coverer = Coverer()
        coverer.mark_covered(steps["play"])
        coverer.covered_path.append(steps["pause"])
        assert coverer.covered_path == [steps["play"]]

    def test_strict_rejects_broken_chain(self, steps):
        coverer = Coverer(strict=True)
        coverer.mark_covered(steps["play"], steps["pause"])
        with pytest.raises(PathChainError):
            coverer.mark_covered(steps["pause"])
        assert coverer.covered_path == [steps["play"], steps["pause"]]

    def test_lenient_accepts_broken_chain(self, steps):
        coverer = Coverer()
        coverer.mark_covered(steps["play"])
        coverer.mark_covered(steps["play"])
        assert len(coverer.covered_path) == 2


# ============================================================
# Estimation
# ============================================================


class TestEstimateIncrease:
    def test_fresh_coverer(self, steps):
        coverer = Coverer()
        coverer.cover_actions()
        stats = coverer.estimate_increase([steps["play"], steps["pause"], steps["play"]])
        assert stats == CoverageStats(max_step=1, max_increase=2, first_step=0, first_increase=1)

    def test_skips_covered_items(self, steps):
        coverer = Coverer()
        coverer.cover_actions()
        coverer.mark_covered(steps["play"])
        coverer.update_coverage()
        stats = coverer.estimate_increase([steps["play"], steps["pause"]])
        assert stats == CoverageStats(max_step=1, max_increase=1, first_step=1, first_increase=1)

    def test_no_increase(self, steps):
        coverer = Coverer()
        coverer.cover_actions()
        coverer.mark_covered(steps["play"])
        coverer.update_coverage()
        stats = coverer.estimate_increase([steps["play"]])
        assert stats == CoverageStats(max_step=-1, max_increase=0, first_step=-1, first_increase=0)

    def test_empty_path(self):
        coverer = Coverer()
        coverer.cover_states()
        assert coverer.estimate_increase([]).max_increase == 0

    def test_history_window_counts_boundary_combinations(self, steps):
        coverer = Coverer()
        coverer.cover_action_combinations(2)
        coverer.mark_covered(steps["play"])
        coverer.update_coverage()
        stats = coverer.estimate_increase([steps["pause"]])
        # "pause" and "play\0pause"
        assert stats.max_increase == 2
        assert stats.first_step == 0
        assert stats.first_increase == 2
        assert stats.max_step == 0

    def test_does_not_mutate(self, steps):
        coverer = Coverer()
        coverer.cover_states()
        coverer.estimate_increase([steps["play"]])
        assert coverer.coverage() == 0
        assert coverer.covered_path == []


# ============================================================
# Best path
# ============================================================


class TestBestPath:
    def test_cover_actions(self, player_model, initial_state):
        coverer = Coverer()
        coverer.cover_action_combinations(1)
        path, stats = coverer.best_path(player_model, initial_state, 6)
        assert len(path) == 6
        assert stats.max_increase == 4
        assert stats.max_step == 3
        covered = {step.action.name for step in path[:stats.max_step + 1]}
        assert covered == {"play", "pause", "nextsong", "prevsong"}

    def test_cover_states(self, player_model, initial_state):
        coverer = Coverer()
        coverer.cover_states()
        path, stats = coverer.best_path(player_model, initial_state, 8)
        assert len(path) == 8
        assert stats.max_increase == 6
        assert stats.max_step == 4
        assert coverer.covered_items() == set()
        coverer.mark_covered(*path[:stats.max_step + 1])
        coverer.update_coverage()
        assert len(coverer.covered_items()) == 6

    def test_incremental_state_action_loop(self, player_model, initial_state):
        coverer = Coverer()
        coverer.cover_state_actions()
        state = initial_state
        executed = 0
        while True:
            path, stats = coverer.best_path(player_model, state, 6)
            if path is None:
                break
            assert is_chained(path)
            assert stats.max_increase > 0
            for step in path[:stats.first_step + 1]:
                executed += 1
                coverer.mark_covered(step)
                coverer.update_coverage()
            state = path[stats.first_step].end
        assert coverer.coverage() == 14
        assert executed == 14

    def test_exhausted_returns_none(self, player_model, initial_state):
        coverer = Coverer()
        coverer.cover_actions()
        path, stats = coverer.best_path(player_model, initial_state, 6)
        coverer.mark_covered(*path)
        coverer.update_coverage()
        assert coverer.best_path(player_model, path[-1].end, 6) == (None, None)

    def test_no_criteria_returns_none(self, player_model, initial_state):
        assert Coverer().best_path(player_model, initial_state, 3) == (None, None)

    def test_dead_end_returns_none(self, dead_end_model):
        coverer = Coverer()
        coverer.cover_states()
        assert coverer.best_path(dead_end_model, "stopped", 4) == (None, None)

    def test_dead_end_with_pending_history_returns_none(self, dead_end_model):
        coverer = Coverer()
        coverer.cover_action_combinations(2)
        step = Step("running", Action("stop"), "stopped")
        coverer.mark_covered(step)
        # Not updated yet: the history alone counts as new coverage.
        assert coverer.estimate_increase([]).max_increase > 0
        assert coverer.best_path(dead_end_model, "stopped", 3) == (None, None)

    def test_prefers_faster_max_increase(self, dead_end_model):
        coverer = Coverer()
        coverer.cover_actions()
        path, stats = coverer.best_path(dead_end_model, "running", 3)
        # idle, stop covers both actions at step 1; idle, idle, stop only at step 2
        assert [step.action.name for step in path] == ["idle", "stop"]
        assert stats.max_step == 1

    def test_accepts_filtered_walker(self, player_model, initial_state):
        coverer = Coverer()
        coverer.cover_actions()
        walker = Walker(player_model, step_filter=lambda s: [x for x in s if x.action.name != "play"])
        path, stats = coverer.best_path(walker, initial_state, 4)
        assert "play" not in {step.action.name for step in path}
        assert stats.max_increase == 2

    def test_deterministic_without_randomness(self, player_model, initial_state):
        results = []
        for _ in range(2):
            coverer = Coverer()
            coverer.cover_state_actions()
            path, _stats = coverer.best_path(player_model, initial_state, 5)
            results.append([step.action.name for step in path])
        assert results[0] == results[1]


class TestRandomness:
    @pytest.mark.parametrize("mode", list(BestPathRandom)[1:])
    def test_seeded_search_is_reproducible(self, player_model, initial_state, mode):
        results = []
        for _ in range(2):
            coverer = Coverer(seed=42, randomness=mode)
            coverer.cover_state_actions()
            path, stats = coverer.best_path(player_model, initial_state, 5)
            assert stats.max_increase > 0
            results.append([step.action.name for step in path])
        assert results[0] == results[1]

    def test_set_best_path_random(self, player_model, initial_state):
        a, b = Coverer(), Coverer()
        for coverer in (a, b):
            coverer.cover_states()
            coverer.set_best_path_random(7, BestPathRandom.AMONG_MAX_INCREASE)
        assert a.randomness is BestPathRandom.AMONG_MAX_INCREASE
        path_a, _ = a.best_path(player_model, initial_state, 6)
        path_b, _ = b.best_path(player_model, initial_state, 6)
        assert path_a == path_b

    def test_among_max_increase_keeps_max(self, player_model, initial_state):
        coverer = Coverer(seed=3, randomness=BestPathRandom.AMONG_MAX_INCREASE)
        coverer.cover_states()
        _path, stats = coverer.best_path(player_model, initial_state, 8)
        assert stats.max_increase == 6

    def test_among_equally_good_keeps_ranking(self, player_model, initial_state):
        coverer = Coverer(seed=11, randomness=BestPathRandom.AMONG_EQUALLY_GOOD)
        coverer.cover_states()
        _path, stats = coverer.best_path(player_model, initial_state, 8)
        assert stats.max_increase == 6
        assert stats.max_step == 4

    def test_any_path_accepts_first_increase(self, player_model, initial_state):
        coverer = Coverer(seed=5, randomness=BestPathRandom.AMONG_ANY_PATH)
        coverer.cover_states()
        path, stats = coverer.best_path(player_model, initial_state, 4)
        assert path is not None
        assert stats.max_increase > 0

    def test_injected_rng(self):
        coverer = Coverer(rng=random.Random(1), randomness=BestPathRandom.AMONG_EQUALLY_GOOD)
        items = list(range(10))
        expected = list(range(10))
        random.Random(1).shuffle(expected)
        coverer.shuffle_paths(items)
        assert items == expected


class TestCoverageStatsRanking:
    def test_higher_max_increase_wins(self):
        better = CoverageStats(max_step=5, max_increase=3, first_step=5, first_increase=1)
        worse = CoverageStats(max_step=0, max_increase=2, first_step=0, first_increase=2)
        assert better.better_than(worse, BestPathRandom.NONE)
        assert not worse.better_than(better, BestPathRandom.AMONG_MAX_INCREASE)

    def test_lower_max_step_wins(self):
        fast = CoverageStats(max_step=1, max_increase=2, first_step=1, first_increase=1)
        slow = CoverageStats(max_step=2, max_increase=2, first_step=0, first_increase=1)
        assert fast.better_than(slow, BestPathRandom.NONE)
        assert not fast.better_than(slow, BestPathRandom.AMONG_MAX_INCREASE)

    def test_lower_first_step_wins(self):
        early = CoverageStats(max_step=2, max_increase=2, first_step=0, first_increase=1)
        late = CoverageStats(max_step=2, max_increase=2, first_step=1, first_increase=1)
        assert early.better_than(late, BestPathRandom.AMONG_EQUALLY_GOOD)
        assert not early.better_than(late, BestPathRandom.AMONG_FASTEST_MAX_INCREASE)

    def test_higher_first_increase_wins(self):
        big = CoverageStats(max_step=2, max_increase=3, first_step=0, first_increase=2)
        small = CoverageStats(max_step=2, max_increase=3, first_step=0, first_increase=1)
        assert big.better_than(small, BestPathRandom.NONE)
        assert not small.better_than(big, BestPathRandom.NONE)

    def test_full_tie_keeps_incumbent(self):
        stats = CoverageStats(max_step=1, max_increase=1, first_step=1, first_increase=1)
        assert not stats.better_than(CoverageStats(1, 1, 1, 1), BestPathRandom.NONE)
