"""Pytest fixtures for covwalk tests.

The player model: a player is either playing or paused and has songs 1..3.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from covwalk import Action, Model, Transition, on_action, when


@dataclass(frozen=True)
class PlayerState:
    playing: bool
    song: int

    def __str__(self) -> str:
        return f"{{playing:{str(self.playing).lower()},song:{self.song}}}"


def new_player_model_with_raw_transitions() -> Model:
    def play(s):
        if s.playing:
            return None
        return PlayerState(playing=True, song=s.song)

    def pause(s):
        if not s.playing:
            return None
        return PlayerState(playing=False, song=s.song)

    def nextsong(s):
        if s.song >= 3:
            return None
        return PlayerState(playing=s.playing, song=s.song + 1)

    def prevsong(s):
        if s.song <= 1:
            return None
        return PlayerState(playing=s.playing, song=s.song - 1)

    model = Model()
    model.register_generator(lambda current: [
        Transition(Action("play"), play),
        Transition(Action("pause"), pause),
        Transition(Action("nextsong"), nextsong),
        Transition(Action("prevsong"), prevsong),
    ])
    return model


def new_player_model_with_when_on_action() -> Model:
    def set_state(playing, song):
        return lambda _: PlayerState(playing, song)

    model = Model()

    @model.register_generator
    def player(s):
        return when(True,
            when(s.playing,
                on_action("pause").do(set_state(False, s.song))),
            when(not s.playing,
                on_action("play").do(set_state(True, s.song))),
            when(s.song < 3,
                on_action("nextsong").do(set_state(s.playing, s.song + 1))),
            when(s.song > 1,
                on_action("prevsong").do(set_state(s.playing, s.song - 1))),
        )

    return model


PLAYER_MODELS = {
    "raw": new_player_model_with_raw_transitions,
    "when": new_player_model_with_when_on_action,
}


@pytest.fixture(params=sorted(PLAYER_MODELS))
def player_model(request) -> Model:
    """The player model, once per way of writing it."""
    return PLAYER_MODELS[request.param]()


@pytest.fixture
def initial_state() -> PlayerState:
    return PlayerState(playing=False, song=1)


@pytest.fixture
def dead_end_model() -> Model:
    """A model where "stop" leads to a state with no way out."""
    model = Model()

    @model.register_generator
    def gen(s):
        if s == "stopped":
            return []
        return [
            Transition(Action("stop"), lambda _: "stopped"),
            Transition(Action("idle"), lambda cur: cur if cur == "running" else None),
        ]

    return model


@pytest.fixture
def make_state():
    """The PlayerState class, for building states in tests."""
    return PlayerState


@pytest.fixture
def raw_player_model() -> Model:
    return new_player_model_with_raw_transitions()


@pytest.fixture
def covwalk_logger():
    """The covwalk logger, restored to its previous handlers and level afterwards."""
    logger = logging.getLogger("covwalk")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    for handler in saved_handlers:
        logger.removeHandler(handler)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in saved_handlers:
        logger.addHandler(handler)
    logger.setLevel(saved_level)
