"""covwalk Player Example.

Generates a test sequence for a music player that can play and pause, move
between songs and grow its playlist up to four songs. The goal is to test
every action from every reachable state.

Run with: python3 examples/player/run_player.py
"""

from dataclasses import dataclass

from covwalk import (
    ConsoleReporter,
    Coverer,
    GenerationSession,
    Model,
    on_action,
    when,
)
from covwalk.agent import Advance


# 1. Define the state — anything with a deterministic str()

@dataclass(frozen=True)
class PlayerState:
    playing: bool
    song: int
    songcount: int

    def __str__(self):
        desc = "playing" if self.playing else "paused"
        return f"{desc}-song-{self.song}-of-{self.songcount}"


def set_state(playing, song, songcount):
    return lambda _: PlayerState(playing, song, songcount)


# 2. Define the model — which actions are possible where, and their effect

model = Model()


@model.register_generator
def player(s):
    return when(True,
        on_action("reset").do(set_state(False, 1, 1)),
        when(s.playing,
            on_action("pause").do(set_state(False, s.song, s.songcount))),
        when(not s.playing,
            on_action("play").do(set_state(True, s.song, s.songcount))),
        when(s.song < s.songcount,
            on_action("nextsong").do(set_state(s.playing, s.song + 1, s.songcount))),
        when(s.song > 1,
            on_action("prevsong").do(set_state(s.playing, s.song - 1, s.songcount))),
        when(s.songcount < 4,
            on_action("addsong(%d)", s.songcount + 1).do(
                set_state(s.playing, s.song, s.songcount + 1))),
    )


# 3. Say what to cover, and generate

if __name__ == "__main__":
    coverer = Coverer()
    coverer.cover_state_actions()

    session = GenerationSession(
        model,
        coverer,
        PlayerState(playing=False, song=1, songcount=1),
        max_depth=8,
        advance=Advance.MAX_INCREASE,
        reporter=ConsoleReporter(),
    )
    session.run()
