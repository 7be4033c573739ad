import logging
import sys
from collections import defaultdict
from types import SimpleNamespace

import pygame
import pytest

from game import FloppyBirdGame
from gesture import Gesture


def pressed(*keys):
    state = defaultdict(bool)
    for key in keys:
        state[key] = True
    return state


class FakeTracker:
    landmarks = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.stopped = False

    def latest_landmarks(self):
        return self.landmarks

    def stop(self):
        self.stopped = True


class BrokenTracker:
    def __init__(self, **kwargs):
        raise RuntimeError("Unable to open webcam. Ensure a camera is connected.")


@pytest.fixture
def no_keys(monkeypatch):
    monkeypatch.setattr(pygame.key, "get_pressed", lambda: pressed())


@pytest.fixture
def make_game(monkeypatch):
    games = []

    def factory(tracker_cls=None, **kwargs):
        if tracker_cls is not None:
            monkeypatch.setitem(sys.modules, "hand_control", SimpleNamespace(HandTracker=tracker_cls))
            kwargs.setdefault("enable_hand_control", True)
        else:
            kwargs.setdefault("enable_hand_control", False)
        game = FloppyBirdGame(seed=1, **kwargs)
        games.append(game)
        return game

    yield factory
    for game in games:
        game._shutdown()


def finish(game):
    while not game.controller.simulation.game_over:
        game.controller.update(Gesture.OPEN)


def test_keyboard_only_game_has_no_hand(make_game, no_keys):
    game = make_game()
    assert game.tracker is None

    snapshot = game.update()

    assert game.controller.gesture is Gesture.NONE
    assert snapshot.bird.velocity > 0


@pytest.mark.parametrize("key", [pygame.K_SPACE, pygame.K_UP])
def test_held_key_counts_as_fist(make_game, monkeypatch, key):
    game = make_game()
    monkeypatch.setattr(pygame.key, "get_pressed", lambda: pressed(key))

    snapshot = game.update()

    assert game.controller.gesture is Gesture.FIST
    assert snapshot.last_flap_tick == 0
    assert snapshot.bird.velocity < 0


def test_broken_tracker_falls_back_to_keyboard(make_game, no_keys, caplog):
    with caplog.at_level(logging.WARNING, logger="game"):
        game = make_game(BrokenTracker)

    assert game.tracker is None
    assert "Hand control disabled" in caplog.text

    game.update()
    assert game.controller.gesture is Gesture.NONE
    assert game.controller.simulation.state.tick == 1


def test_tracker_landmarks_drive_the_game(make_game, no_keys, hand):
    FakeTracker.landmarks = hand(0.01)
    try:
        game = make_game(FakeTracker, camera_index=2)
        tracker = game.tracker
        assert tracker.kwargs["camera_index"] == 2

        snapshot = game.update()

        assert game.controller.gesture is Gesture.FIST
        assert snapshot.last_flap_tick == 0
    finally:
        FakeTracker.landmarks = None

    game._shutdown()
    assert tracker.stopped
    assert game.tracker is None


def test_r_key_restarts(make_game, no_keys):
    game = make_game()
    finish(game)

    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_r))
    game.process_input()

    assert not game.controller.simulation.game_over
    assert game.controller.simulation.state.tick == 0


def test_escape_quits(make_game, no_keys):
    game = make_game()
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    with pytest.raises(SystemExit):
        game.process_input()
