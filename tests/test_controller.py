import logging

from controller import GameController
from gesture import Gesture
from simulation import GameSimulation, initial_state


def finish_game(controller, gesture=Gesture.OPEN):
    while not controller.simulation.game_over:
        controller.update(gesture)


def test_fist_flaps_while_running():
    controller = GameController()
    snapshot = controller.update(Gesture.FIST)
    assert snapshot.last_flap_tick == 0
    assert snapshot.bird.velocity < 0


def test_other_gestures_do_not_flap():
    for gesture in (Gesture.OPEN, Gesture.NEUTRAL, Gesture.NONE):
        controller = GameController()
        snapshot = controller.update(gesture)
        assert snapshot.bird.velocity > 0
        assert snapshot.tick == 1


def test_held_fist_keeps_flapping_after_cooldown():
    controller = GameController()
    for _ in range(17):
        snapshot = controller.update(Gesture.FIST)
    assert snapshot.last_flap_tick == 16


def test_held_fist_does_not_restart():
    controller = GameController()
    finish_game(controller)

    controller.update(Gesture.FIST)
    assert controller.simulation.game_over is False

    finish_game(controller, Gesture.FIST)
    # Fist was held through the crash, so it is not a fresh closing.
    for _ in range(5):
        controller.update(Gesture.FIST)
    assert controller.simulation.game_over


def test_rising_edge_restarts_after_game_over():
    scores = []
    controller = GameController(on_score_change=scores.append)
    finish_game(controller)

    controller.update(Gesture.OPEN)
    assert controller.simulation.game_over

    snapshot = controller.update(Gesture.FIST)
    assert not snapshot.game_over
    assert snapshot == initial_state()
    assert scores == [0]
    assert controller.score == 0


def test_neutral_and_open_never_restart():
    controller = GameController()
    finish_game(controller)
    for gesture in (Gesture.OPEN, Gesture.NEUTRAL, Gesture.NONE, Gesture.OPEN):
        controller.update(gesture)
    assert controller.simulation.game_over


def test_high_score_tracks_best_game():
    finals = []
    simulation = GameSimulation()
    controller = GameController(simulation, on_game_over=finals.append)

    simulation.state.score = 3
    finish_game(controller)
    assert controller.high_score == 3

    controller.restart()
    simulation.state.score = 1
    finish_game(controller)
    assert controller.high_score == 3
    assert finals == [3, 1]


def test_update_from_landmarks_classifies_first(hand):
    controller = GameController()
    snapshot = controller.update_from_landmarks(hand(0.01))
    assert controller.gesture is Gesture.FIST
    assert controller.classifier.last is Gesture.FIST
    assert snapshot.last_flap_tick == 0

    controller.update_from_landmarks(None)
    assert controller.gesture is Gesture.NONE


def test_gesture_changes_are_logged(hand, caplog):
    controller = GameController()
    with caplog.at_level(logging.DEBUG, logger="controller"):
        controller.update_from_landmarks(hand(0.01))
        controller.update_from_landmarks(hand(0.01))
        controller.update_from_landmarks(hand(0.3))

    messages = [record.getMessage() for record in caplog.records]
    assert messages.count("Gesture NONE -> FIST") == 1
    assert messages.count("Gesture FIST -> OPEN") == 1
