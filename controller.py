"""Glue between the gesture classifier and the simulation."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from gesture import Gesture, GestureClassifier
from simulation import GameSimulation, GameState, ScoreCallback

logger = logging.getLogger(__name__)


class GameController:
    """Turn one gesture per frame into simulation input.

    A closed fist flaps for as long as it is held (the simulation rate-limits
    the impulses). Once the game is over, only the moment the fist closes
    restarts it, so a fist still clenched from the last flap does nothing.

    The controller also keeps the current score and the in-memory high score
    for the UI.
    """

    def __init__(
        self,
        simulation: Optional[GameSimulation] = None,
        classifier: Optional[GestureClassifier] = None,
        *,
        on_score_change: Optional[ScoreCallback] = None,
        on_game_over: Optional[ScoreCallback] = None,
    ) -> None:
        self.simulation = simulation if simulation is not None else GameSimulation()
        self.classifier = classifier if classifier is not None else GestureClassifier()
        self.simulation.on_score_change = self._handle_score_change
        self.simulation.on_game_over = self._handle_game_over
        self._on_score_change = on_score_change
        self._on_game_over = on_game_over

        self.score = self.simulation.score
        self.high_score = 0
        self.gesture = Gesture.NONE
        self._was_flapping = False

    def update(self, gesture: Gesture) -> GameState:
        """Feed this frame's gesture and return the resulting snapshot."""
        self.gesture = gesture
        flapping = gesture == Gesture.FIST

        if self.simulation.game_over:
            if flapping and not self._was_flapping:
                self.simulation.reset()
        else:
            self.simulation.step(flapping)

        self._was_flapping = flapping
        return self.simulation.snapshot()

    def update_from_landmarks(self, landmarks: Optional[Sequence[Any]]) -> GameState:
        gesture = self.classifier.classify(landmarks)
        if self.classifier.changed:
            logger.debug("Gesture %s -> %s", self.classifier.previous.value, gesture.value)
        return self.update(gesture)

    def restart(self) -> None:
        """Force a new game regardless of the current gesture."""
        self.simulation.reset()

    def _handle_score_change(self, score: int) -> None:
        self.score = score
        if self._on_score_change:
            self._on_score_change(score)

    def _handle_game_over(self, final_score: int) -> None:
        if final_score > self.high_score:
            logger.info("New high score: %d", final_score)
            self.high_score = final_score
        if self._on_game_over:
            self._on_game_over(final_score)


__all__ = ["GameController"]
