"""Fixed-step Flappy Bird simulation.

One call to :meth:`GameSimulation.step` advances the world by one frame.
Nothing here knows about pygame, cameras or wall-clock time, so the same
sequence of inputs always produces the same game (given the same ``rng``).
"""

from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Playfield
WIDTH = 400
HEIGHT = 600
GROUND_HEIGHT = 50
GROUND_Y = HEIGHT - GROUND_HEIGHT

# Bird physics, per tick
GRAVITY = 0.5
FLAP_STRENGTH = -9.0
MAX_VELOCITY = 10.0
BIRD_SIZE = 30
BIRD_X = 100
FLAP_COOLDOWN_TICKS = 15

# Rotation is cosmetic only
ROTATION_FACTOR = 3.0
MIN_ROTATION = -30.0
MAX_ROTATION = 90.0

# Pipes
PIPE_WIDTH = 60
PIPE_GAP = 180
PIPE_SPEED = 2
INITIAL_PIPES = ((WIDTH, 200), (WIDTH + 250, 300), (WIDTH + 500, 250))
GAP_MARGIN = 50
GAP_RANGE = GROUND_Y - PIPE_GAP - 100

ScoreCallback = Callable[[int], None]


@dataclass
class Bird:
    x: float = BIRD_X
    y: float = HEIGHT / 2
    velocity: float = 0.0
    rotation: float = 0.0
    size: int = BIRD_SIZE

    @property
    def top(self) -> float:
        return self.y - self.size / 2

    @property
    def bottom(self) -> float:
        return self.y + self.size / 2

    @property
    def left(self) -> float:
        return self.x - self.size / 2

    @property
    def right(self) -> float:
        return self.x + self.size / 2

    def flap(self) -> None:
        self.velocity = FLAP_STRENGTH

    def update(self) -> None:
        self.velocity = max(-MAX_VELOCITY, min(self.velocity + GRAVITY, MAX_VELOCITY))
        self.y += self.velocity
        self.rotation = max(MIN_ROTATION, min(self.velocity * ROTATION_FACTOR, MAX_ROTATION))


@dataclass
class Pipe:
    """One of the recycled obstacle slots.

    ``gap_y`` is the top edge of the opening; the opening spans
    ``[gap_y, gap_y + PIPE_GAP]``. ``generation`` counts how many times the
    slot has been recycled and ``passed`` records whether the current
    generation has already been scored.
    """

    x: float
    gap_y: float
    slot: int
    generation: int = 0
    passed: bool = False
    width: int = PIPE_WIDTH
    gap_size: int = PIPE_GAP

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def gap_bottom(self) -> float:
        return self.gap_y + self.gap_size

    def update(self) -> None:
        self.x -= PIPE_SPEED

    def is_off_screen(self) -> bool:
        return self.x < -self.width

    def recycle(self, gap_y: float) -> None:
        self.x = WIDTH
        self.gap_y = gap_y
        self.generation += 1
        self.passed = False

    def overlaps(self, bird: Bird) -> bool:
        return bird.right > self.x and bird.left < self.right

    def clears(self, bird: Bird) -> bool:
        return bird.top >= self.gap_y and bird.bottom <= self.gap_bottom


@dataclass
class GameState:
    bird: Bird = field(default_factory=Bird)
    pipes: List[Pipe] = field(default_factory=list)
    score: int = 0
    game_over: bool = False
    tick: int = 0
    last_flap_tick: int = -(FLAP_COOLDOWN_TICKS + 1)

    @property
    def passed_pipes(self) -> FrozenSet[Tuple[int, int]]:
        """``(slot, generation)`` of every pipe already scored in its current life."""
        return frozenset((pipe.slot, pipe.generation) for pipe in self.pipes if pipe.passed)


def initial_state() -> GameState:
    pipes = [Pipe(x=x, gap_y=gap_y, slot=slot) for slot, (x, gap_y) in enumerate(INITIAL_PIPES)]
    return GameState(bird=Bird(), pipes=pipes)


class GameSimulation:
    """Bird physics, pipe scrolling, scoring and game-over detection.

    Parameters
    ----------
    on_score_change:
        Called with the new score whenever it changes, including the reset
        to ``0`` on :meth:`reset`.
    on_game_over:
        Called once per game with the final score.
    rng:
        Source for recycled pipe gaps. Pass a seeded ``random.Random`` for
        reproducible runs.
    """

    def __init__(
        self,
        *,
        on_score_change: Optional[ScoreCallback] = None,
        on_game_over: Optional[ScoreCallback] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.on_score_change = on_score_change
        self.on_game_over = on_game_over
        self._rng = rng if rng is not None else random.Random()
        self._state = initial_state()

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def game_over(self) -> bool:
        return self._state.game_over

    def snapshot(self) -> GameState:
        """Return a detached copy of the current state for rendering."""
        return copy.deepcopy(self._state)

    def reset(self) -> None:
        self._state = initial_state()
        logger.info("Game restarted")
        if self.on_score_change:
            self.on_score_change(0)

    def step(self, flap_requested: bool) -> None:
        """Advance the game by exactly one tick."""
        state = self._state
        if state.game_over:
            return

        bird = state.bird
        if flap_requested and state.tick - state.last_flap_tick > FLAP_COOLDOWN_TICKS:
            bird.flap()
            state.last_flap_tick = state.tick
            logger.debug("Flap accepted on tick %d", state.tick)

        bird.update()

        if bird.bottom > GROUND_Y:
            bird.y = GROUND_Y - bird.size / 2
            self._end_game()
            return

        if bird.top < 0:
            bird.y = bird.size / 2
            bird.velocity = 0.0

        for pipe in state.pipes:
            pipe.update()
            if pipe.is_off_screen():
                pipe.recycle(self._random_gap())

        for pipe in state.pipes:
            if not pipe.passed and pipe.right < bird.x:
                pipe.passed = True
                state.score += 1
                if self.on_score_change:
                    self.on_score_change(state.score)

        for pipe in state.pipes:
            if pipe.overlaps(bird) and not pipe.clears(bird):
                self._end_game()
                break

        state.tick += 1

    def _random_gap(self) -> float:
        return self._rng.uniform(GAP_MARGIN, GAP_MARGIN + GAP_RANGE)

    def _end_game(self) -> None:
        state = self._state
        if state.game_over:
            return
        state.game_over = True
        logger.info("Game over with score %d", state.score)
        if self.on_game_over:
            self.on_game_over(state.score)


__all__ = [
    "Bird",
    "GameSimulation",
    "GameState",
    "Pipe",
    "initial_state",
]
