"""Pygame front end for the gesture-controlled Flappy Bird game."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

import pygame

from controller import GameController
from gesture import Gesture
from simulation import (
    GROUND_HEIGHT,
    GROUND_Y,
    HEIGHT,
    WIDTH,
    Bird,
    GameSimulation,
    GameState,
    Pipe,
)

logger = logging.getLogger(__name__)

FPS = 60

SKY_COLOR = (135, 206, 235)
CLOUD_COLOR = (255, 255, 255, 153)
BIRD_COLOR = (255, 215, 0)
BIRD_OUTLINE = (255, 165, 0)
BEAK_COLOR = (255, 99, 71)
WING_COLOR = (255, 179, 71)
PIPE_COLOR = (34, 139, 34)
PIPE_HIGHLIGHT = (50, 205, 50)
GROUND_COLOR = (222, 184, 135)
GROUND_STRIPE = (205, 133, 63)
TEXT_COLOR = (255, 255, 255)
OUTLINE_COLOR = (0, 0, 0)
HIGHLIGHT_TEXT = (255, 215, 0)
OVERLAY_COLOR = (0, 0, 0, 178)

PIPE_CAP_HEIGHT = 30
PIPE_CAP_OVERHANG = 5

GESTURE_LABELS = {
    Gesture.FIST: ("FIST - FLAPPING!", (0, 255, 0)),
    Gesture.OPEN: ("OPEN - FALLING", (255, 255, 0)),
    Gesture.NEUTRAL: ("NEUTRAL", (255, 165, 0)),
    Gesture.NONE: ("NO HAND", (255, 0, 0)),
}

# (center x, center y, radius) circles making up each cloud
CLOUDS = (
    ((80, 100, 20), (100, 95, 25), (120, 100, 20)),
    ((280, 150, 18), (300, 145, 22), (320, 150, 18)),
    ((150, 200, 15), (165, 197, 18), (180, 200, 15)),
)


@dataclass
class Fonts:
    large: pygame.font.Font
    medium: pygame.font.Font
    small: pygame.font.Font

    @classmethod
    def default(cls) -> "Fonts":
        if not pygame.font.get_init():
            pygame.font.init()
        return cls(
            large=pygame.font.SysFont("arial", 48, bold=True),
            medium=pygame.font.SysFont("arial", 32, bold=True),
            small=pygame.font.SysFont("arial", 20),
        )


def _draw_clouds(surface: pygame.Surface) -> None:
    layer = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
    for cloud in CLOUDS:
        for cx, cy, radius in cloud:
            pygame.draw.circle(layer, CLOUD_COLOR, (cx, cy), radius)
    surface.blit(layer, (0, 0))


def _draw_pipe(surface: pygame.Surface, pipe: Pipe) -> None:
    x = int(pipe.x)
    top_height = int(pipe.gap_y)
    bottom_y = int(pipe.gap_bottom)
    bottom_height = GROUND_Y - bottom_y

    pygame.draw.rect(surface, PIPE_COLOR, (x, 0, pipe.width, top_height))
    pygame.draw.rect(
        surface,
        PIPE_COLOR,
        (x - PIPE_CAP_OVERHANG, top_height - PIPE_CAP_HEIGHT, pipe.width + 2 * PIPE_CAP_OVERHANG, PIPE_CAP_HEIGHT),
    )
    pygame.draw.rect(surface, PIPE_HIGHLIGHT, (x + 5, 0, 10, max(top_height - PIPE_CAP_HEIGHT, 0)))

    pygame.draw.rect(surface, PIPE_COLOR, (x, bottom_y, pipe.width, bottom_height))
    pygame.draw.rect(
        surface,
        PIPE_COLOR,
        (x - PIPE_CAP_OVERHANG, bottom_y, pipe.width + 2 * PIPE_CAP_OVERHANG, PIPE_CAP_HEIGHT),
    )
    pygame.draw.rect(
        surface,
        PIPE_HIGHLIGHT,
        (x + 5, bottom_y + PIPE_CAP_HEIGHT, 10, max(bottom_height - PIPE_CAP_HEIGHT, 0)),
    )


def _draw_ground(surface: pygame.Surface) -> None:
    pygame.draw.rect(surface, GROUND_COLOR, (0, GROUND_Y, WIDTH, GROUND_HEIGHT))
    for x in range(0, WIDTH, 20):
        pygame.draw.line(surface, GROUND_STRIPE, (x, GROUND_Y), (x, HEIGHT), 2)


def _draw_bird(surface: pygame.Surface, bird: Bird) -> None:
    # Draw upright on a scratch surface, then rotate; pygame rotates counter-clockwise.
    extent = bird.size + 12
    sprite = pygame.Surface((extent * 2, extent * 2), pygame.SRCALPHA)
    cx = cy = extent
    radius = bird.size // 2

    pygame.draw.circle(sprite, BIRD_COLOR, (cx, cy), radius)
    pygame.draw.circle(sprite, BIRD_OUTLINE, (cx, cy), radius, 2)
    pygame.draw.circle(sprite, TEXT_COLOR, (cx + 5, cy - 5), 5)
    pygame.draw.circle(sprite, OUTLINE_COLOR, (cx + 6, cy - 4), 3)
    pygame.draw.polygon(
        sprite,
        BEAK_COLOR,
        [(cx + radius - 5, cy), (cx + radius + 5, cy - 3), (cx + radius + 5, cy + 3)],
    )
    pygame.draw.ellipse(sprite, WING_COLOR, (cx - 11, cy, 16, 10))

    rotated = pygame.transform.rotate(sprite, -bird.rotation)
    surface.blit(rotated, rotated.get_rect(center=(int(bird.x), int(bird.y))))


def _draw_outlined_text(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    center: tuple,
    color: tuple = TEXT_COLOR,
) -> None:
    outline = font.render(text, True, OUTLINE_COLOR)
    for dx, dy in ((-2, 0), (2, 0), (0, -2), (0, 2)):
        surface.blit(outline, outline.get_rect(center=(center[0] + dx, center[1] + dy)))
    label = font.render(text, True, color)
    surface.blit(label, label.get_rect(center=center))


def render(
    surface: pygame.Surface,
    snapshot: GameState,
    fonts: Fonts,
    gesture: Gesture = Gesture.NONE,
    high_score: int = 0,
) -> None:
    """Draw one frame. Reads ``snapshot`` only; never mutates game state."""
    surface.fill(SKY_COLOR)
    _draw_clouds(surface)

    for pipe in snapshot.pipes:
        _draw_pipe(surface, pipe)

    _draw_ground(surface)
    _draw_bird(surface, snapshot.bird)

    _draw_outlined_text(surface, fonts.large, str(snapshot.score), (WIDTH / 2, 50))

    text, color = GESTURE_LABELS[gesture]
    indicator = fonts.small.render(text, True, color)
    surface.blit(indicator, (10, HEIGHT - GROUND_HEIGHT / 2 - indicator.get_height() / 2))
    best = fonts.small.render(f"Best: {high_score}", True, OUTLINE_COLOR)
    surface.blit(best, best.get_rect(midright=(WIDTH - 10, HEIGHT - GROUND_HEIGHT / 2)))

    if snapshot.game_over:
        overlay = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        overlay.fill(OVERLAY_COLOR)
        surface.blit(overlay, (0, 0))

        for font, line, dy, line_color in (
            (fonts.large, "GAME OVER", -40, TEXT_COLOR),
            (fonts.medium, f"Score: {snapshot.score}", 10, TEXT_COLOR),
            (fonts.small, "Close fist to restart", 60, HIGHLIGHT_TEXT),
        ):
            label = font.render(line, True, line_color)
            surface.blit(label, label.get_rect(center=(WIDTH / 2, HEIGHT / 2 + dy)))


class FloppyBirdGame:
    def __init__(
        self,
        *,
        enable_hand_control: bool = True,
        debug_hand: bool = False,
        camera_index: int = 0,
        seed: Optional[int] = None,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Flappy Bird - Gesture Control")
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        self.clock = pygame.time.Clock()
        self.fonts = Fonts.default()

        self.tracker = None
        if enable_hand_control:
            try:
                from hand_control import HandTracker

                self.tracker = HandTracker(camera_index=camera_index, debug=debug_hand)
            except Exception as exc:
                logger.warning("Hand control disabled: %s", exc)
                self.tracker = None

        simulation = GameSimulation(rng=random.Random(seed))
        self.controller = GameController(simulation)

    def update(self) -> GameState:
        """Advance one frame from the tracker, letting a held SPACE/UP stand in for a fist."""
        keys = pygame.key.get_pressed()
        if keys[pygame.K_SPACE] or keys[pygame.K_UP]:
            return self.controller.update(Gesture.FIST)
        landmarks = self.tracker.latest_landmarks() if self.tracker else None
        return self.controller.update_from_landmarks(landmarks)

    def process_input(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                raise SystemExit
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    raise SystemExit
                if event.key == pygame.K_r:
                    self.controller.restart()

    def run(self) -> None:
        try:
            while True:
                self.clock.tick(FPS)
                self.process_input()
                snapshot = self.update()
                render(
                    self.screen,
                    snapshot,
                    self.fonts,
                    self.controller.gesture,
                    self.controller.high_score,
                )
                pygame.display.flip()
        finally:
            self._shutdown()

    def _shutdown(self) -> None:
        if self.tracker is not None:
            self.tracker.stop()
            self.tracker = None
        pygame.quit()


__all__ = ["FloppyBirdGame", "Fonts", "render"]
