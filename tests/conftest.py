import os
import random

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from gesture import FINGERTIPS, PALM_CENTER  # noqa: E402


def make_hand(spread, palm=(0.5, 0.5)):
    """21 landmarks with every fingertip ``spread`` away from the palm centre."""
    points = [palm] * 21
    points[PALM_CENTER] = palm
    directions = [(1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0)]
    for index, (dx, dy) in zip(FINGERTIPS, directions):
        points[index] = (palm[0] + dx * spread, palm[1] + dy * spread)
    return points


class FixedRandom(random.Random):
    """Random source whose ``uniform`` always returns the same gap."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def uniform(self, a, b):
        return self.value


@pytest.fixture
def hand():
    return make_hand


@pytest.fixture
def fixed_random():
    return FixedRandom
