"""Classify a hand landmark set into a discrete control gesture.

The classifier looks at how far the fingertips are from the centre of the
palm. A closed fist pulls every tip in towards the palm, an open hand spreads
them out, and anything in between is reported as neutral.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

# MediaPipe hand topology
PALM_CENTER = 9
FINGERTIPS = (8, 12, 16, 20)
NUM_LANDMARKS = 21

# Average fingertip-to-palm distance, in normalized image units
FIST_THRESHOLD = 0.08
OPEN_THRESHOLD = 0.18

Point = Tuple[float, float]


class Gesture(str, Enum):
    """Control gestures recognised from a single frame."""

    NONE = "NONE"
    FIST = "FIST"
    OPEN = "OPEN"
    NEUTRAL = "NEUTRAL"


def _xy(point: Any) -> Optional[Point]:
    if hasattr(point, "x") and hasattr(point, "y"):
        x, y = point.x, point.y
    else:
        try:
            x, y = point[0], point[1]
        except (TypeError, IndexError, KeyError):
            return None
    try:
        x, y = float(x), float(y)
    except (TypeError, ValueError, OverflowError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return x, y


def average_fingertip_distance(landmarks: Sequence[Any]) -> Optional[float]:
    """Mean distance from the palm centre to the four fingertips.

    Returns ``None`` when ``landmarks`` is not a usable 21-point set.
    """
    try:
        if len(landmarks) != NUM_LANDMARKS:
            return None
    except TypeError:
        return None

    try:
        points = [_xy(landmarks[index]) for index in (PALM_CENTER,) + FINGERTIPS]
    except (TypeError, IndexError, KeyError):
        return None
    if any(point is None for point in points):
        return None

    palm, tips = points[0], points[1:]
    total = 0.0
    for tip in tips:
        total += math.hypot(tip[0] - palm[0], tip[1] - palm[1])
    return total / len(FINGERTIPS)


def classify(landmarks: Optional[Sequence[Any]]) -> Gesture:
    """Return the gesture for one frame of landmarks.

    ``None`` (no hand in view) and malformed input both map to
    :attr:`Gesture.NONE`; this function never raises.
    """
    if landmarks is None:
        return Gesture.NONE

    avg_distance = average_fingertip_distance(landmarks)
    if avg_distance is None:
        return Gesture.NONE

    if avg_distance < FIST_THRESHOLD:
        return Gesture.FIST
    if avg_distance > OPEN_THRESHOLD:
        return Gesture.OPEN
    return Gesture.NEUTRAL


def landmarks_from_mediapipe(hand_landmarks: Any) -> Tuple[Point, ...]:
    """Flatten a MediaPipe ``NormalizedLandmarkList`` into ``(x, y)`` pairs."""
    points = getattr(hand_landmarks, "landmark", hand_landmarks)
    return tuple((float(p.x), float(p.y)) for p in points)


class GestureClassifier:
    """Stateful wrapper around :func:`classify` that remembers the last label.

    The remembered labels are only for callers that want to show the current
    gesture or detect transitions; classification itself is stateless.
    """

    def __init__(self) -> None:
        self.last: Gesture = Gesture.NONE
        self.previous: Gesture = Gesture.NONE

    def classify(self, landmarks: Optional[Sequence[Any]]) -> Gesture:
        gesture = classify(landmarks)
        self.previous = self.last
        self.last = gesture
        return gesture

    @property
    def changed(self) -> bool:
        return self.last != self.previous


__all__ = [
    "FINGERTIPS",
    "FIST_THRESHOLD",
    "Gesture",
    "GestureClassifier",
    "OPEN_THRESHOLD",
    "PALM_CENTER",
    "average_fingertip_distance",
    "classify",
    "landmarks_from_mediapipe",
]
