"""Webcam hand tracking that feeds landmark sets to the gesture classifier.

This module owns the camera and the MediaPipe Hands model. A background thread
keeps the most recent set of 21 normalized landmarks; the game samples it once
per frame with :meth:`HandTracker.latest_landmarks`.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Optional, Tuple

import cv2

from gesture import Gesture, classify, landmarks_from_mediapipe

try:  # MediaPipe renamed the public package for solutions in newer releases.
    from mediapipe import solutions as mp_solutions
except ImportError:  # pragma: no cover - depends on mediapipe installation layout.
    try:
        from mediapipe.python import solutions as mp_solutions  # type: ignore[attr-defined]
    except ImportError as exc:  # pragma: no cover - easier to diagnose at runtime.
        raise ImportError(
            "The installed MediaPipe distribution does not expose the solutions API."
            " Install the official `mediapipe` package (version 0.9.x or 0.10.x)"
            " to enable hand tracking."
        ) from exc

mp_hands = mp_solutions.hands

logger = logging.getLogger(__name__)

Landmarks = Tuple[Tuple[float, float], ...]

_DEBUG_WINDOW = "Hand Debug"
_GESTURE_COLORS = {
    Gesture.FIST: (0, 255, 0),
    Gesture.OPEN: (0, 255, 255),
    Gesture.NEUTRAL: (0, 165, 255),
    Gesture.NONE: (0, 0, 255),
}


class HandTracker:
    """Track a single hand and expose its latest landmarks.

    Parameters
    ----------
    camera_index:
        Index of the camera that should be opened with ``cv2.VideoCapture``.
    min_detection_confidence, min_tracking_confidence:
        Passed straight through to ``mediapipe.solutions.hands.Hands``.
    debug:
        When ``True`` a debug window with the mirrored camera feed, the hand
        skeleton and the current gesture label is shown.
    """

    def __init__(
        self,
        *,
        camera_index: int = 0,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        debug: bool = False,
    ) -> None:
        self.camera_index = camera_index
        self.debug = debug

        self._capture = cv2.VideoCapture(self.camera_index)
        if not self._capture.isOpened():
            raise RuntimeError("Unable to open webcam. Ensure a camera is connected.")

        self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, 640)
        self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, 480)
        self._capture.set(cv2.CAP_PROP_FPS, 30)

        self._mp_hands = mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=1,
            model_complexity=1,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

        self._landmarks: Optional[Landmarks] = None
        self._lock = threading.Lock()
        self._running = True
        self._closed = False

        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()
        logger.info("Hand tracking started on camera %d", camera_index)

    def _capture_loop(self) -> None:
        while self._running:
            ok, frame = self._capture.read()
            if not ok:
                time.sleep(0.05)
                continue

            frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            result = self._mp_hands.process(frame_rgb)

            hand = result.multi_hand_landmarks[0] if result.multi_hand_landmarks else None
            landmarks = landmarks_from_mediapipe(hand) if hand is not None else None
            with self._lock:
                self._landmarks = landmarks

            if self.debug:
                self._show_debug(frame, hand, landmarks)

        self._cleanup_resources()

    def _show_debug(self, frame: Any, hand: Any, landmarks: Optional[Landmarks]) -> None:
        if hand is not None:
            mp_solutions.drawing_utils.draw_landmarks(frame, hand, mp_hands.HAND_CONNECTIONS)
        # Landmarks are not pre-mirrored; only the preview is flipped.
        frame = cv2.flip(frame, 1)
        gesture = classify(landmarks)
        cv2.putText(
            frame,
            gesture.value,
            (20, 50),
            cv2.FONT_HERSHEY_SIMPLEX,
            1.2,
            _GESTURE_COLORS[gesture],
            3,
            cv2.LINE_AA,
        )
        cv2.imshow(_DEBUG_WINDOW, frame)
        if cv2.waitKey(1) & 0xFF == 27:
            # Allow closing the debug window with escape.
            self.debug = False
            cv2.destroyWindow(_DEBUG_WINDOW)

    def latest_landmarks(self) -> Optional[Landmarks]:
        """Return the most recent landmark set, or ``None`` if no hand is visible."""

        with self._lock:
            return self._landmarks

    def stop(self) -> None:
        """Stop the capture thread and release the webcam."""

        self._running = False
        self._thread.join(timeout=1.0)
        self._cleanup_resources()
        logger.info("Hand tracking stopped")

    def __enter__(self) -> "HandTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _cleanup_resources(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._landmarks = None
        self._capture.release()
        self._mp_hands.close()
        if self.debug:
            cv2.destroyAllWindows()


__all__ = ["HandTracker"]
