"""Entry point for the gesture-controlled Flappy Bird game."""

from __future__ import annotations

import argparse
import logging

from game import FloppyBirdGame


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Flappy Bird by closing your fist!")
    parser.add_argument(
        "--no-hand",
        action="store_true",
        help="Disable the webcam hand controller and fall back to keyboard controls.",
    )
    parser.add_argument(
        "--debug-hand",
        action="store_true",
        help="Show a debug window with the MediaPipe hand landmarks.",
    )
    parser.add_argument(
        "--camera-index",
        type=int,
        default=0,
        help="Index of the webcam to open (default: 0).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the pipe gap generator, for reproducible games.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output such as accepted flaps.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    game = FloppyBirdGame(
        enable_hand_control=not args.no_hand,
        debug_hand=args.debug_hand,
        camera_index=args.camera_index,
        seed=args.seed,
    )
    game.run()


if __name__ == "__main__":
    main()
