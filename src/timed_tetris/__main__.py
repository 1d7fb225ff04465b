"""Command line entry point.

Run with: `python -m timed_tetris`

By default this opens the pygame window.  ``--ascii`` instead starts a
session, prints a single frame composed of the board plus the active
tetromino and exits, which is handy as a smoke test on machines without a
display.
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from . import GameConfig, Session, render_state
from .utils import Cells, format_time


def _print_grid(grid: Cells) -> None:
    for row in grid:
        print("".join(cell.value if cell else "." for cell in row))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="timed_tetris", description=__doc__.splitlines()[0])
    parser.add_argument("--duration", type=int, default=GameConfig.game_duration, help="Game length in seconds.")
    parser.add_argument("--fall-ms", type=int, default=GameConfig.fall_interval_ms, help="Gravity interval in milliseconds.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the piece generator.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...).")
    parser.add_argument("--ascii", action="store_true", help="Print one frame and exit.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = GameConfig(game_duration=args.duration, fall_interval_ms=args.fall_ms, seed=args.seed)

    if args.ascii:
        session = Session(config)
        state = session.start()
        _print_grid(render_state(state))
        print(f"Score: {state.score}  Time: {format_time(state.time_remaining)}")
        return

    from .run_pygame import main as run_window

    run_window(config)


if __name__ == "__main__":
    main()
