"""Play timed sessions headlessly with random commands.

Run with::

    PYTHONPATH=src python examples/random_play.py

Each simulated second applies a handful of random player commands followed by
one fall tick and one countdown tick, exactly as the two timers would
interleave them in a live game.  Pass ``--help`` to see the options.
"""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass

from timed_tetris import Command, Event, GameConfig, Session


LOGGER = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    index: int
    score: int
    end_reason: str
    seconds_played: int


def run_session(config: GameConfig, *, index: int, commands_per_tick: int, seed: int) -> SimulationResult:
    rng = random.Random(seed)
    session = Session(config)
    state = session.start()
    commands = list(Command)
    while state.running:
        for _ in range(commands_per_tick):
            state = session.dispatch(rng.choice(commands))
        state = session.dispatch(Event.FALL_TICK)
        state = session.dispatch(Event.COUNTDOWN_TICK)
    reason = state.end_reason.value if state.end_reason else "unknown"
    return SimulationResult(
        index=index,
        score=state.score,
        end_reason=reason,
        seconds_played=config.game_duration - state.time_remaining,
    )


def log_summary(results: list[SimulationResult]) -> dict[str, float | int]:
    if not results:
        LOGGER.info("No simulations run.")
        return {}
    scores = [r.score for r in results]
    summary: dict[str, float | int] = {
        "simulations": len(results),
        "best": max(scores),
        "average": sum(scores) / len(scores),
        "timeouts": sum(1 for r in results if r.end_reason == "timeout"),
    }
    LOGGER.info(
        "Played %d session(s): best=%d, average=%.1f, timeouts=%d",
        summary["simulations"],
        summary["best"],
        summary["average"],
        summary["timeouts"],
    )
    return summary


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--simulations", type=int, default=10, help="How many sessions to play.")
    parser.add_argument("--commands", type=int, default=3, help="Random commands per simulated second.")
    parser.add_argument("--duration", type=int, default=180, help="Session length in seconds.")
    parser.add_argument("--seed", type=int, default=0, help="Base seed for pieces and commands.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    results = []
    for sim_idx in range(1, args.simulations + 1):
        config = GameConfig(game_duration=args.duration, seed=args.seed + sim_idx)
        result = run_session(config, index=sim_idx, commands_per_tick=args.commands, seed=args.seed + sim_idx)
        LOGGER.debug("Simulation %d: score=%d (%s)", result.index, result.score, result.end_reason)
        results.append(result)
    log_summary(results)


if __name__ == "__main__":
    main()
