from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .config import NEIGHBOR_BACKENDS, SimulationConfig
from .metrics import OrderParameterSeries, StepMetrics
from .world import World

logger = logging.getLogger(__name__)


def run_headless(
    steps: int,
    config: Optional[SimulationConfig] = None,
    seed: Optional[int] = None,
    steady_window: int = 100,
    steady_tolerance: float = 0.01,
) -> Tuple[List[StepMetrics], OrderParameterSeries]:
    config = config or SimulationConfig()
    if seed is not None:
        config = dataclasses.replace(config, seed=seed)
    world = World(config)
    logger.info(
        f"Running {steps} steps: N={world.particle_count}, L={world.width}x{world.height}, "
        f"r={world.radius}, eta={world.eta}, v={world.speed}, seed={world.seed}, backend={config.neighbor_backend}"
    )

    history: List[StepMetrics] = []
    series = OrderParameterSeries()
    stable_at: Optional[int] = None
    for _ in range(steps):
        metrics = world.step()
        history.append(metrics)
        series.append(metrics.average_normalized_velocity)
        if stable_at is None and series.is_stable(steady_window, steady_tolerance):
            stable_at = metrics.step
            logger.info(f"Order parameter settled at step {stable_at}")

    if history:
        last = history[-1]
        total_ms = sum(m.tick_duration_ms for m in history)
        logger.info(
            f"Finished at step {last.step}: order={last.average_normalized_velocity:.4f}, "
            f"tail_avg={series.average_last(steady_window):.4f}, "
            f"mean_neighbors={last.mean_neighbors:.2f}, avg_step_ms={total_ms / len(history):.3f}"
        )
    return history, series


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless Vicsek simulation")
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--backend", choices=list(NEIGHBOR_BACKENDS), default=None)
    parser.add_argument("--eta", type=float, default=None, help="Noise level")
    parser.add_argument("--particles", type=int, default=None, help="Number of agents")
    parser.add_argument(
        "--steady-window",
        type=int,
        default=100,
        help="Window size (steps) used to decide the order parameter has settled.",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    overrides = {
        "neighbor_backend": args.backend,
        "eta": args.eta,
        "particle_count": args.particles,
    }
    config = dataclasses.replace(config, **{k: v for k, v in overrides.items() if v is not None})
    run_headless(args.steps, config, seed=args.seed, steady_window=args.steady_window)


if __name__ == "__main__":
    main()
