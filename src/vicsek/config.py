from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

NEIGHBOR_BACKENDS = ("brute", "quadtree")


@dataclass
class QuadTreeConfig:
    capacity: int = 4
    # Children hold capacity * mul agents, so deep nodes split less eagerly.
    mul: int = 1
    max_depth: int = 32


@dataclass
class SimulationConfig:
    width: float = 400.0
    height: float = 400.0
    radius: float = 10.0
    eta: float = 0.5
    speed: float = 1.0
    particle_count: int = 300
    seed: Optional[int] = None
    neighbor_backend: str = "quadtree"
    config_version: str = "v1"
    quadtree: QuadTreeConfig = field(default_factory=QuadTreeConfig)

    def __post_init__(self) -> None:
        if self.neighbor_backend not in NEIGHBOR_BACKENDS:
            raise ValueError(
                f"Unknown neighbor backend: {self.neighbor_backend!r} (expected one of {', '.join(NEIGHBOR_BACKENDS)})"
            )
        if self.particle_count < 0:
            raise ValueError(f"particle_count must be non-negative, got {self.particle_count}")
        if self.quadtree.capacity < 1:
            raise ValueError(f"quadtree.capacity must be positive, got {self.quadtree.capacity}")
        if self.quadtree.mul < 1:
            raise ValueError(f"quadtree.mul must be positive, got {self.quadtree.mul}")
        if self.quadtree.max_depth < 0:
            raise ValueError(f"quadtree.max_depth must be non-negative, got {self.quadtree.max_depth}")

    @property
    def density(self) -> float:
        area = self.width * self.height
        return self.particle_count / area if area > 0 else 0.0

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text())
        return load_config(data or {})


def load_config(raw: dict) -> SimulationConfig:
    quadtree = QuadTreeConfig(**(raw.get("quadtree") or {}))
    sim_values = {k: v for k, v in raw.items() if k != "quadtree"}
    for key in ("width", "height", "radius", "eta", "speed"):
        if key in sim_values:
            sim_values[key] = float(sim_values[key])
    return SimulationConfig(quadtree=quadtree, **sim_values)
