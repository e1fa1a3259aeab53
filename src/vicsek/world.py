from __future__ import annotations

import logging
import math
from time import perf_counter
from typing import List, Optional, Union

from pygame.math import Vector2

from .agent import Agent
from .config import SimulationConfig
from .math2d import TWO_PI, _circular_mean, _unit_xy, _wrap_periodic
from .metrics import StepMetrics, average_normalized_velocity, create_metrics
from .neighbors import BruteForceNeighbors, QuadTreeNeighbors
from .rng import DeterministicRng
from .snapshot import Snapshot, SnapshotMetadata, SnapshotWorld

logger = logging.getLogger(__name__)

NeighborBackend = Union[BruteForceNeighbors, QuadTreeNeighbors]


class World:
    """Vicsek model on a torus.

    Every ``step`` runs two phases over the whole population. Sensing stages
    each agent's next heading from the circular mean of its neighbors'
    current headings. Integrating adds Gaussian noise, commits the heading and
    moves the agent. No agent sees another's updated heading inside a step.
    """

    def __init__(self, config: SimulationConfig):
        self._config = config
        self._rng = DeterministicRng(config.seed)
        self._width = config.width
        self._height = config.height
        self._radius = config.radius
        self._speed = config.speed
        self._eta = config.eta
        self._noise_scale = config.eta / 2.0
        self._step_count = 0
        self._metrics: Optional[StepMetrics] = None
        self._agents: List[Agent] = [Agent(id=index) for index in range(config.particle_count)]
        self._backend = self._make_backend()
        logger.debug(f"World seeded with {self._rng.seed} ({config.neighbor_backend} neighbors)")
        self._shuffle()

    @property
    def agents(self) -> List[Agent]:
        return self._agents

    @property
    def metrics(self) -> Optional[StepMetrics]:
        return self._metrics

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def seed(self) -> int:
        return self._rng.seed

    @property
    def backend(self) -> NeighborBackend:
        return self._backend

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        self._radius = value

    @property
    def speed(self) -> float:
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = value

    @property
    def eta(self) -> float:
        return self._eta

    @eta.setter
    def eta(self, value: float) -> None:
        self._eta = value
        self._noise_scale = value / 2.0
        logger.debug(f"Noise eta={value:.4f} (sigma={self._noise_scale:.4f})")

    @property
    def noise_scale(self) -> float:
        return self._noise_scale

    @property
    def particle_count(self) -> int:
        return len(self._agents)

    @particle_count.setter
    def particle_count(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"particle_count must be non-negative, got {count}")
        self._agents = [Agent(id=index) for index in range(count)]
        self.reset()

    def resize(self, width: float, height: float) -> None:
        self._width = width
        self._height = height
        self._backend = self._make_backend()
        self.reset()

    def reset(self) -> None:
        self._shuffle()
        self._step_count = 0
        self._metrics = None
        logger.debug(f"Reshuffled {len(self._agents)} agents on {self._width}x{self._height}")

    def highlight_neighbours(self, x: float, y: float) -> List[Agent]:
        backend = self._backend
        backend.rebuild(self._agents)
        neighbours = backend.query(Vector2(x, y), self._radius)
        for agent in neighbours:
            agent.highlighted = True
        return neighbours

    def average_normalized_velocity(self) -> float:
        return average_normalized_velocity(self._agents)

    def step(self) -> StepMetrics:
        start = perf_counter()
        self._step_count += 1
        neighbor_checks = self._sense()
        self._integrate()
        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = create_metrics(
            self._step_count,
            self._agents,
            neighbor_checks,
            self._backend.knots(),
            duration_ms,
        )
        return self._metrics

    def snapshot(self) -> Snapshot:
        agents_payload = [
            {
                "id": agent.id,
                "x": agent.position.x,
                "y": agent.position.y,
                "heading": agent.heading,
                "highlighted": agent.highlighted,
            }
            for agent in self._agents
        ]
        area = self._width * self._height
        return Snapshot(
            step=self._step_count,
            metrics=self._metrics,
            agents=agents_payload,
            world=SnapshotWorld(width=self._width, height=self._height),
            metadata=SnapshotMetadata(
                radius=self._radius,
                eta=self._eta,
                speed=self._speed,
                seed=self._rng.seed,
                particle_count=len(self._agents),
                density=len(self._agents) / area if area > 0 else 0.0,
                neighbor_backend=self._backend.name,
                config_version=self._config.config_version,
            ),
        )

    def _sense(self) -> int:
        backend = self._backend
        backend.rebuild(self._agents)
        radius = self._radius
        neighbor_checks = 0
        for agent in self._agents:
            neighbours = backend.query(agent.position, radius)
            neighbor_checks += len(neighbours)
            sum_x = 0.0
            sum_y = 0.0
            for other in neighbours:
                ux, uy = _unit_xy(other.heading)
                sum_x += ux
                sum_y += uy
            agent.pending_heading = _circular_mean(sum_x, sum_y, agent.heading)
        return neighbor_checks

    def _integrate(self) -> None:
        rng = self._rng
        sigma = self._noise_scale
        speed = self._speed
        width = self._width
        height = self._height
        for agent in self._agents:
            heading = agent.pending_heading + rng.next_gauss(sigma)
            position = agent.position
            position.x += speed * math.cos(heading)
            position.y += speed * math.sin(heading)
            agent.highlighted = False
            agent.heading = _wrap_periodic(heading, TWO_PI)
            position.x = _wrap_periodic(position.x, width)
            position.y = _wrap_periodic(position.y, height)

    def _shuffle(self) -> None:
        rng = self._rng
        width = self._width
        height = self._height
        for agent in self._agents:
            agent.position = Vector2(
                _wrap_periodic(rng.next_float() * width, width),
                _wrap_periodic(rng.next_float() * height, height),
            )
            agent.heading = _wrap_periodic(rng.next_float() * TWO_PI, TWO_PI)
            agent.pending_heading = agent.heading
            agent.highlighted = False

    def _make_backend(self) -> NeighborBackend:
        config = self._config
        if config.neighbor_backend == "brute":
            return BruteForceNeighbors(self._width, self._height)
        return QuadTreeNeighbors(
            self._width,
            self._height,
            capacity=config.quadtree.capacity,
            mul=config.quadtree.mul,
            max_depth=config.quadtree.max_depth,
        )
