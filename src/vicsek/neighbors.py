from __future__ import annotations

from typing import List, Sequence

from pygame.math import Vector2

from .agent import Agent
from .geometry import Rectangle
from .quadtree import QuadTree

# Candidate p is tested as p + offset against the query point, i.e. the query
# point is checked against p's direct position and its four edge images.
_IMAGE_OFFSETS = (
    (0.0, 0.0),
    (1.0, 0.0),
    (0.0, -1.0),
    (-1.0, 0.0),
    (0.0, 1.0),
)


def _in_domain(x: float, y: float, width: float, height: float) -> bool:
    if width <= 0.0 or height <= 0.0:
        return False
    return 0.0 <= x <= width and 0.0 <= y <= height


def _wrapped_hit(x: float, y: float, position: Vector2, width: float, height: float, radius_sq: float) -> bool:
    px = position.x
    py = position.y
    for ox, oy in _IMAGE_OFFSETS:
        dx = x - (px + ox * width)
        dy = y - (py + oy * height)
        if dx * dx + dy * dy < radius_sq:
            return True
    return False


def neighbors_of(
    point: Vector2,
    radius: float,
    agents: Sequence[Agent],
    width: float,
    height: float,
) -> List[Agent]:
    """Agents within ``radius`` of ``point`` on the torus, in population order.

    Only the four edge images are checked, so a neighbor reachable solely
    through a corner is not reported. Points outside the domain match nothing.
    """
    x = point.x
    y = point.y
    if not _in_domain(x, y, width, height):
        return []
    radius_sq = radius * radius
    return [agent for agent in agents if _wrapped_hit(x, y, agent.position, width, height, radius_sq)]


class BruteForceNeighbors:
    """Scans the whole population for every query."""

    name = "brute"

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self._agents: Sequence[Agent] = ()

    def rebuild(self, agents: Sequence[Agent]) -> None:
        self._agents = agents

    def query(self, point: Vector2, radius: float) -> List[Agent]:
        return neighbors_of(point, radius, self._agents, self.width, self.height)

    def knots(self) -> int:
        return 0


class QuadTreeNeighbors:
    """Quadtree-backed periodic query.

    Runs one box query per toroidal image of the query point, then applies the
    same wrapped-distance test as the brute-force scan so both return the same
    agents in the same order.
    """

    name = "quadtree"

    # Keeps the candidate box a hair wider than the radius so float rounding in
    # the box edges never hides an agent the exact test would accept.
    _PAD = 1e-9

    def __init__(
        self,
        width: float,
        height: float,
        capacity: int = 4,
        mul: int = 1,
        max_depth: int = 32,
    ) -> None:
        self.width = width
        self.height = height
        self._tree = QuadTree(Rectangle(0.0, 0.0, width, height), capacity, mul, max_depth)
        self._candidates: List[Agent] = []
        self._outside: List[Agent] = []

    @property
    def tree(self) -> QuadTree:
        return self._tree

    def rebuild(self, agents: Sequence[Agent]) -> None:
        tree = self._tree
        tree.clear()
        self._outside.clear()
        for agent in agents:
            if not tree.insert(agent):
                # Only reachable when a caller moved an agent off the domain
                # between steps; such agents are still scanned directly.
                self._outside.append(agent)

    def query(self, point: Vector2, radius: float) -> List[Agent]:
        x = point.x
        y = point.y
        width = self.width
        height = self.height
        if not _in_domain(x, y, width, height):
            return []
        half = radius * (1.0 + self._PAD) + self._PAD
        candidates = self._candidates
        candidates.clear()
        for ox, oy in _IMAGE_OFFSETS:
            box = Rectangle.around(x - ox * width, y - oy * height, half, half)
            self._tree.query(box, candidates)
        candidates.extend(self._outside)

        radius_sq = radius * radius
        seen: set[int] = set()
        found: List[Agent] = []
        for agent in candidates:
            if agent.id in seen:
                continue
            seen.add(agent.id)
            if _wrapped_hit(x, y, agent.position, width, height, radius_sq):
                found.append(agent)
        found.sort(key=lambda agent: agent.id)
        return found

    def knots(self) -> int:
        return self._tree.knots()
