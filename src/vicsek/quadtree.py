from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple, Union

from .geometry import Circle, Rectangle

if TYPE_CHECKING:
    from .agent import Agent

Range = Union[Rectangle, Circle]


class QuadTree:
    """Point quadtree over a flat rectangle.

    A node keeps up to ``capacity`` agents in its own bucket. The insert that
    finds the bucket full splits the node once into four owned children, each
    with ``capacity * mul`` slots, and every later insert is pushed down. Agents
    already in the bucket stay where they are, so each agent lives in exactly
    one node.

    Nodes with a zero-size side or at ``max_depth`` never split; extra agents
    stay in their bucket, so stacks of identical points cannot recurse forever.
    """

    def __init__(
        self,
        boundary: Rectangle,
        capacity: int = 4,
        mul: int = 1,
        max_depth: int = 32,
        depth: int = 0,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"QuadTree capacity must be positive, got {capacity}")
        if mul < 1:
            raise ValueError(f"QuadTree mul must be positive, got {mul}")
        if max_depth < 0:
            raise ValueError(f"QuadTree max_depth must be non-negative, got {max_depth}")
        self.boundary = boundary
        self.capacity = capacity
        self.mul = mul
        self.max_depth = max_depth
        self.depth = depth
        self.split = False
        self.nw: Optional[QuadTree] = None
        self.ne: Optional[QuadTree] = None
        self.sw: Optional[QuadTree] = None
        self.se: Optional[QuadTree] = None
        self._agents: List["Agent"] = []

    @property
    def local_agents(self) -> Tuple["Agent", ...]:
        return tuple(self._agents)

    def children(self) -> Tuple["QuadTree", ...]:
        if not self.split:
            return ()
        return (self.nw, self.ne, self.sw, self.se)

    def clear(self) -> None:
        self._agents.clear()
        self.nw = self.ne = self.sw = self.se = None
        self.split = False

    def insert(self, agent: "Agent") -> bool:
        if not self.boundary.contains(agent.position):
            return False
        if not self.split:
            if len(self._agents) < self.capacity or not self._can_split():
                self._agents.append(agent)
                return True
            self._subdivide()
        # nw, ne, sw, se order puts split-line ties on the west/north side.
        for child in self.children():
            if child.insert(agent):
                return True
        # Rounding left the point outside every quadrant; keep it here.
        self._agents.append(agent)
        return True

    def query(self, range_: Range, found: List["Agent"]) -> bool:
        if not range_.intersects(self.boundary):
            return False
        for agent in self._agents:
            if range_.contains(agent.position):
                found.append(agent)
        for child in self.children():
            child.query(range_, found)
        return True

    def size(self) -> int:
        return len(self._agents) + sum(child.size() for child in self.children())

    def knots(self) -> int:
        if not self.split:
            return 0
        return 1 + sum(child.knots() for child in self.children())

    def _can_split(self) -> bool:
        boundary = self.boundary
        return self.depth < self.max_depth and boundary.width > 0.0 and boundary.height > 0.0

    def _subdivide(self) -> None:
        child_capacity = self.capacity * self.mul
        child_depth = self.depth + 1
        self.nw, self.ne, self.sw, self.se = (
            QuadTree(quadrant, child_capacity, self.mul, self.max_depth, child_depth)
            for quadrant in self.boundary.quadrants()
        )
        self.split = True
