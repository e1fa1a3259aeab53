from __future__ import annotations

import random

import pytest
from pygame.math import Vector2

from vicsek.agent import Agent
from vicsek.neighbors import BruteForceNeighbors, QuadTreeNeighbors, neighbors_of


def _agent(agent_id: int, x: float, y: float) -> Agent:
    return Agent(id=agent_id, position=Vector2(x, y))


def _ids(agents) -> list[int]:
    return [agent.id for agent in agents]


def _random_population(count: int, width: float, height: float, seed: int) -> list[Agent]:
    rng = random.Random(seed)
    return [_agent(idx, rng.uniform(0.0, width), rng.uniform(0.0, height)) for idx in range(count)]


def test_direct_neighbors_use_strict_radius():
    agents = [
        _agent(0, 52.0, 50.0),
        _agent(1, 55.0, 50.0),
        _agent(2, 50.0, 45.1),
        _agent(3, 60.0, 60.0),
    ]

    found = neighbors_of(Vector2(50.0, 50.0), 5.0, agents, 100.0, 100.0)

    assert _ids(found) == [0, 2]


def test_neighbors_found_across_each_edge():
    agents = [
        _agent(0, 99.0, 50.0),
        _agent(1, 50.0, 1.0),
        _agent(2, 1.0, 30.0),
        _agent(3, 50.0, 98.5),
    ]

    assert _ids(neighbors_of(Vector2(1.0, 50.0), 3.0, agents, 100.0, 100.0)) == [0]
    assert _ids(neighbors_of(Vector2(50.0, 99.0), 3.0, agents, 100.0, 100.0)) == [1, 3]
    assert _ids(neighbors_of(Vector2(99.5, 30.0), 3.0, agents, 100.0, 100.0)) == [2]
    assert _ids(neighbors_of(Vector2(50.0, 0.5), 3.0, agents, 100.0, 100.0)) == [1, 3]


def test_corner_images_are_not_checked():
    agents = [_agent(0, 99.5, 99.5)]

    assert neighbors_of(Vector2(0.5, 0.5), 2.0, agents, 100.0, 100.0) == []


def test_query_outside_domain_finds_nothing():
    agents = [_agent(0, 1.0, 1.0), _agent(1, 99.0, 99.0)]

    assert neighbors_of(Vector2(-0.5, 1.0), 5.0, agents, 100.0, 100.0) == []
    assert neighbors_of(Vector2(1.0, 100.5), 5.0, agents, 100.0, 100.0) == []
    assert _ids(neighbors_of(Vector2(100.0, 100.0), 5.0, agents, 100.0, 100.0)) == [1]


def test_degenerate_inputs_find_nothing():
    agents = [_agent(0, 0.0, 0.0), _agent(1, 3.0, 3.0)]

    assert neighbors_of(Vector2(3.0, 3.0), 0.0, agents, 10.0, 10.0) == []
    assert neighbors_of(Vector2(0.0, 0.0), 5.0, agents, 0.0, 0.0) == []
    assert neighbors_of(Vector2(3.0, 3.0), 5.0, [], 10.0, 10.0) == []


@pytest.mark.parametrize("shift", [17.25, 50.0, 83.5])
def test_neighbor_sets_survive_horizontal_translation(shift):
    width, height = 100.0, 100.0
    rng = random.Random(5)
    agents = [_agent(idx, rng.uniform(0.0, width), rng.uniform(20.0, 80.0)) for idx in range(120)]
    shifted = [_agent(a.id, (a.position.x + shift) % width, a.position.y) for a in agents]
    radius = 6.0

    for agent, moved in zip(agents, shifted):
        before = set(_ids(neighbors_of(agent.position, radius, agents, width, height)))
        after = set(_ids(neighbors_of(moved.position, radius, shifted, width, height)))
        assert before == after


@pytest.mark.parametrize("shift", [9.0, 61.75])
def test_neighbor_sets_survive_vertical_translation(shift):
    width, height = 100.0, 80.0
    rng = random.Random(6)
    agents = [_agent(idx, rng.uniform(20.0, 80.0), rng.uniform(0.0, height)) for idx in range(120)]
    shifted = [_agent(a.id, a.position.x, (a.position.y + shift) % height) for a in agents]
    radius = 6.0

    for agent, moved in zip(agents, shifted):
        before = set(_ids(neighbors_of(agent.position, radius, agents, width, height)))
        after = set(_ids(neighbors_of(moved.position, radius, shifted, width, height)))
        assert before == after


@pytest.mark.parametrize("radius", [0.0, 0.5, 5.0, 12.0, 60.0])
@pytest.mark.parametrize("capacity, mul", [(1, 1), (4, 1), (2, 3)])
def test_quadtree_backend_matches_brute_force(radius, capacity, mul):
    width, height = 100.0, 80.0
    agents = _random_population(300, width, height, seed=42)
    brute = BruteForceNeighbors(width, height)
    indexed = QuadTreeNeighbors(width, height, capacity=capacity, mul=mul)
    brute.rebuild(agents)
    indexed.rebuild(agents)

    points = [agent.position for agent in agents[:60]]
    points += [
        Vector2(0.0, 0.0),
        Vector2(width, height),
        Vector2(0.0, height / 2),
        Vector2(width, 0.0),
        Vector2(width / 2, height),
        Vector2(-1.0, 5.0),
    ]
    for point in points:
        assert _ids(indexed.query(point, radius)) == _ids(brute.query(point, radius))


def test_quadtree_backend_matches_brute_force_with_clusters():
    width, height = 50.0, 50.0
    rng = random.Random(9)
    agents = [_agent(idx, rng.uniform(0.0, 0.5), rng.uniform(49.5, 50.0 - 1e-9)) for idx in range(80)]
    agents += [_agent(80 + idx, 25.0, 25.0) for idx in range(20)]
    brute = BruteForceNeighbors(width, height)
    indexed = QuadTreeNeighbors(width, height, capacity=2)
    brute.rebuild(agents)
    indexed.rebuild(agents)

    for point in (Vector2(49.8, 0.2), Vector2(0.2, 49.8), Vector2(25.0, 25.0), Vector2(49.9, 49.9)):
        assert _ids(indexed.query(point, 1.0)) == _ids(brute.query(point, 1.0))
    assert indexed.knots() > 0
    assert brute.knots() == 0


def test_quadtree_backend_still_sees_agents_outside_domain():
    agents = [_agent(0, 10.0, 10.0), _agent(1, 120.0, 5.0)]
    brute = BruteForceNeighbors(100.0, 100.0)
    indexed = QuadTreeNeighbors(100.0, 100.0)
    brute.rebuild(agents)
    indexed.rebuild(agents)

    point = Vector2(20.0, 5.0)
    assert _ids(indexed.query(point, 1.0)) == _ids(brute.query(point, 1.0)) == [1]
    assert indexed.tree.size() == 1


def test_rebuild_replaces_previous_population():
    indexed = QuadTreeNeighbors(10.0, 10.0, capacity=1)
    indexed.rebuild([_agent(0, 1.0, 1.0), _agent(1, 2.0, 2.0)])
    indexed.rebuild([_agent(5, 8.0, 8.0)])

    assert indexed.tree.size() == 1
    assert _ids(indexed.query(Vector2(8.0, 8.0), 1.0)) == [5]
    assert indexed.query(Vector2(1.0, 1.0), 1.0) == []
