from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .metrics import StepMetrics


@dataclass(slots=True)
class Snapshot:
    step: int
    metrics: Optional[StepMetrics]
    agents: List[Dict[str, Any]]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotWorld:
    width: float
    height: float


@dataclass(slots=True)
class SnapshotMetadata:
    radius: float
    eta: float
    speed: float
    seed: int
    particle_count: int
    density: float
    neighbor_backend: str
    config_version: str
