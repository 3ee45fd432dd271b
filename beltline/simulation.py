"""Step driver for the belt simulator."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional

from .belt import Belt
from .entities import ProductionLine
from .errors import InvalidConfiguration, SelectionExhausted
from .randomness import RandomSource, RandomSourceFactory
from .worker import Worker

logger = logging.getLogger(__name__)

WORKER_POLICIES = ("weighted", "round_robin")


@dataclass
class SimulationConfig:
    steps: int
    random_seed: Optional[int] = None
    worker_policy: str = "weighted"  # weighted, round_robin
    actions_per_step: int = 1
    random_source: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        if self.steps < 0:
            raise InvalidConfiguration("Step count must be non-negative.")
        if self.worker_policy not in WORKER_POLICIES:
            raise InvalidConfiguration(
                f"Unknown worker policy '{self.worker_policy}', expected one of {', '.join(WORKER_POLICIES)}."
            )
        if self.actions_per_step < 1:
            raise InvalidConfiguration("At least one worker must act per step.")
        if self.random_source is not None:
            RandomSourceFactory.from_dict(self.random_source)

    def source_definition(self) -> Dict[str, Any]:
        """Random source to build for a run; defaults to a generator seeded with ``random_seed``."""
        if self.random_source is not None:
            return dict(self.random_source)
        return {"type": "seeded", "seed": self.random_seed}

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        seed = data.get("random_seed")
        return cls(
            steps=int(data.get("steps", 100)),
            random_seed=None if seed is None else int(seed),
            worker_policy=data.get("worker_policy", "weighted"),
            actions_per_step=int(data.get("actions_per_step", 1)),
            random_source=data.get("random_source"),
        )


@dataclass
class SimulationRunResult:
    """Output of a single simulation run."""

    line_name: str
    steps: int
    counts: Dict[str, int]
    empty_exits: int
    anomalies: int
    final_slots: List[Optional[str]] = field(default_factory=list)
    product_names: List[str] = field(default_factory=list)

    @property
    def product_counts(self) -> Dict[str, int]:
        return {name: count for name, count in self.counts.items() if name in self.product_names}

    @property
    def component_counts(self) -> Dict[str, int]:
        return {name: count for name, count in self.counts.items() if name not in self.product_names}


def build_belt(line: ProductionLine, random_source: RandomSource) -> Belt:
    """Wire a line definition into a fresh belt with its own kinds and workers."""
    belt = Belt(line.slot_count, random_source, build_time=line.build_time)
    kinds = line.build_kinds()
    for entry in line.supply:
        if entry.name is None:
            belt.add_gap(entry.weight)
        else:
            belt.add_kind(kinds[entry.name])
    for recipe in line.products:
        belt.add_product(kinds[recipe.name])
    for placement in line.workers:
        belt.add_worker(Worker(name=placement.name, position=placement.position, weight=placement.weight))
    return belt


def run_step(belt: Belt, config: SimulationConfig) -> int:
    """Run one step on ``belt`` and return the number of anomalies it hit."""
    anomalies = 0
    belt.advance(1)
    try:
        belt.place_at_entry(belt.generate_next_item())
    except SelectionExhausted as exc:
        logger.warning("No item generated this step: %s", exc)
        anomalies += 1

    if config.worker_policy == "round_robin":
        for worker in belt.workers:
            belt.offer(worker)
        return anomalies

    for _ in range(min(config.actions_per_step, len(belt.workers))):
        try:
            worker = belt.pick_next_worker()
        except SelectionExhausted as exc:
            logger.warning("No worker selected this step: %s", exc)
            anomalies += 1
            break
        belt.offer(worker)
    return anomalies


def simulate_belt(
    line: ProductionLine,
    config: SimulationConfig,
    random_source: Optional[RandomSource] = None,
) -> SimulationRunResult:
    source = random_source if random_source is not None else RandomSourceFactory.from_dict(config.source_definition())
    belt = build_belt(line, source)
    belt.validate()

    anomalies = 0
    for _ in range(config.steps):
        anomalies += run_step(belt, config)

    logger.info(
        "%s: %d steps finished with %d anomalies using %s",
        line.name,
        config.steps,
        anomalies,
        getattr(source, "description", type(source).__name__),
    )
    return SimulationRunResult(
        line_name=line.name,
        steps=config.steps,
        counts=belt.collected_counts(),
        empty_exits=belt.empty_exits,
        anomalies=anomalies,
        final_slots=[item.name if item is not None else None for item in belt.slots],
        product_names=[product.name for product in belt.products],
    )
