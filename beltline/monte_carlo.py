"""Monte Carlo utilities for running repeated simulations."""
from __future__ import annotations

from dataclasses import dataclass
from statistics import mean, pstdev
from typing import Any, Dict, Iterable, List, Optional

from .entities import ProductionLine
from .simulation import SimulationConfig, SimulationRunResult, simulate_belt


@dataclass
class MonteCarloResult:
    """Stores the collection of individual simulation runs for a line."""

    line_name: str
    runs: List[SimulationRunResult]

    def metric_series(self, accessor) -> List[float]:
        return [accessor(run) for run in self.runs]


@dataclass
class MonteCarloSummary:
    """Aggregated Monte Carlo statistics."""

    line_name: str
    runs: int
    count_mean: Dict[str, float]
    count_std: Dict[str, float]
    empty_exits_mean: float
    anomalies: int
    product_names: List[str]

    @classmethod
    def from_result(cls, result: MonteCarloResult) -> "MonteCarloSummary":
        per_kind: Dict[str, List[float]] = {}
        for run in result.runs:
            for name, count in run.counts.items():
                per_kind.setdefault(name, []).append(count)

        count_mean = {name: mean(values) for name, values in per_kind.items()}
        count_std = {name: pstdev(values) if len(values) > 1 else 0.0 for name, values in per_kind.items()}
        empty_values = result.metric_series(lambda run: run.empty_exits)
        product_names: List[str] = []
        for run in result.runs:
            for name in run.product_names:
                if name not in product_names:
                    product_names.append(name)

        return cls(
            line_name=result.line_name,
            runs=len(result.runs),
            count_mean=count_mean,
            count_std=count_std,
            empty_exits_mean=mean(empty_values) if empty_values else 0.0,
            anomalies=sum(run.anomalies for run in result.runs),
            product_names=product_names,
        )


def run_monte_carlo(
    line: ProductionLine,
    steps: int,
    simulations: int,
    base_seed: Optional[int] = None,
    worker_policy: str = "weighted",
    actions_per_step: int = 1,
    random_source: Optional[Dict[str, Any]] = None,
) -> MonteCarloResult:
    """Run ``simulations`` independent runs of ``line``.

    Without a ``random_source`` definition each run is seeded with
    ``base_seed + i``; with one, every run builds a fresh source from it.
    """
    runs: List[SimulationRunResult] = []
    for i in range(simulations):
        seed = None if base_seed is None else base_seed + i
        config = SimulationConfig.from_dict(
            {
                "steps": steps,
                "random_seed": seed,
                "worker_policy": worker_policy,
                "actions_per_step": actions_per_step,
                "random_source": random_source,
            }
        )
        runs.append(simulate_belt(line, config))
    return MonteCarloResult(line_name=line.name, runs=runs)


def summarize_results(results: Iterable[MonteCarloResult]) -> List[MonteCarloSummary]:
    return [MonteCarloSummary.from_result(result) for result in results]
