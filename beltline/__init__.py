"""Conveyor belt production line simulation package."""

from .belt import Belt, weighted_choice
from .entities import ItemKind, ProductionLine, ProductRecipe, SupplyEntry, WorkerPlacement, load_line, reference_line
from .errors import BeltlineError, InvalidConfiguration, RandomSourceExhausted, SelectionExhausted
from .monte_carlo import MonteCarloResult, MonteCarloSummary, run_monte_carlo
from .randomness import RandomSourceConfig, RandomSourceFactory, ScriptedRandomSource, SeededRandomSource
from .simulation import SimulationConfig, SimulationRunResult, build_belt, simulate_belt
from .worker import Worker

__all__ = [
    "Belt",
    "weighted_choice",
    "ItemKind",
    "ProductionLine",
    "ProductRecipe",
    "SupplyEntry",
    "WorkerPlacement",
    "load_line",
    "reference_line",
    "BeltlineError",
    "InvalidConfiguration",
    "RandomSourceExhausted",
    "SelectionExhausted",
    "MonteCarloResult",
    "MonteCarloSummary",
    "run_monte_carlo",
    "RandomSourceConfig",
    "RandomSourceFactory",
    "ScriptedRandomSource",
    "SeededRandomSource",
    "SimulationConfig",
    "SimulationRunResult",
    "build_belt",
    "simulate_belt",
    "Worker",
]
