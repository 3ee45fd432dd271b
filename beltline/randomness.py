"""Sources of uniform random draws for the belt simulator."""
from __future__ import annotations

from dataclasses import dataclass, field
import random
from typing import Any, Dict, Optional, Sequence

from .errors import InvalidConfiguration, RandomSourceExhausted


@dataclass
class RandomSourceConfig:
    """User friendly description of a random source."""

    type: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        items = ", ".join(f"{k}={v}" for k, v in self.parameters.items())
        return f"{self.type.title()}({items})"


class RandomSource:
    """Base random source interface: uniform draws in [0, 1)."""

    description = "RandomSource"

    def next(self) -> float:
        raise NotImplementedError


class SeededRandomSource(RandomSource):
    """Pseudo-random draws from ``random.Random``.

    A ``seed`` of ``None`` seeds the generator from OS entropy (or the clock),
    which is what an unscripted run uses.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)
        self.description = f"Seeded(seed={seed})" if seed is not None else "Seeded(entropy)"

    def next(self) -> float:
        return self._rng.random()


class SystemRandomSource(RandomSource):
    """Non-reproducible draws straight from the operating system."""

    description = "System()"

    def __init__(self) -> None:
        self._rng = random.SystemRandom()

    def next(self) -> float:
        return self._rng.random()


class ScriptedRandomSource(RandomSource):
    """Replays a fixed sequence of draws, for reproducible runs and tests."""

    def __init__(self, values: Sequence[float], repeat: bool = False) -> None:
        values = [float(value) for value in values]
        for value in values:
            if not 0.0 <= value < 1.0:
                raise InvalidConfiguration(f"Scripted draw {value} is outside [0, 1).")
        if repeat and not values:
            raise InvalidConfiguration("A repeating script needs at least one value.")
        self._values = values
        self._repeat = repeat
        self._index = 0
        self.description = f"Scripted({len(values)} values{', repeat' if repeat else ''})"

    @property
    def consumed(self) -> int:
        return self._index

    def next(self) -> float:
        if self._index >= len(self._values):
            if not self._repeat:
                raise RandomSourceExhausted(f"Scripted source ran out after {len(self._values)} draws.")
            self._index = 0
        value = self._values[self._index]
        self._index += 1
        return value


class RandomSourceFactory:
    """Factory for constructing random sources from configuration dictionaries."""

    SUPPORTED_TYPES = {"seeded", "system", "scripted"}

    @staticmethod
    def from_config(config: RandomSourceConfig) -> RandomSource:
        source_type = config.type.lower().strip()
        params = config.parameters
        if source_type == "seeded":
            seed = params.get("seed")
            return SeededRandomSource(None if seed is None else int(seed))

        if source_type == "system":
            return SystemRandomSource()

        if source_type == "scripted":
            values = params.get("values")
            if values is None:
                raise InvalidConfiguration("Scripted source requires 'values'.")
            return ScriptedRandomSource(values, repeat=bool(params.get("repeat", False)))

        raise InvalidConfiguration(f"Unsupported random source type '{config.type}'.")

    @staticmethod
    def from_dict(definition: Dict[str, Any]) -> RandomSource:
        source_type = definition.get("type")
        if not source_type:
            raise InvalidConfiguration("Random source definition requires a 'type' field.")
        params = {k: v for k, v in definition.items() if k != "type"}
        return RandomSourceFactory.from_config(RandomSourceConfig(type=source_type, parameters=params))
