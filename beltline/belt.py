"""Belt slots, rosters and weighted selection."""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

from .entities import DEFAULT_BUILD_TIME, ItemKind
from .errors import InvalidConfiguration, SelectionExhausted
from .randomness import RandomSource
from .worker import Worker

logger = logging.getLogger(__name__)

T = TypeVar("T")


def weighted_choice(entries: Sequence[Tuple[T, float]], draw: float) -> T:
    """Return the first entity whose cumulative probability lies past ``draw``.

    Each entity owns the half-open interval ``[previous, cumulative)``, so a
    draw of exactly 0.5 against two even entries picks the second one.
    Entries are scanned in the order given; ties are never re-sorted by weight.
    Raises :class:`SelectionExhausted` when the cumulative sum never passes the
    draw, which happens for an empty roster, an all-zero roster or rounding.
    """
    cumulative = 0.0
    for entity, probability in entries:
        cumulative += probability
        if cumulative > draw:
            return entity
    raise SelectionExhausted(draw, cumulative)


@dataclass
class _SupplySlot:
    """One generation roster entry; ``kind=None`` is the empty gap."""

    kind: Optional[ItemKind]
    weight: int
    probability: float = 0.0


class Belt:
    """Fixed-length belt. Index 0 is the entry slot, the last index the exit."""

    def __init__(self, slot_count: int, random_source: RandomSource, build_time: int = DEFAULT_BUILD_TIME) -> None:
        if slot_count < 1:
            raise InvalidConfiguration("A belt needs at least one slot.")
        if build_time < 1:
            raise InvalidConfiguration("Build time must be at least one step.")
        self.slot_count = slot_count
        self.build_time = build_time
        self.random_source = random_source
        self._slots: List[Optional[ItemKind]] = [None] * slot_count
        self._supply: List[_SupplySlot] = []
        self._products: List[ItemKind] = []
        self._workers: List[Worker] = []
        self.remaining_mass = 1.0
        self.empty_exits = 0

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def add_kind(self, kind: ItemKind) -> None:
        if any(entry.kind is kind for entry in self._supply):
            raise InvalidConfiguration(f"Item kind '{kind.name}' is already on the generation roster.")
        self._supply.append(_SupplySlot(kind=kind, weight=kind.weight))
        self._recompute_supply()

    def add_gap(self, weight: int) -> None:
        """Register the chance that nothing enters the belt on a step."""
        if weight < 0:
            raise InvalidConfiguration(f"Empty supply weight must be non-negative, got {weight}.")
        if any(entry.kind is None for entry in self._supply):
            raise InvalidConfiguration("The empty supply entry is already registered.")
        self._supply.append(_SupplySlot(kind=None, weight=weight))
        self._recompute_supply()

    def add_product(self, kind: ItemKind) -> None:
        if not kind.requires:
            raise InvalidConfiguration(f"Finished kind '{kind.name}' has no required components.")
        if len(kind.requires) != 2 or kind.requires[0] is kind.requires[1]:
            raise InvalidConfiguration(f"Finished kind '{kind.name}' must need exactly two different components.")
        if any(part.requires for part in kind.requires):
            raise InvalidConfiguration(f"Finished kind '{kind.name}' can only be built from raw components.")
        if any(product is kind for product in self._products):
            raise InvalidConfiguration(f"Finished kind '{kind.name}' is already registered.")
        self._products.append(kind)

    def add_worker(self, worker: Worker) -> None:
        if worker.position < 0 or worker.position >= self.slot_count:
            raise InvalidConfiguration(
                f"Worker '{worker.name}' position {worker.position} is outside a {self.slot_count}-slot belt."
            )
        if worker.weight < 0:
            raise InvalidConfiguration(f"Worker '{worker.name}' has negative weight {worker.weight}.")
        for existing in self._workers:
            if existing is worker or existing.name == worker.name:
                raise InvalidConfiguration(f"Worker '{worker.name}' is already registered.")
        self._workers.append(worker)
        total = sum(w.weight for w in self._workers)
        for w in self._workers:
            w.probability = w.weight / total if total else 0.0

    def _recompute_supply(self) -> None:
        total = sum(entry.weight for entry in self._supply)
        for entry in self._supply:
            entry.probability = entry.weight / total if total else 0.0
            if entry.kind is not None:
                entry.kind.probability = entry.probability

    def validate(self) -> None:
        if not self._supply or sum(entry.weight for entry in self._supply) == 0:
            raise InvalidConfiguration("The generation roster has no positive weight.")
        if not self._workers:
            raise InvalidConfiguration("The belt has no workers.")
        if sum(worker.weight for worker in self._workers) == 0:
            raise InvalidConfiguration("The worker roster has no positive weight.")

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def slots(self) -> Tuple[Optional[ItemKind], ...]:
        return tuple(self._slots)

    @property
    def kinds(self) -> List[ItemKind]:
        return [entry.kind for entry in self._supply if entry.kind is not None]

    @property
    def products(self) -> List[ItemKind]:
        return list(self._products)

    @property
    def workers(self) -> List[Worker]:
        return list(self._workers)

    @property
    def generation_roster(self) -> List[Tuple[Optional[ItemKind], float]]:
        return [(entry.kind, entry.probability) for entry in self._supply]

    @property
    def empty_probability(self) -> float:
        return sum(entry.probability for entry in self._supply if entry.kind is None)

    def collected_counts(self) -> Dict[str, int]:
        """Exit counts per kind name, for both generated and finished kinds."""
        counts: Dict[str, int] = {}
        for kind in self.kinds + self._products:
            counts[kind.name] = kind.collected
        return counts

    def read_slot(self, index: int) -> Optional[ItemKind]:
        return self._slots[index]

    def write_slot(self, index: int, item: Optional[ItemKind]) -> None:
        self._slots[index] = item

    # ------------------------------------------------------------------
    # Step operations
    # ------------------------------------------------------------------
    def generate_next_item(self) -> Optional[ItemKind]:
        draw = self.random_source.next()
        return weighted_choice(self.generation_roster, draw)

    def place_at_entry(self, item: Optional[ItemKind]) -> None:
        self._slots[0] = item

    def advance(self, n: int = 1) -> None:
        """Move everything ``n`` slots toward the exit, counting what falls off."""
        if n < 0:
            raise InvalidConfiguration(f"Cannot advance the belt by {n} slots.")
        n = min(n, self.slot_count)
        for item in self._slots[self.slot_count - n:]:
            if item is None:
                self.empty_exits += 1
            else:
                item.collected += 1
        if n:
            self._slots = [None] * n + self._slots[: self.slot_count - n]
        for worker in self._workers:
            worker.acted = False
        self.remaining_mass = 1.0

    def pick_next_worker(self) -> Worker:
        """Draw a worker that has not yet acted in this step.

        The draw is scaled by the probability mass of the workers still
        available, so each pick is weighted over that subset only.
        """
        candidates = [(worker, worker.probability) for worker in self._workers if not worker.acted]
        if not candidates:
            raise SelectionExhausted(0.0, 0.0)
        draw = self.random_source.next()
        worker = weighted_choice(candidates, draw * self.remaining_mass)
        worker.acted = True
        self.remaining_mass = max(0.0, self.remaining_mass - worker.probability)
        logger.debug("Picked %s (remaining mass %.3f)", worker.name, self.remaining_mass)
        return worker

    def offer(self, worker: Worker) -> Optional[ItemKind]:
        """Let ``worker`` act on its slot and write the outcome back."""
        worker.acted = True
        current = self._slots[worker.position]
        result = worker.act(current, self._products, self.build_time)
        self._slots[worker.position] = result
        return result

    def reset(self) -> None:
        self._slots = [None] * self.slot_count
        for kind in self.kinds + self._products:
            kind.collected = 0
        for worker in self._workers:
            worker.reset()
        self.remaining_mass = 1.0
        self.empty_exits = 0

    def describe(self) -> str:
        return " | ".join(item.name if item is not None else "-" for item in self._slots)
