"""Core data structures for the belt simulator."""
from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import InvalidConfiguration

DEFAULT_BUILD_TIME = 4


@dataclass(eq=False)
class ItemKind:
    """A raw component or finished product that can sit on the belt.

    Kinds compare by identity, so two kinds with the same name are still
    different kinds. ``probability`` is maintained by the belt that generates
    the kind and ``collected`` by the belt's exit accounting.
    """

    name: str
    weight: int = 0
    requires: Tuple["ItemKind", ...] = ()
    probability: float = field(default=0.0, init=False)
    collected: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise InvalidConfiguration(f"Item kind '{self.name}' has negative weight {self.weight}.")
        self.requires = tuple(self.requires)

    @property
    def is_product(self) -> bool:
        return bool(self.requires)

    @property
    def is_raw(self) -> bool:
        return not self.requires

    def assembles_from(self, held: Iterable[Optional[ItemKind]]) -> bool:
        """Return True when every required component is among ``held``."""
        if not self.requires:
            raise InvalidConfiguration(f"Item kind '{self.name}' has no required components.")
        present = [kind for kind in held if kind is not None]
        return all(any(part is kind for kind in present) for part in self.requires)

    def __repr__(self) -> str:
        return f"ItemKind({self.name!r})"


@dataclass
class SupplyEntry:
    """One weighted outcome for the belt entry; ``name=None`` leaves the slot empty."""

    name: Optional[str]
    weight: int


@dataclass
class ProductRecipe:
    name: str
    components: Sequence[str]


@dataclass
class WorkerPlacement:
    name: str
    position: int
    weight: int = 1


@dataclass
class ProductionLine:
    """Describes a belt, what enters it, what can be assembled and who works it."""

    name: str
    slot_count: int
    supply: Sequence[SupplyEntry]
    products: Sequence[ProductRecipe] = field(default_factory=list)
    workers: Sequence[WorkerPlacement] = field(default_factory=list)
    build_time: int = DEFAULT_BUILD_TIME

    def __post_init__(self) -> None:
        if self.slot_count < 1:
            raise InvalidConfiguration(f"Line '{self.name}' needs at least one slot.")
        if self.build_time < 1:
            raise InvalidConfiguration(f"Line '{self.name}' build time must be at least 1.")
        raw = set()
        for entry in self.supply:
            if entry.weight < 0:
                raise InvalidConfiguration(f"Supply entry '{entry.name}' has negative weight.")
            if entry.name is not None:
                raw.add(entry.name)
        if sum(1 for entry in self.supply if entry.name is None) > 1:
            raise InvalidConfiguration(f"Line '{self.name}' lists more than one empty supply entry.")
        product_names = {recipe.name for recipe in self.products}
        raw -= product_names
        for recipe in self.products:
            components = list(recipe.components)
            if len(components) != 2 or components[0] == components[1]:
                raise InvalidConfiguration(
                    f"Product '{recipe.name}' must be built from two different components, got {components}."
                )
            missing = [part for part in components if part not in raw]
            if missing:
                raise InvalidConfiguration(
                    f"Product '{recipe.name}' needs components that are not raw supply: {', '.join(missing)}."
                )
        for worker in self.workers:
            if worker.position < 0 or worker.position >= self.slot_count:
                raise InvalidConfiguration(
                    f"Worker '{worker.name}' position {worker.position} is outside a {self.slot_count}-slot belt."
                )

    def describe(self) -> str:
        supply = ", ".join(f"{entry.name or 'empty'}:{entry.weight}" for entry in self.supply)
        recipes = ", ".join(f"{recipe.name}={'+'.join(recipe.components)}" for recipe in self.products)
        stations: Dict[int, int] = {}
        for worker in self.workers:
            stations[worker.position] = stations.get(worker.position, 0) + 1
        crew = " ".join(f"[{pos}:{count}]" for pos, count in sorted(stations.items()))
        return f"{self.slot_count} slots | supply {supply} | {recipes or 'no products'} | workers {crew or 'none'}"

    def build_kinds(self) -> Dict[str, ItemKind]:
        """Create fresh item kinds for one run, keyed by name."""
        kinds: Dict[str, ItemKind] = {
            entry.name: ItemKind(name=entry.name, weight=entry.weight)
            for entry in self.supply
            if entry.name is not None
        }
        for recipe in self.products:
            parts = tuple(kinds[part] for part in recipe.components)
            if recipe.name in kinds:
                kinds[recipe.name].requires = parts
            else:
                kinds[recipe.name] = ItemKind(name=recipe.name, requires=parts)
        return kinds

    @classmethod
    def from_dict(cls, data: dict) -> "ProductionLine":
        try:
            supply = [SupplyEntry(name=item.get("name"), weight=int(item["weight"])) for item in data["supply"]]
            products = [
                ProductRecipe(name=item["name"], components=list(item["components"]))
                for item in data.get("products", [])
            ]
            workers = [
                WorkerPlacement(
                    name=item.get("name", f"Worker {idx + 1}"),
                    position=int(item["position"]),
                    weight=int(item.get("weight", 1)),
                )
                for idx, item in enumerate(data.get("workers", []))
            ]
            return cls(
                name=data.get("name", "Line"),
                slot_count=int(data["slot_count"]),
                supply=supply,
                products=products,
                workers=workers,
                build_time=int(data.get("build_time", DEFAULT_BUILD_TIME)),
            )
        except KeyError as exc:
            raise InvalidConfiguration(f"Line definition is missing field {exc}.") from exc


def load_line(path: Union[str, Path]) -> ProductionLine:
    """Read a line definition from a JSON file."""
    with Path(path).open(encoding="utf-8") as handle:
        return ProductionLine.from_dict(json.load(handle))


def reference_line() -> ProductionLine:
    """Five slots, A/B/empty supply in thirds, six workers paired on the middle slots."""
    positions = [1, 1, 2, 2, 3, 3]
    workers: List[WorkerPlacement] = [
        WorkerPlacement(name=f"Worker {idx + 1}", position=pos) for idx, pos in enumerate(positions)
    ]
    return ProductionLine(
        name="Reference line",
        slot_count=5,
        supply=[SupplyEntry("A", 50), SupplyEntry("B", 50), SupplyEntry(None, 50)],
        products=[ProductRecipe("P", ["A", "B"])],
        workers=workers,
        build_time=DEFAULT_BUILD_TIME,
    )
