"""Worker assembly state machine."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional, Sequence

from .entities import ItemKind

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Worker:
    """A two-handed worker stationed at one belt slot.

    The finished item always ends up in the right hand. ``countdown`` above
    zero means the worker is assembling ``building`` and its hands are frozen;
    ``building`` stays set until the finished item is placed on the belt.
    """

    name: str
    position: int
    weight: int = 1
    left: Optional[ItemKind] = field(default=None, init=False)
    right: Optional[ItemKind] = field(default=None, init=False)
    building: Optional[ItemKind] = field(default=None, init=False)
    countdown: int = field(default=0, init=False)
    acted: bool = field(default=False, init=False)
    probability: float = field(default=0.0, init=False)

    @property
    def is_assembling(self) -> bool:
        return self.countdown > 0

    @property
    def finished_item(self) -> Optional[ItemKind]:
        if self.countdown == 0 and self.building is not None and self.right is self.building:
            return self.building
        return None

    @property
    def state(self) -> str:
        if self.is_assembling:
            return "assembling"
        if self.finished_item is not None:
            return "holding"
        return "idle"

    @property
    def hands(self) -> tuple:
        return (self.left, self.right)

    def holds(self, kind: ItemKind) -> bool:
        return self.left is kind or self.right is kind

    def reset(self) -> None:
        self.left = None
        self.right = None
        self.building = None
        self.countdown = 0
        self.acted = False

    def act(self, slot: Optional[ItemKind], products: Sequence[ItemKind], build_time: int) -> Optional[ItemKind]:
        """Offer the worker its slot content and return what the slot holds afterwards."""
        if self.countdown > 0:
            self.countdown -= 1
            if self.countdown > 0:
                return slot
            self.left = None
            self.right = self.building
            logger.debug("%s finished %s", self.name, self.right.name)

        finished = self.finished_item
        if finished is not None:
            if slot is not None:
                return slot
            self.left = None
            self.right = None
            self.building = None
            logger.debug("%s placed %s at slot %d", self.name, finished.name, self.position)
            return finished

        if slot is None or any(slot is product for product in products):
            return slot
        if self.holds(slot):
            return slot
        if self.left is None:
            self.left = slot
        elif self.right is None:
            self.right = slot
        else:
            return slot

        if self.left is not None and self.right is not None:
            self._start_assembly(products, build_time)
        return None

    def _start_assembly(self, products: Sequence[ItemKind], build_time: int) -> None:
        held = self.hands
        for product in products:
            if product.assembles_from(held):
                self.building = product
                self.countdown = build_time
                logger.debug("%s assembling %s for %d steps", self.name, product.name, build_time)
                return
        logger.debug(
            "%s holds %s and %s, which no product uses",
            self.name,
            self.left.name,
            self.right.name,
        )
