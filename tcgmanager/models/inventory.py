"""
User inventory: stock lines and the per-session aggregate that owns them.

An Inventory is created by the caller for each session or request. There is
no module-level inventory. Changes are reported through return values and,
optionally, through observers passed to the constructor.

INVARIANT: every line has quantity >= 1 and price >= 0, and a failed
operation leaves every existing line unchanged.
"""

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime

from tcgmanager.config import settings
from tcgmanager.models.card import CardRecord
from tcgmanager.models.failure import (
    InvalidConditionError,
    InvalidPriceError,
    InvalidQuantityError,
)
from tcgmanager.services.pricing import PricingInput, PricingPolicy, calculate_price

FOIL_SUFFIX = " Foil"


def validate_quantity(value: object, maximum: int | None = None) -> int:
    """
    Validate a user-supplied quantity.

    Accepts ints, integral floats, and integer strings ("3", " 3 ").

    Raises:
        InvalidQuantityError: If not a positive integer, or above maximum
    """
    maximum = settings.max_quantity if maximum is None else maximum

    if isinstance(value, bool):
        raise InvalidQuantityError(value)
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float) and value.is_integer():
        quantity = int(value)
    elif isinstance(value, str):
        try:
            quantity = int(value.strip())
        except ValueError:
            raise InvalidQuantityError(value) from None
    else:
        raise InvalidQuantityError(value)

    if quantity < 1:
        raise InvalidQuantityError(value)
    if quantity > maximum:
        raise InvalidQuantityError(value, detail=f"Maximum quantity is {maximum}")
    return quantity


def validate_price(value: object, maximum: float | None = None) -> float:
    """
    Validate a user-supplied listing price.

    Accepts numbers and numeric strings ("0.98", "$0.98").

    Raises:
        InvalidPriceError: If negative, not a finite number, or above maximum
    """
    maximum = settings.max_price if maximum is None else maximum

    if isinstance(value, bool):
        raise InvalidPriceError(value)
    if isinstance(value, int | float):
        price = float(value)
    elif isinstance(value, str):
        try:
            price = float(value.strip().removeprefix("$"))
        except ValueError:
            raise InvalidPriceError(value) from None
    else:
        raise InvalidPriceError(value)

    if math.isnan(price) or math.isinf(price) or price < 0:
        raise InvalidPriceError(value)
    if price > maximum:
        raise InvalidPriceError(value, detail=f"Maximum price is {maximum:.2f}")
    return price


def validate_condition(value: object, allowed: Iterable[str]) -> str:
    """
    Validate a condition label against the configured table.

    A configured label followed by " Foil" is also accepted.

    Raises:
        InvalidConditionError: If the label is not in the table
    """
    allowed = list(allowed)
    if isinstance(value, str):
        label = value.strip()
        if label in allowed or label.removesuffix(FOIL_SUFFIX) in allowed:
            return label
    raise InvalidConditionError(value, allowed)


def pricing_input(card: CardRecord, original_price: float | None = None) -> PricingInput:
    """Pricing engine input for a catalog card."""
    return PricingInput(
        market_price=card.prices.market,
        low_price=card.prices.low,
        low_price_with_shipping=card.prices.low_with_shipping,
        card_name=card.name,
        original_price=original_price,
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class InventoryLine:
    """
    One stock-keeping line: a card plus quantity, condition, and price.

    Attributes:
        card: The catalog record this line holds
        quantity: Number of copies (>= 1)
        condition: Label from the condition table (e.g., "Near Mint")
        price: Listing price per copy (>= 0)
        created_at: When the line was added (UTC)
        allowed_conditions: Condition table used for validation
    """

    card: CardRecord
    quantity: int
    condition: str
    price: float = 0.0
    created_at: datetime = field(default_factory=_utcnow)
    allowed_conditions: tuple[str, ...] = field(
        default_factory=lambda: tuple(settings.conditions), repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.quantity = validate_quantity(self.quantity)
        self.price = validate_price(self.price)
        self.condition = validate_condition(self.condition, self.allowed_conditions)

    @property
    def total_value(self) -> float:
        return self.price * self.quantity

    def update_quantity(self, quantity: object) -> None:
        self.quantity = validate_quantity(quantity)

    def update_price(self, price: object) -> None:
        self.price = validate_price(price)

    def update_condition(self, condition: object) -> None:
        self.condition = validate_condition(condition, self.allowed_conditions)


class InventoryObserver:
    """
    Receives inventory change notifications.

    Subclass and override the events you care about; the defaults do nothing.
    """

    def line_added(self, line: InventoryLine, index: int) -> None:
        pass

    def line_removed(self, line: InventoryLine, index: int) -> None:
        pass

    def line_updated(self, line: InventoryLine, index: int) -> None:
        pass

    def cleared(self) -> None:
        pass


class Inventory:
    """
    A user's held stock for one session.

    Lines keep insertion order, which is also the export order.
    """

    def __init__(
        self,
        conditions: Iterable[str] | None = None,
        observers: Iterable[InventoryObserver] = (),
        policy: PricingPolicy | None = None,
    ) -> None:
        self.conditions: tuple[str, ...] = tuple(
            settings.conditions if conditions is None else conditions
        )
        self.policy = policy or PricingPolicy.from_settings()
        self._observers = list(observers)
        self._lines: list[InventoryLine] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[InventoryLine]:
        return iter(list(self._lines))

    @property
    def lines(self) -> list[InventoryLine]:
        """A copy of the current lines."""
        return list(self._lines)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total_value(self) -> float:
        return sum(line.total_value for line in self._lines)

    def recommended_price(self, card: CardRecord) -> float:
        """Listing price the pricing engine recommends for a card."""
        return calculate_price(pricing_input(card), self.policy)

    def add_card(
        self,
        card: CardRecord,
        quantity: object = 1,
        condition: str | None = None,
        price: object | None = None,
    ) -> InventoryLine:
        """
        Add a card to the inventory.

        Args:
            card: Catalog record to add
            quantity: Number of copies
            condition: Condition label; defaults to the configured default
            price: Listing price; defaults to the recommended price

        Returns:
            The created line

        Raises:
            InvalidQuantityError, InvalidPriceError, InvalidConditionError:
                The inventory is not modified.
        """
        line = InventoryLine(
            card=card,
            quantity=quantity,  # type: ignore[arg-type]
            condition=settings.default_condition if condition is None else condition,
            price=self.recommended_price(card) if price is None else price,  # type: ignore[arg-type]
            allowed_conditions=self.conditions,
        )
        return self.add_line(line)

    def add_line(self, line: InventoryLine) -> InventoryLine:
        """Append an already validated line."""
        self._lines.append(line)
        index = len(self._lines) - 1
        for observer in self._observers:
            observer.line_added(line, index)
        return line

    def get(self, index: int) -> InventoryLine:
        if index < 0 or index >= len(self._lines):
            raise IndexError(f"Invalid inventory line index: {index}")
        return self._lines[index]

    def remove(self, index: int) -> InventoryLine:
        """Remove and return the line at index."""
        line = self.get(index)
        del self._lines[index]
        for observer in self._observers:
            observer.line_removed(line, index)
        return line

    def update(
        self,
        index: int,
        *,
        quantity: object | None = None,
        price: object | None = None,
        condition: object | None = None,
    ) -> InventoryLine:
        """
        Update quantity, price, and/or condition of a line.

        All values are validated before any is applied, so a rejected
        update leaves the line exactly as it was.
        """
        line = self.get(index)

        new_quantity = line.quantity if quantity is None else validate_quantity(quantity)
        new_price = line.price if price is None else validate_price(price)
        new_condition = (
            line.condition if condition is None else validate_condition(condition, self.conditions)
        )

        line.quantity = new_quantity
        line.price = new_price
        line.condition = new_condition

        for observer in self._observers:
            observer.line_updated(line, index)
        return line

    def clear(self) -> None:
        self._lines = []
        for observer in self._observers:
            observer.cleared()

    def find_by_name(self, text: str) -> list[InventoryLine]:
        """Lines whose card name contains text (case-insensitive)."""
        needle = text.casefold()
        return [line for line in self._lines if needle in line.card.name.casefold()]
