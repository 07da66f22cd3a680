"""
Listing price calculation.

Maps a card's catalog price signals to a single recommended listing price:

- Named override: excluded cards keep their human-set price
  (original price if known, otherwise market price). No floor applies.
- Cheap (market <= $0.30): max($0.50, low)
- Expensive (market > $30.00): market, unchanged
- Standard: max($0.50, low, average(low, low with shipping), market)

The result is rounded half-up to cents.

Two standard-tier rules exist in the project's history. The legacy rule,
max($0.50, low, average(low with shipping, market)), is still selectable
through ``PricingPolicy.standard_formula = "market_average"`` until the
business owner confirms which one is intended.
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Literal

from tcgmanager.config import Settings, settings

StandardFormula = Literal["low_average", "market_average"]

CENT = Decimal("0.01")


class PriceTier(str, Enum):
    """Which pricing rule produced a price."""

    OVERRIDE = "override"
    CHEAP = "cheap"
    STANDARD = "standard"
    EXPENSIVE = "expensive"


@dataclass(frozen=True, slots=True)
class PricingInput:
    """
    Price signals for one card.

    Missing signals (None) are treated as zero.
    """

    market_price: float | None
    low_price: float | None
    low_price_with_shipping: float | None
    card_name: str = ""
    original_price: float | None = None


@dataclass(frozen=True)
class PricingPolicy:
    """Thresholds and overrides for the pricing rules."""

    floor: float = 0.50
    cheap_threshold: float = 0.30
    expensive_threshold: float = 30.00
    excluded_cards: tuple[str, ...] = field(default_factory=tuple)
    standard_formula: StandardFormula = "low_average"

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "PricingPolicy":
        config = config or settings
        return cls(
            floor=config.pricing_floor,
            cheap_threshold=config.pricing_cheap_threshold,
            expensive_threshold=config.pricing_expensive_threshold,
            excluded_cards=tuple(config.pricing_excluded_cards),
            standard_formula=config.pricing_standard_formula,
        )

    def is_excluded(self, card_name: str) -> bool:
        """Check if a card name contains any excluded entry (case-insensitive)."""
        name = card_name.casefold()
        entries = (entry.strip().casefold() for entry in self.excluded_cards)
        return any(entry and entry in name for entry in entries)


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """A calculated price and the rule that produced it."""

    price: float
    tier: PriceTier


def _signal(name: str, value: float | None) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value!r}")
    # str() keeps the shortest decimal form, so 2.33 stays 2.33
    return Decimal(str(value))


def round_currency(value: Decimal | float) -> float:
    """Round half-up to cents."""
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def classify_tier(market_price: float | None, policy: PricingPolicy | None = None) -> PriceTier:
    """Classify a market price into cheap, standard, or expensive."""
    policy = policy or PricingPolicy.from_settings()
    market = _signal("market_price", market_price)
    if market <= Decimal(str(policy.cheap_threshold)):
        return PriceTier.CHEAP
    if market > Decimal(str(policy.expensive_threshold)):
        return PriceTier.EXPENSIVE
    return PriceTier.STANDARD


def quote_price(inputs: PricingInput, policy: PricingPolicy | None = None) -> PriceQuote:
    """
    Calculate the recommended listing price and report which rule applied.

    Args:
        inputs: Catalog price signals and card name
        policy: Pricing thresholds; defaults to the configured policy

    Returns:
        PriceQuote with the rounded price and its tier

    Raises:
        ValueError: If any price signal is negative, NaN, or not a number
    """
    policy = policy or PricingPolicy.from_settings()

    market = _signal("market_price", inputs.market_price)
    low = _signal("low_price", inputs.low_price)
    low_with_shipping = _signal("low_price_with_shipping", inputs.low_price_with_shipping)
    original = (
        _signal("original_price", inputs.original_price)
        if inputs.original_price is not None
        else None
    )
    floor = Decimal(str(policy.floor))

    # Override bypasses the floor: the human-set price is trusted as-is
    if inputs.card_name and policy.is_excluded(inputs.card_name):
        price = original if original is not None else market
        return PriceQuote(price=round_currency(price), tier=PriceTier.OVERRIDE)

    tier = classify_tier(inputs.market_price, policy)

    if tier is PriceTier.CHEAP:
        price = max(floor, low)
    elif tier is PriceTier.EXPENSIVE:
        price = market
    elif policy.standard_formula == "market_average":
        price = max(floor, low, (low_with_shipping + market) / 2)
    else:
        price = max(floor, low, (low + low_with_shipping) / 2, market)

    return PriceQuote(price=round_currency(price), tier=tier)


def calculate_price(inputs: PricingInput, policy: PricingPolicy | None = None) -> float:
    """Calculate the recommended listing price for a card."""
    return quote_price(inputs, policy).price
