"""
Bulk repricing of a marketplace CSV export.

Each in-stock row gets its TCG Marketplace Price replaced by the price the
pricing engine recommends from the row's own price signals. The existing
marketplace price is passed as the original price, so cards on the
exclusion list keep it.
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from tcgmanager.models.failure import MalformedRowError
from tcgmanager.parsers.marketplace_csv import (
    MarketplaceRow,
    decode_marketplace_csv,
    encode_marketplace_csv,
    format_money,
    parse_money,
)
from tcgmanager.services.pricing import (
    PriceQuote,
    PriceTier,
    PricingInput,
    PricingPolicy,
    quote_price,
)

logger = logging.getLogger(__name__)


@dataclass
class RepriceResult:
    """Outcome of repricing a marketplace CSV."""

    text: str
    rows: list[MarketplaceRow]
    total_value: float
    tiers: dict[PriceTier, int] = field(default_factory=dict)
    errors: list[MalformedRowError] = field(default_factory=list)
    dropped_rows: int = 0

    @property
    def skipped_rows(self) -> int:
        return len(self.errors)


def _signal(value: str | None) -> float | None:
    # Unreadable or negative signals are treated as missing
    try:
        amount = parse_money(value)
    except ValueError:
        return None
    if amount is None or not math.isfinite(amount) or amount < 0:
        return None
    return amount


def row_pricing_input(row: MarketplaceRow) -> PricingInput:
    """Pricing engine input for a marketplace row."""
    return PricingInput(
        market_price=_signal(row.tcg_market_price),
        low_price=_signal(row.tcg_low_price),
        low_price_with_shipping=_signal(row.tcg_low_price_with_shipping),
        card_name=row.product_name or "",
        original_price=_signal(row.tcg_marketplace_price),
    )


def _reprice(
    row: MarketplaceRow, policy: PricingPolicy | None
) -> tuple[MarketplaceRow, PriceQuote]:
    quote = quote_price(row_pricing_input(row), policy)
    return replace(row, tcg_marketplace_price=format_money(quote.price)), quote


def reprice_row(row: MarketplaceRow, policy: PricingPolicy | None = None) -> MarketplaceRow:
    """Return a copy of row with the recommended marketplace price."""
    return _reprice(row, policy)[0]


def reprice_rows(
    rows: Iterable[MarketplaceRow], policy: PricingPolicy | None = None
) -> list[MarketplaceRow]:
    """Reprice every row, preserving order."""
    policy = policy or PricingPolicy.from_settings()
    return [reprice_row(row, policy) for row in rows]


def total_value(rows: Iterable[MarketplaceRow]) -> float:
    """Sum of marketplace price times quantity over all rows."""
    total = 0.0
    for row in rows:
        price = _signal(row.tcg_marketplace_price) or 0.0
        total += price * row.quantity
    return round(total, 2)


def reprice_csv(source: str | Iterable[str], policy: PricingPolicy | None = None) -> RepriceResult:
    """
    Decode a marketplace CSV, reprice every in-stock row, and re-encode it.

    Raises:
        MissingHeaderError: If the input has no header
    """
    policy = policy or PricingPolicy.from_settings()
    decoded = decode_marketplace_csv(source)

    rows: list[MarketplaceRow] = []
    tiers: dict[PriceTier, int] = {}
    for row in decoded.rows:
        repriced, quote = _reprice(row, policy)
        tiers[quote.tier] = tiers.get(quote.tier, 0) + 1
        rows.append(repriced)

    result = RepriceResult(
        text=encode_marketplace_csv(rows),
        rows=rows,
        total_value=total_value(rows),
        tiers=tiers,
        errors=decoded.errors,
        dropped_rows=decoded.dropped_rows,
    )

    logger.info(
        "marketplace_csv_repriced",
        extra={
            "row_count": len(rows),
            "total_value": result.total_value,
            "tiers": {tier.value: count for tier, count in tiers.items()},
        },
    )
    return result
