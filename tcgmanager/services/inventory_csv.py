"""
Inventory import/export through the marketplace CSV codec.

Export writes one row per inventory line in inventory order. Import decodes
the file, converts each in-stock row into an inventory line, and adds the
lines that pass validation. Rows that fail validation are rejected one by
one and reported; a file without a header fails before the inventory is
touched.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from tcgmanager.config import settings
from tcgmanager.models.card import CardPrices, CardRecord
from tcgmanager.models.failure import InvalidPriceError, KnownError
from tcgmanager.models.inventory import Inventory, InventoryLine
from tcgmanager.parsers.csv_dialect import normalize_field
from tcgmanager.parsers.marketplace_csv import (
    MarketplaceRow,
    decode_marketplace_csv,
    encode_marketplace_csv,
    format_money,
    parse_money,
)

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Outcome of importing a marketplace CSV into an inventory."""

    added: list[InventoryLine] = field(default_factory=list)
    rejected: list[KnownError] = field(default_factory=list)
    """Rows that decoded but failed inventory validation."""

    skipped_rows: int = 0
    """Malformed rows (wrong column count)."""

    dropped_rows: int = 0
    """Out-of-stock rows (Total Quantity of zero)."""

    warnings: list[str] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return len(self.added)


def _catalog_money(value: str | None) -> float | None:
    """Catalog price signals degrade to None when unreadable."""
    try:
        return parse_money(value)
    except ValueError:
        return None


def line_to_row(line: InventoryLine, product_line: str | None = None) -> MarketplaceRow:
    """Build the marketplace row for an inventory line."""
    card = line.card
    prices = card.prices

    return MarketplaceRow(
        tcgplayer_id=normalize_field(card.tcgplayer_id),
        product_line=product_line or settings.product_line,
        set_name=normalize_field(card.set_name),
        product_name=card.name,
        title=None,
        number=normalize_field(card.collector_number),
        rarity=card.rarity_code,
        condition=line.condition,
        tcg_market_price=format_money(prices.market),
        tcg_direct_low=format_money(prices.direct_low),
        tcg_low_price_with_shipping=format_money(prices.low_with_shipping),
        tcg_low_price=format_money(prices.low),
        total_quantity=str(line.quantity),
        add_to_quantity="0",
        tcg_marketplace_price=format_money(line.price),
        photo_url=normalize_field(card.image_url),
    )


def row_to_line(row: MarketplaceRow, conditions: Iterable[str] | None = None) -> InventoryLine:
    """
    Build an inventory line from a marketplace row.

    A blank condition falls back to the configured default, and a blank
    marketplace price becomes 0.

    Raises:
        InvalidCardError: If the row has no product name
        InvalidQuantityError, InvalidPriceError, InvalidConditionError
    """
    card = CardRecord(
        id=row.tcgplayer_id,
        tcgplayer_id=row.tcgplayer_id,
        name=row.product_name or "",
        set_name=row.set_name,
        collector_number=row.number,
        rarity=row.rarity,
        image_url=row.photo_url,
        prices=CardPrices(
            market=_catalog_money(row.tcg_market_price),
            low=_catalog_money(row.tcg_low_price),
            low_with_shipping=_catalog_money(row.tcg_low_price_with_shipping),
            direct_low=_catalog_money(row.tcg_direct_low),
        ),
    )

    try:
        price = parse_money(row.tcg_marketplace_price)
    except ValueError:
        raise InvalidPriceError(row.tcg_marketplace_price) from None

    return InventoryLine(
        card=card,
        quantity=row.quantity,
        condition=row.condition or settings.default_condition,
        price=0.0 if price is None else price,
        allowed_conditions=tuple(settings.conditions if conditions is None else conditions),
    )


def export_inventory(inventory: Inventory, product_line: str | None = None) -> str:
    """Encode an inventory as marketplace CSV text."""
    return encode_marketplace_csv(line_to_row(line, product_line) for line in inventory)


def import_inventory(source: str | Iterable[str], inventory: Inventory) -> ImportSummary:
    """
    Import marketplace CSV text into an inventory.

    Raises:
        MissingHeaderError: If the input has no header; inventory is unchanged
    """
    decoded = decode_marketplace_csv(source)
    summary = ImportSummary(
        skipped_rows=decoded.skipped_rows,
        dropped_rows=decoded.dropped_rows,
        warnings=decoded.warnings(),
    )

    lines: list[InventoryLine] = []
    for row in decoded.rows:
        try:
            lines.append(row_to_line(row, inventory.conditions))
        except KnownError as e:
            logger.warning("Rejecting row for %s: %s", row.product_name, e.message)
            summary.rejected.append(e)
            summary.warnings.append(f"{row.product_name or 'Unnamed row'}: {e.message}")

    for line in lines:
        inventory.add_line(line)
    summary.added = lines

    logger.info(
        "inventory_imported",
        extra={
            "added_count": summary.added_count,
            "rejected_count": len(summary.rejected),
            "skipped_rows": summary.skipped_rows,
            "dropped_rows": summary.dropped_rows,
        },
    )
    return summary
