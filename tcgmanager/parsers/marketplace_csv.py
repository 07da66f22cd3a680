"""
Marketplace bulk-upload CSV format.

The marketplace exports and re-imports a fixed 16-column table. On import,
header names (not positions) are authoritative because spreadsheet tools
may reorder columns. On export, all 16 columns are always written in the
fixed order below.

Rows whose Total Quantity is zero or absent mean "not in stock" in the
marketplace export and are dropped on import.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, fields
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from tcgmanager.models.failure import MalformedRowError, MissingHeaderError
from tcgmanager.parsers.csv_dialect import (
    ParsedRecord,
    encode_record,
    iter_records,
    normalize_field,
)

logger = logging.getLogger(__name__)

# Wire order is part of the format contract
COLUMNS: tuple[str, ...] = (
    "TCGplayer Id",
    "Product Line",
    "Set Name",
    "Product Name",
    "Title",
    "Number",
    "Rarity",
    "Condition",
    "TCG Market Price",
    "TCG Direct Low",
    "TCG Low Price With Shipping",
    "TCG Low Price",
    "Total Quantity",
    "Add to Quantity",
    "TCG Marketplace Price",
    "Photo URL",
)

CENT = Decimal("0.01")

# Leading integer, as the marketplace reads quantities ("0.9800" -> 0)
_INTEGER_PREFIX = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True, slots=True)
class MarketplaceRow:
    """
    One row of the marketplace CSV.

    Field order matches COLUMNS. Every value is the field's text, or None
    when the field is blank on the wire.
    """

    tcgplayer_id: str | None = None
    product_line: str | None = None
    set_name: str | None = None
    product_name: str | None = None
    title: str | None = None
    number: str | None = None
    rarity: str | None = None
    condition: str | None = None
    tcg_market_price: str | None = None
    tcg_direct_low: str | None = None
    tcg_low_price_with_shipping: str | None = None
    tcg_low_price: str | None = None
    total_quantity: str | None = None
    add_to_quantity: str | None = None
    tcg_marketplace_price: str | None = None
    photo_url: str | None = None

    @property
    def quantity(self) -> int:
        return parse_quantity(self.total_quantity)

    def to_wire(self) -> tuple[str | None, ...]:
        """Values in column order, as written on export (Title always blank)."""
        values = [getattr(self, f.name) for f in fields(self)]
        values[COLUMNS.index("Title")] = None
        return tuple(values)


# Canonical column name -> MarketplaceRow attribute
COLUMN_FIELDS: dict[str, str] = dict(
    zip(COLUMNS, (f.name for f in fields(MarketplaceRow)), strict=True)
)

# Header lookup is case-insensitive
_HEADER_LOOKUP: dict[str, str] = {name.casefold(): attr for name, attr in COLUMN_FIELDS.items()}


@dataclass
class DecodeResult:
    """Result of decoding a marketplace CSV."""

    columns: list[str]
    """Header names as they appeared in the input."""

    rows: list[MarketplaceRow] = field(default_factory=list)
    """In-stock rows, in input order."""

    errors: list[MalformedRowError] = field(default_factory=list)
    """Rows rejected for having the wrong number of columns."""

    dropped_rows: int = 0
    """Rows dropped because Total Quantity was zero or absent."""

    @property
    def skipped_rows(self) -> int:
        return len(self.errors)

    def warnings(self) -> list[str]:
        """User-facing messages for rows that did not import."""
        return [error.message for error in self.errors]


def parse_quantity(value: str | None) -> int:
    """
    Parse a quantity field using its leading integer.

    Returns 0 for absent or non-numeric values.
    """
    if value is None:
        return 0
    match = _INTEGER_PREFIX.match(value)
    if not match:
        return 0
    return int(match.group(1))


def parse_money(value: str | None) -> float | None:
    """
    Parse a money field ("1.4800", "$0.98").

    Returns None for blank values.

    Raises:
        ValueError: If the value is not a number
    """
    if value is None or not value.strip():
        return None
    text = value.strip().removeprefix("$").replace(",", "")
    return float(text)


def format_money(value: float | None) -> str | None:
    """Format an amount with exactly two decimals, None stays blank."""
    if value is None:
        return None
    try:
        amount = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Not a money amount: {value!r}") from e
    return f"{amount:.2f}"


def _map_header(record: ParsedRecord) -> tuple[list[str], dict[str, int]]:
    columns = [name.strip() for name in record.fields]
    if columns:
        # Spreadsheet exports may start with a byte order mark
        columns[0] = columns[0].lstrip("\ufeff").strip()

    positions: dict[str, int] = {}
    for index, name in enumerate(columns):
        attr = _HEADER_LOOKUP.get(name.casefold())
        if attr is None:
            logger.debug("Ignoring unknown column: %s", name)
            continue
        positions.setdefault(attr, index)

    if not positions:
        raise MissingHeaderError(detail=f"No marketplace columns found in line {record.line_number}")

    return columns, positions


def _map_row(record: ParsedRecord, columns: list[str], positions: dict[str, int]) -> MarketplaceRow:
    if len(record.fields) != len(columns):
        raise MalformedRowError(record.line_number, len(columns), len(record.fields))

    return MarketplaceRow(
        **{attr: normalize_field(record.fields[index]) for attr, index in positions.items()}
    )


def decode_marketplace_csv(source: str | Iterable[str]) -> DecodeResult:
    """
    Decode marketplace CSV text into rows.

    Args:
        source: CSV text, or an iterable of lines (e.g. an open file)

    Returns:
        DecodeResult with in-stock rows, malformed-row errors, and the
        number of out-of-stock rows dropped

    Raises:
        MissingHeaderError: If the input has no header naming marketplace columns
    """
    records = iter_records(source)

    header = next(records, None)
    if header is None:
        raise MissingHeaderError(detail="Input is empty")

    columns, positions = _map_header(header)
    result = DecodeResult(columns=columns)

    for record in records:
        try:
            row = _map_row(record, columns, positions)
        except MalformedRowError as e:
            logger.warning("Skipping row %d: %s", record.line_number, e.message)
            result.errors.append(e)
            continue

        if row.quantity <= 0:
            result.dropped_rows += 1
            continue

        result.rows.append(row)

    logger.info(
        "marketplace_csv_decoded",
        extra={
            "row_count": len(result.rows),
            "skipped_rows": result.skipped_rows,
            "dropped_rows": result.dropped_rows,
        },
    )
    return result


def iter_encoded_lines(rows: Iterable[MarketplaceRow]) -> Iterator[str]:
    """Yield the header line and one line per row, each ending in a newline."""
    yield encode_record(COLUMNS) + "\n"
    for row in rows:
        yield encode_record(row.to_wire()) + "\n"


def encode_marketplace_csv(rows: Iterable[MarketplaceRow]) -> str:
    """
    Encode rows as marketplace CSV text.

    Row values are written verbatim; money formatting happens where rows
    are built from typed values (see format_money).
    """
    return "".join(iter_encoded_lines(rows))
