"""
Inventory CSV endpoints.

Stateless wrappers around the marketplace CSV codec: the presentation
layer uploads text and gets rows back, or sends rows and gets text back.
Nothing is stored between requests.
"""

from dataclasses import asdict, replace

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from tcgmanager.parsers.marketplace_csv import (
    MarketplaceRow,
    decode_marketplace_csv,
    encode_marketplace_csv,
)
from tcgmanager.services.pricing import PricingPolicy
from tcgmanager.services.repricer import reprice_csv

router = APIRouter(prefix="/inventory", tags=["inventory"])

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


class RowModel(BaseModel):
    """One marketplace CSV row. Blank fields are null."""

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

    @classmethod
    def from_row(cls, row: MarketplaceRow) -> "RowModel":
        return cls(**asdict(row))

    def to_row(self) -> MarketplaceRow:
        return MarketplaceRow(**self.model_dump())


class DecodeRequest(BaseModel):
    """Request model for decoding a marketplace CSV."""

    text: str = Field(..., description="Raw CSV text exported from the marketplace")


class DecodeResponse(BaseModel):
    """Decoded rows plus what was left out."""

    columns: list[str]
    rows: list[RowModel] = Field(default_factory=list)
    skipped_rows: int = Field(0, description="Rows rejected for a wrong column count")
    dropped_rows: int = Field(0, description="Rows dropped for zero quantity")
    warnings: list[str] = Field(default_factory=list)


class EncodeRequest(BaseModel):
    """Request model for encoding rows as a marketplace CSV."""

    rows: list[RowModel]


class RepriceRequest(BaseModel):
    """Request model for repricing a marketplace CSV."""

    text: str = Field(..., description="Raw CSV text exported from the marketplace")
    excluded_cards: list[str] | None = Field(
        default=None,
        description="Card names that keep their current price; defaults to configuration",
    )


class RepriceResponse(BaseModel):
    """Repriced CSV text and totals."""

    text: str
    row_count: int
    total_value: float
    tiers: dict[str, int] = Field(default_factory=dict)
    skipped_rows: int = 0
    dropped_rows: int = 0
    warnings: list[str] = Field(default_factory=list)


@router.post("/decode", response_model=DecodeResponse)
async def decode_csv(request: DecodeRequest) -> DecodeResponse:
    """
    Decode marketplace CSV text into rows.

    Malformed rows are skipped and reported; a missing header fails the
    whole request.
    """
    result = decode_marketplace_csv(request.text)
    return DecodeResponse(
        columns=result.columns,
        rows=[RowModel.from_row(row) for row in result.rows],
        skipped_rows=result.skipped_rows,
        dropped_rows=result.dropped_rows,
        warnings=result.warnings(),
    )


@router.post("/encode")
async def encode_csv(request: EncodeRequest) -> Response:
    """Encode rows as marketplace CSV text (all 16 columns, fixed order)."""
    text = encode_marketplace_csv(model.to_row() for model in request.rows)
    return Response(
        content=text,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="tcg_inventory.csv"'},
    )


@router.post("/reprice", response_model=RepriceResponse)
async def reprice(request: RepriceRequest) -> RepriceResponse:
    """Recalculate the marketplace price of every in-stock row."""
    policy = PricingPolicy.from_settings()
    if request.excluded_cards is not None:
        policy = replace(policy, excluded_cards=tuple(request.excluded_cards))

    result = reprice_csv(request.text, policy)
    return RepriceResponse(
        text=result.text,
        row_count=len(result.rows),
        total_value=result.total_value,
        tiers={tier.value: count for tier, count in result.tiers.items()},
        skipped_rows=result.skipped_rows,
        dropped_rows=result.dropped_rows,
        warnings=[error.message for error in result.errors],
    )
