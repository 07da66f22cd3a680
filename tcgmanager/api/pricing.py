"""
Pricing API endpoint.

Exposes the listing price calculation to the presentation layer.
"""

from dataclasses import replace

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tcgmanager.services.pricing import PricingInput, PricingPolicy, quote_price

router = APIRouter(prefix="/pricing", tags=["pricing"])


class PriceRequest(BaseModel):
    """Price signals for one card."""

    market_price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    low_price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    low_price_with_shipping: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    card_name: str = ""
    original_price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    excluded_cards: list[str] | None = Field(
        default=None,
        description="Card names that keep their current price; defaults to configuration",
    )


class PriceResponse(BaseModel):
    """Recommended listing price."""

    price: float
    tier: str


@router.post("/calculate", response_model=PriceResponse)
async def calculate(request: PriceRequest) -> PriceResponse:
    """Calculate the recommended listing price for a card."""
    policy = PricingPolicy.from_settings()
    if request.excluded_cards is not None:
        policy = replace(policy, excluded_cards=tuple(request.excluded_cards))

    quote = quote_price(
        PricingInput(
            market_price=request.market_price,
            low_price=request.low_price,
            low_price_with_shipping=request.low_price_with_shipping,
            card_name=request.card_name,
            original_price=request.original_price,
        ),
        policy,
    )
    return PriceResponse(price=quote.price, tier=quote.tier.value)
