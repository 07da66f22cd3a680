"""
Card search endpoint.

Proxies free-text searches to the card catalog and returns normalized
card records with a recommended listing price for each.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tcgmanager.models.card import CardRecord
from tcgmanager.models.inventory import pricing_input
from tcgmanager.services.catalog import CatalogClient
from tcgmanager.services.pricing import PricingPolicy, calculate_price

router = APIRouter(prefix="/cards", tags=["cards"])


def get_catalog_client() -> CatalogClient:
    """Dependency: catalog client built from settings."""
    return CatalogClient()


class CardResponse(BaseModel):
    """A catalog card as shown in search results."""

    id: str | None
    tcgplayer_id: str | None = None
    name: str
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    rarity: str | None = None
    image_url: str | None = None
    market_price: float | None = None
    recommended_price: float

    @classmethod
    def from_record(cls, card: CardRecord, policy: PricingPolicy) -> "CardResponse":
        return cls(
            id=card.id,
            tcgplayer_id=card.tcgplayer_id,
            name=card.name,
            set_code=card.set_code,
            set_name=card.set_name,
            collector_number=card.collector_number,
            rarity=card.rarity,
            image_url=card.image_url,
            market_price=card.prices.market,
            recommended_price=calculate_price(pricing_input(card), policy),
        )


class SearchResponse(BaseModel):
    """Search results."""

    query: str
    cards: list[CardResponse] = Field(default_factory=list)


@router.get("/search", response_model=SearchResponse)
async def search_cards(
    q: Annotated[str, Query(description="Free-text card name query")],
    catalog: Annotated[CatalogClient, Depends(get_catalog_client)],
) -> SearchResponse:
    """Search the card catalog for all printings matching a query."""
    cards = await catalog.search(q)
    policy = PricingPolicy.from_settings()
    return SearchResponse(
        query=q,
        cards=[CardResponse.from_record(card, policy) for card in cards],
    )
