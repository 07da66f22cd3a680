from dataclasses import dataclass, field
from typing import Any

from tcgmanager.models.failure import InvalidCardError

# Scryfall rarity -> marketplace rarity code
RARITY_CODES = {
    "common": "C",
    "uncommon": "U",
    "rare": "R",
    "mythic": "M",
    "special": "S",
    "bonus": "S",
    "promo": "P",
}


def _to_price(value: Any) -> float | None:
    """Convert a catalog price (often a string) to float, None if absent."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class CardPrices:
    """
    Catalog price signals for a card, in USD.

    Any signal may be None when the catalog has no data for it.
    """

    market: float | None = None
    low: float | None = None
    low_with_shipping: float | None = None
    direct_low: float | None = None


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    A catalog entry.

    Attributes:
        id: Catalog identifier (opaque)
        name: Display name (e.g., "Niv-Mizzet, the Firemind")
        set_code: Short set code (e.g., "9ed")
        set_name: Full set name (e.g., "9th Edition")
        collector_number: Collector number within set (may be alphanumeric)
        rarity: Rarity as given by the catalog ("rare") or a marketplace code ("R")
        image_url: Card image reference
        tcgplayer_id: Marketplace product id, when the catalog knows it
        prices: Catalog price signals
    """

    id: str | None
    name: str
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    rarity: str | None = None
    image_url: str | None = None
    tcgplayer_id: str | None = None
    prices: CardPrices = field(default_factory=CardPrices)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidCardError("Card name is required")

    @property
    def display_name(self) -> str:
        if self.set_name:
            return f"{self.name} ({self.set_name})"
        return self.name

    @property
    def rarity_code(self) -> str | None:
        """Rarity as the single-letter code used by marketplace exports."""
        if not self.rarity:
            return None
        code = RARITY_CODES.get(self.rarity.lower())
        if code:
            return code
        return self.rarity[0].upper()

    @classmethod
    def from_scryfall(cls, data: dict[str, Any]) -> "CardRecord":
        """
        Build a record from a Scryfall card object.

        Scryfall only publishes a single USD market price, so it feeds the
        market, low, and low-with-shipping signals alike.
        """
        image_uris = data.get("image_uris") or {}
        image_url = image_uris.get("normal") or image_uris.get("large")
        if not image_url:
            faces = data.get("card_faces") or []
            if faces:
                image_url = (faces[0].get("image_uris") or {}).get("normal")

        usd = _to_price((data.get("prices") or {}).get("usd"))
        tcgplayer_id = data.get("tcgplayer_id")

        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            set_code=data.get("set"),
            set_name=data.get("set_name"),
            collector_number=data.get("collector_number"),
            rarity=data.get("rarity"),
            image_url=image_url or None,
            tcgplayer_id=str(tcgplayer_id) if tcgplayer_id is not None else None,
            prices=CardPrices(market=usd, low=usd, low_with_shipping=usd),
        )
