"""
Inventory tool services.

Pricing, bulk repricing, inventory CSV import/export, and the card catalog
client. Import submodules directly; only the pricing engine is re-exported
here because the inventory model depends on it.
"""

from tcgmanager.services.pricing import (
    PriceQuote,
    PriceTier,
    PricingInput,
    PricingPolicy,
    calculate_price,
    quote_price,
)

__all__ = [
    "PriceQuote",
    "PriceTier",
    "PricingInput",
    "PricingPolicy",
    "calculate_price",
    "quote_price",
]
