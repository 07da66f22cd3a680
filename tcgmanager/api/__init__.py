from tcgmanager.api.cards import router as cards_router
from tcgmanager.api.health import router as health_router
from tcgmanager.api.inventory import router as inventory_router
from tcgmanager.api.pricing import router as pricing_router

__all__ = [
    "cards_router",
    "health_router",
    "inventory_router",
    "pricing_router",
]
