from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "TCG Card Manager"
    debug: bool = False

    catalog_url: str = "https://api.scryfall.com"
    catalog_user_agent: str = "TCGCardManager/1.0"
    catalog_timeout: float = 30.0

    # Written to the "Product Line" column on export
    product_line: str = "Magic"

    # Allowed condition labels. Marketplace exports may append " Foil".
    conditions: list[str] = [
        "Near Mint",
        "Lightly Played",
        "Moderately Played",
        "Heavily Played",
        "Damaged",
    ]
    default_condition: str = "Near Mint"

    max_quantity: int = 9999
    max_price: float = 99999.99

    pricing_floor: float = 0.50
    pricing_cheap_threshold: float = 0.30
    pricing_expensive_threshold: float = 30.00

    # Cards whose human-set price is never recalculated (substring match)
    pricing_excluded_cards: list[str] = []

    # "low_average": max(floor, low, avg(low, low+ship), market)
    # "market_average": max(floor, low, avg(low+ship, market)) -- legacy rule
    pricing_standard_formula: Literal["low_average", "market_average"] = "low_average"


settings = Settings()


# =============================================================================
# CATALOG LIMITS
# =============================================================================

# Queries longer than this are rejected before hitting the catalog
MAX_QUERY_LENGTH = 100
