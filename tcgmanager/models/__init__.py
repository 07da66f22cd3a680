from tcgmanager.models.card import CardPrices, CardRecord
from tcgmanager.models.failure import (
    ApiResponse,
    CardNotFoundError,
    CatalogError,
    FailureDetail,
    FailureKind,
    InvalidCardError,
    InvalidConditionError,
    InvalidPriceError,
    InvalidQuantityError,
    InvalidQueryError,
    KnownError,
    MalformedRowError,
    MissingHeaderError,
    OutcomeType,
)
from tcgmanager.models.inventory import (
    Inventory,
    InventoryLine,
    InventoryObserver,
    validate_condition,
    validate_price,
    validate_quantity,
)

__all__ = [
    "ApiResponse",
    "CardPrices",
    "CardRecord",
    "CardNotFoundError",
    "CatalogError",
    "FailureDetail",
    "FailureKind",
    "InvalidCardError",
    "InvalidConditionError",
    "InvalidPriceError",
    "InvalidQuantityError",
    "InvalidQueryError",
    "Inventory",
    "InventoryLine",
    "InventoryObserver",
    "KnownError",
    "MalformedRowError",
    "MissingHeaderError",
    "OutcomeType",
    "validate_condition",
    "validate_price",
    "validate_quantity",
]
