from tcgmanager.parsers.csv_dialect import (
    encode_field,
    encode_record,
    iter_records,
    normalize_field,
    parse_line,
)
from tcgmanager.parsers.marketplace_csv import (
    COLUMNS,
    DecodeResult,
    MarketplaceRow,
    decode_marketplace_csv,
    encode_marketplace_csv,
)

__all__ = [
    "COLUMNS",
    "DecodeResult",
    "MarketplaceRow",
    "decode_marketplace_csv",
    "encode_field",
    "encode_marketplace_csv",
    "encode_record",
    "iter_records",
    "normalize_field",
    "parse_line",
]
