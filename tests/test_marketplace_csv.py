"""Tests for the marketplace CSV format."""

import pytest

from tcgmanager.models.failure import FailureKind, MissingHeaderError
from tcgmanager.parsers.csv_dialect import iter_records
from tcgmanager.parsers.marketplace_csv import (
    COLUMNS,
    MarketplaceRow,
    decode_marketplace_csv,
    encode_marketplace_csv,
    format_money,
    parse_money,
    parse_quantity,
)


def _row(**overrides: str | None) -> MarketplaceRow:
    values: dict[str, str | None] = {
        "tcgplayer_id": "17173",
        "product_line": "Magic",
        "set_name": "7th Edition",
        "product_name": "Static Orb",
        "number": "319",
        "rarity": "R",
        "condition": "Near Mint",
        "tcg_market_price": "16.36",
        "tcg_low_price_with_shipping": "16.39",
        "tcg_low_price": "16.39",
        "total_quantity": "1",
        "add_to_quantity": "0",
        "tcg_marketplace_price": "16.39",
    }
    values.update(overrides)
    return MarketplaceRow(**values)


class TestDecode:
    def test_decodes_sample_export(self, sample_marketplace_csv: str) -> None:
        result = decode_marketplace_csv(sample_marketplace_csv)

        assert [row.product_name for row in result.rows] == [
            "Sengir Vampire",
            "Static Orb",
            "Glorious Anthem",
        ]
        assert result.columns == list(COLUMNS)
        assert result.skipped_rows == 0

    def test_blank_fields_are_null(self, sample_marketplace_csv: str) -> None:
        sengir = decode_marketplace_csv(sample_marketplace_csv).rows[0]

        assert sengir.title is None
        assert sengir.number is None
        assert sengir.tcg_direct_low is None
        assert sengir.photo_url is None
        assert sengir.tcg_low_price == "0.1700"
        assert sengir.tcg_low_price_with_shipping == "1.4800"

    def test_fractional_quantity_row_dropped(self, sample_marketplace_csv: str) -> None:
        """Total Quantity "0.9800" reads as 0, so the row is out of stock."""
        result = decode_marketplace_csv(sample_marketplace_csv)

        assert result.dropped_rows == 1
        assert "Niv-Mizzet, the Firemind" not in [row.product_name for row in result.rows]

    def test_zero_and_blank_quantity_dropped(self, marketplace_header: str) -> None:
        text = "\n".join(
            [
                marketplace_header,
                "1,Magic,Set,Kept,,,R,Near Mint,1,,1,1,1,0,1,",
                "2,Magic,Set,Zero,,,R,Near Mint,1,,1,1,0,0,1,",
                "3,Magic,Set,Blank,,,R,Near Mint,1,,1,1,,0,1,",
            ]
        )

        result = decode_marketplace_csv(text)

        assert [row.product_name for row in result.rows] == ["Kept"]
        assert result.dropped_rows == 2

    def test_header_is_case_insensitive_and_reorderable(self) -> None:
        """Header names, not positions, decide which field is which."""
        header = ",".join(name.upper() for name in reversed(COLUMNS))
        values = list(reversed(_row().to_wire()))
        line = ",".join(value or "" for value in values)

        result = decode_marketplace_csv(f"{header}\n{line}\n")

        assert result.rows == [_row()]

    def test_byte_order_mark_is_ignored(self, sample_marketplace_csv: str) -> None:
        result = decode_marketplace_csv("\ufeff" + sample_marketplace_csv)

        assert result.columns[0] == "TCGplayer Id"
        assert result.rows[0].tcgplayer_id == "374437"

    def test_unknown_columns_ignored(self) -> None:
        text = "Product Name,Notes,Total Quantity\nStatic Orb,binder 3,2\n"

        result = decode_marketplace_csv(text)

        assert result.rows == [MarketplaceRow(product_name="Static Orb", total_quantity="2")]

    def test_malformed_row_skipped(self, marketplace_header: str) -> None:
        text = "\n".join(
            [
                marketplace_header,
                "1,Magic,Set,First,,,R,Near Mint,1,,1,1,1,0,1,",
                "2,Magic,Niv-Mizzet, the Firemind,,,R",
                "3,Magic,Set,Third,,,R,Near Mint,1,,1,1,1,0,1,",
            ]
        )

        result = decode_marketplace_csv(text)

        assert [row.product_name for row in result.rows] == ["First", "Third"]
        assert result.skipped_rows == 1
        error = result.errors[0]
        assert error.kind == FailureKind.MALFORMED_ROW
        assert error.line_number == 3
        assert error.expected == 16
        assert error.actual == 7
        assert result.warnings() == ["Row 3 has 7 columns, expected 16"]

    def test_empty_input_raises(self) -> None:
        with pytest.raises(MissingHeaderError):
            decode_marketplace_csv("")

    def test_blank_input_raises(self) -> None:
        with pytest.raises(MissingHeaderError):
            decode_marketplace_csv("\n  \n")

    def test_unrecognized_header_raises(self) -> None:
        with pytest.raises(MissingHeaderError) as exc_info:
            decode_marketplace_csv("foo,bar\n1,2\n")

        assert exc_info.value.kind == FailureKind.MISSING_HEADER

    def test_header_only(self, marketplace_header: str) -> None:
        result = decode_marketplace_csv(marketplace_header + "\n")

        assert result.rows == []
        assert result.dropped_rows == 0

    def test_very_long_field(self, marketplace_header: str) -> None:
        photo_url = "https://example.com/" + "x" * 200_000
        line = f"1,Magic,Set,Static Orb,,,R,Near Mint,1,,1,1,1,0,1,{photo_url}"

        result = decode_marketplace_csv(f"{marketplace_header}\n{line}\n")

        assert result.skipped_rows == 0
        assert result.rows[0].photo_url == photo_url

    def test_stray_quote_in_product_name(self, marketplace_header: str) -> None:
        """A quote mid-field opens quoted mode, joining the comma into the value."""
        line = '1,Magic,Set,Kongming "Sleeping, Dragon",,,R,Near Mint,1,,1,1,1,0,1,'

        result = decode_marketplace_csv(f"{marketplace_header}\n{line}\n")

        assert result.rows[0].product_name == "Kongming Sleeping, Dragon"

    def test_accepts_lines(self, sample_marketplace_csv: str) -> None:
        lines = sample_marketplace_csv.splitlines(keepends=True)

        assert decode_marketplace_csv(lines).rows == decode_marketplace_csv(
            sample_marketplace_csv
        ).rows


class TestEncode:
    def test_header_then_rows(self) -> None:
        text = encode_marketplace_csv([_row()])
        lines = text.splitlines()

        assert lines[0] == ",".join(COLUMNS)
        assert lines[1] == (
            "17173,Magic,7th Edition,Static Orb,,319,R,Near Mint,16.36,,16.39,16.39,1,0,16.39,"
        )

    def test_ends_with_newline(self) -> None:
        assert encode_marketplace_csv([_row()]).endswith("\n")

    def test_empty_rows_give_header_only(self) -> None:
        assert encode_marketplace_csv([]) == ",".join(COLUMNS) + "\n"

    def test_every_line_has_sixteen_fields(self) -> None:
        rows = [_row(), _row(product_name="Niv-Mizzet, the Firemind", photo_url=None)]

        records = list(iter_records(encode_marketplace_csv(rows)))

        assert len(records) == 3
        assert all(len(record.fields) == 16 for record in records)

    def test_title_always_blank(self) -> None:
        text = encode_marketplace_csv([_row(title="Foil Promo")])

        assert "Foil Promo" not in text
        assert decode_marketplace_csv(text).rows[0].title is None

    def test_no_triple_quote_artifacts(self) -> None:
        rows = [
            _row(product_name="Niv-Mizzet, the Firemind", number=None, rarity=None),
            _row(set_name="Commander, 2011", product_name="Sol Ring"),
            _row(photo_url="https://example.com/a,b.jpg"),
        ]

        text = encode_marketplace_csv(rows)

        assert '""",' not in text
        assert not any(line.endswith('"""') for line in text.splitlines())
        assert '""' not in text

    def test_round_trip(self) -> None:
        """Commas, quotes, newlines, and blanks survive encode then decode."""
        rows = [
            _row(product_name="Niv-Mizzet, the Firemind", number="14", rarity="P"),
            _row(product_name='Kongming, "Sleeping Dragon"', set_name="Portal Three Kingdoms"),
            _row(product_name="Who // What // When", photo_url="note\nwith newline"),
            _row(set_name=None, number=None, rarity=None, tcg_market_price=None),
            _row(condition="Near Mint Foil", tcg_direct_low="1.13"),
        ]

        decoded = decode_marketplace_csv(encode_marketplace_csv(rows))

        assert decoded.rows == rows
        assert decoded.skipped_rows == 0

    def test_decode_encode_decode_is_stable(self, sample_marketplace_csv: str) -> None:
        first = decode_marketplace_csv(sample_marketplace_csv)
        second = decode_marketplace_csv(encode_marketplace_csv(first.rows))

        assert second.rows == first.rows


class TestParseQuantity:
    def test_integer(self) -> None:
        assert parse_quantity("12") == 12

    def test_leading_integer_only(self) -> None:
        assert parse_quantity("0.9800") == 0
        assert parse_quantity("3.5") == 3

    def test_absent_or_text(self) -> None:
        assert parse_quantity(None) == 0
        assert parse_quantity("lots") == 0


class TestMoney:
    def test_parse_plain(self) -> None:
        assert parse_money("1.4800") == 1.48

    def test_parse_currency_symbol_and_grouping(self) -> None:
        assert parse_money("$1,234.50") == 1234.5

    def test_parse_blank(self) -> None:
        assert parse_money(None) is None
        assert parse_money("  ") is None

    def test_parse_invalid_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_money("n/a")

    def test_format_two_decimals(self) -> None:
        assert format_money(16.39) == "16.39"
        assert format_money(5) == "5.00"

    def test_format_rounds_half_up(self) -> None:
        assert format_money(0.905) == "0.91"
        assert format_money(2.415) == "2.42"

    def test_format_none(self) -> None:
        assert format_money(None) is None
