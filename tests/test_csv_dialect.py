"""Tests for the field-level CSV codec."""

from tcgmanager.parsers.csv_dialect import (
    encode_field,
    encode_record,
    iter_records,
    normalize_field,
    parse_line,
)


class TestEncodeField:
    def test_plain_value_not_quoted(self) -> None:
        assert encode_field("Lightning Bolt") == "Lightning Bolt"

    def test_comma_forces_quoting(self) -> None:
        assert encode_field("Niv-Mizzet, the Firemind") == '"Niv-Mizzet, the Firemind"'

    def test_quotes_are_doubled(self) -> None:
        assert encode_field('The "Big" One') == '"The ""Big"" One"'

    def test_newline_forces_quoting(self) -> None:
        assert encode_field("line one\nline two") == '"line one\nline two"'

    def test_carriage_return_forces_quoting(self) -> None:
        assert encode_field("a\rb") == '"a\rb"'

    def test_none_is_zero_characters(self) -> None:
        assert encode_field(None) == ""

    def test_blank_is_zero_characters(self) -> None:
        assert encode_field("") == ""
        assert encode_field("   ") == ""

    def test_numbers_use_str(self) -> None:
        assert encode_field(16.39) == "16.39"
        assert encode_field(0) == "0"


class TestEncodeRecord:
    def test_joins_with_commas(self) -> None:
        assert encode_record(["17173", "Magic", None, "Static Orb"]) == "17173,Magic,,Static Orb"

    def test_quoted_field_followed_by_blanks(self) -> None:
        """A quoted value followed by blanks never produces triple quotes."""
        line = encode_record(["Niv-Mizzet, the Firemind", None, "", None])

        assert line == '"Niv-Mizzet, the Firemind",,,'
        assert '""",' not in line
        assert not line.endswith('"""')

    def test_blank_fields_never_encode_as_empty_quotes(self) -> None:
        line = encode_record([None, "", "x", None])

        assert '""' not in line
        assert line == ",,x,"


class TestParseLine:
    def test_quoted_field_with_comma(self) -> None:
        assert parse_line('"Niv-Mizzet, the Firemind",14,') == [
            "Niv-Mizzet, the Firemind",
            "14",
            "",
        ]

    def test_escaped_quotes(self) -> None:
        assert parse_line('"He said ""hi""",x') == ['He said "hi"', "x"]

    def test_empty_quoted_field(self) -> None:
        assert parse_line('a,"",b') == ["a", "", "b"]

    def test_unquoted_fields(self) -> None:
        assert parse_line("17173,Magic,7th Edition") == ["17173", "Magic", "7th Edition"]

    def test_blank_line(self) -> None:
        assert parse_line("") == [""]

    def test_quote_inside_unquoted_field_opens_quoted_mode(self) -> None:
        """A quote anywhere outside quoted mode starts quoting, so the comma is content."""
        assert parse_line('ab"c,d"e') == ["abc,de"]

    def test_text_after_closing_quote_is_kept(self) -> None:
        assert parse_line('"a"b"c,d"') == ["abc,d"]

    def test_unterminated_quote_keeps_rest_of_line(self) -> None:
        assert parse_line('a,"b,c') == ["a", "b,c"]


class TestNormalizeField:
    def test_blank_and_empty_marker_are_both_null(self) -> None:
        """Wire-blank and the "" marker decode to the same null."""
        blank, marker = parse_line(',""')

        assert normalize_field(blank) is None
        assert normalize_field(marker) is None

    def test_whitespace_is_null(self) -> None:
        assert normalize_field("   ") is None

    def test_value_kept_verbatim(self) -> None:
        assert normalize_field("Static Orb") == "Static Orb"

    def test_none_stays_none(self) -> None:
        assert normalize_field(None) is None


class TestIterRecords:
    def test_embedded_newline_stays_in_field(self) -> None:
        records = list(iter_records('a,"line1\nline2"\nb,c\n'))

        assert [r.fields for r in records] == [["a", "line1\nline2"], ["b", "c"]]

    def test_line_numbers_count_physical_lines(self) -> None:
        records = list(iter_records('a,"line1\nline2"\nb,c\n'))

        assert [r.line_number for r in records] == [1, 3]

    def test_crlf_line_endings(self) -> None:
        records = list(iter_records("a,b\r\nc,d\r\n"))

        assert [r.fields for r in records] == [["a", "b"], ["c", "d"]]

    def test_blank_lines_skipped(self) -> None:
        records = list(iter_records("a,b\n\n   \nc,d"))

        assert [r.fields for r in records] == [["a", "b"], ["c", "d"]]
        assert records[1].line_number == 4

    def test_final_record_without_newline(self) -> None:
        records = list(iter_records("a,b"))

        assert [r.fields for r in records] == [["a", "b"]]

    def test_empty_input(self) -> None:
        assert list(iter_records("")) == []

    def test_accepts_lines(self) -> None:
        """An iterable of lines, such as an open file, reads the same as the whole text."""
        text = '"He said ""hi""",x\r\n"multi\nline",y\n'

        lines = text.splitlines(keepends=True)

        assert list(iter_records(lines)) == list(iter_records(text))
        assert [r.fields for r in iter_records(lines)] == [
            ['He said "hi"', "x"],
            ["multi\nline", "y"],
        ]

    def test_stray_quote_spans_lines(self) -> None:
        records = list(iter_records('a,b"c\nd",e\nf,g\n'))

        assert [r.fields for r in records] == [["a", "bc\nd", "e"], ["f", "g"]]
        assert [r.line_number for r in records] == [1, 3]

    def test_unterminated_quote_at_end_of_input(self) -> None:
        records = list(iter_records('a,b\nc,"open\nrest'))

        assert [r.fields for r in records] == [["a", "b"], ["c", "open\nrest"]]

    def test_field_longer_than_csv_module_limit(self) -> None:
        value = "x" * 200_000

        records = list(iter_records(f"a,{value},b\n"))

        assert records[0].fields == ["a", value, "b"]

    def test_encoded_record_decodes_to_same_values(self) -> None:
        values = ['Say "hi", friend', "plain", "two\nlines", "trailing"]

        records = list(iter_records(encode_record(values) + "\n"))

        assert records[0].fields == values
