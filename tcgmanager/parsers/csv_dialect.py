"""
Field-level codec for the marketplace CSV dialect.

Decoding scans each record character by character:

- a quote outside quoted mode turns quoted mode on, wherever it appears
- two quotes inside quoted mode are one literal quote
- a lone quote inside quoted mode turns quoted mode off
- a comma outside quoted mode ends the field
- a line break outside quoted mode ends the record; inside it is content
- anything else is kept verbatim

Encoding goes through ``csv.writer`` with minimal quoting: a value is
quoted only when it contains a comma, a quote, or a line break.

A blank field and a quoted-empty field both decode to None, and None
encodes back to a blank field. Never encode None as an empty quoted pair:
a quoted value followed by such markers re-exports as runs of triple
quotes that the marketplace importer rejects.
"""

import csv
from collections.abc import Iterable, Iterator
from io import StringIO
from typing import NamedTuple

DELIMITER = ","
QUOTE = '"'
LINE_BREAKS = "\r\n"


class MarketplaceDialect(csv.Dialect):
    """Comma-separated, minimally quoted, doubled-quote escaping."""

    delimiter = DELIMITER
    quotechar = QUOTE
    doublequote = True
    skipinitialspace = False
    # Both CR and LF must force quoting on write; records end in "\n" on export
    lineterminator = LINE_BREAKS
    quoting = csv.QUOTE_MINIMAL
    strict = False


class ParsedRecord(NamedTuple):
    """One CSV record and the physical line it started on (1-based)."""

    line_number: int
    fields: list[str]


class _RecordScanner:
    """Splits physical lines into records, carrying quoted mode across lines."""

    def __init__(self) -> None:
        self.fields: list[str] = []
        self.field: list[str] = []
        self.in_quotes = False
        self.start = 0

    def scan(self, line: str) -> bool:
        """Consume one physical line. Returns True when a record is complete."""
        i = 0
        while i < len(line):
            char = line[i]
            if self.in_quotes:
                if char == QUOTE:
                    if line[i + 1 : i + 2] == QUOTE:
                        self.field.append(QUOTE)
                        i += 1
                    else:
                        self.in_quotes = False
                else:
                    self.field.append(char)
            elif char == QUOTE:
                self.in_quotes = True
            elif char == DELIMITER:
                self.fields.append("".join(self.field))
                self.field = []
            elif char in LINE_BREAKS:
                break
            else:
                self.field.append(char)
            i += 1
        return not self.in_quotes

    def pending(self) -> bool:
        return bool(self.fields or self.field or self.in_quotes)

    def take(self) -> list[str]:
        self.fields.append("".join(self.field))
        fields = self.fields
        self.fields = []
        self.field = []
        self.in_quotes = False
        return fields


def _is_blank(fields: list[str]) -> bool:
    return not fields or (len(fields) == 1 and not fields[0].strip())


def iter_records(source: str | Iterable[str]) -> Iterator[ParsedRecord]:
    """
    Split CSV text into records of raw (unnormalized) fields.

    Args:
        source: Complete CSV text, or an iterable of lines with their line
            endings, such as a file opened with ``newline=""``

    Yields:
        ParsedRecord for each non-blank record, in input order
    """
    lines = StringIO(source, newline="") if isinstance(source, str) else source
    scanner = _RecordScanner()

    line_number = 0
    for line in lines:
        line_number += 1
        if not scanner.pending():
            scanner.start = line_number
        if scanner.scan(line):
            fields = scanner.take()
            # Blank and whitespace-only lines are not records
            if not _is_blank(fields):
                yield ParsedRecord(scanner.start, fields)

    # Input ended inside a quoted field: keep what was read
    if scanner.pending():
        fields = scanner.take()
        if not _is_blank(fields):
            yield ParsedRecord(scanner.start, fields)


def parse_line(line: str) -> list[str]:
    """
    Split a single CSV line into raw fields.

    >>> parse_line('"Niv-Mizzet, the Firemind",14,')
    ['Niv-Mizzet, the Firemind', '14', '']
    >>> parse_line('ab"c,d"e')
    ['abc,de']
    """
    scanner = _RecordScanner()
    scanner.scan(line)
    return scanner.take()


def normalize_field(raw: str | None) -> str | None:
    """Decode-side null normalization: blank or whitespace-only -> None."""
    if raw is None or not raw.strip():
        return None
    return raw


def _wire_value(value: object) -> str:
    if value is None:
        return ""
    text = str(value)
    return text if text.strip() else ""


def encode_record(values: Iterable[object]) -> str:
    """Encode a sequence of values as one CSV line (without line break)."""
    buffer = StringIO()
    csv.writer(buffer, MarketplaceDialect).writerow([_wire_value(value) for value in values])
    return buffer.getvalue().removesuffix(MarketplaceDialect.lineterminator)


def encode_field(value: object) -> str:
    """
    Encode one value for the marketplace dialect.

    >>> encode_field("Lightning Bolt")
    'Lightning Bolt'
    >>> encode_field("Niv-Mizzet, the Firemind")
    '"Niv-Mizzet, the Firemind"'
    >>> encode_field(None)
    ''
    """
    text = _wire_value(value)
    if not text:
        return ""
    return encode_record([text])
