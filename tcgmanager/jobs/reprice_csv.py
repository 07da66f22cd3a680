"""
Reprice a marketplace CSV export.

Reads a bulk-upload CSV, recalculates the TCG Marketplace Price of every
in-stock row, and writes the result as a new CSV ready for re-import.

    tcgmanager-reprice export.csv repriced.csv --exclude "Sengir Vampire"
"""

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from tcgmanager.models.failure import MissingHeaderError
from tcgmanager.services.pricing import PricingPolicy
from tcgmanager.services.repricer import RepriceResult, reprice_csv

logger = logging.getLogger(__name__)


def run_reprice(
    input_path: Path,
    output_path: Path,
    excluded_cards: list[str] | None = None,
    standard_formula: str | None = None,
) -> RepriceResult:
    """
    Reprice input_path and write the result to output_path.

    Args:
        input_path: Marketplace CSV export
        output_path: Where to write the repriced CSV
        excluded_cards: Extra card names that keep their current price
        standard_formula: Override the configured standard-tier formula

    Returns:
        RepriceResult with totals

    Raises:
        MissingHeaderError: If the input has no header; nothing is written
    """
    policy = PricingPolicy.from_settings()
    if excluded_cards:
        policy = replace(policy, excluded_cards=policy.excluded_cards + tuple(excluded_cards))
    if standard_formula:
        policy = replace(policy, standard_formula=standard_formula)  # type: ignore[arg-type]

    logger.info("Repricing %s...", input_path)

    # newline="" keeps CRLF and quoted line breaks intact for the decoder
    with open(input_path, encoding="utf-8-sig", newline="") as f:
        result = reprice_csv(f, policy)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(result.text)

    logger.info(
        "Wrote %d rows to %s (total value $%.2f)",
        len(result.rows),
        output_path,
        result.total_value,
    )
    if result.skipped_rows:
        logger.warning("Skipped %d malformed rows", result.skipped_rows)
    if result.dropped_rows:
        logger.info("Dropped %d out-of-stock rows", result.dropped_rows)

    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reprice a marketplace CSV export.")
    parser.add_argument("input", type=Path, help="Marketplace CSV export")
    parser.add_argument("output", type=Path, help="Where to write the repriced CSV")
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="NAME",
        help="Card name that keeps its current price (repeatable)",
    )
    parser.add_argument(
        "--standard-formula",
        choices=["low_average", "market_average"],
        default=None,
        help="Standard-tier pricing rule (default: configured)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        run_reprice(args.input, args.output, args.exclude, args.standard_formula)
    except MissingHeaderError as e:
        logger.error("Failed to reprice %s: %s", args.input, e.message)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
