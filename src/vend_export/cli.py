"""Command-line entry point: export Vend sales history to CSV.

Examples:
  vend-export -d DOMAINPREFIX -t TOKEN -z Pacific/Auckland \
      -F 2018-03-01 -T 2018-04-01 -o 'OUTLETNAME'

  # Credentials from the environment, report written to ./exports
  VEND_DOMAIN_PREFIX=mystore VEND_TOKEN=... vend-export \
      -F 2018-03-01 -T 2018-04-01 --outdir ./exports -v

Environment (optional):
  VEND_DOMAIN_PREFIX: Store domain prefix when -d is not given
  VEND_TOKEN: Personal API token when -t is not given
  VEND_TIMEOUT=60   # seconds
  VEND_RETRIES=3

Exit codes:
  0  report written, or the sales search failed (reported, no file written)
  1  invalid date, invalid configuration, or a fatal fetch/file error
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from vend_export.client import VendClient
from vend_export.config import ExportConfig
from vend_export.exceptions import ConfigError, ExtractionError, ReportError
from vend_export.report import create_report, write_report
from vend_export.utils import parse_date

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vend-export",
        description="Export Vend sales history to a CSV report.",
        epilog="The Date from: F and Date to: T need to be capitalized.",
    )
    p.add_argument("-d", "--domain-prefix", help="Vend store domain prefix")
    p.add_argument("-t", "--token", help="Vend personal API token")
    p.add_argument(
        "-z",
        "--timezone",
        default="",
        help="Timezone of the store in zoneinfo format. "
        "The default is to try and use the computer's local timezone.",
    )
    p.add_argument("-F", "--date-from", required=True, help="Date from (YYYY-MM-DD)")
    p.add_argument("-T", "--date-to", required=True, help="Date to (YYYY-MM-DD)")
    p.add_argument("-o", "--outlet", default="", help="Outlet to export the sales from")
    p.add_argument("--outdir", default=Path("."), type=Path, help="Directory for the CSV file")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def validate_dates(date_from: str, date_to: str) -> bool:
    """Check both dates are YYYY-MM-DD, reporting the first bad one on stdout."""
    for label, value in (("from", date_from), ("to", date_to)):
        try:
            parse_date(value)
        except ValueError as e:
            print(f"incorrect date {label}: {value}, {e}")
            return False
    return True


def export_sales(config: ExportConfig, client: VendClient | None = None) -> int:
    """Fetch everything the report needs and write it.

    Args:
        config: Run configuration.
        client: Optional pre-built client (tests inject one here).

    Returns:
        Process exit code.

    """
    vc = client or VendClient(config.domain_prefix, config.token, config.timezone)

    print("Retrieving data from Vend...")

    try:
        registers = vc.registers()
    except ExtractionError as e:
        logger.error("Failed to get registers: %s", e)
        return 1

    try:
        users = vc.users()
    except ExtractionError as e:
        logger.error("Failed to get users: %s", e)
        return 1

    try:
        customers = vc.customers()
    except ExtractionError as e:
        logger.error("Failed to get customers: %s", e)
        return 1

    try:
        products = vc.products()
    except ExtractionError as e:
        logger.error("Failed to get products: %s", e)
        return 1

    # A failed search is reported but is not treated as fatal.
    try:
        sales = vc.sales_search(config.date_from, config.date_to, config.outlet)
    except ExtractionError as e:
        print(f"Error: {e}")
        return 0

    try:
        handle = create_report(config.domain_prefix, config.output_dir)
    except ReportError as e:
        logger.error("Failed creating template CSV: %s", e)
        return 1

    with handle:
        print("Writing Sales to CSV file...")
        write_report(
            handle,
            registers,
            users,
            customers,
            products,
            sales,
            config.domain_prefix,
            config.timezone,
        )
    print(f"Exported {len(sales)} sales")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the export command-line tool.

    Orchestrates the complete export workflow:
    1. Parses command-line arguments and validates the dates
    2. Builds the run configuration
    3. Fetches reference data and sales
    4. Writes the CSV report

    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not validate_dates(args.date_from, args.date_to):
        return 1

    try:
        config = ExportConfig.from_args(args)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    return export_sales(config)

