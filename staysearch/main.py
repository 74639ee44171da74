"""
Main entry point and CLI for stay search.

Runs one search against the configured property store and prints the
requested page.
"""

import asyncio
import argparse
import logging
import sys
from datetime import datetime
from typing import Optional

from staysearch.config import get_search_settings
from staysearch.db import init_db, close_db
from staysearch.error_handling.errors import SearchError, SearchPlanValidationError
from staysearch.models import PricedProperty, SearchInput, SearchResult
from staysearch.pipeline import SearchPipeline


# Configure logging
logging.basicConfig(
    level=get_search_settings().log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_property(prop: PricedProperty) -> str:
    """
    Format a property for console output.

    Args:
        prop: Property to format

    Returns:
        Formatted multi-line string
    """
    lines = [f"🏠 {prop.name or '[No name]'}", f"   ID: {prop.id}"]

    if prop.location:
        lines.append(f"   Location: {prop.location}")
    if prop.distance_meters:
        lines.append(f"   Distance: {prop.distance_meters}")
    if prop.max_guests is not None:
        lines.append(f"   Sleeps: {prop.max_guests}")
    if prop.total_price is not None:
        lines.append(f"   Price: {prop.total_price:.2f} {prop.currency or ''}".rstrip())

    lines.append("")
    return "\n".join(lines)


def format_results(result: SearchResult) -> str:
    """
    Format a search result page for console output.

    Args:
        result: SearchResult to format

    Returns:
        Formatted string representation of the page
    """
    pagination = result.pagination
    if not result.properties:
        return (
            f"No properties on page {pagination.page} "
            f"({pagination.total} result(s) in total).\n"
        )

    output = [
        f"\n{'='*60}\n",
        f"Page {pagination.page}/{pagination.total_pages} - "
        f"{pagination.total} propert{'y' if pagination.total == 1 else 'ies'} found\n",
        f"{'='*60}\n\n",
    ]
    for prop in result.properties:
        output.append(format_property(prop) + "\n")
    output.append(f"{'='*60}\n")
    return "".join(output)


async def run_search(
    search_input: SearchInput,
    verbose: bool = False,
    pipeline: Optional[SearchPipeline] = None
) -> int:
    """
    Execute one search against the property store.

    Args:
        search_input: Raw search request
        verbose: Enable verbose logging output
        pipeline: Pipeline to run (defaults to the shipped stages)

    Returns:
        Exit code (0 for success, 1 for error, 130 when interrupted)
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    pipeline = pipeline or SearchPipeline()

    try:
        # Reject invalid input before touching the property store
        pipeline.plan_builder(search_input)

        await init_db()
        start_time = datetime.now()

        result = await pipeline.run(search_input)

        elapsed_time = (datetime.now() - start_time).total_seconds()
        print(format_results(result))
        logger.info(f"Search completed in {elapsed_time:.2f} seconds")
        return 0

    except SearchPlanValidationError as e:
        print(f"Error: invalid search ({e.code.value}): {e}", file=sys.stderr)
        return 1

    except SearchError as e:
        logger.error(f"Search failed: {type(e).__name__}: {e}")
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        logger.info("Search interrupted by user")
        print("\n\n⚠️  Search interrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        logger.exception(f"Search failed with error: {str(e)}")
        print(f"\n❌ Error: {str(e)}", file=sys.stderr)
        print("\nFor more details, check the logs above.", file=sys.stderr)
        return 1

    finally:
        await close_db()


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="stay-search",
        description="Search accommodation around a point for a stay window",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Two adults in Amsterdam for two nights
  stay-search 52.3676 4.9041 --check-in 2026-01-12 --check-out 2026-01-14 --adults 2

  # Family of four within 25 km, filtering on the max_guests column
  stay-search 48.8566 2.3522 --check-in 2026-07-01 --check-out 2026-07-08 \\
      --adults 2 --children 2 --radius-km 25 --capacity-column max_guests
        """
    )

    # Arguments are kept as strings; the plan builder validates them
    parser.add_argument("latitude", help="Search center latitude (decimal degrees)")
    parser.add_argument("longitude", help="Search center longitude (decimal degrees)")
    parser.add_argument("--check-in", required=True, help="Arrival date (YYYY-MM-DD)")
    parser.add_argument("--check-out", required=True, help="Departure date (YYYY-MM-DD)")
    parser.add_argument("--adults", required=True, help="Number of adults")
    parser.add_argument("--children", default=None, help="Number of children")
    parser.add_argument("--page", default=None, help="Page number (default: 1)")
    parser.add_argument("--page-size", default=None, help="Results per page (default: 20, max 100)")
    parser.add_argument("--radius-km", default=None, help="Search radius in km (default: 10, 1-500)")
    parser.add_argument(
        "--capacity-column",
        default=None,
        help="Capacity column to filter on (max_guests, maximum_guests or capacity)"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    return parser


def build_search_input(args: argparse.Namespace) -> SearchInput:
    """Map parsed CLI arguments to a raw SearchInput."""
    filters = {}
    if args.radius_km is not None:
        filters["radiusKm"] = args.radius_km
    if args.capacity_column:
        filters["capacityColumn"] = args.capacity_column

    return SearchInput(
        latitude=args.latitude,
        longitude=args.longitude,
        check_in=args.check_in,
        check_out=args.check_out,
        adults=args.adults,
        children=args.children,
        page=args.page,
        page_size=args.page_size,
        filters=filters or None,
    )


def main() -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_argument_parser()
    args = parser.parse_args()

    try:
        return asyncio.run(
            run_search(build_search_input(args), verbose=args.verbose)
        )
    except Exception as e:
        logger.exception(f"Unexpected error in main: {str(e)}")
        print(f"❌ Unexpected error: {str(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
