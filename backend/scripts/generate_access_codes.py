"""Generate a batch of access codes.

Standalone operator script. Prints one code per line on stdout so the output
can be piped straight into a spreadsheet or mail merge.

Usage:
    cd backend && python -m scripts.generate_access_codes --count 100 \
        --notes "Spring cohort"
"""

import argparse
import asyncio
import logging
import sys

from board_access.services.code_generation import DEFAULT_NOTES, generate_codes
from scripts._db import configure_logging, script_session

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--count", type=int, default=100, help="codes to create")
    parser.add_argument("--notes", default=DEFAULT_NOTES, help="batch label")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    """CLI entry point: create codes in the configured database."""
    args = parse_args(argv)
    configure_logging()

    async with script_session() as session:
        result = await generate_codes(session, count=args.count, notes=args.notes)

    for code in result.codes:
        print(code)
    logger.info("Created %d codes (%d collisions)", result.created, result.collisions)
    sys.exit(0)


if __name__ == "__main__":
    asyncio.run(main())
