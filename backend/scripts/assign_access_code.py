"""Mark access codes as handed out.

Usage:
    cd backend && python -m scripts.assign_access_code 123456 654321

Exits 1 if any code was not AVAILABLE.
"""

import argparse
import asyncio
import logging
import sys

from board_access.services.code_generation import assign_code
from scripts._db import configure_logging, script_session

logger = logging.getLogger(__name__)


async def main(argv: list[str] | None = None) -> None:
    """CLI entry point: assign each given code."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("codes", nargs="+", help="six-digit codes")
    args = parser.parse_args(argv)
    configure_logging()

    failed = 0
    async with script_session() as session:
        for code in args.codes:
            if not await assign_code(session, code):
                failed += 1

    logger.info("Assigned %d of %d codes", len(args.codes) - failed, len(args.codes))
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    asyncio.run(main())
