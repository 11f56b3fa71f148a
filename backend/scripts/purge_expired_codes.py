"""Delete claimed access codes whose retention period has ended.

Run on a schedule (cron, systemd timer).

Usage:
    cd backend && python -m scripts.purge_expired_codes
"""

import asyncio
import logging
import sys

from board_access.services.retention_cleanup import cleanup_expired_codes
from scripts._db import configure_logging, script_session

logger = logging.getLogger(__name__)


async def main() -> None:
    """CLI entry point: sweep expired records once."""
    configure_logging()

    async with script_session() as session:
        deleted = await cleanup_expired_codes(session)

    logger.info("Purge complete: %d records deleted", deleted)
    sys.exit(0)


if __name__ == "__main__":
    asyncio.run(main())
