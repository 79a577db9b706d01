# WORKFLOW: Command-line entry point for importing one site's dump into a database.
# Used by: Operators, the `stackdump-import` console script, batch conversion jobs
# Functions:
# 1. parse_args() - Archives plus destination/logging options (override settings)
# 2. main() - Configure logging, open the SQL destination, run the import, report timing
#
# Import flow: archives -> seed lookup tables -> eight pipeline stages -> indexes/constraints -> done
# Exit status is 0 on success and 1 when the import fails.

"""
Import a Q&A site data dump into a relational database.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

# Add project root to path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.config import settings  # noqa: E402
from core.log_config import configure_logging  # noqa: E402
from db.destination import SqlDestination  # noqa: E402
from etl.errors import DumpImportError  # noqa: E402
from etl.pipeline import run_import  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Load a Q&A site data dump (one or more .7z/.zip archives) into a database."
    )
    parser.add_argument(
        "archives", nargs="+",
        help="Archives (or extracted directories) holding the dump for one site; "
             "when several contain the same table, the first one wins",
    )
    parser.add_argument("-d", "--database-url", default=settings.database_url,
                        help=f"SQLAlchemy database URL (default: {settings.database_url})")
    parser.add_argument("--batch-size", type=int, default=settings.batch_size,
                        help=f"Rows per table written in one batch (default: {settings.batch_size})")
    parser.add_argument("--replace", action=argparse.BooleanOptionalAction, default=settings.replace,
                        help="Drop and recreate all tables before loading")
    parser.add_argument("--log-level", type=str.upper, default=settings.log_level.upper(),
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help=f"Log level (default: {settings.log_level})")
    parser.add_argument("--log-format", choices=["console", "json"], default=settings.log_format,
                        help=f"Structured event format (default: {settings.log_format})")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    start = time.monotonic()
    try:
        destination = SqlDestination(
            database_url=args.database_url,
            batch_size=args.batch_size,
            replace=args.replace,
        )
        run_import(args.archives, destination)

    except (DumpImportError, SQLAlchemyError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    elapsed_minutes = (time.monotonic() - start) / 60
    print(f"Finished after {elapsed_minutes:.2f} minutes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
