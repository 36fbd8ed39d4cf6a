"""
studyhub.__main__ — Maintenance entry point for ``python -m studyhub``
=======================================================================

Commands::

    python -m studyhub init-db     # CREATE TABLE IF NOT EXISTS …
    python -m studyhub reconcile   # repair cached counters / balances

Wiring:
1. Load .env (DATABASE_URL).
2. Create the SQLAlchemy engine.
3. Run the requested command.
"""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from studyhub.database.engine import create_db_engine, init_db
from studyhub.services.reconciliation_service import reconcile_counters

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("studyhub")

COMMANDS = ("init-db", "reconcile")


def main(argv: list[str] | None = None) -> int:
    """Run one maintenance command and return the process exit code."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1 or args[0] not in COMMANDS:
        logger.error("Usage: python -m studyhub {%s}", "|".join(COMMANDS))
        return 2

    load_dotenv()
    engine = create_db_engine()

    if args[0] == "init-db":
        init_db(engine)
    else:
        report = reconcile_counters(engine)
        logger.info(
            "Reconciliation done: %d checked, %d corrected",
            report["checked"], report["corrected"],
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
