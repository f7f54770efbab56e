#!/usr/bin/env python3
"""
Standalone database initialization script.

Creates the schema, installs native row level security on PostgreSQL and seeds
the tag catalog. With ``--print-sql`` it only prints the policy statements.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("angiday.init_db")


def print_policy_sql(identity_sql: str) -> int:
    from app.config import settings
    from domain.security.migration import render_policy_sql

    for statement in render_policy_sql(identity_sql=identity_sql, role=settings.policy_db_role):
        print(statement + ";")
    return 0


def init_schema(identity_sql: str) -> int:
    logger.info("=" * 60)
    logger.info("Initializing database...")
    logger.info("=" * 60)

    try:
        from sqlalchemy import inspect

        from domain.models import engine, init_database
        from domain.security.enforcement import log_policy_gaps

        init_database(identity_sql=identity_sql)
        log_policy_gaps()

        tables = inspect(engine).get_table_names()
        logger.info(f"Created {len(tables)} tables: {', '.join(sorted(tables))}")
        return 0
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        return 1


def main(argv=None) -> int:
    from app.config import settings

    parser = argparse.ArgumentParser(description="Initialize the AngiDay database")
    parser.add_argument(
        "--print-sql",
        action="store_true",
        help="print the row level security statements instead of applying anything",
    )
    parser.add_argument(
        "--identity-sql",
        default=settings.policy_identity_sql,
        help="SQL expression yielding the caller's id inside policies",
    )
    args = parser.parse_args(argv)

    if args.print_sql:
        return print_policy_sql(args.identity_sql)
    return init_schema(args.identity_sql)


if __name__ == "__main__":
    sys.exit(main())
