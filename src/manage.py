"""Storefront database management CLI.

Creates or drops the relational schema for the storefront domain. Only
meaningful when the active configuration uses a SQL provider, e.g.
PROTEAN_ENV=production with DATABASE_URL set.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

from storefront.domain import storefront
from storefront.utils.db import drop_db, setup_db


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    storefront.init()
    if args.command == "setup-db":
        print("Creating storefront database schema...")
        setup_db(storefront)
    elif args.command == "drop-db":
        print("Dropping storefront database schema...")
        drop_db(storefront)
    else:
        parser.print_help()
        sys.exit(1)

    print("Done.")


if __name__ == "__main__":
    main()
