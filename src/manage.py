"""Cafe database management CLI.

Creates and drops the database schema for the cafe domain. Only SQL providers
have a schema; with the in-memory provider both commands are no-ops.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the cafe schema."""
    from cafe.domain import cafe
    from cafe.utils.db import setup_db

    print("Initializing cafe domain...")
    cafe.init()
    print("Creating cafe database schema...")
    providers = setup_db(cafe)
    print(f"  cafe schema ready ({len(providers)} provider(s)).")
    print("Done.")
    return providers


def drop_database():
    """Drop the cafe schema."""
    from cafe.domain import cafe
    from cafe.utils.db import drop_db

    print("Initializing cafe domain...")
    cafe.init()
    print("Dropping cafe database schema...")
    providers = drop_db(cafe)
    print(f"  cafe schema dropped ({len(providers)} provider(s)).")
    print("Done.")
    return providers


def main(argv=None):
    parser = argparse.ArgumentParser(description="Cafe database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
