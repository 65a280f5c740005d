"""Agrimart database management CLI.

Creates or drops the marketplace tables when `databases.default` points at a
relational provider. With the memory provider both commands have nothing to do.

Usage:
    python src/manage.py setup-db               # Create all tables
    python src/manage.py drop-db                # Drop all tables
    python src/manage.py --env prod setup-db    # Use the PROTEAN_ENV=prod overlay
"""

import argparse
import os
import sys


def _domain(env=None):
    if env:
        os.environ["PROTEAN_ENV"] = env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


def setup_database(env=None):
    from marketplace.utils.db import setup_db

    domain = _domain(env)
    print("Creating marketplace database schema...")
    setup_db(domain)
    print("Done.")


def drop_database(env=None):
    from marketplace.utils.db import drop_db

    domain = _domain(env)
    print("Dropping marketplace database schema...")
    drop_db(domain)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Agrimart database management")
    parser.add_argument("--env", help="Config environment (sets PROTEAN_ENV)")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database(args.env)
    elif args.command == "drop-db":
        drop_database(args.env)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
