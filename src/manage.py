"""Shipment database management CLI.

Creates and drops the database schema of the shipment domain through the
setup_db/drop_db utilities.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from shipment.domain import shipment
    from shipment.utils.db import setup_db

    print("Initializing shipment domain...")
    shipment.init()
    print("Creating shipment database schema...")
    setup_db(shipment)
    print("Done.")


def drop_database():
    from shipment.domain import shipment
    from shipment.utils.db import drop_db

    print("Initializing shipment domain...")
    shipment.init()
    print("Dropping shipment database schema...")
    drop_db(shipment)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Shipment database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
