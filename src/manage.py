"""Storefront database management CLI.

Creates and drops the tables of each bounded context against DATABASE_URL.

Usage:
    python src/manage.py setup-db                     # Create all tables
    python src/manage.py setup-db --context identity  # Only the users table
    python src/manage.py drop-db                      # Drop all tables
"""

import argparse
import sys

CONTEXTS = ["identity", "catalog", "ordering"]


def context_tables():
    """Map each context to the tables it owns, in dependency order."""
    from catalog.product.product import Product, ProductImage, ProductVariant
    from identity.user.user import User
    from ordering.cart.cart import CartItem
    from ordering.order.order import Order, OrderItem

    return {
        "identity": [User.__table__],
        "catalog": [Product.__table__, ProductVariant.__table__, ProductImage.__table__],
        "ordering": [CartItem.__table__, Order.__table__, OrderItem.__table__],
    }


def setup_databases(contexts=None):
    """Create database tables for the specified (or all) contexts."""
    from shared.database import Base, get_database

    engine = get_database().engine
    all_tables = context_tables()
    targets = [name for name in CONTEXTS if not contexts or name in contexts]

    for name in targets:
        print(f"Creating {name} tables...")
        Base.metadata.create_all(engine, tables=all_tables[name])
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(contexts=None):
    """Drop database tables for the specified (or all) contexts."""
    from shared.database import Base, get_database

    engine = get_database().engine
    all_tables = context_tables()
    # Dependents first: ordering references catalog and identity
    targets = [name for name in reversed(CONTEXTS) if not contexts or name in contexts]

    for name in targets:
        print(f"Dropping {name} tables...")
        Base.metadata.drop_all(engine, tables=all_tables[name])
        print(f"  {name} schema dropped.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--context",
        choices=CONTEXTS,
        nargs="*",
        help="Specific context(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--context",
        choices=CONTEXTS,
        nargs="*",
        help="Specific context(s) to drop (default: all)",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.context)
    elif args.command == "drop-db":
        drop_databases(args.context)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
