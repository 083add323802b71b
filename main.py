#!/usr/bin/env python3
"""
Vendorify -- admin command line.

Usage:
  python main.py seed
  python main.py create-user --name "Bob Vendor" --email bob@example.com
  python main.py set-status 3 Approved

All commands use the same DATABASE_URL as the web app (see core/config.py).
create-user prompts for the password so it never lands in shell history.
"""

import argparse
import getpass
import logging
import sys
from typing import Optional

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore
from auth.tokens import MIN_PASSWORD_LENGTH, hash_password
from core.database import dispose_engine, get_engine
from vendors.models import APPLICATION_STATUSES, VendorApplication
from vendors.store import VendorStore

logger = logging.getLogger("vendorify.cli")

DEMO_EMAIL = "alice@example.com"
DEMO_PASSWORD = "password123"

_DEMO_APPLICATIONS: list[tuple[str, str, str, str]] = [
    # (vendor_name, stall_type, license_number, status)
    ("Alice's Chai Corner", "Tea Stall", "LIC-1001", "Approved"),
    ("Page Turner Books", "Bookshop", "LIC-1002", "Pending"),
    ("Daily Headlines", "Newspaper Stand", "LIC-1003", "Rejected"),
]


def seed(user_store: UserStore, vendor_store: VendorStore) -> Optional[int]:
    """Create the demo user and a few applications. Returns the user ID, or None if already seeded."""
    user = User(name="Alice Example", email=DEMO_EMAIL, hashed_password=hash_password(DEMO_PASSWORD))
    try:
        user.id = user_store.create_user(user)
    except IntegrityError:
        logger.info("Demo user %s already exists -- skipping seed", DEMO_EMAIL)
        return None

    for vendor_name, stall_type, license_number, status in _DEMO_APPLICATIONS:
        application_id = vendor_store.create_application(
            VendorApplication(
                user_id=user.id,
                vendor_name=vendor_name,
                stall_type=stall_type,
                license_number=license_number,
            )
        )
        if status != "Pending":
            vendor_store.update_status(application_id, status)
    logger.info("Seeded user %d with %d applications", user.id, len(_DEMO_APPLICATIONS))
    return user.id


def create_user(user_store: UserStore, name: str, email: str, password: str) -> int:
    """Create an account from the command line. Raises ValueError on bad input or a taken email."""
    name = name.strip()
    email = email.strip().lower()
    if not name or not email or not password:
        raise ValueError("Name, email, and password are required.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    try:
        return user_store.create_user(User(name=name, email=email, hashed_password=hash_password(password)))
    except IntegrityError as exc:
        raise ValueError("An account with this email already exists.") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vendorify",
        description="Vendorify admin commands.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py seed
  python main.py create-user --name "Bob Vendor" --email bob@example.com
  python main.py set-status 3 Approved
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    sub.add_parser("seed", help=f"Create the demo user ({DEMO_EMAIL}) and sample applications")

    p_user = sub.add_parser("create-user", help="Create an account (prompts for the password)")
    p_user.add_argument("--name", required=True, help="Display name")
    p_user.add_argument("--email", required=True, help="Login email")

    p_status = sub.add_parser("set-status", help="Approve or reject an application")
    p_status.add_argument("application_id", type=int, metavar="ID", help="Application ID")
    p_status.add_argument("status", choices=APPLICATION_STATUSES, metavar="STATUS", help="Pending, Approved, or Rejected")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(level=logging.INFO, format="%(levelname)-5s %(name)s %(message)s")

    engine = get_engine()
    user_store = UserStore(engine)
    vendor_store = VendorStore(engine)
    try:
        if args.command == "seed":
            user_id = seed(user_store, vendor_store)
            if user_id is None:
                print("  Database already seeded.")
            else:
                print(f"  Demo user: {DEMO_EMAIL} / {DEMO_PASSWORD}")
            return 0

        if args.command == "create-user":
            password = getpass.getpass("Password: ")
            try:
                user_id = create_user(user_store, args.name, args.email, password)
            except ValueError as exc:
                print(f"  [!] {exc}")
                return 1
            print(f"  Created user {user_id}.")
            return 0

        if args.command == "set-status":
            if not vendor_store.update_status(args.application_id, args.status):
                print(f"  [!] No application with ID {args.application_id}.")
                return 1
            print(f"  Application {args.application_id} is now {args.status}.")
            return 0
    finally:
        dispose_engine()

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
