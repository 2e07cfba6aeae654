#!/usr/bin/env python3
"""
Create Admin User Script.

Creates an administrator account directly in the database. Administrators
cannot self-register through the API unless ALLOW_ADMIN_REGISTRATION is
set, so this is how the first one is made.

Usage:
    python auto/create_admin.py
    python auto/create_admin.py --username root --password Secret123

Environment Variables:
    ADMIN_USERNAME: Admin username (default: admin)
    ADMIN_PASSWORD: Admin password (default: auto-generated)
"""

from argparse import ArgumentParser, Namespace
from asyncio import run as asyncio_run
from os import environ
from secrets import token_urlsafe
from sys import exit as sys_exit

from quill.db import init_db, transaction
from quill.errors import UsernameTakenError
from quill.managers.password_manager import hash_password
from quill.models import Role, UserDB
from quill.repositories import UserRepository


def generate_secure_password(length: int = 16) -> str:
    """
    Generate a secure random password.

    Parameters
    ----------
    length : int
        Number of random bytes (default: 16).

    Returns
    -------
    str
        URL-safe random password.
    """
    return token_urlsafe(length)


async def create_admin_user(repo: UserRepository, username: str, password: str) -> UserDB:
    """
    Create an administrator account.

    Parameters
    ----------
    repo : UserRepository
        Repository bound to an open session.
    username : str
        Admin username.
    password : str
        Admin password (will be hashed).

    Returns
    -------
    UserDB
        Created administrator.

    Raises
    ------
    UsernameTakenError
        If the username is already in use.
    """
    if await repo.username_taken(username):
        raise UsernameTakenError
    admin = await repo.create(
        username=username,
        password_hash=await hash_password(password),
        role=Role.ADMINISTRATOR,
    )
    await repo.commit()
    return admin


def parse_args() -> Namespace:
    parser = ArgumentParser(description="Create an administrator account in the database.")
    parser.add_argument(
        "-u",
        "--username",
        default=environ.get("ADMIN_USERNAME", "admin"),
        help="Admin username (default: admin or ADMIN_USERNAME env var)",
    )
    parser.add_argument(
        "-p",
        "--password",
        default=environ.get("ADMIN_PASSWORD"),
        help="Admin password (default: auto-generated or ADMIN_PASSWORD env var)",
    )
    parser.add_argument(
        "--show-password",
        "-s",
        action="store_true",
        help="Show the password in output (use with caution)",
    )
    return parser.parse_args()


async def main() -> int:
    """
    Run the admin creation process.

    Returns
    -------
    int
        Exit code (0 for success, 1 for error).
    """
    args = parse_args()
    auto_generated = args.password is None
    password = args.password or generate_secure_password()

    await init_db()
    try:
        async with transaction() as session:
            admin = await create_admin_user(UserRepository(session), args.username, password)
    except UsernameTakenError:
        print(f"❌ Error: username '{args.username}' is already taken")
        return 1

    print("✅ Admin user created successfully!")
    print(f"   UUID:     {admin.uuid}")
    print(f"   Username: {admin.username}")
    print(f"   Role:     {admin.role}")
    if auto_generated or args.show_password:
        print(f"   Password: {password}")
        if auto_generated:
            print("\n⚠️  NOTE: This password was auto-generated. Save it now!")
    return 0


if __name__ == "__main__":
    sys_exit(asyncio_run(main()))
