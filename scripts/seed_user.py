#!/usr/bin/env python3
"""
Create a user or reset an existing user's password.

Usage:
    python scripts/seed_user.py --email admin@example.com --name "Admin"
    python scripts/seed_user.py --email admin@example.com --password "s3cret" --rounds 12

The password is taken from --password, then the SEED_USER_PASSWORD
environment variable, then an interactive prompt.
"""

import argparse
import asyncio
import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.database import AsyncSessionLocal, init_db, close_db
from app.services.user_service import UserService

logger = logging.getLogger("seed_user")

PASSWORD_ENV_VAR = "SEED_USER_PASSWORD"


def resolve_password(cli_password: Optional[str]) -> str:
    """--password, else $SEED_USER_PASSWORD, else prompt twice."""
    if cli_password:
        return cli_password

    env_password = os.environ.get(PASSWORD_ENV_VAR)
    if env_password:
        return env_password

    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        raise ValueError("Passwords do not match")
    return password


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a user or reset an existing user's password"
    )
    parser.add_argument(
        "--email",
        required=True,
        help="User email (upsert key)"
    )
    parser.add_argument(
        "--name",
        default=None,
        help="Display name for a new user (defaults to the email local part)"
    )
    parser.add_argument(
        "--password",
        default=None,
        help=f"Password (prefer ${PASSWORD_ENV_VAR} or the prompt; CLI args show up in process lists)"
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=settings.BCRYPT_ROUNDS,
        help=f"bcrypt work factor (default: {settings.BCRYPT_ROUNDS})"
    )
    return parser.parse_args(argv)


async def seed_user(email: str, password: str, name: Optional[str] = None, rounds: Optional[int] = None):
    """
    Upsert the user in its own session.

    Returns:
        Tuple of (User, created)
    """
    async with AsyncSessionLocal() as session:
        return await UserService.upsert_user_password(
            db=session,
            email=email,
            password=password,
            name=name,
            rounds=rounds
        )


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the seeder; returns the process exit code."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    args = parse_args(argv)

    try:
        password = resolve_password(args.password)
        await init_db()
        user, created = await seed_user(
            email=args.email,
            password=password,
            name=args.name,
            rounds=args.rounds
        )
    except Exception as e:
        logger.error(f"Error seeding user: {e}", exc_info=True)
        return 1
    finally:
        await close_db()

    logger.info(f"User {'created' if created else 'updated'}: {user.email}")
    logger.info("Password hash set successfully")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
