#!/usr/bin/env python3
"""
Create a sample form owned by an existing user.

Usage:
    python scripts/seed_form.py --email admin@example.com
    python scripts/seed_form.py --email admin@example.com --title "Event Signup" --publish

Create the owner first with scripts/seed_user.py.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database import AsyncSessionLocal, init_db, close_db
from app.services.form_service import FormService
from app.services.user_service import UserService

logger = logging.getLogger("seed_form")

SAMPLE_SCHEMA = [
    {"id": "1", "type": "text", "label": "Your Name", "placeholder": "Enter your name", "required": True},
    {"id": "2", "type": "email", "label": "Email Address", "placeholder": "Enter your email", "required": True},
    {"id": "3", "type": "textarea", "label": "Message", "placeholder": "Enter your message", "required": False},
]

SAMPLE_SETTINGS = {
    "showTitle": True,
    "showDescription": True,
    "submitButtonText": "Submit",
    "theme": "light",
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a sample form owned by an existing user")
    parser.add_argument(
        "--email",
        required=True,
        help="Email of the owning user"
    )
    parser.add_argument(
        "--title",
        default="Test Form",
        help="Form title (default: Test Form)"
    )
    parser.add_argument(
        "--description",
        default="This is a test form",
        help="Form description"
    )
    parser.add_argument(
        "--publish",
        action="store_true",
        help="Create the form already published"
    )
    return parser.parse_args(argv)


async def seed_form(email: str, title: str, description: Optional[str] = None, publish: bool = False):
    """
    Create the form in its own session.

    Raises:
        ValueError if no user has this email
    """
    async with AsyncSessionLocal() as session:
        owner = await UserService.get_user_by_email(session, email)
        if owner is None:
            raise ValueError(f"No user with email {email}; run scripts/seed_user.py first")

        return await FormService.create_form(
            db=session,
            owner_id=owner.id,
            title=title,
            description=description,
            schema=SAMPLE_SCHEMA,
            form_settings=SAMPLE_SETTINGS,
            is_published=publish
        )


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the seeder; returns the process exit code."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    args = parse_args(argv)

    try:
        await init_db()
        form = await seed_form(
            email=args.email,
            title=args.title,
            description=args.description,
            publish=args.publish
        )
    except Exception as e:
        logger.error(f"Error seeding form: {e}", exc_info=True)
        return 1
    finally:
        await close_db()

    logger.info(f"Form created: {form.id} (published: {form.is_published})")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
