#!/usr/bin/env python
"""
Script to provision an administrator account.

Sign-up through the API always creates regular users; administrators are
created here, or an existing account is promoted.

Usage:
    python -m scripts.create_admin --username admin --email admin@example.com --password s3cret!

    # Promote an existing user instead of creating one
    python -m scripts.create_admin --email jane@example.com --promote
"""

import asyncio
import argparse
import logging
import sys
from typing import Optional

from app.crud import user as user_crud
from app.database import async_session
from app.models import User, UserRole
from app.schemas.user import check_password
from app.services.auth import hash_password

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("create_admin")


async def create_admin(username: str, email: str, password: str) -> User:
    """
    Create an administrator account.

    Raises:
        ValueError: If the username or email is taken or the password length is out of bounds
    """
    check_password(password)

    async with async_session() as session:
        if await user_crud.get_user_by_username(session, username):
            raise ValueError(f"Username {username} is already taken")
        if await user_crud.get_user_by_email(session, email):
            raise ValueError(f"Email {email} is already registered")

        user = await user_crud.create_user(
            session, username, email, hash_password(password), UserRole.ADMIN
        )
        await session.commit()
        return user


async def promote_user(email: str) -> Optional[User]:
    """Grant the admin role to an existing account; returns None if there is no such user."""
    async with async_session() as session:
        user = await user_crud.get_user_by_email(session, email)
        if user is None:
            return None
        user.role = UserRole.ADMIN.value
        await session.commit()
        return user


async def main():
    """Entry point for the script."""
    parser = argparse.ArgumentParser(description='Create or promote an administrator')
    parser.add_argument('--username', help='Username of the new administrator')
    parser.add_argument('--email', required=True, help='Email of the administrator')
    parser.add_argument('--password', help='Password of the new administrator')
    parser.add_argument('--promote', action='store_true', help='Promote an existing user')
    args = parser.parse_args()

    try:
        if args.promote:
            user = await promote_user(args.email)
            if user is None:
                logger.error(f"No user with email {args.email}")
                sys.exit(1)
            logger.info(f"User {user.id} ({user.username}) is now an administrator")
            return

        if not args.username or not args.password:
            parser.error("--username and --password are required unless --promote is given")
        user = await create_admin(args.username, args.email, args.password)
        logger.info(f"Created administrator {user.id} ({user.username})")
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Error creating administrator: {str(e)}")
        sys.exit(1)

if __name__ == "__main__":
    asyncio.run(main())
