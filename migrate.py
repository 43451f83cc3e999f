#!/usr/bin/env python3
"""
Database management script.
Creates and drops tables, seeds the bootstrap admin and resets development databases.
"""

import asyncio
import argparse
import logging
import sys

from rental_api.config import settings
from rental_api.database import AsyncSessionLocal, close_db_connection, create_tables, drop_tables
from rental_api.services.auth import seed_admin

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class DatabaseManager:
    """Table lifecycle and seeding commands."""

    async def create(self) -> None:
        logger.info("Creating tables")
        await create_tables()

    async def drop(self) -> None:
        logger.warning("Dropping all tables - all data will be lost!")
        await drop_tables()

    async def seed_admin(self) -> None:
        """Create the admin from ADMIN_NAME/ADMIN_EMAIL/ADMIN_PASSWORD."""
        if not settings.admin_seed_configured:
            raise RuntimeError("Set ADMIN_NAME, ADMIN_EMAIL and ADMIN_PASSWORD to seed the admin")

        async with AsyncSessionLocal() as session:
            admin = await seed_admin(session)

        if admin is None:
            logger.info("Admin already exists, nothing to seed")
        else:
            logger.info(f"Admin user created: {admin.email}")

    async def reset(self) -> None:
        """Drop, recreate and seed (development and testing only)."""
        await self.drop()
        await self.create()
        if settings.admin_seed_configured:
            await self.seed_admin()
        logger.info("Database reset completed")


async def run(command: str) -> None:
    manager = DatabaseManager()
    try:
        if command == "create":
            await manager.create()
        elif command == "drop":
            await manager.drop()
        elif command == "seed-admin":
            await manager.seed_admin()
        elif command == "reset":
            await manager.reset()
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Rental Listing API database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("drop", help="Drop all tables (development only)")
    subparsers.add_parser("seed-admin", help="Create the admin account from environment settings")

    reset_parser = subparsers.add_parser("reset", help="Drop, recreate and seed (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "reset" and not args.confirm:
        print("Database reset requires --confirm flag")
        return

    try:
        asyncio.run(run(args.command))
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
