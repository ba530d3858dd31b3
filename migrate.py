#!/usr/bin/env python3
"""
Database bootstrap script.
Creates the properties table and checks store connectivity from the command line.
"""

import asyncio
import sys
import argparse
import logging
from typing import Optional

from property_service import database
from property_service.config import settings
from property_service.repositories import PropertyRepository, UserRepository
from property_service.services.property import PropertyService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MigrationManager:
    """Runs schema bootstrap and connectivity checks against the configured store."""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or settings.database_url

    def _session_factory(self):
        session_factory = database.init_db_engine(self.database_url)
        if session_factory is None:
            raise RuntimeError("DATABASE_URL is not configured")
        return session_factory

    async def setup_schema(self) -> None:
        """Create the properties table and its index if they do not exist."""
        session_factory = self._session_factory()
        service = PropertyService(
            PropertyRepository(session_factory),
            UserRepository(session_factory)
        )
        try:
            await service.setup_database()
            logger.info("Properties table created successfully")
        finally:
            await database.close_db_connection()

    async def check_connection(self) -> bool:
        """Run ``SELECT 1`` against the store."""
        self._session_factory()
        try:
            return await database.test_database_connection()
        finally:
            await database.close_db_connection()


def main(argv=None) -> int:
    """Main CLI interface for schema management."""
    parser = argparse.ArgumentParser(description="Property service database management")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("setup", help="Create the properties table if absent")
    subparsers.add_parser("check", help="Check database connectivity")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    manager = MigrationManager(args.database_url)

    try:
        if args.command == "setup":
            asyncio.run(manager.setup_schema())

        elif args.command == "check":
            if not asyncio.run(manager.check_connection()):
                logger.error("Database is not reachable")
                return 1
            logger.info("Database is reachable")

    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
