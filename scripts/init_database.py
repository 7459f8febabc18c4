#!/usr/bin/env python3
"""
Database Initialization Script

Creates all hotel-api tables and the default settings document.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.exceptions import ApplicationException
from src.core.logger import get_logger, setup_logging
from src.models import build_registry
from src.services.provisioning_service import ProvisioningService
from src.stores.database import Database

logger = get_logger(__name__)


def main():
    """Main function to initialize the database."""
    parser = argparse.ArgumentParser(description="Initialize the hotel-api database")
    parser.add_argument("--url", help="Database URL (defaults to DATABASE__URL)")
    parser.add_argument(
        "--no-demo-data", action="store_true", help="Skip demo users and rooms"
    )
    args = parser.parse_args()

    setup_logging()
    database = Database(url=args.url)
    try:
        logger.info("Starting database initialization...")

        # Test database connection first
        logger.info("Testing database connection...")
        connection_status = database.test_connection()
        logger.info("Database connection test passed: %s", connection_status)

        summary = ProvisioningService(database, build_registry()).provision(
            seed_demo_data=not args.no_demo_data
        )
        logger.info("Database initialization completed successfully: %s", summary)

    except ApplicationException as e:
        logger.error("Database initialization failed: %s", e)
        sys.exit(1)
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
