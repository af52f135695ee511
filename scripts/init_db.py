"""
Database initialization script - FleetLedger MongoDB backend

Run once (or after schema changes) to create collections and indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
import os
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

from motor.motor_asyncio import AsyncIOMotorClient
import logging

from app.db.indexes import create_indexes
from app.db.mongo import USERS, PENDING_SIGNUPS
from app.db.store import LEDGER_COLLECTIONS

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


MONGODB_URL = os.getenv("MONGODB_URL")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "fleetledger")

if not MONGODB_URL:
    raise ValueError("MONGODB_URL must be set in .env file")


async def main():
    logger.info("=" * 60)
    logger.info("  FleetLedger Database Setup")
    logger.info("=" * 60)

    logger.info(f"Connecting to MongoDB: {MONGODB_DB_NAME}")
    client = AsyncIOMotorClient(MONGODB_URL)
    db = client[MONGODB_DB_NAME]

    try:
        await client.admin.command('ping')
        logger.info("Connected successfully")

        await create_indexes(db)

        logger.info("Verifying indexes...")
        for collection_name in (USERS, PENDING_SIGNUPS) + LEDGER_COLLECTIONS:
            indexes = await db[collection_name].index_information()
            count = await db[collection_name].count_documents({})
            logger.info(f"  {collection_name} ({count} documents)")
            for idx_name in indexes.keys():
                if idx_name != "_id_":
                    logger.info(f"    - {idx_name}")

        logger.info("Database initialization complete")

    except Exception as e:
        logger.error(f"Error: {e}")
        raise

    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
