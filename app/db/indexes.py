"""
app/db/indexes.py

Purpose: Database index management (MongoDB backend)

- Unique indexes backing the user and vehicle invariants
- Owner-scoped lookup indexes for dashboard reads
"""

from pymongo import ASCENDING, DESCENDING

from app.db.store import VEHICLES, INCOMES, EXPENSES
from app.db.mongo import USERS, PENDING_SIGNUPS
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(database):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        logger.info("Creating database indexes...")

        # ==============================================
        # USERS
        # ==============================================

        users = database[USERS]
        await users.create_index("id", unique=True, name="user_id_unique")
        await users.create_index("phone", unique=True, name="phone_unique")
        await users.create_index("email", unique=True, name="email_unique")
        logger.debug("Created unique indexes on users.id, users.phone, users.email")

        # ==============================================
        # PENDING SIGNUPS
        # ==============================================

        await database[PENDING_SIGNUPS].create_index("phone", unique=True, name="pending_phone_unique")
        logger.debug("Created unique index on pending_signups.phone")

        # ==============================================
        # VEHICLES
        # ==============================================

        vehicles = database[VEHICLES]
        await vehicles.create_index("id", unique=True, name="vehicle_id_unique")
        await vehicles.create_index(
            [("user_id", ASCENDING), ("vehicle_no", ASCENDING)],
            unique=True,
            name="user_vehicle_no_unique"
        )
        logger.debug("Created indexes on vehicles")

        # ==============================================
        # INCOMES / EXPENSES
        # ==============================================

        for name in (INCOMES, EXPENSES):
            collection = database[name]
            await collection.create_index("id", unique=True, name=f"{name}_id_unique")
            await collection.create_index(
                [("user_id", ASCENDING), ("date", DESCENDING)],
                name=f"{name}_user_date_idx"
            )
            await collection.create_index(
                [("user_id", ASCENDING), ("vehicle", ASCENDING)],
                name=f"{name}_user_vehicle_idx"
            )
            logger.debug(f"Created indexes on {name}")

        logger.info("All database indexes created successfully")

    except Exception as e:
        logger.error(f"Error creating indexes: {str(e)}", exc_info=True)
        raise
