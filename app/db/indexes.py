"""
app/db/indexes.py

Purpose: Database index management

- Unique email index backs duplicate-account detection
- Compound indexes for unseen counting and conversation reads
"""

from pymongo import ASCENDING

from app.db.mongo import get_users_collection, get_messages_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        messages = get_messages_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index("email", unique=True, name="email_unique")
        logger.debug("Created unique index on users.email")

        await users.create_index("created_at", name="user_created_idx")
        logger.debug("Created index on users.created_at")

        # ==============================================
        # MESSAGES COLLECTION INDEXES
        # ==============================================

        # Unseen badge counts: sender -> me, seen=false
        await messages.create_index(
            [("sender_id", ASCENDING), ("receiver_id", ASCENDING), ("seen", ASCENDING)],
            name="unseen_lookup_idx"
        )
        logger.debug("Created compound index on messages.sender_id + receiver_id + seen")

        # Conversation history in creation order
        await messages.create_index(
            [("receiver_id", ASCENDING), ("sender_id", ASCENDING), ("created_at", ASCENDING)],
            name="conversation_idx"
        )
        logger.debug("Created compound index on messages.receiver_id + sender_id + created_at")

        logger.info("All database indexes created successfully")

        user_indexes = await users.index_information()
        message_indexes = await messages.index_information()

        logger.info(
            f"Index summary: Users={len(user_indexes)}, "
            f"Messages={len(message_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
