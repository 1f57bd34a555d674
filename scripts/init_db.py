"""
Database initialization script

Run once to create collections and indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
import logging

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.db.mongo import connect_to_mongo, close_mongo_connection, get_database
from app.db.indexes import create_indexes

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def main():
    """Main initialization"""
    logger.info("=" * 60)
    logger.info("  QuickChat Database Setup")
    logger.info("=" * 60 + "\n")

    await connect_to_mongo()

    try:
        await create_indexes()

        db = await get_database()

        logger.info("\nVerifying indexes...")
        for collection_name in ["users", "messages"]:
            indexes = await db[collection_name].index_information()
            logger.info(f"\n  {collection_name}:")
            for idx_name in indexes.keys():
                if idx_name != "_id_":
                    logger.info(f"    {idx_name}")

        stats = {
            "users": await db.users.count_documents({}),
            "messages": await db.messages.count_documents({}),
            "unseen": await db.messages.count_documents({"seen": False}),
        }

        logger.info("\nCurrent documents:")
        logger.info(f"  Users: {stats['users']}")
        logger.info(f"  Messages: {stats['messages']} ({stats['unseen']} unseen)")

        logger.info("\nDatabase initialization complete!")

    finally:
        await close_mongo_connection()

    logger.info("\n" + "=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
