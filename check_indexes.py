import asyncio
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_database

# Configure logging
import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

EXPECTED = {
    "users": ["email_unique", "user_created_idx"],
    "messages": ["unseen_lookup_idx", "conversation_idx"],
}

async def check_indexes():
    await connect_to_mongo()
    db = await get_database()

    try:
        for collection_name, expected in EXPECTED.items():
            indexes = await db[collection_name].index_information()
            logger.info(f"{collection_name}: existing indexes {list(indexes.keys())}")

            for name in expected:
                if name in indexes:
                    logger.info(f"'{name}' exists.")
                else:
                    logger.error(f"'{name}' is missing! Run scripts/init_db.py or start the app.")

        email_index = (await db.users.index_information()).get("email_unique", {})
        if email_index and not email_index.get("unique"):
            logger.error("'email_unique' is not unique; duplicate accounts are possible.")

    except Exception as e:
        logger.error(f"Error checking index: {e}")
    finally:
        await close_mongo_connection()

if __name__ == "__main__":
    asyncio.run(check_indexes())
