import pytest
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import ConflictError
from app.db.indexes import create_indexes
from app.services import user_service


async def test_create_indexes_is_idempotent(database):
    await create_indexes()
    await create_indexes()

    user_indexes = await database["users"].index_information()
    message_indexes = await database["messages"].index_information()

    assert "email_unique" in user_indexes
    assert {"unseen_lookup_idx", "conversation_idx"} <= set(message_indexes)


async def test_unique_email_index_blocks_duplicates(database):
    await create_indexes()
    await database["users"].insert_one({"email": "alice@example.com"})

    with pytest.raises(DuplicateKeyError):
        await database["users"].insert_one({"email": "alice@example.com"})


async def test_racing_signup_maps_to_conflict(database):
    await create_indexes()
    await user_service.create_user("Alice", "alice@example.com", "hash", "bio")

    with pytest.raises(ConflictError):
        await user_service.create_user("Alice 2", "alice@example.com", "hash", "bio")
