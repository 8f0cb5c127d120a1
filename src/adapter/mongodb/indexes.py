"""Index setup for the users and tasks collections."""

from logging import getLogger

from pymongo.errors import OperationFailure

logger = getLogger(__name__)

# IndexOptionsConflict, IndexKeySpecsConflict
INDEX_CONFLICT_CODES = {85, 86}


async def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a stale one that blocks it.

    A stale index either reuses ``name`` with other keys or options, or
    covers ``keys`` under another name. It is dropped and the index is
    created again.
    """
    try:
        await collection.create_index(keys, name=name, **kwargs)
        return True
    except OperationFailure as e:
        if e.code not in INDEX_CONFLICT_CODES and "already exists" not in str(e):
            raise

    stale = await _find_stale_index(collection, keys, name)
    if stale is None:
        logger.error("Index conflict without a stale index", extra={"index": name})
        return False

    logger.warning("Replacing stale index", extra={"index": name, "stale": stale})
    await collection.drop_index(stale)
    await collection.create_index(keys, name=name, **kwargs)
    return True


async def _find_stale_index(collection, keys: list, name: str):
    for idx_name, info in (await collection.index_information()).items():
        if idx_name == '_id_':
            continue
        if idx_name == name or list(info.get('key', [])) == list(keys):
            return idx_name
    return None


async def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.task_repository import MongoTaskRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        await MongoUserRepository(db).ensure_indexes(),
        await MongoTaskRepository(db).ensure_indexes(),
    ]
    return all(results)
