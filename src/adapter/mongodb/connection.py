"""Process-wide MongoDB client.

`get_mongodb_client()` hands out one cached client and reconnects when its
ping fails. A missing MONGO_URL, or a first connection that fails, is
treated as configuration trouble: every later call returns None without
dialing again, and the API answers 503.
"""

import os
import logging
from datetime import timezone

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'usermgmt')

# Datetimes come back as aware UTC, matching what the domain writes
CLIENT_OPTIONS = {
    'tz_aware': True,
    'tzinfo': timezone.utc,
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'minPoolSize': 0,
    'maxIdleTimeMS': 30000,
    'waitQueueTimeoutMS': 10000,
    'retryWrites': True,
    'retryReads': True,
}

_client_cache: MongoClient | None = None
_connected_once = False
_gave_up = False


def reset_client():
    global _client_cache, _connected_once, _gave_up
    _client_cache = None
    _connected_once = False
    _gave_up = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def _connect(url: str) -> MongoClient:
    """Open a client and verify it with a ping. Raises PyMongoError on failure."""
    client = MongoClient(url, **CLIENT_OPTIONS)
    client.admin.command('ping')
    return client


def get_mongodb_client() -> MongoClient | None:
    """Return the shared client, or None if MongoDB is unreachable."""
    global _client_cache, _connected_once, _gave_up

    if _client_cache is not None:
        if _is_alive(_client_cache):
            return _client_cache
        logger.debug("[MONGODB] Cached client failed ping, reconnecting")
        _client_cache = None

    if _gave_up:
        return None

    if not MONGO_URL:
        logger.error("[MONGODB] MONGO_URL not configured")
        _gave_up = True
        return None

    try:
        client = _connect(MONGO_URL)
    except (ConnectionFailure, PyMongoError) as e:
        if not _connected_once:
            logger.error("[MONGODB] Initial connection failed", extra={"error": str(e)[:200]})
            _gave_up = True
        return None

    if not _connected_once:
        logger.info("[MONGODB] Connected", extra={"database": DATABASE_NAME})
    _connected_once = True
    _client_cache = client
    return client
