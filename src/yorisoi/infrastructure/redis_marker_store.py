"""Redis marker store implementation."""

import redis

from yorisoi.exceptions import MarkerStoreError
from yorisoi.infrastructure.interfaces.marker_store import MarkerStore
from yorisoi.logging import setup_logging

logger = setup_logging()


class RedisMarkerStore(MarkerStore):
    """Marker store using Redis ``SET NX``; markers never expire."""

    def __init__(self, client: redis.Redis):
        self._client = client

    def create_if_absent(self, key: str, value: str) -> bool:
        """
        Creates the marker with ``SET key value NX``.

        Raises:
            MarkerStoreError: If the Redis operation fails.
        """
        try:
            created = self._client.set(key, value, nx=True)
        except redis.RedisError as e:
            logger.exception("Redis set failed", extra={"key": key})
            raise MarkerStoreError(key, cause=e) from e
        return bool(created)
