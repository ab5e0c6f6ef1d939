"""Server-side merging of ordered stored objects into one object."""

import io

from yorisoi.domain.cleanup import cleanup_objects
from yorisoi.exceptions import CapabilityUnavailableError, StorageError
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.logging import setup_logging

logger = setup_logging()

DEFAULT_FAN_IN = 32


def compose_prefix(destination: str) -> str:
    """Prefix under which intermediate objects for ``destination`` are written."""
    return f"{destination}.compose/"


class ObjectCombiner:
    """
    Merges stored objects with tree-batched compose calls.

    The compose primitive accepts at most ``fan_in`` sources, so the queue of
    objects is reduced round by round: every batch of up to ``fan_in``
    objects becomes one intermediate object, until a single object is left.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        fan_in: int = DEFAULT_FAN_IN,
        local_fallback: bool = True,
        content_type: str = "application/octet-stream",
    ):
        if fan_in < 2:
            raise ValueError("fan_in must be at least 2")
        self._storage = storage
        self._fan_in = fan_in
        self._local_fallback = local_fallback
        self._content_type = content_type

    def combine(self, object_names: list[str], destination: str) -> int:
        """
        Merges ``object_names`` in order into ``destination``.

        Args:
            object_names: Ordered names of existing objects, at least one.
            destination: Name of the merged object.

        Returns:
            The number of compose rounds performed.

        Raises:
            ValueError: If no objects are given.
            CapabilityUnavailableError: If compose is unavailable and the local
                fallback is disabled.
            StorageError: If a compose or copy call fails.
        """
        if not object_names:
            raise ValueError("combine needs at least one object")

        prefix = compose_prefix(destination)
        queue = list(object_names)
        rounds = 0
        try:
            while len(queue) > 1:
                rounds += 1
                batches = [
                    queue[i : i + self._fan_in]
                    for i in range(0, len(queue), self._fan_in)
                ]
                next_queue = []
                for index, batch in enumerate(batches):
                    if len(batch) == 1:
                        next_queue.append(batch[0])
                        continue
                    if len(batches) == 1:
                        target = destination
                    else:
                        target = f"{prefix}{rounds:02d}-{index:05d}"
                    self._compose_batch(batch, target)
                    next_queue.append(target)
                queue = next_queue

            survivor = queue[0]
            if survivor != destination:
                self._storage.copy(survivor, destination)
        finally:
            self._cleanup_intermediates(prefix)

        logger.info(
            "Objects combined",
            extra={
                "destination": destination,
                "source_count": len(object_names),
                "rounds": rounds,
            },
        )
        return rounds

    def _compose_batch(self, batch: list[str], target: str) -> None:
        try:
            self._storage.compose(batch, target)
        except CapabilityUnavailableError as e:
            if not self._local_fallback:
                logger.error(
                    "Compose unavailable and local fallback disabled",
                    extra={"target": target, "reason": e.reason},
                )
                raise
            logger.info(
                "Compose unavailable, combining locally",
                extra={"target": target, "reason": e.reason},
            )
            self._combine_locally(batch, target)

    def _combine_locally(self, batch: list[str], target: str) -> None:
        buffer = io.BytesIO()
        for name in batch:
            buffer.write(self._storage.download(name))
        size = buffer.tell()
        buffer.seek(0)
        self._storage.upload(target, buffer, size, self._content_type)

    def _cleanup_intermediates(self, prefix: str) -> None:
        try:
            names = self._storage.list_objects(prefix)
        except StorageError:
            logger.warning("Could not list intermediates", extra={"prefix": prefix})
            return
        report = cleanup_objects(self._storage, names)
        if report.failed:
            logger.warning(
                "Some intermediate objects were not deleted",
                extra={"prefix": prefix, "failed": report.failed},
            )
