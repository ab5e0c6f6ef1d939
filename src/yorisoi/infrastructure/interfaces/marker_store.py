"""Abstract interface for create-if-absent markers."""

from abc import ABC, abstractmethod


class MarkerStore(ABC):
    """Abstract base class for stores with an atomic conditional create."""

    @abstractmethod
    def create_if_absent(self, key: str, value: str) -> bool:
        """
        Creates a marker only if no marker with this key exists.

        Must be atomic across processes: of any number of concurrent callers
        with the same key, exactly one gets True.

        Args:
            key: The marker key.
            value: Payload stored with the marker.

        Returns:
            True if this call created the marker, False if it already existed.

        Raises:
            MarkerStoreError: If the write fails for any other reason.
        """
