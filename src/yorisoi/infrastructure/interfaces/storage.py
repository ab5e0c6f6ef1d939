"""Abstract interface for object storage operations."""

from abc import ABC, abstractmethod
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO

from yorisoi.exceptions import CapabilityUnavailableError


class ObjectStorage(ABC):
    """Abstract base class for a single-bucket object store."""

    @abstractmethod
    def upload(
        self,
        object_name: str,
        data: BinaryIO,
        size: int,
        content_type: str,
    ) -> None:
        """
        Uploads a stream to storage, overwriting any existing object.

        Args:
            object_name: The destination path/name in storage.
            data: File-like object containing the data.
            size: Size of the data in bytes.
            content_type: MIME type of the object.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def upload_file(self, object_name: str, path: Path, content_type: str) -> None:
        """
        Uploads a local file to storage.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def download(self, object_name: str) -> bytes:
        """
        Downloads an object.

        Args:
            object_name: The object path/name in storage.

        Returns:
            The object contents as bytes.

        Raises:
            StorageDownloadError: If the download fails.
        """

    @abstractmethod
    def download_to_file(self, object_name: str, path: Path) -> None:
        """
        Downloads an object into a local file.

        Raises:
            StorageDownloadError: If the download fails.
        """

    @abstractmethod
    def exists(self, object_name: str) -> bool:
        """Returns whether an object with this exact name exists."""

    @abstractmethod
    def list_objects(self, prefix: str) -> list[str]:
        """
        Lists object names under a prefix, recursively.

        Raises:
            StorageError: If listing fails.
        """

    @abstractmethod
    def delete(self, object_name: str) -> None:
        """
        Deletes an object.

        Raises:
            StorageError: If deletion fails.
        """

    @abstractmethod
    def copy(self, source: str, destination: str) -> None:
        """
        Copies an object server-side.

        Raises:
            StorageError: If the copy fails.
        """

    def compose(self, sources: list[str], destination: str) -> None:
        """
        Concatenates several objects server-side into a new object.

        Backends without a compose primitive keep this default.

        Args:
            sources: Ordered object names, at least two.
            destination: Name of the object to create.

        Raises:
            CapabilityUnavailableError: If the backend cannot compose these sources.
            StorageError: If the compose call fails for another reason.
        """
        raise CapabilityUnavailableError(destination, "backend has no compose primitive")

    @abstractmethod
    def presigned_upload_url(self, object_name: str, expires: timedelta) -> str:
        """Returns a URL that lets a client PUT this object directly."""

    @abstractmethod
    def presigned_download_url(self, object_name: str, expires: timedelta) -> str:
        """Returns a URL that lets an external service GET this object."""

    @abstractmethod
    def object_uri(self, object_name: str) -> str:
        """Returns a durable, bucket-qualified URI for the object."""
