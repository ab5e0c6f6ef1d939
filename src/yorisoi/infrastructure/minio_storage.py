"""MinIO implementation of the ObjectStorage interface."""

from datetime import timedelta
from pathlib import Path
from typing import BinaryIO

from minio import Minio
from minio.commonconfig import ComposeSource, CopySource
from minio.error import S3Error

from yorisoi.exceptions import (
    CapabilityUnavailableError,
    StorageDownloadError,
    StorageError,
    StorageUploadError,
)
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.logging import setup_logging

logger = setup_logging()

_MISSING_CODES = {"NoSuchKey", "NoSuchObject"}


class MinioObjectStorage(ObjectStorage):
    """Handles object storage operations on one MinIO bucket."""

    def __init__(self, client: Minio, bucket_name: str):
        self._client = client
        self._bucket = bucket_name

    def ensure_bucket_exists(self) -> None:
        if not self._client.bucket_exists(self._bucket):
            self._client.make_bucket(self._bucket)
            logger.info("Bucket created", extra={"bucket_name": self._bucket})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": self._bucket})

    def upload(
        self,
        object_name: str,
        data: BinaryIO,
        size: int,
        content_type: str,
    ) -> None:
        try:
            self._client.put_object(
                bucket_name=self._bucket,
                object_name=object_name,
                data=data,
                length=size,
                content_type=content_type,
            )
            logger.info(
                "Object uploaded to MinIO",
                extra={"object_name": object_name, "size": size},
            )
        except Exception as e:
            logger.exception("MinIO upload failed", extra={"object_name": object_name})
            raise StorageUploadError(object_name, e) from e

    def upload_file(self, object_name: str, path: Path, content_type: str) -> None:
        try:
            self._client.fput_object(
                self._bucket, object_name, str(path), content_type=content_type
            )
            logger.info("File uploaded to MinIO", extra={"object_name": object_name})
        except Exception as e:
            logger.exception("MinIO upload failed", extra={"object_name": object_name})
            raise StorageUploadError(object_name, e) from e

    def download(self, object_name: str) -> bytes:
        response = None
        try:
            response = self._client.get_object(self._bucket, object_name)
            data = response.data
            logger.info("Object downloaded from MinIO", extra={"object_name": object_name})
            return data
        except Exception as e:
            logger.exception("MinIO download failed", extra={"object_name": object_name})
            raise StorageDownloadError(object_name, e) from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def download_to_file(self, object_name: str, path: Path) -> None:
        try:
            self._client.fget_object(self._bucket, object_name, str(path))
        except Exception as e:
            logger.exception("MinIO download failed", extra={"object_name": object_name})
            raise StorageDownloadError(object_name, e) from e

    def exists(self, object_name: str) -> bool:
        try:
            self._client.stat_object(self._bucket, object_name)
            return True
        except S3Error as e:
            if e.code in _MISSING_CODES:
                return False
            logger.exception("MinIO stat failed", extra={"object_name": object_name})
            raise StorageError(object_name, "stat", e) from e

    def list_objects(self, prefix: str) -> list[str]:
        try:
            return [
                obj.object_name
                for obj in self._client.list_objects(
                    self._bucket, prefix=prefix, recursive=True
                )
            ]
        except Exception as e:
            logger.exception("MinIO list failed", extra={"prefix": prefix})
            raise StorageError(prefix, "list", e) from e

    def delete(self, object_name: str) -> None:
        try:
            self._client.remove_object(self._bucket, object_name)
        except Exception as e:
            logger.exception("MinIO delete failed", extra={"object_name": object_name})
            raise StorageError(object_name, "delete", e) from e

    def copy(self, source: str, destination: str) -> None:
        try:
            self._client.copy_object(
                self._bucket, destination, CopySource(self._bucket, source)
            )
        except Exception as e:
            logger.exception(
                "MinIO copy failed",
                extra={"source": source, "destination": destination},
            )
            raise StorageError(destination, "copy", e) from e

    def compose(self, sources: list[str], destination: str) -> None:
        """
        Composes objects with MinIO's multipart copy.

        MinIO rejects every non-final source under 5 MiB before any request is
        made; that rejection surfaces as ``CapabilityUnavailableError`` so the
        caller can fall back to a local merge.
        """
        try:
            self._client.compose_object(
                self._bucket,
                destination,
                [ComposeSource(self._bucket, name) for name in sources],
            )
            logger.info(
                "Objects composed",
                extra={"destination": destination, "sources": len(sources)},
            )
        except ValueError as e:
            logger.warning(
                "MinIO cannot compose these sources",
                extra={"destination": destination, "reason": str(e)},
            )
            raise CapabilityUnavailableError(destination, str(e), e) from e
        except Exception as e:
            logger.exception("MinIO compose failed", extra={"destination": destination})
            raise StorageError(destination, "compose", e) from e

    def presigned_upload_url(self, object_name: str, expires: timedelta) -> str:
        try:
            return self._client.presigned_put_object(
                self._bucket, object_name, expires=expires
            )
        except Exception as e:
            logger.exception("MinIO URL signing failed", extra={"object_name": object_name})
            raise StorageError(object_name, "sign", e) from e

    def presigned_download_url(self, object_name: str, expires: timedelta) -> str:
        try:
            return self._client.presigned_get_object(
                self._bucket, object_name, expires=expires
            )
        except Exception as e:
            logger.exception("MinIO URL signing failed", extra={"object_name": object_name})
            raise StorageError(object_name, "sign", e) from e

    def object_uri(self, object_name: str) -> str:
        return f"s3://{self._bucket}/{object_name}"
