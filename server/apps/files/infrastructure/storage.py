"""Custom storage backend for S3-compatible storage."""

import logging
from collections.abc import Iterator
from typing import Any, final, override

from storages.backends.s3 import S3Storage
from storages.utils import clean_name

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for drive content.

    Extends django-storages S3Storage with:
    - Compensation for failed DB operations (rollback_upload)
    - Server-side copies for duplication
    - Enhanced error logging
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def rollback_upload(self, name: str) -> None:
        """Delete stored content for DB transaction rollback.

        Called when a database transaction fails after content has
        been written to S3. Best effort: a failure is logged and the
        object stays behind until ``purge_orphaned_content`` runs.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    def copy_object(self, source: str, destination: str) -> str:
        """Copy an object to a new key without downloading it.

        Args:
            source: Source storage path.
            destination: Requested destination storage path.

        Returns:
            Storage path actually used for the copy.

        Raises:
            Exception: If the copy fails.
        """
        target = self.get_available_name(destination)
        try:
            logger.info('Copying file: %s -> %s', source, target)
            copy_source = {
                'Bucket': self.bucket_name,
                'Key': self._normalize_name(clean_name(source)),
            }
            self.bucket.copy(
                copy_source,
                self._normalize_name(clean_name(target)),
            )
            logger.info('Copied file: %s -> %s', source, target)
        except Exception:
            logger.exception('Copy failed: %s -> %s', source, target)
            raise
        return target

    def iter_keys(self, prefix: str = '') -> Iterator[str]:
        """Iterate over every object key under a prefix.

        Args:
            prefix: Key prefix to list (empty for the whole bucket).

        Yields:
            Object keys relative to the storage location.
        """
        location_prefix = self._normalize_name(clean_name(prefix))
        strip = len(self.location) + 1 if self.location else 0
        for summary in self.bucket.objects.filter(Prefix=location_prefix):
            yield summary.key[strip:]
