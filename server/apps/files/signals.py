"""Signal handlers for files app."""

import functools
import logging

from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models.signals import post_delete
from django.dispatch import receiver

from server.apps.files.models import File

logger = logging.getLogger(__name__)


def delete_stored_content(storage_name: str) -> None:
    """Delete stored content, logging instead of raising on failure.

    Args:
        storage_name: Storage path of the content.
    """
    try:
        if default_storage.exists(storage_name):
            default_storage.delete(storage_name)
            logger.info('File deleted from storage: %s', storage_name)
        else:
            logger.warning(
                'File not found in storage (already deleted?): %s',
                storage_name,
            )
    except Exception:
        # DB delete already committed, purge_orphaned_content cleans up
        logger.exception(
            'Failed to delete file from storage (orphaned): %s',
            storage_name,
        )


@receiver(post_delete, sender=File)
def delete_file_from_storage(
    sender: type[File],
    instance: File,
    **kwargs: object,
) -> None:
    """Delete file from storage when File record is deleted.

    Runs for direct deletes as well as for files removed by a
    cascading folder delete. Content is removed only after the
    surrounding transaction commits, so a rolled back delete keeps
    its content.

    Args:
        sender: The File model class.
        instance: The File instance being deleted.
        **kwargs: Additional signal arguments.
    """
    if not instance.file:
        return

    storage_name = instance.file.name
    logger.info(
        'Scheduling storage delete after DB delete: %s',
        storage_name,
    )
    transaction.on_commit(
        functools.partial(delete_stored_content, storage_name),
    )
