"""Business logic for file operations."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO

from django.conf import settings
from django.core.files.base import File as DjangoFile
from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models import Q, QuerySet

from server.apps.files.exceptions import NotFoundError, NotLockedError
from server.apps.files.infrastructure.metadata import (
    build_storage_path,
    detect_mime_type,
    get_content_size,
    validate_storage_path,
)
from server.apps.files.logic.boundary import operation_boundary
from server.apps.files.logic.folder_operations import clean_name
from server.apps.files.logic.ownership import (
    authorize_category_use,
    get_owned,
)
from server.apps.files.models import Category, File, Folder

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadMeta:
    """Description of content already written to storage."""

    name: str
    location: str
    size: int
    mime_type: str


def get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def resolve_destination(user_id: int, folder_id: int | None) -> Folder | None:
    """Load a destination folder, None standing for the root.

    Raises:
        NotFoundError: If the folder does not exist.
        ForbiddenError: If the folder belongs to another user.
    """
    if folder_id is None:
        return None
    return get_owned(Folder, folder_id, user_id, 'Destination folder')


@operation_boundary
def record_upload(
    user_id: int,
    meta: UploadMeta,
    folder_id: int | None = None,
    locked: bool = False,
) -> File:
    """Create the record for content already written to storage.

    Args:
        user_id: Owner of the file.
        meta: Name, storage location, size and MIME type of the upload.
        folder_id: Destination folder, None for the root.
        locked: Create the file locked.

    Returns:
        Created File instance.

    Raises:
        InvalidInputError: If name is empty or location is not the user's.
        NotFoundError: If the folder does not exist.
        ForbiddenError: If the folder belongs to another user.
    """
    file_name = clean_name(meta.name, 'File name is required')
    validate_storage_path(user_id, meta.location)
    folder = resolve_destination(user_id, folder_id)

    file_instance = File.objects.create(
        name=file_name,
        file=meta.location,
        size=meta.size,
        mimetype=meta.mime_type or detect_mime_type(file_name),
        folder=folder,
        user_id=user_id,
        is_locked=locked,
    )
    logger.info(
        'File record created: ID=%d, name=%s, user=%d, folder=%s',
        file_instance.id,
        file_instance.name,
        user_id,
        folder_id,
    )
    return file_instance


@operation_boundary
def upload_file(
    user_id: int,
    name: str,
    content: BinaryIO | DjangoFile,
    folder_id: int | None = None,
    locked: bool = False,
) -> File:
    """Upload content to storage and create its record.

    Transaction safety: Upload to storage first, then create DB record.
    If the record cannot be created, the uploaded content is deleted
    from storage (rollback).

    Args:
        user_id: Owner of the file.
        name: Display name of the file.
        content: File-like object to upload.
        folder_id: Destination folder, None for the root.
        locked: Create the file locked.

    Returns:
        Created File instance.
    """
    file_name = clean_name(name, 'File name is required')
    # Check the destination before anything is written
    resolve_destination(user_id, folder_id)

    file_size = get_content_size(content)
    storage = get_storage()
    saved_name = storage.save(build_storage_path(user_id, file_name), content)

    meta = UploadMeta(
        name=file_name,
        location=saved_name,
        size=file_size,
        mime_type=detect_mime_type(file_name),
    )
    try:
        with transaction.atomic():
            return record_upload(user_id, meta, folder_id, locked)
    except Exception:
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise


@operation_boundary
def get_file(user_id: int, file_id: int) -> File:
    """Get a single file record owned by the user."""
    return get_owned(File, file_id, user_id)


@operation_boundary
def open_file_content(user_id: int, file_id: int) -> tuple[File, DjangoFile]:
    """Open the stored content of a file for download.

    Returns:
        The File record and an open binary file from storage.

    Raises:
        NotFoundError: If the record or its stored content is missing.
        ForbiddenError: If the file belongs to another user.
    """
    file_instance = get_owned(File, file_id, user_id)
    storage = get_storage()
    if not storage.exists(file_instance.file.name):
        logger.warning(
            'File content missing in storage: ID=%d, path=%s',
            file_id,
            file_instance.file.name,
        )
        raise NotFoundError('File content', file_id)
    return file_instance, storage.open(file_instance.file.name, 'rb')


@operation_boundary
def move_file(user_id: int, file_id: int, folder_id: int | None = None) -> File:
    """Move a file to another folder or to the root.

    Only the record changes, the storage key stays the same.

    Raises:
        NotFoundError: If the file or destination does not exist.
        ForbiddenError: If either belongs to another user.
    """
    file_instance = get_owned(File, file_id, user_id)
    folder = resolve_destination(user_id, folder_id)

    file_instance.folder = folder
    file_instance.save(update_fields=['folder', 'updated_at'])
    logger.info('File moved: ID=%d -> folder %s', file_id, folder_id)
    return file_instance


@operation_boundary
def delete_file(user_id: int, file_id: int) -> None:
    """Delete file record and its stored content.

    Transaction safety: Delete DB record first. Storage deletion is
    handled by the post_delete signal handler once the transaction
    commits; a storage failure there is logged, never raised.

    Raises:
        NotFoundError: If the file does not exist.
        ForbiddenError: If the file belongs to another user.
    """
    file_instance = get_owned(File, file_id, user_id)
    logger.info(
        'Deleting file: ID=%d, path=%s',
        file_id,
        file_instance.file.name,
    )

    with transaction.atomic():
        file_instance.delete()
    logger.info('File record deleted from database: ID=%d', file_id)


@operation_boundary
def unlock_file(user_id: int, file_id: int) -> File:
    """Clear the locked flag of a file.

    Raises:
        NotFoundError: If the file does not exist.
        ForbiddenError: If the file belongs to another user.
        NotLockedError: If the file is not locked.
    """
    file_instance = get_owned(File, file_id, user_id)
    if not file_instance.is_locked:
        raise NotLockedError('File')

    file_instance.is_locked = False
    file_instance.save(update_fields=['is_locked', 'updated_at'])
    logger.info('File unlocked: ID=%d', file_id)
    return file_instance


@operation_boundary
def assign_category(user_id: int, file_id: int, category_id: int) -> File:
    """File a file under a category.

    The category must be global or owned by the user.

    Raises:
        NotFoundError: If the file or category does not exist.
        ForbiddenError: If the file or category belongs to another user.
    """
    file_instance = get_owned(File, file_id, user_id)

    try:
        category = Category.objects.get(pk=category_id)
    except Category.DoesNotExist as error:
        raise NotFoundError('Category', category_id) from error
    authorize_category_use(category, user_id)

    file_instance.category = category
    file_instance.save(update_fields=['category', 'updated_at'])
    logger.info(
        'Category assigned: file %d -> category %d',
        file_id,
        category_id,
    )
    return file_instance


@operation_boundary
def list_files(user_id: int, folder_id: int | None = None) -> QuerySet[File]:
    """List files directly inside a folder (or root files), newest first.

    Raises:
        NotFoundError: If the folder does not exist.
        ForbiddenError: If the folder belongs to another user.
    """
    logger.debug('Listing files: user=%d, folder=%s', user_id, folder_id)
    if folder_id is not None:
        get_owned(Folder, folder_id, user_id)
    return File.objects.filter(user_id=user_id, folder_id=folder_id)


@operation_boundary
def list_locked_files(user_id: int) -> QuerySet[File]:
    """List all locked files of the user, newest first."""
    return File.objects.filter(user_id=user_id, is_locked=True)


@operation_boundary
def list_files_by_category(
    user_id: int,
    name: str | None = None,
) -> QuerySet[File]:
    """List files filed under a category name.

    Categories are matched among the global ones and the user's own.
    Without a name, root files are listed instead.
    """
    if name is None or not name.strip():
        return list_files(user_id)

    return File.objects.filter(
        Q(category__user_id=user_id) | Q(category__user__isnull=True),
        user_id=user_id,
        category__name=name.strip(),
    )


@operation_boundary
def list_recent_files(user_id: int, limit: int | None = None) -> QuerySet[File]:
    """List the most recently updated files across all folders."""
    count = limit or settings.DRIVE_RECENT_FILES_LIMIT
    return File.objects.filter(user_id=user_id).order_by(
        '-updated_at',
        '-id',
    )[:count]
