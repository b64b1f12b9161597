"""Business logic for exporting folders as a zip archive."""

import logging
from collections.abc import Iterator, Sequence

from django.conf import settings
from django.utils import timezone

from server.apps.files.exceptions import InternalError, InvalidInputError
from server.apps.files.infrastructure.archive import ZipStream
from server.apps.files.infrastructure.storage import FileStorage
from server.apps.files.logic.boundary import operation_boundary
from server.apps.files.logic.file_operations import get_storage
from server.apps.files.logic.ownership import get_owned
from server.apps.files.models import File, Folder

logger = logging.getLogger(__name__)


def build_archive_name() -> str:
    """Download name for an archive, e.g. 'drive-folders-20240101-120000.zip'."""
    return f'drive-folders-{timezone.now():%Y%m%d-%H%M%S}.zip'


def _entry_name(name: str) -> str:
    # Slashes would create unintended directories
    return name.replace('/', '_').replace('\\', '_') or '_'


def _add_file(
    archive: ZipStream,
    storage: FileStorage,
    file_instance: File,
    directory: str,
) -> Iterator[bytes]:
    storage_name = file_instance.file.name
    if not storage_name or not storage.exists(storage_name):
        logger.warning(
            'Skipping file without content in archive: ID=%d, path=%s',
            file_instance.id,
            storage_name,
        )
        return

    arcname = archive.unique_name(
        f'{directory}{_entry_name(file_instance.name)}',
    )
    with storage.open(storage_name, 'rb') as source:
        yield from archive.add_file(arcname, source)


def _add_folder(
    archive: ZipStream,
    storage: FileStorage,
    root: Folder,
) -> Iterator[bytes]:
    """Write a folder subtree, one directory entry per folder."""
    seen: set[int] = set()
    pending = [(root, '')]
    while pending:
        folder, prefix = pending.pop()
        if folder.pk in seen:
            continue
        seen.add(folder.pk)

        directory = archive.unique_name(f'{prefix}{_entry_name(folder.name)}/')
        yield archive.add_directory(directory)

        files = File.objects.filter(
            folder_id=folder.pk,
            user_id=root.user_id,
        ).order_by('created_at', 'id')
        for file_instance in files.iterator():
            yield from _add_file(archive, storage, file_instance, directory)

        children = Folder.objects.filter(
            parent_id=folder.pk,
            user_id=root.user_id,
        ).order_by('-created_at', '-id')
        pending.extend((child, directory) for child in children)


def _stream_archive(
    folders: list[Folder],
    storage: FileStorage,
    chunk_size: int,
) -> Iterator[bytes]:
    archive = ZipStream(chunk_size)
    try:
        for folder in folders:
            for chunk in _add_folder(archive, storage, folder):
                if chunk:
                    yield chunk
        yield archive.close()
    except Exception as error:
        logger.exception(
            'Archive export failed: folders=%s',
            [folder.pk for folder in folders],
        )
        raise InternalError() from error

    logger.info('Archive exported: folders=%s', [folder.pk for folder in folders])


@operation_boundary
def export_folders_archive(
    user_id: int,
    folder_ids: Sequence[int],
) -> Iterator[bytes]:
    """Export folders with all their contents as one zip archive.

    Every folder is checked before any byte is produced, so an
    error is raised here and not halfway through the download.
    Each folder becomes a top-level directory of the archive.
    Files whose stored content is missing are skipped. Entry names
    that collide get a ``' (n)'`` suffix.

    Args:
        user_id: ID of the requesting user.
        folder_ids: Folders to export.

    Returns:
        Iterator over the archive bytes.

    Raises:
        InvalidInputError: If no folder IDs were given.
        NotFoundError: If any folder does not exist.
        ForbiddenError: If any folder belongs to another user.
    """
    if not folder_ids:
        raise InvalidInputError('Folder IDs are required')

    # Repeated IDs are exported once, in first-seen order
    unique_ids = list(dict.fromkeys(folder_ids))
    folders = [get_owned(Folder, folder_id, user_id) for folder_id in unique_ids]
    logger.info('Exporting archive: user=%d, folders=%s', user_id, unique_ids)
    return _stream_archive(
        folders,
        get_storage(),
        settings.DRIVE_ARCHIVE_CHUNK_SIZE,
    )
