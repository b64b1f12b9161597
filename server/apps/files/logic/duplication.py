"""Business logic for duplicating files and folder subtrees.

A duplication either completes or leaves nothing behind: all
records are created in one transaction, and every object copied in
storage is deleted again if anything fails.
"""

import enum
import logging
from collections import defaultdict

from django.db import transaction

from server.apps.files.exceptions import InvalidInputError, NotFoundError
from server.apps.files.infrastructure.metadata import (
    build_storage_path,
    copy_file_name,
    copy_folder_name,
)
from server.apps.files.infrastructure.storage import FileStorage
from server.apps.files.logic.boundary import operation_boundary
from server.apps.files.logic.file_operations import (
    get_storage,
    resolve_destination,
)
from server.apps.files.logic.ownership import get_owned
from server.apps.files.models import File, Folder

logger = logging.getLogger(__name__)


class ItemKind(enum.StrEnum):
    """Kinds of drive items."""

    FILE = 'file'
    FOLDER = 'folder'


def parse_item_kind(kind: str | ItemKind | None) -> ItemKind:
    """Convert caller input into an ItemKind.

    Raises:
        InvalidInputError: If kind is not 'file' or 'folder'.
    """
    try:
        return ItemKind(kind)
    except ValueError as error:
        raise InvalidInputError("Type must be 'file' or 'folder'") from error


class _ContentCopier:
    """Copies stored content and remembers what it wrote."""

    def __init__(self, storage: FileStorage) -> None:
        self._storage = storage
        self.copied: list[str] = []

    def copy(self, source: File, new_name: str) -> str:
        source_name = source.file.name
        if not self._storage.exists(source_name):
            logger.warning(
                'Cannot duplicate, content missing: ID=%d, path=%s',
                source.id,
                source_name,
            )
            raise NotFoundError('File content', source.id)

        target = self._storage.copy_object(
            source_name,
            build_storage_path(source.user_id, new_name),
        )
        self.copied.append(target)
        return target

    def rollback(self) -> None:
        for storage_name in self.copied:
            self._storage.rollback_upload(storage_name)
        self.copied.clear()


def _copy_file(
    source: File,
    destination: Folder | None,
    copier: _ContentCopier,
) -> File:
    new_name = copy_file_name(source.name)
    return File.objects.create(
        name=new_name,
        file=copier.copy(source, new_name),
        size=source.size,
        mimetype=source.mimetype,
        is_locked=False,
        folder=destination,
        user_id=source.user_id,
        category_id=source.category_id,
        summary=source.summary,
        key_points=source.key_points,
        detected_type=source.detected_type,
        summary_confidence=source.summary_confidence,
        summarized_at=source.summarized_at,
    )


def _copy_folder_row(source: Folder, destination: Folder | None) -> Folder:
    return Folder.objects.create(
        name=copy_folder_name(source.name),
        user_id=source.user_id,
        parent=destination,
        folder_color=source.folder_color,
        is_locked=False,
        is_important=False,
    )


def _snapshot_subfolders(root: Folder) -> dict[int, list[Folder]]:
    """Map each folder ID of the subtree to its child folders.

    Taken level by level before anything is written, so copies
    placed inside the source subtree are never copied again.
    """
    children: dict[int, list[Folder]] = defaultdict(list)
    seen = {root.pk}
    frontier = [root.pk]
    while frontier:
        level = Folder.objects.filter(
            parent_id__in=frontier,
            user_id=root.user_id,
        ).order_by('created_at', 'id')
        frontier = []
        for folder in level:
            if folder.pk in seen:
                continue
            seen.add(folder.pk)
            children[folder.parent_id].append(folder)
            frontier.append(folder.pk)
    return children


def _copy_subtree(
    source: Folder,
    destination: Folder | None,
    copier: _ContentCopier,
) -> Folder:
    subfolders = _snapshot_subfolders(source)
    root_copy = _copy_folder_row(source, destination)

    pending = [(source, root_copy)]
    while pending:
        original, duplicate = pending.pop()
        files = File.objects.filter(
            folder_id=original.pk,
            user_id=original.user_id,
        ).order_by('created_at', 'id')
        for file_instance in files.iterator():
            _copy_file(file_instance, duplicate, copier)

        for child in subfolders.get(original.pk, []):
            pending.append((child, _copy_folder_row(child, duplicate)))

    return root_copy


@operation_boundary
def duplicate_file(
    user_id: int,
    file_id: int,
    destination_folder_id: int | None = None,
) -> File:
    """Duplicate a file into a folder (or the root).

    The copy is named ``'<stem> (Copy)<ext>'``, is unlocked and
    gets its own copy of the stored content.

    Raises:
        NotFoundError: If the file, its content or the destination is missing.
        ForbiddenError: If the file or destination belongs to another user.
    """
    source = get_owned(File, file_id, user_id)
    destination = resolve_destination(user_id, destination_folder_id)

    copier = _ContentCopier(get_storage())
    try:
        with transaction.atomic():
            duplicate = _copy_file(source, destination, copier)
    except Exception:
        logger.exception('File duplication failed, rolling back: ID=%d', file_id)
        copier.rollback()
        raise

    logger.info('File duplicated: ID=%d -> ID=%d', file_id, duplicate.id)
    return duplicate


@operation_boundary
def duplicate_folder(
    user_id: int,
    folder_id: int,
    destination_folder_id: int | None = None,
) -> Folder:
    """Duplicate a folder with all of its files and subfolders.

    Every copied folder is named ``'<name> (Copy)'`` and every copied
    file ``'<stem> (Copy)<ext>'``; the tree shape is preserved. Copies
    are unlocked and not important. The destination may lie inside
    the source subtree.

    Args:
        user_id: ID of the requesting user.
        folder_id: Root of the subtree to duplicate.
        destination_folder_id: Folder receiving the copy, None for root.

    Returns:
        Root of the new subtree.

    Raises:
        NotFoundError: If the folder, destination or any content is missing.
        ForbiddenError: If the folder or destination belongs to another user.
    """
    source = get_owned(Folder, folder_id, user_id)
    destination = resolve_destination(user_id, destination_folder_id)

    copier = _ContentCopier(get_storage())
    try:
        with transaction.atomic():
            duplicate = _copy_subtree(source, destination, copier)
    except Exception:
        logger.exception(
            'Folder duplication failed, rolling back %d copied files: ID=%d',
            len(copier.copied),
            folder_id,
        )
        copier.rollback()
        raise

    logger.info(
        'Folder duplicated: ID=%d -> ID=%d (%d files)',
        folder_id,
        duplicate.id,
        len(copier.copied),
    )
    return duplicate


@operation_boundary
def duplicate_item(
    user_id: int,
    item_id: int,
    kind: str | ItemKind,
    destination_folder_id: int | None = None,
) -> File | Folder:
    """Duplicate a file or a folder subtree.

    Raises:
        InvalidInputError: If kind is not 'file' or 'folder'.
    """
    if parse_item_kind(kind) is ItemKind.FILE:
        return duplicate_file(user_id, item_id, destination_folder_id)
    return duplicate_folder(user_id, item_id, destination_folder_id)
