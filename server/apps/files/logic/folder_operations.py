"""Business logic for the folder tree.

Folders are addressed by ID and linked to their parent by
``parent_id`` only. Every walk up the tree goes through
``_iter_ancestors``, which stops on a missing link or a repeated
ID, so corrupted data can never make it loop.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet

from server.apps.accounts.logic.lock_password import require_unlock
from server.apps.files.exceptions import (
    ConflictError,
    InvalidInputError,
    NotLockedError,
)
from server.apps.files.logic.boundary import operation_boundary
from server.apps.files.logic.ownership import get_owned
from server.apps.files.models import File, Folder

logger = logging.getLogger(__name__)

# Columns needed to walk the tree
_TREE_FIELDS: Final = ('id', 'name', 'parent_id', 'user_id')


@dataclass(frozen=True)
class FolderContents:
    """Folder together with what is directly inside it."""

    folder: Folder
    subfolders: list[Folder] = field(default_factory=list)
    files: list[File] = field(default_factory=list)
    parent_chain: list[Folder] = field(default_factory=list)


@dataclass(frozen=True)
class FolderWithPath:
    """Folder with its ancestors, for breadcrumb style listings."""

    folder: Folder
    parent_chain: list[Folder] = field(default_factory=list)


def clean_name(name: str | None, message: str) -> str:
    """Trim a display name and reject empty ones.

    Args:
        name: Name supplied by the caller.
        message: Error message when the name is missing.

    Returns:
        Trimmed name.

    Raises:
        InvalidInputError: If name is missing or blank.
    """
    if name is None or not name.strip():
        raise InvalidInputError(message)
    return name.strip()


def _iter_ancestors(folder_id: int | None) -> Iterator[Folder]:
    """Yield the folder with ``folder_id`` and then each of its parents."""
    seen: set[int] = set()
    current_id = folder_id
    while current_id is not None and current_id not in seen:
        seen.add(current_id)
        folder = Folder.objects.only(*_TREE_FIELDS).filter(
            pk=current_id,
        ).first()
        if folder is None:
            return
        yield folder
        current_id = folder.parent_id


def _ensure_can_move_into(folder: Folder, destination: Folder) -> None:
    """Reject a destination equal to the folder or below it.

    Raises:
        ConflictError: If the move would create a cycle.
    """
    if destination.pk == folder.pk:
        raise ConflictError('Cannot move folder into itself')

    for ancestor in _iter_ancestors(destination.parent_id):
        if ancestor.pk == folder.pk:
            raise ConflictError('Cannot move folder into its own subfolder')


def _build_parent_chain(folder: Folder, user_id: int) -> list[Folder]:
    chain: list[Folder] = []
    for ancestor in _iter_ancestors(folder.parent_id):
        if ancestor.user_id != user_id or ancestor.pk == folder.pk:
            break
        chain.append(ancestor)
    chain.reverse()
    return chain


@operation_boundary
def create_folder(
    user_id: int,
    name: str | None,
    parent_id: int | None = None,
    color: str | None = None,
) -> Folder:
    """Create a folder at the root or inside another folder.

    Sibling folders may share a name.

    Args:
        user_id: Owner of the new folder.
        name: Folder name (trimmed, required).
        parent_id: Containing folder, None for the root.
        color: Color tag, defaults to DRIVE_DEFAULT_FOLDER_COLOR.

    Returns:
        Created Folder instance (unlocked, not important).

    Raises:
        InvalidInputError: If name is empty.
        NotFoundError: If the parent does not exist.
        ForbiddenError: If the parent belongs to another user.
    """
    folder_name = clean_name(name, 'Folder name is required')

    parent = None
    if parent_id is not None:
        parent = get_owned(Folder, parent_id, user_id, 'Parent folder')

    folder = Folder.objects.create(
        name=folder_name,
        user_id=user_id,
        parent=parent,
        folder_color=color or settings.DRIVE_DEFAULT_FOLDER_COLOR,
    )
    logger.info(
        'Folder created: ID=%d, name=%s, user=%d, parent=%s',
        folder.id,
        folder.name,
        user_id,
        parent_id,
    )
    return folder


@operation_boundary
def rename_folder(user_id: int, folder_id: int, new_name: str | None) -> Folder:
    """Rename a folder.

    Raises:
        InvalidInputError: If the new name is empty.
        NotFoundError: If the folder does not exist.
        ForbiddenError: If the folder belongs to another user.
    """
    folder_name = clean_name(new_name, 'Folder name is required')
    folder = get_owned(Folder, folder_id, user_id)

    folder.name = folder_name
    folder.save(update_fields=['name'])
    logger.info('Folder renamed: ID=%d -> %s', folder_id, folder_name)
    return folder


@operation_boundary
def move_folder(
    user_id: int,
    folder_id: int,
    new_parent_id: int | None = None,
) -> Folder:
    """Move a folder under another folder or to the root.

    The destination's ancestor chain is walked up to the root;
    finding the moved folder there means the destination is one of
    its descendants.

    Args:
        user_id: ID of the requesting user.
        folder_id: Folder to move.
        new_parent_id: Destination folder, None for the root.

    Returns:
        Updated Folder instance.

    Raises:
        NotFoundError: If the folder or destination does not exist.
        ForbiddenError: If either belongs to another user.
        ConflictError: If the destination is the folder or a descendant.
    """
    folder = get_owned(Folder, folder_id, user_id)

    destination = None
    if new_parent_id is not None:
        destination = get_owned(
            Folder,
            new_parent_id,
            user_id,
            'Destination folder',
        )
        _ensure_can_move_into(folder, destination)

    folder.parent = destination
    folder.save(update_fields=['parent'])
    logger.info('Folder moved: ID=%d -> parent %s', folder_id, new_parent_id)
    return folder


@operation_boundary
def delete_folder(user_id: int, folder_id: int) -> None:
    """Delete a folder with every descendant folder and file.

    Runs in one transaction. Stored content of the removed files is
    deleted after commit by the post_delete signal handler.

    Raises:
        NotFoundError: If the folder does not exist.
        ForbiddenError: If the folder belongs to another user.
    """
    folder = get_owned(Folder, folder_id, user_id)

    with transaction.atomic():
        _, deleted = folder.delete()

    logger.info(
        'Folder deleted: ID=%d (%d folders, %d files)',
        folder_id,
        deleted.get(Folder._meta.label, 0),  # noqa: SLF001
        deleted.get(File._meta.label, 0),  # noqa: SLF001
    )


@operation_boundary
def lock_folder(user_id: int, folder_id: int) -> Folder:
    """Lock a folder; locking a locked folder is a no-op.

    No password is needed to lock.
    """
    folder = get_owned(Folder, folder_id, user_id)
    if not folder.is_locked:
        folder.is_locked = True
        folder.save(update_fields=['is_locked'])
        logger.info('Folder locked: ID=%d', folder_id)
    return folder


@operation_boundary
def unlock_folder(
    user_id: int,
    folder_id: int,
    password: str | None = None,
    skip_check: bool = False,
) -> Folder:
    """Unlock a folder.

    Args:
        user_id: ID of the requesting user.
        folder_id: Folder to unlock.
        password: Account lock password.
        skip_check: Caller already unlocked the locked area in its
            session, skip password verification.

    Returns:
        Updated Folder instance.

    Raises:
        NotFoundError: If the folder does not exist.
        ForbiddenError: If the folder belongs to another user.
        NotLockedError: If the folder is not locked.
        InvalidInputError: If the password is missing or not set up.
        AuthenticationFailedError: If the password does not match.
    """
    folder = get_owned(Folder, folder_id, user_id)
    if not folder.is_locked:
        raise NotLockedError('Folder')

    require_unlock(user_id, password, skip_check)

    folder.is_locked = False
    folder.save(update_fields=['is_locked'])
    logger.info('Folder unlocked: ID=%d', folder_id)
    return folder


@operation_boundary
def toggle_important(user_id: int, folder_id: int) -> bool:
    """Flip the important flag of a folder.

    Returns:
        New value of the flag.
    """
    folder = get_owned(Folder, folder_id, user_id)
    folder.is_important = not folder.is_important
    folder.save(update_fields=['is_important'])
    logger.info(
        'Folder important flag: ID=%d -> %s',
        folder_id,
        folder.is_important,
    )
    return folder.is_important


@operation_boundary
def list_folders(user_id: int, parent_id: int | None = None) -> QuerySet[Folder]:
    """List direct children of a folder (or root folders), newest first.

    Raises:
        NotFoundError: If the parent does not exist.
        ForbiddenError: If the parent belongs to another user.
    """
    logger.debug('Listing folders: user=%d, parent=%s', user_id, parent_id)
    if parent_id is not None:
        get_owned(Folder, parent_id, user_id, 'Parent folder')
    return Folder.objects.filter(user_id=user_id, parent_id=parent_id)


@operation_boundary
def list_root_tree(user_id: int) -> QuerySet[Folder]:
    """List root folders with their subfolders and files prefetched."""
    return Folder.objects.filter(
        user_id=user_id,
        parent__isnull=True,
    ).prefetch_related('files', 'subfolders', 'subfolders__files')


@operation_boundary
def get_folder(user_id: int, folder_id: int) -> Folder:
    """Get a single folder owned by the user, without its contents."""
    return get_owned(Folder, folder_id, user_id)


@operation_boundary
def get_folder_with_contents(
    user_id: int,
    folder_id: int,
    password: str | None = None,
    skip_check: bool = False,
) -> FolderContents:
    """Open a folder.

    A locked folder is only opened after the unlock check; opening
    does not unlock it. Locked subfolders are left out of the
    listing even for their owner.

    Raises:
        NotFoundError: If the folder does not exist.
        ForbiddenError: If the folder belongs to another user.
        InvalidInputError: If a password is required but missing.
        AuthenticationFailedError: If the password does not match.
    """
    folder = get_owned(Folder, folder_id, user_id)

    if folder.is_locked:
        require_unlock(
            user_id,
            password,
            skip_check,
            own_hash=folder.lock_password,
        )

    return FolderContents(
        folder=folder,
        subfolders=list(folder.subfolders.filter(is_locked=False)),
        files=list(folder.files.filter(user_id=user_id)),
        parent_chain=_build_parent_chain(folder, user_id),
    )


@operation_boundary
def get_parent_chain(user_id: int, folder_id: int) -> list[Folder]:
    """Ancestors of a folder ordered from the root to its parent.

    The folder itself is never included. A missing folder, a
    foreign folder or a foreign ancestor ends the chain silently.

    Returns:
        List of ancestor folders (possibly empty).
    """
    folder = Folder.objects.only(*_TREE_FIELDS).filter(pk=folder_id).first()
    if folder is None or folder.user_id != user_id:
        return []
    return _build_parent_chain(folder, user_id)


def _with_paths(
    user_id: int,
    folders: QuerySet[Folder],
) -> list[FolderWithPath]:
    return [
        FolderWithPath(
            folder=folder,
            parent_chain=_build_parent_chain(folder, user_id),
        )
        for folder in folders
    ]


@operation_boundary
def list_locked_folders(user_id: int) -> list[FolderWithPath]:
    """All locked folders of the user with their parent chains."""
    return _with_paths(
        user_id,
        Folder.objects.filter(user_id=user_id, is_locked=True),
    )


@operation_boundary
def list_important_folders(user_id: int) -> list[FolderWithPath]:
    """All important folders of the user with their parent chains."""
    return _with_paths(
        user_id,
        Folder.objects.filter(user_id=user_id, is_important=True),
    )
