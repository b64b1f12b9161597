"""Metadata helpers for stored files."""

import mimetypes
import uuid
from pathlib import Path
from typing import BinaryIO, Final

from server.apps.files.exceptions import InvalidInputError

_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'
_COPY_SUFFIX: Final = ' (Copy)'


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from the filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_MIME_TYPE
    return mime_type


def get_content_size(file_obj: BinaryIO) -> int:
    """Get size of a file-like object.

    Uses ``size`` when the object has it (Django files), otherwise
    seeks to the end and back.

    Args:
        file_obj: File-like object.

    Returns:
        Size in bytes.
    """
    size = getattr(file_obj, 'size', None)
    if size is not None:
        return size
    file_obj.seek(0, 2)
    file_size = file_obj.tell()
    file_obj.seek(0)
    return file_size


def build_storage_path(user_id: int, filename: str) -> str:
    """Build a fresh storage key for a user's file.

    Keys never depend on the folder tree, so moving or renaming a
    file never touches storage.

    Example: (7, 'report.pdf') -> '7/3f2b...-report.pdf'

    Args:
        user_id: Owner's user ID.
        filename: Display name of the file.

    Returns:
        Storage path prefixed with the user ID.
    """
    safe_name = Path(filename).name.replace(' ', '_') or 'file'
    return f'{user_id}/{uuid.uuid4().hex}-{safe_name}'


def validate_storage_path(user_id: int, storage_path: str) -> None:
    """Validate storage path follows user isolation rules.

    Ensures the storage path starts with the user's ID to maintain
    multi-user isolation.

    Args:
        user_id: Owner's user ID.
        storage_path: Proposed storage path.

    Raises:
        InvalidInputError: If path doesn't start with user_id or is invalid.
    """
    if not storage_path:
        raise InvalidInputError('Storage path cannot be empty')

    path_parts = Path(storage_path).parts
    first_component = path_parts[0]

    try:
        path_user_id = int(first_component)
    except ValueError as error:
        raise InvalidInputError(
            'Storage path must start with user ID',
        ) from error

    if path_user_id != user_id:
        raise InvalidInputError(
            f'Storage path user ID ({path_user_id}) does not match '
            f'owner ({user_id})',
        )


def copy_file_name(filename: str) -> str:
    """Name given to a duplicated file.

    Example: 'report.pdf' -> 'report (Copy).pdf'
    """
    path = Path(filename)
    return f'{path.stem}{_COPY_SUFFIX}{path.suffix}'


def copy_folder_name(name: str) -> str:
    """Name given to a duplicated folder."""
    return f'{name}{_COPY_SUFFIX}'
