"""Database models for files app."""

from pathlib import Path
from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_STORAGE_KEY_MAX_LENGTH: Final = 512
_MIME_TYPE_MAX_LENGTH: Final = 255
_COLOR_MAX_LENGTH: Final = 32
_PASSWORD_HASH_MAX_LENGTH: Final = 128
_DETECTED_TYPE_MAX_LENGTH: Final = 64

DEFAULT_FOLDER_COLOR: Final = 'blue'


@final
class Folder(models.Model):
    """Folder in a user's drive.

    Folders form a tree through the self-referencing ``parent`` key.
    A folder without parent sits at the user's root; there is no
    separate root row. Deleting a folder cascades to every
    descendant folder and every file inside them.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    # Owner relationship
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='folders',
        db_index=True,
    )

    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        related_name='subfolders',
        null=True,
        blank=True,
        help_text='Containing folder, empty for root-level folders',
    )

    is_locked = models.BooleanField(default=False)

    lock_password = models.CharField(
        max_length=_PASSWORD_HASH_MAX_LENGTH,
        null=True,
        blank=True,
        help_text='Optional folder-specific lock password hash',
    )

    is_important = models.BooleanField(default=False)

    folder_color = models.CharField(
        max_length=_COLOR_MAX_LENGTH,
        default=DEFAULT_FOLDER_COLOR,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at', '-id']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize directory listing queries
            models.Index(
                fields=['user', 'parent'],
                name='folders_user_parent_idx',
            ),
            # Optimize locked / important listings
            models.Index(
                fields=['user', 'is_locked'],
                name='folders_user_locked_idx',
            ),
            models.Index(
                fields=['user', 'is_important'],
                name='folders_user_important_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user_id}:{self.name}'


@final
class Category(models.Model):
    """Label a file can be filed under.

    Categories without an owner are global: every user can read
    and assign them, nobody can change them through the drive.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='categories',
        null=True,
        blank=True,
        help_text='Owner, empty for global categories',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Category'  # type: ignore[mutable-override]
        verbose_name_plural = 'Categories'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['name', 'id']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['user', 'name'],
                name='categories_user_name_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        owner = 'global' if self.user_id is None else self.user_id
        return f'{owner}:{self.name}'

    @property
    def is_global(self) -> bool:
        """Whether the category is shared by all users."""
        return self.user_id is None


@final
class File(models.Model):
    """File stored in S3-compatible storage.

    The record keeps the display name, the placement in the folder
    tree and the storage key of the content. Storage keys follow
    the pattern ``{user_id}/{uuid}-{filename}`` and never change
    when a file is renamed or moved.
    """

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    # File stored in S3-compatible storage
    # upload_to='' means we control the full path
    file = models.FileField(
        upload_to='',
        max_length=_STORAGE_KEY_MAX_LENGTH,
        help_text='Path in storage: {user_id}/{uuid}-{filename}',
    )

    size = models.BigIntegerField(help_text='File size in bytes')

    mimetype = models.CharField(max_length=_MIME_TYPE_MAX_LENGTH)

    is_locked = models.BooleanField(default=False)

    folder = models.ForeignKey(
        Folder,
        on_delete=models.CASCADE,
        related_name='files',
        null=True,
        blank=True,
        help_text='Containing folder, empty for root-level files',
    )

    # Owner relationship
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        related_name='files',
        null=True,
        blank=True,
    )

    # Cached document summary, filled by the summarizer service
    summary = models.TextField(null=True, blank=True)
    key_points = models.TextField(null=True, blank=True)
    detected_type = models.CharField(
        max_length=_DETECTED_TYPE_MAX_LENGTH,
        null=True,
        blank=True,
    )
    summary_confidence = models.FloatField(null=True, blank=True)
    summarized_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at', '-id']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize directory listing queries
            models.Index(
                fields=['user', 'folder'],
                name='files_user_folder_idx',
            ),
            # Optimize recent files queries
            models.Index(
                fields=['user', '-updated_at'],
                name='files_user_recent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user_id}:{self.name}'

    def get_extension(self) -> str:
        """Extract file extension from the display name.

        Example: 'report.PDF' -> 'pdf'

        Returns:
            Extension without dot (lowercase).
        """
        extension = Path(self.name).suffix
        return extension.lstrip('.').lower()

    def get_url(self) -> str:
        """Get download URL for file.

        Returns:
            Full URL to access file via storage backend.
        """
        return self.file.url
