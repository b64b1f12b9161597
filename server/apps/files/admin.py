"""Django admin configuration for files app."""


from django.contrib import admin
from django.db.models import Count, QuerySet
from django.http import HttpRequest
from django.utils.html import format_html

from server.apps.files.models import Category, File, Folder


def _format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


@admin.register(Folder)
class FolderAdmin(admin.ModelAdmin):
    """Admin interface for Folder model."""

    list_display = [
        'name',
        'user',
        'parent',
        'color_display',
        'is_locked',
        'is_important',
        'created_at',
    ]

    list_filter = [
        'is_locked',
        'is_important',
        'folder_color',
        'user',
    ]

    search_fields = [
        'name',
    ]

    readonly_fields = [
        'lock_password',
        'created_at',
    ]

    raw_id_fields = ['parent']

    fieldsets = (
        ('Folder Information', {
            'fields': ('name', 'user', 'parent', 'folder_color'),
        }),
        ('Flags', {
            'fields': ('is_locked', 'lock_password', 'is_important'),
        }),
        ('Timestamps', {
            'fields': ('created_at',),
        }),
    )

    def color_display(self, obj: Folder) -> str:
        """Display color swatch with its name.

        Args:
            obj: Folder instance.

        Returns:
            HTML formatted color swatch and name.
        """
        return format_html(
            '<span style="background-color: {color}; '
            'padding: 2px 10px; border: 1px solid #ccc;">'
            '&nbsp;</span> {color}',
            color=obj.folder_color,
        )
    color_display.short_description = 'Color'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Folder]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'parent')


@admin.register(File)
class FileAdmin(admin.ModelAdmin):
    """Admin interface for File model."""

    list_display = [
        'name',
        'user',
        'folder',
        'category',
        'size_display',
        'mimetype',
        'is_locked',
        'created_at',
    ]

    list_filter = [
        'mimetype',
        'is_locked',
        'created_at',
        'user',
    ]

    search_fields = [
        'name',
        'file',  # Searches the storage key
    ]

    readonly_fields = [
        'file',
        'size',
        'mimetype',
        'created_at',
        'updated_at',
    ]

    raw_id_fields = ['folder']

    fieldsets = (
        ('File Information', {
            'fields': ('name', 'file', 'user', 'folder', 'category'),
        }),
        ('Metadata', {
            'fields': ('size', 'mimetype', 'is_locked'),
        }),
        ('Summary', {
            'classes': ('collapse',),
            'fields': (
                'summary',
                'key_points',
                'detected_type',
                'summary_confidence',
                'summarized_at',
            ),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format."""
        return _format_bytes(obj.size)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related(
            'user',
            'folder',
            'category',
        )


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for Category model."""

    list_display = [
        'name',
        'user',
        'is_global_display',
        'file_count',
        'created_at',
    ]

    list_filter = [
        'user',
        'created_at',
    ]

    search_fields = [
        'name',
    ]

    readonly_fields = ['created_at']

    def is_global_display(self, obj: Category) -> bool:
        return obj.is_global
    is_global_display.boolean = True  # type: ignore[attr-defined]
    is_global_display.short_description = 'Global'  # type: ignore[attr-defined]

    def file_count(self, obj: Category) -> int:
        """Count of files filed under this category.

        Args:
            obj: Category instance (annotated with ``files_total``).

        Returns:
            Number of files in the category.
        """
        return obj.files_total  # type: ignore[attr-defined]
    file_count.short_description = 'Files'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Category]:
        """Optimize queryset with select_related and a file count."""
        return super().get_queryset(request).select_related(
            'user',
        ).annotate(files_total=Count('files'))
