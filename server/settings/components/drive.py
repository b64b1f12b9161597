"""Drive behaviour settings (folders, duplication, archives)."""

from server.settings.components import config

# Color tag given to folders created without one
DRIVE_DEFAULT_FOLDER_COLOR = config(
    'DRIVE_DEFAULT_FOLDER_COLOR',
    default='blue',
)

# Bytes read from storage per step while streaming archives
DRIVE_ARCHIVE_CHUNK_SIZE = config(
    'DRIVE_ARCHIVE_CHUNK_SIZE',
    cast=int,
    default=1024 * 1024,
)

# Default size of the "recent files" listing
DRIVE_RECENT_FILES_LIMIT = config(
    'DRIVE_RECENT_FILES_LIMIT',
    cast=int,
    default=20,
)
