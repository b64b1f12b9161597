"""Management command to delete stored content no file refers to."""

import itertools
import logging
from collections.abc import Iterator
from typing import Any, Final

from django.core.management.base import BaseCommand

from server.apps.files.logic.file_operations import get_storage
from server.apps.files.models import File

_DEFAULT_BATCH_SIZE: Final = 1000
_LOOKUP_CHUNK: Final = 500

logger = logging.getLogger(__name__)


def _iter_orphans(keys: Iterator[str]) -> Iterator[str]:
    """Yield keys without a matching File record, checked in chunks."""
    while True:
        chunk = list(itertools.islice(keys, _LOOKUP_CHUNK))
        if not chunk:
            return
        referenced = set(
            File.objects.filter(file__in=chunk).values_list('file', flat=True),
        )
        yield from (key for key in chunk if key not in referenced)


class Command(BaseCommand):
    """Delete stored objects that are not referenced by any file."""

    help = 'Delete stored content left behind by failed uploads or deletes'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=_DEFAULT_BATCH_SIZE,
            help=f'Max objects to process (default: {_DEFAULT_BATCH_SIZE})',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the purge command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']

        storage = get_storage()
        self.stdout.write('Looking for stored content without a file record')

        orphans = itertools.islice(
            _iter_orphans(storage.iter_keys()),
            batch_size,
        )

        count = 0
        failed = 0

        for key in orphans:
            if dry_run:
                self.stdout.write(f'Would delete: {key}')
                count += 1
                continue

            try:
                storage.delete(key)
            except Exception as exc:
                self.stderr.write(f'Failed to delete {key}: {exc}')
                logger.exception('Failed to purge orphaned content: %s', key)
                failed += 1
                continue

            count += 1
            logger.info('Purged orphaned content: %s', key)

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would purge {count} orphaned objects'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Purged {count} orphaned objects, {failed} failed',
                ),
            )
