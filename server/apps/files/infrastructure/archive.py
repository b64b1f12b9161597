"""Streaming zip archive builder."""

import io
import posixpath
import zipfile
from collections.abc import Iterator
from typing import BinaryIO, Final, final, override

_DEFAULT_CHUNK_SIZE: Final = 1024 * 1024


class _ChunkSink(io.RawIOBase):
    """Write-only, non-seekable buffer drained after every step.

    Being non-seekable makes zipfile write data descriptors instead
    of seeking back, so written bytes can be handed out at once.
    """

    def __init__(self) -> None:
        super().__init__()
        self._chunks: list[bytes] = []

    @override
    def writable(self) -> bool:
        return True

    @override
    def write(self, data: bytes) -> int:  # type: ignore[override]
        self._chunks.append(bytes(data))
        return len(data)

    def drain(self) -> bytes:
        data = b''.join(self._chunks)
        self._chunks.clear()
        return data


@final
class ZipStream:
    """Zip archive produced chunk by chunk.

    Entries are compressed with DEFLATE and ZIP64 is enabled for
    large files. Entry names that were already used get a
    ``' (n)'`` suffix.
    """

    def __init__(self, chunk_size: int = _DEFAULT_CHUNK_SIZE) -> None:
        """Initialize ZipStream.

        Args:
            chunk_size: Bytes read from a source per step.
        """
        self._chunk_size = chunk_size
        self._sink = _ChunkSink()
        self._zip = zipfile.ZipFile(
            self._sink,
            mode='w',
            compression=zipfile.ZIP_DEFLATED,
            allowZip64=True,
        )
        self._names: set[str] = set()

    def unique_name(self, arcname: str) -> str:
        """Reserve an entry name, suffixing it when already taken.

        Example: 'Docs/a.txt' taken -> 'Docs/a (2).txt'
        """
        is_directory = arcname.endswith('/')
        base = arcname.rstrip('/')
        root, extension = ('', '') if is_directory else posixpath.splitext(base)
        if is_directory:
            root = base

        candidate = arcname
        counter = 2
        while candidate in self._names:
            candidate = f'{root} ({counter}){extension}'
            if is_directory:
                candidate += '/'
            counter += 1

        self._names.add(candidate)
        return candidate

    def add_directory(self, arcname: str) -> bytes:
        """Add an empty directory entry.

        Args:
            arcname: Directory path inside the archive, ending with '/'.

        Returns:
            Archive bytes produced by the entry.
        """
        self._zip.mkdir(arcname)
        return self._sink.drain()

    def add_file(self, arcname: str, source: BinaryIO) -> Iterator[bytes]:
        """Copy a readable source into a new archive entry.

        Args:
            arcname: File path inside the archive.
            source: Binary file-like object to read from.

        Yields:
            Archive bytes as they are produced.
        """
        entry = zipfile.ZipInfo(arcname)
        entry.compress_type = zipfile.ZIP_DEFLATED
        with self._zip.open(entry, mode='w', force_zip64=True) as target:
            for chunk in iter(lambda: source.read(self._chunk_size), b''):
                target.write(chunk)
                data = self._sink.drain()
                if data:
                    yield data
        yield self._sink.drain()

    def close(self) -> bytes:
        """Finish the archive.

        Returns:
            Remaining bytes including the central directory.
        """
        self._zip.close()
        return self._sink.drain()
