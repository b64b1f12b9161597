"""Tests for the streaming zip builder."""

import io
import zipfile

from server.apps.files.infrastructure.archive import ZipStream


def test_unique_name():
    """Test repeated names get numbered suffixes."""
    archive = ZipStream()

    assert archive.unique_name('Docs/a.txt') == 'Docs/a.txt'
    assert archive.unique_name('Docs/a.txt') == 'Docs/a (2).txt'
    assert archive.unique_name('Docs/a.txt') == 'Docs/a (3).txt'
    assert archive.unique_name('Docs/') == 'Docs/'
    assert archive.unique_name('Docs/') == 'Docs (2)/'


def test_stream_produces_valid_zip():
    """Test the concatenated chunks form a readable archive."""
    archive = ZipStream(chunk_size=4)
    chunks = [archive.add_directory('Docs/')]
    chunks.extend(archive.add_file('Docs/a.txt', io.BytesIO(b'hello world')))
    chunks.append(archive.close())

    result = zipfile.ZipFile(io.BytesIO(b''.join(chunks)))

    assert result.namelist() == ['Docs/', 'Docs/a.txt']
    assert result.read('Docs/a.txt') == b'hello world'
    assert result.testzip() is None
