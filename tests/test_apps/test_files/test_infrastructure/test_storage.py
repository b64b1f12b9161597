"""Tests for the S3 storage backend."""

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage


@pytest.fixture
def storage(mock_s3):
    """Default storage backed by the mocked bucket."""
    return default_storage


def test_copy_object(storage):
    """Test an object is copied server side to a new key."""
    storage.save('1/source.txt', ContentFile(b'payload'))

    target = storage.copy_object('1/source.txt', '1/target.txt')

    assert target == '1/target.txt'
    with storage.open(target, 'rb') as content:
        assert content.read() == b'payload'
    assert storage.exists('1/source.txt')


def test_copy_object_avoids_overwrite(storage):
    """Test an existing destination key is never overwritten."""
    storage.save('1/source.txt', ContentFile(b'new'))
    storage.save('1/target.txt', ContentFile(b'old'))

    target = storage.copy_object('1/source.txt', '1/target.txt')

    assert target != '1/target.txt'
    with storage.open('1/target.txt', 'rb') as content:
        assert content.read() == b'old'


def test_iter_keys(storage):
    """Test keys are listed with an optional prefix."""
    storage.save('1/a.txt', ContentFile(b'a'))
    storage.save('2/b.txt', ContentFile(b'b'))

    assert sorted(storage.iter_keys()) == ['1/a.txt', '2/b.txt']
    assert list(storage.iter_keys('1/')) == ['1/a.txt']


def test_rollback_upload(storage):
    """Test rolling back removes the stored object."""
    storage.save('1/a.txt', ContentFile(b'a'))

    storage.rollback_upload('1/a.txt')

    assert not storage.exists('1/a.txt')


def test_rollback_upload_never_raises(storage, monkeypatch):
    """Test a failing rollback is logged, not raised."""
    def broken_delete(name):
        raise RuntimeError('storage unavailable')

    monkeypatch.setattr(storage, 'delete', broken_delete)

    storage.rollback_upload('1/a.txt')
