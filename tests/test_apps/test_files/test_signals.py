"""Tests for files app signal handlers."""

import pytest
from django.core.files.storage import default_storage
from django.db import transaction

from server.apps.files.models import File
from server.apps.files.signals import delete_stored_content


@pytest.mark.django_db
def test_content_deleted_after_commit(make_file, django_capture_on_commit_callbacks):
    """Test stored content is removed once the delete commits."""
    file_instance = make_file('a.txt')
    storage_name = file_instance.file.name

    with django_capture_on_commit_callbacks(execute=True):
        file_instance.delete()

    assert not default_storage.exists(storage_name)


@pytest.mark.django_db
def test_content_kept_on_rollback(make_file, django_capture_on_commit_callbacks):
    """Test a rolled back delete leaves the content in place."""
    file_instance = make_file('a.txt')
    storage_name = file_instance.file.name

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                File.objects.filter(pk=file_instance.pk).get().delete()
                raise RuntimeError('abort')

    assert callbacks == []
    assert File.objects.filter(pk=file_instance.pk).exists()
    assert default_storage.exists(storage_name)


@pytest.mark.django_db
def test_cascade_from_user_deletes_content(
    user,
    make_file,
    django_capture_on_commit_callbacks,
):
    """Test deleting a user removes the content of their files."""
    file_instance = make_file('a.txt')
    storage_name = file_instance.file.name

    with django_capture_on_commit_callbacks(execute=True):
        user.delete()

    assert File.objects.count() == 0
    assert not default_storage.exists(storage_name)


def test_delete_stored_content_missing(mock_s3):
    """Test missing content is only logged."""
    delete_stored_content('1/missing.txt')


def test_delete_stored_content_failure(mock_s3, monkeypatch):
    """Test storage failures are logged, never raised."""
    def broken_exists(name):
        raise RuntimeError('storage unavailable')

    monkeypatch.setattr(default_storage, 'exists', broken_exists)

    delete_stored_content('1/a.txt')
