"""Tests for File, Folder and Category models."""

import pytest

from server.apps.files.models import Category, File, Folder


@pytest.mark.django_db
def test_file_model_str(user):
    """Test File __str__ method."""
    file_instance = File.objects.create(
        user=user,
        name='test.txt',
        file=f'{user.id}/abc-test.txt',
        size=100,
        mimetype='text/plain',
    )

    assert str(file_instance) == f'{user.id}:test.txt'


@pytest.mark.django_db
def test_file_get_extension(user):
    """Test get_extension method extracts extension correctly."""
    file_instance = File.objects.create(
        user=user,
        name='test.PDF',
        file=f'{user.id}/abc-test.PDF',
        size=100,
        mimetype='application/pdf',
    )

    # Should return lowercase without dot
    assert file_instance.get_extension() == 'pdf'


@pytest.mark.django_db
def test_file_get_url(user, mock_s3):
    """Test get_url points at the storage key."""
    file_instance = File.objects.create(
        user=user,
        name='test.txt',
        file=f'{user.id}/abc-test.txt',
        size=100,
        mimetype='text/plain',
    )

    assert f'{user.id}/abc-test.txt' in file_instance.get_url()


@pytest.mark.django_db
def test_file_cascade_delete_with_user(user, mock_s3):
    """Test files and folders are deleted when user is deleted."""
    folder = Folder.objects.create(user=user, name='Docs')
    File.objects.create(
        user=user,
        name='test.txt',
        file=f'{user.id}/abc-test.txt',
        size=100,
        mimetype='text/plain',
        folder=folder,
    )

    user.delete()

    # Rows should be cascade deleted
    assert File.objects.count() == 0
    assert Folder.objects.count() == 0


@pytest.mark.django_db
def test_category_delete_keeps_files(user):
    """Test deleting a category only clears the reference."""
    category = Category.objects.create(name='Work', user=user)
    file_instance = File.objects.create(
        user=user,
        name='test.txt',
        file=f'{user.id}/abc-test.txt',
        size=100,
        mimetype='text/plain',
        category=category,
    )

    category.delete()

    file_instance.refresh_from_db()
    assert file_instance.category is None


@pytest.mark.django_db
def test_folder_defaults(user):
    """Test a folder starts unlocked, unimportant and blue at the root."""
    folder = Folder.objects.create(user=user, name='Docs')

    assert folder.parent is None
    assert folder.folder_color == 'blue'
    assert not folder.is_locked
    assert not folder.is_important
    assert str(folder) == f'{user.id}:Docs'


@pytest.mark.django_db
def test_category_is_global(user):
    """Test categories without owner are global."""
    shared = Category.objects.create(name='Invoices')
    own = Category.objects.create(name='Work', user=user)

    assert shared.is_global
    assert not own.is_global
    assert str(shared) == 'global:Invoices'
