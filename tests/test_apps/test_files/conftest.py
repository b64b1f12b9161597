"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from moto import mock_aws

from server.apps.files.models import File, Folder

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        email='test@example.com',
        name='Test User',
        password='testpass123',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        email='other@example.com',
        name='Other User',
        password='testpass123',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with drive bucket.

    Yields:
        boto3 S3 resource with drive bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='drive')

        yield conn


@pytest.fixture
def sample_file_content():
    """Sample file content for testing.

    Returns:
        ContentFile with test data.
    """
    return ContentFile(b'test file content', name='test.txt')


@pytest.fixture
def make_folder(user):
    """Factory creating folders for the test user.

    Returns:
        Callable taking a name and an optional parent.
    """
    def factory(name, parent=None, owner=None, **fields):
        return Folder.objects.create(
            name=name,
            user=owner or user,
            parent=parent,
            **fields,
        )

    return factory


@pytest.fixture
def make_file(user, mock_s3):
    """Factory creating files whose content exists in mocked storage.

    Returns:
        Callable taking a name, an optional folder and content.
    """
    def factory(name, folder=None, content=b'content', owner=None, **fields):
        file_owner = owner or user
        storage_name = default_storage.save(
            f'{file_owner.id}/{name}',
            ContentFile(content),
        )
        return File.objects.create(
            name=name,
            file=storage_name,
            size=len(content),
            mimetype='text/plain',
            folder=folder,
            user=file_owner,
            **fields,
        )

    return factory
