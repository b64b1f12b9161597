"""Tests for file and folder duplication."""

import pytest
from django.core.files.storage import default_storage

from server.apps.files.exceptions import (
    ForbiddenError,
    InternalError,
    InvalidInputError,
    NotFoundError,
)
from server.apps.files.infrastructure.storage import FileStorage
from server.apps.files.logic.duplication import (
    ItemKind,
    duplicate_file,
    duplicate_folder,
    duplicate_item,
    parse_item_kind,
)
from server.apps.files.models import Category, File, Folder


def _shape(folder):
    """Nested (name, files, children) description of a subtree."""
    files = sorted(
        file_instance.name for file_instance in folder.files.all()
    )
    children = sorted(
        (_shape(child) for child in folder.subfolders.all()),
        key=lambda entry: entry[0],
    )
    return (folder.name, files, children)


def _strip_copy(shape):
    name, files, children = shape
    return (
        name.replace(' (Copy)', ''),
        [file_name.replace(' (Copy)', '') for file_name in files],
        [_strip_copy(child) for child in children],
    )


@pytest.mark.django_db
class TestDuplicateFile:
    """Tests for duplicate_file."""

    def test_duplicate_file(self, user, make_folder, make_file):
        """Test the copy gets its own content and copied metadata."""
        category = Category.objects.create(name='Work', user=user)
        destination = make_folder('Backup')
        source = make_file(
            'report.pdf',
            content=b'pdf bytes',
            is_locked=True,
            category=category,
            summary='Quarterly numbers',
        )

        duplicate = duplicate_file(user.id, source.id, destination.id)

        assert duplicate.name == 'report (Copy).pdf'
        assert duplicate.folder == destination
        assert duplicate.size == source.size
        assert duplicate.category == category
        assert duplicate.summary == 'Quarterly numbers'
        assert not duplicate.is_locked
        assert duplicate.file.name != source.file.name
        with default_storage.open(duplicate.file.name, 'rb') as content:
            assert content.read() == b'pdf bytes'

    def test_duplicate_file_to_root(self, user, make_folder, make_file):
        """Test a copy without destination lands at the root."""
        source = make_file('notes', folder=make_folder('Docs'))

        duplicate = duplicate_file(user.id, source.id)

        assert duplicate.folder is None
        assert duplicate.name == 'notes (Copy)'

    def test_missing_content(self, user, make_file):
        """Test duplicating a file whose content is gone."""
        source = make_file('a.txt')
        default_storage.delete(source.file.name)

        with pytest.raises(NotFoundError, match='File content not found'):
            duplicate_file(user.id, source.id)

        assert File.objects.count() == 1

    def test_foreign_destination(self, user, other_user, make_folder, make_file):
        """Test copying into another user's folder."""
        foreign = make_folder('Theirs', owner=other_user)
        source = make_file('a.txt')

        with pytest.raises(ForbiddenError):
            duplicate_file(user.id, source.id, foreign.id)


@pytest.mark.django_db
class TestDuplicateFolder:
    """Tests for duplicate_folder."""

    def test_copies_whole_subtree(self, user, make_folder, make_file):
        """Test the copy has the same shape with copy names."""
        docs = make_folder('Docs', is_locked=True, is_important=True)
        taxes = make_folder('Taxes', parent=docs, folder_color='green')
        empty = make_folder('Empty', parent=taxes)
        make_file('a.txt', folder=docs)
        make_file('b.txt', folder=taxes)

        duplicate = duplicate_folder(user.id, docs.id)

        assert duplicate.name == 'Docs (Copy)'
        assert duplicate.parent_id is None
        assert not duplicate.is_locked
        assert not duplicate.is_important
        assert _strip_copy(_shape(duplicate)) == _shape(docs)
        assert Folder.objects.filter(user=user).count() == 6
        assert File.objects.filter(user=user).count() == 4

        taxes_copy = duplicate.subfolders.get()
        assert taxes_copy.folder_color == 'green'
        assert taxes_copy.subfolders.get().name == f'{empty.name} (Copy)'

    def test_content_is_copied(self, user, make_folder, make_file):
        """Test copied files point to new stored objects."""
        docs = make_folder('Docs')
        source = make_file('a.txt', folder=docs, content=b'original')

        duplicate = duplicate_folder(user.id, docs.id)

        copied = duplicate.files.get()
        assert copied.file.name != source.file.name
        with default_storage.open(copied.file.name, 'rb') as content:
            assert content.read() == b'original'

    def test_duplicate_into_itself(self, user, make_folder, make_file):
        """Test copying a folder into itself terminates."""
        docs = make_folder('Docs')
        make_folder('Taxes', parent=docs)
        make_file('a.txt', folder=docs)

        duplicate = duplicate_folder(user.id, docs.id, docs.id)

        assert duplicate.parent == docs
        assert Folder.objects.filter(user=user).count() == 4
        assert File.objects.filter(user=user).count() == 2

    def test_duplicate_into_descendant(self, user, make_folder):
        """Test copying a folder into its own child."""
        docs = make_folder('Docs')
        taxes = make_folder('Taxes', parent=docs)

        duplicate = duplicate_folder(user.id, docs.id, taxes.id)

        assert duplicate.parent == taxes
        assert duplicate.subfolders.get().name == 'Taxes (Copy)'
        assert Folder.objects.filter(user=user).count() == 4

    def test_rollback_on_failure(
        self,
        user,
        mock_s3,
        make_folder,
        make_file,
        monkeypatch,
    ):
        """Test nothing is left behind when a copy fails halfway."""
        docs = make_folder('Docs')
        make_file('a.txt', folder=docs)
        make_file('b.txt', folder=docs)
        original_copy = FileStorage.copy_object
        calls = []

        def flaky_copy(storage, source, destination):
            calls.append(source)
            if len(calls) == 2:
                raise RuntimeError('storage unavailable')
            return original_copy(storage, source, destination)

        monkeypatch.setattr(FileStorage, 'copy_object', flaky_copy)

        with pytest.raises(InternalError):
            duplicate_folder(user.id, docs.id)

        assert list(Folder.objects.filter(user=user)) == [docs]
        assert File.objects.filter(user=user).count() == 2
        assert len(list(mock_s3.Bucket('drive').objects.all())) == 2

    def test_missing_folder(self, user):
        """Test duplicating a folder that does not exist."""
        with pytest.raises(NotFoundError, match='Folder not found'):
            duplicate_folder(user.id, 99999)


@pytest.mark.django_db
class TestDuplicateItem:
    """Tests for duplicate_item dispatch."""

    def test_dispatch_file(self, user, make_file):
        """Test 'file' duplicates a file."""
        source = make_file('a.txt')

        duplicate = duplicate_item(user.id, source.id, 'file')

        assert isinstance(duplicate, File)

    def test_dispatch_folder(self, user, make_folder):
        """Test 'folder' duplicates a folder."""
        source = make_folder('Docs')

        duplicate = duplicate_item(user.id, source.id, ItemKind.FOLDER)

        assert isinstance(duplicate, Folder)
        assert duplicate.name == 'Docs (Copy)'

    def test_invalid_kind(self, user):
        """Test unknown kinds are rejected."""
        with pytest.raises(InvalidInputError, match="'file' or 'folder'"):
            duplicate_item(user.id, 1, 'link')


@pytest.mark.parametrize(('raw', 'expected'), [
    ('file', ItemKind.FILE),
    ('folder', ItemKind.FOLDER),
    (ItemKind.FILE, ItemKind.FILE),
])
def test_parse_item_kind(raw, expected):
    """Test accepted item kinds."""
    assert parse_item_kind(raw) is expected


@pytest.mark.parametrize('raw', [None, '', 'FILE'])
def test_parse_item_kind_invalid(raw):
    """Test rejected item kinds."""
    with pytest.raises(InvalidInputError):
        parse_item_kind(raw)
