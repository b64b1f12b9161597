"""Tests for ownership checks."""

import pytest

from server.apps.files.exceptions import ForbiddenError, NotFoundError
from server.apps.files.logic.ownership import (
    authorize,
    authorize_category_use,
    get_owned,
    is_allowed,
)
from server.apps.files.models import Category, Folder


@pytest.mark.django_db
def test_is_allowed(user, other_user, make_folder):
    """Test only the owner is allowed."""
    folder = make_folder('Docs')

    assert is_allowed(folder, user.id)
    assert not is_allowed(folder, other_user.id)


@pytest.mark.django_db
def test_authorize_message(user, other_user, make_folder):
    """Test a custom denial message is kept."""
    folder = make_folder('Docs')

    authorize(folder, user.id)
    with pytest.raises(ForbiddenError, match='Not yours'):
        authorize(folder, other_user.id, 'Not yours')


@pytest.mark.django_db
def test_get_owned(user, make_folder):
    """Test an owned row is returned."""
    folder = make_folder('Docs')

    assert get_owned(Folder, folder.id, user.id) == folder


@pytest.mark.django_db
def test_not_found_before_forbidden(user):
    """Test a missing row is NotFound for any user."""
    with pytest.raises(NotFoundError) as exc_info:
        get_owned(Folder, 99999, user.id, 'Destination folder')

    assert str(exc_info.value) == 'Destination folder not found'
    assert exc_info.value.entity_id == 99999
    assert exc_info.value.code == 'not_found'


@pytest.mark.django_db
def test_foreign_row_is_forbidden(other_user, make_folder):
    """Test an existing foreign row is Forbidden."""
    folder = make_folder('Docs')

    with pytest.raises(ForbiddenError) as exc_info:
        get_owned(Folder, folder.id, other_user.id)

    assert exc_info.value.code == 'forbidden'


@pytest.mark.django_db
def test_authorize_category_use(user, other_user):
    """Test global and own categories are usable, foreign ones are not."""
    authorize_category_use(Category.objects.create(name='Invoices'), user.id)
    authorize_category_use(
        Category.objects.create(name='Work', user=user),
        user.id,
    )

    with pytest.raises(ForbiddenError):
        authorize_category_use(
            Category.objects.create(name='Work', user=other_user),
            user.id,
        )
