"""Tests for lock password business logic."""

import pytest
from django.contrib.auth.hashers import make_password

from server.apps.accounts.logic.lock_password import (
    has_lock_password,
    require_unlock,
    set_lock_password,
    verify_lock_password,
)
from server.apps.files.exceptions import (
    AuthenticationFailedError,
    InvalidInputError,
    NotFoundError,
)


@pytest.mark.django_db
class TestLockPassword:
    """Tests for set, has and verify."""

    def test_set_and_verify(self, user):
        """Test a set password verifies, surrounding spaces ignored."""
        assert not has_lock_password(user.id)

        set_lock_password(user.id, ' secret ')

        assert has_lock_password(user.id)
        assert verify_lock_password(user.id, 'secret') is True

    def test_replace_password(self, user):
        """Test setting again replaces the old password."""
        set_lock_password(user.id, 'first')
        set_lock_password(user.id, 'second')

        assert verify_lock_password(user.id, 'second')
        with pytest.raises(AuthenticationFailedError):
            verify_lock_password(user.id, 'first')

    def test_set_empty_password(self, user):
        """Test a blank password is rejected."""
        with pytest.raises(InvalidInputError):
            set_lock_password(user.id, '   ')

    def test_verify_without_password_set(self, user):
        """Test verifying before a password exists."""
        with pytest.raises(InvalidInputError, match='not set'):
            verify_lock_password(user.id, 'secret')

    def test_verify_wrong_password(self, user):
        """Test a mismatch fails authentication."""
        set_lock_password(user.id, 'secret')

        with pytest.raises(AuthenticationFailedError) as exc_info:
            verify_lock_password(user.id, 'wrong')

        assert exc_info.value.code == 'authentication_failed'

    def test_unknown_user(self):
        """Test operations on a missing user."""
        with pytest.raises(NotFoundError, match='User not found'):
            has_lock_password(99999)


@pytest.mark.django_db
class TestRequireUnlock:
    """Tests for require_unlock."""

    def test_skip_check(self, user):
        """Test a trusted session needs no password."""
        require_unlock(user.id, None, skip_check=True)

    def test_missing_password(self, user):
        """Test no password is invalid input."""
        set_lock_password(user.id, 'secret')

        with pytest.raises(InvalidInputError, match='Password required'):
            require_unlock(user.id, '')

    def test_account_password(self, user):
        """Test the account lock password opens locked content."""
        set_lock_password(user.id, 'secret')

        require_unlock(user.id, 'secret')
        with pytest.raises(AuthenticationFailedError):
            require_unlock(user.id, 'wrong')

    def test_account_password_not_set(self, user):
        """Test a missing account lock password is reported."""
        with pytest.raises(InvalidInputError, match='set a lock password'):
            require_unlock(user.id, 'secret')

    def test_own_hash(self, user):
        """Test an entity hash is used instead of the account password."""
        own_hash = make_password('folder')

        require_unlock(user.id, 'folder', own_hash=own_hash)
        with pytest.raises(AuthenticationFailedError):
            require_unlock(user.id, 'other', own_hash=own_hash)
