"""Business logic for the account lock password."""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import check_password

from server.apps.accounts.models import User
from server.apps.files.exceptions import (
    AuthenticationFailedError,
    InvalidInputError,
    NotFoundError,
)
from server.apps.files.logic.boundary import operation_boundary

logger = logging.getLogger(__name__)


def _get_user(user_id: int) -> User:
    try:
        return get_user_model().objects.get(pk=user_id)
    except get_user_model().DoesNotExist as error:
        raise NotFoundError('User', user_id) from error


def _clean_password(password: str | None) -> str:
    if not password or not password.strip():
        raise InvalidInputError('Lock password is required')
    return password.strip()


@operation_boundary
def set_lock_password(user_id: int, password: str | None) -> None:
    """Create or replace the user's lock password.

    Args:
        user_id: ID of the user.
        password: New raw lock password (surrounding whitespace ignored).

    Raises:
        InvalidInputError: If password is empty.
        NotFoundError: If the user does not exist.
    """
    raw_password = _clean_password(password)
    user = _get_user(user_id)
    user.set_lock_password(raw_password)
    user.save(update_fields=['lock_password', 'updated_at'])
    logger.info('Lock password set for user %d', user_id)


@operation_boundary
def has_lock_password(user_id: int) -> bool:
    """Check whether the user has set a lock password."""
    return _get_user(user_id).has_lock_password


@operation_boundary
def verify_lock_password(user_id: int, password: str | None) -> bool:
    """Verify a raw password against the user's lock password.

    Args:
        user_id: ID of the user.
        password: Raw password to check.

    Returns:
        True when the password matches.

    Raises:
        InvalidInputError: If password is empty or no lock password is set.
        AuthenticationFailedError: If the password does not match.
    """
    raw_password = _clean_password(password)
    user = _get_user(user_id)
    if not user.has_lock_password:
        raise InvalidInputError('Lock password not set')

    if not user.check_lock_password(raw_password):
        logger.warning('Lock password mismatch for user %d', user_id)
        raise AuthenticationFailedError('Incorrect lock password')
    return True


def require_unlock(
    user_id: int,
    password: str | None,
    skip_check: bool = False,
    own_hash: str | None = None,
) -> None:
    """Gate access to locked content.

    A caller that already passed the lock screen in its session sets
    ``skip_check``. Otherwise ``password`` must match ``own_hash``
    (a folder-specific hash) when given, or the account lock
    password.

    Args:
        user_id: ID of the requesting user.
        password: Raw password supplied by the caller.
        skip_check: Trust an already unlocked session.
        own_hash: Lock password hash stored on the entity itself.

    Raises:
        InvalidInputError: If no password was given or none is set.
        AuthenticationFailedError: If the password does not match.
    """
    if skip_check:
        return

    if not password or not password.strip():
        raise InvalidInputError('Password required or authentication required')
    raw_password = password.strip()

    if own_hash:
        matched = check_password(raw_password, own_hash)
    else:
        user = _get_user(user_id)
        if not user.has_lock_password:
            raise InvalidInputError(
                'Lock password not set. Please set a lock password first.',
            )
        matched = user.check_lock_password(raw_password)

    if not matched:
        logger.warning('Unlock attempt with wrong password by user %d', user_id)
        raise AuthenticationFailedError()
