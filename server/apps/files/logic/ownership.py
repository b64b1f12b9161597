"""Ownership checks shared by all drive operations.

Lookups always check existence first and ownership second: a
missing entity is NotFoundError, somebody else's is ForbiddenError.
"""

import logging
from typing import Protocol, TypeVar

from django.db import models

from server.apps.files.exceptions import ForbiddenError, NotFoundError
from server.apps.files.models import Category

logger = logging.getLogger(__name__)


class _Owned(Protocol):
    user_id: int | None


_Model = TypeVar('_Model', bound=models.Model)


def is_allowed(entity: _Owned, user_id: int) -> bool:
    """Whether the user owns the entity.

    Args:
        entity: Folder, File or Category instance.
        user_id: ID of the requesting user.

    Returns:
        True if the entity belongs to the user.
    """
    return entity.user_id == user_id


def authorize(
    entity: _Owned,
    user_id: int,
    message: str = 'Unauthorized',
) -> None:
    """Raise unless the user owns the entity.

    Args:
        entity: Folder, File or Category instance.
        user_id: ID of the requesting user.
        message: Error message for the denial.

    Raises:
        ForbiddenError: If the entity belongs to another user.
    """
    if not is_allowed(entity, user_id):
        logger.warning(
            'Access denied: user %d on %s %s',
            user_id,
            type(entity).__name__,
            getattr(entity, 'pk', None),
        )
        raise ForbiddenError(message)


def get_owned(
    model: type[_Model],
    pk: int,
    user_id: int,
    entity: str | None = None,
) -> _Model:
    """Load an entity by primary key and check ownership.

    Args:
        model: Model class to query.
        pk: Primary key to load.
        user_id: ID of the requesting user.
        entity: Name used in error messages (defaults to model name).

    Returns:
        The owned instance.

    Raises:
        NotFoundError: If no row has this primary key.
        ForbiddenError: If the row belongs to another user.
    """
    label = entity or str(model._meta.verbose_name)  # noqa: SLF001
    try:
        instance = model._default_manager.get(pk=pk)  # noqa: SLF001
    except model.DoesNotExist as error:
        raise NotFoundError(label, pk) from error

    authorize(instance, user_id)
    return instance


def authorize_category_use(category: Category, user_id: int) -> None:
    """Raise unless the category is global or owned by the user.

    Args:
        category: Category to assign.
        user_id: ID of the requesting user.

    Raises:
        ForbiddenError: If the category is another user's private one.
    """
    if category.is_global:
        return
    authorize(category, user_id, 'Unauthorized to use this category')
