"""Business logic for categories."""

import logging

from django.db.models import Q, QuerySet

from server.apps.files.logic.boundary import operation_boundary
from server.apps.files.logic.folder_operations import clean_name
from server.apps.files.models import Category

logger = logging.getLogger(__name__)


@operation_boundary
def list_categories(user_id: int) -> QuerySet[Category]:
    """List the user's own categories and the global ones, by name."""
    return Category.objects.filter(
        Q(user_id=user_id) | Q(user__isnull=True),
    ).order_by('name', 'id')


@operation_boundary
def get_or_create_category(user_id: int, name: str | None) -> Category:
    """Resolve the user's own category by name, creating it if missing.

    Global categories with the same name are not reused, so the
    user always gets a category they can manage.

    Args:
        user_id: Owner of the category.
        name: Category name (trimmed, required).

    Returns:
        Existing or new Category owned by the user.

    Raises:
        InvalidInputError: If name is empty.
    """
    category_name = clean_name(name, 'Category name is required')
    category = Category.objects.filter(
        user_id=user_id,
        name=category_name,
    ).first()

    if category is None:
        category = Category.objects.create(
            user_id=user_id,
            name=category_name,
        )
        logger.info(
            'Category created: ID=%d, name=%s, user=%d',
            category.id,
            category_name,
            user_id,
        )
    return category
