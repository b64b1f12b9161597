"""Error boundary for drive operations."""

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from server.apps.files.exceptions import DriveError, InternalError

_P = ParamSpec('_P')
_R = TypeVar('_R')

logger = logging.getLogger(__name__)


def operation_boundary(func: Callable[_P, _R]) -> Callable[_P, _R]:
    """Translate unexpected failures of an operation into InternalError.

    Drive errors pass through untouched. Anything else (database,
    storage, programming errors) is logged with its traceback and
    replaced with a generic InternalError.

    Args:
        func: Public drive operation.

    Returns:
        Wrapped operation.
    """
    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        try:
            return func(*args, **kwargs)
        except DriveError:
            raise
        except Exception as error:
            logger.exception('Unexpected failure in %s', func.__qualname__)
            raise InternalError() from error

    return wrapper
