"""Shared helpers for SQLAlchemy repositories."""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from keyhold_identity.exceptions import PersistenceError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def translate_store_errors(
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R]]:
    """Re-raise driver and SQLAlchemy failures as ``PersistenceError``.

    Domain exceptions raised by the wrapped method pass through untouched, so
    methods map their own ``IntegrityError`` cases first.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Store call %s failed: %s", func.__qualname__, e)
            msg = f"Store call {func.__qualname__} failed"
            raise PersistenceError(msg) from e

    return wrapper


def integrity_detail(error: IntegrityError) -> str:
    """Lower-cased driver message, used to tell constraints apart."""
    return str(error.orig if error.orig is not None else error).lower()
