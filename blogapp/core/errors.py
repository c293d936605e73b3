# blogapp/core/errors.py
"""Typed failures surfaced by the data-access and cache layers.

Every failure carries a user-visible ``message`` and the HTTP status the API
answers with. ``main.py`` installs a single handler for ``BlogError``.
"""
from functools import wraps

from fastapi import status
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError


class BlogError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Unexpected error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class StoreError(BlogError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "The data store is unavailable"


class CacheError(BlogError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "The cache is unavailable"


class NotFoundError(BlogError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ValidationError(BlogError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "Invalid data"


class NotAuthenticatedError(BlogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "You must be signed in"


class PermissionDeniedError(BlogError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not authorized"


def store_call(func):
    """Turn driver failures raised by an async store function into StoreError."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        # asyncpg surfaces refused connections as bare OSError
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError() from exc
    return wrapper


def cache_call(func):
    """Same as store_call, for the Redis client."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except RedisError as exc:
            raise CacheError() from exc
    return wrapper
