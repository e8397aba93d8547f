"""
Shared plumbing for the consistency services.

A service owns its transaction boundaries: it receives a session factory and
opens `sessions.begin()` around any write touching more than one entity, so
every step commits or rolls back together. Errors are never caught here
beyond logging; they leave the transaction block and propagate unchanged.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from app.exceptions import TaskboardException
from app.logging_config import get_logger

ModelT = TypeVar("ModelT", bound=SQLModel)


class Service:
    """Base class holding injected collaborators."""

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        logger: logging.Logger | None = None,
    ):
        self.sessions = sessions
        self.logger = logger or get_logger(type(self).__module__)

    @asynccontextmanager
    async def _operation(self, operation: str, /, **context: Any) -> AsyncIterator[None]:
        """
        Observe one service operation: start, success, rejection or failure.

        Logging is a side channel only; the wrapped exception is re-raised as is.
        """
        described = " ".join(f"{key}={value}" for key, value in context.items())
        self.logger.debug(f"{operation} started {described}".rstrip())
        try:
            yield
        except TaskboardException as exc:
            self.logger.warning(f"{operation} rejected ({exc.error_code}): {exc.message}")
            raise
        except Exception:
            self.logger.exception(f"{operation} failed {described}".rstrip())
            raise
        self.logger.info(f"{operation} succeeded {described}".rstrip())

    async def _load(self, model: type[ModelT], ident: Any) -> ModelT | None:
        """Fetch one row on a short-lived session of its own (safe to gather)."""
        async with self.sessions() as session:
            return await session.get(model, ident)
