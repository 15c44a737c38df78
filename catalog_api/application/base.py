"""Shared plumbing for application services."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.results import DATA_ERROR, ActionResult
from catalog_api.application.revalidation import get_route_invalidator
from catalog_api.domain.exceptions import DomainError

logger = structlog.get_logger()

T = TypeVar("T")


class SessionService:
    """Base for services bound to one request's database session.

    Args:
        session: Async SQLAlchemy session.
        request_id: Request ID for log correlation.
    """

    def __init__(self, session: AsyncSession, request_id: str | None = None) -> None:
        self.session = session
        self.request_id = request_id

    async def _run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        error_message: str,
        event: str,
        invalidate: str | None = None,
        **log_context: Any,
    ) -> ActionResult[T]:
        """Run one unit of work and turn its outcome into a result.

        Commits on success and rolls back on any domain or data-layer
        failure, so a failed operation never leaves partial writes.

        Args:
            operation: Coroutine factory doing the work.
            error_message: Localized message for data-layer failures.
            event: Log event name for data-layer failures.
            invalidate: Admin route to invalidate on success.
            **log_context: Extra fields for the failure log line.

        Returns:
            ActionResult with the operation's return value as data.
        """
        try:
            data = await operation()
            await self.session.commit()
        except DomainError as e:
            await self.session.rollback()
            return ActionResult.from_error(e)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                event,
                error=str(e),
                request_id=self.request_id,
                **log_context,
            )
            return ActionResult.fail(error_message, DATA_ERROR)

        if invalidate:
            get_route_invalidator().invalidate(invalidate)
        return ActionResult.ok(data)
