"""
Shared persistence helpers for the resource endpoints.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backoffice.app.core.exceptions import DataIntegrityError, ResourceNotFoundError

logger = logging.getLogger("fleet.db")

ModelT = TypeVar("ModelT")


async def get_or_404(db: AsyncSession, model: Type[ModelT], item_id: int, resource: str) -> ModelT:
    item = await db.get(model, item_id)
    if item is None:
        raise ResourceNotFoundError(resource, item_id)
    return item


async def commit_or_conflict(db: AsyncSession, message: str, details: Optional[Dict[str, Any]] = None):
    """
    Commit the session; a constraint violation rolls it back and becomes a 409.
    """
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Write rejected by the store: %s", exc.orig)
        raise DataIntegrityError(message, details) from exc


async def paginate(db: AsyncSession, query, page: int, page_size: int):
    """Return (rows, total) for one page of `query`."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    offset = (page - 1) * page_size
    result = await db.execute(query.offset(offset).limit(page_size))
    return result.scalars().all(), total


async def flush_or_conflict(db: AsyncSession, message: str, details: Optional[Dict[str, Any]] = None):
    """Flush pending rows so later queries see them; same error mapping as commit."""
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Write rejected by the store: %s", exc.orig)
        raise DataIntegrityError(message, details) from exc
