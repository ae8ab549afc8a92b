"""Async Dismissed CTA Repository.

Implements the dismissal ledger over the dismissed_ctas table. Rows are
only ever added.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.models import CtaId, DismissedCta
from database.models import DismissedCtaRecord
from domain.repositories import IDismissedCtaRepository

logger = logging.getLogger(__name__)


class DismissedCtaRepository(IDismissedCtaRepository):
    """Async implementation of IDismissedCtaRepository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def exists(self, cta_id: CtaId) -> bool:
        result = await self._session.execute(
            select(DismissedCtaRecord.cta_id).where(DismissedCtaRecord.cta_id == cta_id.value)
        )
        return result.scalar_one_or_none() is not None

    async def insert(self, dismissed_cta: DismissedCta) -> None:
        """
        Add a ledger record. Existing records are left untouched.

        Args:
            dismissed_cta: Record to add.
        """
        if await self.exists(dismissed_cta.cta_id):
            logger.debug(f"CTA {dismissed_cta.cta_id.value} already in ledger")
            return

        self._session.add(DismissedCtaRecord(cta_id=dismissed_cta.cta_id.value))
        await self._session.flush()
        logger.debug(f"CTA {dismissed_cta.cta_id.value} added to ledger")
