"""Async Survey Repository.

Reads the scheduled survey and cancels scheduled surveys. Surveys are
written by the survey scheduling backend; save() exists for that backend
and for seeding.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.models import Survey, SurveyStatus
from database.models import SurveyRecord
from domain.repositories import ISurveyRepository

logger = logging.getLogger(__name__)


class SurveyRepository(ISurveyRepository):
    """Async implementation of ISurveyRepository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def get_scheduled_survey(self) -> Optional[Survey]:
        result = await self._session.execute(
            select(SurveyRecord)
            .where(SurveyRecord.status == SurveyStatus.SCHEDULED.value)
            .order_by(SurveyRecord.created_at)
            .limit(1)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return None
        return self._record_to_survey(record)

    async def cancel_scheduled_surveys(self) -> None:
        result = await self._session.execute(
            update(SurveyRecord)
            .where(SurveyRecord.status == SurveyStatus.SCHEDULED.value)
            .values(status=SurveyStatus.CANCELLED.value, updated_at=datetime.utcnow())
        )
        logger.info(f"Cancelled {result.rowcount} scheduled survey(s)")

    async def save(self, survey: Survey) -> None:
        """
        Insert or update a survey.

        Args:
            survey: Survey to store.
        """
        record = await self._session.get(SurveyRecord, survey.id)
        if record is None:
            record = SurveyRecord(survey_id=survey.id)
            self._session.add(record)
        record.url = survey.url
        record.day_of_installation = survey.day_of_installation
        record.status = survey.status.value
        await self._session.flush()

    @staticmethod
    def _record_to_survey(record: SurveyRecord) -> Survey:
        return Survey(
            id=record.survey_id,
            url=record.url,
            day_of_installation=record.day_of_installation,
            status=SurveyStatus(record.status),
        )
