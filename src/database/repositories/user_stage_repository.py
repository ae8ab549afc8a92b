"""Async User Stage Repository.

Stores the onboarding stage in a single user_stage row. Stages only move
forward: completing a stage other than the current one changes nothing.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from domain.models import AppStage
from database.models import USER_STAGE_KEY, UserStageRecord
from domain.repositories import IUserStageStore

logger = logging.getLogger(__name__)


class UserStageRepository(IUserStageStore):
    """Async implementation of IUserStageStore."""

    def __init__(self, session: AsyncSession, initial_stage: AppStage = AppStage.NEW):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
            initial_stage: Stage reported before anything was stored.
        """
        self._session = session
        self._initial_stage = initial_stage

    async def get_user_app_stage(self) -> AppStage:
        record = await self._session.get(UserStageRecord, USER_STAGE_KEY)
        if record is None:
            return self._initial_stage
        return AppStage(record.app_stage)

    async def stage_completed(self, app_stage: AppStage) -> AppStage:
        """
        Complete a stage and move to the next one.

        Args:
            app_stage: Stage the user has finished.

        Returns:
            Stage stored after the call.
        """
        current = await self.get_user_app_stage()
        if current != app_stage:
            logger.debug(
                f"Ignoring completion of {app_stage.value}: current stage is {current.value}"
            )
            return current

        new_stage = app_stage.next_stage()
        record = await self._session.get(UserStageRecord, USER_STAGE_KEY)
        if record is None:
            record = UserStageRecord(key=USER_STAGE_KEY)
            self._session.add(record)
        record.app_stage = new_stage.value
        await self._session.flush()

        logger.info(f"User stage moved from {app_stage.value} to {new_stage.value}")
        return new_stage

    async def move_to_stage(self, app_stage: AppStage) -> AppStage:
        """
        Jump forward to a stage (e.g. NEW -> DAX_ONBOARDING on first launch).

        Moving backwards is ignored.
        """
        current = await self.get_user_app_stage()
        if not app_stage.is_beyond(current):
            return current

        record = await self._session.get(UserStageRecord, USER_STAGE_KEY)
        if record is None:
            record = UserStageRecord(key=USER_STAGE_KEY)
            self._session.add(record)
        record.app_stage = app_stage.value
        await self._session.flush()
        return app_stage
