"""Async App Settings Repository.

Key/value store backing the small settings the CTA engine reads: the
hide-tips flag, the privacy switch, the onboarding dialog journey and
the install timestamp.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from database.models import AppSettingRecord
from domain.repositories import (
    IAppInstallStore,
    IOnboardingStore,
    IPrivacySettingsStore,
    ISettingsStore,
)

logger = logging.getLogger(__name__)

HIDE_TIPS_KEY = "hide_tips"
PRIVACY_ON_KEY = "privacy_on"
ONBOARDING_JOURNEY_KEY = "onboarding_dialog_journey"
INSTALL_TIMESTAMP_KEY = "install_timestamp"


class AppSettingsRepository(
    ISettingsStore,
    IPrivacySettingsStore,
    IOnboardingStore,
    IAppInstallStore,
):
    """Async key/value settings over the app_settings table."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with a session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def get_value(self, key: str) -> Optional[str]:
        record = await self._session.get(AppSettingRecord, key)
        return record.value if record is not None else None

    async def set_value(self, key: str, value: Optional[str]) -> None:
        record = await self._session.get(AppSettingRecord, key)
        if record is None:
            record = AppSettingRecord(key=key)
            self._session.add(record)
        record.value = value
        await self._session.flush()
        logger.debug(f"Setting {key} updated")

    async def _get_bool(self, key: str, default: bool) -> bool:
        value = await self.get_value(key)
        if value is None:
            return default
        return value.lower() == "true"

    # Settings
    async def get_hide_tips(self) -> bool:
        return await self._get_bool(HIDE_TIPS_KEY, False)

    async def set_hide_tips(self, hide_tips: bool) -> None:
        await self.set_value(HIDE_TIPS_KEY, "true" if hide_tips else "false")

    # Privacy
    async def is_privacy_on(self) -> bool:
        return await self._get_bool(PRIVACY_ON_KEY, True)

    async def set_privacy_on(self, privacy_on: bool) -> None:
        await self.set_value(PRIVACY_ON_KEY, "true" if privacy_on else "false")

    # Onboarding journey
    async def get_onboarding_dialog_journey(self) -> Optional[str]:
        return await self.get_value(ONBOARDING_JOURNEY_KEY)

    async def set_onboarding_dialog_journey(self, journey: str) -> None:
        await self.set_value(ONBOARDING_JOURNEY_KEY, journey)

    # Install
    async def get_install_timestamp(self) -> Optional[int]:
        value = await self.get_value(INSTALL_TIMESTAMP_KEY)
        return int(value) if value is not None else None

    async def record_install_timestamp(self, timestamp_ms: Optional[int] = None) -> int:
        existing = await self.get_install_timestamp()
        if existing is not None:
            return existing

        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        await self.set_value(INSTALL_TIMESTAMP_KEY, str(timestamp_ms))
        logger.info("Install timestamp recorded")
        return timestamp_ms
