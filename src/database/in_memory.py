"""
In-memory store implementations.

Used by tests and by local runs without a database. Behaviour matches
the SQLAlchemy repositories: the ledger only grows, stages only move
forward, cancelling surveys only touches scheduled ones.
"""

import logging
import time
from typing import Dict, Iterable, List, Optional, Set

from domain.models import AppStage, CtaId, DismissedCta, Survey, SurveyStatus
from domain.repositories import (
    IAppInstallStore,
    IDismissedCtaRepository,
    IOnboardingStore,
    IPrivacySettingsStore,
    ISettingsStore,
    ISurveyRepository,
    IUserStageStore,
    IWidgetCapabilities,
)

logger = logging.getLogger(__name__)


class InMemoryDismissedCtaRepository(IDismissedCtaRepository):
    def __init__(self, dismissed: Iterable[CtaId] = ()):
        self._dismissed: Set[CtaId] = set(dismissed)

    async def exists(self, cta_id: CtaId) -> bool:
        return cta_id in self._dismissed

    async def insert(self, dismissed_cta: DismissedCta) -> None:
        self._dismissed.add(dismissed_cta.cta_id)

    @property
    def dismissed(self) -> Set[CtaId]:
        return set(self._dismissed)


class InMemorySurveyRepository(ISurveyRepository):
    def __init__(self, surveys: Iterable[Survey] = ()):
        self._surveys: List[Survey] = list(surveys)

    async def get_scheduled_survey(self) -> Optional[Survey]:
        for survey in self._surveys:
            if survey.status == SurveyStatus.SCHEDULED:
                return survey
        return None

    async def cancel_scheduled_surveys(self) -> None:
        self._surveys = [
            Survey(s.id, s.url, s.day_of_installation, SurveyStatus.CANCELLED)
            if s.status == SurveyStatus.SCHEDULED else s
            for s in self._surveys
        ]

    def add(self, survey: Survey) -> None:
        self._surveys.append(survey)

    @property
    def surveys(self) -> List[Survey]:
        return list(self._surveys)


class InMemoryUserStageStore(IUserStageStore):
    def __init__(self, stage: AppStage = AppStage.NEW):
        self.stage = stage

    async def get_user_app_stage(self) -> AppStage:
        return self.stage

    async def stage_completed(self, app_stage: AppStage) -> AppStage:
        if self.stage == app_stage:
            self.stage = app_stage.next_stage()
            logger.info(f"User stage moved from {app_stage.value} to {self.stage.value}")
        return self.stage


class InMemorySettingsStore(
    ISettingsStore,
    IPrivacySettingsStore,
    IOnboardingStore,
    IAppInstallStore,
):
    """Settings, privacy switch, onboarding journey and install time in one object."""

    def __init__(
        self,
        hide_tips: bool = False,
        privacy_on: bool = True,
        onboarding_dialog_journey: Optional[str] = None,
        install_timestamp: Optional[int] = None,
    ):
        self.hide_tips = hide_tips
        self.privacy_on = privacy_on
        self.onboarding_dialog_journey = onboarding_dialog_journey
        self.install_timestamp = (
            install_timestamp if install_timestamp is not None else int(time.time() * 1000)
        )

    async def get_hide_tips(self) -> bool:
        return self.hide_tips

    async def set_hide_tips(self, hide_tips: bool) -> None:
        self.hide_tips = hide_tips

    async def is_privacy_on(self) -> bool:
        return self.privacy_on

    async def get_onboarding_dialog_journey(self) -> Optional[str]:
        return self.onboarding_dialog_journey

    async def set_onboarding_dialog_journey(self, journey: str) -> None:
        self.onboarding_dialog_journey = journey

    async def get_install_timestamp(self) -> Optional[int]:
        return self.install_timestamp

    async def record_install_timestamp(self, timestamp_ms: Optional[int] = None) -> int:
        if self.install_timestamp is None:
            self.install_timestamp = (
                timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
            )
        return self.install_timestamp


class StaticWidgetCapabilities(IWidgetCapabilities):
    """Fixed capability answers."""

    def __init__(
        self,
        supports_standard_widget_add: bool = False,
        supports_automatic_widget_add: bool = False,
        has_installed_widgets: bool = False,
    ):
        self._values: Dict[str, bool] = {
            "standard": supports_standard_widget_add,
            "automatic": supports_automatic_widget_add,
            "installed": has_installed_widgets,
        }

    @property
    def supports_standard_widget_add(self) -> bool:
        return self._values["standard"]

    @property
    def supports_automatic_widget_add(self) -> bool:
        return self._values["automatic"]

    @property
    def has_installed_widgets(self) -> bool:
        return self._values["installed"]
