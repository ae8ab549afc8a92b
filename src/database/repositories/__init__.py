"""Async SQLAlchemy implementations of the CTA store interfaces."""

from .app_settings_repository import AppSettingsRepository
from .dismissed_cta_repository import DismissedCtaRepository
from .survey_repository import SurveyRepository
from .user_stage_repository import UserStageRepository

__all__ = [
    "AppSettingsRepository",
    "DismissedCtaRepository",
    "SurveyRepository",
    "UserStageRepository",
]
