"""
Domain layer for the CTA engine.

Holds the immutable records shared across the engine (ids, stages,
surveys) and the store interfaces it depends on. Implementations of
the interfaces live in the database package.
"""

from .models import (
    DAX_DIALOG_CTAS,
    REQUIRED_DAX_ONBOARDING_CTAS,
    AppStage,
    CtaId,
    DismissedCta,
    Survey,
    SurveyStatus,
    WidgetCapabilities,
)
from .repositories import (
    IAppInstallStore,
    IDismissedCtaRepository,
    IOnboardingStore,
    IPrivacySettingsStore,
    ISettingsStore,
    ISurveyRepository,
    IUserStageStore,
    IWidgetCapabilities,
)

__all__ = [
    "DAX_DIALOG_CTAS",
    "REQUIRED_DAX_ONBOARDING_CTAS",
    "AppStage",
    "CtaId",
    "DismissedCta",
    "Survey",
    "SurveyStatus",
    "WidgetCapabilities",
    "IAppInstallStore",
    "IDismissedCtaRepository",
    "IOnboardingStore",
    "IPrivacySettingsStore",
    "ISettingsStore",
    "ISurveyRepository",
    "IUserStageStore",
    "IWidgetCapabilities",
]
