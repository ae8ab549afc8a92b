"""
Wiring helpers.

Build a CtaViewModel over either a database session or in-memory stores.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from analytics.pixel import LoggingPixel, Pixel
from config.settings import CtaSettings
from cta.view_model import CtaViewModel
from database.in_memory import (
    InMemoryDismissedCtaRepository,
    InMemorySettingsStore,
    InMemorySurveyRepository,
    InMemoryUserStageStore,
    StaticWidgetCapabilities,
)
from database.repositories import (
    AppSettingsRepository,
    DismissedCtaRepository,
    SurveyRepository,
    UserStageRepository,
)
from domain.repositories import IWidgetCapabilities


def create_cta_view_model(
    session: AsyncSession,
    widget_capabilities: IWidgetCapabilities,
    pixel: Optional[Pixel] = None,
    settings: Optional[CtaSettings] = None,
) -> CtaViewModel:
    """
    Build a view model backed by the database.

    Args:
        session: Async session shared by every repository
        widget_capabilities: Platform widget probe
        pixel: Analytics sink (defaults to LoggingPixel)
        settings: CTA settings (defaults to environment)
    """
    app_settings = AppSettingsRepository(session)
    return CtaViewModel(
        app_install_store=app_settings,
        pixel=pixel or LoggingPixel(),
        survey_repository=SurveyRepository(session),
        widget_capabilities=widget_capabilities,
        dismissed_cta_repository=DismissedCtaRepository(session),
        settings_store=app_settings,
        onboarding_store=app_settings,
        privacy_settings_store=app_settings,
        user_stage_store=UserStageRepository(session),
        settings=settings,
    )


def create_in_memory_cta_view_model(
    pixel: Optional[Pixel] = None,
    settings: Optional[CtaSettings] = None,
    widget_capabilities: Optional[IWidgetCapabilities] = None,
) -> CtaViewModel:
    """Build a view model over fresh in-memory stores."""
    app_settings = InMemorySettingsStore()
    return CtaViewModel(
        app_install_store=app_settings,
        pixel=pixel or LoggingPixel(),
        survey_repository=InMemorySurveyRepository(),
        widget_capabilities=widget_capabilities or StaticWidgetCapabilities(),
        dismissed_cta_repository=InMemoryDismissedCtaRepository(),
        settings_store=app_settings,
        onboarding_store=app_settings,
        privacy_settings_store=app_settings,
        user_stage_store=InMemoryUserStageStore(),
        settings=settings,
    )
