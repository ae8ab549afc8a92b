"""
CTA View Model.

Entry point used by the browser UI:
- refresh_cta() gathers a fresh CtaStateSnapshot from the stores (through
  a caller-supplied Dispatcher) and asks the selector for the CTA to show.
- on_cta_shown(), on_user_click_*(), on_user_dismissed_cta(),
  register_dax_bubble_cta_dismissed() and hide_tips_forever() handle the
  lifecycle of the CTA the UI rendered: pixels, ledger writes and
  completion of the Dax onboarding stage.

Store failures in lifecycle calls propagate to the caller unchanged.
Pixels are fire-and-forget.
"""

import logging
import time
from typing import Callable, Optional

from analytics.pixel import Pixel, PixelName, PixelParameter
from config.settings import CtaSettings, get_cta_settings
from cta.ctas import Cta, has_secondary_button, is_survey
from cta.dispatchers import Dispatcher
from domain.models import (
    DAX_DIALOG_CTAS,
    REQUIRED_DAX_ONBOARDING_CTAS,
    AppStage,
    CtaId,
    DismissedCta,
    Survey,
    WidgetCapabilities,
)
from cta.onboarding_tracker import DaxOnboardingTracker
from cta.selector import CtaStateSnapshot, select_cta
from cta.site import Site
from cta.survey_gate import SurveyEligibility, days_installed, on_survey_changed
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
from services.logging_config import log_performance

logger = logging.getLogger(__name__)

# Ledger ids the selector needs to know about.
_TRACKED_CTAS = tuple(dict.fromkeys(REQUIRED_DAX_ONBOARDING_CTAS + DAX_DIALOG_CTAS))

JOURNEY_SEPARATOR = "-"


class CtaViewModel:
    """
    Selects CTAs and records what the user did with them.

    Holds no state between calls: every refresh reads the stores again.
    """

    def __init__(
        self,
        app_install_store: IAppInstallStore,
        pixel: Pixel,
        survey_repository: ISurveyRepository,
        widget_capabilities: IWidgetCapabilities,
        dismissed_cta_repository: IDismissedCtaRepository,
        settings_store: ISettingsStore,
        onboarding_store: IOnboardingStore,
        privacy_settings_store: IPrivacySettingsStore,
        user_stage_store: IUserStageStore,
        settings: Optional[CtaSettings] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the view model.

        Args:
            app_install_store: Install timestamp source
            pixel: Analytics sink
            survey_repository: Survey store
            widget_capabilities: Widget capability probe
            dismissed_cta_repository: Dismissal ledger
            settings_store: User settings (hide tips)
            onboarding_store: Dax dialog journey bookkeeping
            privacy_settings_store: Global privacy switch
            user_stage_store: Onboarding stage store
            settings: CTA settings (defaults to environment)
            clock: Callable returning epoch millis (defaults to wall clock)
        """
        self._app_install_store = app_install_store
        self._pixel = pixel
        self._survey_repository = survey_repository
        self._widget_capabilities = widget_capabilities
        self._dismissed_cta_repository = dismissed_cta_repository
        self._settings_store = settings_store
        self._onboarding_store = onboarding_store
        self._privacy_settings_store = privacy_settings_store
        self._user_stage_store = user_stage_store
        self._settings = settings or get_cta_settings()
        self._clock = clock or (lambda: int(time.time() * 1000))

        self._tracker = DaxOnboardingTracker(dismissed_cta_repository, user_stage_store)
        self._survey_eligibility = SurveyEligibility(self._settings.survey_min_days_installed)

    # =========================================================================
    # SELECTION
    # =========================================================================

    def on_survey_changed(self, survey: Optional[Survey]) -> Optional[Survey]:
        """Survey feed callback; returns the survey to offer."""
        return on_survey_changed(survey)

    async def refresh_cta(
        self,
        dispatcher: Dispatcher,
        is_browser_showing: bool,
        site: Optional[Site] = None,
    ) -> Optional[Cta]:
        """
        Compute the CTA to show right now.

        Args:
            dispatcher: Execution context for store reads
            is_browser_showing: True while a page is loaded, False on the home tab
            site: Page being browsed

        Returns:
            The CTA to show, or None
        """
        snapshot = await dispatcher.dispatch(
            lambda: self._gather_state(is_browser_showing)
        )
        cta = select_cta(
            snapshot,
            is_browser_showing,
            site,
            serp_domain=self._settings.serp_domain,
            main_networks=self._settings.main_tracker_networks,
        )
        logger.debug(
            "CTA refreshed",
            extra={'extra_data': {
                'browser_showing': is_browser_showing,
                'stage': snapshot.app_stage.value,
                'cta': cta.cta_id.value if cta else None,
            }}
        )
        return cta

    @log_performance("cta.gather_state")
    async def _gather_state(self, is_browser_showing: bool) -> CtaStateSnapshot:
        survey = None
        if not is_browser_showing:
            survey = await self._current_survey()

        capabilities = WidgetCapabilities(
            supports_standard_widget_add=self._widget_capabilities.supports_standard_widget_add,
            supports_automatic_widget_add=self._widget_capabilities.supports_automatic_widget_add,
            has_installed_widgets=self._widget_capabilities.has_installed_widgets,
        )

        return CtaStateSnapshot(
            app_stage=await self._user_stage_store.get_user_app_stage(),
            shown_ctas=await self._tracker.shown_ctas(_TRACKED_CTAS),
            hide_tips=await self._settings_store.get_hide_tips(),
            privacy_on=await self._privacy_settings_store.is_privacy_on(),
            widget_capabilities=capabilities,
            survey=survey,
        )

    async def _current_survey(self) -> Optional[Survey]:
        survey = await self._survey_repository.get_scheduled_survey()
        if survey is None:
            return None

        install_timestamp = await self._app_install_store.get_install_timestamp()
        if not self._survey_eligibility.is_eligible(survey, install_timestamp, self._clock()):
            return None
        return self.on_survey_changed(survey)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def on_app_launched(self) -> int:
        """Record the install time on first launch; returns the stored value."""
        return await self._app_install_store.record_install_timestamp(self._clock())

    async def on_cta_shown(self, cta: Cta) -> None:
        """Fire the shown pixel; Dax CTAs fire it only once per journey step."""
        if cta.shown_pixel is None:
            return

        if not cta.is_dax:
            self._pixel.fire(cta.shown_pixel, {})
            return

        journey = await self._onboarding_store.get_onboarding_dialog_journey()
        if not _can_send_shown_pixel(cta, journey):
            logger.debug(f"Shown pixel already sent for {cta.cta_id.value}")
            return

        install_timestamp = await self._app_install_store.get_install_timestamp()
        entry = f"{cta.journey_marker}:{days_installed(install_timestamp, self._clock())}"
        journey = f"{journey}{JOURNEY_SEPARATOR}{entry}" if journey else entry
        await self._onboarding_store.set_onboarding_dialog_journey(journey)

        self._pixel.fire(cta.shown_pixel, {PixelParameter.CTA_SHOWN: journey})

    def on_user_click_cta_ok_button(self, cta: Cta) -> None:
        if cta.ok_pixel is not None:
            self._pixel.fire(cta.ok_pixel, cta.pixel_ok_parameters())

    def on_user_click_cta_secondary_button(self, cta: Cta) -> None:
        if has_secondary_button(cta):
            self._pixel.fire(cta.secondary_button_pixel, {})

    async def on_user_dismissed_cta(self, cta: Cta) -> None:
        """
        Record a dismissal.

        Surveys are cancelled in the survey store and never enter the
        ledger. Every other CTA gets a ledger record, which may complete
        the Dax onboarding stage.
        """
        if cta.cancel_pixel is not None:
            self._pixel.fire(cta.cancel_pixel, cta.pixel_cancel_parameters())

        if is_survey(cta):
            await self._survey_repository.cancel_scheduled_surveys()
            logger.info("Scheduled surveys cancelled after survey CTA dismissal")
            return

        await self._register_dismissed(cta.cta_id)

    async def register_dax_bubble_cta_dismissed(self, cta: Cta) -> None:
        """Record a Dax bubble that advanced without an explicit dismissal."""
        await self._register_dismissed(cta.cta_id)

    async def hide_tips_forever(self, cta: Cta) -> None:
        """Silence every tip and close Dax onboarding regardless of progress."""
        self._pixel.fire(
            PixelName.ONBOARDING_DAX_ALL_CTA_HIDDEN,
            {PixelParameter.CTA_SHOWN: cta.cta_id.value},
        )
        await self._settings_store.set_hide_tips(True)
        await self._user_stage_store.stage_completed(AppStage.DAX_ONBOARDING)
        logger.info(f"Tips hidden forever from {cta.cta_id.value}")

    async def _register_dismissed(self, cta_id: CtaId) -> None:
        await self._dismissed_cta_repository.insert(DismissedCta(cta_id))
        logger.info(f"CTA {cta_id.value} recorded as dismissed")

        if await self._tracker.has_shown_all_required_dax_onboarding_ctas():
            await self._user_stage_store.stage_completed(AppStage.DAX_ONBOARDING)
            logger.info("Dax onboarding completed")


def _can_send_shown_pixel(cta: Cta, journey: Optional[str]) -> bool:
    """False once the journey already holds an entry for this CTA's marker."""
    if not journey:
        return True
    for entry in journey.split(JOURNEY_SEPARATOR):
        if entry.split(":", 1)[0] == cta.journey_marker:
            return False
    return True
