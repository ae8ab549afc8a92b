"""Tests for CtaViewModel: selection through refresh_cta and the CTA lifecycle."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from analytics.pixel import PixelName, PixelParameter
from cta.ctas import (
    AddWidgetAuto,
    AddWidgetInstructions,
    CovidCta,
    DaxDialogCta,
    DaxEndCta,
    DaxIntroCta,
    DaxMainNetworkCta,
    DaxNoSerpCta,
    DaxSerpCta,
    DaxTrackersBlockedCta,
    SurveyCta,
)
from cta.site import Entity, Site, TrackingEvent
from database.in_memory import StaticWidgetCapabilities
from domain.models import (
    REQUIRED_DAX_ONBOARDING_CTAS,
    AppStage,
    CtaId,
    DismissedCta,
    Survey,
    SurveyStatus,
)

SCHEDULED_SURVEY = Survey("abc", "http://example.com", 1, SurveyStatus.SCHEDULED)
NOW_MS = 1_700_000_000_000


def fired(mock_pixel):
    """Names of every pixel fired on a MagicMock pixel, in order."""
    return [c.args[0] for c in mock_pixel.fire.call_args_list]


def facebook_site():
    return Site(url="http://www.facebook.com", entity=Entity("Facebook", "Facebook", 9.0))


class TestOnSurveyChanged:
    """Tests for the survey feed callback."""

    def test_scheduled_survey_is_returned(self, view_model):
        """A scheduled survey is passed through unchanged."""
        survey = Survey("abc", "http://example.com", 1, SurveyStatus.SCHEDULED)
        assert view_model.on_survey_changed(survey) == survey

    def test_no_survey_returns_none(self, view_model):
        assert view_model.on_survey_changed(None) is None


class TestOnCtaShown:
    """Tests for shown pixels."""

    @pytest.mark.asyncio
    async def test_dax_cta_already_in_journey_does_not_fire(self, view_model, settings_store, mock_pixel):
        """A Dax CTA whose marker is already in the journey fires nothing."""
        settings_store.onboarding_dialog_journey = "i:0"

        await view_model.on_cta_shown(DaxIntroCta())

        mock_pixel.fire.assert_not_called()
        assert settings_store.onboarding_dialog_journey == "i:0"

    @pytest.mark.asyncio
    async def test_dax_cta_not_in_journey_fires_and_appends(self, view_model, settings_store, mock_pixel):
        """The shown pixel carries the journey including the new entry."""
        settings_store.onboarding_dialog_journey = "s:0"

        await view_model.on_cta_shown(DaxEndCta())

        assert settings_store.onboarding_dialog_journey == "s:0-e:1"
        mock_pixel.fire.assert_called_once_with(
            PixelName.ONBOARDING_DAX_CTA_SHOWN,
            {PixelParameter.CTA_SHOWN: "s:0-e:1"},
        )

    @pytest.mark.asyncio
    async def test_first_dax_cta_starts_journey(self, view_model, settings_store):
        await view_model.on_cta_shown(DaxSerpCta())
        assert settings_store.onboarding_dialog_journey == "s:1"

    @pytest.mark.asyncio
    async def test_dax_cta_shown_twice_fires_once(self, view_model, mock_pixel):
        await view_model.on_cta_shown(DaxNoSerpCta())
        await view_model.on_cta_shown(DaxNoSerpCta())
        assert fired(mock_pixel) == [PixelName.ONBOARDING_DAX_CTA_SHOWN]

    @pytest.mark.asyncio
    async def test_non_dax_cta_always_fires(self, view_model, mock_pixel):
        """Non-Dax CTAs fire their shown pixel without a journey check."""
        await view_model.on_cta_shown(SurveyCta(survey=SCHEDULED_SURVEY))
        await view_model.on_cta_shown(SurveyCta(survey=SCHEDULED_SURVEY))
        assert fired(mock_pixel) == [PixelName.SURVEY_CTA_SHOWN, PixelName.SURVEY_CTA_SHOWN]


class TestButtonClicks:
    """Tests for OK and secondary button pixels."""

    def test_ok_button_fires_launch_pixel(self, view_model, mock_pixel):
        view_model.on_user_click_cta_ok_button(SurveyCta(survey=SCHEDULED_SURVEY))
        assert fired(mock_pixel) == [PixelName.SURVEY_CTA_LAUNCHED]

    def test_ok_button_on_dax_dialog_carries_marker(self, view_model, mock_pixel):
        view_model.on_user_click_cta_ok_button(DaxSerpCta())
        mock_pixel.fire.assert_called_once_with(
            PixelName.ONBOARDING_DAX_CTA_OK_BUTTON,
            {PixelParameter.CTA_SHOWN: "s"},
        )

    def test_secondary_button_fires_its_pixel(self, view_model, mock_pixel):
        """Any CTA exposing a secondary button pixel fires that pixel."""
        cta = MagicMock()
        cta.secondary_button_pixel = PixelName.ONBOARDING_DAX_ALL_CTA_HIDDEN

        view_model.on_user_click_cta_secondary_button(cta)

        assert fired(mock_pixel) == [PixelName.ONBOARDING_DAX_ALL_CTA_HIDDEN]

    def test_secondary_button_without_capability_fires_nothing(self, view_model, mock_pixel):
        view_model.on_user_click_cta_secondary_button(AddWidgetAuto())
        mock_pixel.fire.assert_not_called()


class TestOnUserDismissedCta:
    """Tests for dismissals."""

    @pytest.mark.asyncio
    async def test_dismiss_fires_cancel_pixel(self, view_model, mock_pixel):
        await view_model.on_user_dismissed_cta(SurveyCta(survey=SCHEDULED_SURVEY))
        assert PixelName.SURVEY_CTA_DISMISSED in fired(mock_pixel)

    @pytest.mark.asyncio
    async def test_survey_dismiss_cancels_surveys_without_ledger_write(
        self, view_model, survey_repository, ledger
    ):
        """Dismissing a survey cancels scheduled surveys and never touches the ledger."""
        survey_repository.cancel_scheduled_surveys = AsyncMock()
        ledger.insert = AsyncMock()

        await view_model.on_user_dismissed_cta(SurveyCta(survey=SCHEDULED_SURVEY))

        survey_repository.cancel_scheduled_surveys.assert_awaited_once()
        ledger.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_survey_dismiss_writes_ledger(self, view_model, ledger):
        await view_model.on_user_dismissed_cta(AddWidgetAuto())
        assert ledger.dismissed == {CtaId.ADD_WIDGET}

    @pytest.mark.asyncio
    async def test_dax_dismiss_fires_no_pixel(self, view_model, mock_pixel):
        await view_model.on_user_dismissed_cta(DaxSerpCta())
        mock_pixel.fire.assert_not_called()

    @pytest.mark.asyncio
    async def test_pending_onboarding_ctas_keep_stage(self, view_model, stage_store):
        """Stage is not completed while required Dax CTAs are missing."""
        stage_store.stage_completed = AsyncMock()

        await view_model.on_user_dismissed_cta(DaxEndCta())

        stage_store.stage_completed.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_onboarding_ctas_shown_completes_stage(self, view_model, ledger, stage_store):
        """The last required dismissal moves the user out of Dax onboarding."""
        await stage_store.stage_completed(AppStage.NEW)
        for cta_id in REQUIRED_DAX_ONBOARDING_CTAS:
            if cta_id != CtaId.DAX_DIALOG_SERP:
                await ledger.insert(DismissedCta(cta_id))

        await view_model.on_user_dismissed_cta(DaxSerpCta())

        assert await stage_store.get_user_app_stage() == AppStage.ESTABLISHED

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, view_model, ledger):
        ledger.insert = AsyncMock(side_effect=IOError("disk full"))
        with pytest.raises(IOError):
            await view_model.on_user_dismissed_cta(AddWidgetAuto())


class TestHideTipsForever:
    """Tests for hide_tips_forever."""

    @pytest.mark.asyncio
    async def test_fires_all_hidden_pixel_with_cta_id(self, view_model, mock_pixel):
        await view_model.hide_tips_forever(AddWidgetAuto())
        mock_pixel.fire.assert_called_once_with(
            PixelName.ONBOARDING_DAX_ALL_CTA_HIDDEN,
            {PixelParameter.CTA_SHOWN: CtaId.ADD_WIDGET.value},
        )

    @pytest.mark.asyncio
    async def test_sets_hide_tips(self, view_model, settings_store):
        await view_model.hide_tips_forever(AddWidgetAuto())
        assert settings_store.hide_tips is True

    @pytest.mark.asyncio
    async def test_completes_dax_onboarding_regardless_of_progress(self, view_model, stage_store):
        stage_store.stage_completed = AsyncMock(return_value=AppStage.ESTABLISHED)
        await view_model.hide_tips_forever(AddWidgetAuto())
        stage_store.stage_completed.assert_awaited_once_with(AppStage.DAX_ONBOARDING)


class TestRegisterDaxBubbleCtaDismissed:
    """Tests for register_dax_bubble_cta_dismissed."""

    @pytest.mark.asyncio
    async def test_intro_is_recorded(self, view_model, ledger):
        await view_model.register_dax_bubble_cta_dismissed(DaxIntroCta())
        assert await ledger.exists(CtaId.DAX_INTRO)

    @pytest.mark.asyncio
    async def test_end_is_recorded(self, view_model, ledger):
        await view_model.register_dax_bubble_cta_dismissed(DaxEndCta())
        assert await ledger.exists(CtaId.DAX_END)

    @pytest.mark.asyncio
    async def test_pending_onboarding_ctas_keep_stage(self, view_model, stage_store):
        stage_store.stage_completed = AsyncMock()
        await view_model.register_dax_bubble_cta_dismissed(DaxEndCta())
        stage_store.stage_completed.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_onboarding_ctas_shown_completes_stage(self, view_model, ledger, stage_store):
        for cta_id in REQUIRED_DAX_ONBOARDING_CTAS:
            await ledger.insert(DismissedCta(cta_id))
        stage_store.stage_completed = AsyncMock(return_value=AppStage.ESTABLISHED)

        await view_model.register_dax_bubble_cta_dismissed(DaxEndCta())

        stage_store.stage_completed.assert_awaited_once_with(AppStage.DAX_ONBOARDING)

    @pytest.mark.asyncio
    async def test_fires_no_pixel(self, view_model, mock_pixel):
        await view_model.register_dax_bubble_cta_dismissed(DaxIntroCta())
        mock_pixel.fire.assert_not_called()


class TestRefreshCtaWhileBrowsing:
    """Tests for refresh_cta with a page loaded."""

    @pytest.fixture
    def onboarding(self, stage_store):
        stage_store.stage = AppStage.DAX_ONBOARDING
        return stage_store

    @pytest.mark.asyncio
    async def test_no_site_returns_none(self, view_model, dispatcher):
        assert await view_model.refresh_cta(dispatcher, is_browser_showing=True, site=None) is None

    @pytest.mark.asyncio
    async def test_hide_tips_returns_none(self, view_model, dispatcher, settings_store, onboarding):
        settings_store.hide_tips = True
        value = await view_model.refresh_cta(dispatcher, True, facebook_site())
        assert value is None

    @pytest.mark.asyncio
    async def test_privacy_off_returns_none(self, view_model, dispatcher, settings_store, onboarding):
        settings_store.privacy_on = False
        value = await view_model.refresh_cta(dispatcher, True, facebook_site())
        assert value is None

    @pytest.mark.asyncio
    async def test_stage_not_onboarding_returns_none(self, view_model, dispatcher):
        value = await view_model.refresh_cta(dispatcher, True, facebook_site())
        assert value is None

    @pytest.mark.asyncio
    async def test_major_network_site_returns_network_cta(self, view_model, dispatcher, onboarding):
        value = await view_model.refresh_cta(dispatcher, True, facebook_site())
        assert isinstance(value, DaxMainNetworkCta)
        assert value.network == "Facebook"

    @pytest.mark.asyncio
    async def test_tracking_events_return_trackers_blocked_cta(self, view_model, dispatcher, onboarding):
        event = TrackingEvent("test.com", "test.com", None, Entity("test", "test", 9.0), True)
        site = Site(url="http://www.cnn.com", tracker_count=1, tracking_events=[event])

        value = await view_model.refresh_cta(dispatcher, True, site)

        assert isinstance(value, DaxTrackersBlockedCta)
        assert value.tracker_names == ("test",)

    @pytest.mark.asyncio
    async def test_tracker_count_without_events_returns_no_serp_cta(self, view_model, dispatcher, onboarding):
        site = Site(url="http://www.cnn.com", tracker_count=1)
        assert isinstance(await view_model.refresh_cta(dispatcher, True, site), DaxNoSerpCta)

    @pytest.mark.asyncio
    async def test_serp_returns_serp_cta(self, view_model, dispatcher, onboarding):
        site = Site(url="http://www.duckduckgo.com")
        assert isinstance(await view_model.refresh_cta(dispatcher, True, site), DaxSerpCta)

    @pytest.mark.asyncio
    async def test_plain_site_returns_no_serp_cta(self, view_model, dispatcher, onboarding):
        site = Site(url="http://www.wikipedia.com")
        assert isinstance(await view_model.refresh_cta(dispatcher, True, site), DaxNoSerpCta)

    @pytest.mark.asyncio
    async def test_onboarding_closed_early_returns_none(self, view_model, dispatcher, ledger, stage_store):
        """Established users who skipped part of onboarding never see Dax dialogs again."""
        await ledger.insert(DismissedCta(CtaId.DAX_INTRO))
        stage_store.stage = AppStage.ESTABLISHED

        assert await view_model.refresh_cta(dispatcher, True, facebook_site()) is None

    @pytest.mark.asyncio
    async def test_survey_not_read_while_browsing(self, view_model, dispatcher, survey_repository, onboarding):
        survey_repository.get_scheduled_survey = AsyncMock(return_value=SCHEDULED_SURVEY)
        await view_model.refresh_cta(dispatcher, True, Site(url="http://www.wikipedia.com"))
        survey_repository.get_scheduled_survey.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refresh_writes_nothing(self, view_model, dispatcher, ledger, settings_store, mock_pixel, onboarding):
        await view_model.refresh_cta(dispatcher, True, facebook_site())
        assert ledger.dismissed == set()
        assert settings_store.onboarding_dialog_journey is None
        mock_pixel.fire.assert_not_called()


class TestRefreshCtaOnHomeTab:
    """Tests for refresh_cta on the home tab."""

    @pytest.fixture
    def onboarding(self, stage_store):
        stage_store.stage = AppStage.DAX_ONBOARDING
        return stage_store

    @pytest.mark.asyncio
    async def test_hide_tips_without_widget_support_returns_covid(self, view_model, dispatcher, settings_store):
        settings_store.hide_tips = True
        assert isinstance(await view_model.refresh_cta(dispatcher, False), CovidCta)

    @pytest.mark.asyncio
    async def test_hide_tips_with_automatic_widget_returns_widget_auto(
        self, view_model_factory, dispatcher, settings_store
    ):
        settings_store.hide_tips = True
        view_model = view_model_factory(StaticWidgetCapabilities(True, True, False))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), AddWidgetAuto)

    @pytest.mark.asyncio
    async def test_widget_auto_offered_with_installed_widgets(
        self, view_model_factory, dispatcher, settings_store
    ):
        settings_store.hide_tips = True
        view_model = view_model_factory(StaticWidgetCapabilities(True, True, True))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), AddWidgetAuto)

    @pytest.mark.asyncio
    async def test_hide_tips_with_manual_widget_returns_instructions(
        self, view_model_factory, dispatcher, settings_store
    ):
        settings_store.hide_tips = True
        view_model = view_model_factory(StaticWidgetCapabilities(True, False, False))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), AddWidgetInstructions)

    @pytest.mark.asyncio
    async def test_home_tab_never_returns_dax_dialog(self, view_model, dispatcher, onboarding):
        value = await view_model.refresh_cta(dispatcher, False, Site(url="http://www.wikipedia.com"))
        assert not isinstance(value, DaxDialogCta)

    @pytest.mark.asyncio
    async def test_intro_not_shown_returns_intro(self, view_model, dispatcher, ledger, onboarding):
        await ledger.insert(DismissedCta(CtaId.DAX_DIALOG_SERP))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), DaxIntroCta)

    @pytest.mark.asyncio
    async def test_intro_and_dialog_shown_returns_end(self, view_model, dispatcher, ledger, onboarding):
        await ledger.insert(DismissedCta(CtaId.DAX_INTRO))
        await ledger.insert(DismissedCta(CtaId.DAX_DIALOG_TRACKERS_FOUND))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), DaxEndCta)

    @pytest.mark.asyncio
    async def test_intro_shown_without_dialog_returns_none(self, view_model, dispatcher, ledger, onboarding):
        await ledger.insert(DismissedCta(CtaId.DAX_INTRO))
        assert await view_model.refresh_cta(dispatcher, False) is None

    @pytest.mark.asyncio
    async def test_dax_end_shown_returns_covid(self, view_model, dispatcher, ledger):
        await ledger.insert(DismissedCta(CtaId.DAX_INTRO))
        await ledger.insert(DismissedCta(CtaId.DAX_END))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), CovidCta)

    @pytest.mark.asyncio
    async def test_onboarding_closed_early_returns_none(self, view_model, dispatcher, ledger, stage_store):
        await ledger.insert(DismissedCta(CtaId.DAX_INTRO))
        stage_store.stage = AppStage.ESTABLISHED
        assert await view_model.refresh_cta(dispatcher, False) is None

    @pytest.mark.asyncio
    async def test_eligible_survey_wins(self, view_model, dispatcher, survey_repository, settings_store, onboarding):
        """A scheduled survey beats every other home tab CTA."""
        settings_store.hide_tips = True
        survey_repository.add(SCHEDULED_SURVEY)

        value = await view_model.refresh_cta(dispatcher, False)

        assert isinstance(value, SurveyCta)
        assert value.survey == SCHEDULED_SURVEY

    @pytest.mark.asyncio
    async def test_survey_too_early_is_skipped(self, view_model, dispatcher, survey_repository, onboarding):
        survey_repository.add(Survey("late", "http://example.com", 5, SurveyStatus.SCHEDULED))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), DaxIntroCta)

    @pytest.mark.asyncio
    async def test_cancelled_survey_is_not_offered(self, view_model, dispatcher, survey_repository, onboarding):
        survey_repository.add(SCHEDULED_SURVEY)
        await view_model.on_user_dismissed_cta(SurveyCta(survey=SCHEDULED_SURVEY))
        assert isinstance(await view_model.refresh_cta(dispatcher, False), DaxIntroCta)

    @pytest.mark.asyncio
    async def test_install_time_not_read_without_survey(self, view_model, dispatcher, settings_store, onboarding):
        settings_store.get_install_timestamp = AsyncMock(return_value=NOW_MS)
        await view_model.refresh_cta(dispatcher, False)
        settings_store.get_install_timestamp.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_install_time_defers_survey(
        self, view_model, dispatcher, survey_repository, settings_store, onboarding
    ):
        settings_store.install_timestamp = None
        survey_repository.add(SCHEDULED_SURVEY)
        assert isinstance(await view_model.refresh_cta(dispatcher, False), DaxIntroCta)


class TestOnAppLaunched:
    """Tests for recording the install time."""

    @pytest.mark.asyncio
    async def test_records_when_missing(self, view_model, settings_store):
        settings_store.install_timestamp = None
        assert await view_model.on_app_launched() == NOW_MS
        assert settings_store.install_timestamp == NOW_MS

    @pytest.mark.asyncio
    async def test_keeps_existing(self, view_model, settings_store):
        installed_at = settings_store.install_timestamp
        assert await view_model.on_app_launched() == installed_at
