"""CTA Engine.

Selects the single onboarding/engagement prompt ("CTA") to show in the
browser and manages what happens once it is shown:
- Survey gate and install-age eligibility
- Dax onboarding progress tracking
- Site signal extraction for browsing dialogs
- Priority-ordered CTA selection
- Show / click / dismiss / hide-forever lifecycle
"""

from domain.models import (
    AppStage,
    CtaId,
    DismissedCta,
    Survey,
    SurveyStatus,
    WidgetCapabilities,
    REQUIRED_DAX_ONBOARDING_CTAS,
)
from cta.ctas import (
    Cta,
    CtaKind,
    DaxIntroCta,
    DaxEndCta,
    DaxDialogCta,
    DaxSerpCta,
    DaxNoSerpCta,
    DaxMainNetworkCta,
    DaxTrackersBlockedCta,
    HomePanelCta,
    SurveyCta,
    AddWidgetAuto,
    AddWidgetInstructions,
    CovidCta,
    has_secondary_button,
)
from cta.site import Site, Entity, TrackingEvent, SiteSignals, extract_site_signals
from cta.selector import CtaStateSnapshot, select_cta
from cta.dispatchers import Dispatcher, ImmediateDispatcher, BackgroundLoopDispatcher
from cta.view_model import CtaViewModel

__all__ = [
    "AppStage",
    "CtaId",
    "DismissedCta",
    "Survey",
    "SurveyStatus",
    "WidgetCapabilities",
    "REQUIRED_DAX_ONBOARDING_CTAS",
    "Cta",
    "CtaKind",
    "DaxIntroCta",
    "DaxEndCta",
    "DaxDialogCta",
    "DaxSerpCta",
    "DaxNoSerpCta",
    "DaxMainNetworkCta",
    "DaxTrackersBlockedCta",
    "HomePanelCta",
    "SurveyCta",
    "AddWidgetAuto",
    "AddWidgetInstructions",
    "CovidCta",
    "has_secondary_button",
    "Site",
    "Entity",
    "TrackingEvent",
    "SiteSignals",
    "extract_site_signals",
    "CtaStateSnapshot",
    "select_cta",
    "Dispatcher",
    "ImmediateDispatcher",
    "BackgroundLoopDispatcher",
    "CtaViewModel",
]
