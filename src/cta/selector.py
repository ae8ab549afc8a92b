"""
CTA Selector.

Pure decision procedure: given a fully resolved CtaStateSnapshot (and the
page being browsed, if any) return the single CTA to show, or None.
Branches are evaluated in priority order and the first match wins.

Selection never raises. Missing or inconsistent input means "no CTA".
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from cta.ctas import (
    AddWidgetAuto,
    AddWidgetInstructions,
    CovidCta,
    Cta,
    DaxEndCta,
    DaxIntroCta,
    DaxMainNetworkCta,
    DaxNoSerpCta,
    DaxSerpCta,
    DaxTrackersBlockedCta,
    SurveyCta,
)
from domain.models import (
    DAX_DIALOG_CTAS,
    REQUIRED_DAX_ONBOARDING_CTAS,
    AppStage,
    CtaId,
    Survey,
    WidgetCapabilities,
)
from cta.site import Site, extract_site_signals


@dataclass(frozen=True)
class CtaStateSnapshot:
    """Everything the selector reads, resolved up front."""
    app_stage: AppStage
    shown_ctas: FrozenSet[CtaId] = frozenset()
    hide_tips: bool = False
    privacy_on: bool = True
    widget_capabilities: WidgetCapabilities = field(default_factory=WidgetCapabilities)
    survey: Optional[Survey] = None

    def was_shown(self, cta_id: CtaId) -> bool:
        return cta_id in self.shown_ctas

    @property
    def all_required_dax_shown(self) -> bool:
        return all(cta_id in self.shown_ctas for cta_id in REQUIRED_DAX_ONBOARDING_CTAS)

    @property
    def any_dax_dialog_shown(self) -> bool:
        return any(cta_id in self.shown_ctas for cta_id in DAX_DIALOG_CTAS)

    @property
    def dax_journey_finished(self) -> bool:
        """Intro and end bubbles have both been shown."""
        return self.was_shown(CtaId.DAX_INTRO) and self.was_shown(CtaId.DAX_END)


def select_cta(
    snapshot: CtaStateSnapshot,
    is_browser_showing: bool,
    site: Optional[Site] = None,
    serp_domain: str = "duckduckgo.com",
    main_networks: Iterable[str] = ("Facebook", "Google"),
) -> Optional[Cta]:
    """
    Pick the CTA to show.

    Args:
        snapshot: Resolved engine state
        is_browser_showing: True when a page is loaded, False on the home tab
        site: Page being browsed
        serp_domain: Search results domain
        main_networks: Entity display names treated as major networks

    Returns:
        The CTA to show, or None
    """
    # Onboarding was closed without going through every dialog: never resume it.
    if snapshot.app_stage.is_beyond(AppStage.DAX_ONBOARDING) and not snapshot.all_required_dax_shown:
        return None

    if is_browser_showing:
        return _browser_cta(snapshot, site, serp_domain, main_networks)
    return _home_cta(snapshot)


def _browser_cta(
    snapshot: CtaStateSnapshot,
    site: Optional[Site],
    serp_domain: str,
    main_networks: Iterable[str],
) -> Optional[Cta]:
    if not snapshot.privacy_on:
        return None
    if site is None:
        return None
    if snapshot.hide_tips:
        return None
    if snapshot.app_stage != AppStage.DAX_ONBOARDING:
        return None

    signals = extract_site_signals(site, serp_domain, main_networks)
    host = signals.host or ""

    if signals.is_serp:
        return DaxSerpCta()
    if signals.has_major_network:
        return DaxMainNetworkCta(network=signals.network_name, site_host=host)
    if signals.has_tracking_events:
        return DaxTrackersBlockedCta(tracker_names=signals.tracker_entity_names, site_host=host)
    return DaxNoSerpCta()


def _home_cta(snapshot: CtaStateSnapshot) -> Optional[Cta]:
    if snapshot.survey is not None:
        return SurveyCta(survey=snapshot.survey)

    if snapshot.hide_tips:
        return _widget_cta(snapshot.widget_capabilities)

    if snapshot.app_stage == AppStage.DAX_ONBOARDING and not snapshot.dax_journey_finished:
        if not snapshot.was_shown(CtaId.DAX_INTRO):
            return DaxIntroCta()
        if snapshot.any_dax_dialog_shown:
            return DaxEndCta()
        return None

    if snapshot.dax_journey_finished:
        return _widget_cta(snapshot.widget_capabilities)

    return None


def _widget_cta(capabilities: WidgetCapabilities) -> Cta:
    if not capabilities.supports_standard_widget_add:
        return CovidCta()
    # Offered even when a widget is already installed.
    if capabilities.supports_automatic_widget_add:
        return AddWidgetAuto()
    return AddWidgetInstructions()
