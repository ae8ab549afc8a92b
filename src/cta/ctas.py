"""
CTA variants.

A CTA is one of a closed set of frozen dataclasses. Every variant carries
a ``kind`` discriminant (which surface renders it), its ledger ``cta_id``,
and the pixels fired when it is shown, accepted or dismissed. Variant
payloads hold only what is needed to render the prompt.

Dax dialogs additionally offer a secondary "hide tips" button; callers
check for it with has_secondary_button() rather than by type.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple

from analytics.pixel import PixelName, PixelParameter
from domain.models import CtaId, Survey


class CtaKind(str, Enum):
    """Surface on which a CTA is rendered."""
    DAX_BUBBLE = "dax_bubble"
    DAX_DIALOG = "dax_dialog"
    HOME_PANEL = "home_panel"
    HOME_TOP_PANEL = "home_top_panel"


DAX_KINDS = (CtaKind.DAX_BUBBLE, CtaKind.DAX_DIALOG)


@dataclass(frozen=True)
class Cta:
    """Base of every CTA variant."""
    kind: ClassVar[CtaKind]
    cta_id: ClassVar[CtaId] = CtaId.UNKNOWN
    shown_pixel: ClassVar[Optional[PixelName]] = None
    ok_pixel: ClassVar[Optional[PixelName]] = None
    cancel_pixel: ClassVar[Optional[PixelName]] = None
    secondary_button_pixel: ClassVar[Optional[PixelName]] = None
    # Short marker recorded in the onboarding dialog journey (Dax only)
    journey_marker: ClassVar[Optional[str]] = None

    @property
    def is_dax(self) -> bool:
        return self.kind in DAX_KINDS

    def pixel_ok_parameters(self) -> Dict[str, str]:
        if self.journey_marker:
            return {PixelParameter.CTA_SHOWN: self.journey_marker}
        return {}

    def pixel_cancel_parameters(self) -> Dict[str, str]:
        return self.pixel_ok_parameters()


# =============================================================================
# DAX BUBBLES (home tab)
# =============================================================================

@dataclass(frozen=True)
class DaxIntroCta(Cta):
    kind: ClassVar[CtaKind] = CtaKind.DAX_BUBBLE
    cta_id: ClassVar[CtaId] = CtaId.DAX_INTRO
    shown_pixel: ClassVar[Optional[PixelName]] = PixelName.ONBOARDING_DAX_CTA_SHOWN
    journey_marker: ClassVar[Optional[str]] = "i"


@dataclass(frozen=True)
class DaxEndCta(Cta):
    kind: ClassVar[CtaKind] = CtaKind.DAX_BUBBLE
    cta_id: ClassVar[CtaId] = CtaId.DAX_END
    shown_pixel: ClassVar[Optional[PixelName]] = PixelName.ONBOARDING_DAX_CTA_SHOWN
    journey_marker: ClassVar[Optional[str]] = "e"


# =============================================================================
# DAX DIALOGS (while browsing)
# =============================================================================

@dataclass(frozen=True)
class DaxDialogCta(Cta):
    kind: ClassVar[CtaKind] = CtaKind.DAX_DIALOG
    shown_pixel: ClassVar[Optional[PixelName]] = PixelName.ONBOARDING_DAX_CTA_SHOWN
    ok_pixel: ClassVar[Optional[PixelName]] = PixelName.ONBOARDING_DAX_CTA_OK_BUTTON
    secondary_button_pixel: ClassVar[Optional[PixelName]] = PixelName.ONBOARDING_DAX_ALL_CTA_HIDDEN


@dataclass(frozen=True)
class DaxSerpCta(DaxDialogCta):
    cta_id: ClassVar[CtaId] = CtaId.DAX_DIALOG_SERP
    journey_marker: ClassVar[Optional[str]] = "s"


@dataclass(frozen=True)
class DaxNoSerpCta(DaxDialogCta):
    cta_id: ClassVar[CtaId] = CtaId.DAX_DIALOG_OTHER
    journey_marker: ClassVar[Optional[str]] = "o"


@dataclass(frozen=True)
class DaxMainNetworkCta(DaxDialogCta):
    cta_id: ClassVar[CtaId] = CtaId.DAX_DIALOG_NETWORK
    journey_marker: ClassVar[Optional[str]] = "n"

    network: str = ""
    site_host: str = ""

    @property
    def is_from_same_network_domain(self) -> bool:
        """True when the page itself belongs to the network (e.g. facebook.com)."""
        return self.network.lower() in self.site_host.lower()


@dataclass(frozen=True)
class DaxTrackersBlockedCta(DaxDialogCta):
    cta_id: ClassVar[CtaId] = CtaId.DAX_DIALOG_TRACKERS_FOUND
    journey_marker: ClassVar[Optional[str]] = "t"

    tracker_names: Tuple[str, ...] = field(default_factory=tuple)
    site_host: str = ""

    # Names spelled out in the dialog text; the rest are summarized as a count.
    MAX_NAMED_TRACKERS: ClassVar[int] = 2

    @property
    def named_trackers(self) -> Tuple[str, ...]:
        return self.tracker_names[:self.MAX_NAMED_TRACKERS]

    @property
    def other_trackers_count(self) -> int:
        return max(len(self.tracker_names) - self.MAX_NAMED_TRACKERS, 0)


# =============================================================================
# HOME PANELS
# =============================================================================

@dataclass(frozen=True)
class HomePanelCta(Cta):
    kind: ClassVar[CtaKind] = CtaKind.HOME_PANEL


@dataclass(frozen=True)
class SurveyCta(HomePanelCta):
    cta_id: ClassVar[CtaId] = CtaId.SURVEY
    shown_pixel: ClassVar[Optional[PixelName]] = PixelName.SURVEY_CTA_SHOWN
    ok_pixel: ClassVar[Optional[PixelName]] = PixelName.SURVEY_CTA_LAUNCHED
    cancel_pixel: ClassVar[Optional[PixelName]] = PixelName.SURVEY_CTA_DISMISSED

    survey: Optional[Survey] = None


@dataclass(frozen=True)
class AddWidgetAuto(HomePanelCta):
    cta_id: ClassVar[CtaId] = CtaId.ADD_WIDGET
    shown_pixel: ClassVar[Optional[PixelName]] = PixelName.WIDGET_CTA_SHOWN
    ok_pixel: ClassVar[Optional[PixelName]] = PixelName.WIDGET_CTA_LAUNCHED
    cancel_pixel: ClassVar[Optional[PixelName]] = PixelName.WIDGET_CTA_DISMISSED


@dataclass(frozen=True)
class AddWidgetInstructions(HomePanelCta):
    cta_id: ClassVar[CtaId] = CtaId.ADD_WIDGET
    shown_pixel: ClassVar[Optional[PixelName]] = PixelName.WIDGET_LEGACY_CTA_SHOWN
    ok_pixel: ClassVar[Optional[PixelName]] = PixelName.WIDGET_LEGACY_CTA_LAUNCHED
    cancel_pixel: ClassVar[Optional[PixelName]] = PixelName.WIDGET_LEGACY_CTA_DISMISSED


@dataclass(frozen=True)
class CovidCta(Cta):
    kind: ClassVar[CtaKind] = CtaKind.HOME_TOP_PANEL
    cta_id: ClassVar[CtaId] = CtaId.COVID
    shown_pixel: ClassVar[Optional[PixelName]] = PixelName.COVID_CTA_SHOWN
    ok_pixel: ClassVar[Optional[PixelName]] = PixelName.COVID_CTA_LAUNCHED


def has_secondary_button(cta: Cta) -> bool:
    """Whether the CTA renders a secondary button with its own pixel."""
    return getattr(cta, "secondary_button_pixel", None) is not None


def is_survey(cta: Cta) -> bool:
    return cta.cta_id == CtaId.SURVEY
