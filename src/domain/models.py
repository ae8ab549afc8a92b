"""
Core records shared by the CTA engine.

Ids, onboarding stages, surveys, ledger records and the widget
capability snapshot. Everything here is an immutable value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CtaId(str, Enum):
    """Stable identifiers of every CTA. Values are persisted in the ledger."""
    DAX_INTRO = "DAX_INTRO"
    DAX_DIALOG_SERP = "DAX_DIALOG_SERP"
    DAX_DIALOG_TRACKERS_FOUND = "DAX_DIALOG_TRACKERS_FOUND"
    DAX_DIALOG_NETWORK = "DAX_DIALOG_NETWORK"
    DAX_DIALOG_OTHER = "DAX_DIALOG_OTHER"
    DAX_END = "DAX_END"
    SURVEY = "SURVEY"
    ADD_WIDGET = "ADD_WIDGET"
    COVID = "COVID"
    UNKNOWN = "UNKNOWN"


# Every one of these must be in the ledger before Dax onboarding is complete.
REQUIRED_DAX_ONBOARDING_CTAS = (
    CtaId.DAX_INTRO,
    CtaId.DAX_DIALOG_SERP,
    CtaId.DAX_DIALOG_TRACKERS_FOUND,
    CtaId.DAX_DIALOG_NETWORK,
    CtaId.DAX_END,
)

# Dialogs shown while browsing during Dax onboarding.
DAX_DIALOG_CTAS = (
    CtaId.DAX_DIALOG_SERP,
    CtaId.DAX_DIALOG_TRACKERS_FOUND,
    CtaId.DAX_DIALOG_NETWORK,
    CtaId.DAX_DIALOG_OTHER,
)


class AppStage(str, Enum):
    """Coarse onboarding progress. Only ever moves forward."""
    NEW = "NEW"
    DAX_ONBOARDING = "DAX_ONBOARDING"
    ESTABLISHED = "ESTABLISHED"

    @property
    def order(self) -> int:
        return _STAGE_ORDER.index(self)

    def next_stage(self) -> "AppStage":
        """Stage that follows this one once it is completed."""
        position = self.order
        if position + 1 < len(_STAGE_ORDER):
            return _STAGE_ORDER[position + 1]
        return self

    def is_beyond(self, other: "AppStage") -> bool:
        return self.order > other.order


_STAGE_ORDER = [AppStage.NEW, AppStage.DAX_ONBOARDING, AppStage.ESTABLISHED]


class SurveyStatus(str, Enum):
    """Lifecycle of a survey in the survey store."""
    NOT_ALLOCATED = "NOT_ALLOCATED"
    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"
    DONE = "DONE"


@dataclass(frozen=True)
class Survey:
    """A survey offer owned by the survey store."""
    id: str
    url: Optional[str]
    day_of_installation: Optional[int]
    status: SurveyStatus


@dataclass(frozen=True)
class DismissedCta:
    """Ledger record: this CTA has been shown or dismissed at least once."""
    cta_id: CtaId


@dataclass(frozen=True)
class WidgetCapabilities:
    """What the host platform allows for home screen widgets."""
    supports_standard_widget_add: bool = False
    supports_automatic_widget_add: bool = False
    has_installed_widgets: bool = False
