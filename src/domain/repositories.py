"""
Store Interfaces for the CTA engine.

Interfaces define the contract for every collaborator the engine reads
from or writes to. Implementations are provided in the infrastructure
layer (database.repositories for SQLAlchemy, database.in_memory for
tests and local runs).

All persistence calls are async and may suspend the caller. The engine
never caches what they return.
"""

from abc import ABC, abstractmethod
from typing import Optional

from domain.models import AppStage, CtaId, DismissedCta, Survey


class IDismissedCtaRepository(ABC):
    """
    Dismissal ledger.

    Records which CTAs have been shown or dismissed. Records are only
    ever added; inserting an existing id is a no-op.
    """

    @abstractmethod
    async def exists(self, cta_id: CtaId) -> bool:
        """
        Check whether a CTA has a ledger record.

        Args:
            cta_id: CTA identifier

        Returns:
            True if the CTA was shown/dismissed before
        """
        pass

    @abstractmethod
    async def insert(self, dismissed_cta: DismissedCta) -> None:
        """
        Add a ledger record.

        Args:
            dismissed_cta: Record to add
        """
        pass


class ISurveyRepository(ABC):
    """Survey store."""

    @abstractmethod
    async def get_scheduled_survey(self) -> Optional[Survey]:
        """Return the currently scheduled survey, if any."""
        pass

    @abstractmethod
    async def cancel_scheduled_surveys(self) -> None:
        """Mark every scheduled survey as cancelled."""
        pass


class ISettingsStore(ABC):
    """User settings read by the engine."""

    @abstractmethod
    async def get_hide_tips(self) -> bool:
        pass

    @abstractmethod
    async def set_hide_tips(self, hide_tips: bool) -> None:
        pass


class IUserStageStore(ABC):
    """
    Onboarding stage store.

    stage_completed() advances the stored stage to the one after
    `app_stage`, but only when `app_stage` is the current stage; any
    other call is a no-op, so stages never move backwards.
    """

    @abstractmethod
    async def get_user_app_stage(self) -> AppStage:
        pass

    @abstractmethod
    async def stage_completed(self, app_stage: AppStage) -> AppStage:
        """
        Complete a stage.

        Args:
            app_stage: Stage the user has finished

        Returns:
            Stage stored after the call
        """
        pass


class IOnboardingStore(ABC):
    """Onboarding bookkeeping (which Dax dialogs already sent their pixel)."""

    @abstractmethod
    async def get_onboarding_dialog_journey(self) -> Optional[str]:
        pass

    @abstractmethod
    async def set_onboarding_dialog_journey(self, journey: str) -> None:
        pass


class IAppInstallStore(ABC):
    """Install metadata."""

    @abstractmethod
    async def get_install_timestamp(self) -> Optional[int]:
        """Epoch millis of the first install, or None if never recorded."""
        pass

    @abstractmethod
    async def record_install_timestamp(self, timestamp_ms: Optional[int] = None) -> int:
        """
        Record the install time unless one is already stored.

        Args:
            timestamp_ms: Epoch millis to record (defaults to now)

        Returns:
            The stored install timestamp
        """
        pass


class IPrivacySettingsStore(ABC):
    """Global privacy protection switch."""

    @abstractmethod
    async def is_privacy_on(self) -> bool:
        pass


class IWidgetCapabilities(ABC):
    """Home screen widget capability probe. Read-only."""

    @property
    @abstractmethod
    def supports_standard_widget_add(self) -> bool:
        pass

    @property
    @abstractmethod
    def supports_automatic_widget_add(self) -> bool:
        pass

    @property
    @abstractmethod
    def has_installed_widgets(self) -> bool:
        pass
