"""Dax Onboarding Tracker.

Read-only aggregate over the dismissal ledger and the stage store that
answers "has the Dax onboarding sequence been fully shown?" and "is the
user still in Dax onboarding?".
"""

from typing import FrozenSet, Iterable

from domain.models import REQUIRED_DAX_ONBOARDING_CTAS, AppStage, CtaId
from domain.repositories import IDismissedCtaRepository, IUserStageStore


class DaxOnboardingTracker:
    """Tracks progress through the Dax onboarding dialogs."""

    def __init__(
        self,
        dismissed_cta_repository: IDismissedCtaRepository,
        user_stage_store: IUserStageStore,
    ):
        self._ledger = dismissed_cta_repository
        self._stage_store = user_stage_store

    async def has_shown_all_required_dax_onboarding_ctas(self) -> bool:
        """True iff every required Dax CTA has a ledger record."""
        for cta_id in REQUIRED_DAX_ONBOARDING_CTAS:
            if not await self._ledger.exists(cta_id):
                return False
        return True

    async def is_active_stage(self) -> bool:
        return await self._stage_store.get_user_app_stage() == AppStage.DAX_ONBOARDING

    async def shown_ctas(self, cta_ids: Iterable[CtaId]) -> FrozenSet[CtaId]:
        """Subset of `cta_ids` that have a ledger record."""
        shown = set()
        for cta_id in cta_ids:
            if await self._ledger.exists(cta_id):
                shown.add(cta_id)
        return frozenset(shown)
