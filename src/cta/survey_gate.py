"""Survey Gate.

Decides which survey, if any, can be offered as a home panel CTA.

The gate itself is a passthrough over the survey feed. Eligibility
(status and install age) is checked by SurveyEligibility before a survey
reaches the gate.
"""

import logging
import time
from typing import Optional

from domain.models import Survey, SurveyStatus

logger = logging.getLogger(__name__)

MILLIS_PER_DAY = 24 * 60 * 60 * 1000


def days_installed(install_timestamp_ms: Optional[int], now_ms: Optional[int] = None) -> int:
    """
    Whole days elapsed since install.

    Args:
        install_timestamp_ms: Epoch millis of first install (None when not recorded yet)
        now_ms: Current epoch millis (defaults to the wall clock)

    Returns:
        Number of full days, never negative
    """
    if install_timestamp_ms is None:
        return 0
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return max((now_ms - install_timestamp_ms) // MILLIS_PER_DAY, 0)


def on_survey_changed(survey: Optional[Survey]) -> Optional[Survey]:
    """Return the survey to offer for the given feed value."""
    return survey


class SurveyEligibility:
    """
    Install-age and status gate for surveys.

    A survey is eligible when it is scheduled and the app has been
    installed for at least max(min_days_installed, day_of_installation)
    whole days.
    """

    def __init__(self, min_days_installed: int = 1):
        self.min_days_installed = min_days_installed

    def is_eligible(
        self,
        survey: Optional[Survey],
        install_timestamp_ms: Optional[int],
        now_ms: Optional[int] = None,
    ) -> bool:
        if survey is None or survey.status != SurveyStatus.SCHEDULED:
            return False

        required_days = max(self.min_days_installed, survey.day_of_installation or 0)
        installed_for = days_installed(install_timestamp_ms, now_ms)
        if installed_for < required_days:
            logger.debug(
                f"Survey {survey.id} not eligible yet: "
                f"installed {installed_for}d, needs {required_days}d"
            )
            return False
        return True
