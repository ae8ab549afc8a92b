"""
Analytics pixels.

A pixel is a fire-and-forget analytics event identified by a short name
and carrying a small map of string parameters. The CTA engine only
decides *which* pixel to fire; transport is handled by whatever sink is
plugged in behind the Pixel interface.

Sinks must never raise into callers: a failed send is logged and dropped.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PixelName(str, Enum):
    """Analytics event names fired by the CTA engine."""
    # Survey panel
    SURVEY_CTA_SHOWN = "mus_cs"
    SURVEY_CTA_DISMISSED = "mus_cd"
    SURVEY_CTA_LAUNCHED = "mus_cl"

    # Home screen widget panel (automatic add)
    WIDGET_CTA_SHOWN = "mwc_s"
    WIDGET_CTA_LAUNCHED = "mwc_l"
    WIDGET_CTA_DISMISSED = "mwc_d"

    # Home screen widget panel (manual instructions)
    WIDGET_LEGACY_CTA_SHOWN = "mwlc_s"
    WIDGET_LEGACY_CTA_LAUNCHED = "mwlc_l"
    WIDGET_LEGACY_CTA_DISMISSED = "mwlc_d"

    # Dax onboarding
    ONBOARDING_DAX_CTA_SHOWN = "m_odc_s"
    ONBOARDING_DAX_CTA_OK_BUTTON = "m_odc_ok"
    ONBOARDING_DAX_ALL_CTA_HIDDEN = "m_odc_h"

    # Informational top panel
    COVID_CTA_SHOWN = "m_cvd_s"
    COVID_CTA_LAUNCHED = "m_cvd_l"


class PixelParameter:
    """Parameter keys attached to CTA pixels."""
    CTA_SHOWN = "cta"


class PixelEvent(BaseModel):
    """An analytics event as handed to a sink."""
    pixel_name: PixelName
    parameters: Dict[str, str] = Field(default_factory=dict)
    encoded_parameters: Dict[str, str] = Field(default_factory=dict)
    fired_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        """Pydantic configuration."""
        frozen = True


class Pixel(ABC):
    """Analytics sink interface."""

    @abstractmethod
    def fire(
        self,
        pixel_name: PixelName,
        parameters: Optional[Dict[str, str]] = None,
        encoded_parameters: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Fire a pixel. Never blocks and never raises.

        Args:
            pixel_name: Event name
            parameters: Plain query parameters
            encoded_parameters: Parameters sent already encoded (headers)
        """
        pass


class LoggingPixel(Pixel):
    """
    Pixel sink that writes events to the log.

    An optional downstream sink receives every event; its failures are
    logged and dropped so telemetry never affects CTA outcomes.
    """

    def __init__(self, downstream: Optional[Pixel] = None):
        self._downstream = downstream

    def fire(
        self,
        pixel_name: PixelName,
        parameters: Optional[Dict[str, str]] = None,
        encoded_parameters: Optional[Dict[str, str]] = None,
    ) -> None:
        logger.info(
            f"Pixel fired: {pixel_name.value}",
            extra={'extra_data': {
                'pixel': pixel_name.value,
                'parameters': parameters or {},
            }}
        )
        if self._downstream is None:
            return
        try:
            self._downstream.fire(pixel_name, parameters, encoded_parameters)
        except Exception as e:
            logger.warning(f"Pixel {pixel_name.value} not sent: {e}")


class RecordingPixel(Pixel):
    """Pixel sink that keeps fired events in memory."""

    def __init__(self):
        self.events: List[PixelEvent] = []

    def fire(
        self,
        pixel_name: PixelName,
        parameters: Optional[Dict[str, str]] = None,
        encoded_parameters: Optional[Dict[str, str]] = None,
    ) -> None:
        self.events.append(PixelEvent(
            pixel_name=pixel_name,
            parameters=parameters or {},
            encoded_parameters=encoded_parameters or {},
        ))

    def fired(self, pixel_name: PixelName) -> List[PixelEvent]:
        """Return all recorded events with the given name."""
        return [e for e in self.events if e.pixel_name == pixel_name]
