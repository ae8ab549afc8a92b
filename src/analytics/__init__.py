"""Analytics pixels fired by the CTA engine."""

from analytics.pixel import (
    LoggingPixel,
    Pixel,
    PixelEvent,
    PixelName,
    PixelParameter,
    RecordingPixel,
)

__all__ = [
    "LoggingPixel",
    "Pixel",
    "PixelEvent",
    "PixelName",
    "PixelParameter",
    "RecordingPixel",
]
