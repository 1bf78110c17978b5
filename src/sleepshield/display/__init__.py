"""Plain-text rendering of the status surface."""

from sleepshield.display.summary import StatusRenderer, SummaryLine

__all__ = ["StatusRenderer", "SummaryLine"]
