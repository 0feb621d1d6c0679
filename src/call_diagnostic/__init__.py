"""
Missed-call revenue diagnostic

Estimates the revenue a business loses to missed phone calls from its
RingCentral or Zoom Phone call log.
"""

__version__ = "1.0.0"
