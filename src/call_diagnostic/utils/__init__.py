"""
Shared helpers
"""

from .industry import detect_industry
from .formatting import format_currency, as_number

__all__ = [
    'detect_industry',
    'format_currency',
    'as_number'
]
