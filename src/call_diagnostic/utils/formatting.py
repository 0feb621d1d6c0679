"""
Display helpers
"""

from typing import Union


def format_currency(amount: float) -> str:
    """Whole-dollar USD amount, e.g. 1400 -> '$1,400'"""
    return f"${amount:,.0f}"


def as_number(value: Union[int, float, None]) -> Union[int, float, None]:
    """Integral floats become ints so 1400.0 is reported as 1400"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
