"""
Japanese era (令和) date formatting.
"""

from datetime import date
from typing import Optional

REIWA_OFFSET = 2018


def reiwa_year(day: date) -> int:
    return day.year - REIWA_OFFSET


def format_reiwa_date(day: Optional[date] = None) -> str:
    """
    Examples:
        >>> format_reiwa_date(date(2024, 11, 7))
        '令和6年11月7日'
    """
    day = day or date.today()
    return f'令和{reiwa_year(day)}年{day.month}月{day.day}日'


def format_reiwa_month(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f'令和{reiwa_year(day)}年{day.month}月'
