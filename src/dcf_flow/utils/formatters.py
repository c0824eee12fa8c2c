#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Display formatters shared by the change tracker and driver units.
"""

from typing import Optional


def format_percent(value: float) -> str:
    """Percent-domain value (e.g. 21.0) to one decimal: '21.0%'."""
    return f"{value:.1f}%"


def format_multiple(value: float) -> str:
    return f"{value:.2f}x"


def format_currency(value: float) -> str:
    return f"${value:.0f}"


def format_number(value: float) -> str:
    return f"{value:.0f}"


def format_price(value: Optional[float]) -> str:
    """Quote-style price with thousands separators, 'N/A' when missing."""
    if value is None:
        return "N/A"
    return f"${value:,.2f}"
