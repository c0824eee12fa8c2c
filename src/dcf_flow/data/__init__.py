"""Ticker catalog and default driver generation."""

from .repository import load_ticker_frame, CatalogTickerRepository

__all__ = ["load_ticker_frame", "CatalogTickerRepository"]
