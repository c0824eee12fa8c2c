"""FastAPI surface over the valuation engine."""

from .api import app

__all__ = ["app"]
