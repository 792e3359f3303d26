"""Chronos - a personal trading journal with post-trade review and analytics."""

__version__ = "0.1.0"
