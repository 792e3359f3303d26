"""Data models for Chronos."""

from chronos.models.stats import DashboardStats, FilterCriteria
from chronos.models.trade import POICategories, PsychologyReview, Recap, Trade

__all__ = [
    "Trade",
    "POICategories",
    "PsychologyReview",
    "Recap",
    "FilterCriteria",
    "DashboardStats",
]
