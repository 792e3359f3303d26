"""DashboardStats and FilterCriteria data models."""

from typing import Optional

from pydantic import BaseModel, Field

from chronos.models.trade import Pair, Rating, Result, Session


class FilterCriteria(BaseModel):
    """Independent equality constraints for the journal view.

    A ``None`` field places no constraint on that attribute.
    """

    pair: Optional[Pair] = Field(default=None, description="Only this instrument")
    session: Optional[Session] = Field(default=None, description="Only this session")
    result: Optional[Result] = Field(default=None, description="Only this outcome")
    rating: Optional[Rating] = Field(default=None, description="Only this setup grade")

    model_config = {"frozen": True}

    def constraints(self) -> dict[str, str]:
        """The constraints that are actually set."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class DashboardStats(BaseModel):
    """Summary statistics over a collection of trades."""

    total_trades: int = Field(..., ge=0, alias="totalTrades", description="Number of trades")
    wins: int = Field(..., ge=0, description="Win and Small Win count")
    losses: int = Field(..., ge=0, description="Loss and Small Loss count")
    win_rate: float = Field(..., ge=0, le=100, alias="winRate", description="Win rate percentage")
    avg_rr: float = Field(..., ge=0, alias="avgRR", description="Mean of positive R:R values")
    session_distribution: dict[str, int] = Field(
        ..., alias="sessionDistribution", description="Trade count per session"
    )
    entry_type_distribution: dict[str, int] = Field(
        ..., alias="entryTypeDistribution", description="Trade count per entry type"
    )
    rating_distribution: dict[str, int] = Field(
        ..., alias="ratingDistribution", description="Trade count per rating"
    )
    risk_distribution: dict[str, int] = Field(
        ..., alias="riskDistribution", description="Trade count per risk level"
    )

    model_config = {"frozen": True, "populate_by_name": True}
