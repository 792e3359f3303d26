"""Trade data model."""

import math
import re
import uuid
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from chronos.constants import POI_VOCABULARY, SMT_TYPES, WINNING_RESULTS

Pair = Literal["NQ", "ES", "EU"]
Session = Literal["Asia", "London", "Pre-NY", "NY"]
CRT = Literal["Daily", "4H", "1H", "M30", "M15"]
EntryType = Literal["Risk Entry", "Confirmation Entry"]
RiskLevel = Literal["0.25%", "0.5%", "1%"]
Rating = Literal["A", "B", "C"]
Result = Literal["Win", "Loss", "Small Win", "Small Loss"]

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


def _dedupe(values: tuple[str, ...]) -> tuple[str, ...]:
    """Drop repeated values, keeping the first occurrence."""
    return tuple(dict.fromkeys(values))


def _check_vocabulary(values: tuple[str, ...], vocabulary: tuple[str, ...]) -> tuple[str, ...]:
    unknown = [v for v in values if v not in vocabulary]
    if unknown:
        raise ValueError(
            f"unknown value(s) {', '.join(repr(v) for v in unknown)}; "
            f"expected one of {', '.join(vocabulary)}"
        )
    return _dedupe(values)


class POICategories(BaseModel):
    """Point-of-interest confluences, grouped by PD-array type."""

    fvg: tuple[str, ...] = Field(default=(), description="Fair value gap confluences")
    ob: tuple[str, ...] = Field(default=(), description="Order block confluences")
    other: tuple[str, ...] = Field(default=(), description="Other PD-array confluences")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("fvg", "ob", "other")
    @classmethod
    def _known_values(cls, values: tuple[str, ...], info: ValidationInfo) -> tuple[str, ...]:
        return _check_vocabulary(values, POI_VOCABULARY[info.field_name])

    def combined(self) -> tuple[str, ...]:
        """All confluences across the three categories."""
        return self.fvg + self.ob + self.other


class Recap(BaseModel):
    """Free-text narrative recap of the trade idea."""

    draw_on_liquidity: str = Field(
        default="", alias="drawOnLiquidity", description="Targeted draw on liquidity"
    )
    htf_narrative: str = Field(
        default="", alias="htfNarrative", description="Higher-timeframe narrative"
    )

    model_config = {"frozen": True, "populate_by_name": True}


class PsychologyReview(BaseModel):
    """Structured post-trade psychological review."""

    rules_followed: bool = Field(..., alias="rulesFollowed", description="Were all rules followed")
    broken_rule_description: Optional[str] = Field(
        default=None,
        alias="brokenRuleDescription",
        description="Which rule was broken (meaningful when rules were not followed)",
    )
    recap: Recap = Field(default_factory=Recap, description="Narrative recap")
    mistakes: tuple[str, ...] = Field(default=(), description="Mistakes and risks")
    what_went_well: tuple[str, ...] = Field(
        default=(), alias="whatWentWell", description="Successes and strengths"
    )
    what_went_wrong: tuple[str, ...] = Field(
        default=(), alias="whatWentWrong", description="What went wrong"
    )
    key_lesson: str = Field(default="", alias="keyLesson", description="Single key lesson")

    model_config = {"frozen": True, "populate_by_name": True}


class Trade(BaseModel):
    """One logged trade execution with setup, outcome and review.

    Attribute names are snake_case; the serialized form uses the camelCase
    aliases (``entryTime``, ``smtTypes``, ``createdAt``...). Both are accepted
    on input.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Unique trade identifier"
    )
    pair: Pair = Field(..., description="Traded instrument")
    date: str = Field(..., description="Trade date (YYYY-MM-DD)")
    entry_time: str = Field(..., alias="entryTime", description="Entry time (HH:MM)")
    exit_time: str = Field(..., alias="exitTime", description="Exit time (HH:MM)")
    session: Session = Field(..., description="Trading session")
    crt: CRT = Field(..., description="Timeframe the setup was identified on")
    poi: POICategories = Field(default_factory=POICategories, description="POI confluences")
    smt_types: tuple[str, ...] = Field(default=(), alias="smtTypes", description="SMT confluences")
    entry_type: EntryType = Field(..., alias="entryType", description="Entry model")
    risk: RiskLevel = Field(..., description="Account risk taken")
    rr: str = Field(..., description="Risk:reward achieved, as entered")
    rating: Rating = Field(..., description="Setup grade")
    result: Result = Field(..., description="Trade outcome")
    images: tuple[str, ...] = Field(default=(), description="Embedded chart images (data URLs)")
    review: PsychologyReview = Field(..., description="Post-trade review")
    created_at: Optional[int] = Field(
        default=None, ge=0, alias="createdAt", description="Commit time (epoch milliseconds)"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("id")
    @classmethod
    def _non_empty_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("id must not be empty")
        return value

    @field_validator("date")
    @classmethod
    def _valid_date(cls, value: str) -> str:
        if not _DATE_PATTERN.match(value):
            raise ValueError(f"'{value}' is not formatted YYYY-MM-DD")
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except ValueError:
            raise ValueError(f"'{value}' is not a valid calendar date") from None
        return value

    @field_validator("entry_time", "exit_time")
    @classmethod
    def _valid_time(cls, value: str) -> str:
        if not _TIME_PATTERN.match(value):
            raise ValueError(f"'{value}' is not formatted HH:MM")
        try:
            datetime.strptime(value, "%H:%M")
        except ValueError:
            raise ValueError(f"'{value}' is not a valid time of day") from None
        return value

    @field_validator("smt_types")
    @classmethod
    def _known_smt(cls, values: tuple[str, ...]) -> tuple[str, ...]:
        return _check_vocabulary(values, SMT_TYPES)

    @field_validator("rr", mode="before")
    @classmethod
    def _numeric_rr_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("rr")
    @classmethod
    def _valid_rr(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("rr is required")
        try:
            parsed = float(value)
        except ValueError:
            raise ValueError(f"'{value}' is not a number") from None
        if not math.isfinite(parsed) or parsed < 0:
            raise ValueError(f"'{value}' must be a non-negative number")
        return value

    @property
    def rr_value(self) -> float:
        """The risk:reward ratio as a number."""
        return float(self.rr)

    @property
    def is_win(self) -> bool:
        return self.result in WINNING_RESULTS

    def confluences(self) -> tuple[str, ...]:
        """Every POI and SMT tag attached to the setup."""
        return self.poi.combined() + self.smt_types

    def to_record(self) -> dict:
        """Serialize to the persisted camelCase representation."""
        return self.model_dump(mode="json", by_alias=True)
