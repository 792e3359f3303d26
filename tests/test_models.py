"""Tests for trade validation.

**Feature: trading-journal**
"""

import pydantic
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from chronos.constants import PAIRS, RESULTS, SESSIONS
from chronos.errors import ValidationError
from chronos.journal import validate
from chronos.models import Trade


class TestRequiredRiskReward:
    """
    **Feature: trading-journal, Property 1: R:R Is Required At Save Time**

    *For any* candidate whose rr is missing, blank or not a non-negative
    number, validation fails and names rr.
    """

    def test_missing_rr_names_rr(self, candidate: dict):
        del candidate["rr"]

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert "rr" in exc_info.value.fields

    @pytest.mark.parametrize("rr", ["", "   ", "abc", "-1", "nan", "inf", "2.5R"])
    def test_invalid_rr_rejected(self, candidate: dict, rr: str):
        candidate["rr"] = rr

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["rr"]

    def test_blank_rr_reports_required(self, candidate: dict):
        candidate["rr"] = ""

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.errors[0].message == "rr is required"

    @pytest.mark.parametrize("rr,expected", [("0", "0"), (" 2.5 ", "2.5"), (3, "3"), (1.75, "1.75")])
    def test_valid_rr_accepted(self, candidate: dict, rr, expected: str):
        candidate["rr"] = rr

        trade = validate(candidate)

        assert trade.rr == expected
        assert trade.rr_value == float(expected)


class TestClosedVocabularies:
    """
    **Feature: trading-journal, Property 2: Enum Fields Stay In Their Closed Sets**

    *For any* value outside a field's closed set, validation fails and
    names that field.
    """

    @given(pair=st.text(max_size=10).filter(lambda s: s not in PAIRS))
    @settings(max_examples=50)
    def test_unknown_pair_rejected(self, pair: str):
        candidate = {
            "pair": pair, "date": "2024-01-02", "entryTime": "10:00", "exitTime": "10:30",
            "session": "NY", "crt": "M15", "entryType": "Risk Entry", "risk": "1%",
            "rr": "1", "rating": "B", "result": "Loss", "review": {"rulesFollowed": True},
        }

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["pair"]

    @given(
        session=st.sampled_from(SESSIONS),
        result=st.sampled_from(RESULTS),
    )
    @settings(max_examples=30)
    def test_known_values_accepted(self, session: str, result: str):
        candidate = {
            "pair": "ES", "date": "2024-01-02", "entryTime": "10:00", "exitTime": "10:30",
            "session": session, "crt": "1H", "entryType": "Risk Entry", "risk": "0.25%",
            "rr": "1", "rating": "C", "result": result, "review": {"rulesFollowed": False},
        }

        trade = validate(candidate)

        assert trade.session == session
        assert trade.result == result

    @pytest.mark.parametrize("field,value", [
        ("session", "New York"),
        ("crt", "5m"),
        ("entryType", "Market Entry"),
        ("risk", "2%"),
        ("rating", "S"),
        ("result", "Breakeven"),
    ])
    def test_each_enum_field_checked(self, candidate: dict, field: str, value: str):
        candidate[field] = value

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == [field]


class TestAllViolationsReported:
    """
    **Feature: trading-journal, Property 3: Validation Reports Every Field**

    *For any* candidate with several problems, every offending field is
    reported in a single error.
    """

    def test_multiple_errors_reported_together(self, candidate: dict):
        candidate["pair"] = "EURUSD"
        candidate["date"] = "2024-02-30"
        candidate["exitTime"] = "25:00"
        del candidate["rr"]

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert set(exc_info.value.fields) == {"pair", "date", "exitTime", "rr"}
        message = str(exc_info.value)
        for field in ("pair", "date", "exitTime", "rr"):
            assert field in message

    def test_nested_review_fields_reported_by_path(self, candidate: dict):
        del candidate["review"]["rulesFollowed"]
        candidate["poi"]["ob"] = ["Weekly OB"]

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert set(exc_info.value.fields) == {"review.rulesFollowed", "poi.ob"}

    def test_missing_review_rejected(self, candidate: dict):
        del candidate["review"]

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["review"]

    def test_non_mapping_candidate_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate(["not", "a", "trade"])

        assert exc_info.value.fields == ["trade"]


class TestDateAndTimeFormats:
    """Dates must be real YYYY-MM-DD dates and times real HH:MM times."""

    @pytest.mark.parametrize("value", ["2024-2-3", "03/14/2024", "2023-02-29", "2024-13-01", ""])
    def test_bad_dates_rejected(self, candidate: dict, value: str):
        candidate["date"] = value

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["date"]

    def test_leap_day_accepted(self, candidate: dict):
        candidate["date"] = "2024-02-29"

        assert validate(candidate).date == "2024-02-29"

    @pytest.mark.parametrize("value", ["9:45", "24:00", "10:60", "10.30", "10:30:00"])
    def test_bad_times_rejected(self, candidate: dict, value: str):
        candidate["entryTime"] = value

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["entryTime"]

    def test_exit_may_precede_entry(self, candidate: dict):
        candidate["entryTime"] = "23:30"
        candidate["exitTime"] = "00:15"

        trade = validate(candidate)

        assert (trade.entry_time, trade.exit_time) == ("23:30", "00:15")


class TestConfluenceSets:
    """Confluence lists behave as sets drawn from fixed vocabularies."""

    def test_duplicates_suppressed_in_order(self, candidate: dict):
        candidate["poi"] = {"fvg": ["M15 FVG", "4H FVG", "M15 FVG"], "ob": [], "other": []}
        candidate["smtTypes"] = ["LTF SMT", "LTF SMT", "HTF SMT"]

        trade = validate(candidate)

        assert trade.poi.fvg == ("M15 FVG", "4H FVG")
        assert trade.smt_types == ("LTF SMT", "HTF SMT")

    def test_unknown_smt_rejected(self, candidate: dict):
        candidate["smtTypes"] = ["Weekly SMT"]

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["smtTypes"]

    def test_value_from_other_category_rejected(self, candidate: dict):
        candidate["poi"] = {"fvg": ["Daily OB"], "ob": [], "other": []}

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["poi.fvg"]

    def test_confluences_combine_poi_and_smt(self, candidate: dict):
        trade = validate(candidate)

        assert trade.confluences() == ("4H FVG", "PDH", "HTF SMT")


class TestTradeIdentity:
    """Ids are non-empty and generated when the caller omits them."""

    def test_id_generated_when_absent(self, candidate: dict):
        del candidate["id"]

        first = validate(candidate)
        second = validate(candidate)

        assert first.id
        assert first.id != second.id

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_id_rejected(self, candidate: dict, value: str):
        candidate["id"] = value

        with pytest.raises(ValidationError) as exc_info:
            validate(candidate)

        assert exc_info.value.fields == ["id"]


class TestTradeSerialization:
    """Trades serialize with the camelCase field names and stay immutable."""

    def test_record_uses_camel_case(self, candidate: dict):
        record = validate(candidate).to_record()

        assert set(record) == {
            "id", "pair", "date", "entryTime", "exitTime", "session", "crt", "poi",
            "smtTypes", "entryType", "risk", "rr", "rating", "result", "images",
            "review", "createdAt",
        }
        assert record["review"]["recap"]["drawOnLiquidity"] == "Previous day high"
        assert record["poi"]["fvg"] == ["4H FVG"]

    def test_record_revalidates_to_equal_trade(self, candidate: dict):
        trade = validate(candidate)

        assert Trade.model_validate(trade.to_record()) == trade

    def test_snake_case_input_accepted(self):
        trade = Trade(
            pair="EU", date="2024-05-01", entry_time="03:00", exit_time="04:10",
            session="London", crt="1H", entry_type="Risk Entry", risk="1%",
            rr="3", rating="A", result="Small Win",
            review={"rules_followed": True, "key_lesson": "Trust the model"},
        )

        assert trade.entry_time == "03:00"
        assert trade.review.key_lesson == "Trust the model"
        assert trade.created_at is None

    def test_trade_is_frozen(self, candidate: dict):
        trade = validate(candidate)

        with pytest.raises(pydantic.ValidationError):
            trade.rr = "10"

    def test_trade_passes_through_unchanged(self, candidate: dict):
        trade = validate(candidate)

        assert validate(trade) is trade

    def test_broken_rule_may_coexist_with_rules_followed(self, candidate: dict):
        candidate["review"]["brokenRuleDescription"] = "Moved stop"

        trade = validate(candidate)

        assert trade.review.rules_followed is True
        assert trade.review.broken_rule_description == "Moved stop"
