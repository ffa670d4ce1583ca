"""Tests for tool argument parsing."""

from __future__ import annotations

import pytest

from agentdao.core.exceptions import ValidationException
from agentdao.core.validation import (
    MAX_AMOUNT,
    get_amount,
    get_bool,
    get_dict,
    get_enum,
    get_int,
    get_list,
    get_number,
    get_str,
    parse_amount,
)


class TestGetStr:
    def test_required_missing(self):
        with pytest.raises(ValidationException) as exc:
            get_str({}, "name", required=True)
        assert exc.value.field == "name"
        assert exc.value.code == "VALIDATION_ERROR"

    def test_none_counts_as_missing(self):
        assert get_str({"name": None}, "name", default="x") == "x"

    def test_blank_rejected_unless_allowed(self):
        with pytest.raises(ValidationException):
            get_str({"name": "  "}, "name")
        assert get_str({"name": ""}, "name", allow_empty=True) == ""

    def test_wrong_type(self):
        with pytest.raises(ValidationException, match="must be a string"):
            get_str({"name": 5}, "name")

    def test_max_length(self):
        with pytest.raises(ValidationException, match="at most 3"):
            get_str({"name": "abcd"}, "name", max_length=3)


class TestNumbers:
    def test_integral_float_accepted(self):
        assert get_int({"n": 3.0}, "n") == 3

    def test_fractional_float_rejected(self):
        with pytest.raises(ValidationException):
            get_int({"n": 3.5}, "n")

    def test_bool_is_not_an_int(self):
        with pytest.raises(ValidationException):
            get_int({"n": True}, "n")

    def test_bounds(self):
        with pytest.raises(ValidationException, match=">= 1"):
            get_int({"rating": 0}, "rating", minimum=1)
        with pytest.raises(ValidationException, match="<= 5"):
            get_int({"rating": 6}, "rating", maximum=5)

    def test_get_number_default(self):
        assert get_number({}, "days", default=3) == 3
        assert get_number({"days": 0.5}, "days", minimum=0) == 0.5


class TestContainers:
    def test_bool(self):
        assert get_bool({"flag": False}, "flag", default=True) is False
        with pytest.raises(ValidationException):
            get_bool({"flag": "yes"}, "flag")

    def test_dict_default_is_copied(self):
        shared = {"a": 1}
        value = get_dict({}, "ctx", default=shared)
        value["b"] = 2
        assert shared == {"a": 1}

    def test_list_item_type(self):
        assert get_list({"ids": ["a", "b"]}, "ids", item_type=str) == ["a", "b"]
        with pytest.raises(ValidationException, match="items must be of type str"):
            get_list({"ids": ["a", 1]}, "ids", item_type=str)

    def test_list_wrong_type(self):
        with pytest.raises(ValidationException, match="must be an array"):
            get_list({"ids": "a"}, "ids")


class TestEnumsAndAmounts:
    def test_enum(self):
        assert get_enum({"vote": "for"}, "vote", ["for", "against"]) == "for"
        with pytest.raises(ValidationException, match="Must be one of: for, against"):
            get_enum({"vote": "maybe"}, "vote", ["for", "against"])

    def test_enum_default(self):
        assert get_enum({}, "sort_by", ["a", "b"], default="a") == "a"

    def test_parse_amount(self):
        assert parse_amount("1000000000000000000", "reward") == 10**18
        assert parse_amount(" 42 ", "reward") == 42
        assert parse_amount(7, "reward") == 7

    def test_parse_amount_upper_bound(self):
        assert parse_amount(str(2**256 - 1), "reward") == MAX_AMOUNT
        assert parse_amount("000" + "9" * 10, "reward") == 9_999_999_999

    @pytest.mark.parametrize(
        "bad",
        ["-1", "1.5", "abc", -3, True, 1.0, None, "\u00b2", "\u0663", "9" * 5000, str(2**256), 2**256],
    )
    def test_parse_amount_rejects(self, bad):
        with pytest.raises(ValidationException):
            parse_amount(bad, "reward")

    def test_get_amount_normalizes(self):
        assert get_amount({"amount": 100}, "amount") == "100"
        assert get_amount({}, "amount", default="0") == "0"
        with pytest.raises(ValidationException):
            get_amount({}, "amount", required=True)
