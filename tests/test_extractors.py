"""Tests for jeni.core.extractors — fixed corpus of phrasings."""

from datetime import date

import pytest

from jeni.core.extractors import (
    EXPENSE_CATEGORIES,
    GOAL_CATEGORIES,
    SUBSCRIPTION_CATEGORIES,
    detect_category,
    detect_due_date,
    detect_lender,
    extract_amount,
    extract_named_value,
    extract_numbers,
    title_case,
)


class TestExtractAmount:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("add sub Netflix 649", 649),
            ("spent ₹1,200 on food", 1200),
            ("spent rs 450 on chai", 450),
            ("salary 1,25,000", 125000),
            ("paid 99.50 for parking", 99.5),
            ("emi 4500 due 5th", 4500),
            ("Rs.649", 649),
            ("spent Rs.500 on food", 500),
            ("add sub Jio 5G 299", 299),
        ],
    )
    def test_first_quantity(self, text, expected):
        assert extract_amount(text) == expected

    def test_no_digits_is_none(self):
        assert extract_amount("add sub Netflix") is None

    def test_digits_inside_word_ignored(self):
        assert extract_amount("add project Web3 Wallet") is None

    def test_empty_text_is_none(self):
        assert extract_amount("") is None


class TestExtractNumbers:
    def test_all_numbers_in_order(self):
        assert extract_numbers("85000 overtime 5000 bonus 0 pf 1,800") == [85000, 5000, 0, 1800]

    def test_none_found(self):
        assert extract_numbers("no numbers here") == []


class TestExtractNamedValue:
    TEXT = "slept 7 hours, 8000 steps, 8 glasses water, 30 min gym"

    def test_number_after_keyword(self):
        assert extract_named_value(self.TEXT, ["slept"]) == 7

    def test_number_before_keyword(self):
        assert extract_named_value(self.TEXT, ["steps"]) == 8000

    def test_unit_word_between_number_and_keyword(self):
        assert extract_named_value(self.TEXT, ["water"]) == 8

    def test_keyword_priority_order(self):
        assert extract_named_value(self.TEXT, ["glasses", "steps"]) == 8

    def test_reversed_phrasing(self):
        assert extract_named_value("7.5 hours sleep", ["sleep"]) == 7.5

    def test_colon_after_keyword(self):
        assert extract_named_value("mood: 4", ["mood"]) == 4

    def test_missing_keyword(self):
        assert extract_named_value(self.TEXT, ["mood"]) is None

    def test_keyword_without_number(self):
        assert extract_named_value("went to the gym", ["gym"]) is None

    def test_other_field_word_does_not_bridge(self):
        text = "slept 7 hours mood 4"
        assert extract_named_value(text, ["mood"]) == 7
        assert extract_named_value(text, ["mood"], other_fields=["hours"]) == 4


class TestDetectCategory:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Netflix", "entertainment"),
            ("Spotify Premium", "entertainment"),
            ("ChatGPT Plus", "productivity"),
            ("iCloud 50GB", "cloud"),
            ("Cult Fit", "fitness"),
        ],
    )
    def test_subscription_vocabulary(self, text, expected):
        assert detect_category(text, SUBSCRIPTION_CATEGORIES) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("spent 500 on food", "food"),
            ("Swiggy dinner", "food"),
            ("uber to office", "transport"),
            ("paid rent 15000", "rent"),
            ("BigBasket order", "groceries"),
            ("medicine from pharmacy", "health"),
        ],
    )
    def test_expense_vocabulary(self, text, expected):
        assert detect_category(text, EXPENSE_CATEGORIES) == expected

    def test_case_insensitive(self):
        assert detect_category("NETFLIX", SUBSCRIPTION_CATEGORIES) == "entertainment"

    @pytest.mark.parametrize("text", ["", "zzz", "something unrelated", "12345"])
    def test_total_defaults_to_other(self, text):
        assert detect_category(text, EXPENSE_CATEGORIES) == "other"
        assert detect_category(text, SUBSCRIPTION_CATEGORIES) == "other"

    def test_custom_default(self):
        assert detect_category("write a novel", GOAL_CATEGORIES, default="personal") == "personal"
        assert detect_category("save 1 lakh", GOAL_CATEGORIES, default="personal") == "finance"


class TestDetectLender:
    def test_known_lender_upper_cased(self):
        assert detect_lender("Bike 4500 hdfc") == "HDFC"

    def test_multi_word_lender(self):
        assert detect_lender("phone loan from Bajaj") == "BAJAJ"
        assert detect_lender("via Yes Bank") == "YES BANK"

    def test_unknown_lender(self):
        assert detect_lender("Bike 4500 from my uncle") is None

    def test_word_boundary(self):
        assert detect_lender("bobby lent me money") is None


class TestDetectDueDate:
    TODAY = date(2026, 3, 14)

    def test_today(self):
        assert detect_due_date("pay bill today", self.TODAY) == "2026-03-14"

    def test_tomorrow(self):
        assert detect_due_date("call bank tomorrow", self.TODAY) == "2026-03-15"

    def test_day_after_tomorrow(self):
        assert detect_due_date("file taxes day after tomorrow", self.TODAY) == "2026-03-16"

    def test_no_date(self):
        assert detect_due_date("call bank", self.TODAY) is None


class TestTitleCase:
    def test_capitalizes_each_word(self):
        assert title_case("amazon prime video") == "Amazon Prime Video"

    def test_keeps_inner_capitals(self):
        assert title_case("digiKaragir HDFC") == "DigiKaragir HDFC"

    def test_collapses_whitespace(self):
        assert title_case("  bike   loan ") == "Bike Loan"
