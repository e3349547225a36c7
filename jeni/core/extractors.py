"""
Jeni Life OS — Field Extractors.

Stateless helpers that pull typed values out of free text with fixed
patterns. Every function is total: "not found" is None (or the table
default), never an exception.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

# 1,25,000 / 125,000 / 649 / 7.5
_NUMBER = r"\d{1,3}(?:,\d{2,3})+(?:\.\d+)?|\d+(?:\.\d+)?"
# A number glued to letters ("Web3", "5G") is part of a word, not a quantity;
# a leading "rs"/"rs."/"inr" and a trailing "rs"/"rupees" are currency markers.
_NUMBER_RE = re.compile(
    rf"(?:(?<=\brs)|(?<=\brs\.)|(?<=\binr)|(?<![a-z\d.]))({_NUMBER})"
    r"(?![\d,.]*(?!rs\b|rupees?\b)[a-z])",
    re.IGNORECASE,
)

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

SUBSCRIPTION_CATEGORIES: dict[str, tuple[str, ...]] = {
    "entertainment": (
        "netflix", "prime", "hotstar", "disney", "sonyliv", "zee5", "jiocinema",
        "spotify", "youtube", "gaana", "wynk", "apple music", "audible",
    ),
    "productivity": (
        "chatgpt", "openai", "claude", "copilot", "github", "notion", "figma",
        "canva", "adobe", "microsoft", "office", "cursor",
    ),
    "cloud": ("icloud", "google one", "drive", "dropbox", "aws", "vercel", "hosting", "domain"),
    "fitness": ("gym", "cult", "fitness", "yoga", "healthify"),
    "utilities": ("jio", "airtel", "vi ", "bsnl", "broadband", "wifi", "internet", "recharge"),
    "news": ("times", "hindu", "newspaper", "kindle", "medium"),
}

EXPENSE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "food": (
        "food", "swiggy", "zomato", "lunch", "dinner", "breakfast", "chai",
        "coffee", "snack", "restaurant", "khana", "biryani", "pizza",
    ),
    "groceries": ("grocery", "groceries", "bigbasket", "blinkit", "zepto", "sabzi", "milk", "kirana"),
    "transport": ("uber", "ola", "rapido", "auto", "metro", "bus", "train", "petrol", "diesel", "fuel", "cab"),
    "rent": ("rent", "pg ", "hostel"),
    "bills": ("electricity", "bill", "recharge", "wifi", "broadband", "gas cylinder"),
    "shopping": ("amazon", "flipkart", "myntra", "shopping", "clothes", "shoes"),
    "health": ("medicine", "doctor", "pharmacy", "hospital", "chemist", "gym"),
    "entertainment": ("movie", "netflix", "concert", "game", "party"),
    "education": ("course", "book", "udemy", "fees", "tuition"),
}

GOAL_CATEGORIES: dict[str, tuple[str, ...]] = {
    "fitness": ("gym", "run", "weight", "kg", "fit", "workout", "marathon", "steps"),
    "health": ("sleep", "water", "diet", "meditat", "health"),
    "finance": ("save", "saving", "invest", "emi", "debt", "loan", "lakh", "money", "sip"),
    "career": ("job", "promotion", "career", "interview", "salary hike"),
    "learning": ("learn", "course", "read", "book", "study", "certification"),
    "business": ("launch", "startup", "revenue", "customers", "project", "mrr"),
}

KNOWN_LENDERS: tuple[str, ...] = (
    "hdfc", "icici", "sbi", "axis", "kotak", "bajaj", "idfc", "indusind",
    "yes bank", "pnb", "bob", "canara", "tata capital", "home credit",
)


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def _to_float(raw: str) -> float:
    return float(raw.replace(",", ""))


def extract_amount(text: str) -> float | None:
    """Return the first quantity in the text ("₹1,25,000" → 125000.0)."""
    match = _NUMBER_RE.search(text or "")
    if match is None:
        return None
    return _to_float(match.group(1))


def extract_numbers(text: str) -> list[float]:
    """Return every quantity in the text, in order of appearance."""
    return [_to_float(m.group(1)) for m in _NUMBER_RE.finditer(text or "")]


def extract_named_value(
    text: str,
    keywords: list[str] | tuple[str, ...],
    other_fields: list[str] | tuple[str, ...] = (),
) -> float | None:
    """Find a number attached to one of the keywords, tried in priority order.

    A number before the keyword may have one unit word in between
    ("8 glasses water"); a number after it may follow ":" or "of"
    ("slept 7", "mood: 4"). The in-between word is never one of
    ``other_fields``, so "7 hours mood 4" does not give mood 7.
    """
    lowered = (text or "").lower()
    blocked = "|".join(re.escape(w.lower()) for w in other_fields)
    unit = rf"(?!(?:{blocked})\b)[a-z]+\s+" if blocked else r"[a-z]+\s+"
    for keyword in keywords:
        kw = re.escape(keyword.lower())
        before = re.search(
            rf"(?<![\d.])({_NUMBER})\s*(?:{unit})?\b{kw}", lowered,
        )
        if before:
            return _to_float(before.group(1))
        after = re.search(
            rf"\b{kw}\w*\s*(?:[:=-]\s*|of\s+|for\s+)?({_NUMBER})", lowered,
        )
        if after:
            return _to_float(after.group(1))
    return None


def detect_category(
    text: str, table: dict[str, tuple[str, ...]], default: str = "other",
) -> str:
    """Map text to the first category whose keyword appears in it."""
    lowered = f"{(text or '').lower()} "
    for category, keywords in table.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return default


def detect_lender(
    text: str, known_lenders: tuple[str, ...] = KNOWN_LENDERS,
) -> str | None:
    """Return the first known lender named in the text, upper-cased."""
    lowered = (text or "").lower()
    for lender in known_lenders:
        if re.search(rf"\b{re.escape(lender)}\b", lowered):
            return lender.upper()
    return None


def detect_due_date(text: str, today: date) -> str | None:
    """Resolve "today" / "tomorrow" / "day after tomorrow" to an ISO date."""
    lowered = (text or "").lower()
    if "day after tomorrow" in lowered:
        return (today + timedelta(days=2)).isoformat()
    if re.search(r"\btomorrow\b", lowered):
        return (today + timedelta(days=1)).isoformat()
    if re.search(r"\btoday\b|\btonight\b", lowered):
        return today.isoformat()
    return None


def title_case(text: str) -> str:
    """Capitalize the first letter of every word. Display only."""
    return " ".join(word[:1].upper() + word[1:] for word in (text or "").split())
