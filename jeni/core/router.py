"""
Jeni Life OS — Intent Router.

Deterministic command interpreter. ``RECOGNIZERS`` is an explicit,
ordered tuple of (intent, predicate, extractor, writer) records; the
first predicate that accepts the message wins. Explicit "add <kind>"
commands and the "task:" prefix sit ahead of the keyword-triggered
intents because their triggers overlap ("add project Income Tracker"
mentions income).

Profile names: "my name is" counts anywhere in the message, while
"call me" and "i am" count only at the start (after an optional "hi"),
and "i am" only when a short name follows that is not a mood word
("i am tired").

An extractor returns either a typed Command or a UsageHint when a
required field is missing. Nothing here touches storage; writers are
invoked later by the MutationExecutor.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

from jeni.core.commands import (
    AddGoal,
    AddObligation,
    AddProject,
    AddSubscription,
    AddTask,
    Command,
    RecordExpense,
    RecordHealth,
    RecordIncome,
    UpdateProfileName,
    UsageHint,
)
from jeni.core.executor import Writer, insert_record, upsert_record
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

logger = logging.getLogger(__name__)

Extractor = Callable[[str, date], "Command | UsageHint"]


@dataclass(frozen=True)
class Recognizer:
    intent: str
    matches: Callable[[str], bool]
    extract: Extractor
    write: Writer


@dataclass(frozen=True)
class RouteMatch:
    recognizer: Recognizer
    outcome: Command | UsageHint

    @property
    def intent(self) -> str:
        return self.recognizer.intent


# ---------------------------------------------------------------------------
# Shared text helpers
# ---------------------------------------------------------------------------

_HAS_DIGIT = re.compile(r"\d")
_AMOUNT_TOKENS = re.compile(
    r"(?:(?:₹|\$|\brs\.?|\binr\b)\s*|(?<![a-z\d.]))"
    r"\d[\d,]*(?:\.\d+)?(?:\s*%|/-|\s*rs\b|\s*rupees?\b|(?:st|nd|rd|th)\b)?"
    r"(?![a-z\d])",
    re.IGNORECASE,
)


def _clean_name(text: str, noise: str = "") -> str:
    """Drop amounts, noise words and stray punctuation; return title case."""
    cleaned = _AMOUNT_TOKENS.sub(" ", text)
    if noise:
        cleaned = re.sub(rf"\b(?:{noise})\b", " ", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"[\s,;:|/]+", " ", cleaned).strip(" -.")
    return title_case(cleaned)


def _after(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return text[match.end():] if match else ""


# ---------------------------------------------------------------------------
# AddSubscription
# ---------------------------------------------------------------------------

_SUB_TRIGGER = re.compile(r"\badd\s+sub(?:scription)?\b", re.IGNORECASE)
_YEARLY = re.compile(
    r"\b(?:yearly|annual(?:ly)?|per\s+year|a\s+year)\b|/\s*(?:year|yr)\b", re.IGNORECASE,
)
# "/month", "/yr" after an amount
_PER_CYCLE = re.compile(r"/\s*(?:month|mo|year|yr)\b", re.IGNORECASE)


def _is_subscription(text: str) -> bool:
    return bool(_SUB_TRIGGER.search(text))


def _extract_subscription(text: str, today: date) -> AddSubscription | UsageHint:
    rest = _after(_SUB_TRIGGER, text)
    amount = extract_amount(rest)
    name = _clean_name(
        _PER_CYCLE.sub(" ", rest),
        noise=r"yearly|monthly|annual(?:ly)?|per\s+(?:month|year)|a\s+(?:month|year)"
              r"|essential|optional|for|of|at|rs\.?|inr",
    )
    if amount is None or not name:
        return UsageHint(
            intent="add_subscription",
            message="To add a subscription, try: add sub Netflix 649 [yearly] [essential]",
        )
    return AddSubscription(
        name=name,
        amount=amount,
        billing_cycle="yearly" if _YEARLY.search(rest) else "monthly",
        category=detect_category(name, SUBSCRIPTION_CATEGORIES),
        is_essential=bool(re.search(r"\bessential\b", rest, re.IGNORECASE)),
    )


# ---------------------------------------------------------------------------
# AddObligation (EMI)
# ---------------------------------------------------------------------------

_EMI_TRIGGER = re.compile(r"\badd\s+emi\b", re.IGNORECASE)
_DUE_DAY = re.compile(
    r"\bdue\s*(?:on\s*)?(?:the\s*)?(\d{1,2})(?:st|nd|rd|th)?\b", re.IGNORECASE,
)
_TERM = re.compile(r"\b(\d{1,3})\s*(?:months?|mnths?|mos?)\b(?:\s*(?:left|remaining))?", re.IGNORECASE)

# Without a stated term: 12 months left out of 18. Placeholder default,
# pending product input on what an unspecified term should mean.
DEFAULT_REMAINING_MONTHS = 12
TOTAL_MONTHS_PADDING = 6


def _is_obligation(text: str) -> bool:
    return bool(_EMI_TRIGGER.search(text))


def _extract_obligation(text: str, today: date) -> AddObligation | UsageHint:
    rest = _after(_EMI_TRIGGER, text)

    due_match = _DUE_DAY.search(rest)
    term_match = _TERM.search(rest)
    remainder = _DUE_DAY.sub(" ", rest)
    remainder = _TERM.sub(" ", remainder)

    amount = extract_amount(remainder)
    if amount is None:
        return UsageHint(
            intent="add_emi",
            message="To add an EMI, try: add emi Bike 4500 due 5th 18 months HDFC",
        )

    lender = detect_lender(remainder)
    noise = r"emi|due|on|for|of|at|from|with|rs\.?|inr|per\s+month|monthly"
    if lender:
        noise += "|" + re.escape(lender)
    name = _clean_name(remainder, noise=noise) or "EMI"

    if term_match:
        remaining = int(term_match.group(1))
        total = remaining + TOTAL_MONTHS_PADDING
    else:
        remaining = DEFAULT_REMAINING_MONTHS
        total = DEFAULT_REMAINING_MONTHS + TOTAL_MONTHS_PADDING

    return AddObligation(
        name=name,
        emi_amount=amount,
        lender=lender,
        due_day=int(due_match.group(1)) if due_match else 1,
        remaining_months=remaining,
        total_months=total,
    )


# ---------------------------------------------------------------------------
# AddProject
# ---------------------------------------------------------------------------

_PROJECT_TRIGGER = re.compile(r"\badd\s+project\b", re.IGNORECASE)
_PROGRESS = re.compile(r"(\d{1,3})\s*%")
_PROJECT_STATUS = ("planned", "building", "paused", "active")
_PRIORITIES = ("critical", "high", "medium", "low")


def _is_project(text: str) -> bool:
    return bool(_PROJECT_TRIGGER.search(text))


def _first_word(text: str, words: tuple[str, ...], default: str) -> str:
    lowered = text.lower()
    for word in words:
        if re.search(rf"\b{word}\b", lowered):
            return word
    return default


def _extract_project(text: str, today: date) -> AddProject | UsageHint:
    rest = _after(_PROJECT_TRIGGER, text)
    progress = _PROGRESS.search(rest)
    name = _clean_name(
        rest,
        noise="|".join(_PROJECT_STATUS + _PRIORITIES) + r"|priority|done|complete|progress",
    )
    if not name:
        return UsageHint(
            intent="add_project",
            message="To add a project, try: add project DigiKaragir 40% building high",
        )
    return AddProject(
        name=name,
        progress=int(progress.group(1)) if progress else 0,
        status=_first_word(rest, _PROJECT_STATUS, "active"),
        priority=_first_word(rest, _PRIORITIES, "medium"),
    )


# ---------------------------------------------------------------------------
# AddGoal
# ---------------------------------------------------------------------------

_GOAL_TRIGGER = re.compile(r"\badd\s+goal\b\s*:?", re.IGNORECASE)


def _is_goal(text: str) -> bool:
    return bool(_GOAL_TRIGGER.search(text))


def _extract_goal(text: str, today: date) -> AddGoal | UsageHint:
    title = _after(_GOAL_TRIGGER, text).strip(" -.:")
    if not title:
        return UsageHint(
            intent="add_goal",
            message="To add a goal, try: add goal save 1,00,000 by December",
        )
    return AddGoal(
        title=title[:1].upper() + title[1:],
        category=detect_category(title, GOAL_CATEGORIES, default="personal"),
        target_value=extract_amount(title),
    )


# ---------------------------------------------------------------------------
# AddTask
# ---------------------------------------------------------------------------

_TASK_PREFIX = re.compile(r"^\s*(?:add\s+)?(?:task|todo|reminder)\s*:\s*", re.IGNORECASE)
_URGENT = re.compile(r"\burgent(?:ly)?\b\s*", re.IGNORECASE)


def _is_task(text: str) -> bool:
    return bool(_TASK_PREFIX.search(text))


def _extract_task(text: str, today: date) -> AddTask | UsageHint:
    body = _after(_TASK_PREFIX, text).strip()
    urgent = bool(_URGENT.search(body))
    title = re.sub(r"\s+", " ", _URGENT.sub("", body)).strip(" -.,!")
    if not title:
        return UsageHint(
            intent="add_task",
            message="To add a task, try: task: call the bank tomorrow",
        )
    return AddTask(
        title=title[:1].upper() + title[1:],
        priority="high" if urgent else "medium",
        due_date=detect_due_date(body, today),
    )


# ---------------------------------------------------------------------------
# RecordIncome
# ---------------------------------------------------------------------------

_INCOME_TRIGGER = re.compile(r"\b(?:salary|income)\b", re.IGNORECASE)


def _is_income(text: str) -> bool:
    return bool(_INCOME_TRIGGER.search(text)) and bool(_HAS_DIGIT.search(text))


def _extract_income(text: str, today: date) -> RecordIncome | UsageHint:
    # Read positionally after the trigger: base, overtime, bonus, pf, tax
    numbers = extract_numbers(_after(_INCOME_TRIGGER, text))
    if not numbers:
        return UsageHint(
            intent="record_income",
            message="To save your salary, try: my salary is 85000 overtime 5000 bonus 0 pf 1800 tax 2000",
        )
    base, overtime, bonus, pf, tax = (numbers + [0.0] * 5)[:5]
    return RecordIncome(
        month=today.strftime("%B"),
        year=today.year,
        base_salary=base,
        overtime=overtime,
        bonus=bonus,
        deductions_pf=pf,
        deductions_tax=tax,
    )


# ---------------------------------------------------------------------------
# RecordExpense
# ---------------------------------------------------------------------------

_EXPENSE_TRIGGER = re.compile(
    r"\b(?:spent|expense|paid|kharcha|kharch)\b", re.IGNORECASE,
)
_PAYMENT_METHODS = {
    "upi": ("upi", "gpay", "google pay", "phonepe", "paytm"),
    "card": ("card", "credit card", "debit card"),
    "cash": ("cash",),
}
_EXPENSE_NOISE = (
    r"spent|spend|expense|paid|pay|kharcha|kharch|kharche|diye|on|for|in|at|of|to|"
    r"rs\.?|inr|rupees?|i|today|via|using|through|by|"
    r"upi|gpay|google pay|phonepe|paytm|credit card|debit card|card|cash"
)


def _is_expense(text: str) -> bool:
    return bool(_EXPENSE_TRIGGER.search(text)) and bool(_HAS_DIGIT.search(text))


def _extract_expense(text: str, today: date) -> RecordExpense | UsageHint:
    amount = extract_amount(text)
    if amount is None:
        return UsageHint(
            intent="record_expense",
            message="To log an expense, try: spent 500 on food",
        )
    category = detect_category(text, EXPENSE_CATEGORIES)
    description = _clean_name(text, noise=_EXPENSE_NOISE).lower()
    payment_method = None
    lowered = text.lower()
    for method, words in _PAYMENT_METHODS.items():
        if any(re.search(rf"\b{w}\b", lowered) for w in words):
            payment_method = method
            break
    return RecordExpense(
        amount=amount,
        category=category,
        description=description or category,
        payment_method=payment_method,
        date=today.isoformat(),
    )


# ---------------------------------------------------------------------------
# RecordHealth
# ---------------------------------------------------------------------------

_SLEEP_KEYWORDS = ("slept", "sleep", "hours", "hrs")
_STEP_KEYWORDS = ("steps", "step")
_WATER_KEYWORDS = ("glasses", "glass", "water")
_EXERCISE_KEYWORDS = ("min", "gym", "workout", "exercise")
_MOOD_KEYWORDS = ("mood",)
_HEALTH_WORDS = (
    _SLEEP_KEYWORDS + _STEP_KEYWORDS + _WATER_KEYWORDS + _EXERCISE_KEYWORDS
    + _MOOD_KEYWORDS + ("minutes", "mins")
)


def _is_health(text: str) -> bool:
    lowered = text.lower()
    return "slept" in lowered or ("steps" in lowered and "water" in lowered)


def _as_int(value: float | None) -> int | None:
    return int(value) if value is not None else None


def _health_value(text: str, keywords: tuple[str, ...]) -> float | None:
    """Number for one health field; another field's words never bridge to it."""
    others = tuple(w for w in _HEALTH_WORDS if w not in keywords)
    return extract_named_value(text, keywords, other_fields=others)


def _extract_health(text: str, today: date) -> RecordHealth | UsageHint:
    sleep = _health_value(text, _SLEEP_KEYWORDS)
    steps = _as_int(_health_value(text, _STEP_KEYWORDS))
    water = _as_int(_health_value(text, _WATER_KEYWORDS))
    exercise = _as_int(_health_value(text, _EXERCISE_KEYWORDS))
    mood = _as_int(_health_value(text, _MOOD_KEYWORDS))
    if mood is not None and not 1 <= mood <= 10:
        mood = None

    if sleep is None and steps is None and water is None and exercise is None:
        return UsageHint(
            intent="record_health",
            message="To log health, try: slept 7 hours, 8000 steps, 8 glasses water, 30 min gym",
        )
    return RecordHealth(
        date=today.isoformat(),
        sleep_hours=sleep,
        steps=steps,
        water_glasses=water,
        exercise_minutes=exercise,
        mood=mood,
    )


# ---------------------------------------------------------------------------
# UpdateProfileName
# ---------------------------------------------------------------------------

_NAME_PHRASE = re.compile(
    r"\bmy\s+name\s+is\b\s*|^\s*(?:(?:hi|hey|hello)[\s,!.]+)?(?:just\s+)?call\s+me\b\s*",
    re.IGNORECASE,
)
_I_AM_PREFIX = re.compile(
    r"^\s*(?:(?:hi|hey|hello)[\s,!.]+)?(?:i\s+am|i'm)\s+", re.IGNORECASE,
)
_NAME_WORDS = re.compile(r"^([A-Za-z][A-Za-z'.-]*(?:\s+[A-Za-z][A-Za-z'.-]*){0,2})")
_NAME_STOPWORDS = {
    "and", "from", "here", "i", "the", "a", "an", "but", "so", "btw",
    "now", "please", "pls", "not", "if", "when", "later",
}
# "I am tired" is a mood, not a name
_NOT_NAMES = {
    "tired", "bored", "fine", "good", "great", "ok", "okay", "back", "here",
    "done", "hungry", "sad", "happy", "sick", "busy", "free", "confused",
    "stressed", "sleepy", "late", "ready", "going", "not", "so", "very",
    "feeling", "working", "broke", "worried", "excited", "lost", "stuck",
}


def _leading_name(rest: str) -> str:
    match = _NAME_WORDS.match(rest.strip())
    if not match:
        return ""
    words = []
    for word in match.group(1).split():
        if word.lower() in _NAME_STOPWORDS:
            break
        words.append(word.strip(".'-"))
    return title_case(" ".join(w for w in words if w))


def _i_am_name(text: str) -> str:
    """Name after a leading "I am", only when the whole remainder is a short name."""
    if not _I_AM_PREFIX.search(text):
        return ""
    rest = _after(_I_AM_PREFIX, text).strip(" .!")
    words = rest.split()
    if not 1 <= len(words) <= 2 or "?" in rest:
        return ""
    if any(not w.isalpha() or w.lower() in _NOT_NAMES for w in words):
        return ""
    return title_case(rest)


def _is_profile_name(text: str) -> bool:
    return bool(_NAME_PHRASE.search(text)) or bool(_i_am_name(text))


def _extract_profile_name(text: str, today: date) -> UpdateProfileName | UsageHint:
    name = _leading_name(_after(_NAME_PHRASE, text)) if _NAME_PHRASE.search(text) else _i_am_name(text)
    if not name:
        return UsageHint(
            intent="update_profile_name",
            message="Tell me your name like: my name is Rahul",
        )
    return UpdateProfileName(name=name)


# ---------------------------------------------------------------------------
# Priority order
# ---------------------------------------------------------------------------

RECOGNIZERS: tuple[Recognizer, ...] = (
    Recognizer("add_subscription", _is_subscription, _extract_subscription, insert_record),
    Recognizer("add_emi", _is_obligation, _extract_obligation, insert_record),
    Recognizer("add_project", _is_project, _extract_project, insert_record),
    Recognizer("add_goal", _is_goal, _extract_goal, insert_record),
    Recognizer("add_task", _is_task, _extract_task, insert_record),
    Recognizer("record_income", _is_income, _extract_income, insert_record),
    Recognizer("record_expense", _is_expense, _extract_expense, insert_record),
    Recognizer("record_health", _is_health, _extract_health, upsert_record),
    Recognizer("update_profile_name", _is_profile_name, _extract_profile_name, upsert_record),
)


def route(
    message: str,
    today: date,
    recognizers: tuple[Recognizer, ...] = RECOGNIZERS,
) -> RouteMatch | None:
    """Classify a message. Returns None when no recognizer accepts it."""
    text = " ".join((message or "").split())
    if not text:
        return None

    for recognizer in recognizers:
        if recognizer.matches(text):
            outcome = recognizer.extract(text, today)
            logger.info("Routed message to %s", recognizer.intent)
            return RouteMatch(recognizer=recognizer, outcome=outcome)

    logger.info("No recognizer matched: %s", text[:80])
    return None
