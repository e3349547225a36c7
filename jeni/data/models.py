"""
Jeni Life OS — Data Models.

Every persisted entity belongs to exactly one user (the user_id owner
column). Rows come back from the record store as plain dicts and are
turned into these frozen dataclasses with ``from_row()``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping


class RecordKind(Enum):
    """Closed set of record collections. The value is the table name."""

    PROFILE = "profiles"
    INCOME = "income"
    EMI = "emis"
    SUBSCRIPTION = "subscriptions"
    EXPENSE = "expenses"
    PROJECT = "projects"
    TASK = "tasks"
    GOAL = "goals"
    HEALTH = "health_logs"
    SCHEDULE = "schedule"
    CHAT = "chat_history"


PRIORITY_RANK = {"critical": 0, "high": 1, "medium": 2, "low": 3}


class _Row:
    """Mixin: build a dataclass from a store row, ignoring unknown columns."""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]):
        types = {f.name: f.type for f in fields(cls)}
        values = {}
        for key, value in row.items():
            if key not in types or value is None:
                continue
            # SQLite hands booleans back as 0/1
            values[key] = bool(value) if types[key] == "bool" else value
        return cls(**values)


@dataclass(frozen=True)
class Profile(_Row):
    name: str = ""
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    timezone: str = "Asia/Kolkata"
    wake_time: str = "06:00"
    sleep_time: str = "23:00"
    work_start: str = "09:00"
    work_end: str = "18:00"


@dataclass(frozen=True)
class IncomeRecord(_Row):
    month: str = ""
    year: int = 0
    base_salary: float = 0
    overtime: float = 0
    bonus: float = 0
    freelance: float = 0
    passive_income: float = 0
    deductions_pf: float = 0
    deductions_tax: float = 0
    deductions_other: float = 0
    notes: str | None = None

    @property
    def gross(self) -> float:
        return (
            self.base_salary + self.overtime + self.bonus
            + self.freelance + self.passive_income
        )

    @property
    def deductions(self) -> float:
        return self.deductions_pf + self.deductions_tax + self.deductions_other

    @property
    def net(self) -> float:
        """Sum of all earnings minus all deductions."""
        return self.gross - self.deductions


@dataclass(frozen=True)
class Obligation(_Row):
    """A recurring loan instalment (EMI)."""

    name: str = "EMI"
    emi_amount: float = 0
    lender: str | None = None
    due_day: int = 1
    remaining_months: int | None = None
    total_months: int | None = None
    auto_debit: bool = False
    status: str = "active"


@dataclass(frozen=True)
class Subscription(_Row):
    name: str = ""
    amount: float = 0
    billing_cycle: str = "monthly"
    category: str = "other"
    is_essential: bool = False
    auto_renew: bool = True
    status: str = "active"


@dataclass(frozen=True)
class Expense(_Row):
    amount: float = 0
    category: str = "other"
    description: str | None = None
    payment_method: str | None = None
    date: str = ""


@dataclass(frozen=True)
class Project(_Row):
    name: str = ""
    status: str = "active"
    progress: int = 0
    priority: str = "medium"
    tech_stack: str | None = None
    target_launch: str | None = None


@dataclass(frozen=True)
class Task(_Row):
    title: str = ""
    due_date: str | None = None
    priority: str = "medium"
    is_done: bool = False
    project_id: str | None = None


@dataclass(frozen=True)
class Goal(_Row):
    title: str = ""
    category: str = "personal"
    status: str = "in_progress"
    current_value: float = 0
    target_value: float | None = None
    deadline: str | None = None


@dataclass(frozen=True)
class HealthLog(_Row):
    date: str = ""
    sleep_hours: float | None = None
    steps: int = 0
    water_glasses: int = 0
    exercise_minutes: int = 0
    mood: int | None = None


@dataclass(frozen=True)
class ScheduleItem(_Row):
    date: str = ""
    time: str = ""
    event: str = ""
    type: str = "personal"
    status: str = "pending"


@dataclass(frozen=True)
class ChatTurn(_Row):
    session_id: str = ""
    role: str = "user"           # "user" | "assistant"
    message: str = ""
    model_used: str | None = None
    created_at: str = ""
