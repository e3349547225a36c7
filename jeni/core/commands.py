"""
Jeni Life OS — Typed command payloads.

Each recognized intent produces exactly one of these models. The model
knows which RecordKind it writes to and, for upserts, which fields form
its natural key (besides the owner). ``values()`` is the row payload
handed to the record store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel, field_validator

from jeni.data.models import RecordKind


class Command(BaseModel):
    """Base for every structured mutation."""

    kind: ClassVar[RecordKind]
    intent: ClassVar[str]
    # Upsert key columns besides user_id; only used by upsert writers
    natural_key: ClassVar[tuple[str, ...]] = ()

    def values(self) -> dict[str, Any]:
        return self.model_dump()

    def key(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.natural_key}


class AddSubscription(Command):
    """JSON example: {"name": "Netflix", "amount": 649, "billing_cycle": "monthly"}"""

    kind = RecordKind.SUBSCRIPTION
    intent = "add_subscription"

    name: str
    amount: float
    billing_cycle: str = "monthly"
    category: str = "other"
    is_essential: bool = False
    status: str = "active"


class AddObligation(Command):
    """JSON example: {"name": "Bike", "emi_amount": 4500, "due_day": 5, "lender": "HDFC"}"""

    kind = RecordKind.EMI
    intent = "add_emi"

    name: str = "EMI"
    emi_amount: float
    lender: str | None = None
    due_day: int = 1
    remaining_months: int = 12
    total_months: int = 18
    status: str = "active"

    @field_validator("due_day")
    @classmethod
    def clamp_due_day(cls, v: int) -> int:
        return min(max(v, 1), 31)


class RecordIncome(Command):
    kind = RecordKind.INCOME
    intent = "record_income"

    month: str
    year: int
    base_salary: float
    overtime: float = 0
    bonus: float = 0
    freelance: float = 0
    passive_income: float = 0
    deductions_pf: float = 0
    deductions_tax: float = 0
    deductions_other: float = 0

    @property
    def net(self) -> float:
        return (
            self.base_salary + self.overtime + self.bonus
            + self.freelance + self.passive_income
            - self.deductions_pf - self.deductions_tax - self.deductions_other
        )


class AddProject(Command):
    kind = RecordKind.PROJECT
    intent = "add_project"

    name: str
    progress: int = 0
    status: str = "active"
    priority: str = "medium"

    @field_validator("progress")
    @classmethod
    def clamp_progress(cls, v: int) -> int:
        return min(max(v, 0), 100)


class AddTask(Command):
    kind = RecordKind.TASK
    intent = "add_task"

    title: str
    priority: str = "medium"
    due_date: str | None = None
    is_done: bool = False


class RecordExpense(Command):
    kind = RecordKind.EXPENSE
    intent = "record_expense"

    amount: float
    category: str = "other"
    description: str
    payment_method: str | None = None
    date: str


class RecordHealth(Command):
    """Only the fields the user mentioned are written; the rest stay as stored."""

    kind = RecordKind.HEALTH
    intent = "record_health"
    natural_key = ("date",)

    date: str
    sleep_hours: float | None = None
    steps: int | None = None
    water_glasses: int | None = None
    exercise_minutes: int | None = None
    mood: int | None = None

    def values(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AddGoal(Command):
    kind = RecordKind.GOAL
    intent = "add_goal"

    title: str
    category: str = "personal"
    target_value: float | None = None
    current_value: float = 0
    status: str = "in_progress"


class UpdateProfileName(Command):
    """One profile per user, so the owner alone is the upsert key."""

    kind = RecordKind.PROFILE
    intent = "update_profile_name"

    name: str


@dataclass(frozen=True)
class UsageHint:
    """Returned instead of a command when a required field is missing."""

    intent: str
    message: str
