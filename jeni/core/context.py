"""
Jeni Life OS — Context Aggregator.

Builds one immutable LifeSnapshot per request: every record set the
assistant needs, fetched concurrently, plus the derived money totals.
A fetch that fails is logged and replaced by its empty value so one bad
table never costs the user the whole snapshot. Read-only.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from jeni.data.models import (
    PRIORITY_RANK,
    ChatTurn,
    Expense,
    Goal,
    HealthLog,
    IncomeRecord,
    Obligation,
    Profile,
    Project,
    RecordKind,
    ScheduleItem,
    Subscription,
    Task,
)

if TYPE_CHECKING:
    from jeni.ports.store_port import RecordStore

logger = logging.getLogger(__name__)

OPEN_TASK_LIMIT = 20
RECENT_TURN_LIMIT = 10


@dataclass(frozen=True)
class LifeSnapshot:
    """Point-in-time view of everything persisted for one user."""

    today: str
    current_time: str
    profile: Profile | None = None
    latest_income: IncomeRecord | None = None
    net_income: float = 0
    obligations: tuple[Obligation, ...] = ()
    total_obligations: float = 0
    subscriptions: tuple[Subscription, ...] = ()
    total_subscriptions: float = 0
    expenses: tuple[Expense, ...] = ()
    expense_total: float = 0
    projects: tuple[Project, ...] = ()
    pending_tasks: tuple[Task, ...] = ()
    goals: tuple[Goal, ...] = ()
    schedule: tuple[ScheduleItem, ...] = ()
    health: HealthLog | None = None
    recent_turns: tuple[ChatTurn, ...] = ()

    @property
    def free_cash(self) -> float:
        """Net income left after EMIs and subscriptions."""
        return self.net_income - self.total_obligations - self.total_subscriptions

    @property
    def user_name(self) -> str | None:
        return self.profile.name if self.profile and self.profile.name else None

    @property
    def recent_chat_context(self) -> str:
        return "\n".join(f"{t.role}: {t.message}" for t in self.recent_turns)


def _settled(result: Any, label: str, owner: str) -> list[dict]:
    """Unwrap one gather() result; a failure becomes an empty row list."""
    if isinstance(result, BaseException):
        logger.warning("Fetch of %s failed for user %s: %s", label, owner, result)
        return []
    return result or []


async def build_life_snapshot(
    store: RecordStore, owner: str, now: datetime,
) -> LifeSnapshot:
    """Fetch every record set for ``owner`` in parallel and aggregate them.

    ``now`` is an aware datetime in the user's timezone; it fixes "today",
    the month-to-date window and the timestamp shown to the model.
    """
    today = now.date().isoformat()
    month_start = date(now.year, now.month, 1).isoformat()

    fetches = {
        "profile": store.query(RecordKind.PROFILE, owner, limit=1),
        "income": store.query(
            RecordKind.INCOME, owner, order_by="created_at", descending=True, limit=1,
        ),
        "emis": store.query(RecordKind.EMI, owner, where={"status": "active"}),
        "subscriptions": store.query(
            RecordKind.SUBSCRIPTION, owner, where={"status": "active"},
        ),
        "expenses": store.query(
            RecordKind.EXPENSE, owner, since={"date": month_start},
            order_by="date", descending=True,
        ),
        "projects": store.query(RecordKind.PROJECT, owner),
        "tasks": store.query(
            RecordKind.TASK, owner, where={"is_done": False},
            order_by="due_date", limit=OPEN_TASK_LIMIT,
        ),
        "goals": store.query(RecordKind.GOAL, owner, where={"status": "in_progress"}),
        "schedule": store.query(
            RecordKind.SCHEDULE, owner, where={"date": today}, order_by="time",
        ),
        "health": store.query(RecordKind.HEALTH, owner, where={"date": today}, limit=1),
        "chat": store.query(
            RecordKind.CHAT, owner, order_by="created_at", descending=True,
            limit=RECENT_TURN_LIMIT,
        ),
    }
    results = await asyncio.gather(*fetches.values(), return_exceptions=True)
    rows = {
        label: _settled(result, label, owner)
        for label, result in zip(fetches, results)
    }

    profile = Profile.from_row(rows["profile"][0]) if rows["profile"] else None
    income = IncomeRecord.from_row(rows["income"][0]) if rows["income"] else None
    obligations = tuple(Obligation.from_row(r) for r in rows["emis"])
    subscriptions = tuple(Subscription.from_row(r) for r in rows["subscriptions"])
    expenses = tuple(Expense.from_row(r) for r in rows["expenses"])
    projects = tuple(sorted(
        (Project.from_row(r) for r in rows["projects"]),
        key=lambda p: PRIORITY_RANK.get(p.priority, len(PRIORITY_RANK)),
    ))

    # Turns arrive newest first; the excerpt reads oldest first
    turns = tuple(ChatTurn.from_row(r) for r in reversed(rows["chat"]))

    return LifeSnapshot(
        today=today,
        current_time=now.strftime("%d %b %Y, %I:%M %p"),
        profile=profile,
        latest_income=income,
        net_income=income.net if income else 0,
        obligations=obligations,
        total_obligations=sum(o.emi_amount for o in obligations),
        subscriptions=subscriptions,
        total_subscriptions=sum(s.amount for s in subscriptions),
        expenses=expenses,
        expense_total=sum(e.amount for e in expenses),
        projects=projects,
        pending_tasks=tuple(Task.from_row(r) for r in rows["tasks"]),
        goals=tuple(Goal.from_row(r) for r in rows["goals"]),
        schedule=tuple(ScheduleItem.from_row(r) for r in rows["schedule"]),
        health=HealthLog.from_row(rows["health"][0]) if rows["health"] else None,
        recent_turns=turns,
    )
