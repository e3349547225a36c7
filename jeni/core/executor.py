"""
Jeni Life OS — Mutation Executor.

Turns one typed command into exactly one write against the record store
and formats the confirmation shown to the user. Store failures come back
as an error reply carrying the store's message; nothing is retried and
the completion service is never involved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable

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
)
from jeni.core.formatting import format_inr, group_digits
from jeni.ports.store_port import StoreError

if TYPE_CHECKING:
    from jeni.core.router import RouteMatch
    from jeni.ports.store_port import RecordStore

logger = logging.getLogger(__name__)

Writer = Callable[["RecordStore", str, Command], Awaitable[None]]


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


async def insert_record(store: RecordStore, owner: str, command: Command) -> None:
    """Append one new row."""
    await store.create(command.kind, owner, command.values())


async def upsert_record(store: RecordStore, owner: str, command: Command) -> None:
    """Update the row matching the command's natural key, else create it.

    Only the command's own values are written, so a later partial write
    merges into the existing row instead of blanking other columns.
    """
    key = command.key()
    existing = await store.query(command.kind, owner, where=key, limit=1)
    values = command.values()
    if existing:
        changes = {k: v for k, v in values.items() if k not in key}
        await store.update(command.kind, owner, where={"id": existing[0]["id"]}, values=changes)
    else:
        await store.create(command.kind, owner, values)


# ---------------------------------------------------------------------------
# Confirmations
# ---------------------------------------------------------------------------


def _confirm_subscription(cmd: AddSubscription) -> str:
    cycle = "year" if cmd.billing_cycle == "yearly" else "month"
    tag = "essential" if cmd.is_essential else "optional"
    return (
        f"✅ Subscription added: {cmd.name} | {format_inr(cmd.amount)}/{cycle} "
        f"| {cmd.category} | {tag}"
    )


def _confirm_obligation(cmd: AddObligation) -> str:
    lender = f" | {cmd.lender}" if cmd.lender else ""
    return (
        f"✅ EMI added: {cmd.name} | {format_inr(cmd.emi_amount)}/month "
        f"| due on day {cmd.due_day} | {cmd.remaining_months} months left{lender}"
    )


def _confirm_income(cmd: RecordIncome) -> str:
    return (
        f"✅ Income saved for {cmd.month} {cmd.year}: base {format_inr(cmd.base_salary)}, "
        f"overtime {format_inr(cmd.overtime)}, bonus {format_inr(cmd.bonus)}, "
        f"deductions {format_inr(cmd.deductions_pf + cmd.deductions_tax + cmd.deductions_other)}. "
        f"Net: {format_inr(cmd.net)}/month"
    )


def _confirm_project(cmd: AddProject) -> str:
    return (
        f"✅ Project added: {cmd.name} | {cmd.progress}% | {cmd.status} "
        f"| priority {cmd.priority}"
    )


def _confirm_task(cmd: AddTask) -> str:
    due = f" (due {cmd.due_date})" if cmd.due_date else ""
    return f"✅ Task added: {cmd.title}{due} [{cmd.priority}]"


def _confirm_expense(cmd: RecordExpense) -> str:
    method = f" via {cmd.payment_method}" if cmd.payment_method else ""
    return (
        f"✅ Expense logged: {format_inr(cmd.amount)} on {cmd.description} "
        f"({cmd.category}){method} | {cmd.date}"
    )


def _confirm_health(cmd: RecordHealth) -> str:
    parts = []
    if cmd.sleep_hours is not None:
        parts.append(f"sleep {cmd.sleep_hours:g} hrs")
    if cmd.steps is not None:
        parts.append(f"{group_digits(cmd.steps)} steps")
    if cmd.water_glasses is not None:
        parts.append(f"{cmd.water_glasses} glasses water")
    if cmd.exercise_minutes is not None:
        parts.append(f"{cmd.exercise_minutes} min exercise")
    if cmd.mood is not None:
        parts.append(f"mood {cmd.mood}")
    return f"✅ Health logged for {cmd.date}: " + ", ".join(parts)


def _confirm_goal(cmd: AddGoal) -> str:
    target = f" | target {cmd.target_value:g}" if cmd.target_value is not None else ""
    return f"✅ Goal added: {cmd.title} | {cmd.category}{target}"


def _confirm_profile_name(cmd: UpdateProfileName) -> str:
    return f"✅ Nice to meet you, {cmd.name}! I'll remember your name."


_CONFIRMATIONS: dict[type[Command], Callable] = {
    AddSubscription: _confirm_subscription,
    AddObligation: _confirm_obligation,
    RecordIncome: _confirm_income,
    AddProject: _confirm_project,
    AddTask: _confirm_task,
    RecordExpense: _confirm_expense,
    RecordHealth: _confirm_health,
    AddGoal: _confirm_goal,
    UpdateProfileName: _confirm_profile_name,
}


def confirmation_for(command: Command) -> str:
    """Deterministic confirmation text for a successfully written command."""
    return _CONFIRMATIONS[type(command)](command)


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


@dataclass
class ExecutionResult:
    reply: str
    success: bool
    error_message: str = ""


class MutationExecutor:
    """Performs the single write behind a routed command."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def execute(self, owner: str, match: RouteMatch) -> ExecutionResult:
        """Write the matched command, or pass a usage hint straight through."""
        outcome = match.outcome
        if not isinstance(outcome, Command):
            logger.info("Usage hint for intent %s, nothing written", outcome.intent)
            return ExecutionResult(reply=outcome.message, success=False)

        try:
            await match.recognizer.write(self._store, owner, outcome)
        except StoreError as exc:
            logger.error("Store error for %s: %s", outcome.intent, exc)
            return ExecutionResult(
                reply=f"❌ Couldn't save that: {exc}",
                success=False,
                error_message=str(exc),
            )

        logger.info("Executed %s for user %s", outcome.intent, owner)
        return ExecutionResult(reply=confirmation_for(outcome), success=True)
