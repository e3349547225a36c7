"""Tests for jeni.core.executor — one write per command, confirmations.

Uses a real SQLiteStore on a temp file for the happy paths and a mocked
store for failures.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from jeni.core.commands import (
    AddObligation,
    AddSubscription,
    RecordExpense,
    RecordHealth,
    RecordIncome,
    UpdateProfileName,
)
from jeni.core.executor import (
    MutationExecutor,
    confirmation_for,
    insert_record,
    upsert_record,
)
from jeni.core.router import route
from jeni.data.models import Profile, RecordKind, Subscription
from jeni.ports.store_port import StoreError

TODAY = date(2026, 3, 14)
OWNER = "user-1"


async def _all_rows(store, owner=OWNER):
    counts = {}
    for kind in RecordKind:
        counts[kind] = await store.query(kind, owner)
    return counts


# ---------------------------------------------------------------------------
# Confirmations
# ---------------------------------------------------------------------------


class TestConfirmations:
    def test_subscription(self):
        cmd = AddSubscription(name="Netflix", amount=649, category="entertainment")
        assert confirmation_for(cmd) == (
            "✅ Subscription added: Netflix | ₹649/month | entertainment | optional"
        )

    def test_yearly_essential_subscription(self):
        cmd = AddSubscription(name="iCloud", amount=900, billing_cycle="yearly", is_essential=True)
        assert "₹900/year" in confirmation_for(cmd)
        assert "essential" in confirmation_for(cmd)

    def test_obligation_with_lender(self):
        cmd = AddObligation(name="Bike", emi_amount=4500, lender="HDFC", due_day=5, remaining_months=18, total_months=24)
        text = confirmation_for(cmd)
        assert "₹4,500/month" in text
        assert "due on day 5" in text
        assert "18 months left" in text
        assert text.endswith("| HDFC")

    def test_income_shows_net(self):
        cmd = RecordIncome(month="March", year=2026, base_salary=125000, deductions_tax=10000)
        assert "Net: ₹1,15,000/month" in confirmation_for(cmd)

    def test_health_lists_only_given_fields(self):
        cmd = RecordHealth(date="2026-03-14", sleep_hours=7.5, steps=12000)
        assert confirmation_for(cmd) == (
            "✅ Health logged for 2026-03-14: sleep 7.5 hrs, 12,000 steps"
        )

    def test_expense_with_method(self):
        cmd = RecordExpense(amount=250, category="transport", description="uber", payment_method="upi", date="2026-03-14")
        assert confirmation_for(cmd) == (
            "✅ Expense logged: ₹250 on uber (transport) via upi | 2026-03-14"
        )


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


class TestWriters:
    @pytest.mark.asyncio
    async def test_insert_appends(self, store):
        cmd = AddSubscription(name="Netflix", amount=649)
        await insert_record(store, OWNER, cmd)
        await insert_record(store, OWNER, cmd)
        rows = await store.query(RecordKind.SUBSCRIPTION, OWNER)
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_health_upsert_merges_same_day(self, store):
        await upsert_record(store, OWNER, RecordHealth(date="2026-03-14", sleep_hours=7))
        await upsert_record(store, OWNER, RecordHealth(date="2026-03-14", steps=8000))

        rows = await store.query(RecordKind.HEALTH, OWNER)
        assert len(rows) == 1
        assert rows[0]["sleep_hours"] == 7
        assert rows[0]["steps"] == 8000

    @pytest.mark.asyncio
    async def test_health_upsert_new_day_creates_row(self, store):
        await upsert_record(store, OWNER, RecordHealth(date="2026-03-14", steps=100))
        await upsert_record(store, OWNER, RecordHealth(date="2026-03-15", steps=200))
        rows = await store.query(RecordKind.HEALTH, OWNER)
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_profile_upsert_one_row_per_user(self, store):
        await upsert_record(store, OWNER, UpdateProfileName(name="Rahul"))
        await upsert_record(store, OWNER, UpdateProfileName(name="Rahul Sharma"))
        await upsert_record(store, "user-2", UpdateProfileName(name="Priya"))

        rows = await store.query(RecordKind.PROFILE, OWNER)
        assert len(rows) == 1
        assert Profile.from_row(rows[0]).name == "Rahul Sharma"
        assert len(await store.query(RecordKind.PROFILE, "user-2")) == 1


# ---------------------------------------------------------------------------
# MutationExecutor
# ---------------------------------------------------------------------------


class TestMutationExecutor:
    @pytest.mark.asyncio
    async def test_exactly_one_row_written(self, store):
        executor = MutationExecutor(store)
        result = await executor.execute(OWNER, route("add sub Netflix 649", TODAY))

        assert result.success is True
        assert "₹649" in result.reply

        rows = await _all_rows(store)
        written = {kind: r for kind, r in rows.items() if r}
        assert list(written) == [RecordKind.SUBSCRIPTION]
        sub = Subscription.from_row(written[RecordKind.SUBSCRIPTION][0])
        assert sub.name == "Netflix"
        assert sub.amount == 649
        assert sub.is_essential is False

    @pytest.mark.asyncio
    async def test_usage_hint_writes_nothing(self, store):
        executor = MutationExecutor(store)
        result = await executor.execute(OWNER, route("add sub Netflix", TODAY))

        assert result.success is False
        assert "add sub Netflix 649" in result.reply
        rows = await _all_rows(store)
        assert not any(rows.values())

    @pytest.mark.asyncio
    async def test_store_error_becomes_reply(self):
        store = MagicMock()
        store.create = AsyncMock(side_effect=StoreError("disk full"))
        executor = MutationExecutor(store)

        result = await executor.execute(OWNER, route("spent 500 on food", TODAY))

        assert result.success is False
        assert result.reply == "❌ Couldn't save that: disk full"
        assert result.error_message == "disk full"
        store.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rows_scoped_to_owner(self, store):
        executor = MutationExecutor(store)
        await executor.execute(OWNER, route("spent 500 on food", TODAY))
        assert await store.query(RecordKind.EXPENSE, "someone-else") == []
        assert len(await store.query(RecordKind.EXPENSE, OWNER)) == 1
