"""
Jeni Life OS — Fallback Responder.

Deterministic replies built straight from the LifeSnapshot, used when
the completion service is unavailable. Never makes a network call.
"""

from __future__ import annotations

from jeni.core.context import LifeSnapshot
from jeni.core.formatting import format_inr


def fallback_reply(message: str, snapshot: LifeSnapshot) -> str:
    """Answer the common money/EMI/project questions from data alone."""
    q = (message or "").lower()
    name = snapshot.user_name or "there"

    if "salary" in q or "income" in q:
        return (
            f"Hey {name}! Your net salary is {format_inr(snapshot.net_income)}/month. "
            f"EMIs take {format_inr(snapshot.total_obligations)} and subscriptions "
            f"{format_inr(snapshot.total_subscriptions)}, leaving "
            f"{format_inr(snapshot.free_cash)}. "
            "(AI is temporarily offline, showing basic data)"
        )

    if "emi" in q or "loan" in q:
        if not snapshot.obligations:
            return "You have no active EMIs on record. Add one with: add emi Bike 4500 due 5th"
        listing = ", ".join(
            f"{e.name}: {format_inr(e.emi_amount)}" for e in snapshot.obligations
        )
        return (
            f"You have {len(snapshot.obligations)} active EMIs totaling "
            f"{format_inr(snapshot.total_obligations)}/month. {listing}"
        )

    if "project" in q:
        if not snapshot.projects:
            return "No projects yet. Add one with: add project <name> 0% planned"
        listing = ", ".join(f"{p.name} ({p.progress}%)" for p in snapshot.projects)
        return f"Your projects: {listing}"

    return (
        f"Hey {name}! I'm having trouble connecting to my AI brain right now. "
        "Your data is still available and commands like \"spent 500 on food\" "
        "keep working. Try again in a moment! 🙏"
    )
