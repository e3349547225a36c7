"""
Jeni Life OS — System Prompt Compiler.

Renders a LifeSnapshot into the instruction document sent to the
completion service. Pure and deterministic: the same snapshot always
yields the same text. Empty sections are stated explicitly so the model
asks for the data instead of inventing it.
"""

from __future__ import annotations

from jeni.core.context import LifeSnapshot
from jeni.core.formatting import format_inr, group_digits

PROMPT_TASK_LIMIT = 10

_PERSONA = """\
You are Jeni, {name}'s personal life intelligence system.

## YOUR PERSONALITY
- Talk like a smart, caring friend, not a corporate AI
- Be SPECIFIC: use actual numbers from the data below
- Be PROACTIVE: mention important things even if not asked
- Use Hindi words occasionally if natural (bhai, yaar, chal)
- Challenge {name} when needed ("Bro, you slept 5 hrs again")
- Celebrate wins when a project or goal moves forward
- Keep responses focused and actionable"""

_RULES = """\
## IMPORTANT RULES
1. ALWAYS use real numbers from the data above
2. If data is missing, say so and suggest adding it (e.g. "add sub Netflix 649")
3. Mention concerning things proactively (low sleep, upcoming EMI, deadline)
4. Give SPECIFIC, ACTIONABLE advice (not generic)
5. Reference projects by name
6. If the user asks about something not in the data, say so honestly
7. Format financial amounts in Indian notation (₹XX,XXX)
8. Keep responses concise but comprehensive
9. Never make up data for a section marked as having no data"""


def _missing(what: str) -> str:
    return f"- No {what} yet. Prompt the user to add it."


def _identity(snapshot: LifeSnapshot, name: str) -> list[str]:
    profile = snapshot.profile
    location = profile.location if profile and profile.location else "India"
    lines = ["### Identity", f"- Name: {name}", f"- Location: {location}"]
    if profile:
        lines.append(f"- Wakes {profile.wake_time}, sleeps {profile.sleep_time} ({profile.timezone})")
    lines.append(f"- Current time: {snapshot.current_time}")
    return lines


def _finance(snapshot: LifeSnapshot) -> list[str]:
    lines = ["### Finance"]
    income = snapshot.latest_income
    if income:
        lines.append(
            f"- Net Salary: {format_inr(snapshot.net_income)}/month ({income.month} {income.year})"
        )
        lines.append(
            f"- Base: {format_inr(income.base_salary)} | OT: {format_inr(income.overtime)} "
            f"| Bonus: {format_inr(income.bonus)} | Deductions: {format_inr(income.deductions)}"
        )
    else:
        lines.append(_missing("income data"))

    lines.append(
        f"- Total EMI: {format_inr(snapshot.total_obligations)}/month "
        f"({len(snapshot.obligations)} active)"
    )
    if snapshot.obligations:
        for emi in snapshot.obligations:
            left = f"{emi.remaining_months} months left" if emi.remaining_months is not None else "term unknown"
            lines.append(
                f"  • {emi.name}: {format_inr(emi.emi_amount)}/mo, due {emi.due_day}th, "
                f"{left}, {emi.lender or 'unknown lender'}"
            )
    else:
        lines.append("  " + _missing("EMIs"))

    lines.append(
        f"- Total Subscriptions: {format_inr(snapshot.total_subscriptions)}/month "
        f"({len(snapshot.subscriptions)} active)"
    )
    if snapshot.subscriptions:
        for sub in snapshot.subscriptions:
            tag = "ESSENTIAL" if sub.is_essential else "OPTIONAL"
            lines.append(
                f"  • {sub.name}: {format_inr(sub.amount)}/{sub.billing_cycle} [{tag}]"
            )
    else:
        lines.append("  " + _missing("subscriptions"))

    if snapshot.expenses:
        lines.append(
            f"- Monthly Expenses so far: {format_inr(snapshot.expense_total)} "
            f"({len(snapshot.expenses)} entries)"
        )
    else:
        lines.append(_missing("expenses this month"))

    lines.append(
        f"- Free cash (salary - EMI - subs): {format_inr(snapshot.free_cash)}"
    )
    return lines


def _projects(snapshot: LifeSnapshot) -> list[str]:
    lines = [f"### Projects ({len(snapshot.projects)})"]
    if not snapshot.projects:
        return lines + [_missing("projects")]
    for p in snapshot.projects:
        line = f"- {p.name}: {p.progress}% done | {p.status} | Priority: {p.priority}"
        if p.target_launch:
            line += f" | Launch: {p.target_launch}"
        if p.tech_stack:
            line += f" | Stack: {p.tech_stack}"
        lines.append(line)
    return lines


def _tasks(snapshot: LifeSnapshot) -> list[str]:
    lines = [f"### Pending Tasks ({len(snapshot.pending_tasks)})"]
    if not snapshot.pending_tasks:
        return lines + [_missing("pending tasks")]
    for t in snapshot.pending_tasks[:PROMPT_TASK_LIMIT]:
        due = f" (due: {t.due_date})" if t.due_date else ""
        lines.append(f"- {t.title}{due} [{t.priority}]")
    return lines


def _goals(snapshot: LifeSnapshot) -> list[str]:
    lines = ["### Goals"]
    if not snapshot.goals:
        return lines + [_missing("goals")]
    for g in snapshot.goals:
        target = f"{g.target_value:g}" if g.target_value is not None else "?"
        lines.append(
            f"- {g.title}: {g.current_value:g}/{target} | {g.category} "
            f"| Deadline: {g.deadline or 'none'}"
        )
    return lines


_SCHEDULE_MARKS = {"done": "✅", "active": "🔴 NOW"}


def _schedule(snapshot: LifeSnapshot) -> list[str]:
    lines = ["### Today's Schedule"]
    if not snapshot.schedule:
        return lines + [_missing("schedule for today")]
    for s in snapshot.schedule:
        lines.append(f"- {s.time} {s.event} [{s.type}] {_SCHEDULE_MARKS.get(s.status, '⏳')}")
    return lines


def _health(snapshot: LifeSnapshot) -> list[str]:
    lines = ["### Health Today"]
    h = snapshot.health
    if h is None:
        return lines + [_missing("health data logged today")]
    sleep = f"{h.sleep_hours:g}" if h.sleep_hours is not None else "?"
    line = (
        f"- Sleep: {sleep} hrs | Steps: {group_digits(h.steps)} | Water: {h.water_glasses} glasses "
        f"| Exercise: {h.exercise_minutes} min"
    )
    if h.mood is not None:
        line += f" | Mood: {h.mood}"
    return lines + [line]


def _conversation(snapshot: LifeSnapshot) -> list[str]:
    lines = ["### Recent Conversation"]
    if not snapshot.recent_turns:
        return lines + ["- This is the start of the conversation."]
    return lines + [snapshot.recent_chat_context]


def compile_system_prompt(snapshot: LifeSnapshot) -> str:
    """Render the snapshot into the system prompt, sections in fixed order."""
    name = snapshot.user_name or "User"
    sections = [
        [_PERSONA.format(name=name)],
        [f"## {name.upper()}'S CURRENT LIFE STATE"],
        _identity(snapshot, name),
        _finance(snapshot),
        _projects(snapshot),
        _tasks(snapshot),
        _goals(snapshot),
        _schedule(snapshot),
        _health(snapshot),
        _conversation(snapshot),
        [_RULES],
    ]
    return "\n\n".join("\n".join(lines) for lines in sections)
