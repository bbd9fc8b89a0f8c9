# src/todo_companion/core/assistant.py

"""
Rule-based todo assistant.

Not an LLM: the user message is lowercased and checked against an ordered
rule table. The first rule with any keyword phrase contained in the message
builds the reply from live task statistics; otherwise a fallback is picked.

Key invariants:
- rule order is behaviour (e.g. "hi" must win over "done"); never sort the table,
- matching is plain substring matching ("hi" also fires inside "this"),
- statistics are recomputed from the collection on every call,
- random picks go through the injected random_index(n), so tests can pin them.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Final

from ..tasks.task_models import Task
from .ports import Clock, RandomIndex, local_now
from .query import TaskInsights, completion_percent, compute_insights

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplyContext:
    insights: TaskInsights
    now: datetime
    random_index: RandomIndex

    def pick(self, options: Sequence[str]) -> str:
        return options[self.random_index(len(options))]


ReplyBuilder = Callable[[ReplyContext], str]


@dataclass(frozen=True, slots=True)
class Rule:
    name: str
    keywords: tuple[str, ...]
    build: ReplyBuilder

    def triggers(self, message: str) -> bool:
        return any(k in message for k in self.keywords)


# ---- canned texts ----

HELP_TEXT: Final[str] = (
    "🤖 I'm your intelligent todo assistant! Here's what I can help with:\n\n"
    "📊 **Analysis**: Ask about your progress, overdue tasks, or productivity patterns\n"
    "⚡ **Suggestions**: Get smart recommendations for task prioritization\n"
    "💡 **Tips**: Productivity advice tailored to your current workload\n"
    "🎯 **Focus**: Help you identify what to work on next\n"
    "📈 **Motivation**: Celebrate achievements and provide encouragement\n\n"
    'Try asking: "What should I focus on?" or "How am I doing?"'
)

ORGANIZE_TEXT: Final[str] = (
    "📂 **Smart Organization Tips:**\n\n"
    "🏢 **Work**: Professional tasks, meetings, deadlines\n"
    "👤 **Personal**: Self-care, hobbies, personal goals\n"
    "🛒 **Shopping**: Groceries, household items, purchases\n"
    "🏥 **Health**: Exercise, appointments, wellness activities\n"
    "📌 **Other**: Miscellaneous tasks that don't fit elsewhere\n\n"
    "💡 **Pro tip**: Use the priority levels within each category - "
    "not everything needs to be high priority!"
)

OVERWHELM_TEXT: Final[str] = (
    "🌱 **Take a breath** - feeling overwhelmed is normal! Try this:\n\n"
    "1️⃣ **Brain dump**: Add any floating thoughts as todos\n"
    "2️⃣ **Prioritize ruthlessly**: What absolutely must happen today?\n"
    "3️⃣ **Start small**: Pick the easiest task to build momentum\n"
    "4️⃣ **Break it down**: Turn big tasks into smaller, manageable steps\n\n"
    "You don't have to do everything at once. One step at a time! 🌟"
)

FUN_TEXT: Final[str] = (
    "🎮 **Gamify your productivity!**\n\n"
    '🏆 **Challenge yourself**: Complete 3 tasks in a row for a "streak bonus"\n'
    "⭐ **Point system**: High priority = 3 points, Medium = 2, Low = 1\n"
    "🎯 **Daily quest**: Set a goal to earn 10 points today\n"
    "🥇 **Achievement unlocked**: Celebrate when you complete all tasks in a category!\n\n"
    "Turn your todo list into your personal productivity game! 🚀"
)

GENERAL_TIPS: Final[tuple[str, ...]] = (
    "🍅 **Pomodoro Technique**: Work in 25-minute focused bursts with 5-minute breaks",
    "🎯 **2-Minute Rule**: If it takes less than 2 minutes, do it immediately",
    "📅 **Time Blocking**: Schedule specific times for different types of tasks",
    "🔄 **Weekly Review**: Spend 15 minutes each week reviewing and planning",
    "🏆 **Celebrate Wins**: Acknowledge completed tasks - even small ones!",
)

MOTIVATIONS: Final[tuple[str, ...]] = (
    "💪 You've got this! Remember, progress isn't about perfection - it's about consistency.",
    "🌟 Every completed task is a step forward. You're building momentum one todo at a time!",
    "🎯 Focus on progress, not perfection. You're doing better than you think!",
    "⭐ Great things are built one task at a time. Keep going - you're making it happen!",
    "🚀 You're not behind - you're exactly where you need to be. Keep moving forward!",
)

FALLBACKS: Final[tuple[str, ...]] = (
    "🤖 I'm your smart todo assistant! I can analyze your tasks, suggest what to focus on, "
    "provide productivity tips, and help you stay motivated. What specific help do you need?",
    "💡 I'm here to help you be more productive! Try asking me \"What should I focus on?\" "
    'or "How am I doing?" for personalized insights based on your current todos.',
    "🎯 I can provide intelligent insights about your tasks! Ask me about your progress, "
    "what to prioritize, or request productivity tips tailored to your current workload.",
)


# ---- reply builders ----

def _time_of_day_greeting(now: datetime) -> str:
    if now.hour < 12:
        return "Good morning!"
    if now.hour < 17:
        return "Good afternoon!"
    return "Good evening!"


def _greeting(ctx: ReplyContext) -> str:
    s = ctx.insights.stats
    greeting = _time_of_day_greeting(ctx.now)
    if s.total == 0:
        return (
            f"{greeting} 👋 I'm your smart todo assistant! Ready to help you get organized? "
            "Start by adding your first task!"
        )
    overdue = f" ({s.overdue} overdue)" if s.overdue > 0 else ""
    return (
        f"{greeting} 👋 You currently have {s.active} active tasks{overdue}. "
        "How can I help you stay productive today?"
    )


def _help(ctx: ReplyContext) -> str:
    return HELP_TEXT


def _status(ctx: ReplyContext) -> str:
    ins = ctx.insights
    s = ins.stats
    if s.total == 0:
        return (
            "📊 You have a clean slate! No todos yet. This is a great time to plan "
            "your day or week. What would you like to accomplish?"
        )

    lines = [
        "📊 **Your Todo Status:**",
        "",
        f"• Total tasks: {s.total}",
        f"• Completed: {s.completed} ({completion_percent(s.completed, s.total)}%)",
        f"• Active: {s.active}",
    ]
    if s.overdue > 0:
        lines.append(f"• ⚠️ Overdue: {s.overdue}")
    if ins.due_soon > 0:
        lines.append(f"• ⏰ Due soon: {ins.due_soon}")
    if ins.high_priority > 0:
        lines.append(f"• 🔴 High priority: {ins.high_priority}")
    response = "\n".join(lines) + "\n"

    if s.completed > s.active:
        response += "\n🎉 Great job! You're crushing it with more completed than active tasks!"
    elif s.overdue == 0:
        response += "\n✨ Excellent! No overdue tasks - you're staying on top of things!"
    elif s.overdue > 3:
        response += (
            "\n🚨 You have quite a few overdue tasks. Consider reviewing deadlines "
            "or breaking large tasks into smaller ones."
        )
    return response


def _focus(ctx: ReplyContext) -> str:
    ins = ctx.insights
    s = ins.stats
    if s.active == 0:
        return (
            "🎯 All caught up! No active tasks right now. Perfect time to:\n"
            "• Plan upcoming projects\n"
            "• Set new goals\n"
            "• Take a well-deserved break\n"
            "• Review and celebrate your achievements!"
        )

    response = "🎯 **Here's what I recommend focusing on:**\n\n"

    if s.overdue > 0 and ins.first_overdue is not None:
        t = ins.first_overdue
        response += "🚨 **URGENT**: Handle overdue tasks first!\n"
        response += f'Start with: "{t.text}" ({t.category.value})\n\n'

    if s.overdue == 0:
        if ins.due_soon > 0 and ins.first_due_soon is not None:
            t = ins.first_due_soon
            due = t.due_date.isoformat() if t.due_date else ""
            response += "⏰ **TIME-SENSITIVE**: Due soon tasks\n"
            response += f'Focus on: "{t.text}" (due {due})\n\n'

        if ins.high_priority > 0 and ins.first_high_priority is not None:
            t = ins.first_high_priority
            response += f'🔴 **HIGH IMPACT**: "{t.text}"\n'
            response += f"Category: {t.category.value}\n\n"

        if ins.due_soon == 0:
            response += (
                "💡 **Tip**: Start with high-priority tasks or tackle quick wins to build momentum!"
            )

    return response


def _tips(ctx: ReplyContext) -> str:
    ins = ctx.insights
    tips = ["💡 **Smart Productivity Tips:**\n\n"]

    if ins.stats.overdue > 2:
        tips.append(
            "🚨 **For Overdue Tasks**: Break them into smaller, 15-minute chunks. "
            "Often we avoid tasks because they feel overwhelming."
        )
    if ins.high_priority > 5:
        tips.append(
            "⚡ **Priority Management**: You have many high-priority tasks. "
            "Consider if they're all truly urgent - use the Eisenhower Matrix!"
        )
    if ins.stats.total > 20:
        tips.append(
            '📝 **Task Overload**: You have many tasks! Try the "Rule of 3" - '
            "focus on just 3 important tasks per day."
        )

    tips.append(ctx.pick(GENERAL_TIPS))
    return "\n".join(tips)


def _motivation(ctx: ReplyContext) -> str:
    response = ctx.pick(MOTIVATIONS)
    completed = ctx.insights.stats.completed
    if completed > 0:
        response += (
            f"\n\n🏆 You've already completed {completed} tasks - that's proof you can do this!"
        )
    return response


def _organize(ctx: ReplyContext) -> str:
    return ORGANIZE_TEXT


def _celebrate(ctx: ReplyContext) -> str:
    s = ctx.insights.stats
    if s.completed == 0:
        return (
            "🎯 Ready to tackle your first task? I'm here to cheer you on! "
            "Every journey starts with a single step."
        )
    # completed >= 80% of total, in integers.
    if s.completed * 5 >= s.total * 4:
        pct = completion_percent(s.completed, s.total)
        return (
            f"🎉 **AMAZING!** You've completed {pct}% of your tasks! "
            "You're absolutely crushing it! 🏆"
        )
    return (
        f"🎊 Fantastic work! {s.completed} tasks completed! Each one brings you closer "
        "to your goals. Keep that momentum going! 💪"
    )


def _time(ctx: ReplyContext) -> str:
    ins = ctx.insights
    if ins.due_soon > 0:
        return (
            f"⏰ **Time Management Alert**: You have {ins.due_soon} tasks due soon. "
            "Consider time-blocking your calendar to ensure you have dedicated time "
            "for these important tasks!"
        )
    if ins.stats.overdue > 0:
        return (
            f"🚨 **Deadline Recovery**: {ins.stats.overdue} tasks are overdue. "
            'Try the "Debt Snowball" method - tackle the smallest overdue task first '
            "to build momentum!"
        )
    return (
        "✅ **Great Timing!** No urgent deadlines right now. Perfect opportunity to work "
        "ahead or tackle those important-but-not-urgent tasks!"
    )


def _overwhelm(ctx: ReplyContext) -> str:
    return OVERWHELM_TEXT


def _fun(ctx: ReplyContext) -> str:
    return FUN_TEXT


RULES: Final[tuple[Rule, ...]] = (
    Rule("greeting", ("hello", "hi", "hey"), _greeting),
    Rule("help", ("help", "what can you do", "commands"), _help),
    Rule("status", ("status", "how am i doing", "progress", "summary"), _status),
    Rule("focus", ("focus", "what should i work on", "next task", "prioritize"), _focus),
    Rule("tips", ("tips", "productivity", "advice"), _tips),
    Rule("motivation", ("motivation", "encourage", "struggling"), _motivation),
    Rule("organize", ("organize", "categories", "structure"), _organize),
    Rule("celebrate", ("done", "finished", "completed", "celebrate"), _celebrate),
    Rule("time", ("time", "deadline", "schedule"), _time),
    Rule("overwhelm", ("overwhelmed", "too much", "stressed"), _overwhelm),
    Rule("fun", ("boring", "fun", "game"), _fun),
)


def normalize(message: str) -> str:
    return (message or "").strip().lower()


class Assistant:
    """Stateless responder; holds only its injected randomness and clock."""

    def __init__(
        self,
        *,
        random_index: RandomIndex = random.randrange,
        clock: Clock = local_now,
        rules: Sequence[Rule] = RULES,
    ) -> None:
        self._random_index = random_index
        self._clock = clock
        self._rules = tuple(rules)

    def match(self, user_message: str) -> Rule | None:
        message = normalize(user_message)
        for rule in self._rules:
            if rule.triggers(message):
                return rule
        return None

    def respond(self, user_message: str, tasks: Iterable[Task]) -> str:
        now = self._clock()
        ctx = ReplyContext(
            insights=compute_insights(tasks, now.date()),
            now=now,
            random_index=self._random_index,
        )
        rule = self.match(user_message)
        if rule is None:
            logger.debug("Assistant: no rule matched, using fallback.")
            return ctx.pick(FALLBACKS)
        logger.debug("Assistant: rule=%s", rule.name)
        return rule.build(ctx)
