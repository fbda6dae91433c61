"""Notification copy - message kind + parameters -> one of N templates"""

import random
from typing import Dict, List, Optional

TEMPLATES: Dict[str, List[str]] = {
    "debt_assigned": [
        "**DEBT ASSIGNED** 💸\nAmount: {amount}\nReason: {reason}\nInterest begins tomorrow.",
    ],
    "cardio_assigned": [
        "**CARDIO PUNISHMENT** 🏃\n{minutes} minutes {kind}\nReason: {reason}\nDue by end of day.",
    ],
    "good_boy_bonus": [
        "Here's your {amount}, don't spend it all in one place 💸",
        "Look who finally earned something! {amount} for {reason} 🎉",
        "Such a good boy! Here's {amount} - try not to mess it up 😏",
        "Amazing work! {amount} earned. Keep this up and you might actually succeed 💪",
        "Wow, actual effort! {amount} bonus for {reason}. Color me impressed 🌟",
    ],
    "debt_escalation": [
        "Your debt is now {amount} and growing. Stop being lazy and get on that scooter. 🛵",
        "Day {days} of ignoring your {amount} debt. The interest keeps piling up while you procrastinate. 📈",
        "{amount} in debt and counting. You can either work it off or watch it grow. Your choice. 💸",
        "That {amount} debt isn't going to pay itself. Time to stop making excuses. 🚫",
    ],
    "workout_earning": [
        "💪 {kind} completed - {amount} earned",
        "Look who actually showed up to the gym! {amount} for {kind}",
        "{kind} done. Here's your {amount} - don't get too excited",
        "About time! {amount} earned for {kind}",
    ],
    "choice_presentation": [
        "\n".join(
            [
                "**DEBT PAYMENT OPTIONS** 💰",
                "Current debt: {amount}",
                "",
                "Choose your path:",
                "• Sweat it off: 2 hours cardio = $50 forgiveness",
                "• Work it off: Uber delivery (keep nothing earned)",
                "• Let it grow: 30% daily interest compounds",
                "",
                "What's it gonna be? 🤔",
            ]
        ),
    ],
}


def render_message(kind: str, rng: Optional[random.Random] = None, /, **params) -> str:
    """
    Pick a template for ``kind`` and fill it.

    Args:
        kind: Key in TEMPLATES
        rng: Randomness source; module-level random when omitted
        params: Template fields (amount, reason, kind, minutes, days)

    Raises:
        KeyError: Unknown message kind
    """
    templates = TEMPLATES[kind]
    chooser = rng or random
    return chooser.choice(templates).format(**params)


def wrap_code_block(text: str, limit: int = 2000) -> str:
    """Fence text for chat delivery, truncating to the sink's message size limit"""
    fence = "```"
    budget = limit - 2 * len(fence) - 2
    if len(text) > budget:
        text = text[: budget - 1] + "…"
    return f"{fence}\n{text}\n{fence}"
