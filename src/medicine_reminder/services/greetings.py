"""Greeting and motivational quote for the daily overview."""

from datetime import datetime

NOON_HOUR = 12
EVENING_HOUR = 18
QUOTE_ROTATION_SECONDS = 5

MOTIVATIONAL_QUOTES = (
    "Your health is your wealth 💪",
    "One step at a time is all it takes 🧘‍♂️",
    "Small steps every day = big results 🌱",
    "Stay strong, take your meds on time ⏰",
    "Healing begins with consistency ❤️",
    "You’ve got this. Keep going! 🚀",
)


def greeting_for(now: datetime) -> str:
    """Return a greeting for the time of day."""
    if now.hour < NOON_HOUR:
        return "Good Morning ☀️"
    if now.hour < EVENING_HOUR:
        return "Good Afternoon 🌤️"
    return "Good Evening 🌙"


def quote_for(now: datetime) -> str:
    """Return the quote shown at this moment, rotating every few seconds."""
    slot = int(now.timestamp()) // QUOTE_ROTATION_SECONDS
    return MOTIVATIONAL_QUOTES[slot % len(MOTIVATIONAL_QUOTES)]
