"""Daily inspiration prompt selection.

Picks one encouragement string from two fixed lists. A caller-supplied
history summary can steer the choice through two literal substring rules;
otherwise the prompt is drawn uniformly from both lists combined.

Matching is a plain, case-sensitive substring test. "ungrateful" contains
"grateful" and therefore matches; that behaviour is relied upon by existing
clients and is kept as is.
"""

import random
from typing import Callable, Optional, Sequence, Tuple

PRAYER_PROMPTS: Tuple[str, ...] = (
    "Reflect on a moment today when you felt grateful.",
    "Ask for guidance in a challenging situation you are facing.",
    "Offer a prayer of gratitude for the blessings in your life.",
    "Pray for peace and healing for those who are suffering.",
    "Seek strength to overcome temptation and make positive choices.",
)

DEVOTIONAL_PROMPTS: Tuple[str, ...] = (
    "Consider how you can be a source of comfort to someone in need today.",
    "Read a favorite psalm slowly and notice which verse speaks to you.",
    "Spend five quiet minutes listening for God's voice in stillness.",
    "Write down one promise from Scripture to carry with you this week.",
    "Think of someone who encouraged your faith and thank God for them.",
)

CHALLENGE_TRIGGER = "challenging situation"
GRATITUDE_TRIGGER = "grateful"

Chooser = Callable[[Sequence[str]], str]


def prompt_pool() -> Tuple[str, ...]:
    """Prayer prompts followed by devotional prompts, order preserved."""
    return PRAYER_PROMPTS + DEVOTIONAL_PROMPTS


def select_prompt(
    history_summary: Optional[str] = None,
    choose: Chooser = random.choice,
) -> str:
    """Return one prompt for the given history summary.

    ``choose`` receives the combined pool and must return one of its
    elements; pass ``random.Random(seed).choice`` for repeatable draws.
    """
    if history_summary:
        if CHALLENGE_TRIGGER in history_summary:
            return PRAYER_PROMPTS[1]
        if GRATITUDE_TRIGGER in history_summary:
            return PRAYER_PROMPTS[0]

    return choose(prompt_pool())
