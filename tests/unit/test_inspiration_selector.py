"""Unit tests for daily inspiration prompt selection."""

import random
from collections import Counter

import pytest

from peniel.domain.inspiration import (
    DEVOTIONAL_PROMPTS,
    PRAYER_PROMPTS,
    prompt_pool,
    select_prompt,
)

GRATITUDE_PROMPT = "Reflect on a moment today when you felt grateful."
GUIDANCE_PROMPT = "Ask for guidance in a challenging situation you are facing."


def _never_called(pool):
    raise AssertionError("random draw should not happen when a rule matches")


class TestPromptLists:
    def test_prayer_prompts_keep_their_order(self):
        assert PRAYER_PROMPTS[0] == GRATITUDE_PROMPT
        assert PRAYER_PROMPTS[1] == GUIDANCE_PROMPT
        assert len(PRAYER_PROMPTS) == 5

    def test_devotional_prompts_are_nonempty(self):
        assert len(DEVOTIONAL_PROMPTS) > 0
        assert all(p.strip() for p in DEVOTIONAL_PROMPTS)

    def test_pool_is_prayer_then_devotional(self):
        pool = prompt_pool()
        assert pool == PRAYER_PROMPTS + DEVOTIONAL_PROMPTS
        assert pool[: len(PRAYER_PROMPTS)] == PRAYER_PROMPTS


class TestHistoryRules:
    def test_challenging_situation_selects_guidance_prompt(self):
        history = "I am dealing with a challenging situation at work"
        assert select_prompt(history, choose=_never_called) == GUIDANCE_PROMPT

    def test_grateful_selects_gratitude_prompt(self):
        history = "I feel so grateful for my family"
        assert select_prompt(history, choose=_never_called) == GRATITUDE_PROMPT

    def test_challenge_rule_wins_over_gratitude(self):
        history = "grateful but facing a challenging situation"
        assert select_prompt(history, choose=_never_called) == GUIDANCE_PROMPT

    def test_ungrateful_still_matches_gratitude_rule(self):
        history = "I have been ungrateful lately"
        assert select_prompt(history, choose=_never_called) == GRATITUDE_PROMPT

    @pytest.mark.parametrize(
        "history",
        [
            "I feel GRATEFUL today",
            "A Challenging Situation came up",
            "challenging  situation",
            "challenging-situation",
        ],
    )
    def test_matching_is_case_sensitive_and_literal(self, history):
        picked = []

        def choose(pool):
            picked.append(pool)
            return pool[-1]

        assert select_prompt(history, choose=choose) == prompt_pool()[-1]
        assert picked == [prompt_pool()]


class TestRandomSelection:
    @pytest.mark.parametrize("history", [None, ""])
    def test_absent_history_draws_from_pool(self, history):
        rng = random.Random(7)
        assert select_prompt(history, choose=rng.choice) in prompt_pool()

    def test_unmatched_history_draws_from_pool(self):
        rng = random.Random(3)
        result = select_prompt("I went for a walk in the park", choose=rng.choice)
        assert result in prompt_pool()

    def test_default_chooser_returns_pool_member(self):
        assert select_prompt() in prompt_pool()

    def test_chooser_receives_whole_pool(self):
        seen = []

        def choose(pool):
            seen.append(tuple(pool))
            return pool[0]

        select_prompt(None, choose=choose)
        assert seen == [prompt_pool()]

    def test_seeded_draws_are_repeatable(self):
        first = [select_prompt(None, choose=random.Random(42).choice) for _ in range(5)]
        second = [select_prompt(None, choose=random.Random(42).choice) for _ in range(5)]
        assert first == second

    def test_every_prompt_eventually_drawn(self):
        rng = random.Random(2024)
        drawn = {select_prompt(None, choose=rng.choice) for _ in range(200)}
        assert drawn == set(prompt_pool())

    def test_draw_is_roughly_uniform(self):
        rng = random.Random(11)
        trials = 5000
        counts = Counter(select_prompt(None, choose=rng.choice) for _ in range(trials))
        expected = trials / len(prompt_pool())
        for prompt in prompt_pool():
            assert abs(counts[prompt] - expected) < expected * 0.25
