"""Tests for invocation profile resolution."""

import pytest

from devbot.agent.profiles import (
    FAST_MODEL,
    FLAGSHIP_MODEL,
    GOOGLE_SEARCH_TOOL,
    NOIRE_THINKING_BUDGET,
    THINKING_BUDGET,
    default_mode_for,
    normalize_mode,
    resolve_profile,
)
from devbot.agent.prompts import DEVBOT_SYSTEM_INSTRUCTION, NOIRE_SYSTEM_INSTRUCTION
from devbot.models.sessions import ChatMode, Variant


@pytest.mark.parametrize(
    ("mode", "model", "tools", "budget"),
    [
        (ChatMode.STANDARD, FLAGSHIP_MODEL, (), None),
        (ChatMode.SEARCH, FAST_MODEL, (GOOGLE_SEARCH_TOOL,), None),
        (ChatMode.THINKING, FLAGSHIP_MODEL, (), THINKING_BUDGET),
    ],
)
def test_devbot_profiles(mode, model, tools, budget) -> None:
    """DevBot's backend configuration follows the requested mode."""
    profile = resolve_profile(Variant.DEVBOT, mode)

    assert profile.model == model
    assert profile.tools == tools
    assert profile.thinking_budget == budget
    assert profile.system_instruction == DEVBOT_SYSTEM_INSTRUCTION
    assert profile.temperature == 0.2


@pytest.mark.parametrize("mode", list(ChatMode))
def test_noire_profile_ignores_mode(mode: ChatMode) -> None:
    """NOIRE always gets search plus a medium reasoning budget."""
    profile = resolve_profile(Variant.NOIRE, mode)

    assert profile.model == FLAGSHIP_MODEL
    assert profile.tools == (GOOGLE_SEARCH_TOOL,)
    assert profile.thinking_budget == NOIRE_THINKING_BUDGET
    assert profile.system_instruction == NOIRE_SYSTEM_INSTRUCTION


def test_concrete_table_values() -> None:
    assert FLAGSHIP_MODEL == "gemini-3-pro-preview"
    assert FAST_MODEL == "gemini-2.5-flash"
    assert THINKING_BUDGET == 32768
    assert NOIRE_THINKING_BUDGET == 16384


@pytest.mark.parametrize("variant", list(Variant))
@pytest.mark.parametrize("mode", list(ChatMode))
def test_resolution_is_deterministic(variant: Variant, mode: ChatMode) -> None:
    """Equal inputs give equal (and hashable) profiles."""
    first = resolve_profile(variant, mode)
    second = resolve_profile(variant, mode)

    assert first == second
    assert hash(first) == hash(second)


def test_distinct_devbot_modes_give_distinct_profiles() -> None:
    profiles = {resolve_profile(Variant.DEVBOT, mode) for mode in ChatMode}
    assert len(profiles) == 3


def test_default_mode_per_variant() -> None:
    assert default_mode_for(Variant.DEVBOT) == ChatMode.STANDARD
    assert default_mode_for(Variant.NOIRE) == ChatMode.THINKING


@pytest.mark.parametrize("mode", list(ChatMode))
def test_normalize_mode(mode: ChatMode) -> None:
    """NOIRE is pinned to thinking; DevBot keeps the requested mode."""
    assert normalize_mode(Variant.NOIRE, mode) == ChatMode.THINKING
    assert normalize_mode(Variant.DEVBOT, mode) == mode
