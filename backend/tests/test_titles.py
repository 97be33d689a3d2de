"""Tests for chat title generation."""

import pytest

from devbot.agent.titles import FALLBACK_TITLE, TitleSummarizer


@pytest.mark.asyncio
async def test_title_is_stripped(backend) -> None:
    summarizer = TitleSummarizer(backend, "gemini-2.5-flash")

    title = await summarizer.summarize("Write a Rust TCP echo server")

    assert title == "Rust Echo Server"
    model, prompt = backend.prompts[0]
    assert model == "gemini-2.5-flash"
    assert '"Write a Rust TCP echo server"' in prompt
    assert "max 4 words" in prompt


@pytest.mark.asyncio
async def test_backend_failure_falls_back(backend) -> None:
    backend.title_error = TimeoutError("deadline exceeded")

    title = await TitleSummarizer(backend, "m").summarize("hello")

    assert title == FALLBACK_TITLE == "New Operation"


@pytest.mark.asyncio
async def test_blank_answer_falls_back(backend) -> None:
    backend.title = "   \n"

    assert await TitleSummarizer(backend, "m").summarize("hello") == FALLBACK_TITLE
