"""Tests for GenerativeResponder and prompt assembly."""

from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from pydantic_ai.models.function import FunctionModel

from app.constants.default_system_prompt import DefaultSystemPrompt
from app.exceptions import GenerationError
from app.workers.llm import (
    CONTEXT_INSTRUCTION,
    GenerativeResponder,
    build_system_prompt,
    build_user_turn,
)
from tests.fixtures.app_fixtures import ScriptedModel


def test_build_user_turn():
    assert build_user_turn("Budi", "Do you ship?") == "Budi asks: Do you ship?"


def test_build_system_prompt_without_context():
    assert build_system_prompt("  You are helpful.\n", "") == "You are helpful."


def test_build_system_prompt_with_context():
    context = "\n=== FAQ ===\nQ: Open?\nA: 9am.\n\n"
    prompt = build_system_prompt("You are helpful.", context)
    assert prompt == "You are helpful." + CONTEXT_INSTRUCTION + context


@pytest.mark.asyncio
async def test_generate_returns_text_and_tokens(responder, scripted_model):
    result = await responder.generate(
        "Do you ship to Bali?",
        "Budi",
        uuid4(),
        context_block="\n=== FAQ ===\nQ: Ship?\nA: Yes.\n\n",
        persona="You are the Divine assistant.",
    )

    assert result.text == "Hello! Our store opens at 9am."
    assert result.tokens_used > 0
    call = scripted_model.calls[0]
    assert call["user"] == "Budi asks: Do you ship to Bali?"
    assert call["system"].startswith("You are the Divine assistant.")
    assert "=== FAQ ===" in call["system"]


@pytest.mark.asyncio
async def test_generate_defaults_to_builtin_persona(responder, scripted_model):
    await responder.generate("hi", "Sari", uuid4())
    assert scripted_model.calls[0]["system"] == DefaultSystemPrompt.CONTENT.strip()


@pytest.mark.asyncio
async def test_generate_strips_reply():
    model = ScriptedModel(reply="  Sure thing.  \n")
    result = await GenerativeResponder(FunctionModel(model)).generate("hi", "A", uuid4())
    assert result.text == "Sure thing."


@pytest.mark.asyncio
async def test_generate_model_failure_is_generation_error(responder, scripted_model):
    scripted_model.error = RuntimeError("upstream 503")
    with pytest.raises(GenerationError):
        await responder.generate("hi", "Budi", uuid4())


@pytest.mark.asyncio
async def test_generate_empty_reply_is_generation_error():
    model = ScriptedModel(reply="   ")
    with pytest.raises(GenerationError):
        await GenerativeResponder(FunctionModel(model)).generate("hi", "Budi", uuid4())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "usage",
    [
        SimpleNamespace(total_tokens=42),
        lambda: SimpleNamespace(total_tokens=42),
    ],
    ids=["attribute", "method"],
)
async def test_generate_reads_usage_in_either_shape(responder, usage):
    run_result = SimpleNamespace(output="We ship to Bali.", usage=usage)
    responder._agent = SimpleNamespace(run=AsyncMock(return_value=run_result))
    result = await responder.generate("Do you ship?", "Budi", uuid4())

    assert result.text == "We ship to Bali."
    assert result.tokens_used == 42


@pytest.mark.asyncio
async def test_generate_unreadable_result_is_generation_error(responder):
    def broken_usage():
        raise TypeError("usage unavailable")

    run_result = SimpleNamespace(output="Hi", usage=broken_usage)
    responder._agent = SimpleNamespace(run=AsyncMock(return_value=run_result))
    with pytest.raises(GenerationError):
        await responder.generate("hi", "Budi", uuid4())
