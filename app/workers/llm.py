from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Union
from uuid import UUID

from pydantic_ai import Agent
from pydantic_ai.messages import ModelRequest, SystemPromptPart
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.litellm import LiteLLMProvider
from pydantic_ai.settings import ModelSettings

from app.config import Settings, get_settings
from app.constants.default_system_prompt import DefaultSystemPrompt
from app.exceptions import GenerationError
from app.infra.logging_config import get_logger

logger = get_logger("llm")

TEMPERATURE = 0.7
MAX_TOKENS = 500

CONTEXT_INSTRUCTION = (
    "\n\nUse the information below to answer the customer. "
    "If it does not cover the question, say you will check with the team.\n"
)


@dataclass(frozen=True)
class GenerationResult:
    text: str
    tokens_used: int


def build_system_prompt(persona: str, context_block: str) -> str:
    """Persona, plus the retrieval context and an instruction to use it when there is any."""
    prompt = persona.strip()
    if context_block:
        prompt = prompt + CONTEXT_INSTRUCTION + context_block
    return prompt


def build_user_turn(contact_display_name: str, user_message: str) -> str:
    return f"{contact_display_name} asks: {user_message}"


def _message_list_with_system_prompt(system_prompt: str) -> List[Any]:
    """Single-turn history: only the system prompt."""

    # https://github.com/pydantic/pydantic-ai/issues/4039
    # https://ai.pydantic.dev/agent/#system-prompts
    return [ModelRequest(parts=[SystemPromptPart(content=system_prompt)])]


def _total_tokens(result: Any) -> int:
    # usage is a method on older pydantic-ai run results and a property on newer ones
    usage = result.usage
    if callable(usage):
        usage = usage()
    return int(getattr(usage, "total_tokens", 0) or 0)


class GenerativeResponder:
    """Single-turn chat completion with the persona and retrieval context as system prompt."""

    def __init__(
        self,
        model: Union[Model, str],
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self._agent = Agent(model)
        self._model_settings = ModelSettings(temperature=TEMPERATURE, max_tokens=MAX_TOKENS)
        if timeout_seconds:
            self._model_settings["timeout"] = timeout_seconds

    async def generate(
        self,
        user_message: str,
        contact_display_name: str,
        contact_id: UUID,
        context_block: str = "",
        persona: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate a reply to one customer message.

        Raises:
            GenerationError: the model call failed or returned no text. Not retried.
        """
        system_prompt = build_system_prompt(
            persona or DefaultSystemPrompt.CONTENT, context_block
        )
        try:
            result = await self._agent.run(
                build_user_turn(contact_display_name, user_message),
                message_history=_message_list_with_system_prompt(system_prompt),
                model_settings=self._model_settings,
            )
            text = str(result.output or "").strip()
            tokens_used = _total_tokens(result)
        except Exception as e:
            logger.warning("Generation failed for contact %s: %s", contact_id, e)
            raise GenerationError(str(e)) from e

        if not text:
            raise GenerationError("Model returned an empty reply")
        logger.info("Generated reply for contact %s (%d tokens)", contact_id, tokens_used)
        return GenerationResult(text=text, tokens_used=tokens_used)


def build_responder_from_env(settings: Optional[Settings] = None) -> GenerativeResponder:
    settings = settings or get_settings()
    logger.info(
        "LLM config: model=%s, api_key=%s, api_base=%s",
        settings.llm_model,
        "set" if settings.litellm_api_key else "not set",
        settings.litellm_api_base or "(default)",
    )
    if not settings.litellm_api_key:
        logger.warning(
            "LITELLM_API_KEY is not set; generation will fail and customers will get the apology reply."
        )
    provider = LiteLLMProvider(
        api_key=settings.litellm_api_key,
        api_base=settings.litellm_api_base,
    )
    model = OpenAIChatModel(settings.llm_model, provider=provider)
    return GenerativeResponder(model, timeout_seconds=settings.http_timeout_seconds)
