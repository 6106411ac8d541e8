"""Embedding provider: text in, fixed-dimension vector out."""

from __future__ import annotations

import logging
from typing import Optional

from openai import AsyncOpenAI

from app.config import Settings, get_settings
from app.exceptions import ConfigurationMissingError, EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingProvider:
    """
    Calls the OpenAI-compatible embeddings endpoint with ``{input, model}``.

    The returned vector is checked against the configured dimensionality so a
    model change can never write mismatched vectors to the store.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        model: str,
        dimensions: int,
    ) -> None:
        self._client = client
        self.model = model
        self.dimensions = dimensions

    async def embed(self, text: str) -> list[float]:
        """
        Embed one text.

        Raises:
            ConfigurationMissingError: no API key configured.
            EmbeddingError: transport failure, non-2xx, empty data or wrong dimension.
        """
        if self._client is None:
            raise ConfigurationMissingError("OPENAI_API_KEY is not configured")
        text_to_embed = (text or "").strip()
        if not text_to_embed:
            raise EmbeddingError("Cannot embed empty text")

        try:
            response = await self._client.embeddings.create(
                input=text_to_embed, model=self.model
            )
        except Exception as e:
            # newer SDKs raise ValueError themselves on an empty data array
            logger.warning("Embedding request failed: %s", e)
            raise EmbeddingError(str(e)) from e

        if not response.data or not response.data[0].embedding:
            raise EmbeddingError("Embedding response has no data")

        embedding = list(response.data[0].embedding)
        if len(embedding) != self.dimensions:
            logger.error(
                "Embedding dimension mismatch for model %s: expected %d, got %d",
                self.model,
                self.dimensions,
                len(embedding),
            )
            raise EmbeddingError(
                f"Embedding dimension mismatch: expected {self.dimensions}, got {len(embedding)}"
            )
        return embedding


def build_embedding_provider_from_env(
    settings: Optional[Settings] = None,
) -> EmbeddingProvider:
    settings = settings or get_settings()
    client: Optional[AsyncOpenAI] = None
    if settings.openai_api_key:
        client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_api_base,
            timeout=settings.http_timeout_seconds,
            max_retries=0,
        )
    else:
        logger.warning("OPENAI_API_KEY is not set; retrieval context will be empty.")
    logger.info(
        "Embedding provider config: model=%s, dimensions=%d",
        settings.embedding_model,
        settings.embedding_dimensions,
    )
    return EmbeddingProvider(
        client=client,
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
    )
