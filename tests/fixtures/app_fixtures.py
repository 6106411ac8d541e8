"""Fixtures for the FastAPI app: fake model, mock platform APIs, test client."""

import asyncio
import json
from contextlib import contextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic_ai.messages import (
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models.function import FunctionModel

from app.core.background import BackgroundTaskRunner
from app.db import get_db
from app.main import create_app
from app.routers.utils.dependencies import (
    get_bot_factory,
    get_embedding_provider,
    get_http_client,
    get_responder,
    get_session_scope,
    get_task_runner,
)
from app.workers.llm import GenerativeResponder

DEFAULT_REPLY = "Hello! Our store opens at 9am."


class ScriptedModel:
    """FunctionModel callback: records the prompts it receives and answers ``reply``."""

    __name__ = "scripted_model"  # FunctionModel derives its model name from the callback's __name__

    def __init__(self, reply=DEFAULT_REPLY):
        self.reply = reply
        self.error = None
        self.calls = []

    def __call__(self, messages, info):
        system_parts, user_parts = [], []
        for message in messages:
            for part in getattr(message, "parts", []):
                if isinstance(part, SystemPromptPart):
                    system_parts.append(part.content)
                elif isinstance(part, UserPromptPart):
                    user_parts.append(part.content)
        self.calls.append(
            {
                "system": "\n".join(system_parts),
                "user": user_parts[-1] if user_parts else "",
            }
        )
        if self.error is not None:
            raise self.error
        return ModelResponse(parts=[TextPart(self.reply)])


class GraphAPIRecorder:
    """httpx.MockTransport handler standing in for graph.facebook.com."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"messaging_product": "whatsapp", "messages": [{"id": "wamid.HBgL"}]}
        self.error = None

    def handler(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    def sent_json(self, index=-1):
        return json.loads(self.requests[index].content)


class RecordingTaskRunner(BackgroundTaskRunner):
    """Holds submitted coroutines until the test runs them."""

    def __init__(self):
        super().__init__()
        self.submitted = []

    def submit(self, name, coro):
        self.submitted.append((name, coro))
        return None

    async def run_submitted(self):
        while self.submitted:
            _, coro = self.submitted.pop(0)
            await coro

    def discard(self):
        for _, coro in self.submitted:
            coro.close()
        self.submitted.clear()


@pytest.fixture(scope="function")
def scripted_model():
    return ScriptedModel()


@pytest.fixture(scope="function")
def responder(scripted_model):
    return GenerativeResponder(FunctionModel(scripted_model))


@pytest.fixture(scope="function")
def graph_api():
    return GraphAPIRecorder()


@pytest.fixture(scope="function")
def http_client(graph_api):
    client = httpx.AsyncClient(transport=httpx.MockTransport(graph_api.handler))
    yield client
    asyncio.run(client.aclose())


@pytest.fixture(scope="function")
def telegram_bot():
    bot = MagicMock()
    bot.send_message = AsyncMock(return_value=SimpleNamespace(message_id=901))
    return bot


@pytest.fixture(scope="function")
def bot_factory(telegram_bot):
    return MagicMock(return_value=telegram_bot)


@pytest.fixture(scope="function")
def task_runner():
    runner = RecordingTaskRunner()
    yield runner
    runner.discard()


@pytest.fixture(scope="function")
def session_scope(db):
    @contextmanager
    def scope():
        yield db

    return scope


@pytest.fixture(scope="function")
def client(
    db,
    fake_embedder,
    responder,
    http_client,
    bot_factory,
    task_runner,
    session_scope,
):
    """Client with db override, fake embedder and model, mock platform APIs."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_embedding_provider] = lambda: fake_embedder
    app.dependency_overrides[get_responder] = lambda: responder
    app.dependency_overrides[get_http_client] = lambda: http_client
    app.dependency_overrides[get_bot_factory] = lambda: bot_factory
    app.dependency_overrides[get_task_runner] = lambda: task_runner
    app.dependency_overrides[get_session_scope] = lambda: session_scope
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
