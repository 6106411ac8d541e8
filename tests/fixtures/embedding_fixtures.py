"""Deterministic embedding provider and vector store fixtures."""

import re
import zlib

import pytest

from app.config import get_settings
from app.exceptions import EmbeddingError
from app.services.embedding_service import EmbeddingProvider
from app.services.vector_store import VectorStore

DIMENSIONS = get_settings().embedding_dimensions


def unit_vector(*weights_by_index, dims=DIMENSIONS):
    """unit_vector((0, 1.0)) or unit_vector((0, 0.8), (1, 0.6)): sparse vector from (index, weight) pairs."""
    vector = [0.0] * dims
    for index, weight in weights_by_index:
        vector[index] = weight
    return vector


def keyword_vector(text, dims=DIMENSIONS):
    """Bag of words hashed into buckets; texts sharing words are close."""
    vector = [0.0] * dims
    for word in re.findall(r"\w+", text.lower()):
        vector[zlib.crc32(word.encode()) % dims] += 1.0
    return vector


class FakeEmbeddingProvider(EmbeddingProvider):
    """Records every text it embeds. ``vectors`` pins the vector for an exact text."""

    def __init__(self, fail=False):
        super().__init__(client=None, model="fake-embedding", dimensions=DIMENSIONS)
        self.fail = fail
        self.calls = []
        self.vectors = {}

    async def embed(self, text):
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("embedding service unavailable")
        if not (text or "").strip():
            raise EmbeddingError("Cannot embed empty text")
        if text in self.vectors:
            return self.vectors[text]
        return keyword_vector(text)


@pytest.fixture(scope="function")
def fake_embedder():
    return FakeEmbeddingProvider()


@pytest.fixture(scope="function")
def failing_embedder():
    return FakeEmbeddingProvider(fail=True)


@pytest.fixture(scope="function")
def setup_knowledge(db):
    """
    Five knowledge entries around the axis unit_vector((0, 1.0)).

    Distances to that axis: shipping 0, returns 0.2, warranty 0.4, payment 1;
    the inactive duplicate of shipping is never retrieved.
    """
    store = VectorStore(db)
    shipping = store.add_knowledge(
        "Shipping", "We ship within 2 days.", unit_vector((0, 1.0)), category="orders"
    )
    returns = store.add_knowledge(
        "Returns",
        "Returns accepted for 30 days.",
        unit_vector((0, 0.8), (1, 0.6)),
        category="orders",
    )
    warranty = store.add_knowledge(
        "Warranty",
        "One year warranty.",
        unit_vector((0, 0.6), (1, 0.8)),
        category="product",
    )
    payment = store.add_knowledge(
        "Payment", "We accept bank transfer.", unit_vector((2, 1.0)), category="billing"
    )
    hidden = store.add_knowledge(
        "Old shipping", "We ship within 5 days.", unit_vector((0, 1.0))
    )
    store.set_active(type(hidden), hidden.id, False)
    return [shipping, returns, warranty, payment, hidden]


@pytest.fixture(scope="function")
def setup_faqs(db):
    """Three FAQs; 'opening hours' sits on the unit_vector((0, 1.0)) axis."""
    store = VectorStore(db)
    hours = store.add_faq(
        "What are your opening hours?", "9am to 5pm.", unit_vector((0, 1.0))
    )
    location = store.add_faq(
        "Where is the shop?", "Jakarta.", unit_vector((0, 0.6), (1, 0.8))
    )
    price = store.add_faq("How much is it?", "Rp 100.000.", unit_vector((3, 1.0)))
    return [hours, location, price]
