import os

from cryptography.fernet import Fernet

# Settings are read from the environment on every get_settings() call; these
# must be in place before the app modules are imported.
os.environ["ENV"] = "test"
os.environ.setdefault("FERNET_KEY", Fernet.generate_key().decode())
os.environ.setdefault("WHATSAPP_VERIFY_TOKEN", "wa-verify-token")
os.environ.setdefault("WHATSAPP_TOKEN", "wa-access-token")
os.environ.setdefault("WHATSAPP_PHONE_NUMBER_ID", "1029384756")
os.environ.setdefault("INSTAGRAM_VERIFY_TOKEN", "ig-verify-token")
os.environ.setdefault("INSTAGRAM_ACCESS_TOKEN", "ig-access-token")
os.environ.setdefault("INSTAGRAM_PAGE_ID", "page-42")
os.environ.setdefault("TELEGRAM_ENABLED", "true")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:AAHdqTcvCH1vGWJxfSeofSAs0K5P")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models  # noqa: E402,F401  registers every table on Base.metadata
from app.db import Base  # noqa: E402

pytest_plugins = [
    "tests.fixtures.contact_fixtures",
    "tests.fixtures.embedding_fixtures",
    "tests.fixtures.system_prompt_fixtures",
    "tests.fixtures.app_fixtures",
]


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite database with every table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
