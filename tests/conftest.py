import os

# Must be set before app.config is imported: selects the in-memory test database
os.environ["ENV"] = "test"
os.environ.setdefault("TELEGRAM_ENABLED", "false")

import pytest  # noqa: E402

import app.models  # noqa: E402,F401
from app.db import Base, SessionLocal, engine  # noqa: E402

pytest_plugins = [
    "tests.fixtures.customer_fixtures",
    "tests.fixtures.catalog_fixtures",
    "tests.fixtures.relay_fixtures",
]


@pytest.fixture(scope="function")
def db():
    """Session on a freshly created schema; tables are dropped afterwards."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)
