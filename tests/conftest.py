"""
Fixtures shared by the db, service and api tests.

All sessions are bound to one in-memory SQLite database. StaticPool keeps a single connection alive, otherwise
every new connection would see an empty database.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.db.sql_repository import SQLGameRepository

test_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSession = sessionmaker(bind=test_engine, autoflush=False)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh tables for every test, dropped again at teardown."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def sql_repository(db_session: Session) -> SQLGameRepository:
    return SQLGameRepository(db_session)
