"""
Pytest configuration and fixtures

SQLite 인메모리 DB와 고정 시계, 가짜 마일스톤 생성기를 사용합니다.
외부 서비스(LLM, 인증 서버, PostgreSQL)는 필요하지 않습니다.
"""

from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from database.postgres.core.connection import create_db_engine, create_session_factory
from database.postgres.models import Base
from tests.helpers import FixedClock, make_settings


@pytest.fixture
def engine():
    """테스트마다 새 인메모리 DB (테이블 생성 후 종료 시 삭제)"""
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def make_client(session_factory, clock):
    """TestClient 팩토리: 생성기/타임아웃을 테스트별로 지정"""
    clients = []

    def _make(generator: Optional[object] = None, timeout: float = 2.0) -> TestClient:
        app = create_app(
            settings=make_settings(timeout=timeout),
            session_factory=session_factory,
            milestone_generator=generator,
            clock=clock,
        )
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that go through the HTTP app and database"
    )
