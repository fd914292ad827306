from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import billing.persistence.pg as pg
from billing.core.config import get_settings
from billing.domain.catalog.service import create_item
from billing.domain.users.service import register_user
from billing.persistence.models import Base

TEST_USERNAME = "clerk"
TEST_PASSWORD = "s3cret-pass"


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite"


@pytest.fixture(scope="session", autouse=True)
def configure_test_engine(test_db_path: Path):
    settings = get_settings()
    settings.password_hash_iterations = 1_000
    settings.bootstrap_demo_on_startup = False

    engine = create_engine(
        f"sqlite+pysqlite:///{test_db_path}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    TestSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

    pg.engine = engine
    pg.SessionLocal = TestSessionLocal

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables(configure_test_engine):
    yield
    with pg.engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def session(configure_test_engine):
    with pg.session_scope() as s:
        yield s


@pytest.fixture()
def client(configure_test_engine):
    from billing.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def user(configure_test_engine):
    with pg.session_scope() as s:
        return register_user(s, TEST_USERNAME, TEST_PASSWORD)


@pytest.fixture()
def auth_client(client, user):
    response = client.post(
        "/login",
        json={"username": TEST_USERNAME, "password": TEST_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client


@pytest.fixture()
def catalog(configure_test_engine) -> dict[str, str]:
    with pg.session_scope() as s:
        widget = create_item(s, "Widget", Decimal("10.00"), "A plain widget")
        gadget = create_item(s, "Gadget", Decimal("5.00"))
        return {"A": widget.id, "B": gadget.id}
