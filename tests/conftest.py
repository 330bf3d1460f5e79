"""
IskolarLink trackers - Test Configuration and Fixtures
"""
import os
from typing import Callable, Generator

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# The application engine is never used by the tests; keep it off PostgreSQL.
os.environ['ISKOLARLINK_DATABASE_URL'] = 'sqlite://'

from iskolarlink.core.database import Base, get_db
from iskolarlink.main import app
from iskolarlink.models import ROLE_ADMIN, ROLE_SCHOLAR, User

fake = Faker()


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite database so concurrent sessions see each other's commits"""
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'trackers.db'}",
        connect_args={'check_same_thread': False, 'timeout': 30},
        future=True,
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a fresh database session for each test"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory for directory users; defaults to a verified scholar"""

    def _make_user(**overrides) -> User:
        values = {
            'full_name': fake.name(),
            'batch_year': str(fake.random_int(min=2018, max=2025)),
            'email': fake.unique.email(),
            'role': ROLE_SCHOLAR,
            'verified': True,
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def scholar(make_user) -> User:
    return make_user(full_name='Bianca Reyes', batch_year='2023')


@pytest.fixture
def admin(make_user) -> User:
    return make_user(full_name='Ana Admin', role=ROLE_ADMIN)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """Create test client with database override"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
