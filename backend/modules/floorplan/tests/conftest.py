# backend/modules/floorplan/tests/conftest.py

import pytest
from datetime import date
from typing import Generator
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from core.database import Base, build_engine, get_db
from modules.floorplan.models import floorplan_models  # noqa: F401
from modules.floorplan.services import (
    GroupingService,
    GroupReservationService,
    LayoutInstanceService,
    LayoutQueryService,
)
from tests.factories import BaseFactory, create_catalog

LAYOUT_DATE = date(2024, 1, 1)


@pytest.fixture
def engine():
    """Fresh in-memory database per test, foreign keys enforced."""
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    BaseFactory.bind_session(session)

    yield session

    BaseFactory.reset_session()
    session.close()


@pytest.fixture
def catalog(db_session):
    """Three catalog tables: T1, T2, T3"""
    return create_catalog(3)


@pytest.fixture
def layout_date():
    return LAYOUT_DATE


@pytest.fixture
def opened_layout(db_session, catalog, layout_date):
    """Layout instance for the test date, already instantiated"""
    instance, _ = LayoutInstanceService(db_session).ensure_instance(layout_date)
    return instance


# Service fixtures
@pytest.fixture
def layout_service(db_session: Session) -> LayoutInstanceService:
    return LayoutInstanceService(db_session)


@pytest.fixture
def grouping_service(db_session: Session) -> GroupingService:
    return GroupingService(db_session)


@pytest.fixture
def reservation_service(db_session: Session) -> GroupReservationService:
    return GroupReservationService(db_session)


@pytest.fixture
def query_service(db_session: Session) -> LayoutQueryService:
    return LayoutQueryService(db_session)


@pytest.fixture
def client(db_session: Session):
    """Create a test client."""
    from app.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
