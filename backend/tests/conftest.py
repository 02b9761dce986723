"""
Pytest fixtures for the booking ledger test suite.

Provides:
- An in-memory SQLite database, rebuilt for every test
- A FastAPI TestClient sharing the test session, with auth overridden
- Factories for projects, customers, brokers and bookings
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "plot_booking_test_logs"))

import pytest
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine, get_db
from main import app
import crud.bookings as crud_bookings
import crud.brokers as crud_brokers
import crud.customers as crud_customers
import crud.projects as crud_projects
from schemas.bookings import BookingCreate
from schemas.brokers import BrokerCreate
from schemas.customers import CustomerCreate
from schemas.projects import ProjectCreate
from utils.auth_utils import get_current_user

USER = "tester"
BOOKING_DATE = date(2026, 10, 17)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def auth_user():
    """Claims returned by the overridden auth dependency; tests may change the role."""
    return {"sub": USER, "role": "admin"}


@pytest.fixture
def client(db, auth_user):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_user] = lambda: auth_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def project(db):
    return crud_projects.create_project(
        db,
        ProjectCreate(name="Green Meadows", location="Lucknow", legal_details="Freehold", total_plots=50),
        USER,
    )


@pytest.fixture
def customer(db):
    return crud_customers.create_customer(
        db,
        CustomerCreate(applicant_name="Ravi Kumar", mobile_no="9876543210", aadhaar_no="123412341234"),
        USER,
    )


@pytest.fixture
def broker(db):
    return crud_brokers.create_broker(db, BrokerCreate(name="Suresh Agents", mobile_no="9123456780"), USER)


@pytest.fixture
def make_booking(db, project, customer):
    """Create a booking for the reference plot: 1200 sq. ft. at 3500, discount 100, PLC 50000."""
    def _make(**overrides):
        data = dict(
            project_id=project.id,
            customer_id=customer.id,
            plot_no="A-12",
            area=Decimal("1200"),
            rate=Decimal("3500"),
            discount=Decimal("100"),
            plc=Decimal("50000"),
            booking_date=BOOKING_DATE,
        )
        data.update(overrides)
        return crud_bookings.create_booking(db, BookingCreate(**data), USER)
    return _make
