import pytest
import os
import uuid
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from hostel_leave.database import Base, enable_sqlite_foreign_keys, get_db
from hostel_leave.main import app
from hostel_leave.models import LeaveRequest, LeaveReview, LeaveStatus, ReviewerRole, User, UserRole
from hostel_leave.models.complaint import Complaint
from fastapi.testclient import TestClient
from tests.geo_points import HOSTEL_POINT

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema per test; services commit and roll back for real."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def make_user(db_session):
    def _make_user(role: UserRole, **kwargs):
        user = User(
            email=kwargs.pop("email", f"{role.value}-{uuid.uuid4().hex[:8]}@hostel.test"),
            first_name=kwargs.pop("first_name", role.value.capitalize()),
            last_name=kwargs.pop("last_name", "Tester"),
            role=role,
            room_number=kwargs.pop("room_number", "B-12" if role == UserRole.STUDENT else None),
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture(scope="function")
def make_leave(db_session):
    def _make_leave(student: User, location=HOSTEL_POINT, **kwargs):
        start = kwargs.pop("start_date", date.today() + timedelta(days=3))
        leave = LeaveRequest(
            student_id=student.id,
            start_date=start,
            end_date=kwargs.pop("end_date", start + timedelta(days=2)),
            reason=kwargs.pop("reason", "Family function"),
            status=LeaveStatus.PENDING.value,
            **kwargs,
        )
        for role in ReviewerRole:
            leave.set_review(role, LeaveReview(status=LeaveStatus.PENDING))
        leave.leave_location = tuple(location) if location else None
        db_session.add(leave)
        db_session.commit()
        return leave
    return _make_leave


@pytest.fixture(scope="function")
def make_complaint(db_session):
    def _make_complaint(student: User, title: str = "Broken fan"):
        complaint = Complaint(student_id=student.id, title=title, description="Room fan not working")
        db_session.add(complaint)
        db_session.commit()
        return complaint
    return _make_complaint


class Family:
    def __init__(self, student, parent, staff, admin):
        self.student = student
        self.parent = parent
        self.staff = staff
        self.admin = admin


@pytest.fixture(scope="function")
def family(db_session, make_user):
    """A student linked to a parent, plus one staff member and one admin."""
    from hostel_leave.services.integrity import ReferentialIntegrityService

    student = make_user(UserRole.STUDENT)
    parent = make_user(UserRole.PARENT)
    staff = make_user(UserRole.STAFF)
    admin = make_user(UserRole.ADMIN)
    ReferentialIntegrityService(db_session).assign_parent(student.id, parent.id)
    return Family(student, parent, staff, admin)


@pytest.fixture(scope="function")
def as_user():
    """Headers carrying the caller identity forwarded by the gateway."""
    def _as_user(user: User):
        return {"X-Actor-ID": str(user.id)}
    return _as_user


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
