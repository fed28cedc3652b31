import os
import sys
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault("DATABASE_URL", "sqlite://")

from connect_db import Base, create_db_engine
from models.models import Record, User
from services.cache_service import ViewCache
from services.record_service import RecordService


class StaticIdentity:
    """Identity provider stand-in with a fixed uid and profile."""

    def __init__(self, external_id=None, profile=None):
        self.external_id = external_id
        self.profile = profile
        self.authenticate_calls = 0
        self.profile_calls = 0

    def authenticate(self):
        self.authenticate_calls += 1
        return self.external_id

    def fetch_profile(self):
        self.profile_calls += 1
        return self.profile


@pytest.fixture
def engine():
    db_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=db_engine)
    yield db_engine
    Base.metadata.drop_all(bind=db_engine)
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def view_cache():
    return ViewCache()


@pytest.fixture
def identity():
    return StaticIdentity(
        "firebase-uid-1",
        {"email": "jane@example.com", "name": "Jane Doe", "first_name": "Jane", "image_url": "https://img/jane.png"},
    )


@pytest.fixture
def service(db, identity, view_cache):
    return RecordService(db, identity, view_cache)


@pytest.fixture
def make_user(db):
    def _make_user(external_id="firebase-uid-1", email="jane@example.com"):
        user = User(external_id=external_id, email=email, name="Jane Doe")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_record(db):
    def _make_record(user, amount, day=1, month=1, text="Coffee", category="Food"):
        record = Record(
            text=text,
            amount=amount,
            category=category,
            date=datetime(2024, month, day, 12, 0, 0, tzinfo=timezone.utc),
            user_id=user.id,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    return _make_record
