import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_EMAILS"] = "admin@salon.test"
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret")

from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from salonapp.config import AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET
from salonapp.database import Base, SessionLocal, engine, get_db
from salonapp.main import app
from salonapp.models import Client, Professional, Service, User
from salonapp.services.notification_service import get_messenger, whatsapp_link


class RecordingMessenger:
    """Keeps delivered messages in memory instead of logging them"""

    channel = "whatsapp"

    def __init__(self):
        self.sent = []

    def deliver(self, user, appointment, to_phone, message_type, message_body):
        notice = {
            "channel": self.channel,
            "message_type": message_type,
            "to_phone": to_phone,
            "message": message_body,
            "link": whatsapp_link(to_phone, message_body),
        }
        self.sent.append(notice)
        return notice


class FailingMessenger:
    channel = "whatsapp"

    def deliver(self, user, appointment, to_phone, message_type, message_body):
        raise RuntimeError("messaging is down")


def make_token(sub, email, name="Ana", expires_in=timedelta(hours=1)):
    claims = {
        "sub": sub,
        "email": email,
        "name": name,
        "aud": AUTH_JWT_AUDIENCE,
        "exp": datetime.utcnow() + expires_in,
    }
    return jwt.encode(claims, AUTH_JWT_SECRET, algorithm=AUTH_JWT_ALGORITHM)


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
def owner(db):
    user = User(
        auth_uid="owner-uid",
        email="owner@salon.test",
        display_name="Ana",
        salon_name="Studio Bella",
        subscription_status="trial",
        trial_ends_at=datetime.utcnow() + timedelta(days=7),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_owner(db):
    user = User(
        auth_uid="other-uid",
        email="other@salon.test",
        subscription_status="active",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def catalog(db, owner):
    client = Client(user_id=owner.id, name="Maria Souza", phone="(24) 99999-0000")
    no_phone = Client(user_id=owner.id, name="Joana Lima")
    professional = Professional(user_id=owner.id, name="Carla", commission_rate=Decimal("50"))
    other_professional = Professional(user_id=owner.id, name="Bruno")
    service = Service(user_id=owner.id, name="Corte", price=Decimal("80.00"), duration=30)
    long_service = Service(user_id=owner.id, name="Coloração", price=Decimal("150.00"), duration=90)
    db.add_all([client, no_phone, professional, other_professional, service, long_service])
    db.commit()
    return SimpleNamespace(
        client=client,
        no_phone=no_phone,
        professional=professional,
        other_professional=other_professional,
        service=service,
        long_service=long_service,
    )


@pytest.fixture
def messenger():
    return RecordingMessenger()


@pytest.fixture
def api(db, owner, messenger):
    """HTTP client authenticated as the owner, sharing the test session"""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_messenger] = lambda: messenger
    test_client = TestClient(app)
    test_client.headers["Authorization"] = f"Bearer {make_token(owner.auth_uid, owner.email)}"
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anonymous(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
