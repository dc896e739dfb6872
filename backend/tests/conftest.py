# -*- coding: utf-8 -*-
"""
Pytest Configuration for Backend Tests

Common fixtures and setup for FastAPI backend tests. Every test gets a fresh
in-memory SQLite schema and a notifier that records mail instead of sending.
"""

import os
import sys
from pathlib import Path

# Add backend root to path
backend_root = Path(__file__).parent.parent
sys.path.insert(0, str(backend_root))

# Settings must be in place before any webgate module builds the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_ENABLED"] = "false"
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "development")

from webgate.configuration import get_settings

get_settings.cache_clear()

import pytest
from fastapi.testclient import TestClient

from webgate import models  # noqa: F401
from webgate.database import Base, SessionLocal, engine
from webgate.main import app
from webgate.models.accounts import PrincipalKind
from webgate.services.account_store import AccountStore
from webgate.services.notifier import Notifier, NotifierError, get_notifier
from webgate.services.token_authority import TokenAuthority

OPERATOR_EMAIL = "admin@example.com"
OPERATOR_PASSWORD = "Adm1n!Passw0rd"
MEMBER_EMAIL = "player@example.com"
MEMBER_PASSWORD = "member-pass-123"


class RecordingNotifier(Notifier):
    """Keeps rendered messages in memory"""

    def __init__(self):
        super().__init__()
        self.sent = []

    def send(self, to, subject, body):
        self.sent.append({"to": to, "subject": subject, "body": body})
        return True

    def sent_to(self, address):
        return [m for m in self.sent if m["to"] == address]


class FailingNotifier(Notifier):
    """Every send fails the way an unreachable or rejecting SMTP server does"""

    def __init__(self):
        super().__init__()
        self.attempts = 0

    def send(self, to, subject, body):
        self.attempts += 1
        raise NotifierError(f"Failed to send {subject!r}: connection refused")


@pytest.fixture
def db_session():
    """Session on a freshly created schema; tables are dropped afterwards."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db_session, notifier):
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def operator(db_session):
    return AccountStore(db_session).create_or_update_operator(OPERATOR_EMAIL, OPERATOR_PASSWORD)


@pytest.fixture
def operator_headers(db_session, operator):
    token = TokenAuthority(db_session).issue(PrincipalKind.OPERATOR, OPERATOR_EMAIL)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def verified_member(db_session):
    store = AccountStore(db_session)
    member = store.create_member(MEMBER_EMAIL, MEMBER_PASSWORD)
    store.mark_verified(member.verification_token)
    db_session.refresh(member)
    return member


@pytest.fixture
def member_headers(db_session, verified_member):
    token = TokenAuthority(db_session).issue(PrincipalKind.MEMBER, MEMBER_EMAIL)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def failing_notifier(client):
    notifier = FailingNotifier()
    app.dependency_overrides[get_notifier] = lambda: notifier
    return notifier
