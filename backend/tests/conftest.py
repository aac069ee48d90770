"""
Pytest configuration for backend tests.

The environment is fixed before the application is imported: settings are
read once at import time and the app refuses to start without JWT_SECRET.
Every test gets a fresh in-memory database, OTP ledger, outbox and upload
directory, wired in through FastAPI dependency overrides.
"""
import os
import re
import tempfile
from datetime import datetime, timedelta, timezone

os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="iskolar-uploads-")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from iskolar.core.database import Base, get_db
from iskolar.core.security import TokenIssuer, get_token_issuer
from iskolar.services.email import EmailNotifier, get_notifier
from iskolar.services.otp import InMemoryOtpStore, OtpLedger
from iskolar.services.password_reset import get_otp_ledger
from iskolar.services.storage import LocalBlobStore, get_blob_store

TEST_SECRET = os.environ["JWT_SECRET"]
STRONG_PASSWORD = "Aa1!aaaa"


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier(EmailNotifier):
    """Keeps outgoing mail in memory instead of talking to SMTP."""

    def __init__(self):
        super().__init__(app_name="iSkolar")
        self.sent = []

    def send(self, to_email, subject, html_body, text_body):
        self.sent.append({"to": to_email, "subject": subject, "html": html_body, "text": text_body})
        return True

    def last_code(self, to_email: str) -> str:
        for message in reversed(self.sent):
            if message["to"] == to_email:
                return re.search(r"\b(\d{6})\b", message["text"]).group(1)
        raise AssertionError(f"no mail sent to {to_email}")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


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
def ledger(clock):
    return OtpLedger(InMemoryOtpStore(), ttl=timedelta(minutes=5), clock=clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def issuer(clock):
    return TokenIssuer(TEST_SECRET, clock=clock)


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "uploads"), "http://testserver")


@pytest.fixture
def client(session_factory, ledger, notifier, issuer, blob_store):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app = main.app
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_otp_ledger] = lambda: ledger
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_token_issuer] = lambda: issuer
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def register(client, email: str, password: str = STRONG_PASSWORD):
    return client.post(
        "/auth/register",
        json={"email": email, "password": password, "confirmPassword": password},
    )


def login(client, email: str, password: str = STRONG_PASSWORD, remember_me: bool = False):
    return client.post(
        "/auth/login",
        json={"email": email, "password": password, "rememberMe": remember_me},
    )


@pytest.fixture
def make_user(client):
    """Register + log in, optionally pick a role and finish profile setup.

    Returns the Authorization headers for the new account.
    """

    def _make(email: str, role: str | None = None, complete_profile: bool = False) -> dict:
        assert register(client, email).status_code == 201
        token = login(client, email).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}
        if role:
            assert client.post("/onboarding/select-role", json={"role": role}, headers=headers).status_code == 200
        if complete_profile:
            if role == "student":
                body = {
                    "full_name": "Juan Dela Cruz",
                    "gender": "Male",
                    "date_of_birth": "01/15/2004",
                    "contact_number": "09171234567",
                }
            else:
                body = {
                    "organization_name": "Bayanihan Foundation",
                    "organization_type": "Foundation",
                    "official_email": "grants@bayanihan.org",
                    "contact_number": "0287654321",
                }
            assert client.post("/onboarding/profile-setup", json=body, headers=headers).status_code == 200
        return headers

    return _make
