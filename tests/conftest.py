import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import Base
from app.main import create_app
from app.models.user import User, UserRole
from app.services import accounts
from app.services.auth import create_access_token

TEST_SECRET = "test-secret-key-with-at-least-32-bytes"
PASSWORD = "Secret123"


class RecordingMailer:
    """Stands in for Mailer; remembers every code it was asked to send."""

    def __init__(self, deliver: bool = True):
        self.deliver = deliver
        self.sent = []

    def send_otp(self, to_email, code, purpose="verify_email"):
        self.sent.append({"to": to_email, "code": code, "purpose": purpose})
        return self.deliver

    def last_code(self, email):
        for message in reversed(self.sent):
            if message["to"] == email:
                return message["code"]
        return None


def make_settings(**overrides) -> Settings:
    values = {
        "jwt_secret_key": TEST_SECRET,
        "database_url": "sqlite://",
        "app_env": "test",
        "debug": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(settings, mailer):
    application = create_app(settings, mailer=mailer)
    Base.metadata.create_all(bind=application.state.engine)
    yield application
    Base.metadata.drop_all(bind=application.state.engine)
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session_factory(app):
    return app.state.session_factory


@pytest.fixture
def make_user(session_factory, settings):
    """Create an account directly in the store and return it (detached)."""

    def _make(
        email="student@bennett.edu.in",
        password=PASSWORD,
        role=UserRole.user,
        verified=True,
        first_name="Test",
        last_name="User",
        google_id=None,
    ) -> User:
        with session_factory() as db:
            user = accounts.create_user(
                db,
                settings,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role=role,
                is_verified=verified,
                google_id=google_id,
            )
            db.commit()
            db.refresh(user)
            return user

    return _make


@pytest.fixture
def load_user(session_factory):
    def _load(user_id):
        with session_factory() as db:
            return db.get(User, user_id)

    return _load


@pytest.fixture
def auth_headers(settings):
    def _headers(user: User, role: UserRole | None = None) -> dict:
        token = create_access_token(settings, user.id, user.email, role or user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def prime_admin(make_user):
    return make_user(email="prime@campusride.com", role=UserRole.prime_admin, first_name="Prime", last_name="Admin")


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@campusride.com", role=UserRole.admin, first_name="Ada", last_name="Admin")


@pytest.fixture
def student(make_user):
    return make_user()
