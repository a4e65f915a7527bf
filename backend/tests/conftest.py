import os

# Settings are read once at import time.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("GEOCODER_REQUEST_DELAY_SECONDS", "0")
os.environ.setdefault("RESEND_API_KEY", "re_test")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import wonderlake.models  # noqa: F401
from wonderlake.api.v1.emails import get_resend_client
from wonderlake.auth.jwt import create_access_token, hash_password
from wonderlake.config import get_settings
from wonderlake.database import Base, get_db
from wonderlake.geo.boundaries import load_boundaries
from wonderlake.geo.classifier import SpatialClassifier
from wonderlake.geo.geocoder import GeocodeCandidate, GeocodingError
from wonderlake.main import app
from wonderlake.models.user import User
from wonderlake.services.email import ResendClient
from wonderlake.services.rate_limit import submission_limiter

# Reference points against the bundled boundary data
RESIDENT = (42.38, -88.35)
VILLAGE_EDGE = (42.40, -88.35)
GREENWOOD = (42.38, -88.40)
ANNEX_NEAR = (42.38, -88.32)  # about half a mile east of the village
ANNEX_FAR = (42.38, -88.30)   # about one and a half miles east
OUTSIDE = (42.38, -88.28)     # a little over two and a half miles east
FAR_AWAY = (42.45, -88.20)


def candidate(point, name="123 Main St, Wonder Lake, IL"):
    return GeocodeCandidate(latitude=point[0], longitude=point[1], display_name=name)


class FakeGeocoder:
    """Canned geocoder keyed by exact query text."""

    def __init__(self, responses=None, failing=()):
        self.responses = responses or {}
        self.failing = set(failing)
        self.calls = []

    async def search(self, query, bbox=None):
        self.calls.append(query)
        if query in self.failing:
            raise GeocodingError(f"geocoder unavailable for {query!r}")
        return list(self.responses.get(query, []))


class FakeResend:
    """In-memory stand-in for the Resend REST API."""

    def __init__(self):
        self.sent = []
        self.emails = {}
        self.fail_sends = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path == "/emails":
            if self.fail_sends:
                return httpx.Response(500, json={"message": "provider down"})
            self.sent.append(request)
            return httpx.Response(200, json={"id": f"re_{len(self.sent)}"})
        if request.method == "GET" and request.url.path.startswith("/emails/"):
            email_id = request.url.path.rsplit("/", 1)[-1]
            if email_id in self.emails:
                return httpx.Response(200, json=self.emails[email_id])
            return httpx.Response(404, json={"message": "not found"})
        return httpx.Response(404)

    def client(self) -> ResendClient:
        return ResendClient(
            api_key="re_test",
            base_url="https://resend.test",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture(scope="session")
def boundaries():
    return load_boundaries(get_settings().BOUNDARY_DATA_DIR)


@pytest.fixture(scope="session")
def classifier(boundaries):
    return SpatialClassifier(boundaries, service_radius_miles=2.0)


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    submission_limiter.reset()
    yield
    submission_limiter.reset()


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def resend():
    return FakeResend()


@pytest.fixture
async def client(session_factory, boundaries, classifier, geocoder, resend):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resend_client] = resend.client
    app.state.boundaries = boundaries
    app.state.classifier = classifier
    app.state.geocoder = geocoder

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(session_factory, email, password, is_admin):
    async with session_factory() as session:
        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name="Pat",
            last_name="Admin" if is_admin else "Resident",
            is_admin=is_admin,
            is_active=True,
        )
        session.add(user)
        await session.commit()
        return user


@pytest.fixture
async def admin_user(session_factory):
    return await _create_user(session_factory, "admin@onewonderlake.com", "correct-horse", True)


@pytest.fixture
async def regular_user(session_factory):
    return await _create_user(session_factory, "resident@example.com", "resident-pass", False)


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token(str(admin_user.id), True)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(regular_user):
    token = create_access_token(str(regular_user.id), False)
    return {"Authorization": f"Bearer {token}"}
