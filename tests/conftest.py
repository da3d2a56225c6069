import io
import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.orm import sessionmaker

from core.database import Base, build_engine, get_db
from dummy_data import seed_users
from main import app
from providers.ocr_provider import get_ocr_provider
from providers.pan_provider import get_pan_provider, SandboxPANProvider
from schemas.ocr_schema import OCRLine, OCRResult


def make_image_bytes(size=(40, 20), color=(200, 100, 0), mode="RGB", fmt="PNG") -> bytes:
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


class FakeOCRProvider:
    def __init__(self, lines=None, error=None):
        self.lines = lines or []
        self.error = error
        self.received = []

    def recognize(self, image_bytes: bytes) -> OCRResult:
        self.received.append(image_bytes)
        if self.error:
            raise self.error
        ocr_lines = [OCRLine(text=text, confidence=conf) for text, conf in self.lines]
        return OCRResult(text="\n".join(t for t, _ in self.lines), lines=ocr_lines)


class FakePANProvider(SandboxPANProvider):
    def __init__(self, auth_response=None, verify_response=None, error=None):
        super().__init__(api_key="test-key", api_secret="test-secret")
        self.auth_response = auth_response or (200, {"access_token": "test-token"})
        self.verify_response = verify_response or (200, {"code": 200, "data": {"status": "valid"}})
        self.error = error
        self.calls = []

    def authenticate(self):
        self.calls.append(("authenticate",))
        if self.error:
            raise self.error
        return self.auth_response

    def verify(self, access_token, pan, name_as_per_pan, date_of_birth, reason):
        self.calls.append(("verify", access_token, pan, name_as_per_pan, date_of_birth, reason))
        return self.verify_response


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = factory()
    seed_users(db)
    db.close()

    yield factory
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def ocr_provider():
    return FakeOCRProvider()


@pytest.fixture
def pan_provider():
    return FakePANProvider()


@pytest.fixture
def client(session_factory, ocr_provider, pan_provider):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ocr_provider] = lambda: ocr_provider
    app.dependency_overrides[get_pan_provider] = lambda: pan_provider

    yield TestClient(app)

    app.dependency_overrides.clear()
