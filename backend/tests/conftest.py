import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth_utils import hash_password
from database import Base, get_db
from errors import UpstreamError
from image_store import get_image_store, url_to_public_id
from main import app
from models import Admin, Product

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"
CDN = "https://res.cloudinary.com/demo/image/upload/v1/products"


class FakeImageStore:
    """Records calls instead of talking to Cloudinary."""

    def __init__(self):
        self.is_configured = True
        self.uploaded = []
        self.deleted = []
        self.fail_uploads = set()  # payloads whose upload raises
        self.fail_deletes = set()  # public ids whose delete raises
        self._counter = 0

    def url_to_public_id(self, url):
        return url_to_public_id(url, folder="products")

    def upload(self, content):
        if content in self.fail_uploads:
            raise UpstreamError(f"upload of {content!r} rejected")
        self._counter += 1
        url = f"{CDN}/new{self._counter}.jpg"
        self.uploaded.append(url)
        return url

    def delete(self, public_id):
        self.deleted.append(public_id)
        if public_id in self.fail_deletes:
            raise UpstreamError(f"delete of {public_id} failed")

    @property
    def calls(self):
        return len(self.uploaded) + len(self.deleted)


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
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def client(engine, image_store):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_store] = lambda: image_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    row = Admin(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def admin_client(client, admin):
    res = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200, res.text
    return client


@pytest.fixture
def make_product(db):
    def _make(name="CCTV Camera", images=None, description="Night vision", specs=None):
        product = Product(
            name=name,
            description=description,
            specs=specs,
            images=list(images if images is not None else [f"{CDN}/a.jpg"]),
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make
