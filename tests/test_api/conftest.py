import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from orquesta.main import app
from orquesta.database import Base, get_db
from orquesta.models.usuario import Usuario
from orquesta.routers import auth
from orquesta.services.usuario_service import hash_password

TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def client():
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Ensure all connections share same in-memory DB
    )
    Base.metadata.create_all(engine)
    TestSession = sessionmaker(bind=engine, autoflush=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    auth._login_attempts.clear()

    # One admin and one read-only user
    db = TestSession()
    db.add(Usuario(nombre="Admin", email="admin@test.com", hashed_password=hash_password("admin123"), rol="admin"))
    db.add(Usuario(nombre="Docente", email="docente@test.com", hashed_password=hash_password("docente123"), rol="usuario"))
    db.commit()
    db.close()

    with TestClient(app) as c:
        res = c.post("/api/auth/login", json={"email": "admin@test.com", "password": "admin123"})
        c.headers["Authorization"] = f"Bearer {res.json()['token']}"
        yield c

    app.dependency_overrides.clear()
    Base.metadata.drop_all(engine)


@pytest.fixture
def user_headers(client):
    """Authorization header of the non-admin user."""
    res = client.post("/api/auth/login", json={"email": "docente@test.com", "password": "docente123"})
    return {"Authorization": f"Bearer {res.json()['token']}"}
