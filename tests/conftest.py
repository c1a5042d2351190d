import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import security
from app.db import models, session
from app.main import app

T0 = datetime(2025, 3, 10, 9, 0, 0)
PASSWORD = "s3cret-pass"
# hashing is slow; every fixture user shares one hash
_PASSWORD_HASH = None


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.Base.metadata.create_all(bind=engine)
    yield engine
    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[session.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_employee(db):
    counter = {"n": 0}

    def _make(company="Acme", role="employee", username=None, email=None):
        global _PASSWORD_HASH
        if _PASSWORD_HASH is None:
            _PASSWORD_HASH = security.get_password_hash(PASSWORD)
        counter["n"] += 1
        n = counter["n"]
        employee = models.Employee(
            username=username or f"{role}{n}",
            email=email or f"{role}{n}@{company.lower().replace(' ', '')}.com",
            hashed_password=_PASSWORD_HASH,
            role=role,
            company=company,
        )
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee

    return _make


@pytest.fixture
def acme_admin(make_employee):
    return make_employee(company="Acme", role="admin")


@pytest.fixture
def acme_employee(make_employee):
    return make_employee(company="Acme")


@pytest.fixture
def globex_admin(make_employee):
    return make_employee(company="Globex", role="admin")


@pytest.fixture
def globex_employee(make_employee):
    return make_employee(company="Globex")


def auth_headers(employee):
    return {"Authorization": f"Bearer {security.create_employee_token(employee)}"}
