import datetime as dt
import os
from decimal import Decimal

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.models  # noqa: F401
from app.core.config import settings
from app.core.deps import get_db
from app.crud.projects import create_project
from app.crud.wbs import create_wbs_item
from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys
from app.main import app as fastapi_app
from app.schemas.project import ProjectCreate
from app.schemas.wbs import WbsItemCreate


@pytest.fixture()
def session_factory(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "EXPORT_DIR", str(tmp_path / "exports"))
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client(session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    fastapi_app.dependency_overrides[get_db] = _get_db
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def project(db):
    return create_project(db, ProjectCreate(
        name="Riverside Tower",
        start_date=dt.date(2024, 1, 1),
        end_date=dt.date(2024, 12, 31),
        budget=Decimal("100000"),
    ))


@pytest.fixture()
def make_item(db, project):
    def _make(type_, parent=None, budget=None, **kw):
        if type_ == "Activity":
            kw.setdefault("start_date", dt.date(2024, 3, 1))
            kw.setdefault("end_date", dt.date(2024, 3, 10))
            kw.setdefault("duration", 10)
            budget = Decimal("0") if budget is None else budget
        return create_wbs_item(db, WbsItemCreate(
            project_id=kw.pop("project_id", project.id),
            parent_id=parent.id if parent is not None else None,
            name=kw.pop("name", f"{type_} item"),
            type=type_,
            budgeted_cost=budget,
            **kw,
        ))
    return _make
