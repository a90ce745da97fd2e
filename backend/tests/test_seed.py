from app.crud.projects import list_projects
from app.crud.wbs import list_wbs_items
from app.services import seed


def test_seed_demo_is_idempotent(session_factory, db, monkeypatch):
    monkeypatch.setattr(seed, "SessionLocal", session_factory)
    seed.seed_demo()
    seed.seed_demo()
    projects = list_projects(db)
    assert len(projects) == 1
    assert len(list_wbs_items(db, projects[0].id)) == 7
