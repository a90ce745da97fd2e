import datetime as dt
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging import logger
from app.crud.projects import create_project, list_projects
from app.db.models.project import Currency
from app.db.session import SessionLocal
from app.schemas.project import ProjectCreate
from app.services.etl.importer import import_wbs_rows
from app.services.etl.parsers.wbs_csv import generate_csv_template, parse_wbs_csv

def seed_demo():
    db: Session = SessionLocal()
    try:
        # Create default project with the template WBS if none
        if list_projects(db):
            return
        p = create_project(db, ProjectCreate(
            name="Demo Project",
            description="Seeded demo project",
            start_date=dt.date(2024, 1, 1),
            end_date=dt.date(2024, 12, 31),
            budget=Decimal("100000"),
            currency=Currency(settings.DEFAULT_CURRENCY),
        ))
        parsed = parse_wbs_csv(generate_csv_template())
        created, _, errors = import_wbs_rows(db, p.id, parsed.rows)
        db.commit()
        logger.info("demo_seeded", project_id=p.id, wbs_items=created, errors=len(errors))
    finally:
        db.close()
