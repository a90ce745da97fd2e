# import all models for Alembic
from app.db.models.project import Project, Currency
from app.db.models.wbs import WbsItem, WbsType
from app.db.models.dependency import Dependency, DependencyType
from app.db.models.cost_entry import CostEntry
from app.db.models.task import Task
from app.db.models.import_run import ImportRun
from app.db.models.import_error import ImportError
