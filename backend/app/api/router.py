from fastapi import APIRouter
from app.api.routers import projects, wbs, dependencies, costs, tasks, imports, reports

api_router = APIRouter()
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(wbs.router, prefix="/wbs", tags=["wbs"])
api_router.include_router(dependencies.router, prefix="/dependencies", tags=["dependencies"])
api_router.include_router(costs.router, prefix="/costs", tags=["costs"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(imports.router, prefix="/imports", tags=["imports"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(reports.exports_router, prefix="/exports", tags=["exports"])
