from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.database import engine, init_db
from core.exceptions import register_exception_handlers
from app.startup import configure_startup_logging, run_startup_checks

# ========== Floor Plan ==========
from modules.floorplan.routers.floorplan_router import router as floorplan_router

settings = get_settings()

configure_startup_logging(settings.log_level)

app = FastAPI(
    title=settings.app_title,
    description="""
    Per-date restaurant floor plans.

    * **Layouts** - each calendar date gets its own copy of the table catalog
    * **Groups** - tables are merged into groups that act as a reservable unit
    * **Reservations** - at most one reservation per group; a reserved group
      cannot be regrouped or dissolved until its reservation is removed
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(floorplan_router)


@app.on_event("startup")
async def startup_event():
    """Create the schema for local SQLite databases and validate setup"""
    if settings.is_sqlite and settings.is_development:
        init_db(engine)
    run_startup_checks(engine)


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}
