from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from .errors import register_error_handlers
from .routers import jobs, estimates

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("excavation_tracker")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    Databases created by Base.metadata.create_all() before Alembic was set up
    get the initial revision stamped first, so the upgrade doesn't try to
    create tables that already exist.
    """
    try:
        from alembic.config import Config
        from alembic import command
        from sqlalchemy import inspect

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
        alembic_cfg.attributes["configure_logger"] = False

        insp = inspect(engine)
        tables = insp.get_table_names()
        if "alembic_version" not in tables and "jobs" in tables:
            logger.info("Stamping base migration 3f2a9c1d7b10 (tables already exist)")
            command.stamp(alembic_cfg, "3f2a9c1d7b10")

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning("Alembic migration warning: %s", e)


app = FastAPI(
    title=settings.APP_NAME,
    description="Excavation job tracking with trench volume and cost estimates",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# API routes
app.include_router(jobs.router, prefix="/api")
app.include_router(estimates.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "excavation-tracker"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("excavation_tracker.main:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
