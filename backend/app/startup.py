"""
Application startup validation and initialization.

Checks that the database is reachable and the floor plan schema and
catalog are present before the application starts serving requests.
"""

import logging
from typing import List, Tuple

import sqlalchemy as sa
from sqlalchemy import text
from sqlalchemy.engine import Engine

from core.config import get_settings

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ["tables", "layout_instances", "table_groups", "table_state", "reservations"]


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_required_tables(self) -> bool:
        """Check if the floor plan tables exist"""
        try:
            existing_tables = sa.inspect(self.engine).get_table_names()
        except Exception as e:
            self.warnings.append(f"Could not check database tables: {str(e)}")
            return True

        missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]
        if missing_tables:
            self.errors.append(
                f"Missing database tables: {', '.join(missing_tables)}. "
                "Run migrations with: alembic upgrade head"
            )
            return False
        return True

    def check_catalog(self) -> bool:
        """An empty catalog is allowed but every opened date will be blank"""
        try:
            with self.engine.connect() as conn:
                count = conn.execute(text("SELECT COUNT(*) FROM tables")).scalar()
        except Exception as e:
            self.warnings.append(f"Could not count catalog tables: {str(e)}")
            return True

        if not count:
            self.warnings.append(
                "Table catalog is empty - run scripts/seed_catalog.py"
            )
        else:
            logger.info(f"Table catalog has {count} tables")
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.check_required_tables),
            ("Table Catalog", self.check_catalog),
        ]

        all_passed = True

        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False
                # Later checks need the earlier ones to have passed
                break

        return all_passed, self.errors, self.warnings


def run_startup_checks(engine: Engine) -> Tuple[bool, List[str]]:
    """Run all startup validation checks"""
    settings = get_settings()
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_title}")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)

    validator = StartupValidator(engine)
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        raise RuntimeError("Cannot start in production with startup errors")
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings


def configure_startup_logging(level: str = "INFO"):
    """Configure logging for the application"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
