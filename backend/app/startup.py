"""
Application startup validation and initialization.

Checks configuration and database connectivity, creates missing tables and
seeds the default kitchen stations before the app starts serving requests.
"""

import logging
import sys
from typing import List, Tuple

from sqlalchemy import text

from core.config import get_settings, validate_production_config
from core.database import engine, Base, SessionLocal

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    """Configure root logging for the service"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_environment_config(self) -> bool:
        """Validate environment configuration"""
        try:
            validate_production_config()
            return True
        except ValueError as e:
            self.errors.append(f"Configuration validation failed: {str(e)}")
            return False

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
        ]

        all_passed = True
        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False

        if not get_settings().audit_http_enabled:
            self.warnings.append("AUDIT_SINK_URL not set - ledger audit goes to logs only")

        return all_passed, self.errors, self.warnings


def initialize_database():
    """Create tables and seed default stations"""
    # Registers the tables on Base.metadata
    import modules.loyalty.models  # noqa: F401
    import modules.kds.models  # noqa: F401
    from modules.kds.services.station_router_service import StationRouterService

    Base.metadata.create_all(bind=engine)

    if get_settings().kds_seed_default_stations:
        db = SessionLocal()
        try:
            StationRouterService(db).seed_default_stations()
        finally:
            db.close()


def run_startup_checks():
    """Run all startup validation checks"""
    settings = get_settings()
    logger.info("=" * 60)
    logger.info("Starting loyalty & kitchen routing backend")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        initialize_database()
        logger.info("All startup checks passed")

    return passed, warnings
