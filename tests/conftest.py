# tests/conftest.py
# Full file content
import logging
from datetime import datetime, timezone
from typing import Generator

import pytest
from sqlalchemy import Engine

import app.core.settings as core_settings_module
import app.db.session as db_session_module
from app.core.settings import Settings
from app.db.session import create_db_engine, make_session_context
from app.safety_plan.export import PlanExporter
from app.safety_plan.schemas import SafetyPlan, SectionKey

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FIXED_MOMENT = datetime(2024, 5, 1, 9, 30, 15, 123000, tzinfo=timezone.utc)


def create_mock_settings(tmp_path, **overrides) -> Settings:
    """
    Creates a Settings instance for testing that ignores any .env file
    and points the store and exports at a temporary directory.
    """
    values = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'test_planner.db'}",
        "EXPORT_DIR": str(tmp_path / "exports"),
        "PLAN_STORAGE_KEY": "safetyPlan",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path) -> Generator[Settings, None, None]:
    """
    Installs test settings as the global settings and resets the shared engine,
    restoring both afterwards.
    """
    mock_settings = create_mock_settings(tmp_path)
    original_settings = core_settings_module._settings_instance
    core_settings_module._settings_instance = mock_settings
    db_session_module.reset_engine()
    yield mock_settings
    db_session_module.reset_engine()
    core_settings_module._settings_instance = original_settings


@pytest.fixture
def test_engine(settings: Settings) -> Generator[Engine, None, None]:
    engine = create_db_engine(settings)
    logger.info(f"Created test engine for {settings.database_url}")
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return make_session_context(test_engine)


@pytest.fixture
def exporter(settings, session_factory) -> PlanExporter:
    return PlanExporter(settings, session_factory=session_factory, clock=lambda: FIXED_MOMENT)


@pytest.fixture
def minimal_plan() -> SafetyPlan:
    """One entry per section, filled in."""
    plan = SafetyPlan.seeded({key: 1 for key in SectionKey})
    plan.warning_steps[0].update("Feeling hopeless")
    plan.coping_strategies[0].update("Go for a walk")
    plan.social_settings[0].update("The library")
    plan.support_contacts[0].update(name="Jane", contact="555-1234")
    plan.professionals[0].update(name="Jane", phone="555-5678")
    plan.safety_measures[0].update("Give medication to a friend")
    return plan
