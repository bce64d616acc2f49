import pytest
from fastapi.testclient import TestClient

from grain.config import Settings
from grain.planner.engine import Debt
from grain.routers.plans import get_settings
from main import app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key="",
        snapshot_backend="file",
        snapshot_path=str(tmp_path / "snapshots.json"),
    )


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def card_debt():
    return Debt(label="Credit card", balance=1200, annual_rate_pct=19.99)
