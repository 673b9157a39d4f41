"""
Shared fixtures: settings, fake GitHub responses and an HTTP test client.
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from portal.core.config import Settings, get_settings


def make_response(status_code=200, json_data=None, text=""):
    """A stand-in for requests.Response with the attributes the services read."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.text = text
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON")
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        GITHUB_TOKEN="ghp_test",
        GITHUB_USER="iitjeelf",
        GOOGLE_APPS_SCRIPT_URL=None,
    )


@pytest.fixture
def backup_settings(settings):
    return settings.model_copy(update={"GOOGLE_APPS_SCRIPT_URL": "https://script.example/exec"})


@pytest.fixture
def make_client():
    from portal.api.server import app

    def _make(cfg):
        app.dependency_overrides[get_settings] = lambda: cfg
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
