import os
import sys

import pytest

import run
from righthome.config import get_settings


@pytest.fixture()
def served(monkeypatch):
    calls = []
    monkeypatch.setattr(run.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.delenv("CATALOG_PATH", raising=False)
    yield calls
    os.environ.pop("CATALOG_PATH", None)
    get_settings.cache_clear()


def test_defaults_come_from_settings(served, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["run.py"])

    run.main()

    app, kwargs = served[0]
    assert app == "righthome.main:app"
    assert kwargs["host"] == get_settings().HOST
    assert kwargs["port"] == get_settings().PORT
    assert kwargs["reload"] == get_settings().DEBUG


def test_flags_override_settings(served, monkeypatch, tmp_path):
    catalog = tmp_path / "listings.json"
    monkeypatch.setattr(sys, "argv", ["run.py", "--port", "8080", "--no-reload", "--catalog", str(catalog)])

    run.main()

    _, kwargs = served[0]
    assert kwargs["port"] == 8080
    assert kwargs["reload"] is False
    assert get_settings().CATALOG_PATH == str(catalog)
