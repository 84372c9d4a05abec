"""
Health check tests - verify basic setup works.
"""

import pytest


def test_import_intake():
    """Test that intake package can be imported."""
    import intake
    assert intake.__version__ == "1.0.0"


def test_import_onboarding():
    """Test that the onboarding package exposes its public API."""
    from onboarding import OnboardingSession, OnboardingStep, StepMachine
    assert OnboardingStep.WELCOME.value == "welcome"
    assert OnboardingSession is not None
    assert StepMachine is not None


def test_import_config():
    """Test that config can be imported."""
    from intake.config import IntakeSettings
    assert IntakeSettings is not None


def test_import_app():
    """Test that the web app can be imported."""
    from intake.web.app import app
    assert any(route.path == "/onboarding" for route in app.routes)


def test_settings_load():
    """Test that settings load from the environment."""
    from intake.config import get_settings
    settings = get_settings()
    assert settings.supabase_url.startswith("https://")
    assert settings.intake_env == "development"


def test_supabase_client_is_cached(monkeypatch):
    """Test that the Supabase client is built once and reused."""
    from unittest.mock import patch
    from intake.db import client as db_client

    monkeypatch.setattr(db_client, "_client", None)
    with patch("intake.db.client.create_client") as create:
        first = db_client.get_client()
        second = db_client.get_client()
    assert first is second
    create.assert_called_once()
