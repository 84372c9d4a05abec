"""
Tests for IntakeSettings.
"""

import pytest
from pydantic import ValidationError

from intake.config import IntakeSettings, get_settings


class TestIntakeSettings:

    def test_defaults(self):
        s = IntakeSettings(supabase_url="https://x.supabase.co", supabase_anon_key="k", _env_file=None)
        assert s.projects_table == "projects"
        assert s.storage_bucket == "project-files"
        assert s.upload_prefix == "public"
        assert s.step_cookie_name == "step"
        assert s.correlate_submissions is False
        assert s.delete_removed_files is False

    def test_cookie_max_age_in_seconds(self):
        s = IntakeSettings(
            supabase_url="https://x.supabase.co",
            supabase_anon_key="k",
            step_cookie_max_age_days=2,
            _env_file=None,
        )
        assert s.step_cookie_max_age == 2 * 24 * 60 * 60

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PROJECTS_TABLE", "leads")
        monkeypatch.setenv("CORRELATE_SUBMISSIONS", "true")
        s = IntakeSettings(_env_file=None)
        assert s.projects_table == "leads"
        assert s.correlate_submissions is True

    def test_supabase_settings_required(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
        with pytest.raises(ValidationError):
            IntakeSettings(_env_file=None)

    def test_invalid_env_rejected(self):
        with pytest.raises(ValidationError):
            IntakeSettings(
                supabase_url="https://x.supabase.co",
                supabase_anon_key="k",
                intake_env="qa",
                _env_file=None,
            )

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
        assert get_settings().projects_table == "projects"
