"""Tests for gating config: role bypass parsing and list limit clamping."""
from unittest.mock import patch

from premium_gate.gating.models import ViewerRole


def test_role_bypass_parses_known_roles():
    with patch("premium_gate.gating.config.settings") as mock_settings:
        mock_settings.role_bypass_set = {"ADMIN", "COACH"}
        from premium_gate.gating.config import get_role_bypass

        assert get_role_bypass() == frozenset({ViewerRole.ADMIN, ViewerRole.COACH})


def test_role_bypass_skips_unknown_roles():
    with patch("premium_gate.gating.config.settings") as mock_settings:
        mock_settings.role_bypass_set = {"WIZARD", "PARENT"}
        from premium_gate.gating.config import get_role_bypass

        assert get_role_bypass() == frozenset({ViewerRole.PARENT})


def test_role_bypass_empty_by_default():
    with patch("premium_gate.gating.config.settings") as mock_settings:
        mock_settings.role_bypass_set = set()
        from premium_gate.gating.config import get_role_bypass

        assert get_role_bypass() == frozenset()


def test_clamp_scheduled_limit():
    with patch("premium_gate.gating.config.settings") as mock_settings:
        mock_settings.scheduled_list_default_limit = 20
        mock_settings.scheduled_list_max_limit = 100
        from premium_gate.gating.config import clamp_scheduled_limit

        assert clamp_scheduled_limit(None) == 20
        assert clamp_scheduled_limit(0) == 1
        assert clamp_scheduled_limit(-3) == 1
        assert clamp_scheduled_limit(250) == 100
        assert clamp_scheduled_limit(42) == 42


def test_upgrade_url_and_preview_words_by_audience():
    with patch("premium_gate.gating.config.settings") as mock_settings:
        mock_settings.upgrade_url_anonymous = "/auth/register"
        mock_settings.upgrade_url_member = "/pricing"
        mock_settings.preview_words_anonymous = 40
        mock_settings.preview_words_member = 60
        from premium_gate.gating.config import get_preview_words, get_upgrade_url

        assert get_upgrade_url(anonymous=True) == "/auth/register"
        assert get_upgrade_url(anonymous=False) == "/pricing"
        assert get_preview_words(anonymous=True) == 40
        assert get_preview_words(anonymous=False) == 60
