"""
Tests for store configuration helpers (bdl/core/config.py)
"""

import pytest

from bdl.core import config
from bdl.core.exceptions import ConfigurationError


class TestStoreUrl:
    def test_base_url(self, monkeypatch):
        monkeypatch.setattr(config, "SUPABASE_URL", "https://abc.supabase.co/")
        monkeypatch.setattr(config, "STORE_REST_PATH", "/rest/v1")
        assert config.get_store_url() == "https://abc.supabase.co/rest/v1"

    def test_missing_url(self, monkeypatch):
        monkeypatch.setattr(config, "SUPABASE_URL", "")
        with pytest.raises(ConfigurationError) as exc_info:
            config.get_store_url()
        assert exc_info.value.config_key == "SUPABASE_URL"

    def test_missing_key(self, monkeypatch):
        monkeypatch.setattr(config, "SUPABASE_ANON_KEY", "")
        with pytest.raises(ConfigurationError):
            config.get_store_key()

    def test_key(self, monkeypatch):
        monkeypatch.setattr(config, "SUPABASE_ANON_KEY", "anon")
        assert config.get_store_key() == "anon"
