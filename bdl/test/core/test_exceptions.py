"""
Tests for the BDL exception hierarchy (bdl/core/exceptions.py)
"""

import pytest

from bdl.core.exceptions import (
    BDLError,
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize("cls", [
        StoreError, NotFoundError, ValidationError, PermissionDeniedError, ConfigurationError,
    ])
    def test_all_are_bdl_errors(self, cls):
        assert issubclass(cls, BDLError)

    def test_details_in_message(self):
        error = BDLError("Échec", details={"table": "profiles"})
        assert str(error) == "Échec (table=profiles)"

    def test_plain_message(self):
        assert str(BDLError("Échec")) == "Échec"


class TestStr:
    """Tests for the extra context appended by subclasses."""

    def test_store_error(self):
        cause = ConnectionError("down")
        error = StoreError("GET t failed", status_code=503, table="t", original_error=cause)
        assert str(error) == "GET t failed | Status: 503 | Table: t | Caused by: ConnectionError: down"

    def test_store_error_bare(self):
        assert str(StoreError("boom")) == "boom"

    def test_not_found(self):
        error = NotFoundError("Introuvable", table="official_journal", key="N1")
        assert str(error) == "Introuvable | Table: official_journal | Key: N1"

    def test_validation_error(self):
        error = ValidationError("Unknown vote", field_name="vote", field_value="blanc")
        assert str(error) == "Unknown vote | Field: vote | Value: blanc"

    def test_permission_denied(self):
        error = PermissionDeniedError("Non", action="vote", user_id="u1")
        assert str(error) == "Non | Action: vote | User: u1"

    def test_configuration_error(self):
        error = ConfigurationError("Missing", config_key="SUPABASE_URL")
        assert str(error) == "Missing | Key: SUPABASE_URL"
