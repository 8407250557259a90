"""
Tests for configuration parsing, error sanitization and audit logging.
"""
import logging

import pytest

from storefront.core.audit_log import ACTION_PRODUCT_UPDATE, log_catalog_action
from storefront.core.config import DEFAULT_CORS_ORIGINS, Settings
from storefront.core.error_handler import is_sensitive_error, sanitize_error_message
from storefront.core.exceptions import InvalidFilterError, InvalidPaginationError, ProductNotFoundError


class TestSettings:

    def test_cors_origins_accept_csv_and_json(self):
        assert Settings.parse_cors_origins("https://a.shop, https://b.shop") == ["https://a.shop", "https://b.shop"]
        assert Settings.parse_cors_origins('["https://a.shop"]') == ["https://a.shop"]
        assert Settings.parse_cors_origins("  ") == DEFAULT_CORS_ORIGINS

    def test_production_rejects_debug_and_local_database(self):
        with pytest.raises(ValueError) as exc_info:
            Settings(
                ENVIRONMENT="production",
                DEBUG=True,
                DATABASE_URL="postgresql+asyncpg://user@localhost/catalog",
                CORS_ORIGINS=["https://shop.example.com"],
            )
        assert "DEBUG=True" in str(exc_info.value)
        assert "Localhost DATABASE_URL" in str(exc_info.value)

    def test_default_page_size_must_fit_maximum(self):
        with pytest.raises(ValueError):
            Settings(
                ENVIRONMENT="development",
                DATABASE_URL="sqlite+aiosqlite://",
                DEFAULT_PAGE_SIZE=500,
            )


class TestErrorSanitization:

    def test_database_details_are_hidden(self):
        message = 'sqlalchemy.exc.IntegrityError: (sqlite3.IntegrityError) FOREIGN KEY constraint failed'
        assert is_sensitive_error(message)
        assert sanitize_error_message(message) == "An internal error occurred. Please try again later."

    def test_plain_messages_pass_through(self):
        assert sanitize_error_message(ProductNotFoundError(8)) == "Product 8 not found"

    def test_long_messages_are_truncated(self):
        assert sanitize_error_message("x" * 300) == "x" * 200 + "..."


class TestExceptions:

    def test_invalid_filter_carries_parameter(self):
        exc = InvalidFilterError("bad discount", parameter="discount", value="a-b")
        assert exc.status_code == 400
        assert exc.to_dict() == {
            "error": "INVALID_FILTER",
            "message": "bad discount",
            "details": {"parameter": "discount", "value": "a-b"},
        }

    def test_pagination_error_is_a_filter_error(self):
        exc = InvalidPaginationError("page must be >= 1", parameter="page", value=0)
        assert isinstance(exc, InvalidFilterError)
        assert exc.code == "INVALID_PAGINATION"


def test_audit_entry_drops_sensitive_details(caplog):
    with caplog.at_level(logging.INFO, logger="audit"):
        entry = log_catalog_action(
            action=ACTION_PRODUCT_UPDATE,
            resource_type="product",
            resource_id=12,
            details={"categories": [1, 2], "token": "abc"},
            ip_address="10.0.0.5",
        )

    assert entry["resource_id"] == "12"
    assert entry["details"] == {"categories": [1, 2]}
    assert "AUDIT: product.update on product/12" in caplog.text
