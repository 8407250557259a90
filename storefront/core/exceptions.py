"""
Catalog exception hierarchy

All exceptions carry a machine-readable code, a message, and details so that
routes can render them uniformly and logs keep the full context.

Exception Hierarchy:
    CatalogError
    ├── ProductNotFoundError
    ├── CatalogValidationError
    └── InvalidFilterError
        └── InvalidPaginationError
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """
    Base exception for all catalog errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging/audit
        status_code: HTTP status the API layer responds with
    """

    default_code: str = "CATALOG_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ProductNotFoundError(CatalogError):
    """Requested product does not exist."""
    default_code = "PRODUCT_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id: int, **kwargs):
        details = kwargs.pop("details", {})
        details["product_id"] = product_id
        super().__init__(f"Product {product_id} not found", details=details, **kwargs)
        self.product_id = product_id


class CatalogValidationError(CatalogError):
    """Write payload violates a catalog rule."""
    default_code = "VALIDATION_ERROR"
    status_code = 422


class InvalidFilterError(CatalogError):
    """A listing query parameter could not be parsed."""
    default_code = "INVALID_FILTER"
    status_code = 400

    def __init__(self, message: str, parameter: Optional[str] = None, value: Any = None, **kwargs):
        details = kwargs.pop("details", {})
        details.update({"parameter": parameter, "value": value})
        super().__init__(message, details=details, **kwargs)


class InvalidPaginationError(InvalidFilterError):
    """Page number or page size out of range."""
    default_code = "INVALID_PAGINATION"
