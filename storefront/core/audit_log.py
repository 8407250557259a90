"""
Audit logging for catalog mutations

Records what changed and when on the structured "audit" logger.
Authentication is handled upstream, so entries carry the client IP only.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Any

from storefront.core.config import settings

# Structured audit logger
audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)

# Action categories
ACTION_PRODUCT_CREATE = "product.create"
ACTION_PRODUCT_UPDATE = "product.update"
ACTION_PRODUCT_DELETE = "product.delete"

SENSITIVE_KEYS = ("password", "secret", "token", "key", "credential")


def log_catalog_action(
    action: str,
    resource_type: str,
    resource_id: Optional[Any] = None,
    details: Optional[dict] = None,
    ip_address: Optional[str] = None,
    success: bool = True,
) -> dict:
    """
    Log a catalog mutation.

    Args:
        action: Action identifier (e.g., "product.create")
        resource_type: Type of resource affected (e.g., "product")
        resource_id: ID of the affected resource (if applicable)
        details: Additional context about the action
        ip_address: IP address of the request
        success: Whether the action succeeded

    Returns:
        The structured entry that was logged
    """
    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "resource_type": resource_type,
        "resource_id": str(resource_id) if resource_id is not None else None,
        "success": success,
        "ip_address": ip_address,
        "environment": settings.ENVIRONMENT,
    }

    if details:
        log_entry["details"] = {
            k: v for k, v in details.items()
            if k.lower() not in SENSITIVE_KEYS
        }

    if success:
        audit_logger.info(
            f"AUDIT: {action} on {resource_type}/{resource_id}",
            extra={"audit": log_entry}
        )
    else:
        audit_logger.warning(
            f"AUDIT FAILED: {action} on {resource_type}/{resource_id}",
            extra={"audit": log_entry}
        )

    return log_entry
