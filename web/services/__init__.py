"""
VisionBox Services Package.

This package contains service layer functions that encapsulate business logic,
separating it from Flask routes for better testability and maintainability.

ARCHITECTURE RULE:
- Services may ONLY import from core/* modules (and utils/ renderers)
- Services MUST NOT import Flask
"""

from web.services import (
    model_service,
    report_service,
    upload_service,
)

__all__ = [
    "model_service",
    "report_service",
    "upload_service",
]
