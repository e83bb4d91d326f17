"""
VisionBox Core Package.

This package contains the core business logic of the application,
separated from the web layer. Upload batches, detection aggregation,
report building and model selection are coordinated through core modules.

ARCHITECTURE RULES:
- core/ modules may only import from:
  - Python standard library
  - other core/ modules
  - logging_config / config

- core/ modules MUST NOT import from:
  - web/ (no Flask dependencies)
  - utils/ (adapters are injected, e.g. the inference client)
  - flask, werkzeug, requests or any transport-specific packages
"""

__all__ = [
    "aggregation_core",
    "entities",
    "model_core",
    "report_core",
    "session_core",
    "upload_core",
]
