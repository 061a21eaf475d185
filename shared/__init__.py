"""
Org Chart Shared Library
========================

Common utilities, configurations, and models shared by the org chart service.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - models: Shared Pydantic models (organizations, API envelopes)

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Compliance Platform Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
