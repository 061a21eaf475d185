"""
Shared Models
=============

Pydantic models shared across services.

Models:
- Organization models (Organization, SecurityContact, OrganizationType)
- Common API models (HealthResponse)
"""

from shared.models.organization import (
    Organization,
    OrganizationType,
    SecurityContact,
    format_security_contact,
)
from shared.models.common import (
    HealthResponse,
)

__all__ = [
    # Organization
    "Organization",
    "OrganizationType",
    "SecurityContact",
    "format_security_contact",
    # Common
    "HealthResponse",
]
