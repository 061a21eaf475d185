"""
Organization Models
===================

Organization records supplied by the registry and consumed by the
org chart engine.

Version: 0.1.0
"""

from enum import Enum

from pydantic import BaseModel, Field


class OrganizationType(str, Enum):
    """Known organization types in the registry."""

    PARENT = "Parent"
    SUBSIDIARY = "Subsidiary"
    DIVISION = "Division"
    BRANCH = "Branch"


class SecurityContact(BaseModel):
    """Named security contact of an organization."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} ({self.email})"


class Organization(BaseModel):
    """
    Registered organization.

    Accepts both the registry's camelCase keys and snake_case names.
    A record without a hierarchy level sits on the root level.
    """

    id: str = Field(..., min_length=1, description="Unique organization ID")
    name: str = Field(..., description="Display name")
    type: str = Field(default=OrganizationType.PARENT.value, description="Organization type")
    parent_id: str | None = Field(default=None, alias="parentId")
    hierarchy_level: int = Field(default=1, ge=1, alias="hierarchyLevel")
    security_contact: str | SecurityContact | None = Field(default=None, alias="securityContact")

    # Descriptive fields carried through from the registry
    corporate_id: str | None = Field(default=None, alias="corporateId")
    description: str | None = None

    model_config = {"populate_by_name": True}

    @property
    def is_root(self) -> bool:
        """Check if the organization has no parent."""
        return not self.parent_id


def format_security_contact(contact: str | SecurityContact | None) -> str:
    """Render a security contact for display, ``N/A`` when absent."""
    if not contact:
        return "N/A"
    return str(contact)
