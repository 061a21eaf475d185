"""
Test Configuration
==================

Pytest fixtures for org chart tests.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest_asyncio.fixture
async def org_chart_client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Org Chart Service."""
    from services.org_chart.builder.store import session_store
    from services.org_chart.main import app

    session_store.clear()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    session_store.clear()


@pytest.fixture
def sample_organizations_data() -> list[dict[str, Any]]:
    """Registry records as the organization registry sends them (camelCase)."""
    return [
        {
            "id": "org-parent-1",
            "name": "Global Tech Solutions",
            "type": "Parent",
            "hierarchyLevel": 1,
            "corporateId": "GT12345678",
            "securityContact": {"name": "Alice Secure", "email": "alice.secure@globaltech.com"},
        },
        {
            "id": "org-sub-1",
            "name": "Innovate Software Ltd.",
            "type": "Subsidiary",
            "parentId": "org-parent-1",
            "hierarchyLevel": 2,
            "securityContact": {"name": "Charlie Coder", "email": "charlie.c@innovatesoft.co.uk"},
        },
        {
            "id": "org-sub-2",
            "name": "Secure Data Centers Inc.",
            "type": "Subsidiary",
            "parentId": "org-parent-1",
            "hierarchyLevel": 2,
            "securityContact": "soc@securedc.example",
        },
        {
            "id": "org-div-1",
            "name": "CRM Platform Division",
            "type": "Division",
            "parentId": "org-sub-1",
            "hierarchyLevel": 3,
        },
    ]


@pytest.fixture
def sample_organizations(sample_organizations_data: list[dict[str, Any]]) -> list[Any]:
    """Validated organization records."""
    from shared.models.organization import Organization

    return [Organization.model_validate(record) for record in sample_organizations_data]
