"""
Tests for the Org Chart API
===========================

HTTP tests for the stateless chart endpoints and builder sessions.

Version: 0.1.0
"""

import json
from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


async def _open_session(client: AsyncClient, organizations: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    body = {"organizations": organizations} if organizations is not None else {}
    response = await client.post("/api/v1/builder/sessions", json=body)
    assert response.status_code == 201
    return response.json()


async def _drop(client: AsyncClient, session_id: str, organization: dict[str, Any]) -> dict[str, Any]:
    response = await client.post(
        f"/api/v1/builder/sessions/{session_id}/drop",
        json={"clientX": 320, "clientY": 180, "payload": json.dumps(organization)},
    )
    assert response.status_code == 200
    return response.json()


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    """Tests for the health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, org_chart_client: AsyncClient) -> None:
        response = await org_chart_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "org-chart"
        assert data["components"]["builder_sessions"]["open"] == 0

    @pytest.mark.asyncio
    async def test_root(self, org_chart_client: AsyncClient) -> None:
        response = await org_chart_client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "Org Chart Service"


# =============================================================================
# Stateless Chart Endpoints
# =============================================================================


class TestChartEndpoints:
    """Tests for /api/v1/charts."""

    @pytest.mark.asyncio
    async def test_layout(
        self, org_chart_client: AsyncClient, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        """Positions come back keyed by organization id."""
        response = await org_chart_client.post(
            "/api/v1/charts/layout",
            json={"organizations": sample_organizations_data},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["positions"]["org-parent-1"] == {"x": 0.0, "y": 0.0}
        assert data["positions"]["org-sub-1"] == {"x": -200.0, "y": 300.0}
        assert data["positions"]["org-div-1"] == {"x": 0.0, "y": 600.0}
        assert data["skipped"] == []

    @pytest.mark.asyncio
    async def test_transform(
        self, org_chart_client: AsyncClient, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        """The chart uses the camelCase document format."""
        response = await org_chart_client.post(
            "/api/v1/charts/transform",
            json={"organizations": sample_organizations_data},
        )

        assert response.status_code == 200
        chart = response.json()["chart"]
        assert len(chart["nodes"]) == 4
        assert [e["id"] for e in chart["edges"]] == [
            "org-parent-1-org-sub-1",
            "org-parent-1-org-sub-2",
            "org-sub-1-org-div-1",
        ]
        assert chart["nodes"][1]["data"]["hierarchyLevel"] == 2
        assert chart["edges"][0]["style"]["strokeWidth"] == 2

    @pytest.mark.asyncio
    async def test_transform_reports_skipped(self, org_chart_client: AsyncClient) -> None:
        """Edges to missing parents are dropped and reported."""
        response = await org_chart_client.post(
            "/api/v1/charts/transform",
            json={
                "organizations": [
                    {"id": "a", "name": "A", "hierarchyLevel": 1},
                    {"id": "b", "name": "B", "parentId": "ghost", "hierarchyLevel": 2},
                ]
            },
        )

        assert response.status_code == 200
        assert response.json()["skipped"] == ["b"]
        assert response.json()["chart"]["edges"] == []

    @pytest.mark.asyncio
    async def test_invalid_organization(self, org_chart_client: AsyncClient) -> None:
        """Invalid records fail request validation."""
        response = await org_chart_client.post(
            "/api/v1/charts/layout",
            json={"organizations": [{"name": "No id"}]},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_export_json(
        self, org_chart_client: AsyncClient, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        response = await org_chart_client.post(
            "/api/v1/charts/export/json",
            json={"organizations": sample_organizations_data},
        )

        assert response.status_code == 200
        assert "organizational-chart.json" in response.headers["content-disposition"]
        assert len(response.json()["nodes"]) == 4

    @pytest.mark.asyncio
    async def test_export_png(
        self, org_chart_client: AsyncClient, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        response = await org_chart_client.post(
            "/api/v1/charts/export/png",
            json={"organizations": sample_organizations_data},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert "organizational-chart.png" in response.headers["content-disposition"]
        assert response.content.startswith(PNG_SIGNATURE)


# =============================================================================
# Builder Sessions
# =============================================================================


class TestBuilderSessions:
    """Tests for /api/v1/builder."""

    @pytest.mark.asyncio
    async def test_create_empty_session(self, org_chart_client: AsyncClient) -> None:
        session = await _open_session(org_chart_client)

        assert session["mode"] == "builder"
        assert session["chart"] == {"nodes": [], "edges": []}

        response = await org_chart_client.get(f"/api/v1/builder/sessions/{session['session_id']}")
        assert response.status_code == 200
        assert response.json()["session_id"] == session["session_id"]

    @pytest.mark.asyncio
    async def test_create_seeded_session(
        self, org_chart_client: AsyncClient, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        session = await _open_session(org_chart_client, sample_organizations_data)

        assert session["mode"] == "view"
        assert len(session["chart"]["nodes"]) == 4
        assert len(session["chart"]["edges"]) == 3

    @pytest.mark.asyncio
    async def test_unknown_session(self, org_chart_client: AsyncClient) -> None:
        response = await org_chart_client.get("/api/v1/builder/sessions/nope")

        assert response.status_code == 404
        assert response.json()["success"] is False

        response = await org_chart_client.post("/api/v1/builder/sessions/nope/arrange")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_close_session(self, org_chart_client: AsyncClient) -> None:
        session = await _open_session(org_chart_client)
        session_id = session["session_id"]

        response = await org_chart_client.delete(f"/api/v1/builder/sessions/{session_id}")
        assert response.status_code == 204

        response = await org_chart_client.delete(f"/api/v1/builder/sessions/{session_id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_build_flow(
        self, org_chart_client: AsyncClient, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        """Drop, connect, reconnect, move, arrange and export."""
        session_id = (await _open_session(org_chart_client))["session_id"]
        base = f"/api/v1/builder/sessions/{session_id}"

        parent = (await _drop(org_chart_client, session_id, sample_organizations_data[0]))["node"]
        child = (await _drop(org_chart_client, session_id, sample_organizations_data[1]))["node"]
        assert parent["id"].startswith("org-parent-1-")
        assert parent["position"] == {"x": 320.0, "y": 180.0}
        assert parent["data"]["hierarchyLevel"] == 1

        connection = {
            "source": parent["id"],
            "target": child["id"],
            "sourceHandle": "org-parent-1-source",
            "targetHandle": "org-sub-1-target",
        }
        response = await org_chart_client.post(f"{base}/connections", json=connection)
        assert response.status_code == 200
        assert response.json()["edge"]["source"] == parent["id"]
        assert response.json()["notices"][0]["title"] == "Connection Added"

        response = await org_chart_client.post(f"{base}/connections", json=connection)
        data = response.json()
        assert "edge" not in data
        assert data["notices"] == [
            {
                "title": "Connection Error",
                "description": "An edge already exists between these points.",
                "variant": "destructive",
            }
        ]
        assert len(data["chart"]["edges"]) == 1

        response = await org_chart_client.put(
            f"{base}/nodes/{child['id']}/position",
            json={"x": 1000, "y": 1000},
        )
        assert response.status_code == 200
        assert response.json()["moved"] == [child["id"]]

        response = await org_chart_client.post(f"{base}/arrange")
        data = response.json()
        positions = {n["id"]: n["position"] for n in data["chart"]["nodes"]}
        assert positions[parent["id"]] == {"x": 0.0, "y": 0.0}
        assert positions[child["id"]] == {"x": 0.0, "y": 300.0}
        assert data["notices"][-1]["title"] == "Layout Applied"

        response = await org_chart_client.get(f"{base}/export/json")
        assert response.status_code == 200
        assert response.json()["edges"][0]["id"].startswith("edge-")

        response = await org_chart_client.get(f"{base}/export/png")
        assert response.status_code == 200
        assert response.content.startswith(PNG_SIGNATURE)

    @pytest.mark.asyncio
    async def test_move_unknown_node(self, org_chart_client: AsyncClient) -> None:
        session_id = (await _open_session(org_chart_client))["session_id"]

        response = await org_chart_client.put(
            f"/api/v1/builder/sessions/{session_id}/nodes/ghost/position",
            json={"x": 0, "y": 0},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_bad_drop(self, org_chart_client: AsyncClient) -> None:
        session_id = (await _open_session(org_chart_client))["session_id"]

        response = await org_chart_client.post(
            f"/api/v1/builder/sessions/{session_id}/drop",
            json={"clientX": 0, "clientY": 0, "payload": "{broken"},
        )

        assert response.status_code == 200
        data = response.json()
        assert "node" not in data
        assert data["notices"][0]["title"] == "Drop Error"

    @pytest.mark.asyncio
    async def test_import(
        self, org_chart_client: AsyncClient, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        """An exported chart imports into another session unchanged."""
        source = await _open_session(org_chart_client, sample_organizations_data)
        exported = await org_chart_client.get(
            f"/api/v1/builder/sessions/{source['session_id']}/export/json"
        )

        target_id = (await _open_session(org_chart_client))["session_id"]
        response = await org_chart_client.post(
            f"/api/v1/builder/sessions/{target_id}/import",
            content=exported.content,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["chart"] == source["chart"]
        assert response.json()["notices"][0]["title"] == "Chart Imported"

        response = await org_chart_client.post(
            f"/api/v1/builder/sessions/{target_id}/import",
            content=b"not a chart",
        )
        assert response.json()["notices"][0]["title"] == "Import Error"
        assert response.json()["chart"] == source["chart"]
