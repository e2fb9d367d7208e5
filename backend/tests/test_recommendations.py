"""Tests for the recommendation list and reader actions."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from conftest import auth_headers_for, create_user
from smartagri.models import Recommendation
from smartagri.services._clock import utc_now


async def add_recommendation(session, device, title, priority="medium", minutes_ago=0, **flags):
    row = Recommendation(
        user_id=device.user_id,
        device_id=device.device_id,
        title=title,
        message=f"{title} details",
        priority=priority,
        category="general",
        sensor_data={"temperature": {"current": 21.0}},
        ai_confidence=0.8,
        is_read=flags.get("is_read", False),
        is_dismissed=flags.get("is_dismissed", False),
        created_at=utc_now() - timedelta(minutes=minutes_ago),
    )
    session.add(row)
    await session.commit()
    return row


class TestListRecommendations:
    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/recommendations")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_newest_first_without_dismissed(self, client: AsyncClient, session, device, auth_headers):
        await add_recommendation(session, device, "Oldest", minutes_ago=30)
        await add_recommendation(session, device, "Newest", minutes_ago=1)
        await add_recommendation(session, device, "Dismissed", minutes_ago=5, is_dismissed=True)
        await add_recommendation(session, device, "Middle", minutes_ago=10)

        response = await client.get("/api/recommendations", headers=auth_headers)

        assert response.status_code == 200
        titles = [r["title"] for r in response.json()["recommendations"]]
        assert titles == ["Newest", "Middle", "Oldest"]

    @pytest.mark.asyncio
    async def test_counts(self, client: AsyncClient, session, device, auth_headers):
        await add_recommendation(session, device, "Urgent", priority="high")
        await add_recommendation(session, device, "Urgent but read", priority="high", is_read=True)
        await add_recommendation(session, device, "Routine", priority="low")

        body = (await client.get("/api/recommendations", headers=auth_headers)).json()

        assert body["unreadCount"] == 2
        assert body["highPriorityCount"] == 1

    @pytest.mark.asyncio
    async def test_limit(self, client: AsyncClient, session, device, auth_headers):
        for i in range(5):
            await add_recommendation(session, device, f"Advice {i}", minutes_ago=i)

        body = (await client.get("/api/recommendations", params={"limit": 2}, headers=auth_headers)).json()

        assert [r["title"] for r in body["recommendations"]] == ["Advice 0", "Advice 1"]

    @pytest.mark.asyncio
    async def test_other_users_hidden(self, client: AsyncClient, session, device):
        await add_recommendation(session, device, "Private")
        other = await create_user(session, email="second@example.com")

        body = (await client.get("/api/recommendations", headers=await auth_headers_for(session, other))).json()

        assert body["recommendations"] == []
        assert body["unreadCount"] == 0


class TestReaderActions:
    @pytest.mark.asyncio
    async def test_mark_read_is_idempotent(self, client: AsyncClient, session, device, auth_headers):
        row = await add_recommendation(session, device, "Irrigate")

        first = await client.post(f"/api/recommendations/{row.id}/read", headers=auth_headers)
        second = await client.post(f"/api/recommendations/{row.id}/read", headers=auth_headers)

        assert first.status_code == 200
        assert first.json()["is_read"] is True
        assert second.status_code == 200
        assert second.json()["is_read"] is True

        body = (await client.get("/api/recommendations", headers=auth_headers)).json()
        assert body["unreadCount"] == 0

    @pytest.mark.asyncio
    async def test_dismiss_hides_from_list(self, client: AsyncClient, session, device, auth_headers):
        row = await add_recommendation(session, device, "Fertilize")

        response = await client.post(f"/api/recommendations/{row.id}/dismiss", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["is_dismissed"] is True
        assert response.json()["sensor_data"] == {"temperature": {"current": 21.0}}
        body = (await client.get("/api/recommendations", headers=auth_headers)).json()
        assert body["recommendations"] == []

    @pytest.mark.asyncio
    async def test_unknown_recommendation(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/recommendations/9999/read", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Recommendation not found"}

    @pytest.mark.asyncio
    async def test_other_users_recommendation(self, client: AsyncClient, session, device):
        row = await add_recommendation(session, device, "Private")
        other = await create_user(session, email="second@example.com")
        headers = await auth_headers_for(session, other)

        response = await client.post(f"/api/recommendations/{row.id}/dismiss", headers=headers)

        assert response.status_code == 403
