"""Tests for device registration, listing and summaries."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from conftest import add_readings, auth_headers_for, create_device, create_user
from smartagri.models import Device
from smartagri.services._clock import utc_now


class TestRegisterDevice:
    """Tests for POST /api/register-device."""

    @pytest.mark.asyncio
    async def test_requires_bearer_token(self, client: AsyncClient):
        response = await client.post(
            "/api/register-device",
            json={"device_id": "esp32-a", "device_name": "Station A"},
        )
        assert response.status_code == 401
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_rejects_unknown_token(self, client: AsyncClient):
        response = await client.post(
            "/api/register-device",
            json={"device_id": "esp32-a", "device_name": "Station A"},
            headers={"Authorization": "Bearer not-a-real-token"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid access token"}

    @pytest.mark.asyncio
    async def test_registers_with_defaults(self, client: AsyncClient, user, auth_headers):
        response = await client.post(
            "/api/register-device",
            json={"device_id": "esp32-a", "device_name": "Station A"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        device = body["device"]
        assert device["device_id"] == "esp32-a"
        assert device["device_type"] == "ESP32"
        assert device["is_active"] is True
        assert device["location"] is None
        assert device["user_id"] == user.id

    @pytest.mark.asyncio
    async def test_duplicate_device_id_conflicts(
        self, client: AsyncClient, session, device, session_factory
    ):
        other = await create_user(session, email="second@example.com")
        headers = await auth_headers_for(session, other)

        response = await client.post(
            "/api/register-device",
            json={"device_id": device.device_id, "device_name": "Copy", "device_type": "ESP8266"},
            headers=headers,
        )

        assert response.status_code == 409
        assert response.json() == {"error": "A device with this id is already registered"}

        async with session_factory() as check:
            count = await check.scalar(
                select(func.count()).select_from(Device).where(Device.device_id == device.device_id)
            )
        assert count == 1

    @pytest.mark.asyncio
    async def test_missing_name_is_bad_request(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/register-device", json={"device_id": "esp32-a"}, headers=auth_headers
        )
        assert response.status_code == 400


class TestListDevices:
    """Tests for GET /api/devices and PATCH /api/devices/{device_id}."""

    @pytest.mark.asyncio
    async def test_lists_newest_first(self, client: AsyncClient, session, user, auth_headers):
        now = utc_now()
        await create_device(session, user, "esp32-old", device_name="Zeta", created_at=now - timedelta(days=2))
        await create_device(session, user, "esp32-new", device_name="Alpha", created_at=now)
        await create_device(
            session,
            user,
            "esp32-off",
            is_active=False,
            device_name="Beta",
            created_at=now - timedelta(days=1),
        )

        response = await client.get("/api/devices", headers=auth_headers)

        assert response.status_code == 200
        assert [d["device_id"] for d in response.json()] == ["esp32-new", "esp32-off", "esp32-old"]

    @pytest.mark.asyncio
    async def test_active_filter_orders_by_name(self, client: AsyncClient, session, user, auth_headers):
        await create_device(session, user, "esp32-1", device_name="Zeta")
        await create_device(session, user, "esp32-2", device_name="Alpha")
        await create_device(session, user, "esp32-3", device_name="Beta", is_active=False)

        response = await client.get("/api/devices", params={"active": "true"}, headers=auth_headers)

        assert [d["device_name"] for d in response.json()] == ["Alpha", "Zeta"]

    @pytest.mark.asyncio
    async def test_other_users_devices_hidden(self, client: AsyncClient, session, device):
        other = await create_user(session, email="second@example.com")
        headers = await auth_headers_for(session, other)

        response = await client.get("/api/devices", headers=headers)

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_deactivate_device(self, client: AsyncClient, device, auth_headers):
        response = await client.patch(
            f"/api/devices/{device.device_id}", json={"is_active": False}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        # Ingestion now refuses the device
        response = await client.post(
            "/api/sensor-data",
            json={
                "device_id": device.device_id,
                "sensor_readings": [{"sensor_type": "temperature", "value": 20, "unit": "°C"}],
            },
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_toggle_requires_ownership(self, client: AsyncClient, session, device):
        other = await create_user(session, email="second@example.com")
        headers = await auth_headers_for(session, other)

        response = await client.patch(
            f"/api/devices/{device.device_id}", json={"is_active": False}, headers=headers
        )
        assert response.status_code == 403

        response = await client.patch(
            "/api/devices/esp32-missing", json={"is_active": False}, headers=headers
        )
        assert response.status_code == 404


class TestDeviceSummary:
    """Tests for GET /api/devices/{device_id}/summary."""

    @pytest.mark.asyncio
    async def test_summary_over_recent_window(self, client: AsyncClient, session, device, auth_headers):
        await add_readings(session, device.device_id, "soil_moisture", [40, 38, 36, 34, 32], "%")
        # Outside the 24h window
        await add_readings(
            session, device.device_id, "soil_moisture", [90], "%", end=utc_now() - timedelta(hours=30)
        )

        response = await client.get(f"/api/devices/{device.device_id}/summary", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["deviceId"] == device.device_id
        assert body["windowHours"] == 24
        assert body["readingsCount"] == 5
        moisture = body["sensors"]["soil_moisture"]
        assert moisture["current"] == 32.0
        assert moisture["max"] == 40.0
        assert moisture["average"] == pytest.approx(36.0)
        assert moisture["trend"] == "decreasing"

    @pytest.mark.asyncio
    async def test_summary_without_readings(self, client: AsyncClient, device, auth_headers):
        response = await client.get(f"/api/devices/{device.device_id}/summary", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["sensors"] == {}
