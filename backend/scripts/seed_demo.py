#!/usr/bin/env python3
"""Seed a demo farmer, two field devices and 24 hours of readings."""

import asyncio
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from smartagri.database import async_session
from smartagri.models import Device, SensorReading, User
from smartagri.services._clock import utc_now
from smartagri.services.auth_service import hash_password

# Fixed seed for reproducibility
RANDOM_SEED = 42

HOURS_TO_GENERATE = 24
INTERVAL_MINUTES = 30

DEMO_USER = {
    "name": "Demo Farmer",
    "email": "demo@smartagri.local",
    "password": "demo1234",
    "farm_location": "Nashik, Maharashtra",
    "crop_types": ["tomato", "onion"],
    "soil_type": "loamy",
}

DEVICES = [
    {
        "device_id": "esp32-field-north",
        "device_name": "North Field Station",
        "device_type": "ESP32",
        "location": "North field, tomato beds",
    },
    {
        "device_id": "esp32-greenhouse",
        "device_name": "Greenhouse Monitor",
        "device_type": "ESP32",
        "location": "Greenhouse 1",
    },
]

# (baseline, jitter, unit) per sensor type
SENSOR_BASELINES = {
    "temperature": (26.0, 1.5, "°C"),
    "humidity": (62.0, 4.0, "%"),
    "soil_moisture": (38.0, 2.0, "%"),
    "light": (18000.0, 3000.0, "lux"),
}

# North field dries out over the last 6 hours
DRYING_SENSOR = ("esp32-field-north", "soil_moisture")
DRYING_PER_HOUR = 2.5


def generate_readings(device_id: str, start_time: datetime, end_time: datetime) -> list[SensorReading]:
    """Generate readings for every sensor type of one device."""
    readings = []
    drying_start = end_time - timedelta(hours=6)

    for sensor_type, (baseline, jitter, unit) in SENSOR_BASELINES.items():
        current_time = start_time
        while current_time <= end_time:
            value = baseline + random.uniform(-jitter, jitter)
            if (device_id, sensor_type) == DRYING_SENSOR and current_time >= drying_start:
                hours_into_drying = (current_time - drying_start).total_seconds() / 3600
                value -= hours_into_drying * DRYING_PER_HOUR

            readings.append(
                SensorReading(
                    device_id=device_id,
                    sensor_type=sensor_type,
                    value=round(value, 1),
                    unit=unit,
                    timestamp=current_time,
                )
            )
            current_time += timedelta(minutes=INTERVAL_MINUTES)

    return readings


async def seed_demo() -> None:
    """Seed the demo account, devices and readings (idempotent)."""
    random.seed(RANDOM_SEED)

    async with async_session() as session:
        result = await session.execute(select(User).where(User.email == DEMO_USER["email"]))
        if result.scalar_one_or_none():
            print("Demo data already seeded, skipping.")
            return

        now = utc_now().replace(second=0, microsecond=0)
        user = User(
            name=DEMO_USER["name"],
            email=DEMO_USER["email"],
            password_hash=hash_password(DEMO_USER["password"]),
            farm_location=DEMO_USER["farm_location"],
            crop_types=DEMO_USER["crop_types"],
            soil_type=DEMO_USER["soil_type"],
            created_at=now,
        )
        session.add(user)
        await session.flush()

        total_readings = 0
        for device_data in DEVICES:
            session.add(Device(**device_data, user_id=user.id, is_active=True, created_at=now))
            readings = generate_readings(
                device_data["device_id"], now - timedelta(hours=HOURS_TO_GENERATE), now
            )
            session.add_all(readings)
            total_readings += len(readings)

        await session.commit()
        print(f"Seeded user {DEMO_USER['email']} (password: {DEMO_USER['password']})")
        print(f"Seeded {len(DEVICES)} devices and {total_readings} readings.")


if __name__ == "__main__":
    asyncio.run(seed_demo())
