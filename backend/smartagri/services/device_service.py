"""Device service layer: registration, lookup and activation of IoT devices."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.errors import DuplicateDevice, Forbidden, NotFound, UpstreamUnavailable
from smartagri.models import Device, User
from smartagri.models.device import DEFAULT_DEVICE_TYPE
from smartagri.schemas.device import DeviceRegistration
from smartagri.services._clock import utc_now

__all__ = [
    "get_device",
    "get_owned_device",
    "list_devices",
    "register_device",
    "set_device_active",
]

logger = logging.getLogger(__name__)


async def get_device(session: AsyncSession, device_id: str) -> Device | None:
    """Look up a device by its device_id."""
    result = await session.execute(select(Device).where(Device.device_id == device_id))
    return result.scalar_one_or_none()


async def get_owned_device(session: AsyncSession, user: User, device_id: str) -> Device:
    """Look up a device the caller owns. Raises NotFound or Forbidden."""
    device = await get_device(session, device_id)
    if device is None:
        raise NotFound("Device not found")
    if device.user_id != user.id:
        raise Forbidden("Device belongs to another user")
    return device


async def register_device(
    session: AsyncSession,
    owner: User,
    registration: DeviceRegistration,
) -> Device:
    """Create a device owned by the caller. Raises DuplicateDevice if the id is taken."""
    if await get_device(session, registration.device_id) is not None:
        raise DuplicateDevice()

    device = Device(
        device_id=registration.device_id,
        device_name=registration.device_name,
        device_type=registration.device_type or DEFAULT_DEVICE_TYPE,
        location=registration.location,
        user_id=owner.id,
        is_active=True,
        created_at=utc_now(),
    )
    session.add(device)

    try:
        await session.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same id
        await session.rollback()
        raise DuplicateDevice() from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Error registering device {registration.device_id}: {e}")
        raise UpstreamUnavailable("Failed to register device") from e

    await session.refresh(device)
    logger.info(f"Registered device {device.device_id} for user {owner.id}")
    return device


async def list_devices(
    session: AsyncSession,
    owner: User,
    active_only: bool = False,
) -> list[Device]:
    """
    List the caller's devices.

    All devices come newest first; active-only listings are ordered by name
    (the device picker of the advisory panel).
    """
    query = select(Device).where(Device.user_id == owner.id)
    if active_only:
        query = query.where(Device.is_active.is_(True)).order_by(Device.device_name)
    else:
        query = query.order_by(Device.created_at.desc(), Device.id.desc())

    result = await session.execute(query)
    return list(result.scalars())


async def set_device_active(
    session: AsyncSession,
    owner: User,
    device_id: str,
    is_active: bool,
) -> Device:
    """Activate or deactivate one of the caller's devices."""
    device = await get_owned_device(session, owner, device_id)
    device.is_active = is_active

    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise UpstreamUnavailable("Failed to update device status") from e

    logger.info(f"Device {device_id} {'activated' if is_active else 'deactivated'}")
    return device
