"""Room service for per-home rooms and their colors."""

import logging
import random
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.config import constants
from src.core.logging import span


logger = logging.getLogger(__name__)


def get_unique_color(used_colors: Iterable[str]) -> str:
    """Pick a random palette color not already in use.

    Falls back to the full palette once every color is taken.
    """
    used = set(used_colors)
    available = [color for color in constants.ROOM_COLORS if color not in used]
    return random.choice(available or constants.ROOM_COLORS)  # noqa: S311 - not security sensitive


async def get_rooms_by_home(*, home_id: str) -> list[dict[str, Any]]:
    """Get a home's rooms sorted by name (case-insensitive)."""
    rooms = await db_client.list_all_records(
        collection="rooms",
        filter_query=f'home_id = "{db_client.sanitize_param(home_id)}"',
    )
    return sorted(rooms, key=lambda room: room["name"].casefold())


async def create_room_with_color(*, home_id: str, name: str, color: str) -> dict[str, Any]:
    """Create a room with an explicit color.

    Raises:
        ValueError: If the name is empty
    """
    with span("room_service.create_room"):
        name = name.strip()
        if not name:
            msg = "Room name must not be empty"
            raise ValueError(msg)

        record = await db_client.create_record(
            collection="rooms",
            data={"name": name, "home_id": home_id, "color": color, "created_at": datetime.now(UTC)},
        )
        logger.info("Created room %s in home %s (%s)", name, home_id, color)
        return record


async def create_room(*, home_id: str, name: str) -> dict[str, Any]:
    """Create a room with a color not yet used in the home.

    Raises:
        ValueError: If the name is empty
    """
    rooms = await get_rooms_by_home(home_id=home_id)
    color = get_unique_color(room["color"] for room in rooms)
    return await create_room_with_color(home_id=home_id, name=name, color=color)


async def delete_room(*, room_id: str) -> None:
    """Delete a room.

    Raises:
        db_client.RecordNotFoundError: If room not found
    """
    await db_client.delete_record(collection="rooms", record_id=room_id)
    logger.info("Deleted room %s", room_id)
