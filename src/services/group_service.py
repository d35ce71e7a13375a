"""Group service for named task groups within a home."""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.logging import span


logger = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        msg = "Group name must not be empty"
        raise ValueError(msg)
    return name


async def get_groups_by_home(*, home_id: str) -> list[dict[str, Any]]:
    """Get a home's groups sorted by name (case-insensitive)."""
    groups = await db_client.list_all_records(
        collection="task_groups",
        filter_query=f'home_id = "{db_client.sanitize_param(home_id)}"',
    )
    return sorted(groups, key=lambda group: group["name"].casefold())


async def group_name_exists(*, home_id: str, name: str, exclude_id: str | None = None) -> bool:
    """Check whether another group in the home already uses the name.

    Comparison ignores case and surrounding whitespace.

    Args:
        home_id: Home to search
        name: Candidate group name
        exclude_id: Group to ignore (the one being renamed)

    Returns:
        True if a different group has the same name
    """
    wanted = name.strip().casefold()
    groups = await get_groups_by_home(home_id=home_id)
    return any(group["name"].casefold() == wanted and group["id"] != exclude_id for group in groups)


async def create_group(*, home_id: str, name: str, created_by: str) -> dict[str, Any]:
    """Create a group in a home.

    Raises:
        ValueError: If the name is empty or already used in the home
    """
    with span("group_service.create_group"):
        name = _clean_name(name)
        if await group_name_exists(home_id=home_id, name=name):
            msg = f"A group named '{name}' already exists in this home"
            raise ValueError(msg)

        record = await db_client.create_record(
            collection="task_groups",
            data={"name": name, "home_id": home_id, "created_by": created_by, "created_at": datetime.now(UTC)},
        )
        logger.info("Created group %s in home %s", name, home_id)
        return record


async def get_group_by_id(*, group_id: str) -> dict[str, Any] | None:
    """Get a group, or None if it does not exist."""
    try:
        return await db_client.get_record(collection="task_groups", record_id=group_id)
    except db_client.RecordNotFoundError:
        return None


async def update_group(*, group_id: str, name: str) -> dict[str, Any]:
    """Rename a group.

    Raises:
        ValueError: If the name is empty or used by another group in the home
        db_client.RecordNotFoundError: If group not found
    """
    with span("group_service.update_group"):
        name = _clean_name(name)
        group = await db_client.get_record(collection="task_groups", record_id=group_id)
        if await group_name_exists(home_id=group["home_id"], name=name, exclude_id=group_id):
            msg = f"A group named '{name}' already exists in this home"
            raise ValueError(msg)

        return await db_client.update_record(collection="task_groups", record_id=group_id, data={"name": name})


async def delete_group(*, group_id: str) -> None:
    """Delete a group.

    Raises:
        db_client.RecordNotFoundError: If group not found
    """
    await db_client.delete_record(collection="task_groups", record_id=group_id)
    logger.info("Deleted group %s", group_id)
