"""Home service for homes and their memberships."""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.logging import span
from src.domain.user import InvitationStatus


logger = logging.getLogger(__name__)


async def _member_ids_by_home(home_ids: list[str]) -> dict[str, list[str]]:
    """Map each home ID to its member user IDs, in join order."""
    members: dict[str, list[str]] = {home_id: [] for home_id in home_ids}
    if not home_ids:
        return members

    memberships = await db_client.list_records_matching_any(
        collection="home_members",
        field="home_id",
        values=home_ids,
        sort="+joined_at",
    )
    for membership in memberships:
        members.setdefault(membership["home_id"], []).append(membership["user_id"])
    return members


async def _delete_matching(*, collection: str, filter_query: str) -> int:
    """Delete every record in a collection matching the filter."""
    records = await db_client.list_all_records(collection=collection, filter_query=filter_query)
    for record in records:
        await db_client.delete_record(collection=collection, record_id=record["id"])
    return len(records)


async def create_home(*, user_id: str, name: str) -> dict[str, Any]:
    """Create a home owned by the user, who becomes its first member.

    Args:
        user_id: Owner user ID
        name: Home display name

    Returns:
        Created home record with its members list

    Raises:
        ValueError: If the name is empty
        db_client.DatabaseError: If database operation fails
    """
    with span("home_service.create_home"):
        name = name.strip()
        if not name:
            msg = "Home name must not be empty"
            raise ValueError(msg)

        now = datetime.now(UTC)
        home = await db_client.create_record(
            collection="homes",
            data={"name": name, "created_by": user_id, "created_at": now},
        )
        await db_client.create_record(
            collection="home_members",
            data={"home_id": home["id"], "user_id": user_id, "joined_at": now},
        )

        logger.info("Created home %s (%s) for user %s", home["id"], name, user_id)
        return {**home, "members": [user_id]}


async def get_home_ids_for_user(*, user_id: str) -> list[str]:
    """Get IDs of every home the user is a member of."""
    memberships = await db_client.list_all_records(
        collection="home_members",
        filter_query=f'user_id = "{db_client.sanitize_param(user_id)}"',
    )
    return [membership["home_id"] for membership in memberships]


async def get_homes_by_user(*, user_id: str) -> list[dict[str, Any]]:
    """Get the user's homes, newest first, each with its members list."""
    with span("home_service.get_homes_by_user"):
        home_ids = await get_home_ids_for_user(user_id=user_id)
        if not home_ids:
            return []

        homes = await db_client.list_records_matching_any(
            collection="homes",
            field="id",
            values=home_ids,
            sort="-created_at",
        )
        members = await _member_ids_by_home([home["id"] for home in homes])
        return [{**home, "members": members.get(home["id"], [])} for home in homes]


async def get_home_by_id(*, home_id: str) -> dict[str, Any] | None:
    """Get a home with its members list, or None if it does not exist."""
    try:
        home = await db_client.get_record(collection="homes", record_id=home_id)
    except db_client.RecordNotFoundError:
        return None

    members = await _member_ids_by_home([home["id"]])
    return {**home, "members": members[home["id"]]}


async def list_home_ids() -> list[str]:
    """Get the ID of every home."""
    homes = await db_client.list_all_records(collection="homes")
    return [home["id"] for home in homes]


async def add_member(*, home_id: str, user_id: str) -> None:
    """Add a user to a home.

    Does nothing if the home does not exist or the user is already a member.
    """
    with span("home_service.add_member"):
        home = await get_home_by_id(home_id=home_id)
        if home is None:
            logger.warning("Cannot add user %s: home %s not found", user_id, home_id)
            return
        if user_id in home["members"]:
            return

        await db_client.create_record(
            collection="home_members",
            data={"home_id": home_id, "user_id": user_id, "joined_at": datetime.now(UTC)},
        )
        logger.info("Added user %s to home %s", user_id, home_id)


async def remove_member(*, home_id: str, user_id: str) -> None:
    """Remove a user from a home.

    Does nothing if the user is not a member.

    Raises:
        PermissionError: If the user is the home owner
    """
    with span("home_service.remove_member"):
        home = await get_home_by_id(home_id=home_id)
        if home is None:
            return
        if home["created_by"] == user_id:
            msg = f"The home owner cannot leave home {home_id}"
            raise PermissionError(msg)

        removed = await _delete_matching(
            collection="home_members",
            filter_query=(
                f'home_id = "{db_client.sanitize_param(home_id)}" && user_id = "{db_client.sanitize_param(user_id)}"'
            ),
        )
        if removed:
            logger.info("Removed user %s from home %s", user_id, home_id)


async def delete_home(*, home_id: str, user_id: str) -> None:
    """Delete a home and everything that belongs to it (owner only).

    Removes habit completions, habits, tasks, groups, rooms, the owner's
    pending invitations and all memberships before the home itself.

    Args:
        home_id: Home to delete
        user_id: User requesting the deletion

    Raises:
        db_client.RecordNotFoundError: If home not found
        PermissionError: If the user is not the home owner
    """
    with span("home_service.delete_home"):
        home = await db_client.get_record(collection="homes", record_id=home_id)
        if home["created_by"] != user_id:
            msg = f"Only the home owner can delete home {home_id}"
            logger.warning(msg)
            raise PermissionError(msg)

        home_filter = f'home_id = "{db_client.sanitize_param(home_id)}"'
        counts = {
            collection: await _delete_matching(collection=collection, filter_query=home_filter)
            for collection in ("habit_completions", "habits", "tasks", "task_groups", "rooms")
        }
        counts["home_invitations"] = await _delete_matching(
            collection="home_invitations",
            filter_query=(
                f'{home_filter} && invited_by = "{db_client.sanitize_param(user_id)}"'
                f' && status = "{InvitationStatus.PENDING}"'
            ),
        )
        counts["home_members"] = await _delete_matching(collection="home_members", filter_query=home_filter)

        await db_client.delete_record(collection="homes", record_id=home_id)
        logger.info("Deleted home %s", home_id, extra={"home_id": home_id, "removed": counts})
