"""User service for profiles and sign-in bookkeeping."""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.cache_client import profile_cache
from src.core.config import constants
from src.core.logging import span
from src.domain.user import MAX_NAME_LENGTH, normalize_email


logger = logging.getLogger(__name__)


def _clean_name(name: str | None) -> str | None:
    if name is None:
        return None
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        msg = f"Name too long (max {MAX_NAME_LENGTH} characters)"
        raise ValueError(msg)
    return name or None


async def _find_existing_user(*, user_id: str | None, email: str) -> dict[str, Any] | None:
    if user_id is not None:
        try:
            return await db_client.get_record(collection="users", record_id=user_id)
        except db_client.RecordNotFoundError:
            pass
    return await db_client.get_first_record(
        collection="users",
        filter_query=f'email = "{db_client.sanitize_param(email)}"',
    )


async def create_or_update_user(
    *,
    email: str,
    user_id: str | None = None,
    name: str | None = None,
    photo_url: str | None = None,
) -> dict[str, Any]:
    """Record a sign-in, creating the user on first sight.

    Existing users get last_login_at refreshed, plus name and photo when
    given. The cached profile is dropped so the next lookup sees the change.

    Args:
        email: Email address (stored lower-cased)
        user_id: Known user ID, if any; otherwise the user is matched by email
        name: Display name
        photo_url: Avatar URL

    Returns:
        Created or updated user record

    Raises:
        ValueError: If the email is invalid or the name too long
    """
    with span("user_service.create_or_update_user"):
        email = normalize_email(email)
        name = _clean_name(name)
        now = datetime.now(UTC)

        existing = await _find_existing_user(user_id=user_id, email=email)
        if existing:
            changes: dict[str, Any] = {"last_login_at": now}
            if name is not None:
                changes["name"] = name
            if photo_url:
                changes["photo_url"] = photo_url

            record = await db_client.update_record(collection="users", record_id=existing["id"], data=changes)
            profile_cache.invalidate(existing["id"])
            logger.debug("Updated sign-in for user %s", existing["id"])
            return record

        record = await db_client.create_record(
            collection="users",
            data={
                "email": email,
                "name": name,
                "photo_url": photo_url or None,
                "created_at": now,
                "last_login_at": now,
            },
        )
        logger.info("Created user %s (%s)", record["id"], email)
        return record


async def get_users_by_ids(*, user_ids: list[str]) -> list[dict[str, Any]]:
    """Look up many users, querying in fixed-size chunks.

    Duplicate IDs are looked up once; unknown IDs are skipped.
    """
    users = await db_client.list_records_matching_any(
        collection="users",
        field="id",
        values=user_ids,
        chunk_size=constants.USER_LOOKUP_CHUNK_SIZE,
    )

    logger.debug("Looked up %d of %d users", len(users), len(set(user_ids)))
    return users


async def _load_user(user_id: str) -> dict[str, Any] | None:
    try:
        return await db_client.get_record(collection="users", record_id=user_id)
    except db_client.RecordNotFoundError:
        logger.debug("User %s not found", user_id)
        return None


async def get_user_profile(*, user_id: str) -> dict[str, Any] | None:
    """Get a user profile through the in-memory cache, or None if unknown."""
    return await profile_cache.get_or_load(user_id, _load_user)
