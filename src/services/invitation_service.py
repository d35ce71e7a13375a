"""Invitation service for inviting people to a home by email."""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.logging import span
from src.domain.user import InvitationStatus, normalize_email
from src.services import home_service


logger = logging.getLogger(__name__)


def _pending_filter(**fields: str) -> str:
    clauses = [f'{field} = "{db_client.sanitize_param(value)}"' for field, value in fields.items()]
    clauses.append(f'status = "{InvitationStatus.PENDING}"')
    return " && ".join(clauses)


async def get_invitation_by_home_and_email(
    *,
    home_id: str,
    email: str,
    invited_by: str,
) -> dict[str, Any] | None:
    """Get the pending invitation one user sent to an email for a home, if any."""
    return await db_client.get_first_record(
        collection="home_invitations",
        filter_query=_pending_filter(home_id=home_id, invited_email=normalize_email(email), invited_by=invited_by),
    )


async def create_invitation(*, home_id: str, invited_email: str, invited_by: str) -> dict[str, Any]:
    """Invite an email address to join a home.

    Args:
        home_id: Home to join
        invited_email: Address to invite (stored lower-cased)
        invited_by: Inviting user ID

    Returns:
        Created invitation record

    Raises:
        ValueError: If the email is invalid or the same user already has a
            pending invitation for it
    """
    with span("invitation_service.create_invitation"):
        email = normalize_email(invited_email)

        existing = await get_invitation_by_home_and_email(home_id=home_id, email=email, invited_by=invited_by)
        if existing:
            msg = f"An invitation for {email} is already pending"
            raise ValueError(msg)

        record = await db_client.create_record(
            collection="home_invitations",
            data={
                "home_id": home_id,
                "invited_email": email,
                "invited_by": invited_by,
                "status": InvitationStatus.PENDING,
                "created_at": datetime.now(UTC),
            },
        )
        logger.info("User %s invited %s to home %s", invited_by, email, home_id)
        return record


async def get_pending_invitations_by_home(*, home_id: str) -> list[dict[str, Any]]:
    """Get a home's pending invitations, newest first."""
    return await db_client.list_all_records(
        collection="home_invitations",
        filter_query=_pending_filter(home_id=home_id),
        sort="-created_at",
    )


async def get_pending_invitations_by_email(*, email: str) -> list[dict[str, Any]]:
    """Get pending invitations addressed to an email, newest first."""
    return await db_client.list_all_records(
        collection="home_invitations",
        filter_query=_pending_filter(invited_email=normalize_email(email)),
        sort="-created_at",
    )


async def _get_pending_invitation(invitation_id: str) -> dict[str, Any]:
    invitation = await db_client.get_record(collection="home_invitations", record_id=invitation_id)
    if invitation["status"] != InvitationStatus.PENDING:
        msg = f"Invitation {invitation_id} is no longer pending"
        raise ValueError(msg)
    return invitation


async def accept_invitation(*, invitation_id: str, user_id: str) -> None:
    """Accept a pending invitation: join the home and remove the invitation.

    Raises:
        db_client.RecordNotFoundError: If invitation not found
        ValueError: If the invitation is not pending
    """
    with span("invitation_service.accept_invitation"):
        invitation = await _get_pending_invitation(invitation_id)
        await home_service.add_member(home_id=invitation["home_id"], user_id=user_id)
        await db_client.delete_record(collection="home_invitations", record_id=invitation_id)
        logger.info("User %s accepted invitation %s", user_id, invitation_id)


async def decline_invitation(*, invitation_id: str) -> None:
    """Decline a pending invitation.

    Raises:
        db_client.RecordNotFoundError: If invitation not found
        ValueError: If the invitation is not pending
    """
    await _get_pending_invitation(invitation_id)
    await db_client.delete_record(collection="home_invitations", record_id=invitation_id)
    logger.info("Declined invitation %s", invitation_id)


async def delete_invitation(*, invitation_id: str) -> None:
    """Revoke an invitation.

    Raises:
        db_client.RecordNotFoundError: If invitation not found
    """
    await db_client.delete_record(collection="home_invitations", record_id=invitation_id)
    logger.info("Revoked invitation %s", invitation_id)
