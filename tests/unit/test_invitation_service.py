"""Unit tests for invitation_service module."""

import pytest

from src.core.db_client import RecordNotFoundError
from src.domain.user import InvitationStatus
from src.services import home_service, invitation_service


@pytest.fixture
async def home(patched_db):
    """A home owned by u1."""
    return await home_service.create_home(user_id="u1", name="Flat")


@pytest.mark.unit
class TestInvitations:
    """Tests for the invitation lifecycle."""

    async def test_email_is_lower_cased(self, home):
        """Stored addresses are normalized."""
        invitation = await invitation_service.create_invitation(
            home_id=home["id"],
            invited_email="  Sam@Example.COM ",
            invited_by="u1",
        )

        assert invitation["invited_email"] == "sam@example.com"
        assert invitation["status"] == InvitationStatus.PENDING

    async def test_invalid_email_rejected(self, home):
        """Malformed addresses are rejected."""
        with pytest.raises(ValueError, match="Invalid email"):
            await invitation_service.create_invitation(home_id=home["id"], invited_email="nope", invited_by="u1")

    async def test_duplicate_pending_invitation_rejected(self, home):
        """The same inviter cannot invite the same address twice while pending."""
        await invitation_service.create_invitation(home_id=home["id"], invited_email="a@b.io", invited_by="u1")

        with pytest.raises(ValueError, match="already pending"):
            await invitation_service.create_invitation(home_id=home["id"], invited_email="A@B.io", invited_by="u1")

        other = await invitation_service.create_invitation(home_id=home["id"], invited_email="a@b.io", invited_by="u2")
        assert other["invited_by"] == "u2"

    async def test_pending_lookups(self, home):
        """Pending invitations can be found by home and by email."""
        invitation = await invitation_service.create_invitation(
            home_id=home["id"],
            invited_email="a@b.io",
            invited_by="u1",
        )

        by_home = await invitation_service.get_pending_invitations_by_home(home_id=home["id"])
        by_email = await invitation_service.get_pending_invitations_by_email(email="A@b.io")
        exact = await invitation_service.get_invitation_by_home_and_email(
            home_id=home["id"],
            email="a@b.io",
            invited_by="u1",
        )

        assert [i["id"] for i in by_home] == [invitation["id"]]
        assert [i["id"] for i in by_email] == [invitation["id"]]
        assert exact["id"] == invitation["id"]

    async def test_accept_adds_member_and_removes_invitation(self, home, patched_db):
        """Accepting joins the home."""
        invitation = await invitation_service.create_invitation(
            home_id=home["id"],
            invited_email="a@b.io",
            invited_by="u1",
        )

        await invitation_service.accept_invitation(invitation_id=invitation["id"], user_id="u2")

        refreshed = await home_service.get_home_by_id(home_id=home["id"])
        assert refreshed["members"] == ["u1", "u2"]
        assert patched_db.all("home_invitations") == []

    async def test_accept_non_pending_rejected(self, home, patched_db):
        """Answered invitations cannot be accepted again."""
        invitation = await invitation_service.create_invitation(
            home_id=home["id"],
            invited_email="a@b.io",
            invited_by="u1",
        )
        await patched_db.update_record(
            collection="home_invitations",
            record_id=invitation["id"],
            data={"status": InvitationStatus.DECLINED},
        )

        with pytest.raises(ValueError, match="no longer pending"):
            await invitation_service.accept_invitation(invitation_id=invitation["id"], user_id="u2")

    async def test_decline_removes_invitation(self, home, patched_db):
        """Declining deletes the invitation without joining."""
        invitation = await invitation_service.create_invitation(
            home_id=home["id"],
            invited_email="a@b.io",
            invited_by="u1",
        )

        await invitation_service.decline_invitation(invitation_id=invitation["id"])

        assert patched_db.all("home_invitations") == []
        assert (await home_service.get_home_by_id(home_id=home["id"]))["members"] == ["u1"]

    async def test_revoke_missing_invitation(self, home):
        """Revoking an unknown invitation raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            await invitation_service.delete_invitation(invitation_id="999")
