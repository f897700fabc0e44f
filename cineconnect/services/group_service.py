"""Group service: groups, membership roles, invitations and linked films."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import case, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cineconnect.core.errors import (
    AlreadyMemberError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    NotMemberError,
    PrivateGroupError,
)
from cineconnect.models.film import Film
from cineconnect.models.group import Group
from cineconnect.models.group_film import GroupFilm
from cineconnect.models.group_invitation import GroupInvitation, InvitationStatus
from cineconnect.models.group_membership import MANAGER_ROLES, GroupMembership, MembershipRole
from cineconnect.models.notification import Notification, NotificationType
from cineconnect.models.user import User
from cineconnect.services.auth_service import get_user_by_email
from cineconnect.services.notification_service import add_notification

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "cover_image_url", "theme", "is_public")


def get_group_or_404(db: Session, group_id: int) -> Group:
    group = db.get(Group, group_id)
    if not group:
        raise NotFoundError("Group not found")
    return group


def get_membership(db: Session, group_id: int, user_id: int | None) -> GroupMembership | None:
    if user_id is None:
        return None
    return db.execute(
        select(GroupMembership).where(GroupMembership.group_id == group_id, GroupMembership.user_id == user_id)
    ).scalar_one_or_none()


def _require_role(db: Session, group_id: int, user_id: int, roles: tuple[str, ...], message: str) -> GroupMembership:
    membership = get_membership(db, group_id, user_id)
    if not membership or membership.role not in roles:
        raise ForbiddenError(message)
    return membership


def member_ids(db: Session, group_id: int) -> set[int]:
    return set(db.scalars(select(GroupMembership.user_id).where(GroupMembership.group_id == group_id)))


def can_view(db: Session, group: Group, user_id: int | None) -> bool:
    """Public groups are visible to everyone, private ones to members only."""
    return group.is_public or get_membership(db, group.id, user_id) is not None


def require_viewable(db: Session, group_id: int, user_id: int | None) -> Group:
    group = get_group_or_404(db, group_id)
    if not can_view(db, group, user_id):
        raise PrivateGroupError()
    return group


def create_group(db: Session, owner_id: int, data: dict[str, Any]) -> Group:
    """Create a group and make the owner its admin, in one transaction."""
    group = Group(owner_id=owner_id, **{k: v for k, v in data.items() if k in EDITABLE_FIELDS})
    try:
        db.add(group)
        db.flush()
        db.add(GroupMembership(group_id=group.id, user_id=owner_id, role=MembershipRole.admin.value))
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(group)
    logger.info("Group %s created by user=%s", group.id, owner_id)
    return group


def update_group(db: Session, group_id: int, actor_id: int, changes: dict[str, Any]) -> Group:
    group = get_group_or_404(db, group_id)
    _require_role(db, group_id, actor_id, MANAGER_ROLES, "Only group admins and moderators can edit the group")
    changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if not changes:
        raise BadRequestError("No fields to update")
    for key, value in changes.items():
        setattr(group, key, value)
    db.commit()
    db.refresh(group)
    logger.info("Group %s updated by user=%s: %s", group_id, actor_id, sorted(changes))
    return group


def delete_group(db: Session, group_id: int, actor_id: int) -> None:
    group = get_group_or_404(db, group_id)
    _require_role(db, group_id, actor_id, (MembershipRole.admin.value,), "Only group admins can delete the group")
    db.delete(group)
    db.commit()
    logger.info("Group %s deleted by user=%s", group_id, actor_id)


def join_group(db: Session, group_id: int, user_id: int) -> GroupMembership:
    group = get_group_or_404(db, group_id)
    if not group.is_public:
        raise PrivateGroupError("This group is private; an invitation is required")
    if get_membership(db, group_id, user_id):
        raise AlreadyMemberError()
    membership = GroupMembership(group_id=group_id, user_id=user_id, role=MembershipRole.member.value)
    db.add(membership)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyMemberError()
    db.refresh(membership)
    logger.info("User %s joined group %s", user_id, group_id)
    return membership


def leave_group(db: Session, group_id: int, user_id: int) -> None:
    membership = get_membership(db, group_id, user_id)
    if not membership:
        raise NotMemberError()
    if membership.role == MembershipRole.admin.value:
        raise ForbiddenError("Group admins cannot leave their group")
    db.delete(membership)
    db.commit()
    logger.info("User %s left group %s", user_id, group_id)


def invite_to_group(db: Session, group_id: int, inviter: User, email: str) -> tuple[GroupInvitation, Notification]:
    """Invite a user by email and notify them."""
    group = get_group_or_404(db, group_id)
    _require_role(db, group_id, inviter.id, MANAGER_ROLES, "Only group admins and moderators can invite")
    invitee = get_user_by_email(db, email)
    if not invitee:
        raise NotFoundError("User not found")
    if get_membership(db, group_id, invitee.id):
        raise AlreadyMemberError("This user is already a member of the group")

    invitation = GroupInvitation(
        group_id=group_id,
        inviter_id=inviter.id,
        invitee_id=invitee.id,
        status=InvitationStatus.pending.value,
    )
    db.add(invitation)
    notification = add_notification(
        db,
        invitee.id,
        NotificationType.group_invitation,
        title=f"Invitation to {group.title}",
        message=f"{inviter.display_name} invited you to join the group {group.title}",
        link=f"/groups/{group_id}",
    )
    db.commit()
    db.refresh(invitation)
    db.refresh(notification)
    logger.info("User %s invited user %s to group %s", inviter.id, invitee.id, group_id)
    return invitation, notification


def list_invitations(db: Session, user_id: int) -> list[tuple[GroupInvitation, Group, User]]:
    """Pending invitations addressed to user_id."""
    rows = db.execute(
        select(GroupInvitation, Group, User)
        .join(Group, Group.id == GroupInvitation.group_id)
        .join(User, User.id == GroupInvitation.inviter_id)
        .where(
            GroupInvitation.invitee_id == user_id,
            GroupInvitation.status == InvitationStatus.pending.value,
        )
        .order_by(GroupInvitation.created_at.desc(), GroupInvitation.id.desc())
    ).all()
    return [(inv, group, inviter) for inv, group, inviter in rows]


def _pending_invitation(db: Session, invitation_id: int, user_id: int) -> GroupInvitation:
    invitation = db.get(GroupInvitation, invitation_id)
    if not invitation or invitation.invitee_id != user_id:
        raise NotFoundError("Invitation not found")
    if invitation.status != InvitationStatus.pending.value:
        raise ConflictError("This invitation has already been answered")
    return invitation


def accept_invitation(db: Session, invitation_id: int, user_id: int) -> GroupMembership:
    """Invitee joins the group, private or not."""
    invitation = _pending_invitation(db, invitation_id, user_id)
    if get_membership(db, invitation.group_id, user_id):
        raise AlreadyMemberError()
    invitation.status = InvitationStatus.accepted.value
    membership = GroupMembership(group_id=invitation.group_id, user_id=user_id, role=MembershipRole.member.value)
    db.add(membership)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyMemberError()
    db.refresh(membership)
    logger.info("User %s accepted invitation %s", user_id, invitation_id)
    return membership


def decline_invitation(db: Session, invitation_id: int, user_id: int) -> GroupInvitation:
    invitation = _pending_invitation(db, invitation_id, user_id)
    invitation.status = InvitationStatus.declined.value
    db.commit()
    db.refresh(invitation)
    return invitation


def add_film(db: Session, group_id: int, user_id: int, film_id: int) -> GroupFilm:
    get_group_or_404(db, group_id)
    if not get_membership(db, group_id, user_id):
        raise ForbiddenError("Only group members can add films")
    if db.get(Film, film_id) is None:
        raise NotFoundError("Film not found")
    exists = db.execute(
        select(GroupFilm.id).where(GroupFilm.group_id == group_id, GroupFilm.film_id == film_id)
    ).first()
    if exists:
        raise ConflictError("This film is already linked to the group")
    link = GroupFilm(group_id=group_id, film_id=film_id, added_by=user_id)
    db.add(link)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("This film is already linked to the group")
    db.refresh(link)
    return link


def _member_count():
    return (
        select(func.count(GroupMembership.id))
        .where(GroupMembership.group_id == Group.id)
        .correlate(Group)
        .scalar_subquery()
    )


def _film_count():
    return (
        select(func.count(GroupFilm.id))
        .where(GroupFilm.group_id == Group.id)
        .correlate(Group)
        .scalar_subquery()
    )


def _summary(group: Group, owner_name: str, members: int, films: int, role: str | None) -> dict:
    return {
        "id": group.id,
        "owner_id": group.owner_id,
        "title": group.title,
        "description": group.description,
        "cover_image_url": group.cover_image_url,
        "theme": group.theme,
        "is_public": group.is_public,
        "created_at": group.created_at,
        "owner_name": owner_name,
        "member_count": members,
        "film_count": films,
        "user_role": role,
    }


def list_groups(db: Session, viewer_id: int | None) -> list[dict]:
    """Public groups plus private groups the viewer belongs to."""
    viewer_role = (
        select(GroupMembership.role)
        .where(GroupMembership.group_id == Group.id, GroupMembership.user_id == viewer_id)
        .correlate(Group)
        .scalar_subquery()
    )
    visible = Group.is_public.is_(True)
    if viewer_id is not None:
        visible = or_(visible, viewer_role.is_not(None))
    rows = db.execute(
        select(
            Group,
            User.display_name,
            _member_count(),
            _film_count(),
            viewer_role,
        )
        .join(User, User.id == Group.owner_id)
        .where(visible)
        .order_by(Group.created_at.desc(), Group.id.desc())
    ).all()
    return [_summary(*row) for row in rows]


def group_details(db: Session, group_id: int, viewer_id: int | None) -> dict:
    group = require_viewable(db, group_id, viewer_id)
    owner = db.get(User, group.owner_id)
    membership = get_membership(db, group_id, viewer_id)

    role_order = case(
        (GroupMembership.role == MembershipRole.admin.value, 0),
        (GroupMembership.role == MembershipRole.moderator.value, 1),
        else_=2,
    )
    members = [
        {
            "id": user.id,
            "display_name": user.display_name,
            "photo_url": user.photo_url,
            "role": m.role,
            "joined_at": m.created_at,
        }
        for m, user in db.execute(
            select(GroupMembership, User)
            .join(User, User.id == GroupMembership.user_id)
            .where(GroupMembership.group_id == group_id)
            .order_by(role_order, GroupMembership.created_at, GroupMembership.id)
        ).all()
    ]
    films = [
        {
            "film_id": film.id,
            "tmdb_id": film.tmdb_id,
            "title": film.title,
            "poster_url": film.poster_url,
            "added_by": link.added_by,
            "added_at": link.created_at,
        }
        for link, film in db.execute(
            select(GroupFilm, Film)
            .join(Film, Film.id == GroupFilm.film_id)
            .where(GroupFilm.group_id == group_id)
            .order_by(GroupFilm.created_at.desc(), GroupFilm.id.desc())
        ).all()
    ]
    details = _summary(
        group,
        owner.display_name if owner else "",
        len(members),
        len(films),
        membership.role if membership else None,
    )
    details["members"] = members
    details["films"] = films
    return details


def user_groups(db: Session, user_id: int) -> list[dict]:
    """Groups user_id belongs to, with their role."""
    rows = db.execute(
        select(Group, GroupMembership.role, _member_count())
        .join(GroupMembership, GroupMembership.group_id == Group.id)
        .where(GroupMembership.user_id == user_id)
        .order_by(GroupMembership.created_at.desc(), Group.id.desc())
    ).all()
    return [
        {
            "id": group.id,
            "title": group.title,
            "description": group.description,
            "theme": group.theme,
            "is_public": group.is_public,
            "role": role,
            "member_count": members,
        }
        for group, role, members in rows
    ]
