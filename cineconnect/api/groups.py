"""Groups API: groups, membership, invitations, linked films and chat history."""

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from cineconnect.core.deps import get_current_user, get_optional_user
from cineconnect.core.ws_manager import ChannelManager, get_channel_manager, group_channel
from cineconnect.db.session import get_db
from cineconnect.models.user import User
from cineconnect.schemas.auth import MessageResponse
from cineconnect.schemas.group import (
    AddFilmRequest,
    GroupCreate,
    GroupDetails,
    GroupFilmResponse,
    GroupListItem,
    GroupResponse,
    GroupUpdate,
    InvitationResponse,
    InvitationWithGroup,
    InviteRequest,
    MembershipResponse,
)
from cineconnect.schemas.message import GroupMessageOut, MessageCreate
from cineconnect.schemas.notification import NotificationOut
from cineconnect.services import group_service, message_service

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=list[GroupListItem])
def list_groups(
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    """Public groups, plus the private groups the viewer belongs to."""
    return group_service.list_groups(db, viewer.id if viewer else None)


@router.post("", response_model=GroupResponse)
def create_group(
    data: GroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a group; the creator becomes its admin."""
    return group_service.create_group(db, current_user.id, data.model_dump())


@router.get("/invitations", response_model=list[InvitationWithGroup])
def my_invitations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pending invitations for the current user."""
    return [
        InvitationWithGroup(
            id=inv.id,
            group_id=inv.group_id,
            inviter_id=inv.inviter_id,
            invitee_id=inv.invitee_id,
            status=inv.status,
            created_at=inv.created_at,
            group_title=group.title,
            inviter_name=inviter.display_name,
        )
        for inv, group, inviter in group_service.list_invitations(db, current_user.id)
    ]


@router.post("/invitations/{invitation_id}/accept", response_model=MembershipResponse)
def accept_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return group_service.accept_invitation(db, invitation_id, current_user.id)


@router.post("/invitations/{invitation_id}/decline", response_model=InvitationResponse)
def decline_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return group_service.decline_invitation(db, invitation_id, current_user.id)


@router.get("/{group_id}", response_model=GroupDetails)
def get_group(
    group_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    return group_service.group_details(db, group_id, viewer.id if viewer else None)


@router.put("/{group_id}", response_model=GroupResponse)
def update_group(
    group_id: int,
    data: GroupUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    channels: ChannelManager = Depends(get_channel_manager),
):
    """Group admins and moderators edit the group."""
    group = group_service.update_group(db, group_id, current_user.id, data.model_dump(exclude_unset=True))
    if not group.is_public:
        # Non-members subscribed while the group was public lose the live feed
        background_tasks.add_task(
            channels.retain_users, group_channel(group_id), group_service.member_ids(db, group_id)
        )
    return group


@router.delete("/{group_id}", response_model=MessageResponse)
def delete_group(
    group_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    channels: ChannelManager = Depends(get_channel_manager),
):
    """Group admins delete the group along with its members, messages and films."""
    group_service.delete_group(db, group_id, current_user.id)
    background_tasks.add_task(channels.retain_users, group_channel(group_id), set())
    return MessageResponse(message="Group deleted")


@router.post("/{group_id}/join", response_model=MembershipResponse)
def join_group(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return group_service.join_group(db, group_id, current_user.id)


@router.post("/{group_id}/leave", response_model=MessageResponse)
def leave_group(
    group_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    channels: ChannelManager = Depends(get_channel_manager),
):
    group_service.leave_group(db, group_id, current_user.id)
    background_tasks.add_task(channels.unsubscribe_user, current_user.id, group_channel(group_id))
    return MessageResponse(message="You left the group")


@router.post("/{group_id}/invite", response_model=InvitationResponse)
def invite(
    group_id: int,
    data: InviteRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    channels: ChannelManager = Depends(get_channel_manager),
):
    """Invite a user by email; they get a notification."""
    invitation, notification = group_service.invite_to_group(db, group_id, current_user, data.email)
    background_tasks.add_task(
        channels.send_to_user,
        invitation.invitee_id,
        "notification",
        NotificationOut.model_validate(notification).model_dump(mode="json"),
    )
    return invitation


@router.post("/{group_id}/films", response_model=GroupFilmResponse)
def add_film(
    group_id: int,
    data: AddFilmRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return group_service.add_film(db, group_id, current_user.id, data.film_id)


@router.get("/{group_id}/messages", response_model=list[GroupMessageOut])
def list_messages(
    group_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    """Chat history, oldest first."""
    return message_service.list_messages(db, group_id, viewer.id if viewer else None)


@router.post("/{group_id}/messages", response_model=GroupMessageOut)
def post_message(
    group_id: int,
    data: MessageCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    channels: ChannelManager = Depends(get_channel_manager),
):
    """Persist a message, then push it to the group's channel subscribers."""
    message = message_service.post_message(db, group_id, current_user, data.message)
    background_tasks.add_task(
        channels.publish,
        group_channel(group_id),
        "new-message",
        message.model_dump(mode="json"),
    )
    return message
