from fastapi import APIRouter, Depends, HTTPException, status

from forum.api.deps import get_current_identity, parse_id
from forum.api.serializers import notification_to_dict
from forum.models import Notification
from forum.schemas.auth import Identity

router = APIRouter(prefix="/notifications", tags=["notifications"], dependencies=[Depends(get_current_identity)])

@router.get("")
async def list_notifications(identity: Identity = Depends(get_current_identity)):
    """
    The caller's notifications, newest first.

    Returns:
        dict: {"items": [...], "unreadCount": int}
    """
    rows = await Notification.filter(recipient_user_id=identity.id).order_by("-created_at")
    unread = sum(1 for n in rows if not n.is_read)
    return {"items": [notification_to_dict(n) for n in rows], "unreadCount": unread}

# Declared before "/{notification_id}/read" so "mark-all-read" is never parsed as an id
@router.patch("/mark-all-read")
async def mark_all_read(identity: Identity = Depends(get_current_identity)):
    updated = await Notification.filter(recipient_user_id=identity.id, is_read=False).update(is_read=True)
    return {"message": "All notifications marked as read", "updated": updated}

@router.patch("/{notification_id}/read")
async def mark_read(notification_id: str, identity: Identity = Depends(get_current_identity)):
    """
    Mark one of the caller's notifications as read.

    Raises:
        HTTPException (404): Not found, or addressed to another user
    """
    nid = parse_id(notification_id, "Notification")
    n = await Notification.get_or_none(id=nid, recipient_user_id=identity.id)
    if not n:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    n.is_read = True
    await n.save()
    return {"message": "Notification marked as read", "notification": notification_to_dict(n)}
