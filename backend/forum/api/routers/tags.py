from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from tortoise.functions import Count

from forum.api.deps import get_current_identity, parse_id, require_admin
from forum.api.serializers import tag_to_dict
from forum.models import Tag

router = APIRouter(prefix="/tags", tags=["tags"], dependencies=[Depends(get_current_identity)])

class TagUpdateIn(BaseModel):
    description: str | None = None
    color: str | None = None

@router.get("")
async def list_tags():
    """
    All tags ordered by name, each with the number of questions using it.
    """
    tags = await Tag.annotate(question_count=Count("questions")).order_by("name")
    return [tag_to_dict(tag, tag.question_count) for tag in tags]

@router.patch("/{tag_id}", dependencies=[Depends(require_admin)])
async def update_tag(tag_id: str, body: TagUpdateIn):
    """
    Set a tag's description and/or color (admin only).
    """
    tid = parse_id(tag_id, "Tag")
    tag = await Tag.get_or_none(id=tid)
    if not tag:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    if body.description is not None:
        tag.description = body.description.strip() or None
    if body.color is not None:
        tag.color = body.color.strip() or None
    await tag.save()
    return {"tag": tag_to_dict(tag)}
