from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any

from matchpledge.core.db import get_session
from matchpledge.schemas import PostOut
from matchpledge.services import posts as post_service

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.post("")
async def create_post(request: Request, db: AsyncSession = Depends(get_session)):
    """Multipart: caption, userId, userName, image. Parts are read in the order sent."""
    async with request.form() as form:
        created = await post_service.create_post(db, form.multi_items())
    return {
        "success": True,
        "message": "Post created successfully",
        "post": created.model_dump(),
    }


@router.get("")
async def get_posts(db: AsyncSession = Depends(get_session)):
    rows = await post_service.list_posts(db)
    return {
        "success": True,
        "posts": [PostOut.model_validate(p).model_dump(mode="json") for p in rows],
    }


@router.get("/user/{user_id}")
async def get_posts_by_user(user_id: str, db: AsyncSession = Depends(get_session)):
    rows = await post_service.list_user_posts(db, user_id)
    posts = [PostOut.model_validate(p).model_dump(mode="json") for p in rows]
    return {"success": True, "posts": posts, "count": len(posts)}


@router.get("/{post_id}")
async def get_post_by_id(post_id: str, db: AsyncSession = Depends(get_session)):
    post = await post_service.get_post(db, post_id)
    return {"success": True, "post": PostOut.model_validate(post).model_dump(mode="json")}


@router.patch("/{post_id}/caption")
async def update_post_caption(
    post_id: str,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_session),
):
    await post_service.update_caption(db, post_id, payload)
    return {"success": True, "message": "Post caption updated successfully"}


@router.delete("/{post_id}")
async def delete_post(post_id: str, db: AsyncSession = Depends(get_session)):
    await post_service.delete_post(db, post_id)
    return {"success": True, "message": "Post deleted successfully"}
