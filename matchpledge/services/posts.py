"""
Image posts: multipart intake, content-store persistence and row bookkeeping.

Create runs receive -> validate -> write file -> insert row. Any validation
failure stops before the file is written, so a rejected submission leaves
nothing on disk or in the table. Delete treats the row as authoritative: a
file that cannot be removed is logged and left behind, the row still goes.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge import storage
from matchpledge.domain.models import Post
from matchpledge.errors import (
    ImageTooLarge,
    InvalidImageFormat,
    InvalidRequest,
    InvalidUserData,
    NoImageProvided,
    PostNotFound,
    StorageError,
)
from matchpledge.schemas import PostCreated

logger = logging.getLogger("posts")

MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10 MiB
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif"}


@dataclass
class Submission:
    caption: str = ""
    user_id: str = ""
    user_name: str = ""
    image: Optional[bytes] = None
    extension: Optional[str] = None


def image_extension(file_name: str) -> str:
    return os.path.splitext(file_name or "")[1].lstrip(".").lower()


def check_image(data: bytes, file_name: str) -> str:
    """Size first, then extension. Returns the normalized extension."""
    if len(data) > MAX_IMAGE_BYTES:
        raise ImageTooLarge()
    ext = image_extension(file_name)
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidImageFormat()
    return ext


async def _field_bytes(value: Any, limit: Optional[int] = None) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, bytes):
        return value
    if limit is not None:
        return await value.read(limit)
    return await value.read()


async def _field_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return (await _field_bytes(value)).decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidRequest("Invalid multipart data")


async def collect_submission(fields: Iterable[Tuple[str, Any]]) -> Submission:
    """Walk the form parts in order. Unknown names are skipped; a later image replaces an earlier one."""
    sub = Submission()
    for name, value in fields:
        if name == "caption":
            sub.caption = await _field_text(value)
        elif name == "userId":
            sub.user_id = (await _field_text(value)).strip()
        elif name == "userName":
            sub.user_name = (await _field_text(value)).strip()
        elif name == "image":
            file_name = getattr(value, "filename", None) or "image"
            # one byte past the cap is enough to know it is too large
            data = await _field_bytes(value, MAX_IMAGE_BYTES + 1)
            sub.extension = check_image(data, file_name)
            sub.image = data

    if not sub.user_id or not sub.user_name:
        raise InvalidUserData()
    if sub.image is None:
        raise NoImageProvided()
    return sub


def _discard(path: str) -> None:
    try:
        storage.remove_file(path)
    except OSError as exc:
        logger.warning("could not remove orphaned image %s: %s", path, exc)


async def create_post(db: AsyncSession, fields: Iterable[Tuple[str, Any]]) -> PostCreated:
    sub = await collect_submission(fields)

    try:
        file_name, path = storage.store_image(sub.image, sub.extension)
    except OSError as exc:
        raise StorageError(f"failed to write image: {exc}") from exc
    image_url = storage.public_url(file_name)

    now = dt.datetime.now(dt.timezone.utc)
    post = Post(
        id=str(uuid.uuid4()),
        user_id=sub.user_id,
        user_name=sub.user_name,
        caption=sub.caption,
        image_url=image_url,
        image_path=path,
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        _discard(path)
        raise

    logger.info("post id=%s by user=%s stored %s (%d bytes)", post.id, post.user_id, file_name, len(sub.image))
    return PostCreated(id=post.id, image_url=image_url, caption=sub.caption, user_name=sub.user_name)


async def get_post(db: AsyncSession, post_id: str) -> Post:
    post = (await db.execute(select(Post).where(Post.id == post_id))).scalar_one_or_none()
    if post is None:
        raise PostNotFound()
    return post


async def list_posts(db: AsyncSession) -> List[Post]:
    res = await db.execute(select(Post).order_by(Post.created_at.desc()))
    return list(res.scalars().all())


async def list_user_posts(db: AsyncSession, user_id: str) -> List[Post]:
    res = await db.execute(
        select(Post).where(Post.user_id == user_id).order_by(Post.created_at.desc())
    )
    return list(res.scalars().all())


async def delete_post(db: AsyncSession, post_id: str) -> None:
    post = await get_post(db, post_id)

    try:
        storage.remove_file(post.image_path)
    except FileNotFoundError:
        logger.warning("image for post %s already missing: %s", post_id, post.image_path)
    except OSError as exc:
        logger.error("failed to delete image file %s: %s", post.image_path, exc)

    res = await db.execute(
        delete(Post).where(Post.id == post_id).execution_options(synchronize_session=False)
    )
    await db.commit()
    if res.rowcount == 0:
        # removed by a concurrent delete between the read and here
        raise PostNotFound()
    logger.info("post id=%s deleted", post_id)


async def update_caption(db: AsyncSession, post_id: str, payload: Any) -> None:
    caption = payload.get("caption") if isinstance(payload, dict) else None
    if not isinstance(caption, str) or not caption.strip():
        raise InvalidUserData("caption must be a non-empty string")

    res = await db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(caption=caption, updated_at=dt.datetime.now(dt.timezone.utc))
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    if res.rowcount == 0:
        raise PostNotFound()
