import logging
import math
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from portfolio.dao import DEFAULT_POST_SORT, PostDAO
from portfolio.deps import get_db, get_storage, require_admin
from portfolio.media import MediaReferenceStore
from portfolio.routers.forms import parse_tags, present, read_upload
from portfolio.schemas import (
    LikeResponse,
    MessageResponse,
    PostListResponse,
    PostMutationResponse,
    PostResponse,
    PostType,
)
from portfolio.storage import MediaStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])

POST_NOT_FOUND = "Post not found"


@router.get("", response_model=PostListResponse)
def list_posts(
    db: Annotated[Session, Depends(get_db)],
    category: str | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 12,
    sort: str = DEFAULT_POST_SORT,
) -> PostListResponse:
    posts, total = PostDAO(db).search(
        category=category, search=search, page=page, limit=limit, sort=sort
    )
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        total_pages=math.ceil(total / limit),
        current_page=page,
        total=total,
    )


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> PostResponse:
    """
    Return a single post and count the view.
    """
    post = PostDAO(db).increment_views(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)
    return PostResponse.model_validate(post)


@router.post(
    "",
    response_model=PostMutationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_post(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[MediaStorage, Depends(get_storage)],
    title: Annotated[str, Form()],
    category: Annotated[str, Form()],
    story: Annotated[str, Form()],
    location: Annotated[str, Form()],
    date: Annotated[date, Form()],
    media: Annotated[UploadFile | None, File()] = None,
    type: Annotated[PostType, Form()] = "photo",  # noqa: A002
    time: Annotated[str | None, Form()] = None,
    camera: Annotated[str | None, Form()] = None,
    lens: Annotated[str | None, Form()] = None,
    iso: Annotated[str | None, Form()] = None,
    aperture: Annotated[str | None, Form()] = None,
    shutter_speed: Annotated[str | None, Form()] = None,
    tags: Annotated[str | None, Form()] = None,
    featured: Annotated[bool, Form()] = False,
) -> PostMutationResponse:
    upload = read_upload(media)
    if upload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No media file uploaded"
        )
    fields: dict[str, Any] = {
        **present(
            time=time,
            camera=camera,
            lens=lens,
            iso=iso,
            aperture=aperture,
            shutter_speed=shutter_speed,
        ),
        "title": title,
        "type": type,
        "category": category,
        "story": story,
        "location": location,
        "date": date,
        "tags": parse_tags(tags) or [],
        "featured": featured,
    }
    logger.info("Creating post %r (%d bytes of media)", title, upload.size)
    post = MediaReferenceStore(PostDAO(db), storage).create_with_media(fields, upload)
    return PostMutationResponse(
        message="Post created successfully", post=PostResponse.model_validate(post)
    )


@router.put(
    "/{post_id}",
    response_model=PostMutationResponse,
    dependencies=[Depends(require_admin)],
)
def update_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[MediaStorage, Depends(get_storage)],
    media: Annotated[UploadFile | None, File()] = None,
    title: Annotated[str | None, Form()] = None,
    type: Annotated[PostType | None, Form()] = None,  # noqa: A002
    category: Annotated[str | None, Form()] = None,
    story: Annotated[str | None, Form()] = None,
    location: Annotated[str | None, Form()] = None,
    date: Annotated[date | None, Form()] = None,
    time: Annotated[str | None, Form()] = None,
    camera: Annotated[str | None, Form()] = None,
    lens: Annotated[str | None, Form()] = None,
    iso: Annotated[str | None, Form()] = None,
    aperture: Annotated[str | None, Form()] = None,
    shutter_speed: Annotated[str | None, Form()] = None,
    tags: Annotated[str | None, Form()] = None,
    featured: Annotated[bool | None, Form()] = None,
) -> PostMutationResponse:
    upload = read_upload(media)
    fields = present(
        title=title,
        type=type,
        category=category,
        story=story,
        location=location,
        date=date,
        time=time,
        camera=camera,
        lens=lens,
        iso=iso,
        aperture=aperture,
        shutter_speed=shutter_speed,
        tags=parse_tags(tags),
        featured=featured,
    )
    post = MediaReferenceStore(PostDAO(db), storage).update_record(post_id, fields, upload)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)
    return PostMutationResponse(
        message="Post updated successfully", post=PostResponse.model_validate(post)
    )


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[MediaStorage, Depends(get_storage)],
) -> MessageResponse:
    if not MediaReferenceStore(PostDAO(db), storage).delete_record(post_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)
    return MessageResponse(message="Post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeResponse)
def like_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> LikeResponse:
    post = PostDAO(db).like(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)
    return LikeResponse(likes=post.likes)
